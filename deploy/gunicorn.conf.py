"""
Gunicorn configuration for erpdesk.
All settings come from environment variables for container deployment.

    gunicorn -c deploy/gunicorn.conf.py erpdesk.wsgi:app
"""

from __future__ import annotations

import logging
import multiprocessing
import os

# ===== Server Binding & Backlog =====
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
backlog = int(os.environ.get("GUNICORN_BACKLOG", "2048"))

# ===== Worker Settings =====
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")
workers = int(os.environ.get("GUNICORN_WORKERS", str(multiprocessing.cpu_count() * 2 + 1)))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
max_requests = int(os.environ.get("GUNICORN_MAX_REQUESTS", "10000"))
max_requests_jitter = int(os.environ.get("GUNICORN_MAX_REQUESTS_JITTER", "1000"))

# ===== Timeout Settings =====
# Must exceed ERP_API_TIMEOUT_SECONDS times the calls a single page makes.
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "60"))
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))

# ===== Logging Configuration =====
accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")  # stdout
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")    # stderr
loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")
capture_output = True

# ===== Server Mechanics =====
preload_app = os.environ.get("GUNICORN_PRELOAD", "false").lower() in ("1", "true", "yes")
forwarded_allow_ips = os.environ.get("GUNICORN_FORWARDED_ALLOW_IPS", "*")
proc_name = os.environ.get("GUNICORN_PROC_NAME", "erpdesk")


# ===== Lifecycle Hooks =====
def on_starting(server):
    """Called just before the master process is initialized."""
    logger = logging.getLogger(__name__)
    logger.info(
        f"Gunicorn starting: workers={workers}, threads={threads}, "
        f"worker_class={worker_class}, timeout={timeout}s"
    )


def when_ready(server):
    """Called just after the server is started."""
    logger = logging.getLogger(__name__)
    logger.info(f"Gunicorn ready. Listening on {bind}")


def worker_abort(worker):
    """Called when a worker is timed out and is being replaced."""
    logger = logging.getLogger(__name__)
    logger.warning(f"Worker {worker.pid} timed out (>{timeout}s), aborting")
