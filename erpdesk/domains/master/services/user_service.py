"""Administrator-driven account creation."""

from __future__ import annotations

import logging

from erpdesk.core.auth.auth_client import AuthClient
from erpdesk.core.pages.controller import Notification
from erpdesk.domains.master.schemas.master_schemas import UserRegisterForm

logger = logging.getLogger(__name__)

REGISTER_PATH = "/api/auth/register"


def register_user(client: AuthClient, form: UserRegisterForm) -> Notification:
    """Create an account with the admin's bearer token.

    Goes through ``request_json`` rather than ``AuthClient.register`` so the
    returned token for the new account never replaces the admin's session.
    """
    result = client.request_json(REGISTER_PATH, method="POST", json=form.api_payload())
    if not result.ok:
        logger.info("User registration rejected: %s", result.message)
        return Notification.error(result.message)
    return Notification.success(f"User {form.name} registered.")
