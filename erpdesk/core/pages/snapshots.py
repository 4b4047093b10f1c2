"""Last good list page per (visitor, resource), kept in process memory."""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

SnapshotKey = Tuple[str, str]


@dataclass(frozen=True)
class Snapshot:
    records: List[Dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    total_pages: int = 1
    page: int = 1


class StaleSnapshotStore:
    """Bounded LRU; the oldest entry is evicted once ``maxsize`` is reached."""

    def __init__(self, maxsize: int = 256):
        self.maxsize = max(int(maxsize), 1)
        self._entries: "OrderedDict[SnapshotKey, Snapshot]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: SnapshotKey) -> Optional[Snapshot]:
        with self._lock:
            snapshot = self._entries.get(key)
            if snapshot is not None:
                self._entries.move_to_end(key)
            return snapshot

    def put(self, key: SnapshotKey, snapshot: Snapshot) -> None:
        with self._lock:
            self._entries[key] = snapshot
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)

    def discard_session(self, session_id: str) -> int:
        with self._lock:
            stale = [key for key in self._entries if key[0] == session_id]
            for key in stale:
                del self._entries[key]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
