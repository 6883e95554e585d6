"""
quota.py.

Does: In-process per-session generation counter behind the QuotaStore contract.
      Advisory anti-abuse state, not durable; a durable store can replace it
      without touching the controller.
"""

from __future__ import annotations

import threading

__all__ = ["InMemoryQuotaStore"]


class InMemoryQuotaStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[str, int] = {}

    def get(self, session_id: str) -> int:
        with self._lock:
            return self._counts.get(session_id, 0)

    def increment(self, session_id: str) -> int:
        with self._lock:
            used = self._counts.get(session_id, 0) + 1
            self._counts[session_id] = used
            return used

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
