"""Monotonic per-action request tickets so only the newest result is applied."""

from __future__ import annotations

import logging
from collections.abc import Callable
from threading import RLock

log = logging.getLogger(__name__)


class RequestSequencer:
    """Issue increasing tickets per action name and gate state updates on them."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._latest: dict[str, int] = {}

    def begin(self, action: str) -> int:
        with self._lock:
            ticket = self._latest.get(action, 0) + 1
            self._latest[action] = ticket
            return ticket

    def latest(self, action: str) -> int:
        with self._lock:
            return self._latest.get(action, 0)

    def is_current(self, action: str, ticket: int) -> bool:
        with self._lock:
            return self._latest.get(action, 0) == ticket

    def commit(self, action: str, ticket: int, apply: Callable[[], None]) -> bool:
        """Run `apply` only if `ticket` is still the newest for `action`."""
        with self._lock:
            if self._latest.get(action, 0) != ticket:
                log.warning("dropping stale %s result (ticket=%s latest=%s)", action, ticket, self._latest.get(action, 0))
                return False
            apply()
            return True

    def reset(self) -> None:
        """Invalidate every outstanding ticket. Counters only move forward."""
        with self._lock:
            for action in self._latest:
                self._latest[action] += 1
