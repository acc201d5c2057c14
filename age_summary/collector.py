from __future__ import annotations

import threading

from .sources.base import Outcome


class ResultCollector:
    """Outcomes keyed by source; a later write for the same source replaces the earlier one."""

    def __init__(self) -> None:
        self._outcomes: dict[str, Outcome] = {}
        self._lock = threading.Lock()

    def upsert(self, outcome: Outcome) -> None:
        with self._lock:
            self._outcomes[outcome.key] = outcome

    def snapshot(self) -> dict[str, Outcome]:
        with self._lock:
            return dict(self._outcomes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)
