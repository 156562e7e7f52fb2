from __future__ import annotations

import logging
import os
import time

logger = logging.getLogger(__name__)

PAGE_LOGGING_ENABLED = os.getenv("OSRSWIKI_DETAILED_PAGE_LOGGING", "0") not in (
    "0",
    "false",
    "False",
    "",
    None,
)


class PageLoadLogger:
    """Records fetch -> parse -> render timings for one article load."""

    def __init__(self, title: str, enabled: bool = PAGE_LOGGING_ENABLED) -> None:
        self.title = title
        self.enabled = enabled
        self.steps: list[tuple[str, float]] = []
        self._start = self._last = time.perf_counter()
        if self.enabled:
            logger.info("[PageLoad] start title=%s", title)

    def mark(self, label: str) -> None:
        now = time.perf_counter()
        step_ms = (now - self._last) * 1000.0
        self._last = now
        self.steps.append((label, step_ms))
        if self.enabled:
            total_ms = (now - self._start) * 1000.0
            logger.info("[PageLoad] %s +%.1fms total=%.1fms title=%s", label, step_ms, total_ms, self.title)

    def end(self, label: str = "ready") -> None:
        self.mark(label)
