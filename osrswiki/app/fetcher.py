"""Background search/page requests delivered back to the GUI thread as Qt signals."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from osrswiki.wiki.client import WikiClient, WikiClientError

logger = logging.getLogger(__name__)


class WikiFetcher(QObject):
    """Runs one-shot wiki requests on worker threads.

    Every request gets an id from a single increasing counter. Results are emitted with
    that id so receivers can ignore anything that is not the latest request.
    """

    searchFinished = Signal(int, object)  # request_id, list[SearchResult]
    pageFinished = Signal(int, object)  # request_id, Page
    fetchFailed = Signal(int, str)  # request_id, error message

    def __init__(self, client_factory: Callable[[], WikiClient], parent=None) -> None:
        super().__init__(parent)
        self._client_factory = client_factory
        self._lock = threading.Lock()
        self._latest_request_id = 0

    @property
    def latest_request_id(self) -> int:
        with self._lock:
            return self._latest_request_id

    def is_current(self, request_id: int) -> bool:
        return request_id == self.latest_request_id

    def _next_request_id(self) -> int:
        with self._lock:
            self._latest_request_id += 1
            return self._latest_request_id

    def search(self, query: str) -> int:
        request_id = self._next_request_id()
        self._start(self._search_job, request_id, query)
        return request_id

    def open_page(self, name: Optional[str] = None, page_id: Optional[int] = None) -> int:
        request_id = self._next_request_id()
        self._start(self._page_job, request_id, name, page_id)
        return request_id

    def _start(self, target: Callable[..., None], *args) -> None:
        thread = threading.Thread(target=target, args=args, daemon=True)
        thread.start()

    def _search_job(self, request_id: int, query: str) -> None:
        try:
            with self._client_factory() as client:
                results = client.search(query)
        except WikiClientError as exc:
            logger.warning("Search request %d failed: %s", request_id, exc)
            self.fetchFailed.emit(request_id, str(exc))
            return
        self.searchFinished.emit(request_id, results)

    def _page_job(self, request_id: int, name: Optional[str], page_id: Optional[int]) -> None:
        try:
            with self._client_factory() as client:
                page = client.fetch_page(name=name, page_id=page_id)
        except WikiClientError as exc:
            logger.warning("Page request %d failed: %s", request_id, exc)
            self.fetchFailed.emit(request_id, str(exc))
            return
        self.pageFinished.emit(request_id, page)
