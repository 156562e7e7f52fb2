from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from osrswiki.app import config
from osrswiki.app.fetcher import WikiFetcher
from osrswiki.wiki.client import Page, SearchResult, WikiClient

from .article_view import ArticleView, key_name
from .page_load_logger import PageLoadLogger
from .search_view import SearchView
from .styles import BORDER_FOREGROUND, PRIMARY_FOREGROUND, WINDOW_BACKGROUND

logger = logging.getLogger(__name__)

APP_TITLE = "osrs.sh - wiki"
WELCOME_TEXT = "Welcome to osrs.sh"

HOME_PANE = 0
SEARCH_PANE = 1
ARTICLE_PANE = 2


def _default_client_factory() -> WikiClient:
    return WikiClient(config.load_api_base_url(), timeout=config.load_request_timeout())


class MainWindow(QMainWindow):
    """Top bar with title/search field over a home, search or article pane."""

    def __init__(self, client_factory: Optional[Callable[[], WikiClient]] = None, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle(APP_TITLE)
        frame_css = f"border: 1px solid {BORDER_FOREGROUND}; padding: 2px 6px;"

        self.title_label = QLabel(APP_TITLE)
        self.title_label.setStyleSheet(f"color: {PRIMARY_FOREGROUND};")
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search")
        self.search_input.setMaxLength(64)
        self.search_input.hide()
        self.search_input.returnPressed.connect(lambda: self.run_search(self.search_input.text()))

        top_bar = QWidget()
        top_bar.setObjectName("topBar")
        top_bar.setStyleSheet(f"#topBar {{ {frame_css} }}")
        top_layout = QHBoxLayout(top_bar)
        top_layout.setContentsMargins(4, 2, 4, 2)
        top_layout.addWidget(self.title_label)
        top_layout.addWidget(self.search_input, 1)

        self.home_view = QLabel(WELCOME_TEXT)
        self.home_view.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.search_view = SearchView()
        self.search_view.openArticleRequested.connect(lambda page_id: self.open_article(page_id=page_id))
        self.article_view = ArticleView()
        self.article_view.linkActivated.connect(lambda target: self.open_article(name=target))

        self.panes = QStackedWidget()
        self.panes.addWidget(self.home_view)
        self.panes.addWidget(self.search_view)
        self.panes.addWidget(self.article_view)
        self.panes.setObjectName("contentFrame")
        self.panes.setStyleSheet(f"#contentFrame {{ {frame_css} }}")

        central = QWidget()
        central.setStyleSheet(f"background-color: {WINDOW_BACKGROUND}; color: {PRIMARY_FOREGROUND};")
        layout = QVBoxLayout(central)
        layout.setContentsMargins(2, 2, 2, 2)
        layout.addWidget(top_bar)
        layout.addWidget(self.panes, 1)
        self.setCentralWidget(central)

        self.fetcher = WikiFetcher(client_factory or _default_client_factory, self)
        self.fetcher.searchFinished.connect(self._on_search_finished)
        self.fetcher.pageFinished.connect(self._on_page_finished)
        self.fetcher.fetchFailed.connect(self._on_fetch_failed)
        self._page_tracer: Optional[PageLoadLogger] = None

        QShortcut(QKeySequence("Ctrl+C"), self, activated=self.close)
        QShortcut(QKeySequence(Qt.Key_Escape), self, activated=self.cancel_search)
        self.set_pane(HOME_PANE)

    @property
    def current_pane(self) -> int:
        return self.panes.currentIndex()

    def set_pane(self, pane: int) -> None:
        self.panes.setCurrentIndex(pane)
        if not self.search_input.hasFocus():
            self.panes.currentWidget().setFocus()

    def open_search(self) -> None:
        self.title_label.hide()
        self.search_input.show()
        self.search_input.setFocus()
        self.search_input.selectAll()

    def cancel_search(self) -> None:
        self.search_input.clearFocus()
        self.search_input.hide()
        self.title_label.show()
        self.panes.currentWidget().setFocus()

    def run_search(self, query: str) -> Optional[int]:
        query = (query or "").strip()
        if not query:
            return None
        self.search_input.clearFocus()
        self.set_pane(SEARCH_PANE)
        self.statusBar().showMessage(f"Searching for {query}...")
        return self.fetcher.search(query)

    def open_article(self, name: Optional[str] = None, page_id: Optional[int] = None) -> Optional[int]:
        if not page_id and not (name and name.strip()):
            return None
        label = name or f"#{page_id}"
        self._page_tracer = PageLoadLogger(label)
        # The current article stays up until the new one arrives.
        if self.article_view.page is None:
            self.article_view.set_loading(label)
        self.set_pane(ARTICLE_PANE)
        self.statusBar().showMessage(f"Loading {label}...")
        return self.fetcher.open_page(name=name, page_id=page_id)

    def _on_search_finished(self, request_id: int, results: list[SearchResult]) -> None:
        if not self.fetcher.is_current(request_id):
            logger.info("Dropping stale search response %d", request_id)
            return
        self.search_view.set_results(results)
        self.statusBar().showMessage(f"{len(results)} results", 3000)

    def _on_page_finished(self, request_id: int, page: Page) -> None:
        if not self.fetcher.is_current(request_id):
            logger.info("Dropping stale page response %d (%s)", request_id, page.title)
            return
        tracer = self._page_tracer or PageLoadLogger(page.title)
        tracer.mark("fetched")
        self.article_view.set_page(page)
        tracer.end("rendered")
        self._page_tracer = None
        self.setWindowTitle(f"{page.title} | {APP_TITLE}")
        self.statusBar().clearMessage()
        try:
            config.save_last_page(page.title)
        except OSError as exc:
            logger.warning("Could not remember last page: %s", exc)
        self.set_pane(ARTICLE_PANE)

    def _on_fetch_failed(self, request_id: int, message: str) -> None:
        if not self.fetcher.is_current(request_id):
            return
        self.statusBar().showMessage(message, 5000)
        if self.current_pane == ARTICLE_PANE and self.article_view.page is None:
            self.article_view.show_message(f"Failed to load page: {message}")

    def keyPressEvent(self, event):  # type: ignore[override]
        key = key_name(event)
        if key == "q":
            self.close()
            return
        if key == "s":
            self.open_search()
            return
        super().keyPressEvent(event)
