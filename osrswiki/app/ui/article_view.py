from __future__ import annotations

import html
import logging
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFontDatabase, QFontMetrics, QKeyEvent
from PySide6.QtWidgets import QTextEdit

from osrswiki.app import config
from osrswiki.wiki.client import Page
from osrswiki.wiki.parser import parse_wikitext
from osrswiki.wiki.tokens import ParsedDocument

from .navigator import Navigator
from .renderer import ArticleRenderer, RenderedView
from .styles import DEFAULT_STYLES, WINDOW_BACKGROUND, TokenStyles

logger = logging.getLogger(__name__)


def key_name(event: QKeyEvent) -> str:
    """Translate a key event into the names used by the navigator ("j", "G", "enter")."""
    key = event.key()
    if key in (Qt.Key_Return, Qt.Key_Enter):
        return "enter"
    if key == Qt.Key_Escape:
        return "esc"
    if event.modifiers() & (Qt.ControlModifier | Qt.AltModifier | Qt.MetaModifier):
        return ""
    text = event.text()
    if len(text) == 1 and text.isprintable():
        return text
    return ""


class ArticleView(QTextEdit):
    """Read-only article display driven entirely by the vi-style navigator."""

    linkActivated = Signal(str)

    def __init__(self, styles: TokenStyles = DEFAULT_STYLES, parent=None) -> None:
        super().__init__(parent)
        self.setReadOnly(True)
        self.setTextInteractionFlags(Qt.NoTextInteraction)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setLineWrapMode(QTextEdit.NoWrap)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setStyleSheet(f"QTextEdit {{ background-color: {WINDOW_BACKGROUND}; border: none; }}")
        font = QFontDatabase.systemFont(QFontDatabase.FixedFont)
        font.setPointSize(config.load_font_point_size())
        self.setFont(font)
        self.document().setDocumentMargin(0)

        self.renderer = ArticleRenderer(styles, gutter_width=config.load_gutter_width())
        self.navigator = Navigator(scroll_context=config.load_scroll_context())
        self.page: Optional[Page] = None
        self._message: Optional[str] = "Loading..."
        self._last_view: Optional[RenderedView] = None
        self._refresh()

    @property
    def rendered_view(self) -> Optional[RenderedView]:
        return self._last_view

    def grid_size(self) -> tuple[int, int]:
        """Return (columns, rows) of text that fit in the viewport, gutter excluded."""
        metrics = QFontMetrics(self.font())
        char_width = max(1, metrics.horizontalAdvance("M"))
        line_height = max(1, metrics.lineSpacing())
        viewport = self.viewport()
        columns = viewport.width() // char_width - self.renderer.gutter_width
        rows = viewport.height() // line_height
        return max(1, columns), max(1, rows)

    def set_loading(self, label: str = "") -> None:
        self.page = None
        self._message = f"Loading {label}..." if label else "Loading..."
        self._refresh()

    def show_message(self, message: str) -> None:
        self._message = message
        self._refresh()

    def set_page(self, page: Page) -> None:
        logger.info("Showing page title=%s page_id=%s", page.title, page.page_id)
        self.page = page
        self.set_document(parse_wikitext(page.wikitext))

    def set_document(self, document: ParsedDocument) -> None:
        self._message = None
        self.navigator.set_document(document)
        self.navigator.resize(*self.grid_size())
        self._refresh()

    def _refresh(self) -> None:
        if self._message is not None:
            self._last_view = None
            self.setHtml(f"<pre>{html.escape(self._message, quote=False)}</pre>")
            return
        nav = self.navigator
        view = self.renderer.render(nav.layout, nav.scroll_offset, nav.viewport_height, nav.selected_token_id)
        self._last_view = view
        self.setHtml(self.renderer.to_html(view))

    def handle_key(self, key: str) -> bool:
        """Feed one key name to the navigator; returns False for keys it does not use."""
        if not key or self._message is not None:
            return False
        request = self.navigator.push(key)
        self._refresh()
        if request is not None:
            self.linkActivated.emit(request.target)
        return self.navigator.recognizes(key)

    def keyPressEvent(self, event):  # type: ignore[override]
        if self.handle_key(key_name(event)):
            event.accept()
        else:
            event.ignore()

    def resizeEvent(self, event):  # type: ignore[override]
        super().resizeEvent(event)
        self.navigator.resize(*self.grid_size())
        if self._message is None:
            self._refresh()
