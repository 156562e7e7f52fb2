from __future__ import annotations

from typing import Optional, Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QListWidget, QListWidgetItem

from osrswiki.wiki.client import SearchResult

from .article_view import key_name


class SearchView(QListWidget):
    """Search result list; enter opens the highlighted page."""

    openArticleRequested = Signal(int)

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setFocusPolicy(Qt.StrongFocus)
        self.results: list[SearchResult] = []

    def set_results(self, results: Sequence[SearchResult]) -> None:
        self.clear()
        self.results = list(results)
        for result in self.results:
            label = result.title if not result.snippet else f"{result.title}\n    {result.snippet}"
            item = QListWidgetItem(label)
            item.setData(Qt.UserRole, result.page_id)
            self.addItem(item)
        if self.results:
            self.setCurrentRow(0)

    def selected_page_id(self) -> Optional[int]:
        item = self.currentItem()
        if item is None:
            return None
        return item.data(Qt.UserRole)

    def keyPressEvent(self, event):  # type: ignore[override]
        key = key_name(event)
        if key == "enter":
            page_id = self.selected_page_id()
            if page_id is not None:
                self.openArticleRequested.emit(page_id)
            event.accept()
            return
        if key in ("j", "k"):
            row = self.currentRow() + (1 if key == "j" else -1)
            if 0 <= row < self.count():
                self.setCurrentRow(row)
            event.accept()
            return
        if key:
            # Other printable keys belong to the window (search, quit).
            event.ignore()
            return
        super().keyPressEvent(event)
