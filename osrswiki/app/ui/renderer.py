"""Viewport math and styled rendering for parsed articles.

``DocumentLayout`` wraps the placeholder text of a :class:`ParsedDocument` to a column
width. ``ArticleRenderer`` cuts the visible window out of a layout and swaps each
placeholder for its styled content.
"""

from __future__ import annotations

import html
import textwrap
from collections import defaultdict
from dataclasses import dataclass
from typing import Optional

from osrswiki.wiki.tokens import ParsedDocument, VisibleToken

from .styles import DEFAULT_STYLES, TextStyle, TokenStyles


def wrap_lines(text: str, width: int) -> list[str]:
    """Wrap every source line to ``width`` columns without splitting words."""
    width = max(1, width)
    lines: list[str] = []
    for raw in text.split("\n"):
        if not raw.strip():
            lines.append("")
            continue
        wrapped = textwrap.wrap(
            raw,
            width=width,
            break_long_words=False,
            break_on_hyphens=False,
            replace_whitespace=False,
        )
        lines.extend(wrapped or [""])
    return lines


class DocumentLayout:
    def __init__(self, document: ParsedDocument, width: int) -> None:
        self.document = document
        self.width = max(1, width)
        self.lines: list[str] = wrap_lines(document.text, self.width)
        self._joined = "\n".join(self.lines)

    @property
    def total_lines(self) -> int:
        return len(self.lines)

    def max_scroll(self, height: int) -> int:
        return max(0, self.total_lines - max(1, height))

    def clamp_scroll(self, offset: int, height: int) -> int:
        return max(0, min(offset, self.max_scroll(height)))

    def visible_range(self, offset: int, height: int) -> tuple[int, int]:
        start = max(0, min(offset, self.total_lines))
        end = max(start, min(self.total_lines, start + max(0, height)))
        return start, end

    def visible_text(self, offset: int, height: int) -> str:
        start, end = self.visible_range(offset, height)
        return "\n".join(self.lines[start:end])

    def line_of(self, placeholder: str) -> Optional[int]:
        """Return the wrapped line holding the first occurrence of ``placeholder``."""
        if not placeholder:
            return None
        index = self._joined.find(placeholder)
        if index < 0:
            return None
        return self._joined.count("\n", 0, index)


@dataclass(frozen=True)
class Segment:
    text: str
    style: Optional[TextStyle] = None
    token_id: Optional[int] = None


@dataclass(frozen=True)
class RenderedLine:
    number: int
    segments: tuple[Segment, ...]

    @property
    def text(self) -> str:
        return "".join(segment.text for segment in self.segments)


@dataclass(frozen=True)
class HighlightRegion:
    """Position of the selected token inside the rendered window."""

    row: int
    column: int
    length: int
    token_id: int


@dataclass(frozen=True)
class RenderedView:
    lines: tuple[RenderedLine, ...]
    highlight: Optional[HighlightRegion] = None

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)


class ArticleRenderer:
    def __init__(self, styles: TokenStyles = DEFAULT_STYLES, gutter_width: int = 5) -> None:
        self.styles = styles
        self.gutter_width = max(0, gutter_width)

    def render(
        self,
        layout: DocumentLayout,
        scroll_offset: int,
        height: int,
        selected_token_id: Optional[int] = None,
    ) -> RenderedView:
        start, end = layout.visible_range(scroll_offset, height)
        rows = layout.lines[start:end]

        # Token id order decides which placeholder is claimed; each one is placed once.
        placements: dict[int, list[tuple[int, VisibleToken]]] = defaultdict(list)
        for token in layout.document.tokens.visible():
            for row, line in enumerate(rows):
                column = line.find(token.placeholder)
                if column >= 0:
                    placements[row].append((column, token))
                    break

        highlight: Optional[HighlightRegion] = None
        rendered: list[RenderedLine] = []
        for row, line in enumerate(rows):
            segments: list[Segment] = []
            cursor = 0
            for column, token in sorted(placements.get(row, ()), key=lambda item: item[0]):
                if column > cursor:
                    segments.append(Segment(line[cursor:column]))
                style = self.styles.for_type(token.type)
                if token.id == selected_token_id:
                    style = (style or TextStyle()).merged(self.styles.selected)
                    highlight = HighlightRegion(row, column, len(token.content), token.id)
                segments.append(Segment(token.content, style, token.id))
                cursor = column + len(token.placeholder)
            if cursor < len(line):
                segments.append(Segment(line[cursor:]))
            rendered.append(RenderedLine(number=start + row, segments=tuple(segments)))
        return RenderedView(lines=tuple(rendered), highlight=highlight)

    def gutter_text(self, number: int) -> str:
        if not self.gutter_width:
            return ""
        return str(number).ljust(self.gutter_width)[: self.gutter_width]

    def to_html(self, view: RenderedView) -> str:
        gutter_css = self.styles.gutter.css()
        rows: list[str] = []
        for line in view.lines:
            parts: list[str] = []
            gutter = self.gutter_text(line.number)
            if gutter:
                parts.append(f'<span style="{gutter_css}">{html.escape(gutter, quote=False)}</span>')
            for segment in line.segments:
                escaped = html.escape(segment.text, quote=False)
                css = segment.style.css() if segment.style else ""
                parts.append(f'<span style="{css}">{escaped}</span>' if css else escaped)
            rows.append("".join(parts))
        body_css = self.styles.body.css()
        return f'<pre style="{body_css}; margin: 0">' + "\n".join(rows) + "</pre>"
