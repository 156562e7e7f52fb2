"""Vi-like keystroke navigation over a wrapped article.

Keys are collected most-recent-first, so a count typed before a motion (``3j``) sits at
the end of the buffer (``["j", "3"]``). After every key the buffer is matched against
``COMMANDS``: an exact match fires, a partial match waits for more keys and anything else
clears the buffer.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from osrswiki.wiki.tokens import ParsedDocument, VisibleToken

from .renderer import DocumentLayout

logger = logging.getLogger(__name__)

_DEBUG_NAV = os.getenv("OSRSWIKI_DEBUG_NAV", "0") not in ("0", "false", "False", "", None)

MAX_COUNT_DIGITS = 6
DEFAULT_SCROLL_CONTEXT = 5


class Action(Enum):
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    TOP = "top"
    BOTTOM = "bottom"
    NEXT_LINK = "next_link"
    PREV_LINK = "prev_link"
    ACTIVATE = "activate"


@dataclass(frozen=True)
class Command:
    keys: tuple[str, ...]
    action: Action


# Longest sequences first.
COMMANDS: tuple[Command, ...] = (
    Command(("g", "g"), Action.TOP),
    Command(("k",), Action.SCROLL_UP),
    Command(("j",), Action.SCROLL_DOWN),
    Command(("G",), Action.BOTTOM),
    Command(("l",), Action.NEXT_LINK),
    Command(("h",), Action.PREV_LINK),
    Command(("enter",), Action.ACTIVATE),
)

_COMMAND_KEYS = frozenset(key for command in COMMANDS for key in command.keys)


class MatchState(Enum):
    NONE = "none"
    PENDING = "pending"
    MATCHED = "matched"


@dataclass(frozen=True)
class KeyMatch:
    state: MatchState
    command: Optional[Command] = None
    count: Optional[int] = None


@dataclass(frozen=True)
class NavigationRequest:
    target: str


def is_count_key(key: str) -> bool:
    return len(key) == 1 and "0" <= key <= "9"


def match_keys(buffer: Sequence[str]) -> KeyMatch:
    """Resolve a most-recent-first key buffer against ``COMMANDS``."""
    split = len(buffer)
    while split > 0 and is_count_key(buffer[split - 1]):
        split -= 1
    count_keys = buffer[split:]
    if len(count_keys) > MAX_COUNT_DIGITS:
        return KeyMatch(MatchState.NONE)
    count = int("".join(reversed(count_keys))) if count_keys else None
    typed = tuple(reversed(buffer[:split]))
    if not typed:
        return KeyMatch(MatchState.PENDING if count_keys else MatchState.NONE, count=count)
    for command in COMMANDS:
        if command.keys == typed:
            return KeyMatch(MatchState.MATCHED, command, count)
    if any(command.keys[: len(typed)] == typed for command in COMMANDS):
        return KeyMatch(MatchState.PENDING, count=count)
    return KeyMatch(MatchState.NONE)


class Navigator:
    """Scroll and link selection state for one article viewport."""

    def __init__(self, width: int = 80, height: int = 24, *, scroll_context: int = DEFAULT_SCROLL_CONTEXT) -> None:
        self.key_buffer: list[str] = []
        self.scroll_offset = 0
        self.selected_token_id: Optional[int] = None
        self.viewport_width = max(1, width)
        self.viewport_height = max(1, height)
        self.scroll_context = max(0, scroll_context)
        self._layout = DocumentLayout(ParsedDocument(), self.viewport_width)

    @property
    def document(self) -> ParsedDocument:
        return self._layout.document

    @property
    def layout(self) -> DocumentLayout:
        return self._layout

    @property
    def max_scroll(self) -> int:
        return self._layout.max_scroll(self.viewport_height)

    def set_document(self, document: ParsedDocument) -> None:
        self._layout = DocumentLayout(document, self.viewport_width)
        self.scroll_offset = 0
        self.selected_token_id = None
        self.key_buffer = []

    def resize(self, width: int, height: int) -> None:
        width, height = max(1, width), max(1, height)
        if width != self.viewport_width:
            self._layout = DocumentLayout(self.document, width)
        self.viewport_width = width
        self.viewport_height = height
        self.scroll_offset = self._layout.clamp_scroll(self.scroll_offset, height)

    # Key handling ---------------------------------------------------------

    def recognizes(self, key: str) -> bool:
        return is_count_key(key) or key in _COMMAND_KEYS

    def push(self, key: str) -> Optional[NavigationRequest]:
        self.key_buffer.insert(0, key)
        match = match_keys(self.key_buffer)
        if _DEBUG_NAV:
            logger.debug("push key=%r buffer=%r state=%s", key, self.key_buffer, match.state.value)
        if match.state is MatchState.PENDING:
            return None
        self.key_buffer = []
        if match.state is MatchState.NONE or match.command is None:
            return None
        return self.perform(match.command.action, match.count)

    def perform(self, action: Action, count: Optional[int] = None) -> Optional[NavigationRequest]:
        if action is Action.SCROLL_UP:
            self.scroll_up(count or 1)
        elif action is Action.SCROLL_DOWN:
            self.scroll_down(count or 1)
        elif action is Action.TOP:
            self.goto_top()
        elif action is Action.BOTTOM:
            self.goto_bottom(count)
        elif action is Action.NEXT_LINK:
            self.next_link()
        elif action is Action.PREV_LINK:
            self.prev_link()
        elif action is Action.ACTIVATE:
            return self.activate()
        return None

    # Motions --------------------------------------------------------------

    def scroll_down(self, lines: int = 1) -> None:
        self.scroll_offset = self._layout.clamp_scroll(self.scroll_offset + lines, self.viewport_height)

    def scroll_up(self, lines: int = 1) -> None:
        self.scroll_offset = self._layout.clamp_scroll(self.scroll_offset - lines, self.viewport_height)

    def goto_top(self) -> None:
        self.scroll_offset = 0

    def goto_bottom(self, line: Optional[int] = None) -> None:
        target = self.max_scroll if line is None else line
        self.scroll_offset = self._layout.clamp_scroll(target, self.viewport_height)

    def visible_text(self) -> str:
        return self._layout.visible_text(self.scroll_offset, self.viewport_height)

    def is_in_view(self, placeholder: str) -> bool:
        return bool(placeholder) and placeholder in self.visible_text()

    def selected_token(self) -> Optional[VisibleToken]:
        return self.document.tokens.by_id(self.selected_token_id)

    def next_link(self) -> None:
        current = self.selected_token()
        if current is None or not self.is_in_view(current.placeholder):
            self._select_first_visible(reverse=False)
            return
        tokens = self.document.tokens
        for token_id in range(current.id + 1, tokens.max_id + 1):
            token = tokens.by_id(token_id)
            if token is not None and token.is_link:
                self.select(token)
                return

    def prev_link(self) -> None:
        current = self.selected_token()
        if current is None or not self.is_in_view(current.placeholder):
            self._select_first_visible(reverse=True)
            return
        tokens = self.document.tokens
        for token_id in range(current.id - 1, -1, -1):
            token = tokens.by_id(token_id)
            if token is not None and token.is_link:
                self.select(token)
                return

    def _select_first_visible(self, *, reverse: bool) -> None:
        visible = self.visible_text()
        links = self.document.tokens.links()
        for token in reversed(links) if reverse else links:
            if token.placeholder in visible:
                self.select(token)
                return

    def select(self, token: VisibleToken) -> None:
        if not token.is_link or self.document.tokens.by_id(token.id) != token:
            return
        self.selected_token_id = token.id
        self.scroll_into_view(token)

    def scroll_into_view(self, token: VisibleToken) -> None:
        line = self._layout.line_of(token.placeholder)
        if line is None:
            return
        height = self.viewport_height
        if self.scroll_offset <= line < self.scroll_offset + height:
            return
        context = min(self.scroll_context, (height - 1) // 2)
        if line < self.scroll_offset:
            offset = line - context
        else:
            offset = line - height + 1 + context
        self.scroll_offset = self._layout.clamp_scroll(offset, height)

    def activate(self) -> Optional[NavigationRequest]:
        token = self.selected_token()
        if token is None or not token.is_link:
            return None
        logger.info("Activating link target=%s", token.target)
        return NavigationRequest(target=token.target)
