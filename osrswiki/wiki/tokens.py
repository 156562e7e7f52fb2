from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Sequence, Union


class TokenType(Enum):
    HEADING = "heading"
    BOLD = "bold"
    LINK = "link"
    FILE = "file"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class VisibleToken:
    """A token that occupies columns in the stripped text through its placeholder."""

    id: int
    type: TokenType
    text: str
    content: str
    target: str
    placeholder: str

    @property
    def hidden(self) -> bool:
        return False

    @property
    def is_link(self) -> bool:
        return self.type is TokenType.LINK


@dataclass(frozen=True)
class HiddenToken:
    """Markup removed from the text entirely (file embeds, redirect notices)."""

    type: TokenType
    text: str

    @property
    def hidden(self) -> bool:
        return True

    @property
    def is_link(self) -> bool:
        return False


Token = Union[VisibleToken, HiddenToken]


class TokenRegistry:
    """Ordered tokens of one parse pass with id and placeholder lookup."""

    def __init__(self, tokens: Sequence[Token] = ()) -> None:
        self._tokens: tuple[Token, ...] = tuple(tokens)
        self._by_id: dict[int, VisibleToken] = {}
        for token in self._tokens:
            if isinstance(token, VisibleToken):
                self._by_id[token.id] = token
        self._visible: tuple[VisibleToken, ...] = tuple(
            self._by_id[token_id] for token_id in sorted(self._by_id)
        )

    def __iter__(self) -> Iterator[Token]:
        """Iterate in parse pass order, left to right within each pass.

        Hidden tokens come first, then headings, bold spans and links. Use
        :meth:`visible` or :meth:`links` for id order.
        """
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def by_id(self, token_id: Optional[int]) -> Optional[VisibleToken]:
        if token_id is None:
            return None
        return self._by_id.get(token_id)

    def by_placeholder(self, text: str) -> Optional[VisibleToken]:
        for token in self._visible:
            if token.placeholder == text:
                return token
        return None

    def visible(self) -> tuple[VisibleToken, ...]:
        """Visible tokens in increasing id order."""
        return self._visible

    def links(self) -> tuple[VisibleToken, ...]:
        return tuple(token for token in self._visible if token.is_link)

    def hidden(self) -> tuple[HiddenToken, ...]:
        return tuple(token for token in self._tokens if isinstance(token, HiddenToken))

    @property
    def max_id(self) -> int:
        """Highest allocated id, or -1 for a registry without visible tokens."""
        return self._visible[-1].id if self._visible else -1


@dataclass(frozen=True)
class ParsedDocument:
    text: str = ""
    tokens: TokenRegistry = field(default_factory=TokenRegistry)
