"""Best-effort wikitext tokenizer.

The parser recognises a small subset of MediaWiki markup and replaces every match with a
placeholder of the same width as the text that will eventually be displayed. Wrapping is
computed on the placeholder text, so styling applied later cannot move line breaks.

Passes run in a fixed order and each one scans the output of the previous pass:

1. redirect notices (removed)
2. file and image embeds (removed)
3. headings
4. bold spans
5. links

A heading or bold span wrapping a link is not claimed; its delimiters are dropped and
the link is tokenized on its own.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from .tokens import HiddenToken, ParsedDocument, Token, TokenRegistry, TokenType, VisibleToken

logger = logging.getLogger(__name__)

# Ids are encoded in a single code point from the supplementary private use planes; the
# rest of a placeholder is padding from the BMP private use area.
PLACEHOLDER_PAD = "\ue000"
_PLANE_A_START = 0xF0000
_PLANE_B_START = 0x100000
_PLANE_SPAN = 0xFFFE
MAX_TOKEN_ID = 2 * _PLANE_SPAN - 1

_RESERVED_PATTERN = re.compile("[\ue000\U000f0000-\U000ffffd\U00100000-\U0010fffd]")

REDIRECT_PATTERN = re.compile(r"\{\{\s*redirect\s*\|[^{}\n]*\}\}", re.IGNORECASE)
FILE_PATTERN = re.compile(
    r"\(?\[\[\s*(?:File|Image)\s*:[^\[\]|\n]+?\.[A-Za-z0-9]{2,5}(?:\|[^\[\]|\n]*)*\]\]\)?",
    re.IGNORECASE,
)
HEADING_PATTERN = re.compile(r"^(={2,6})[ \t]*([^=\n](?:[^\n]*?[^=\n])?)[ \t]*\1[ \t]*$", re.MULTILINE)
BOLD_PATTERN = re.compile(r"'''([^'\n](?:[^\n]*?[^'\n])?)'''")
LINK_PATTERN = re.compile(r"\[\[([^\[\]|\n]+)(?:\|([^\[\]|\n]+))?\]\]")

_INLINE_QUOTES = re.compile(r"'{2,}")


def _id_char(token_id: int) -> Optional[str]:
    if 0 <= token_id < _PLANE_SPAN:
        return chr(_PLANE_A_START + token_id)
    if _PLANE_SPAN <= token_id <= MAX_TOKEN_ID:
        return chr(_PLANE_B_START + token_id - _PLANE_SPAN)
    return None


def placeholder_for(token_id: int, content: str) -> str:
    """Return the placeholder for a token; always exactly ``len(content)`` long."""
    lead = _id_char(token_id)
    if lead is None:
        raise ValueError(f"token id out of range: {token_id}")
    if not content:
        raise ValueError("placeholders need at least one column of content")
    return lead + PLACEHOLDER_PAD * (len(content) - 1)


def placeholder_id(char: str) -> Optional[int]:
    """Decode the id carried by the first character of a placeholder."""
    if not char:
        return None
    code = ord(char[0])
    if _PLANE_A_START <= code < _PLANE_A_START + _PLANE_SPAN:
        return code - _PLANE_A_START
    if _PLANE_B_START <= code < _PLANE_B_START + _PLANE_SPAN:
        return code - _PLANE_B_START + _PLANE_SPAN
    return None


def _strip_quotes(text: str) -> str:
    return _INLINE_QUOTES.sub("", text).strip()


class WikiTokenizer:
    """Single-use tokenizer; call :meth:`parse` once per page load."""

    def __init__(self, text: str) -> None:
        self._source = text or ""
        self._next_id = 0
        self._tokens: list[Token] = []
        self._exhausted = False

    def parse(self) -> ParsedDocument:
        text = _RESERVED_PATTERN.sub("", self._source.replace("\r\n", "\n"))
        text = REDIRECT_PATTERN.sub(self._hidden(TokenType.REDIRECT), text)
        text = FILE_PATTERN.sub(self._hidden(TokenType.FILE), text)
        text = HEADING_PATTERN.sub(self._visible(TokenType.HEADING, self._heading_parts, body_group=2), text)
        text = BOLD_PATTERN.sub(self._visible(TokenType.BOLD, self._bold_parts, body_group=1), text)
        text = LINK_PATTERN.sub(self._visible(TokenType.LINK, self._link_parts), text)
        logger.debug(
            "Tokenized %d chars into %d tokens (%d visible)",
            len(self._source),
            len(self._tokens),
            self._next_id,
        )
        return ParsedDocument(text=text, tokens=TokenRegistry(self._tokens))

    def _hidden(self, token_type: TokenType) -> Callable[[re.Match[str]], str]:
        def replace(match: re.Match[str]) -> str:
            self._tokens.append(HiddenToken(type=token_type, text=match.group(0)))
            return ""

        return replace

    def _visible(
        self,
        token_type: TokenType,
        parts: Callable[[re.Match[str]], tuple[str, str]],
        body_group: Optional[int] = None,
    ) -> Callable[[re.Match[str]], str]:
        def replace(match: re.Match[str]) -> str:
            if _RESERVED_PATTERN.search(match.group(0)):
                return match.group(0)
            if body_group is not None and LINK_PATTERN.search(match.group(body_group)):
                # Drop the wrapping markup so the link pass still sees the link.
                return match.group(body_group)
            content, target = parts(match)
            if not content:
                return match.group(0)
            if self._next_id > MAX_TOKEN_ID:
                if not self._exhausted:
                    logger.warning("Token id space exhausted; leaving remaining markup as text")
                    self._exhausted = True
                return match.group(0)
            token = VisibleToken(
                id=self._next_id,
                type=token_type,
                text=match.group(0),
                content=content,
                target=target,
                placeholder=placeholder_for(self._next_id, content),
            )
            self._next_id += 1
            self._tokens.append(token)
            return token.placeholder

        return replace

    @staticmethod
    def _heading_parts(match: re.Match[str]) -> tuple[str, str]:
        return _strip_quotes(match.group(2)), ""

    @staticmethod
    def _bold_parts(match: re.Match[str]) -> tuple[str, str]:
        return _strip_quotes(match.group(1)), ""

    @staticmethod
    def _link_parts(match: re.Match[str]) -> tuple[str, str]:
        first, label = match.group(1), match.group(2)
        target = first.strip() or (label or "").strip()
        if not target:
            return "", ""
        return (first if label is None else label), target


def parse_wikitext(text: str) -> ParsedDocument:
    return WikiTokenizer(text).parse()
