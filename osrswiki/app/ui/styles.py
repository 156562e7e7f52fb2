from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from osrswiki.wiki.tokens import TokenType

# OSRS dark theme
PRIMARY_FOREGROUND = "#f4eaea"
DIMMED_FOREGROUND = "#a4a1a1"
ACCENT_FOREGROUND = "#ea4727"
LINK_FOREGROUND = "#b79d7e"
BORDER_FOREGROUND = "#b79d7e"
SELECTED_BACKGROUND = "#4a3f35"
WINDOW_BACKGROUND = "#1e1b1b"


@dataclass(frozen=True)
class TextStyle:
    foreground: Optional[str] = None
    background: Optional[str] = None
    bold: bool = False
    underline: bool = False

    def merged(self, overlay: "TextStyle") -> "TextStyle":
        """Return a copy with every attribute set on ``overlay`` applied on top."""
        return replace(
            self,
            foreground=overlay.foreground or self.foreground,
            background=overlay.background or self.background,
            bold=self.bold or overlay.bold,
            underline=self.underline or overlay.underline,
        )

    def css(self) -> str:
        parts: list[str] = []
        if self.foreground:
            parts.append(f"color: {self.foreground}")
        if self.background:
            parts.append(f"background-color: {self.background}")
        if self.bold:
            parts.append("font-weight: bold")
        if self.underline:
            parts.append("text-decoration: underline")
        return "; ".join(parts)


@dataclass(frozen=True)
class TokenStyles:
    """Per token type styling shared by every article view."""

    body: TextStyle = field(default_factory=lambda: TextStyle(foreground=PRIMARY_FOREGROUND))
    heading: TextStyle = field(
        default_factory=lambda: TextStyle(foreground=ACCENT_FOREGROUND, bold=True, underline=True)
    )
    bold: TextStyle = field(default_factory=lambda: TextStyle(bold=True))
    link: TextStyle = field(default_factory=lambda: TextStyle(foreground=LINK_FOREGROUND))
    selected: TextStyle = field(default_factory=lambda: TextStyle(background=SELECTED_BACKGROUND))
    gutter: TextStyle = field(default_factory=lambda: TextStyle(foreground=DIMMED_FOREGROUND))

    def for_type(self, token_type: TokenType) -> Optional[TextStyle]:
        if token_type is TokenType.HEADING:
            return self.heading
        if token_type is TokenType.BOLD:
            return self.bold
        if token_type is TokenType.LINK:
            return self.link
        return None


DEFAULT_STYLES = TokenStyles()
