from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://oldschool.runescape.wiki"
API_PATH = "/api.php"
USER_AGENT = "osrswiki-reader/0.1 (desktop wiki reader)"

SEARCH_PROPS = "size|wordcount|timestamp|snippet"
PARSE_PROPS = "categories|sections|revid|displaytitle|iwlinks|properties|parsewarnings|wikitext"

_TAG_PATTERN = re.compile(r"<[^>]+>")


class WikiClientError(Exception):
    """Raised when a search or page request cannot be completed."""


@dataclass(frozen=True)
class SearchResult:
    title: str
    page_id: int
    snippet: str = ""


@dataclass(frozen=True)
class Section:
    toc_level: int
    level: str
    line: str
    index: str


@dataclass(frozen=True)
class Page:
    title: str
    page_id: int
    wikitext: str
    categories: list[str] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)


def strip_snippet(snippet: str) -> str:
    """Turn a search snippet (HTML with match spans) into plain text."""
    return html.unescape(_TAG_PATTERN.sub("", snippet or "")).strip()


class WikiClient:
    """Thin MediaWiki API client for search and page source requests."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )

    def __enter__(self) -> "WikiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.http.close()

    def _get(self, params: dict[str, Any]) -> dict:
        try:
            resp = self.http.get(API_PATH, params=params)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPError as exc:
            raise WikiClientError(f"Wiki request failed: {exc}") from exc
        except ValueError as exc:
            raise WikiClientError("Wiki returned a malformed response") from exc
        if not isinstance(payload, dict):
            raise WikiClientError("Wiki returned a malformed response")
        error = payload.get("error")
        if error:
            info = error.get("info") if isinstance(error, dict) else str(error)
            raise WikiClientError(f"Wiki API error: {info}")
        return payload

    def search(self, query: str) -> list[SearchResult]:
        query = (query or "").strip()
        if not query:
            return []
        logger.info("Searching wiki query=%s", query)
        payload = self._get(
            {
                "action": "query",
                "format": "json",
                "list": "search",
                "redirects": 1,
                "formatversion": 2,
                "srprop": SEARCH_PROPS,
                "srsearch": query,
            }
        )
        results: list[SearchResult] = []
        for entry in (payload.get("query") or {}).get("search") or []:
            if not isinstance(entry, dict) or "pageid" not in entry:
                continue
            results.append(
                SearchResult(
                    title=str(entry.get("title", "")),
                    page_id=int(entry["pageid"]),
                    snippet=strip_snippet(str(entry.get("snippet", ""))),
                )
            )
        return results

    def fetch_page(self, name: Optional[str] = None, page_id: Optional[int] = None) -> Page:
        if not page_id and not (name and name.strip()):
            raise WikiClientError("A page name or page id is required")
        params: dict[str, Any] = {
            "action": "parse",
            "format": "json",
            "prop": PARSE_PROPS,
            "formatversion": 2,
        }
        if page_id:
            params["pageid"] = page_id
        else:
            params["page"] = name.strip()
        logger.info("Fetching wiki page name=%s page_id=%s", name, page_id)
        parse = self._get(params).get("parse")
        if not isinstance(parse, dict):
            raise WikiClientError("Wiki response did not include a parsed page")
        categories = [
            str(entry.get("category", ""))
            for entry in parse.get("categories") or []
            if isinstance(entry, dict)
        ]
        sections = [
            Section(
                toc_level=int(entry.get("toclevel", 0) or 0),
                level=str(entry.get("level", "")),
                line=str(entry.get("line", "")),
                index=str(entry.get("index", "")),
            )
            for entry in parse.get("sections") or []
            if isinstance(entry, dict)
        ]
        return Page(
            title=str(parse.get("title", name or "")),
            page_id=int(parse.get("pageid", page_id or 0) or 0),
            wikitext=str(parse.get("wikitext", "")),
            categories=categories,
            sections=sections,
        )
