from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from osrswiki.wiki.client import DEFAULT_API_BASE

GLOBAL_CONFIG = Path.home() / ".osrswiki_config.json"


def init_settings() -> None:
    GLOBAL_CONFIG.parent.mkdir(parents=True, exist_ok=True)


def _read_global_config() -> dict:
    """Return the parsed global config, or an empty dict on error/missing."""
    if not GLOBAL_CONFIG.exists():
        return {}
    try:
        payload = json.loads(GLOBAL_CONFIG.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _update_global_config(updates: dict) -> None:
    """Merge updates into global config file."""
    existing = _read_global_config()
    existing.update(updates)
    GLOBAL_CONFIG.write_text(json.dumps(existing, indent=2), encoding="utf-8")


def _load_int(key: str, default: int, low: int, high: int) -> int:
    payload = _read_global_config()
    try:
        value = int(payload.get(key, default))
    except (TypeError, ValueError):
        return default
    return max(low, min(high, value))


def load_api_base_url() -> str:
    """Return the wiki API host; OSRSWIKI_API_URL wins over the config file."""
    env_url = os.getenv("OSRSWIKI_API_URL")
    if env_url and env_url.strip():
        return env_url.strip().rstrip("/")
    url = _read_global_config().get("api_base_url")
    if isinstance(url, str) and url.strip():
        return url.strip().rstrip("/")
    return DEFAULT_API_BASE


def save_api_base_url(url: Optional[str]) -> None:
    _update_global_config({"api_base_url": (url or "").strip() or None})


def load_request_timeout() -> float:
    """Load the HTTP timeout in seconds (default: 10)."""
    payload = _read_global_config()
    try:
        timeout = float(payload.get("request_timeout", 10))
    except (TypeError, ValueError):
        return 10.0
    return max(1.0, min(120.0, timeout))


def load_scroll_context() -> int:
    """Lines kept above/below a link scrolled into view (default: 5)."""
    return _load_int("scroll_context", 5, 0, 50)


def save_scroll_context(lines: int) -> None:
    try:
        value = max(0, min(50, int(lines)))
    except (TypeError, ValueError):
        value = 5
    _update_global_config({"scroll_context": value})


def load_gutter_width() -> int:
    """Width of the line number column (default: 5, 0 hides it)."""
    return _load_int("gutter_width", 5, 0, 10)


def load_font_point_size() -> int:
    payload = _read_global_config()
    try:
        return max(6, int(payload.get("font_point_size", 11)))
    except (TypeError, ValueError):
        return 11


def save_font_point_size(size: int) -> None:
    try:
        value = max(6, int(size))
    except (TypeError, ValueError):
        value = 11
    _update_global_config({"font_point_size": value})


def load_last_page() -> Optional[str]:
    last = _read_global_config().get("last_page")
    return last if isinstance(last, str) and last.strip() else None


def save_last_page(title: Optional[str]) -> None:
    _update_global_config({"last_page": title})
