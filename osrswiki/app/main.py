from __future__ import annotations

import argparse
import logging
import os
import sys
import time

from PySide6.QtWidgets import QApplication

from osrswiki.app import config
from osrswiki.app.ui.main_window import MainWindow


# ============================================================================
# DEBUG CONFIGURATION - Environment Variables
# ============================================================================
# OSRSWIKI_LOG_LEVEL              - Root log level (default WARNING)
# OSRSWIKI_DEBUG_NAV              - Per-keystroke navigator logging (needs DEBUG level)
# OSRSWIKI_DETAILED_PAGE_LOGGING  - Fetch/parse/render timings for every article
# OSRSWIKI_API_URL                - Wiki host, overrides api_base_url in the config file
# ============================================================================


def _configure_logging() -> None:
    level_name = os.getenv("OSRSWIKI_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Old School RuneScape wiki reader.")
    parser.add_argument("--page", help="Open this article at startup.")
    parser.add_argument("--search", help="Run this search at startup.")
    parser.add_argument("--api-url", help="Wiki host to query (overrides the config file).")
    parser.add_argument("--restore", action="store_true", help="Reopen the last article that was read.")
    return parser.parse_args(argv)


def _diag(msg: str) -> None:
    """Lightweight diagnostic logger for startup/teardown events."""
    timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
    print(f"[OsrsWikiDiag {timestamp}] {msg}", file=sys.stderr)


def main() -> None:
    args = _parse_args(sys.argv[1:])
    _configure_logging()
    config.init_settings()
    if args.api_url:
        os.environ["OSRSWIKI_API_URL"] = args.api_url
    _diag(f"Application starting against {config.load_api_base_url()}.")

    qt_app = QApplication(sys.argv)
    font = qt_app.font()
    font.setPointSize(config.load_font_point_size())
    qt_app.setFont(font)

    window = MainWindow()
    window.resize(1000, 700)
    window.show()

    start_page = args.page
    if not start_page and args.restore:
        start_page = config.load_last_page()
    if start_page:
        window.open_article(name=start_page)
    elif args.search:
        window.run_search(args.search)

    rc = qt_app.exec()
    _diag(f"Qt event loop exited with code {rc}.")
    sys.exit(rc)


if __name__ == "__main__":  # pragma: no cover - manual entry point
    main()
