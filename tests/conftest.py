from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from osrswiki.app import config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.osrswiki_config.json."""
    path = tmp_path / "osrswiki_config.json"
    monkeypatch.setattr(config, "GLOBAL_CONFIG", path)
    monkeypatch.delenv("OSRSWIKI_API_URL", raising=False)
    return path
