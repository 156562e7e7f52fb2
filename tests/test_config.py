from __future__ import annotations

import json

from osrswiki.app import config
from osrswiki.wiki.client import DEFAULT_API_BASE


def test_defaults_without_config_file(isolated_config):
    assert not isolated_config.exists()
    assert config.load_api_base_url() == DEFAULT_API_BASE
    assert config.load_request_timeout() == 10.0
    assert config.load_scroll_context() == 5
    assert config.load_gutter_width() == 5
    assert config.load_font_point_size() == 11
    assert config.load_last_page() is None


def test_values_are_saved_and_merged(isolated_config):
    config.save_last_page("Varrock")
    config.save_scroll_context(3)
    config.save_font_point_size(14)
    config.save_api_base_url("https://mirror.example/ ")

    stored = json.loads(isolated_config.read_text(encoding="utf-8"))
    assert stored == {
        "last_page": "Varrock",
        "scroll_context": 3,
        "font_point_size": 14,
        "api_base_url": "https://mirror.example/",
    }
    assert config.load_last_page() == "Varrock"
    assert config.load_scroll_context() == 3
    assert config.load_font_point_size() == 14
    assert config.load_api_base_url() == "https://mirror.example"


def test_environment_overrides_api_url(monkeypatch):
    config.save_api_base_url("https://mirror.example")
    monkeypatch.setenv("OSRSWIKI_API_URL", "http://localhost:8080/")
    assert config.load_api_base_url() == "http://localhost:8080"


def test_out_of_range_values_are_clamped(isolated_config):
    isolated_config.write_text(
        json.dumps({"request_timeout": 900, "scroll_context": -2, "gutter_width": 40, "font_point_size": 2}),
        encoding="utf-8",
    )
    assert config.load_request_timeout() == 120.0
    assert config.load_scroll_context() == 0
    assert config.load_gutter_width() == 10
    assert config.load_font_point_size() == 6


def test_garbage_values_fall_back_to_defaults(isolated_config):
    isolated_config.write_text(
        json.dumps({"request_timeout": "soon", "gutter_width": None, "last_page": "   "}),
        encoding="utf-8",
    )
    assert config.load_request_timeout() == 10.0
    assert config.load_gutter_width() == 5
    assert config.load_last_page() is None


def test_unreadable_file_is_treated_as_empty(isolated_config):
    isolated_config.write_text("{not json", encoding="utf-8")
    assert config.load_scroll_context() == 5
    config.save_last_page("Lumbridge")
    assert config.load_last_page() == "Lumbridge"


def test_clearing_api_url_restores_default():
    config.save_api_base_url("https://mirror.example")
    config.save_api_base_url("")
    assert config.load_api_base_url() == DEFAULT_API_BASE
