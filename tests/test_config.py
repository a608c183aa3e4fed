"""Tests for TOD TV plugin configuration."""

import pytest
from pydantic import ValidationError

from todtv.plugins.base import DEFAULT_USER_AGENT
from todtv.plugins.todtv import TodTvConfig, get_default_config, validate_config


def test_defaults():
    config = get_default_config()

    assert config["enabled"] is True
    assert config["timeout"] == 30
    assert config["rate_limit"] == 0.5
    assert config["main_url"] == "https://www.todtv.com.tr"
    assert config["search_path"] == "/arama"
    assert config["user_agent"] == DEFAULT_USER_AGENT
    assert config["auth_token"] is None


def test_main_url_is_normalized():
    assert TodTvConfig(main_url=" https://www.todtv.com.tr/ ").main_url == "https://www.todtv.com.tr"


def test_main_url_requires_scheme():
    with pytest.raises(ValidationError):
        TodTvConfig(main_url="www.todtv.com.tr")


def test_search_path_gets_leading_slash():
    assert TodTvConfig(search_path="ara").search_path == "/ara"


@pytest.mark.parametrize("overrides", [
    {"timeout": 1},
    {"timeout": 500},
    {"rate_limit": -1},
    {"user_agent": "curl"},
])
def test_validate_config_rejects(overrides):
    with pytest.raises(ValueError):
        validate_config({**get_default_config(), **overrides})


def test_credentials():
    assert not TodTvConfig().has_credentials
    assert not TodTvConfig(email="izleyici@example.com").has_credentials
    assert TodTvConfig(email="izleyici@example.com", password="gizli").has_credentials


def test_defaults_hold_only_read_settings():
    assert set(get_default_config()) == {
        "enabled", "timeout", "rate_limit", "user_agent",
        "main_url", "search_path", "auth_token", "email", "password",
    }
