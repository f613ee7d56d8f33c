from __future__ import annotations

import logging

import pytest

from epubpress.config import (
    DEFAULT_AUTHOR,
    DEFAULT_MAX_FRAGMENT_CHARS,
    DEFAULT_TITLE,
    ConversionSettings,
    configure_parser_logging,
)


def test_settings_defaults_from_empty_env() -> None:
    settings = ConversionSettings.from_env({})

    assert settings.default_title == DEFAULT_TITLE
    assert settings.default_author == DEFAULT_AUTHOR
    assert settings.max_fragment_chars == DEFAULT_MAX_FRAGMENT_CHARS
    assert settings.css_log_level_value == logging.CRITICAL


def test_settings_load_overrides_from_env() -> None:
    settings = ConversionSettings.from_env(
        {
            "EPUBPRESS_DEFAULT_TITLE": " Draft ",
            "EPUBPRESS_DEFAULT_AUTHOR": "Nobody",
            "EPUBPRESS_MAX_FRAGMENT_CHARS": "0",
            "EPUBPRESS_CSS_LOG_LEVEL": "warning",
        }
    )

    assert settings.default_title == "Draft"
    assert settings.default_author == "Nobody"
    assert settings.max_fragment_chars == 0
    assert settings.css_log_level == "WARNING"
    assert settings.css_log_level_value == logging.WARNING


def test_settings_reject_invalid_values() -> None:
    with pytest.raises(ValueError, match="EPUBPRESS_MAX_FRAGMENT_CHARS"):
        ConversionSettings.from_env({"EPUBPRESS_MAX_FRAGMENT_CHARS": "-1"})

    with pytest.raises(ValueError, match="EPUBPRESS_MAX_FRAGMENT_CHARS"):
        ConversionSettings.from_env({"EPUBPRESS_MAX_FRAGMENT_CHARS": "lots"})

    with pytest.raises(ValueError, match="EPUBPRESS_DEFAULT_TITLE"):
        ConversionSettings.from_env({"EPUBPRESS_DEFAULT_TITLE": "   "})

    with pytest.raises(ValueError, match="EPUBPRESS_CSS_LOG_LEVEL"):
        ConversionSettings.from_env({"EPUBPRESS_CSS_LOG_LEVEL": "LOUD"})


def test_settings_read_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EPUBPRESS_DEFAULT_AUTHOR", "Env Author")

    assert ConversionSettings.from_env().default_author == "Env Author"


def test_parser_logging_is_configured_explicitly(monkeypatch: pytest.MonkeyPatch) -> None:
    applied: list[int | str] = []
    monkeypatch.setattr("epubpress.config.set_parser_log_level", applied.append)

    configure_parser_logging(ConversionSettings.from_env({"EPUBPRESS_CSS_LOG_LEVEL": "error"}))

    assert applied == [logging.ERROR]
