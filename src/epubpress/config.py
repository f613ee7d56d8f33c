"""Runtime configuration for book assembly."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Mapping

from epubpress.styles.cascade import set_parser_log_level


DEFAULT_TITLE = "Untitled"
DEFAULT_AUTHOR = "Unknown Author"
DEFAULT_MAX_FRAGMENT_CHARS = 5_000_000
DEFAULT_CSS_LOG_LEVEL = "CRITICAL"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def _parse_non_negative_int(*, name: str, raw_value: str) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < 0:
        raise ValueError(f"{name} must be >= 0")
    return value


@dataclass(frozen=True, slots=True)
class ConversionSettings:
    """Validated settings for turning a book source into chapters."""

    default_title: str = DEFAULT_TITLE
    default_author: str = DEFAULT_AUTHOR
    max_fragment_chars: int = DEFAULT_MAX_FRAGMENT_CHARS
    css_log_level: str = DEFAULT_CSS_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ConversionSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        default_title = source.get("EPUBPRESS_DEFAULT_TITLE", DEFAULT_TITLE).strip()
        default_author = source.get("EPUBPRESS_DEFAULT_AUTHOR", DEFAULT_AUTHOR).strip()
        max_chars_raw = source.get("EPUBPRESS_MAX_FRAGMENT_CHARS", str(DEFAULT_MAX_FRAGMENT_CHARS)).strip()
        css_log_level = source.get("EPUBPRESS_CSS_LOG_LEVEL", DEFAULT_CSS_LOG_LEVEL).strip().upper()

        if not default_title:
            raise ValueError("EPUBPRESS_DEFAULT_TITLE cannot be empty")
        if not default_author:
            raise ValueError("EPUBPRESS_DEFAULT_AUTHOR cannot be empty")
        if not max_chars_raw:
            raise ValueError("EPUBPRESS_MAX_FRAGMENT_CHARS cannot be empty")
        if css_log_level not in _LOG_LEVELS:
            allowed = ", ".join(_LOG_LEVELS)
            raise ValueError(f"EPUBPRESS_CSS_LOG_LEVEL must be one of: {allowed}")

        max_fragment_chars = _parse_non_negative_int(name="EPUBPRESS_MAX_FRAGMENT_CHARS", raw_value=max_chars_raw)

        return cls(
            default_title=default_title,
            default_author=default_author,
            max_fragment_chars=max_fragment_chars,
            css_log_level=css_log_level,
        )

    @property
    def css_log_level_value(self) -> int:
        return logging.getLevelName(self.css_log_level)


def configure_parser_logging(settings: ConversionSettings) -> None:
    """Apply ``settings.css_log_level`` to the process-wide cssutils logger.

    Call once at startup; assembling a book never changes the level.
    """

    set_parser_log_level(settings.css_log_level_value)
