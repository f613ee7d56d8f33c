"""Text cleaning primitives shared by markup parsing and classification."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]+>")
_ENTITY_RE = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|[a-zA-Z][a-zA-Z0-9]*);")

NAMED_ENTITIES: dict[str, str] = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "lsquo": "‘",
    "rsquo": "’",
    "ldquo": "“",
    "rdquo": "”",
    "ndash": "–",
    "mdash": "—",
    "hellip": "…",
    "copy": "©",
}


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def _decode_reference(match: re.Match[str]) -> str:
    ref = match.group(1)
    if not ref.startswith("#"):
        return NAMED_ENTITIES.get(ref, match.group(0))

    try:
        code = int(ref[2:], 16) if ref[1] in "xX" else int(ref[1:])
        return chr(code) if code else match.group(0)
    except (ValueError, OverflowError):
        return match.group(0)


def decode_entities(text: str) -> str:
    """Decode the known named entities plus decimal and hex character references."""

    return _ENTITY_RE.sub(_decode_reference, text)


def strip_tags(markup: str) -> str:
    return _TAG_RE.sub(" ", markup)


def clean_text(markup: str) -> str:
    """Reduce a markup fragment to display text."""

    return normalize_whitespace(decode_entities(strip_tags(markup)))
