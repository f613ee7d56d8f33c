"""Length/number token conversion into layout points.

Conversion never fails: anything that is not a recognized number or length
is returned as the trimmed input string.
"""

from __future__ import annotations

import re

BASE_FONT_SIZE_PT = 11.0

# Points per unit.
_UNIT_FACTORS: dict[str, float] = {
    "em": BASE_FONT_SIZE_PT,
    "rem": BASE_FONT_SIZE_PT,
    "px": 0.75,
    "pt": 1.0,
    "in": 72.0,
    "mm": 2.83465,
    "cm": 28.3465,
}

_PASSTHROUGH_KEYWORDS = frozenset({"inherit", "initial", "unset", "auto"})
_PRECISION = 6

_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?$")
_LENGTH_RE = re.compile(r"^(-?\d+\.?\d*)(em|rem|px|pt|in|mm|cm)$")


def _round(value: float) -> float:
    return round(value, _PRECISION)


def convert_unit(raw: str) -> float | str:
    """Convert a CSS number or length token to points.

    Bare numbers become floats, absolute and font-relative lengths are scaled
    to points, and percentages, viewport units and keywords pass through.
    """

    if not raw:
        return raw
    if raw in _PASSTHROUGH_KEYWORDS:
        return raw

    token = raw.strip()
    if _NUMBER_RE.match(token):
        return float(token)
    if token.endswith("%"):
        return token

    match = _LENGTH_RE.match(token)
    if match:
        return _round(float(match.group(1)) * _UNIT_FACTORS[match.group(2)])

    # vw/vh are understood by the renderer as-is; so is every keyword.
    return token
