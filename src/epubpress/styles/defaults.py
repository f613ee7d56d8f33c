"""Fallback element styles applied beneath stylesheet-derived styles."""

from __future__ import annotations

from typing import Sequence

from epubpress.styles.cascade import StyleDict, StyleIndex, lookup_style
from epubpress.styles.models import StyleValue

DEFAULT_STYLES: dict[str, dict[str, StyleValue]] = {
    "p": {"textAlign": "justify", "marginBottom": 0.0, "marginTop": 0.0},
    "blockquote": {"marginLeft": 16.5, "marginRight": 16.5, "marginTop": 11.0, "marginBottom": 11.0},
    "h1": {"fontSize": 22.0, "fontWeight": "bold", "marginTop": 16.5, "marginBottom": 11.0},
    "h2": {"fontSize": 18.0, "fontWeight": "bold", "marginTop": 14.0, "marginBottom": 8.0},
    "h3": {"fontSize": 14.0, "fontWeight": "bold", "marginTop": 11.0, "marginBottom": 6.0},
    "h4": {"fontSize": 12.0, "fontWeight": "bold", "marginTop": 8.0, "marginBottom": 4.0},
    "em": {"fontStyle": "italic"},
    "i": {"fontStyle": "italic"},
    "strong": {"fontWeight": "bold"},
    "b": {"fontWeight": "bold"},
}


def lookup_with_defaults(index: StyleIndex, tag_name: str, class_list: Sequence[str] = ()) -> StyleDict:
    defaults = DEFAULT_STYLES.get(tag_name.lower(), {})
    return {**defaults, **lookup_style(index, tag_name, class_list)}
