from __future__ import annotations

from epubpress.styles.cascade import build_style_index
from epubpress.styles.defaults import DEFAULT_STYLES, lookup_with_defaults


def test_defaults_apply_without_stylesheet() -> None:
    index = build_style_index("")

    assert lookup_with_defaults(index, "em") == {"fontStyle": "italic"}
    assert lookup_with_defaults(index, "P") == DEFAULT_STYLES["p"]
    assert lookup_with_defaults(index, "section") == {}


def test_stylesheet_values_override_defaults() -> None:
    index = build_style_index("p { text-align: left } .quiet { font-weight: normal }")

    style = lookup_with_defaults(index, "p", ["quiet"])

    assert style["textAlign"] == "left"
    assert style["fontWeight"] == "normal"
    assert style["marginTop"] == 0.0
