from __future__ import annotations

from epubpress.styles.declarations import camel_case, map_declaration, parse_declaration_block
from epubpress.styles.models import TransformKind, TransformOp


def test_display_keeps_only_flex() -> None:
    assert map_declaration("display", "none") is None
    assert map_declaration("display", "block") is None
    assert map_declaration("display", "flex") == {"display": "flex"}


def test_margin_shorthand_expands_by_arity() -> None:
    assert map_declaration("margin", "1 2 3 4") == {
        "marginTop": 1.0,
        "marginRight": 2.0,
        "marginBottom": 3.0,
        "marginLeft": 4.0,
    }
    assert map_declaration("padding", "1em 2px") == {"paddingVertical": 11.0, "paddingHorizontal": 1.5}
    assert map_declaration("margin", "0 auto 1pt") == {
        "marginTop": 0.0,
        "marginHorizontal": "auto",
        "marginBottom": 1.0,
    }
    assert map_declaration("margin", "2em") == {"margin": 22.0}


def test_shorthand_order_is_top_right_bottom_left() -> None:
    result = map_declaration("margin", "1px 2px 3px 4px")

    assert list(result) == ["marginTop", "marginRight", "marginBottom", "marginLeft"]


def test_enumerated_properties_validate_keywords() -> None:
    assert map_declaration("text-align", "CENTER") == {"textAlign": "center"}
    assert map_declaration("text-align", "start") is None
    assert map_declaration("text-decoration", "underline  line-through") == {
        "textDecoration": "underline line-through"
    }
    assert map_declaration("object-fit", "scale-down") == {"objectFit": "scale-down"}
    assert map_declaration("position", "fixed") is None
    assert map_declaration("font-style", "italic") == {"fontStyle": "italic"}


def test_cascade_keywords_drop_the_declaration() -> None:
    assert map_declaration("color", "inherit") is None
    assert map_declaration("margin-top", "initial") is None


def test_unsupported_properties_are_ignored() -> None:
    assert map_declaration("font-size", "12pt") is None
    assert map_declaration("font-family", "serif") is None
    assert map_declaration("line-height", "1.4") is None
    assert map_declaration("-webkit-hyphens", "auto") is None
    assert map_declaration("color", "") is None


def test_values_are_unit_converted_and_priority_stripped() -> None:
    assert map_declaration("text-indent", "1.5em") == {"textIndent": 16.5}
    assert map_declaration("color", "#333 !important") == {"color": "#333"}
    assert map_declaration("width", "80%") == {"width": "80%"}
    assert map_declaration("max-width", "100px") == {"maxWidth": 75.0}


def test_font_weight_and_raw_string_properties() -> None:
    assert map_declaration("font-weight", "Bold") == {"fontWeight": "bold"}
    assert map_declaration("font-weight", "600") == {"fontWeight": 600.0}
    assert map_declaration("font-weight", "bolder") == {"fontWeight": "bolder"}
    assert map_declaration("transform-origin", "top left") == {"transformOrigin": "top left"}
    assert map_declaration("object-position", "50% 10px") == {"objectPosition": "50% 10px"}


def test_transform_declaration_parses_operations() -> None:
    assert map_declaration("transform", "rotate(90deg)") == {
        "transform": (TransformOp(TransformKind.ROTATE, "90deg"),)
    }
    assert map_declaration("transform", "none") is None


def test_declaration_block_later_entries_win() -> None:
    style = parse_declaration_block("color: red; margin: 1pt 2pt; color: blue; display: none; junk")

    assert style == {"color": "blue", "marginVertical": 1.0, "marginHorizontal": 2.0}


def test_camel_case_conversion() -> None:
    assert camel_case("border-top-left-radius") == "borderTopLeftRadius"
    assert camel_case("color") == "color"
