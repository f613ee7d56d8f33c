"""Mapping of CSS declarations onto the layout engine's style vocabulary.

Every declaration either maps to one or more supported style keys or is
dropped. Nothing here raises: invalid values discard the declaration and
unrecognized tokens pass through as strings.
"""

from __future__ import annotations

import re

from epubpress.styles.models import StyleValue
from epubpress.styles.transforms import parse_transform
from epubpress.styles.units import convert_unit

SUPPORTED_KEYS = frozenset(
    {
        # Flexbox
        "alignContent", "alignItems", "alignSelf", "flex", "flexDirection",
        "flexWrap", "flexFlow", "flexGrow", "flexShrink", "flexBasis",
        "justifyContent", "gap", "rowGap", "columnGap",
        # Layout
        "bottom", "display", "left", "position", "right", "top", "overflow", "zIndex",
        # Dimension
        "height", "maxHeight", "maxWidth", "minHeight", "minWidth", "width",
        # Color
        "backgroundColor", "color", "opacity",
        # Text; font size and family belong to the renderer
        "letterSpacing", "maxLines", "textAlign", "textDecoration", "textDecorationColor",
        "textDecorationStyle", "textIndent", "textOverflow", "textTransform",
        "fontWeight", "fontStyle",
        # Object
        "objectFit", "objectPosition",
        # Box
        "margin", "marginHorizontal", "marginVertical",
        "marginTop", "marginRight", "marginBottom", "marginLeft",
        "padding", "paddingHorizontal", "paddingVertical",
        "paddingTop", "paddingRight", "paddingBottom", "paddingLeft",
        # Transforms
        "transform", "transformOrigin",
        # Borders
        "border", "borderColor", "borderStyle", "borderWidth",
        "borderTop", "borderTopColor", "borderTopStyle", "borderTopWidth",
        "borderRight", "borderRightColor", "borderRightStyle", "borderRightWidth",
        "borderBottom", "borderBottomColor", "borderBottomStyle", "borderBottomWidth",
        "borderLeft", "borderLeftColor", "borderLeftStyle", "borderLeftWidth",
        "borderTopLeftRadius", "borderTopRightRadius",
        "borderBottomRightRadius", "borderBottomLeftRadius",
    }
)

PROPERTY_MAP: dict[str, str] = {
    "text-indent": "textIndent",
    "text-align": "textAlign",
    "text-decoration": "textDecoration",
    "text-decoration-color": "textDecorationColor",
    "text-decoration-style": "textDecorationStyle",
    "text-transform": "textTransform",
    "text-overflow": "textOverflow",
    "letter-spacing": "letterSpacing",
    "max-lines": "maxLines",
    "font-weight": "fontWeight",
    "font-style": "fontStyle",
    "background-color": "backgroundColor",
    "object-fit": "objectFit",
    "object-position": "objectPosition",
    "margin-top": "marginTop",
    "margin-right": "marginRight",
    "margin-bottom": "marginBottom",
    "margin-left": "marginLeft",
    "padding-top": "paddingTop",
    "padding-right": "paddingRight",
    "padding-bottom": "paddingBottom",
    "padding-left": "paddingLeft",
    "transform-origin": "transformOrigin",
    "border-top-left-radius": "borderTopLeftRadius",
    "border-top-right-radius": "borderTopRightRadius",
    "border-bottom-right-radius": "borderBottomRightRadius",
    "border-bottom-left-radius": "borderBottomLeftRadius",
    "max-width": "maxWidth",
    "max-height": "maxHeight",
    "min-width": "minWidth",
    "min-height": "minHeight",
    "flex-direction": "flexDirection",
    "flex-wrap": "flexWrap",
    "flex-flow": "flexFlow",
    "flex-grow": "flexGrow",
    "flex-shrink": "flexShrink",
    "flex-basis": "flexBasis",
    "justify-content": "justifyContent",
    "align-items": "alignItems",
    "align-self": "alignSelf",
    "align-content": "alignContent",
    "row-gap": "rowGap",
    "column-gap": "columnGap",
    "z-index": "zIndex",
}

# The target format has no cascade inheritance.
_CASCADE_KEYWORDS = frozenset({"inherit", "initial", "unset", "revert"})

_ENUMERATED_VALUES: dict[str, frozenset[str]] = {
    "text-align": frozenset({"left", "right", "center", "justify"}),
    "text-decoration": frozenset({"none", "underline", "line-through", "underline line-through"}),
    "text-transform": frozenset({"none", "uppercase", "lowercase", "capitalize"}),
    "object-fit": frozenset({"contain", "cover", "fill", "none", "scale-down"}),
    "font-style": frozenset({"normal", "italic", "oblique"}),
    # Only flow layout survives: hiding text is worse than ignoring the rule.
    "display": frozenset({"flex"}),
    "position": frozenset({"absolute", "relative"}),
}

_RAW_STRING_PROPERTIES = frozenset({"transform-origin", "object-position"})
_BOX_SHORTHANDS = frozenset({"margin", "padding"})

_CAMEL_RE = re.compile(r"-([a-z])")
_IMPORTANT_RE = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)
_SPACES_RE = re.compile(r"\s+")


def camel_case(name: str) -> str:
    """Convert a kebab-case property name to camelCase."""

    return _CAMEL_RE.sub(lambda match: match.group(1).upper(), name)


def _box_shorthand(key: str, raw_value: str) -> dict[str, StyleValue]:
    parts = [convert_unit(token) for token in _SPACES_RE.split(raw_value.strip())]

    if len(parts) == 2:
        return {f"{key}Vertical": parts[0], f"{key}Horizontal": parts[1]}
    if len(parts) == 3:
        return {f"{key}Top": parts[0], f"{key}Horizontal": parts[1], f"{key}Bottom": parts[2]}
    if len(parts) == 4:
        return {
            f"{key}Top": parts[0],
            f"{key}Right": parts[1],
            f"{key}Bottom": parts[2],
            f"{key}Left": parts[3],
        }
    return {key: parts[0]}


def _font_weight(raw_value: str) -> StyleValue:
    if raw_value in {"bold", "normal"}:
        return raw_value
    try:
        return float(int(raw_value))
    except ValueError:
        return raw_value


def map_declaration(property_name: str, raw_value: str) -> dict[str, StyleValue] | None:
    """Map one CSS declaration to style entries, or ``None`` when it has no effect."""

    name = property_name.strip().lower()
    value = _IMPORTANT_RE.sub("", raw_value).strip()
    if not name or not value:
        return None

    key = PROPERTY_MAP.get(name) or camel_case(name)
    if key not in SUPPORTED_KEYS:
        return None
    if value.lower() in _CASCADE_KEYWORDS:
        return None

    allowed = _ENUMERATED_VALUES.get(name)
    if allowed is not None:
        keyword = _SPACES_RE.sub(" ", value.lower())
        return {key: keyword} if keyword in allowed else None

    if name == "font-weight":
        return {key: _font_weight(value.lower())}
    if name in _BOX_SHORTHANDS:
        return _box_shorthand(key, value)
    if name == "transform":
        ops = parse_transform(value)
        return {key: ops} if ops is not None else None
    if name in _RAW_STRING_PROPERTIES:
        return {key: value}

    return {key: convert_unit(value)}


def parse_declaration_block(text: str) -> dict[str, StyleValue]:
    """Convert a ``prop: value; ...`` block into a style mapping.

    Later declarations overwrite earlier ones key by key.
    """

    style: dict[str, StyleValue] = {}
    for declaration in text.split(";"):
        if ":" not in declaration:
            continue
        property_name, raw_value = declaration.split(":", 1)
        converted = map_declaration(property_name, raw_value)
        if converted:
            style.update(converted)
    return style
