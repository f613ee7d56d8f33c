"""Stylesheet parsing, declaration mapping and style lookup."""

from .cascade import (
    StyleIndex,
    StyleIndexBuilder,
    build_style_index,
    create_style_lookup,
    lookup_style,
    media_condition_key,
    merge_styles,
)
from .declarations import SUPPORTED_KEYS, map_declaration, parse_declaration_block
from .defaults import DEFAULT_STYLES, lookup_with_defaults
from .models import StyleMapping, StyleValue, TransformKind, TransformOp
from .transforms import parse_transform
from .units import BASE_FONT_SIZE_PT, convert_unit

__all__ = [
    "BASE_FONT_SIZE_PT",
    "DEFAULT_STYLES",
    "SUPPORTED_KEYS",
    "StyleIndex",
    "StyleIndexBuilder",
    "StyleMapping",
    "StyleValue",
    "TransformKind",
    "TransformOp",
    "build_style_index",
    "convert_unit",
    "create_style_lookup",
    "lookup_style",
    "lookup_with_defaults",
    "map_declaration",
    "media_condition_key",
    "merge_styles",
    "parse_declaration_block",
    "parse_transform",
]
