"""Chapter markup parsing: text cleaning, tokenizing, classification and tree building."""

from .classify import classify_role, extract_title_and_author, is_titlepage
from .models import (
    Chapter,
    ChapterRole,
    ContainerNode,
    ContentNode,
    ParsedFragment,
    TextNode,
    collect_text,
    has_text_content,
    iter_text_nodes,
)
from .text import clean_text, decode_entities, normalize_whitespace, strip_tags
from .tree import MarkupTreeBuilder, build_content_tree, parse_fragment

__all__ = [
    "Chapter",
    "ChapterRole",
    "ContainerNode",
    "ContentNode",
    "MarkupTreeBuilder",
    "ParsedFragment",
    "TextNode",
    "build_content_tree",
    "classify_role",
    "clean_text",
    "collect_text",
    "decode_entities",
    "extract_title_and_author",
    "has_text_content",
    "iter_text_nodes",
    "is_titlepage",
    "normalize_whitespace",
    "parse_fragment",
    "strip_tags",
]
