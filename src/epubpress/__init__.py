"""E-book stylesheet cascade and tolerant chapter markup parsing."""

from .assembly import Book, BookAssembler, BookAssemblyError, assemble_book
from .config import ConversionSettings, configure_parser_logging
from .markup import Chapter, ChapterRole, ContainerNode, ContentNode, MarkupTreeBuilder, TextNode, parse_fragment
from .source import BookMetadata, BookSource, StaticBookSource
from .styles import StyleIndex, build_style_index, convert_unit, create_style_lookup, map_declaration, parse_transform

__all__ = [
    "Book",
    "BookAssembler",
    "BookAssemblyError",
    "BookMetadata",
    "BookSource",
    "Chapter",
    "ChapterRole",
    "ContainerNode",
    "ContentNode",
    "ConversionSettings",
    "MarkupTreeBuilder",
    "StaticBookSource",
    "StyleIndex",
    "TextNode",
    "assemble_book",
    "build_style_index",
    "configure_parser_logging",
    "convert_unit",
    "create_style_lookup",
    "map_declaration",
    "parse_fragment",
    "parse_transform",
]
