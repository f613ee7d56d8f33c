"""Turn a book source into styled, ordered chapters for the renderer."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Sequence

from epubpress.config import ConversionSettings
from epubpress.markup.models import Chapter, ChapterRole, has_text_content
from epubpress.markup.tree import MarkupTreeBuilder
from epubpress.source import BookSource
from epubpress.styles.cascade import StyleDict, StyleIndex, build_style_index
from epubpress.styles.defaults import lookup_with_defaults

logger = logging.getLogger(__name__)

_SECTION_ORDER = (
    ChapterRole.TITLEPAGE,
    ChapterRole.FRONTMATTER,
    ChapterRole.CHAPTER,
    ChapterRole.BACKMATTER,
)


@dataclass(slots=True)
class BookAssemblyError(Exception):
    """Raised when a source carries no usable chapter content."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class Book:
    """Assembled book: metadata, chapters in spine order and their style index."""

    title: str
    author: str
    chapters: tuple[Chapter, ...]
    styles: StyleIndex

    def lookup(self, tag_name: str, class_list: Sequence[str] = ()) -> StyleDict:
        """Effective style for one element, default element styles included."""

        return lookup_with_defaults(self.styles, tag_name, class_list)

    def chapters_with_role(self, role: ChapterRole) -> tuple[Chapter, ...]:
        return tuple(chapter for chapter in self.chapters if chapter.role is role)

    def sections(self) -> list[tuple[ChapterRole, tuple[Chapter, ...]]]:
        """Non-empty role groups in layout order."""

        grouped = [(role, self.chapters_with_role(role)) for role in _SECTION_ORDER]
        return [(role, chapters) for role, chapters in grouped if chapters]


class BookAssembler:
    """Build a :class:`Book` from any :class:`BookSource` implementation."""

    def __init__(
        self,
        settings: ConversionSettings | None = None,
        *,
        tree_builder: MarkupTreeBuilder | None = None,
    ) -> None:
        self._settings = settings or ConversionSettings()
        self._tree_builder = tree_builder or MarkupTreeBuilder()

    @property
    def settings(self) -> ConversionSettings:
        return self._settings

    def assemble(self, source: BookSource) -> Book:
        if not isinstance(source, BookSource):
            raise BookAssemblyError(f"Unsupported book source: {type(source).__name__}")

        metadata = source.metadata()
        # The index must be complete before any chapter is looked up.
        styles = build_style_index(source.stylesheet_text())

        documents = list(source.spine_documents())
        if not documents:
            raise BookAssemblyError("Book source has no spine documents")

        chapters: list[Chapter] = []
        for position, document in enumerate(documents):
            chapter = self._build_chapter(position, document, len(chapters))
            if chapter is not None:
                chapters.append(chapter)

        if not chapters:
            raise BookAssemblyError(f"No chapters found in {len(documents)} spine document(s)")

        title = metadata.title.strip() or self._settings.default_title
        author = metadata.author.strip() or self._settings.default_author
        logger.info("Assembled %r by %s: %d of %d spine documents kept", title, author, len(chapters), len(documents))
        return Book(title=title, author=author, chapters=tuple(chapters), styles=styles)

    def _build_chapter(self, position: int, document: str | None, kept: int) -> Chapter | None:
        markup = self._truncate(position, document or "")
        parsed = self._tree_builder.build(markup)

        if parsed.role is not ChapterRole.TITLEPAGE and not has_text_content(parsed.tree):
            logger.debug("Skipping spine document %d: no text content", position)
            return None

        return Chapter(
            title=parsed.title or f"Chapter {kept + 1}",
            role=parsed.role,
            content=parsed.tree,
            author=parsed.author,
            source_index=position,
        )

    def _truncate(self, position: int, markup: str) -> str:
        limit = self._settings.max_fragment_chars
        if limit and len(markup) > limit:
            logger.warning("Spine document %d exceeds %d chars; dropping the tail", position, limit)
            return markup[:limit]
        return markup


def assemble_book(source: BookSource, settings: ConversionSettings | None = None) -> Book:
    return BookAssembler(settings).assemble(source)
