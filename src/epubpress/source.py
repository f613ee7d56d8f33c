"""Contract for the collaborator that unpacks a book archive."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence, runtime_checkable


@dataclass(frozen=True, slots=True)
class BookMetadata:
    """Archive-level metadata; empty strings mean the value is absent."""

    title: str = ""
    author: str = ""


@runtime_checkable
class BookSource(Protocol):
    """Protocol every archive reader must implement."""

    def metadata(self) -> BookMetadata:
        """Return the document title and author."""

    def stylesheet_text(self) -> str:
        """Return all stylesheets in manifest order, newline-joined."""

    def spine_documents(self) -> Sequence[str | None]:
        """Return the raw markup of every spine entry in reading order."""


@dataclass(slots=True)
class StaticBookSource:
    """In-memory :class:`BookSource` for already extracted content."""

    documents: list[str | None] = field(default_factory=list)
    stylesheets: list[str] = field(default_factory=list)
    title: str = ""
    author: str = ""

    def metadata(self) -> BookMetadata:
        return BookMetadata(title=self.title, author=self.author)

    def stylesheet_text(self) -> str:
        return "\n".join(self.stylesheets)

    def spine_documents(self) -> Sequence[str | None]:
        return list(self.documents)
