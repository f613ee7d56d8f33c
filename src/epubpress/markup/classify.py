"""Heuristic title, author and document-role detection for chapter markup."""

from __future__ import annotations

import re

from epubpress.markup.models import ChapterRole
from epubpress.markup.tokenizer import visible_text


def _epub_type_re(pattern: str) -> re.Pattern[str]:
    return re.compile(rf"""epub:type=["'][^"']*{pattern}[^"']*["']""")


_TITLEPAGE_RE = _epub_type_re("titlepage")
_FRONT_MATTER_MARKER_RE = _epub_type_re("(?:copyright|toc|dedication|preface|foreword|prologue)")
_BACK_MATTER_MARKER_RE = _epub_type_re("(?:afterword|colophon|acknowledgment|epilogue)")

_FRONT_MATTER_TITLE_RE = re.compile(
    r"^(copyright|table of contents|contents|dedication|preface|foreword|introduction|prologue)$",
    re.IGNORECASE,
)
_BACK_MATTER_TITLE_RE = re.compile(
    r"^(about the author|acknowledgments?|afterword|epilogue|appendix|notes|bibliography|index)$",
    re.IGNORECASE,
)

_H1_RE = re.compile(r"<h1\b[^>]*>([\s\S]*?)</h1\s*>", re.IGNORECASE)
_H2_RE = re.compile(r"<h2\b[^>]*>([\s\S]*?)</h2\s*>", re.IGNORECASE)
_TITLE_RE = re.compile(r"<title\b[^>]*>([^<]+)</title\s*>", re.IGNORECASE)


def is_titlepage(markup: str) -> bool:
    return bool(_TITLEPAGE_RE.search(markup))


def extract_title_and_author(markup: str) -> tuple[str, str | None]:
    """Return ``(title, author)``; the author is only read from title pages.

    The first ``h1`` wins. Without one, non-title pages fall back to the
    document ``<title>``, and an ``h2`` overrides that fallback.
    """

    titlepage = is_titlepage(markup)
    h1 = _H1_RE.search(markup)
    h2 = _H2_RE.search(markup)

    title = ""
    author: str | None = None

    if h1:
        title = visible_text(h1.group(1))
    elif not titlepage:
        head_title = _TITLE_RE.search(markup)
        if head_title:
            title = visible_text(head_title.group(1))

    if titlepage and h2:
        author = visible_text(h2.group(1)) or None
    elif not titlepage and h2 and not h1:
        title = visible_text(h2.group(1))

    return title, author


def classify_role(markup: str, title: str = "") -> ChapterRole:
    """Classify a chapter from ``epub:type`` markers, falling back to its title."""

    if is_titlepage(markup):
        return ChapterRole.TITLEPAGE

    stripped_title = title.strip()
    if _FRONT_MATTER_MARKER_RE.search(markup) or _FRONT_MATTER_TITLE_RE.match(stripped_title):
        return ChapterRole.FRONTMATTER
    if _BACK_MATTER_MARKER_RE.search(markup) or _BACK_MATTER_TITLE_RE.match(stripped_title):
        return ChapterRole.BACKMATTER
    return ChapterRole.CHAPTER
