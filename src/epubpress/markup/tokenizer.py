"""Forward-only scanner splitting markup into tag and text events.

The scanner never backtracks and never raises. Comments, doctype and
processing instructions are dropped; a ``<`` that does not start a tag-like
token is ordinary text. Elements named in ``skip`` are consumed whole,
content included, and reported as a single :class:`SkippedElement`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Collection, Iterable, Iterator

from epubpress.markup.text import decode_entities, normalize_whitespace

_NAME_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9:_.-]*")
_CLASS_ATTR_RE = re.compile(r"""(?:^|\s)class\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>/]+))""", re.IGNORECASE)

RAW_TEXT_TAGS = frozenset({"script", "style"})


@dataclass(frozen=True, slots=True)
class TextRun:
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class OpenTag:
    name: str
    classes: tuple[str, ...]
    start: int
    end: int
    self_closing: bool = False


@dataclass(frozen=True, slots=True)
class CloseTag:
    name: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class SkippedElement:
    name: str
    start: int
    end: int


Token = TextRun | OpenTag | CloseTag | SkippedElement


def parse_classes(attributes: str) -> tuple[str, ...]:
    match = _CLASS_ATTR_RE.search(attributes)
    if not match:
        return ()
    value = next(group for group in match.groups() if group is not None)
    return tuple(value.split())


def _find_tag_end(markup: str, start: int) -> int:
    """Index of the ``>`` closing the tag opened at ``start``, honoring quotes, or -1."""

    quote: str | None = None
    for index in range(start, len(markup)):
        char = markup[index]
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == ">":
            return index
    return -1


def find_close_tag(markup: str, name: str, start: int) -> tuple[int, int] | None:
    """Locate the next ``</name>`` at or after ``start``, case-insensitively."""

    pattern = re.compile(rf"</\s*{re.escape(name)}\s*>", re.IGNORECASE)
    match = pattern.search(markup, start)
    if match is None:
        return None
    return match.start(), match.end()


def iter_tokens(markup: str, skip: Collection[str] = ()) -> Iterator[Token]:
    position = 0
    text_start = 0
    length = len(markup)

    def flush(end: int) -> Iterator[Token]:
        if end > text_start:
            yield TextRun(text_start, end)

    while position < length:
        lt = markup.find("<", position)
        if lt == -1:
            break

        if markup.startswith("<!--", lt):
            close = markup.find("-->", lt + 4)
            end = length if close == -1 else close + 3
            yield from flush(lt)
            position = text_start = end
            continue

        if markup.startswith("<![CDATA[", lt):
            close = markup.find("]]>", lt + 9)
            end = length if close == -1 else close + 3
            yield from flush(lt)
            position = text_start = end
            continue

        if markup.startswith("<!", lt) or markup.startswith("<?", lt):
            close = markup.find(">", lt + 2)
            end = length if close == -1 else close + 1
            yield from flush(lt)
            position = text_start = end
            continue

        is_close = markup.startswith("</", lt)
        name_start = lt + 2 if is_close else lt + 1
        if is_close:
            while name_start < length and markup[name_start].isspace():
                name_start += 1
        name_match = _NAME_RE.match(markup, name_start)
        if name_match is None:
            position = lt + 1
            continue

        gt = _find_tag_end(markup, name_match.end())
        if gt == -1:
            # Unbalanced quote inside the tag.
            gt = markup.find(">", name_match.end())
        if gt == -1:
            # Unterminated tag: the tail cannot be tracked any further.
            yield from flush(lt)
            return

        name = name_match.group(0).lower()
        yield from flush(lt)
        position = text_start = gt + 1

        if is_close:
            yield CloseTag(name, lt, gt + 1)
            continue

        attributes = markup[name_match.end() : gt]
        self_closing = attributes.rstrip().endswith("/")

        if name in skip and not self_closing:
            close_span = find_close_tag(markup, name, gt + 1)
            end = close_span[1] if close_span else gt + 1
            yield SkippedElement(name, lt, end)
            position = text_start = end
            continue

        yield OpenTag(name, parse_classes(attributes), lt, gt + 1, self_closing)

    yield from flush(length)


def runs_text(markup: str, runs: Iterable[TextRun]) -> str:
    """Display text of ``runs``: entities decoded, whitespace collapsed."""

    return normalize_whitespace(decode_entities(" ".join(markup[run.start : run.end] for run in runs)))


def visible_text(markup: str, skip: Collection[str] = RAW_TEXT_TAGS) -> str:
    """Display text of a markup slice.

    Only text runs contribute, so comments, CDATA, processing instructions
    and skipped elements never reach the result.
    """

    return runs_text(markup, (token for token in iter_tokens(markup, skip) if isinstance(token, TextRun)))
