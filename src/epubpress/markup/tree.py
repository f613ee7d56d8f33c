"""Tolerant conversion of chapter markup into a content tree.

Malformed markup is the normal case. The builder makes one forward pass over
the token stream with an explicit stack of open elements; each element is
resolved into a node when its close tag arrives and handed to its parent, so
work is linear and nesting depth never touches the Python call stack.
Unknown tags are ignored, unmatched close tags are ignored, and elements
still open at the end of input are dropped. Nothing here raises.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Collection

from epubpress.markup.classify import classify_role, extract_title_and_author
from epubpress.markup.models import ContainerNode, ContentNode, ParsedFragment, TextNode
from epubpress.markup.tokenizer import (
    RAW_TEXT_TAGS,
    CloseTag,
    OpenTag,
    SkippedElement,
    TextRun,
    iter_tokens,
    parse_classes,
    runs_text,
)

logger = logging.getLogger(__name__)

VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "param", "source", "track", "wbr"}
)
HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
# Headings are extracted as title/author and must not reappear as body text.
SKIP_TAGS = RAW_TEXT_TAGS | HEADING_TAGS | {"head", "title"}

CONTAINER_TAGS = frozenset(
    {
        "div", "section", "article", "aside", "blockquote", "figure", "header", "footer",
        "main", "nav", "ul", "ol", "dl", "table", "thead", "tbody", "tfoot", "tr",
    }
)
TEXT_TAGS = frozenset({"p", "li", "dt", "dd", "td", "th", "caption", "figcaption", "pre", "address", "span"})
INLINE_TEXT_TAGS = frozenset({"span"})

RECOGNIZED_TAGS = CONTAINER_TAGS | TEXT_TAGS
_STRUCTURAL_TAGS = CONTAINER_TAGS | (TEXT_TAGS - INLINE_TEXT_TAGS)

ANONYMOUS_TEXT_TAG = "span"
ROOT_TAG = "body"

_BODY_OPEN_RE = re.compile(r"<body\b([^>]*)>", re.IGNORECASE)
_BODY_CLOSE_RE = re.compile(r"</body\s*>", re.IGNORECASE)


@dataclass(slots=True)
class _Frame:
    tag: str
    classes: tuple[str, ...]
    # Index of the first text run inside this element.
    first_run: int
    children: list[ContentNode] = field(default_factory=list)
    # First run of loose text directly inside this element, not yet emitted.
    pending_run: int | None = None
    has_structure: bool = False
    has_heading: bool = False

    def absorb(self, inner: _Frame) -> None:
        self.has_structure = self.has_structure or inner.has_structure or inner.tag in _STRUCTURAL_TAGS
        self.has_heading = self.has_heading or inner.has_heading


def _body_content(markup: str) -> tuple[str, tuple[str, ...]]:
    body_open = _BODY_OPEN_RE.search(markup)
    if body_open is None:
        return markup, ()
    body_close = _BODY_CLOSE_RE.search(markup, body_open.end())
    end = body_close.start() if body_close else len(markup)
    return markup[body_open.end() : end], parse_classes(body_open.group(1))


class _TreeBuild:
    """State of one pass over a body slice."""

    def __init__(self, markup: str, exclude: Collection[str]) -> None:
        self._markup = markup
        self._exclude = exclude
        self._runs: list[TextRun] = []

    def run(self, body_classes: tuple[str, ...]) -> ContainerNode:
        root = _Frame(ROOT_TAG, body_classes, 0)
        stack = [root]

        for token in iter_tokens(self._markup, SKIP_TAGS):
            top = stack[-1]
            if isinstance(token, TextRun):
                if top.pending_run is None:
                    top.pending_run = len(self._runs)
                self._runs.append(token)
            elif isinstance(token, SkippedElement):
                self._flush(top)
                if token.name in HEADING_TAGS:
                    top.has_heading = True
            elif isinstance(token, OpenTag):
                if token.self_closing or token.name in VOID_TAGS or token.name not in RECOGNIZED_TAGS:
                    continue
                self._flush(top)
                stack.append(_Frame(token.name, token.classes, len(self._runs)))
            elif isinstance(token, CloseTag):
                depth = _find_frame(stack, token.name)
                if depth is not None:
                    self._close(stack, depth)

        if len(stack) > 1:
            logger.debug("Dropping %d unclosed element(s) starting with <%s>", len(stack) - 1, stack[1].tag)
            for frame in stack[1:]:
                root.absorb(frame)
            del stack[1:]

        self._flush(root)
        children = root.children
        if not children and not root.has_heading:
            node = self._text_node(ANONYMOUS_TEXT_TAG, (), 0)
            if node is not None:
                children = [node]
        return ContainerNode(ROOT_TAG, body_classes, tuple(children))

    def _close(self, stack: list[_Frame], depth: int) -> None:
        frame = stack[depth]
        if len(stack) > depth + 1:
            self._recover_unclosed(frame, stack[depth + 1 :])
            del stack[depth + 1 :]

        stack.pop()
        parent = stack[-1]
        parent.absorb(frame)
        node = self._resolve(frame)
        if node is not None:
            parent.children.append(node)

    def _recover_unclosed(self, frame: _Frame, unclosed: list[_Frame]) -> None:
        """Keep the text of elements left open inside a properly closed one."""

        for inner in unclosed:
            frame.absorb(inner)
        outermost = unclosed[0]
        node = self._text_node(outermost.tag, outermost.classes, outermost.first_run)
        if node is not None:
            frame.children.append(node)

    def _resolve(self, frame: _Frame) -> ContentNode | None:
        self._flush(frame)
        if frame.tag in TEXT_TAGS and not (frame.has_structure or frame.has_heading):
            return self._text_node(frame.tag, frame.classes, frame.first_run)

        if not frame.children and not frame.has_heading:
            node = self._text_node(frame.tag, frame.classes, frame.first_run)
            if node is not None:
                return node
        return ContainerNode(frame.tag, frame.classes, tuple(frame.children))

    def _flush(self, frame: _Frame) -> None:
        if frame.pending_run is None:
            return
        node = self._text_node(ANONYMOUS_TEXT_TAG, (), frame.pending_run)
        frame.pending_run = None
        if node is not None:
            frame.children.append(node)

    def _text_node(self, tag: str, classes: tuple[str, ...], first_run: int) -> TextNode | None:
        text = runs_text(self._markup, self._runs[first_run:])
        if not text or text in self._exclude:
            return None
        return TextNode(tag, text, classes)


def _find_frame(stack: list[_Frame], tag: str) -> int | None:
    # Index 0 is the body root, which markup cannot close.
    for depth in range(len(stack) - 1, 0, -1):
        if stack[depth].tag == tag:
            return depth
    return None


class MarkupTreeBuilder:
    """Build :class:`ParsedFragment` values from chapter documents."""

    def build(self, fragment: str | None) -> ParsedFragment:
        markup = fragment or ""
        title, author = extract_title_and_author(markup)
        role = classify_role(markup, title)
        # Body text repeating the title or author would render twice.
        tree = self.build_tree(markup, exclude={text for text in (title, author) if text})
        logger.debug("Parsed fragment %r as %s with %d top-level nodes", title, role.value, len(tree.children))
        return ParsedFragment(title=title, role=role, tree=tree, author=author)

    def build_tree(self, markup: str, exclude: Collection[str] = ()) -> ContainerNode:
        """Build the content tree; text nodes whose text is in ``exclude`` are left out."""

        body, classes = _body_content(markup)
        return _TreeBuild(body, frozenset(exclude)).run(classes)


_DEFAULT_BUILDER = MarkupTreeBuilder()


def parse_fragment(fragment: str | None) -> ParsedFragment:
    return _DEFAULT_BUILDER.build(fragment)


def build_content_tree(fragment: str | None) -> ContainerNode:
    return _DEFAULT_BUILDER.build_tree(fragment or "")
