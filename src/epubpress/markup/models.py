"""Content tree and chapter structures produced from chapter markup."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


class ChapterRole(Enum):
    TITLEPAGE = "titlepage"
    FRONTMATTER = "frontmatter"
    CHAPTER = "chapter"
    BACKMATTER = "backmatter"


@dataclass(frozen=True, slots=True)
class TextNode:
    """Leaf carrying cleaned, non-empty text; ``tag`` and ``classes`` drive style lookup."""

    tag: str
    text: str
    classes: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ContainerNode:
    """Element whose content resolved to further nodes, in document order."""

    tag: str
    classes: tuple[str, ...] = ()
    children: tuple[ContentNode, ...] = ()


ContentNode = TextNode | ContainerNode


def iter_text_nodes(node: ContentNode) -> Iterator[TextNode]:
    """Yield text nodes in document order without recursing."""

    stack: list[ContentNode] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, TextNode):
            yield current
        else:
            stack.extend(reversed(current.children))


def has_text_content(node: ContentNode) -> bool:
    """Return True when any text node in the tree carries text."""

    return any(text_node.text.strip() for text_node in iter_text_nodes(node))


def collect_text(node: ContentNode) -> list[str]:
    """Collect text node contents in document order."""

    return [text_node.text for text_node in iter_text_nodes(node)]


@dataclass(frozen=True, slots=True)
class ParsedFragment:
    """Result of parsing one chapter document."""

    title: str
    role: ChapterRole
    tree: ContainerNode
    author: str | None = None


@dataclass(frozen=True, slots=True)
class Chapter:
    """One kept spine entry, in reading order."""

    title: str
    role: ChapterRole
    content: ContainerNode
    author: str | None = None
    source_index: int | None = field(default=None, compare=False)
