"""Stylesheet index construction and per-element style resolution.

Rules are registered into four buckets keyed by full selector, single
class, tag, and ``tag.class``. Element lookup overlays tag, then class, then
``tag.class`` entries; that three-tier order is the whole specificity model.
Descendant selectors only contribute their rightmost simple selector.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

import cssutils

from epubpress.styles.declarations import map_declaration
from epubpress.styles.models import MEDIA_KEY_PREFIX, StyleMapping, is_media_key

logger = logging.getLogger(__name__)

# cssutils reports every non-CSS2.1 value it meets; EPUB stylesheets are full of them.
cssutils.log.setLevel(logging.CRITICAL)
# Values must pass through as written; cssutils would shorten #RRGGBB to #RGB.
cssutils.ser.prefs.minimizeColorHash = False

StyleDict = dict[str, Any]

_MEDIA_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"max-width:\s*(\d+)", re.IGNORECASE), "max-width"),
    (re.compile(r"min-width:\s*(\d+)", re.IGNORECASE), "min-width"),
    (re.compile(r"max-height:\s*(\d+)", re.IGNORECASE), "max-height"),
    (re.compile(r"min-height:\s*(\d+)", re.IGNORECASE), "min-height"),
    (re.compile(r"orientation:\s*(landscape|portrait)", re.IGNORECASE), "orientation"),
)

_WHITESPACE_RE = re.compile(r"\s+")
_CLASS_RE = re.compile(r"\.([a-zA-Z0-9_-]+)")
_TAG_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9]*)")


def set_parser_log_level(level: int | str) -> None:
    """Set the level of the cssutils logger.

    The cssutils logger is shared by the whole process; configure it once at
    startup rather than per book.
    """

    cssutils.log.setLevel(level)


def media_condition_key(media_text: str) -> str | None:
    """Return the ``@media ...`` style key for a media query, first match wins."""

    for pattern, feature in _MEDIA_PATTERNS:
        match = pattern.search(media_text)
        if match:
            return f"{MEDIA_KEY_PREFIX} {feature}: {match.group(1).lower()}"
    return None


def merge_styles(existing: Mapping[str, Any] | None, incoming: Mapping[str, Any]) -> StyleDict:
    """Overlay ``incoming`` on ``existing``; media sub-styles merge instead of replacing."""

    merged: StyleDict = dict(existing or {})
    for key, value in incoming.items():
        if is_media_key(key) and isinstance(value, Mapping):
            previous = merged.get(key)
            nested = dict(previous) if isinstance(previous, Mapping) else {}
            nested.update(value)
            merged[key] = nested
        else:
            merged[key] = value
    return merged


@dataclass(frozen=True, slots=True)
class SelectorTarget:
    """Rightmost simple selector of a (possibly descendant) selector."""

    selector: str
    tag: str | None
    classes: tuple[str, ...]


def parse_selector(selector: str) -> SelectorTarget:
    normalized = _WHITESPACE_RE.sub(" ", selector.strip())
    target = normalized.split(" ")[-1]
    tag_match = _TAG_RE.match(target)
    return SelectorTarget(
        selector=normalized,
        tag=tag_match.group(1).lower() if tag_match else None,
        classes=tuple(_CLASS_RE.findall(target)),
    )


def _freeze(style: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(
        {key: _freeze(value) if isinstance(value, Mapping) else value for key, value in style.items()}
    )


def _thaw(style: Mapping[str, Any]) -> StyleDict:
    return {key: dict(value) if isinstance(value, Mapping) else value for key, value in style.items()}


_EMPTY: Mapping[str, Mapping[str, Any]] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class StyleIndex:
    """Read-only style buckets produced by :class:`StyleIndexBuilder`."""

    by_selector: Mapping[str, StyleMapping] = field(default_factory=lambda: _EMPTY)
    by_class: Mapping[str, StyleMapping] = field(default_factory=lambda: _EMPTY)
    by_tag: Mapping[str, StyleMapping] = field(default_factory=lambda: _EMPTY)
    by_tag_class: Mapping[str, StyleMapping] = field(default_factory=lambda: _EMPTY)

    def lookup(self, tag_name: str, class_list: Sequence[str] = ()) -> StyleDict:
        return lookup_style(self, tag_name, class_list)

    def is_empty(self) -> bool:
        return not (self.by_selector or self.by_class or self.by_tag or self.by_tag_class)


class StyleIndexBuilder:
    """Accumulates rules in source order and hands out a frozen :class:`StyleIndex`."""

    def __init__(self) -> None:
        self._by_selector: dict[str, StyleDict] = {}
        self._by_class: dict[str, StyleDict] = {}
        self._by_tag: dict[str, StyleDict] = {}
        self._by_tag_class: dict[str, StyleDict] = {}

    def add_rule(self, selector_text: str, style: Mapping[str, Any], media_text: str | None = None) -> bool:
        """Register ``style`` for every selector in a comma-separated group.

        Returns False when the rule contributes nothing: an empty style, or a
        media query with no recognized condition.
        """

        if not style:
            return False

        if media_text is not None:
            media_key = media_condition_key(media_text)
            if media_key is None:
                logger.debug("Dropping rule %r under unsupported media query %r", selector_text, media_text)
                return False
            style = {media_key: dict(style)}

        registered = False
        for selector in selector_text.split(","):
            if selector.strip():
                self.register(selector, style)
                registered = True
        return registered

    def register(self, selector: str, style: Mapping[str, Any]) -> None:
        target = parse_selector(selector)
        self._merge(self._by_selector, target.selector, style)

        # Compound selectors like p.a.b must never overwrite the entry for .a
        if len(target.classes) == 1:
            self._merge(self._by_class, target.classes[0], style)
        if target.tag and not target.classes:
            self._merge(self._by_tag, target.tag, style)
        if target.tag and len(target.classes) == 1:
            self._merge(self._by_tag_class, f"{target.tag}.{target.classes[0]}", style)

    def build(self) -> StyleIndex:
        index = StyleIndex(
            by_selector=_freeze(self._by_selector),
            by_class=_freeze(self._by_class),
            by_tag=_freeze(self._by_tag),
            by_tag_class=_freeze(self._by_tag_class),
        )
        logger.debug(
            "Built style index: %d selectors, %d classes, %d tags, %d tag.class entries",
            len(index.by_selector),
            len(index.by_class),
            len(index.by_tag),
            len(index.by_tag_class),
        )
        return index

    @staticmethod
    def _merge(bucket: dict[str, StyleDict], key: str, style: Mapping[str, Any]) -> None:
        bucket[key] = merge_styles(bucket.get(key), style)


def style_from_declarations(declarations: Iterable[tuple[str, str]]) -> StyleDict:
    style: StyleDict = {}
    for property_name, raw_value in declarations:
        converted = map_declaration(property_name, raw_value)
        if converted:
            style.update(converted)
    return style


def _iter_style_rules(rules: Iterable[Any], media_text: str | None = None) -> Iterator[tuple[Any, str | None]]:
    """Yield style rules with the text of their innermost enclosing ``@media``."""

    for rule in rules:
        if rule.type == rule.STYLE_RULE:
            yield rule, media_text
        elif rule.type == rule.MEDIA_RULE:
            yield from _iter_style_rules(rule.cssRules, rule.media.mediaText)
        elif hasattr(rule, "cssRules"):
            yield from _iter_style_rules(rule.cssRules, media_text)


def _rule_declarations(rule: Any) -> list[tuple[str, str]]:
    return [(prop.name, prop.value) for prop in rule.style.getProperties(all=True)]


def build_style_index(stylesheet_text: str) -> StyleIndex:
    """Parse all stylesheet text of a book into a :class:`StyleIndex`.

    A stylesheet the parser cannot handle yields an empty index, never an
    exception: unstyled text is better than no text.
    """

    builder = StyleIndexBuilder()
    if not stylesheet_text or not stylesheet_text.strip():
        return builder.build()

    try:
        sheet = cssutils.parseString(stylesheet_text)
        for rule, media_text in _iter_style_rules(sheet.cssRules):
            style = style_from_declarations(_rule_declarations(rule))
            builder.add_rule(rule.selectorText, style, media_text)
    except Exception as exc:
        logger.warning("Stylesheet parsing failed, continuing without styles: %s", exc)
        return StyleIndexBuilder().build()

    return builder.build()


def lookup_style(index: StyleIndex, tag_name: str, class_list: Sequence[str] = ()) -> StyleDict:
    """Compose the effective style for an element: tag < class < tag.class."""

    tag = tag_name.lower()
    merged: StyleDict = {}

    tag_style = index.by_tag.get(tag)
    if tag_style:
        merged.update(_thaw(tag_style))

    for class_name in class_list:
        class_style = index.by_class.get(class_name)
        if class_style:
            merged.update(_thaw(class_style))

    for class_name in class_list:
        combo_style = index.by_tag_class.get(f"{tag}.{class_name}")
        if combo_style:
            merged.update(_thaw(combo_style))

    return merged


def create_style_lookup(stylesheet_text: str) -> Callable[[str, Sequence[str]], StyleDict]:
    """Build an index and return a ``(tag, classes) -> style`` closure over it."""

    index = build_style_index(stylesheet_text)

    def lookup(tag_name: str, class_list: Sequence[str] = ()) -> StyleDict:
        return lookup_style(index, tag_name, class_list)

    return lookup
