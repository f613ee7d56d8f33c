from __future__ import annotations

import logging

import cssutils
import pytest

from epubpress.assembly import BookAssembler, BookAssemblyError, assemble_book
from epubpress.config import ConversionSettings
from epubpress.markup.models import ChapterRole, TextNode, collect_text
from epubpress.source import BookMetadata, BookSource, StaticBookSource


def _chapter(body: str, head_title: str = "") -> str:
    return f"<html><head><title>{head_title}</title></head><body>{body}</body></html>"


def _sample_source() -> StaticBookSource:
    return StaticBookSource(
        documents=[
            '<body><section epub:type="titlepage"><h1>The Book</h1><h2>Ann Writer</h2></section></body>',
            _chapter("<h1>Dedication</h1><p>For my cat.</p>"),
            _chapter("<p>It was a dark night.</p>"),
            None,
            _chapter("<div><img src='a.png'/></div>"),
            _chapter("<h1>Acknowledgments</h1><p>Thanks.</p>"),
            _chapter("<h2>The Return</h2><p>Morning came.</p>"),
        ],
        stylesheets=["p { text-align: left }", ".lead { color: red }"],
        title="The Book",
        author="Ann Writer",
    )


def test_static_source_satisfies_protocol() -> None:
    source = _sample_source()

    assert isinstance(source, BookSource)
    assert source.metadata() == BookMetadata(title="The Book", author="Ann Writer")
    assert source.stylesheet_text() == "p { text-align: left }\n.lead { color: red }"


def test_assembly_keeps_text_chapters_and_titlepages_in_spine_order() -> None:
    book = assemble_book(_sample_source())

    assert book.title == "The Book"
    assert book.author == "Ann Writer"
    assert [chapter.title for chapter in book.chapters] == [
        "The Book",
        "Dedication",
        "Chapter 3",
        "Acknowledgments",
        "The Return",
    ]
    assert [chapter.role for chapter in book.chapters] == [
        ChapterRole.TITLEPAGE,
        ChapterRole.FRONTMATTER,
        ChapterRole.CHAPTER,
        ChapterRole.BACKMATTER,
        ChapterRole.CHAPTER,
    ]
    assert [chapter.source_index for chapter in book.chapters] == [0, 1, 2, 5, 6]
    assert book.chapters[0].author == "Ann Writer"
    assert book.chapters[2].content.children == (TextNode("p", "It was a dark night."),)


def test_sections_group_chapters_by_role_in_layout_order() -> None:
    book = assemble_book(_sample_source())

    sections = book.sections()

    assert [role for role, _ in sections] == [
        ChapterRole.TITLEPAGE,
        ChapterRole.FRONTMATTER,
        ChapterRole.CHAPTER,
        ChapterRole.BACKMATTER,
    ]
    assert [chapter.title for chapter in book.chapters_with_role(ChapterRole.CHAPTER)] == ["Chapter 3", "The Return"]


def test_book_lookup_combines_defaults_and_stylesheet() -> None:
    book = assemble_book(_sample_source())

    style = book.lookup("p", ["lead"])

    assert style["textAlign"] == "left"
    assert style["color"] == "red"
    assert style["marginTop"] == 0.0


def test_missing_metadata_uses_configured_defaults() -> None:
    source = StaticBookSource(documents=[_chapter("<p>Only text.</p>")])

    book = BookAssembler(ConversionSettings(default_title="Nameless", default_author="Anon")).assemble(source)

    assert (book.title, book.author) == ("Nameless", "Anon")
    assert book.chapters[0].title == "Chapter 1"
    assert book.styles.is_empty()


def test_default_metadata_fallbacks() -> None:
    book = assemble_book(StaticBookSource(documents=[_chapter("<p>Only text.</p>")], title="  "))

    assert (book.title, book.author) == ("Untitled", "Unknown Author")


def test_empty_spine_is_an_error() -> None:
    with pytest.raises(BookAssemblyError, match="no spine documents"):
        assemble_book(StaticBookSource())


def test_book_without_kept_chapters_is_an_error() -> None:
    source = StaticBookSource(documents=[None, "", _chapter("<div></div>")])

    with pytest.raises(BookAssemblyError, match="No chapters found"):
        assemble_book(source)


def test_non_source_objects_are_rejected() -> None:
    with pytest.raises(BookAssemblyError, match="Unsupported book source"):
        BookAssembler().assemble(object())  # type: ignore[arg-type]


def test_oversized_fragments_are_truncated(caplog: pytest.LogCaptureFixture) -> None:
    source = StaticBookSource(documents=["<p>Short.</p><p>" + "x" * 100 + "</p>"])
    settings = ConversionSettings(max_fragment_chars=20)

    with caplog.at_level(logging.WARNING, logger="epubpress.assembly"):
        book = BookAssembler(settings).assemble(source)

    assert book.chapters[0].content.children == (TextNode("p", "Short."),)
    assert "exceeds 20 chars" in caplog.text


def test_zero_fragment_limit_disables_truncation() -> None:
    long_text = "y" * 50
    source = StaticBookSource(documents=[f"<p>{long_text}</p>"])

    book = BookAssembler(ConversionSettings(max_fragment_chars=0)).assemble(source)

    assert book.chapters[0].content.children == (TextNode("p", long_text),)


def test_assembly_leaves_parser_logging_alone(monkeypatch: pytest.MonkeyPatch) -> None:
    levels: list[int | str] = []
    monkeypatch.setattr(cssutils.log, "setLevel", levels.append)

    BookAssembler(ConversionSettings(css_log_level="DEBUG")).assemble(_sample_source())
    BookAssembler(ConversionSettings(css_log_level="ERROR")).assemble(_sample_source())

    assert levels == []


def test_one_deeply_nested_chapter_does_not_abort_the_book() -> None:
    nested = "<div>" * 2500 + "<p>Down here.</p>" + "</div>" * 2500
    source = StaticBookSource(documents=[_chapter("<p>Plain.</p>"), _chapter(nested)])

    book = assemble_book(source)

    assert [chapter.title for chapter in book.chapters] == ["Chapter 1", "Chapter 2"]
    assert collect_text(book.chapters[1].content) == ["Down here."]
