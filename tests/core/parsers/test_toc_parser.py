import pytest

from novel_epub.core.exceptions import (
    LinkResolutionError,
    MissingLink,
    TitleFormatError,
    TitleNotFound,
    TocStructureError,
)
from novel_epub.core.models import ChapterRef
from novel_epub.core.parsers.toc_parser import parse_toc, resolve_link, split_chapter_title


def toc_markup(*entries, title="Test Novel"):
    title_html = f'<div class="p-15"><h4>{title}</h4></div>' if title is not None else ""
    items = "".join(f'<li class="chapter-item">{entry}</li>' for entry in entries)
    return f"<html><body>{title_html}<ul>{items}</ul></body></html>"


@pytest.mark.parametrize("full_title, expected", [
    ("12. The Awakening", (12, "The Awakening")),
    ("7-Return", (7, "Return")),
    ("3 Into the Woods", (3, "Into the Woods")),
    ("Chapter 45 - A New Dawn", (45, "A New Dawn")),
    ("Chapter 9: Bloodline", (9, "Bloodline")),
    ("Chapter 100", (100, "")),
])
def test_split_chapter_title(full_title, expected):
    assert split_chapter_title(full_title) == expected


@pytest.mark.parametrize("full_title", ["Foreword", "", "Epilogue - The End"])
def test_split_chapter_title_without_number_fails(full_title):
    with pytest.raises(TitleFormatError) as exc_info:
        split_chapter_title(full_title)
    assert exc_info.value.text == full_title
    assert isinstance(exc_info.value, TocStructureError)


def test_parse_toc(toc_document):
    book = parse_toc(toc_document)

    assert book.title == "Test Novel"
    assert book.url == toc_document.url
    assert book.chapters == (
        ChapterRef(1, "The Beginning", "https://www.wuxiaworld.com/novel/test-novel/tn-chapter-1"),
        ChapterRef(2, "The Middle", "https://www.wuxiaworld.com/novel/test-novel/tn-chapter-2"),
        ChapterRef(3, "The End", "https://www.wuxiaworld.com/novel/test-novel/tn-chapter-3"),
    )


def test_parse_toc_resolves_links_against_final_url(document_factory):
    markup = toc_markup('<a href="chapter-1">Chapter 1 - One</a>')
    document = document_factory(markup, url="https://mirror.example.com/books/novel/")

    book = parse_toc(document)

    assert book.chapters[0].link == "https://mirror.example.com/books/novel/chapter-1"


def test_parse_toc_keeps_document_order(document_factory):
    markup = toc_markup(
        '<a href="/c3">Chapter 3 - Three</a>',
        '<a href="/c1">Chapter 1 - One</a>',
        '<a href="/c2">Chapter 2 - Two</a>',
    )

    book = parse_toc(document_factory(markup))

    assert [chapter.index for chapter in book.chapters] == [3, 1, 2]


def test_parse_toc_accepts_duplicates_and_gaps(document_factory):
    markup = toc_markup(
        '<a href="/c1">Chapter 1 - One</a>',
        '<a href="/c1b">Chapter 1 - One again</a>',
        '<a href="/c4">Chapter 4 - Four</a>',
    )

    book = parse_toc(document_factory(markup))

    assert [chapter.index for chapter in book.chapters] == [1, 1, 4]


def test_parse_toc_missing_title(document_factory):
    with pytest.raises(TitleNotFound):
        parse_toc(document_factory(toc_markup('<a href="/c1">Chapter 1</a>', title=None)))


def test_parse_toc_blank_title(document_factory):
    with pytest.raises(TitleNotFound):
        parse_toc(document_factory(toc_markup('<a href="/c1">Chapter 1</a>', title="   ")))


def test_parse_toc_title_without_number(document_factory):
    markup = toc_markup('<a href="/c1">Chapter 1 - One</a>', '<a href="/about">Foreword</a>')

    with pytest.raises(TitleFormatError, match="Foreword"):
        parse_toc(document_factory(markup))


@pytest.mark.parametrize("anchor", ['<a>Chapter 1 - One</a>', '<a href="  ">Chapter 1 - One</a>'])
def test_parse_toc_missing_href(document_factory, anchor):
    with pytest.raises(MissingLink):
        parse_toc(document_factory(toc_markup(anchor)))


def test_parse_toc_unresolvable_href(document_factory):
    markup = toc_markup('<a href="javascript:void(0)">Chapter 1 - One</a>')

    with pytest.raises(LinkResolutionError):
        parse_toc(document_factory(markup))


def test_resolve_link_invalid_url():
    with pytest.raises(LinkResolutionError):
        resolve_link("https://www.wuxiaworld.com/novel/", "http://[::1/chapter")


def test_parse_toc_without_chapters(document_factory):
    book = parse_toc(document_factory(toc_markup()))
    assert book.title == "Test Novel"
    assert book.chapters == ()
