import re
from typing import List, Tuple
from urllib.parse import urljoin, urlparse

from novel_epub.core.exceptions import (
    LinkResolutionError,
    MissingLink,
    TitleFormatError,
    TitleNotFound,
)
from novel_epub.core.models import BookInfo, ChapterRef, Document, find_index_anomalies
from novel_epub.utils.logger import get_logger

logger = get_logger(__name__)

BOOK_TITLE_SELECTOR = '.p-15 h4'
CHAPTER_LINK_SELECTOR = '.chapter-item a'

# Optional "Chapter " style prefix, the chapter number, an optional separator, the title
CHAPTER_TITLE_PATTERN = re.compile(r'^\D*?(\d+)[\s.:\-]*(.*)$', re.DOTALL)


def split_chapter_title(full_title: str) -> Tuple[int, str]:
    """
    Splits a table of contents entry into its chapter number and title.

    >>> split_chapter_title("12. The Awakening")
    (12, 'The Awakening')
    >>> split_chapter_title("7-Return")
    (7, 'Return')
    """
    match = CHAPTER_TITLE_PATTERN.match(full_title)
    if not match:
        raise TitleFormatError(full_title)
    return int(match.group(1)), match.group(2).strip()


def resolve_link(base_url: str, href: str) -> str:
    try:
        link = urljoin(base_url, href)
        parsed = urlparse(link)
    except ValueError as e:
        raise LinkResolutionError(href, base_url, str(e)) from e
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise LinkResolutionError(href, base_url, "not an http(s) URL")
    return link


def parse_toc(document: Document) -> BookInfo:
    """
    Reads the book title and the chapter list from a table of contents page.

    Chapters are returned in document order. They are not sorted here; the
    orchestrator orders fetched chapters by index.
    """
    soup = document.soup

    title_tag = soup.select_one(BOOK_TITLE_SELECTOR)
    book_title = title_tag.get_text().strip() if title_tag else ''
    if not book_title:
        raise TitleNotFound(f"Book title ('{BOOK_TITLE_SELECTOR}') not found on {document.url}")

    chapters: List[ChapterRef] = []
    for anchor in soup.select(CHAPTER_LINK_SELECTOR):
        full_title = anchor.get_text().strip()
        index, title = split_chapter_title(full_title)

        href = anchor.get('href')
        if isinstance(href, list):
            href = href[0] if href else None
        if not href or not href.strip():
            raise MissingLink(full_title)

        chapters.append(ChapterRef(index=index, title=title, link=resolve_link(document.url, href.strip())))

    duplicates, missing = find_index_anomalies(chapters)
    if duplicates:
        logger.warning(f"Duplicate chapter numbers in table of contents: {duplicates}")
    if missing:
        logger.warning(f"Missing chapter numbers in table of contents: {missing}")

    logger.info(f"Found \"{book_title}\" with {len(chapters)} chapters at {document.url}")
    return BookInfo(title=book_title, chapters=tuple(chapters), url=document.url)
