import html
from typing import Callable, Iterable, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from novel_epub.core.exceptions import NoContentFound
from novel_epub.core.models import ChapterContent, ChapterRef, Document
from novel_epub.utils.logger import get_logger

logger = get_logger(__name__)

PARAGRAPH_BREAK = '<br/><br/>'

Strategy = Callable[[BeautifulSoup], Optional[str]]


def _collect_text(nodes: Iterable[Tag]) -> Optional[str]:
    """Joins the trimmed text of each node, each followed by a paragraph break."""
    parts = []
    for node in nodes:
        text = node.get_text().strip()
        if not text:
            continue
        parts.append(html.escape(text, quote=False))
        parts.append(PARAGRAPH_BREAK)
    return ''.join(parts) or None


def inner_content_paragraphs(soup: BeautifulSoup) -> Optional[str]:
    return _collect_text(soup.select('.innerContent.fr-view p'))


def reader_view_paragraphs(soup: BeautifulSoup) -> Optional[str]:
    return _collect_text(soup.select('.fr-view > p'))


def reader_view_spans(soup: BeautifulSoup) -> Optional[str]:
    return _collect_text(soup.select('.fr-view span'))


# Tried in order; the first strategy producing text wins
EXTRACTION_STRATEGIES: Tuple[Strategy, ...] = (
    inner_content_paragraphs,
    reader_view_paragraphs,
    reader_view_spans,
)


def extract_text(soup: BeautifulSoup, strategies: Sequence[Strategy] = EXTRACTION_STRATEGIES) -> Optional[str]:
    for strategy in strategies:
        content = strategy(soup)
        if content:
            logger.debug(f"Chapter content matched by '{strategy.__name__}'")
            return content
    return None


def extract(document: Document, chapter: ChapterRef) -> ChapterContent:
    content = extract_text(document.soup)
    if not content:
        logger.error(f"No content found for chapter {chapter.index} at {document.url}")
        raise NoContentFound(chapter.index, chapter.title)
    return ChapterContent(index=chapter.index, title=chapter.title, html_fragment=content)
