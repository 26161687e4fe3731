from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple, Union

from bs4 import BeautifulSoup


@dataclass(frozen=True)
class Document:
    """A parsed page and the final URL it was served from (after redirects)."""
    url: str
    soup: BeautifulSoup = field(repr=False, compare=False)


@dataclass(frozen=True)
class ChapterRef:
    index: int
    title: str
    link: str


@dataclass(frozen=True)
class BookInfo:
    title: str
    chapters: Tuple[ChapterRef, ...]
    url: str = ""


@dataclass(frozen=True)
class ChapterContent:
    index: int
    title: str
    html_fragment: str


@dataclass(frozen=True)
class ExtractionFailure:
    index: int
    title: str
    cause: Exception


FetchResult = Union[ChapterContent, ExtractionFailure]


def find_index_anomalies(chapters: Iterable[ChapterRef]) -> Tuple[List[int], List[int]]:
    """
    Reports duplicate chapter numbers and gaps in ``1..max(index)``.

    Returns:
        A ``(duplicates, missing)`` pair of sorted index lists. Both are empty
        for a well-formed table of contents.
    """
    counts = Counter(chapter.index for chapter in chapters)
    if not counts:
        return [], []
    duplicates = sorted(index for index, count in counts.items() if count > 1)
    missing = [index for index in range(1, max(counts) + 1) if index not in counts]
    return duplicates, missing
