import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, List, Optional
from urllib.parse import urlparse

from novel_epub.core.builders.epub_generator import EPUBGenerator, epub_filename
from novel_epub.core.config_manager import DEFAULT_AUTHOR, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from novel_epub.core.exceptions import (
    ChapterFetchError,
    FetchError,
    FilesystemError,
    NovelEpubError,
    TocReadError,
    TocStructureError,
    UrlParseError,
)
from novel_epub.core.fetchers.html_fetcher import HtmlFetcher
from novel_epub.core.models import BookInfo, ChapterContent, ChapterRef, ExtractionFailure, FetchResult
from novel_epub.core.parsers.chapter_extractor import extract
from novel_epub.core.parsers.toc_parser import parse_toc
from novel_epub.utils.logger import get_logger

ProgressCallback = Callable[[str], None]
logger = get_logger(__name__)


class ProgressCounter:
    """
    Thread-safe count of finished chapter tasks.

    Tasks only see `advance`; the callback (if any) receives a ready-made
    progress line.
    """

    def __init__(self, total: int, callback: Optional[ProgressCallback] = None):
        self.total = total
        self._callback = callback
        self._completed = 0
        self._lock = threading.Lock()

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def advance(self, label: Optional[str] = None) -> int:
        with self._lock:
            self._completed += 1
            completed = self._completed
        if self._callback:
            message = f"Fetched {completed}/{self.total}"
            if label:
                message += f" :: \"{label}\""
            self._callback(message)
        return completed


def _fetch_chapter(fetcher: HtmlFetcher, chapter: ChapterRef, progress: ProgressCounter) -> FetchResult:
    try:
        document = fetcher.fetch(chapter.link)
        content = extract(document, chapter)
    except NovelEpubError as e:
        logger.error(f"Chapter {chapter.index} (\"{chapter.title}\") failed: {e}")
        return ExtractionFailure(index=chapter.index, title=chapter.title, cause=e)
    progress.advance(chapter.title)
    return content


def _cancel_pending(futures: Iterable[Future]) -> None:
    cancelled = sum(1 for future in futures if future.cancel())
    if cancelled:
        logger.info(f"Cancelled {cancelled} queued chapter tasks")


def fetch_chapters(
    book: BookInfo,
    fetcher: HtmlFetcher,
    max_workers: Optional[int] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> List[ChapterContent]:
    """
    Fetches and extracts every chapter concurrently.

    Returns the chapters ordered by index, whatever order the tasks finish in.
    The first failed chapter cancels the tasks that have not started yet and
    raises `ChapterFetchError`; no partial list is ever returned.
    """
    chapters = book.chapters
    if not chapters:
        return []

    workers = max_workers or os.cpu_count() or 1
    progress = ProgressCounter(len(chapters), progress_callback)
    results: List[Optional[ChapterContent]] = [None] * len(chapters)

    logger.info(f"Fetching {len(chapters)} chapters of \"{book.title}\" with {workers} workers")
    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_map = {
            executor.submit(_fetch_chapter, fetcher, chapter, progress): position
            for position, chapter in enumerate(chapters)
        }
        for future in as_completed(future_map):
            try:
                result = future.result()
            except Exception:
                # Errors raised outside fetch/extract (e.g. by the progress callback) also stop the queue
                _cancel_pending(future_map)
                raise
            if isinstance(result, ExtractionFailure):
                _cancel_pending(future_map)
                raise ChapterFetchError(result.index, result.title) from result.cause
            # Slot by table of contents position so duplicates keep document order
            results[future_map[future]] = result

    # sorted() is stable: equal indices stay in document order
    return sorted(results, key=lambda content: content.index)


def validate_url(url: str) -> str:
    url = (url or '').strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise UrlParseError(f"Unable to parse URL: \"{url}\"") from e
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise UrlParseError(f"Unable to parse URL: \"{url}\"")
    return url


def build_book(
    toc_url: str,
    output_dir: str = '.',
    author: str = DEFAULT_AUTHOR,
    max_workers: Optional[int] = None,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
    progress_callback: Optional[ProgressCallback] = None,
    fetcher: Optional[HtmlFetcher] = None,
) -> str:
    """
    Downloads a whole book from its table of contents page and writes
    `<output_dir>/<book title>.epub`.

    Returns the path of the written file.
    """
    def _notify(message: str) -> None:
        if progress_callback:
            progress_callback(message)

    toc_url = validate_url(toc_url)
    _notify(f"Downloading: {toc_url}")
    logger.info(f"Starting book build for: {toc_url}")

    owns_fetcher = fetcher is None
    if fetcher is None:
        fetcher = HtmlFetcher(timeout=timeout, user_agent=user_agent)

    try:
        try:
            book = parse_toc(fetcher.fetch(toc_url))
        except (FetchError, TocStructureError) as e:
            raise TocReadError(toc_url) from e
        _notify(f"Found \"{book.title}\" with {len(book.chapters)} chapters at \"{book.url}\"")

        chapters = fetch_chapters(book, fetcher, max_workers=max_workers, progress_callback=progress_callback)
    finally:
        if owns_fetcher:
            fetcher.close()

    data = EPUBGenerator().assemble(book.title, author, chapters, identifier=book.url or toc_url)

    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Unable to create output directory: \"{output_dir}\"") from e

    path = os.path.join(output_dir, epub_filename(book.title))
    if os.path.exists(path):
        _notify(f"File (\"{path}\") already exists. Deleting...")
    EPUBGenerator.write(path, data)

    _notify(f"Generated epub file @ \"{path}\" for \"{book.title}\"")
    logger.info(f"Generated {path} with {len(chapters)} chapters")
    return path
