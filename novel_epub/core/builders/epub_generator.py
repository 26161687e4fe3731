import html
import io
import os
import uuid
from typing import Dict, Optional, Sequence

from ebooklib import epub

from novel_epub.core.exceptions import AssemblyError, FilesystemError
from novel_epub.core.models import ChapterContent
from novel_epub.utils.logger import get_logger

logger = get_logger(__name__)


def chapter_file_name(index: int, occurrence: int = 1) -> str:
    """`chapter_<index>.xhtml`; repeated chapter numbers get a `_<occurrence>` suffix."""
    if occurrence > 1:
        return f"chapter_{index}_{occurrence}.xhtml"
    return f"chapter_{index}.xhtml"


def epub_filename(title: str) -> str:
    """`<title>.epub`, with path separators replaced so it stays in the output directory."""
    safe_title = title.replace('/', '_').replace('\\', '_').strip() or 'Untitled'
    return f"{safe_title}.epub"


class EPUBGenerator:
    def __init__(self, language: str = 'en'):
        self.language = language

    def _build_chapter(self, chapter: ChapterContent, occurrence: int = 1) -> epub.EpubHtml:
        heading = f"Chapter {chapter.index}"
        epub_chapter = epub.EpubHtml(
            title=heading,
            file_name=chapter_file_name(chapter.index, occurrence),
            lang=self.language,
        )
        content = f"<h1>{heading}</h1>"
        if chapter.title:
            content += f"<h2>{html.escape(chapter.title, quote=False)}</h2>"
        epub_chapter.content = f"{content}<p>{chapter.html_fragment}</p>"
        return epub_chapter

    def assemble(self, title: str, author: str, chapters: Sequence[ChapterContent],
                 identifier: Optional[str] = None) -> bytes:
        """
        Builds the EPUB archive in memory.

        Chapters are added in the order given; callers are responsible for
        ordering them by index.
        """
        if not chapters:
            raise AssemblyError(f"No chapters to add to \"{title}\"")

        book = epub.EpubBook()
        try:
            book.set_identifier(identifier or str(uuid.uuid5(uuid.NAMESPACE_URL, title)))
            book.set_title(title)
            book.set_language(self.language)
            book.add_author(author)
        except Exception as e:
            raise AssemblyError("Unable to set book metadata.") from e

        epub_chapters = []
        occurrences: Dict[int, int] = {}
        total = len(chapters)
        for position, chapter in enumerate(chapters, start=1):
            # Archive entry names must be unique even when a chapter number repeats
            occurrence = occurrences.get(chapter.index, 0) + 1
            occurrences[chapter.index] = occurrence
            if occurrence > 1:
                logger.warning(f"Chapter {chapter.index} appears {occurrence} times, "
                               f"storing it as {chapter_file_name(chapter.index, occurrence)}")
            try:
                epub_chapter = self._build_chapter(chapter, occurrence)
                book.add_item(epub_chapter)
            except Exception as e:
                raise AssemblyError(f"Unable to add page: {position}/{total} (chapter {chapter.index})") from e
            epub_chapters.append(epub_chapter)

        book.toc = tuple(epub_chapters)
        book.add_item(epub.EpubNcx())
        # The navigation document's title is the table of contents label
        book.add_item(epub.EpubNav(title=title))
        book.spine = ['nav'] + epub_chapters

        buffer = io.BytesIO()
        try:
            epub.write_epub(buffer, book, {'raise_exceptions': True})
        except Exception as e:
            raise AssemblyError("Unable to generate epub") from e

        logger.info(f"Assembled \"{title}\" with {total} chapters ({buffer.tell()} bytes)")
        return buffer.getvalue()

    @staticmethod
    def write(path: str, data: bytes) -> bool:
        """
        Writes the archive, deleting any existing file at `path` first.

        Returns True if a previous file was replaced.
        """
        replaced = False
        if os.path.exists(path):
            logger.info(f"File (\"{path}\") already exists. Deleting...")
            try:
                os.remove(path)
            except OSError as e:
                raise FilesystemError(f"Failed to remove previous file: \"{path}\"") from e
            replaced = True
        try:
            with open(path, 'wb') as f:
                f.write(data)
        except OSError as e:
            raise FilesystemError(f"Unable to create file: \"{path}\"") from e
        logger.info(f"Wrote EPUB file: {path}")
        return replaced
