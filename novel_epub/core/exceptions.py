from typing import Optional


class NovelEpubError(Exception):
    """Base exception for every failure the book builder reports."""
    pass


class UsageError(NovelEpubError):
    pass


class UrlParseError(NovelEpubError):
    pass


class FetchError(NovelEpubError):
    """Base exception for fetcher-related errors."""
    pass


class NetworkError(FetchError):
    pass


class HtmlParseError(FetchError):
    pass


class TocStructureError(NovelEpubError):
    """The table of contents page does not have the expected layout."""
    pass


class TitleNotFound(TocStructureError):
    pass


class TitleFormatError(TocStructureError):
    def __init__(self, text: str):
        super().__init__(f"Chapter title has no chapter number: \"{text}\"")
        self.text = text


class MissingLink(TocStructureError):
    def __init__(self, text: str):
        super().__init__(f"Chapter link has no href: \"{text}\"")
        self.text = text


class LinkResolutionError(TocStructureError):
    def __init__(self, href: str, base_url: str, reason: Optional[str] = None):
        message = f"Unable to resolve chapter link \"{href}\" against {base_url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.href = href
        self.base_url = base_url


class TocReadError(NovelEpubError):
    """The table of contents page could not be fetched or parsed."""

    def __init__(self, url: str):
        super().__init__(f"Unable to read table of contents: \"{url}\"")
        self.url = url


class ExtractionError(NovelEpubError):
    pass


class NoContentFound(ExtractionError):
    def __init__(self, index: int, title: str):
        super().__init__(f"Discovered no content for \"Chapter {index} - {title}\"")
        self.index = index
        self.title = title


class ChapterFetchError(NovelEpubError):
    """A single chapter failed, which aborts the whole run."""

    def __init__(self, index: int, title: str):
        super().__init__(f"Unable to fetch chapter content for \"Chapter {index} - {title}\"")
        self.index = index
        self.title = title


class AssemblyError(NovelEpubError):
    pass


class FilesystemError(NovelEpubError):
    pass
