from .html_fetcher import HtmlFetcher, DEFAULT_TIMEOUT

__all__ = [
    "HtmlFetcher",
    "DEFAULT_TIMEOUT",
]
