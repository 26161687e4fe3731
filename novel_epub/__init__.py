from .core.orchestrator import build_book, fetch_chapters

__all__ = [
    "build_book",
    "fetch_chapters",
]
