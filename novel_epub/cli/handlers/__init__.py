from .build_book import build_book_handler, format_error_chain

__all__ = [
    "build_book_handler",
    "format_error_chain",
]
