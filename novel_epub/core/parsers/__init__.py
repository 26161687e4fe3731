from .toc_parser import parse_toc, split_chapter_title
from .chapter_extractor import extract, extract_text, EXTRACTION_STRATEGIES

__all__ = [
    "parse_toc",
    "split_chapter_title",
    "extract",
    "extract_text",
    "EXTRACTION_STRATEGIES",
]
