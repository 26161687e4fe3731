from .epub_generator import EPUBGenerator, chapter_file_name, epub_filename

__all__ = [
    "EPUBGenerator",
    "chapter_file_name",
    "epub_filename",
]
