import os
import tempfile

# The logger resolves its workspace at import time, so this has to be set
# before anything from novel_epub is imported.
os.environ.setdefault("NOVEL_EPUB_WORKSPACE", tempfile.mkdtemp(prefix="novel_epub_test_"))

import pytest
from bs4 import BeautifulSoup

from novel_epub.core.models import Document

TOC_URL = "https://www.wuxiaworld.com/novel/test-novel"

TOC_HTML = """
<html><body>
  <div class="p-15">
    <h4>  Test Novel  </h4>
  </div>
  <ul>
    <li class="chapter-item"><a href="/novel/test-novel/tn-chapter-1">Chapter 1 - The Beginning</a></li>
    <li class="chapter-item"><a href="/novel/test-novel/tn-chapter-2">Chapter 2 - The Middle</a></li>
    <li class="chapter-item"><a href="https://www.wuxiaworld.com/novel/test-novel/tn-chapter-3">Chapter 3 - The End</a></li>
  </ul>
</body></html>
"""


def chapter_page(*paragraphs: str) -> str:
    body = "".join(f"<p>{text}</p>" for text in paragraphs)
    return f"""
    <html><body>
      <div id="chapterContent" class="innerContent fr-view">{body}</div>
    </body></html>
    """


def make_document(markup: str, url: str = TOC_URL) -> Document:
    return Document(url=url, soup=BeautifulSoup(markup, "html.parser"))


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep every test away from the real settings.ini and env overrides."""
    monkeypatch.setenv("NOVEL_EPUB_CONFIG", str(tmp_path / "config" / "settings.ini"))
    monkeypatch.delenv("NOVEL_EPUB_OUTPUT_DIR", raising=False)
    monkeypatch.delenv("NOVEL_EPUB_MAX_WORKERS", raising=False)
    yield tmp_path


@pytest.fixture
def toc_document():
    return make_document(TOC_HTML)


@pytest.fixture
def document_factory():
    return make_document


@pytest.fixture
def chapter_page_factory():
    return chapter_page
