from typing import Optional

import requests
from requests.exceptions import RequestException
from bs4 import BeautifulSoup, ParserRejectedMarkup

from novel_epub.core.config_manager import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from novel_epub.core.exceptions import HtmlParseError, NetworkError
from novel_epub.core.models import Document
from novel_epub.utils.logger import get_logger

logger = get_logger(__name__)

HTML_CONTENT_TYPES = ('text/html', 'application/xhtml+xml', 'application/xml', 'text/xml')


class HtmlFetcher:
    """
    Issues one GET per call and returns the parsed page.

    The session is shared by every chapter task; requests' connection pool is
    thread-safe for plain GETs. There are no retries: a failure is reported to
    the caller, which decides what to do with it.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, user_agent: str = DEFAULT_USER_AGENT,
                 session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        })

    def fetch(self, url: str) -> Document:
        logger.info(f"Fetching HTML content from URL: {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()  # 4XX/5XX become HTTPError
        except RequestException as req_err:
            logger.error(f"Request failed for {url}: {req_err}")
            raise NetworkError(f"Unable to send GET request to {url}") from req_err

        # Relative links on the page resolve against where we ended up
        final_url = response.url or url

        content_type = response.headers.get('Content-Type', '')
        media_type = content_type.split(';', 1)[0].strip().lower()
        if media_type and media_type not in HTML_CONTENT_TYPES:
            raise HtmlParseError(f"Invalid content from {final_url}: expected HTML, got '{media_type}'")

        try:
            soup = BeautifulSoup(response.text, 'html.parser')
        except ParserRejectedMarkup as parse_err:
            raise HtmlParseError(f"Invalid content from {final_url}") from parse_err

        if final_url != url:
            logger.debug(f"{url} redirected to {final_url}")
        return Document(url=final_url, soup=soup)

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
