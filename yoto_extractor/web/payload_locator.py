"""
Fetches a card page and extracts the JSON document it carries, whether the
server answers with JSON directly or with an HTML page embedding the data.
"""

import json
import logging
from typing import Any, Optional

from bs4 import BeautifulSoup

from yoto_extractor.exceptions import ParseError
from yoto_extractor.media.downloader import Downloader

log = logging.getLogger(__name__)

_NEXT_DATA_SELECTOR = 'script#__NEXT_DATA__[type="application/json"]'


def _is_json_type(content_type: Optional[str]) -> bool:
    if not content_type:
        return False
    return content_type == "application/json" or content_type.endswith("+json")


class PayloadLocator:
    """
    Resolves a URL to a single JSON document.

    Three strategies are tried in order and the first to succeed wins:
      1. The response is declared as JSON and decodes to an object.
      2. The body parses as JSON regardless of its declared type.
      3. The body is HTML with a `__NEXT_DATA__` JSON script block.
    """

    def __init__(self, downloader: Downloader):
        self.downloader = downloader

    async def locate(self, url: str) -> Any:
        """
        Fetches the URL and returns the JSON document found in it.

        Raises:
            FetchError: If the page cannot be fetched.
            ParseError: If no strategy yields a JSON document.
        """
        log.debug(f"Fetching card page: {url}")
        text, content_type = await self.downloader.fetch_text(url)
        return self.extract(text, content_type)

    def extract(self, text: str, content_type: Optional[str] = None) -> Any:
        """Applies the location strategies to an already fetched body."""
        if _is_json_type(content_type):
            try:
                data = json.loads(text)
            except ValueError:
                data = None
            if isinstance(data, dict):
                log.debug("Detected direct JSON response.")
                return data

        try:
            data = json.loads(text)
        except ValueError:
            pass
        else:
            log.debug("Parsed JSON from text response.")
            return data

        return self._from_html(text)

    def _from_html(self, html: str) -> Any:
        log.debug("Parsing HTML for embedded data block...")
        soup = BeautifulSoup(html, "html.parser")
        script = soup.select_one(_NEXT_DATA_SELECTOR)
        if script is None:
            raise ParseError("no embedded data block")

        try:
            data = json.loads(script.get_text())
        except ValueError as e:
            raise ParseError(f"embedded data block is not valid JSON: {e}") from e

        log.debug("Found JSON data in __NEXT_DATA__ script block.")
        return data
