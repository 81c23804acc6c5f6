"""
Tests for locating the JSON payload in the pages a card URL can return.

Usage:
    pytest tests/test_payload_locator.py -v
"""

import json

import pytest

from conftest import make_card_data, next_data_page
from yoto_extractor.core.normalizer import normalize
from yoto_extractor.exceptions import FetchError, ParseError
from yoto_extractor.media.downloader import Downloader
from yoto_extractor.web.payload_locator import PayloadLocator


@pytest.fixture
async def locator():
    downloader = Downloader()
    yield PayloadLocator(downloader)
    await downloader.close()


class TestLocate:
    async def test_all_payload_shapes_give_the_same_card(self, card_server, locator):
        cards = [
            normalize(await locator.locate(card_server.url(path)))
            for path in ("/card.json", "/card.txt", "/card.html")
        ]
        assert cards[0] == cards[1] == cards[2]
        assert cards[0].title == "Bedtime Stories"

    async def test_page_without_data_block_is_parse_error(self, card_server, locator):
        with pytest.raises(ParseError, match="no embedded data block"):
            await locator.locate(card_server.url("/plain.html"))

    async def test_error_status_is_fetch_error(self, card_server, locator):
        with pytest.raises(FetchError):
            await locator.locate(card_server.url("/missing"))


class TestExtract:
    def test_declared_json_object(self):
        locator = PayloadLocator(Downloader())
        doc = {"card": make_card_data()}
        assert locator.extract(json.dumps(doc), "application/json") == doc

    def test_json_served_as_text(self):
        locator = PayloadLocator(Downloader())
        assert locator.extract('{"title": "x"}', "text/html") == {"title": "x"}

    def test_declared_json_array_is_still_returned(self):
        locator = PayloadLocator(Downloader())
        assert locator.extract("[1, 2]", "application/json") == [1, 2]

    def test_embedded_data_block(self):
        locator = PayloadLocator(Downloader())
        doc = {"props": {"pageProps": {"card": make_card_data()}}}
        assert locator.extract(next_data_page(doc), "text/html") == doc

    def test_data_block_needs_json_type(self):
        locator = PayloadLocator(Downloader())
        html = '<html><script id="__NEXT_DATA__">{"a": 1}</script></html>'
        with pytest.raises(ParseError):
            locator.extract(html, "text/html")

    def test_invalid_json_in_data_block(self):
        locator = PayloadLocator(Downloader())
        html = (
            '<html><script id="__NEXT_DATA__" type="application/json">'
            "{not json</script></html>"
        )
        with pytest.raises(ParseError, match="not valid JSON"):
            locator.extract(html, "text/html")
