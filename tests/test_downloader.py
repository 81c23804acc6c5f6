"""
Tests for the HTTP downloader and audio extension resolution, run against an
in-process aiohttp server.

Usage:
    pytest tests/test_downloader.py -v
"""

import pytest

from conftest import AUDIO_BYTES, COVER_BYTES
from yoto_extractor.exceptions import FetchError, UnknownContentTypeError
from yoto_extractor.media.downloader import Downloader, resolve_extension


class TestResolveExtension:
    @pytest.mark.parametrize(
        "content_type, ext",
        [
            ("audio/mpeg", "mp3"),
            ("audio/aac", "aac"),
            ("audio/wav", "wav"),
            ("audio/ogg", "ogg"),
            ("audio/mp4", "m4a"),
            ("audio/x-m4a", "m4a"),
            ("audio/flac", "flac"),
        ],
    )
    def test_known_types(self, content_type, ext):
        assert resolve_extension(content_type) == ext

    @pytest.mark.parametrize(
        "content_type", ["video/mp4", "application/octet-stream", "", None]
    )
    def test_unknown_types_raise(self, content_type):
        with pytest.raises(UnknownContentTypeError):
            resolve_extension(content_type)


class TestDownloader:
    async def test_fetch_returns_body_and_type(self, card_server):
        async with Downloader() as downloader:
            body, content_type = await downloader.fetch(card_server.url("/cover.png"))
        assert body == COVER_BYTES
        assert content_type == "image/png"

    async def test_download_to_streams_file(self, card_server, tmp_path):
        destination = tmp_path / "track.part"
        seen = []
        async with Downloader() as downloader:
            content_type, size = await downloader.download_to(
                card_server.url("/audio/one?type=audio/flac"),
                destination,
                on_progress=lambda done, total: seen.append((done, total)),
            )
        assert content_type == "audio/flac"
        assert size == len(AUDIO_BYTES)
        assert destination.read_bytes() == AUDIO_BYTES
        assert seen[-1] == (len(AUDIO_BYTES), len(AUDIO_BYTES))

    async def test_content_type_parameters_are_dropped(self, card_server, tmp_path):
        async with Downloader() as downloader:
            content_type, _ = await downloader.download_to(
                card_server.url("/audio-with-params"),
                tmp_path / "a",
            )
        assert content_type == "audio/mpeg"

    async def test_error_status_raises(self, card_server):
        async with Downloader() as downloader:
            with pytest.raises(FetchError) as excinfo:
                await downloader.fetch(card_server.url("/missing"))
        assert excinfo.value.status == 404

    async def test_error_status_is_not_retried(self, card_server):
        async with Downloader(retries=2, base_delay=0) as downloader:
            with pytest.raises(FetchError):
                await downloader.fetch(card_server.url("/counted-missing"))
        assert card_server.state["missing_hits"] == 1

    async def test_redirects_within_limit_are_followed(self, card_server):
        async with Downloader(max_redirects=3) as downloader:
            body, _ = await downloader.fetch(card_server.url("/redirect/3"))
        assert body == AUDIO_BYTES

    async def test_too_many_redirects_raise(self, card_server):
        async with Downloader(max_redirects=2) as downloader:
            with pytest.raises(FetchError, match="redirects"):
                await downloader.fetch(card_server.url("/redirect/5"))

    async def test_timeout_raises(self, card_server):
        async with Downloader(timeout=0.2) as downloader:
            with pytest.raises(FetchError, match="timed out"):
                await downloader.fetch(card_server.url("/slow"))

    async def test_timeout_is_retried_when_enabled(self, card_server):
        async with Downloader(timeout=0.3, retries=1, base_delay=0) as downloader:
            body, _ = await downloader.fetch(card_server.url("/flaky"))
        assert body == AUDIO_BYTES
        assert card_server.state["flaky_hits"] == 2

    async def test_unreachable_host_raises(self, unused_tcp_port):
        async with Downloader(timeout=2) as downloader:
            with pytest.raises(FetchError):
                await downloader.fetch(f"http://127.0.0.1:{unused_tcp_port}/card")
