"""
Shared fixtures and test data factories.

`card_server` runs an in-process aiohttp application that serves a card in
each of the payload shapes the extractor understands, plus audio, icon and
artwork routes with controllable content types and failures.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

import pytest
from aiohttp import web

AUDIO_BYTES = b"ID3" + b"\x00" * 2048
ICON_BYTES = b"\x89PNG\r\n\x1a\n" + b"icon" * 16
CHAPTER_ICON_BYTES = b"\x89PNG\r\n\x1a\n" + b"chapter" * 16
COVER_BYTES = b"\x89PNG\r\n\x1a\n" + b"cover" * 64


# ============================================================================
# TEST DATA FACTORIES
# ============================================================================


def make_track(
    title: Optional[str] = "Track",
    track_url: Optional[str] = None,
    icon_url: Optional[str] = None,
    duration: Any = 61,
    file_size: Any = 1536,
    track_type: Optional[str] = "audio",
    channels: Any = "stereo",
    fmt: Optional[str] = "mp3",
) -> Dict[str, Any]:
    """Factory function to create raw track JSON."""
    track: Dict[str, Any] = {
        "title": title,
        "type": track_type,
        "duration": duration,
        "fileSize": file_size,
        "channels": channels,
        "format": fmt,
    }
    if track_url is not None:
        track["trackUrl"] = track_url
    if icon_url is not None:
        track["display"] = {"icon16x16": icon_url}
    return track


def make_chapter(
    tracks: List[Dict[str, Any]],
    title: str = "Chapter",
    icon_url: Optional[str] = None,
) -> Dict[str, Any]:
    """Factory function to create raw chapter JSON."""
    chapter: Dict[str, Any] = {"title": title, "tracks": tracks}
    if icon_url is not None:
        chapter["display"] = {"icon16x16": icon_url}
    return chapter


def make_card_data(
    chapters: Optional[List[Dict[str, Any]]] = None,
    title: str = "Bedtime Stories",
    cover_url: Optional[str] = None,
    languages: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Factory function to create a raw card as served by the API."""
    metadata: Dict[str, Any] = {
        "author": "Jane Doe",
        "description": "Stories for sleepy heads",
        "category": "stories",
        "media": {"duration": 3661, "fileSize": 1073741824},
    }
    if languages is not None:
        metadata["languages"] = languages
    if cover_url is not None:
        metadata["cover"] = {"imageL": cover_url}
    return {
        "cardId": "abc123",
        "title": title,
        "slug": "bedtime-stories",
        "createdAt": "2023-01-02T03:04:05.000Z",
        "updatedAt": "2023-02-03T04:05:06.000Z",
        "shareCount": 7,
        "shareLinkUrl": "https://share.example/abc123",
        "metadata": metadata,
        "content": {
            "version": "1",
            "playbackType": "linear",
            "availability": "public",
            "chapters": chapters if chapters is not None else [],
        },
    }


def next_data_page(doc: Any) -> str:
    """Wraps a document in a server-rendered page's __NEXT_DATA__ block."""
    return (
        "<!DOCTYPE html><html><head><title>Card</title></head><body>"
        '<div id="__next"></div>'
        '<script id="__NEXT_DATA__" type="application/json">'
        f"{json.dumps(doc)}"
        "</script></body></html>"
    )


# ============================================================================
# IN-PROCESS CARD SERVER
# ============================================================================


def build_app(state: Dict[str, Any]) -> web.Application:
    """Builds the test application; handlers read the card from `state`."""
    routes = web.RouteTableDef()

    @routes.get("/card.json")
    async def card_json(request: web.Request) -> web.Response:
        return web.json_response({"card": state["card"]})

    @routes.get("/card.txt")
    async def card_text(request: web.Request) -> web.Response:
        return web.Response(text=json.dumps(state["card"]), content_type="text/plain")

    @routes.get("/card.html")
    async def card_html(request: web.Request) -> web.Response:
        doc = {"props": {"pageProps": {"card": state["card"]}}}
        return web.Response(text=next_data_page(doc), content_type="text/html")

    @routes.get("/plain.html")
    async def plain_html(request: web.Request) -> web.Response:
        return web.Response(
            text="<html><body><p>Nothing here</p></body></html>",
            content_type="text/html",
        )

    @routes.get("/audio/{name}")
    async def audio(request: web.Request) -> web.Response:
        content_type = request.query.get("type", "audio/mpeg")
        return web.Response(body=AUDIO_BYTES, content_type=content_type)

    @routes.get("/audio-with-params")
    async def audio_with_params(request: web.Request) -> web.Response:
        return web.Response(
            body=AUDIO_BYTES, headers={"Content-Type": "audio/mpeg; codecs=mp3"}
        )

    @routes.get("/icons/track.png")
    async def track_icon(request: web.Request) -> web.Response:
        return web.Response(body=ICON_BYTES, content_type="image/png")

    @routes.get("/icons/chapter.png")
    async def chapter_icon(request: web.Request) -> web.Response:
        return web.Response(body=CHAPTER_ICON_BYTES, content_type="image/png")

    @routes.get("/cover.png")
    async def cover(request: web.Request) -> web.Response:
        return web.Response(body=COVER_BYTES, content_type="image/png")

    @routes.get("/missing")
    async def missing(request: web.Request) -> web.Response:
        raise web.HTTPNotFound()

    @routes.get("/redirect/{hops}")
    async def redirect(request: web.Request) -> web.Response:
        hops = int(request.match_info["hops"])
        if hops <= 0:
            return web.Response(body=AUDIO_BYTES, content_type="audio/mpeg")
        raise web.HTTPFound(f"/redirect/{hops - 1}")

    @routes.get("/slow")
    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(1)
        return web.Response(body=AUDIO_BYTES, content_type="audio/mpeg")

    @routes.get("/flaky")
    async def flaky(request: web.Request) -> web.Response:
        state["flaky_hits"] = state.get("flaky_hits", 0) + 1
        if state["flaky_hits"] == 1:
            await asyncio.sleep(1)
        return web.Response(body=AUDIO_BYTES, content_type="audio/mpeg")

    @routes.get("/counted-missing")
    async def counted_missing(request: web.Request) -> web.Response:
        state["missing_hits"] = state.get("missing_hits", 0) + 1
        raise web.HTTPNotFound()

    app = web.Application()
    app.add_routes(routes)
    return app


class CardServer:
    """Handle on the running test server and its mutable state."""

    def __init__(self, server, state: Dict[str, Any]):
        self.server = server
        self.state = state

    @property
    def base_url(self) -> str:
        return f"http://{self.server.host}:{self.server.port}"

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def serve_card(self, card: Dict[str, Any]) -> None:
        self.state["card"] = card


@pytest.fixture
async def card_server(aiohttp_server) -> CardServer:
    state: Dict[str, Any] = {"card": make_card_data()}
    server = await aiohttp_server(build_app(state))
    return CardServer(server, state)
