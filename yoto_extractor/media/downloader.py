"""
Handles the low-level fetching of pages and files over HTTP, and maps declared
audio content types to file extensions.
"""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import aiofiles
import aiohttp
from aiohttp import hdrs

from yoto_extractor.exceptions import (
    FetchError,
    FilesystemError,
    UnknownContentTypeError,
)
from yoto_extractor.models.config import DEFAULT_USER_AGENT, ExtractConfig

log = logging.getLogger(__name__)

T = TypeVar("T")
ProgressCallback = Callable[[int, Optional[int]], None]

AUDIO_EXTENSIONS = {
    "audio/mpeg": "mp3",
    "audio/aac": "aac",
    "audio/wav": "wav",
    "audio/ogg": "ogg",
    "audio/mp4": "m4a",
    "audio/x-m4a": "m4a",
    "audio/flac": "flac",
}


def resolve_extension(content_type: Optional[str]) -> str:
    """
    Maps a declared audio content type to a file extension.

    Raises:
        UnknownContentTypeError: For any type outside the known audio table.
    """
    if content_type and content_type in AUDIO_EXTENSIONS:
        return AUDIO_EXTENSIONS[content_type]
    raise UnknownContentTypeError(content_type)


def _declared_content_type(response: aiohttp.ClientResponse) -> Optional[str]:
    """The media type the server declared, without parameters, or None."""
    if hdrs.CONTENT_TYPE not in response.headers:
        return None
    return response.content_type


class Downloader:
    """
    A file downloader sharing one HTTP session for the whole run.

    Every request carries the configured total timeout and redirect limit.
    Network errors and timeouts are retried `retries` times with exponential
    backoff; error statuses are never retried.
    """

    CHUNK_SIZE = 131072  # 128 KB

    def __init__(
        self,
        timeout: float = 120.0,
        max_redirects: int = 5,
        max_workers: int = 4,
        retries: int = 0,
        base_delay: float = 1.5,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.timeout = timeout
        self.max_redirects = max_redirects
        self.max_workers = max_workers
        self.max_attempts = retries + 1
        self.base_delay = base_delay
        self.user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_config(cls, config: ExtractConfig) -> "Downloader":
        return cls(
            timeout=config.timeout,
            max_redirects=config.max_redirects,
            max_workers=config.max_workers,
            retries=config.retries,
            user_agent=config.user_agent,
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session sized for the worker count."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.max_workers * 2,
                limit_per_host=self.max_workers * 2,
                ttl_dns_cache=300,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent},
            )
            log.debug(f"Created download session (timeout={self.timeout}s).")
        return self._session

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            log.debug("Download session closed.")

    async def __aenter__(self) -> "Downloader":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _describe(self, error: BaseException) -> str:
        if isinstance(error, asyncio.TimeoutError):
            return f"timed out after {self.timeout:g}s"
        return str(error) or type(error).__name__

    async def _request(
        self,
        url: str,
        handle: Callable[[aiohttp.ClientResponse], Awaitable[T]],
    ) -> T:
        """Performs a GET and hands a successful response to `handle`."""
        last_exception: Optional[BaseException] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                session = await self._get_session()
                # aiohttp fails once the hop count reaches the limit, and treats
                # 0 as unlimited
                async with session.get(
                    url, allow_redirects=True, max_redirects=self.max_redirects + 1
                ) as response:
                    if not 200 <= response.status < 300:
                        raise FetchError(
                            url,
                            f"HTTP {response.status} {response.reason or ''}".strip(),
                            status=response.status,
                        )
                    return await handle(response)
            except aiohttp.TooManyRedirects as e:
                raise FetchError(
                    url, f"exceeded {self.max_redirects} redirects"
                ) from e
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                log.debug(
                    f"Fetch attempt {attempt}/{self.max_attempts} for {url} "
                    f"failed: {self._describe(e)}"
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.base_delay * (2 ** (attempt - 1)))

        raise FetchError(url, self._describe(last_exception)) from last_exception

    async def fetch_text(self, url: str) -> tuple[str, Optional[str]]:
        """Fetches a page as text, returning it with its declared content type."""

        async def handle(response: aiohttp.ClientResponse) -> tuple[str, Optional[str]]:
            text = await response.text(errors="replace")
            return text, _declared_content_type(response)

        return await self._request(url, handle)

    async def fetch(self, url: str) -> tuple[bytes, Optional[str]]:
        """Fetches a resource into memory, returning its bytes and content type."""

        async def handle(response: aiohttp.ClientResponse) -> tuple[bytes, Optional[str]]:
            body = await response.read()
            return body, _declared_content_type(response)

        return await self._request(url, handle)

    async def download_to(
        self,
        url: str,
        destination_path: Path,
        on_progress: Optional[ProgressCallback] = None,
    ) -> tuple[Optional[str], int]:
        """
        Streams a resource to a file.

        Args:
            url: The resource to fetch.
            destination_path: The file to write; truncated if it exists.
            on_progress: Called after each chunk with the bytes written so far
                and the Content-Length, if the server sent one.

        Returns:
            The declared content type and the number of bytes written.

        Raises:
            FetchError: If the request fails.
            FilesystemError: If the destination cannot be written.
        """

        async def handle(response: aiohttp.ClientResponse) -> tuple[Optional[str], int]:
            bytes_written = 0
            total = response.content_length
            try:
                async with aiofiles.open(destination_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                        await f.write(chunk)
                        bytes_written += len(chunk)
                        if on_progress:
                            on_progress(bytes_written, total)
            except OSError as e:
                raise FilesystemError(
                    f"Could not write '{destination_path}': {e}"
                ) from e
            return _declared_content_type(response), bytes_written

        return await self._request(url, handle)
