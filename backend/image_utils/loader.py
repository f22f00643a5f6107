"""
Image Load Detection

Turns the load/error callbacks of an image probe into an awaitable that
settles exactly once:

    await check_image_loaded("https://example.com/logo.png")

A probe is anything with ``onload`` / ``onerror`` callback attributes and
a ``src`` property whose assignment starts loading. ``HttpImageProbe``
fetches the image with httpx and decodes it with Pillow.
"""

import os
import asyncio
import logging
from io import BytesIO
from typing import Callable, Optional, Protocol, Set

import httpx
from PIL import Image

logger = logging.getLogger(__name__)

# HTTP timeout of the default probe (seconds)
PROBE_TIMEOUT_SECONDS = float(os.getenv("IMAGE_PROBE_TIMEOUT_SECONDS", "15"))

# Event loops keep only weak references to tasks
_load_tasks: Set[asyncio.Task] = set()


class ImageLoadError(Exception):
    """Raised through the awaitable when an image fails to load."""

    def __init__(self, url: str):
        super().__init__(f"Failed to load image: {url}")
        self.url = url


class ImageProbe(Protocol):
    onload: Optional[Callable[[], None]]
    onerror: Optional[Callable[[Optional[BaseException]], None]]
    src: str


class _SingleSettlement:
    """Wraps a future so only the first resolve/reject has any effect."""

    def __init__(self, future: "asyncio.Future[None]"):
        self._future = future

    def resolve(self) -> bool:
        if self._future.done():
            return False
        self._future.set_result(None)
        return True

    def reject(self, error: BaseException) -> bool:
        if self._future.done():
            return False
        self._future.set_exception(error)
        return True


class HttpImageProbe:
    """
    Loads an image over HTTP when ``src`` is assigned.

    Fires ``onload`` when the payload decodes as an image (SVG is accepted
    as-is), otherwise ``onerror`` with the underlying exception.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = PROBE_TIMEOUT_SECONDS,
    ):
        self.onload: Optional[Callable[[], None]] = None
        self.onerror: Optional[Callable[[Optional[BaseException]], None]] = None
        self.timeout = timeout
        self._http_client = http_client
        self._src = ""
        self._task: Optional[asyncio.Task] = None

    @property
    def src(self) -> str:
        return self._src

    @src.setter
    def src(self, url: str) -> None:
        self._src = url
        self._task = asyncio.get_running_loop().create_task(self._load(url))
        _load_tasks.add(self._task)
        self._task.add_done_callback(_load_tasks.discard)

    @staticmethod
    def _is_svg(url: str, data: bytes) -> bool:
        """Detect SVG by URL extension or content signature."""
        if url.lower().split("?", 1)[0].endswith(".svg"):
            return True
        header = data[:500].strip()
        if header.startswith(b"<svg") or header.startswith(b"<?xml"):
            return True
        return b"<svg" in header

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> bytes:
        response = await client.get(url)
        response.raise_for_status()
        return response.content

    async def _load(self, url: str) -> None:
        try:
            if self._http_client is not None:
                data = await self._fetch(self._http_client, url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    data = await self._fetch(client, url)

            if not self._is_svg(url, data):
                with Image.open(BytesIO(data)) as img:
                    img.verify()
        except Exception as e:
            logger.warning(f"[ImageLoader] Failed: {url[:60]}... - {type(e).__name__}: {e}")
            if self.onerror is not None:
                self.onerror(e)
            return

        logger.debug(f"[ImageLoader] Loaded: {url[:60]}... ({len(data)} bytes)")
        if self.onload is not None:
            self.onload()


def check_image_loaded(
    src: str,
    probe_factory: Optional[Callable[[], ImageProbe]] = None,
) -> "asyncio.Future[None]":
    """
    Check if an image is loaded successfully.

    Must be called from a running event loop. There is no timeout: a probe
    that never reports back leaves the future pending.

    Args:
        src: Image source URL
        probe_factory: Creates the probe, defaults to ``HttpImageProbe``

    Returns:
        Future that resolves when the image is loaded, or fails with
        ImageLoadError on error
    """
    future: "asyncio.Future[None]" = asyncio.get_running_loop().create_future()
    settlement = _SingleSettlement(future)

    probe = (probe_factory or HttpImageProbe)()
    probe.onload = lambda: settlement.resolve()
    probe.onerror = lambda error=None: settlement.reject(ImageLoadError(src))
    probe.src = src

    return future
