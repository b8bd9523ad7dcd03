"""Single-page website fetcher with a hard timeout."""

import asyncio
import re
import time
from typing import Optional
from urllib.parse import urlsplit

import aiohttp
import structlog

from .interfaces import FetcherInterface, FetchNotOk, UnreachableUrl
from ..config.settings import settings

logger = structlog.get_logger()

_SCHEME_PREFIX = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def normalize_url(url: str) -> str:
    """Prefix https:// when the URL carries no scheme."""
    url = url.strip()
    if not _SCHEME_PREFIX.match(url):
        url = f"https://{url}"
    return url


def is_valid_url(url: str) -> bool:
    """Check that a URL (after normalization) has an http(s) scheme and a usable host."""
    if not url or not url.strip():
        return False
    try:
        parts = urlsplit(normalize_url(url))
        hostname = parts.hostname
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        return False

    if parts.scheme not in ("http", "https") or not hostname:
        return False
    if any(ch.isspace() for ch in parts.netloc):
        return False
    return True


class PageFetcher(FetcherInterface):
    """Async website fetcher. One GET per call, no retries."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: float = None,
        user_agent: str = None,
    ):
        self.session = session
        self._owns_session = session is None
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.fetch_timeout_seconds
        )
        self.user_agent = user_agent or settings.fetch_user_agent

    async def __aenter__(self):
        if self.session is None:
            self.session = aiohttp.ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self):
        """Close the HTTP session if this fetcher created it."""
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
        if self._owns_session:
            self.session = None

    async def fetch(self, url: str) -> str:
        """Fetch a page and return its HTML.

        Raises UnreachableUrl for any network-level failure (including the
        timeout) and FetchNotOk for a non-2xx response.
        """
        if self.session is None:
            async with self:
                return await self.fetch(url)

        url = normalize_url(url)
        start_time = time.time()
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with self.session.get(
                url,
                timeout=timeout,
                headers={"User-Agent": self.user_agent},
            ) as response:
                if not 200 <= response.status < 300:
                    logger.warning(
                        "page_fetch_not_ok",
                        url=url,
                        status=response.status,
                        reason=response.reason,
                    )
                    raise FetchNotOk(url, response.status, response.reason or "")

                html = await response.text(errors="replace")

        except asyncio.TimeoutError:
            logger.warning("page_fetch_timeout", url=url, timeout_s=self.timeout_seconds)
            raise UnreachableUrl(url, f"timed out after {self.timeout_seconds:g}s")
        except aiohttp.ClientError as e:
            logger.warning("page_fetch_failed", url=url, error=str(e))
            raise UnreachableUrl(url, type(e).__name__)

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info("page_fetched", url=url, bytes=len(html), time_ms=elapsed_ms)
        return html
