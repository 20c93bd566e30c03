"""
Page fetcher for the documentation server.

Wraps a shared aiohttp session and turns every kind of transport failure
into a FetchError so callers can decide whether to retry or skip. Error
statuses are failures too unless the caller asks for the body regardless.
"""

import asyncio
from typing import Optional

import aiohttp
from aiohttp import ClientTimeout, ClientError
from bs4 import BeautifulSoup

from ..utils.log import get_logger
from ..utils.constants import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT


class FetchError(Exception):
    """Raised when a page or file cannot be fetched from the server."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"{url}: {reason}")


def parse_html(html: str) -> BeautifulSoup:
    """
    Parse HTML with lxml, falling back to the builtin parser.

    Args:
        html: HTML content to parse

    Returns:
        Parsed document
    """
    try:
        return BeautifulSoup(html, 'lxml')
    except Exception:
        return BeautifulSoup(html, 'html.parser')


class PageFetcher:
    """
    Fetches pages and files from the documentation server.

    One session is shared by every concurrent task of a run.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        """
        Initialize the page fetcher.

        Args:
            timeout: Request timeout in seconds
            user_agent: User agent string for requests
        """
        self.timeout = ClientTimeout(total=timeout)
        self.user_agent = user_agent
        self.logger = get_logger("fetcher")

        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """Open the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent}
            )

    async def stop(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "PageFetcher":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def fetch_bytes(self, url: str, raise_for_status: bool = True) -> bytes:
        """
        Fetch the raw body of a URL.

        Args:
            url: URL to fetch
            raise_for_status: Treat a non-200 status as a failure; when False
                the body of an error response is returned as well

        Returns:
            Response body

        Raises:
            FetchError: On a client error, a timeout, or a non-200 status
                when raise_for_status is set
        """
        if self._session is None:
            await self.start()

        self.logger.debug(f"GET {url}")
        try:
            async with self._session.get(url, allow_redirects=True) as response:
                if response.status != 200:
                    if raise_for_status:
                        raise FetchError(url, f"HTTP {response.status}", response.status)
                    self.logger.debug(f"HTTP {response.status} for {url}")
                return await response.read()
        except ClientError as e:
            raise FetchError(url, f"client error: {e}") from e
        except asyncio.TimeoutError as e:
            raise FetchError(url, "timed out") from e

    async def fetch_text(self, url: str, raise_for_status: bool = True) -> str:
        """
        Fetch a URL and decode its body as text.

        Args:
            url: URL to fetch
            raise_for_status: See fetch_bytes

        Returns:
            Decoded body
        """
        body = await self.fetch_bytes(url, raise_for_status=raise_for_status)
        return body.decode('utf-8', errors='replace')

    async def fetch_document(self, url: str, raise_for_status: bool = True) -> BeautifulSoup:
        """
        Fetch a URL and parse it as HTML.

        Args:
            url: URL to fetch
            raise_for_status: See fetch_bytes

        Returns:
            Parsed document
        """
        return parse_html(await self.fetch_text(url, raise_for_status=raise_for_status))
