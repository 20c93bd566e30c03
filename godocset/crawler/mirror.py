"""
Asset mirror for the static files of the documentation server.

Walks godoc's directory listings recursively and copies every stylesheet
and script into the docset, keeping the server's directory layout.
"""

import asyncio
import posixpath
from dataclasses import dataclass
from typing import List

from bs4 import BeautifulSoup

from .fetcher import FetchError, PageFetcher
from ..docset.bundle import DocsetBundle
from ..utils.log import get_logger
from ..utils.paths import join_url


# Leaf files copied into the docset
ASSET_SUFFIXES = ('.css', '.js')


@dataclass(frozen=True)
class AssetLeaf:
    """A mirrored stylesheet or script."""

    path: str
    data: bytes


class AssetMirror:
    """
    Mirrors a static asset tree from the server into the docset.

    Subdirectories are walked concurrently; a failing row is logged and
    skipped without affecting its siblings.
    """

    def __init__(self, base_url: str, fetcher: PageFetcher, bundle: DocsetBundle):
        """
        Initialize the asset mirror.

        Args:
            base_url: Root URL of the godoc server
            fetcher: Fetcher for listings and files
            bundle: Docset the files are written to
        """
        self.base_url = base_url
        self.fetcher = fetcher
        self.bundle = bundle
        self.logger = get_logger("mirror")

    async def mirror(self, root: str) -> List[AssetLeaf]:
        """
        Mirror a directory tree.

        Args:
            root: Server directory such as 'lib/godoc/'

        Returns:
            Every asset written, in no particular order
        """
        root = root.strip("/") + "/"
        leaves = await self._walk(root)
        self.logger.info(f"Mirrored {len(leaves)} assets from /{root}")
        return leaves

    async def _walk(self, directory: str) -> List[AssetLeaf]:
        """
        Mirror one directory and everything below it.

        Args:
            directory: Server path of the directory, ending in '/'

        Returns:
            Assets written below this directory
        """
        try:
            soup = await self.fetcher.fetch_document(join_url(self.base_url, directory))
        except FetchError as e:
            self.logger.error(f"Cannot list /{directory}: {e}")
            return []

        tasks = []
        for href in self.list_entries(soup):
            if href.endswith(ASSET_SUFFIXES):
                tasks.append(self._copy(directory + href))
            else:
                subdirectory = directory + href
                if not subdirectory.endswith("/"):
                    subdirectory += "/"
                tasks.append(self._walk(subdirectory))

        leaves: List[AssetLeaf] = []
        for result in await asyncio.gather(*tasks):
            if isinstance(result, AssetLeaf):
                leaves.append(result)
            elif result:
                leaves.extend(result)
        return leaves

    async def _copy(self, path: str):
        """
        Fetch one asset and write it verbatim.

        Args:
            path: Server path of the asset

        Returns:
            The written AssetLeaf, or None if it was skipped
        """
        try:
            data = await self.fetcher.fetch_bytes(join_url(self.base_url, path))
            self.bundle.write_asset(path, data)
        except (FetchError, OSError, ValueError) as e:
            self.logger.error(f"Skipping asset /{path}: {e}")
            return None

        self.logger.debug(f"Mirrored /{path} ({len(data)} bytes)")
        return AssetLeaf(path=path, data=data)

    @staticmethod
    def list_entries(soup: BeautifulSoup) -> List[str]:
        """
        List the entries of a godoc directory listing.

        Each entry row carries a link in its first cell and further cells
        for size and modification time; the parent row ('..') has a single
        cell and is skipped, as are header rows without links.

        Args:
            soup: Parsed directory listing

        Returns:
            Normalized relative hrefs in listing order
        """
        hrefs = []
        for row in soup.find_all('tr'):
            if len(row.find_all(['td', 'th'], recursive=False)) < 2:
                continue

            link = row.find('a', href=True)
            if link is None:
                continue

            href = link['href'].strip()
            if not href or href.startswith(('/', '?', '#')) or '://' in href:
                continue

            # Entries must name something strictly below the listed directory
            normalized = posixpath.normpath(href)
            if normalized == '.' or normalized.startswith('..'):
                continue
            if href.endswith('/'):
                normalized += '/'
            hrefs.append(normalized)
        return hrefs
