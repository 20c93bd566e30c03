"""
Package discovery on the godoc package listing.

Lists the third-party packages a godoc server knows about and applies the
configured include filters.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from bs4 import BeautifulSoup

from .fetcher import PageFetcher
from ..utils.log import get_logger
from ..utils.paths import document_path, join_url


# Prefix dropped from wildcard filters before matching
WILDCARD_HOST_PREFIX = "github.com/"


@dataclass(frozen=True)
class PackageTarget:
    """One package page to crawl."""

    name: str
    url: str
    document_path: str = field(default="")

    def __post_init__(self):
        if not self.document_path:
            object.__setattr__(self, "document_path", document_path(self.name))


def is_third_party(package_name: str) -> bool:
    """
    Check if a listed package is outside the standard library.

    Standard library import paths have no dot in them; they are skipped
    because an official docset already covers them.
    """
    return "." in package_name


def match_filter(package_name: str, filters: Optional[Sequence[str]]) -> bool:
    """
    Check a package against the include filters.

    Args:
        package_name: Package path as listed by the server
        filters: Substrings, or fragments ending in '*'; empty matches everything

    Returns:
        True if the package should be crawled
    """
    if not filters:
        return True

    for pattern in filters:
        if pattern.endswith("*"):
            wildcard = pattern
            if wildcard.startswith(WILDCARD_HOST_PREFIX):
                wildcard = wildcard[len(WILDCARD_HOST_PREFIX):]
            if wildcard[:-1] in package_name:
                return True
        if pattern in package_name:
            return True

    return False


class PackageDiscovery:
    """
    Discovers the packages to crawl from the server's ``/pkg/`` page.
    """

    # Package links of the godoc directory listing
    PACKAGE_LINK_SELECTOR = "div.pkg-dir td.pkg-name a"

    def __init__(self, base_url: str, filters: Optional[Sequence[str]] = None):
        """
        Initialize package discovery.

        Args:
            base_url: Root URL of the godoc server
            filters: Include filters, see match_filter
        """
        self.base_url = base_url
        self.filters = list(filters or [])
        self.logger = get_logger("discovery")

    @property
    def listing_url(self) -> str:
        """URL of the package listing page."""
        return join_url(self.base_url, "pkg/")

    async def discover(self, fetcher: PageFetcher) -> List[PackageTarget]:
        """
        Fetch the package listing and select the packages to crawl.

        Args:
            fetcher: Fetcher used for the listing page

        Returns:
            Targets in listing order

        Raises:
            FetchError: If the listing page cannot be fetched
        """
        soup = await fetcher.fetch_document(self.listing_url)
        targets = self.select(soup)
        self.logger.info(f"Discovered {len(targets)} packages to crawl")
        return targets

    def select(self, soup: BeautifulSoup) -> List[PackageTarget]:
        """
        Select the packages of a parsed listing page.

        Args:
            soup: Parsed ``/pkg/`` page

        Returns:
            Targets in listing order, each package once
        """
        targets: List[PackageTarget] = []
        seen = set()

        for anchor in soup.select(self.PACKAGE_LINK_SELECTOR):
            href = anchor.get("href")
            if not href:
                continue

            if not is_third_party(href) or not match_filter(href, self.filters):
                continue

            name = href.rstrip("/")
            if name in seen:
                continue
            seen.add(name)

            targets.append(PackageTarget(
                name=name,
                url=join_url(self.base_url, "pkg", href),
            ))

        return targets
