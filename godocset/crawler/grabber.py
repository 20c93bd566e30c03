"""
Package grabber: fetches one package page with bounded retry.

A successful attempt rewrites the page for offline use, saves it into the
docset and adds its symbols to the search index.
"""

import asyncio
import sqlite3
from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup

from .discovery import PackageTarget
from .extractor import SymbolEntry, SymbolExtractor
from .fetcher import PageFetcher
from .rewrite import LinkRewriter
from ..docset.bundle import DocsetBundle
from ..docset.index import SearchIndex
from ..utils.log import get_logger
from ..utils.constants import DEFAULT_RETRIES, DEFAULT_RETRY_DELAY


# Heading prefix of a package page; directory listings use other headings
PACKAGE_HEADING_PREFIX = "Package"


def is_package_page(soup: BeautifulSoup) -> bool:
    """
    Check if a page documents a package rather than listing a directory.

    Args:
        soup: Parsed page

    Returns:
        True if the first ``<h1>`` starts with 'Package'
    """
    heading = soup.find('h1')
    if heading is None:
        return False
    return heading.get_text().strip().startswith(PACKAGE_HEADING_PREFIX)


@dataclass
class CrawlOutcome:
    """Result of grabbing one package."""

    target: PackageTarget
    succeeded: bool = False
    is_package: bool = False
    error: Optional[Exception] = None
    entries: List[SymbolEntry] = field(default_factory=list)
    attempts: int = 0

    @property
    def skipped(self) -> bool:
        """True for a page that turned out not to be a package."""
        return self.succeeded and not self.is_package

    @property
    def written(self) -> bool:
        """True for a package page that was saved and indexed."""
        return self.succeeded and self.is_package


class PackageGrabber:
    """
    Fetches, rewrites, saves and indexes package pages.

    Each call to grab is independent, so one grabber serves every concurrent
    task of a crawl.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        bundle: DocsetBundle,
        index: SearchIndex,
        retries: int = DEFAULT_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        rewriter: Optional[LinkRewriter] = None,
        extractor: Optional[SymbolExtractor] = None
    ):
        """
        Initialize the package grabber.

        Args:
            fetcher: Fetcher for package pages
            bundle: Docset the pages are written to
            index: Search index the symbols are added to
            retries: Maximum attempts per package
            retry_delay: Seconds to wait between failed attempts
            rewriter: Link rewriter (a default one if None)
            extractor: Symbol extractor (a default one if None)
        """
        if retries < 1:
            raise ValueError("retries must be at least 1")

        self.fetcher = fetcher
        self.bundle = bundle
        self.index = index
        self.retries = retries
        self.retry_delay = retry_delay
        self.rewriter = rewriter or LinkRewriter()
        self.extractor = extractor or SymbolExtractor()
        self.logger = get_logger("grabber")

    async def grab(self, target: PackageTarget) -> CrawlOutcome:
        """
        Grab one package, retrying failed attempts.

        Failures are contained in the outcome; only index errors propagate.

        Args:
            target: Package to grab

        Returns:
            Outcome of the last attempt
        """
        outcome = CrawlOutcome(target=target)

        for attempt in range(1, self.retries + 1):
            if attempt > 1:
                await asyncio.sleep(self.retry_delay)

            outcome = await self._attempt(target)
            outcome.attempts = attempt

            if outcome.succeeded:
                break

            self.logger.debug(
                f"Attempt {attempt}/{self.retries} for {target.name} failed: {outcome.error}"
            )

        self._report(outcome)
        return outcome

    async def _attempt(self, target: PackageTarget) -> CrawlOutcome:
        """
        Run a single fetch, rewrite, write and index pass.

        Args:
            target: Package to grab

        Returns:
            Fresh outcome for this attempt
        """
        outcome = CrawlOutcome(target=target)

        try:
            # Error pages are classified by their heading like any other page
            soup = await self.fetcher.fetch_document(target.url, raise_for_status=False)

            if not is_package_page(soup):
                outcome.succeeded = True
                return outcome
            outcome.is_package = True

            self.rewriter.rewrite(soup, target.document_path)
            self.bundle.write_document(target.document_path, str(soup))

            entries = self.extractor.extract(soup, target.name, target.document_path)
            self.index.add_all(entries)

        except sqlite3.Error:
            raise
        except Exception as e:
            outcome.error = e
            return outcome

        outcome.entries = entries
        outcome.succeeded = True
        return outcome

    def _report(self, outcome: CrawlOutcome) -> None:
        """Log one line describing a finished package."""
        name = outcome.target.name
        if outcome.written:
            self.logger.info(f"✓ {name} ({len(outcome.entries)} symbols)")
        elif outcome.skipped:
            self.logger.debug(f"Skipped {name}: not a package page")
        else:
            self.logger.error(
                f"✗ {name} failed after {outcome.attempts} attempts: {outcome.error}"
            )
