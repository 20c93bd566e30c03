"""
Main docset crawler module.

Orchestrates the build: docset layout, server bootstrap, package discovery,
concurrent package grabbing, asset mirroring and the final index commit.
"""

import asyncio
import sqlite3
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .discovery import PackageDiscovery, PackageTarget
from .fetcher import FetchError, PageFetcher
from .grabber import CrawlOutcome, PackageGrabber
from .mirror import AssetLeaf, AssetMirror
from .scheduler import CrawlScheduler
from .server import GodocServer
from ..config import DocsetConfig
from ..docset.bundle import DocsetBundle
from ..docset.index import SearchIndex
from ..errors import SetupError
from ..utils.log import get_logger, print_info, print_success, print_warning


@dataclass
class CrawlResult:
    """Results of a docset build."""

    docset_dir: str = ""
    packages_found: int = 0
    packages_written: int = 0
    packages_skipped: int = 0
    failures: List[Tuple[str, str]] = field(default_factory=list)
    symbols_indexed: int = 0
    assets_mirrored: int = 0
    duration_seconds: float = 0.0


class DocsetCrawler:
    """
    Main docset crawler class.

    Coordinates all components to turn a godoc server into a docset.
    """

    def __init__(self, config: DocsetConfig, server: Optional[GodocServer] = None):
        """
        Initialize the docset crawler.

        Args:
            config: Build settings
            server: godoc process to start when config.server_url is not set
        """
        self.config = config
        self.bundle = DocsetBundle(config.output, config.name)
        self.scheduler = CrawlScheduler(
            concurrency=config.concurrency,
            strategy=config.strategy
        )
        self.server = server
        if self.server is None and not config.server_url:
            self.server = GodocServer(goroot=config.goroot, silent=config.silent)

        self.logger = get_logger("crawler")

    async def run(self) -> CrawlResult:
        """
        Build the docset.

        Returns:
            CrawlResult with statistics

        Raises:
            SetupError: If a setup step fails
            sqlite3.Error: If the index cannot be written or committed
        """
        start_time = time.time()

        print_info(f"Building {self.bundle.root}")
        self._prepare_bundle()
        index = self._create_index()

        try:
            async with PageFetcher(timeout=self.config.timeout) as fetcher:
                try:
                    base_url = await self._start_server(fetcher)
                    targets = await self._discover(fetcher, base_url)
                    outcomes, leaves = await self._crawl(fetcher, base_url, index, targets)
                finally:
                    if self.server is not None:
                        await self.server.stop()

            index.commit()
            symbols = index.count()
        except BaseException:
            index.rollback()
            raise
        finally:
            index.close()

        result = self._summarize(targets, outcomes, leaves, symbols)
        result.duration_seconds = time.time() - start_time

        if result.failures:
            print_warning(f"{len(result.failures)} packages could not be grabbed")

        print_success(
            f"Docset complete! {result.packages_written} packages, "
            f"{result.symbols_indexed} symbols in {result.duration_seconds:.1f}s"
        )
        return result

    def _prepare_bundle(self) -> None:
        """Write the icon and the manifest."""
        try:
            self.bundle.write_icon(self.config.icon)
        except OSError as e:
            raise SetupError(f"Cannot write icon: {e}") from e

        try:
            self.bundle.write_plist()
        except OSError as e:
            raise SetupError(f"Cannot write Info.plist: {e}") from e

    def _create_index(self) -> SearchIndex:
        """Create the empty search index."""
        try:
            return SearchIndex.create(self.bundle.index_path)
        except (OSError, sqlite3.Error) as e:
            raise SetupError(f"Cannot create search index: {e}") from e

    async def _start_server(self, fetcher: PageFetcher) -> str:
        """Get the server root, starting godoc if needed."""
        if self.config.server_url:
            return self.config.server_url
        return await self.server.start(fetcher)

    async def _discover(self, fetcher: PageFetcher, base_url: str) -> List[PackageTarget]:
        """List the packages to crawl."""
        discovery = PackageDiscovery(base_url, self.config.filters)
        try:
            return await discovery.discover(fetcher)
        except FetchError as e:
            raise SetupError(f"Cannot fetch the package list: {e}") from e

    async def _crawl(
        self,
        fetcher: PageFetcher,
        base_url: str,
        index: SearchIndex,
        targets: List[PackageTarget]
    ) -> Tuple[List[CrawlOutcome], List[AssetLeaf]]:
        """Grab every package while mirroring the static assets."""
        grabber = PackageGrabber(
            fetcher,
            self.bundle,
            index,
            retries=self.config.retries,
            retry_delay=self.config.retry_delay
        )
        mirror = AssetMirror(base_url, fetcher, self.bundle)

        print_info(f"Crawling {len(targets)} packages...")

        tasks = [
            asyncio.ensure_future(self.scheduler.run(targets, grabber.grab)),
            asyncio.ensure_future(mirror.mirror(self.config.asset_root)),
        ]
        try:
            outcomes, leaves = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return outcomes, leaves

    def _summarize(
        self,
        targets: List[PackageTarget],
        outcomes: List[CrawlOutcome],
        leaves: List[AssetLeaf],
        symbols: int
    ) -> CrawlResult:
        """Build the result of the run."""
        result = CrawlResult(
            docset_dir=self.bundle.root,
            packages_found=len(targets),
            symbols_indexed=symbols,
            assets_mirrored=len(leaves),
        )

        for outcome in outcomes:
            if outcome.written:
                result.packages_written += 1
            elif outcome.skipped:
                result.packages_skipped += 1
            else:
                result.failures.append((outcome.target.name, str(outcome.error)))

        return result
