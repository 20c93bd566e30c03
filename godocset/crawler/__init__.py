"""
Crawler module for docset building.

Contains components for discovering, fetching, rewriting, extracting and mirroring.
"""

from .crawler import DocsetCrawler, CrawlResult
from .discovery import PackageDiscovery, PackageTarget
from .extractor import SymbolExtractor, SymbolEntry, SymbolKind
from .fetcher import PageFetcher, FetchError
from .grabber import PackageGrabber, CrawlOutcome
from .mirror import AssetMirror, AssetLeaf
from .rewrite import LinkRewriter
from .scheduler import CrawlScheduler
from .server import GodocServer, wait_until_ready

__all__ = [
    "DocsetCrawler",
    "CrawlResult",
    "PackageDiscovery",
    "PackageTarget",
    "SymbolExtractor",
    "SymbolEntry",
    "SymbolKind",
    "PageFetcher",
    "FetchError",
    "PackageGrabber",
    "CrawlOutcome",
    "AssetMirror",
    "AssetLeaf",
    "LinkRewriter",
    "CrawlScheduler",
    "GodocServer",
    "wait_until_ready",
]
