"""
Crawl scheduler running package grabs with bounded concurrency.
"""

import asyncio
from typing import Awaitable, Callable, Iterable, List, Sequence

from .discovery import PackageTarget
from .grabber import CrawlOutcome
from ..utils.log import get_logger
from ..utils.constants import DEFAULT_CONCURRENCY


# Scheduling strategies
WINDOW = "window"
BATCH = "batch"
STRATEGIES = (WINDOW, BATCH)

GrabFunc = Callable[[PackageTarget], Awaitable[CrawlOutcome]]


class CrawlScheduler:
    """
    Runs a grab function over every target, at most ``concurrency`` at once.

    The ``window`` strategy starts the next target as soon as any running
    one finishes. The ``batch`` strategy runs fixed batches and waits for a
    whole batch before starting the next.
    """

    def __init__(self, concurrency: int = DEFAULT_CONCURRENCY, strategy: str = WINDOW):
        """
        Initialize the scheduler.

        Args:
            concurrency: Maximum number of grabs in flight
            strategy: 'window' or 'batch'
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        if strategy not in STRATEGIES:
            raise ValueError(f"unknown strategy {strategy!r}, expected one of {STRATEGIES}")

        self.concurrency = concurrency
        self.strategy = strategy
        self.logger = get_logger("scheduler")

    async def run(
        self,
        targets: Sequence[PackageTarget],
        grab: GrabFunc
    ) -> List[CrawlOutcome]:
        """
        Grab every target exactly once.

        Args:
            targets: Packages to grab
            grab: Coroutine function producing the outcome of one target

        Returns:
            Outcomes in target order
        """
        if not targets:
            return []

        self.logger.debug(
            f"Scheduling {len(targets)} packages ({self.strategy}, {self.concurrency} at once)"
        )

        if self.strategy == BATCH:
            return await self._run_batches(targets, grab)
        return await self._run_window(targets, grab)

    async def _run_window(
        self,
        targets: Sequence[PackageTarget],
        grab: GrabFunc
    ) -> List[CrawlOutcome]:
        """Sliding window bounded by a semaphore."""
        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(target: PackageTarget) -> CrawlOutcome:
            async with semaphore:
                return await grab(target)

        return await self._gather(bounded(target) for target in targets)

    async def _run_batches(
        self,
        targets: Sequence[PackageTarget],
        grab: GrabFunc
    ) -> List[CrawlOutcome]:
        """Consecutive batches separated by a barrier."""
        outcomes: List[CrawlOutcome] = []

        for start in range(0, len(targets), self.concurrency):
            batch = targets[start:start + self.concurrency]
            outcomes.extend(await self._gather(grab(target) for target in batch))

        return outcomes

    @staticmethod
    async def _gather(grabs: Iterable[Awaitable[CrawlOutcome]]) -> List[CrawlOutcome]:
        """
        Run grabs concurrently and collect their outcomes in order.

        If one grab raises, the others are cancelled and awaited before the
        error propagates, so no grab outlives the crawl.
        """
        tasks = [asyncio.ensure_future(grab) for grab in grabs]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
