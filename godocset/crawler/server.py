"""
Bootstrap of a local godoc server.

Starts ``godoc -http`` on a free port and waits for its package index to be
ready before the crawl begins.
"""

import asyncio
import socket
from typing import Optional

from .fetcher import FetchError, PageFetcher
from ..errors import SetupError
from ..utils.log import get_logger
from ..utils.paths import join_url
from ..utils.constants import READY_PROBE_ATTEMPTS, READY_PROBE_INTERVAL


logger = get_logger("server")


def find_free_port(host: str = "localhost") -> int:
    """
    Ask the OS for a free TCP port.

    Args:
        host: Interface to bind

    Returns:
        A port number that was free a moment ago
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        return sock.getsockname()[1]


async def wait_until_ready(
    fetcher: PageFetcher,
    base_url: str,
    attempts: int = READY_PROBE_ATTEMPTS,
    interval: float = READY_PROBE_INTERVAL
) -> bool:
    """
    Poll the package listing until the server has finished its scan.

    godoc answers before indexing is done and shows a ``span.alert``
    ("Scan is not yet complete") on ``/pkg/`` until then.

    Args:
        fetcher: Fetcher used for probing
        base_url: Root URL of the server
        attempts: Maximum number of probes
        interval: Seconds to sleep before each probe

    Returns:
        True if the server became ready, False if the probes ran out
    """
    url = join_url(base_url, "pkg/")

    for attempt in range(1, attempts + 1):
        await asyncio.sleep(interval)
        try:
            soup = await fetcher.fetch_document(url)
        except FetchError as e:
            logger.debug(f"Probe {attempt}/{attempts}: {e}")
            continue

        if soup.select_one("span.alert") is None:
            logger.debug(f"godoc ready after {attempt} probes")
            return True
        logger.debug(f"Probe {attempt}/{attempts}: scan not complete")

    logger.warning(f"godoc at {base_url} is not ready, crawling anyway")
    return False


class GodocServer:
    """
    A godoc process serving HTTP on localhost.

    Call start once the fetcher is open and stop on every exit path.
    """

    def __init__(
        self,
        goroot: Optional[str] = None,
        silent: bool = False,
        executable: str = "godoc"
    ):
        """
        Initialize the server.

        Args:
            goroot: Value for godoc's -goroot flag, None to keep its default
            silent: Discard godoc's own output
            executable: Name or path of the godoc binary
        """
        self.goroot = goroot
        self.silent = silent
        self.executable = executable
        self.address: Optional[str] = None
        self._process: Optional[asyncio.subprocess.Process] = None

    @property
    def url(self) -> str:
        """Root URL of the running server."""
        if self.address is None:
            raise RuntimeError("godoc server is not running")
        return f"http://{self.address}"

    def command(self, address: str) -> list:
        """Build the godoc command line for an address."""
        args = [self.executable, f"-http={address}"]
        if self.goroot:
            args.append(f"-goroot={self.goroot}")
        return args

    async def start(self, fetcher: PageFetcher) -> str:
        """
        Launch godoc and wait for it to become ready.

        Args:
            fetcher: Fetcher used by the readiness probe

        Returns:
            Root URL of the server

        Raises:
            SetupError: If the process cannot be launched
        """
        address = f"localhost:{find_free_port()}"
        output = asyncio.subprocess.DEVNULL if self.silent else None

        try:
            self._process = await asyncio.create_subprocess_exec(
                *self.command(address),
                stdout=output,
                stderr=output
            )
        except OSError as e:
            raise SetupError(f"Cannot start {self.executable}: {e}") from e

        self.address = address
        logger.info(f"Started godoc on {self.url} (pid {self._process.pid})")

        await wait_until_ready(fetcher, self.url)
        return self.url

    async def stop(self) -> None:
        """Kill the godoc process if it is running."""
        if self._process is None:
            return

        logger.info(f"Killing godoc on {self.url}")
        if self._process.returncode is None:
            try:
                self._process.kill()
            except ProcessLookupError:
                pass
            await self._process.wait()
        self._process = None
