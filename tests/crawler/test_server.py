"""Tests for the godoc server bootstrap."""

from __future__ import annotations

import asyncio
import socket

import pytest

from godocset.crawler.fetcher import PageFetcher
from godocset.crawler.server import GodocServer, find_free_port, wait_until_ready
from godocset.errors import SetupError
from tests._fixtures import pages
from tests._fixtures.godoc_server import FakeGodoc, serve


def _probe(godoc: FakeGodoc, attempts: int = 15) -> bool:
    async def scenario():
        async with serve(godoc) as base_url, PageFetcher() as fetcher:
            return await wait_until_ready(fetcher, base_url, attempts=attempts, interval=0)

    return asyncio.run(scenario())


def test_ready_once_scan_completes() -> None:
    godoc = FakeGodoc()
    godoc.add_sequence("pkg/", pages.SCANNING_PAGE, pages.SCANNING_PAGE, pages.LISTING_PAGE)
    godoc.fail("pkg/", 2)

    assert _probe(godoc) is True
    assert godoc.hits["pkg/"] == 5


def test_gives_up_after_the_probe_budget(caplog) -> None:
    godoc = FakeGodoc()
    godoc.add("pkg/", pages.SCANNING_PAGE)

    assert _probe(godoc, attempts=3) is False
    assert godoc.hits["pkg/"] == 3
    assert "not ready" in caplog.text


def test_find_free_port_is_bindable() -> None:
    port = find_free_port()

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("localhost", port))


def test_command_line() -> None:
    assert GodocServer().command("localhost:6060") == ["godoc", "-http=localhost:6060"]
    assert GodocServer(goroot="/usr/local/go").command("localhost:1") == [
        "godoc",
        "-http=localhost:1",
        "-goroot=/usr/local/go",
    ]


def test_missing_binary_is_a_setup_error() -> None:
    server = GodocServer(executable="godoc-binary-that-does-not-exist", silent=True)

    async def scenario():
        async with PageFetcher() as fetcher:
            await server.start(fetcher)

    with pytest.raises(SetupError):
        asyncio.run(scenario())

    with pytest.raises(RuntimeError):
        server.url


def test_stop_without_start_is_a_no_op() -> None:
    asyncio.run(GodocServer().stop())
