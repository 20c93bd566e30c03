"""Tests for the command line interface."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from godocset import config as config_module
from godocset.main import build_config, main, parse_arguments
from tests._fixtures.godoc_server import FakeGodoc, serve


@pytest.fixture(autouse=True)
def no_default_files(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", (str(tmp_path / "nowhere"),))


def test_flags_override_defaults() -> None:
    args = parse_arguments([
        "--name", "Work",
        "--output", "/tmp/docsets",
        "--filters", "github.com/me/*,other/pkg",
        "--goroot", "/usr/local/go",
        "--concurrency", "4",
        "--batch",
        "--silent",
    ])

    config = build_config(args)

    assert config.name == "Work"
    assert config.output == "/tmp/docsets"
    assert config.filters == ["github.com/me/*", "other/pkg"]
    assert config.goroot == "/usr/local/go"
    assert config.concurrency == 4
    assert config.strategy == "batch"
    assert config.silent is True
    assert config.server_url is None


def test_no_flags_keeps_defaults() -> None:
    config = build_config(parse_arguments([]))

    assert config.name == "GoDoc"
    assert config.filters == []
    assert config.strategy == "window"
    assert config.silent is False


def test_missing_config_file_exits_with_error(tmp_path: Path) -> None:
    code = asyncio.run(main(["--config", str(tmp_path / "missing.json")]))

    assert code == 1


def test_builds_docset_against_running_server(godoc: FakeGodoc, tmp_path: Path) -> None:
    async def scenario():
        async with serve(godoc) as base_url:
            return await main(["--server", base_url, "--output", str(tmp_path), "--name", "Cli", "--silent"])

    assert asyncio.run(scenario()) == 0
    assert (tmp_path / "Cli.docset" / "Contents" / "Resources" / "docSet.dsidx").is_file()


def test_unreachable_server_exits_with_error(tmp_path: Path) -> None:
    async def scenario():
        async with serve(FakeGodoc()) as base_url:
            return await main(["--server", base_url, "--output", str(tmp_path), "--silent"])

    assert asyncio.run(scenario()) == 1


def test_log_file_receives_records(godoc: FakeGodoc, tmp_path: Path) -> None:
    log_path = tmp_path / "build.log"

    async def scenario():
        async with serve(godoc) as base_url:
            return await main(["--server", base_url, "--output", str(tmp_path), "--log-file", str(log_path)])

    assert asyncio.run(scenario()) == 0
    text = log_path.read_text(encoding="utf-8")
    assert "godocset.grabber - INFO" in text
    assert "github.com/user/foo" in text
