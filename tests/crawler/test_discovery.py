"""Tests for package discovery."""

from __future__ import annotations

import asyncio

import pytest

from godocset.crawler.discovery import PackageDiscovery, PackageTarget, is_third_party, match_filter
from godocset.crawler.fetcher import FetchError, PageFetcher, parse_html
from tests._fixtures import pages
from tests._fixtures.godoc_server import FakeGodoc, serve


@pytest.mark.parametrize(
    "name, expected",
    [
        ("fmt/", False),
        ("net/http/", False),
        ("github.com/user/foo/", True),
        ("golang.org/x/text/", True),
    ],
)
def test_is_third_party_requires_a_dot(name: str, expected: bool) -> None:
    assert is_third_party(name) is expected


def test_match_filter_without_filters_accepts_everything() -> None:
    assert match_filter("github.com/user/foo/", [])
    assert match_filter("github.com/user/foo/", None)


@pytest.mark.parametrize(
    "filters, expected",
    [
        (["github.com/user/foo"], True),
        (["user/foo"], True),
        (["user/baz"], False),
        (["github.com/user/*"], True),
        (["github.com/other/*"], False),
        (["user/*"], True),
        (["golang.org/x/*"], False),
        (["nothing", "foo"], True),
    ],
)
def test_match_filter(filters, expected: bool) -> None:
    assert match_filter("github.com/user/foo/", filters) is expected


def test_wildcard_drops_github_prefix_before_matching() -> None:
    # The fragment 'user/' is looked up anywhere in the name
    assert match_filter("gitlab.com/user/pkg/", ["github.com/user/*"])


def test_package_target_derives_document_path() -> None:
    target = PackageTarget(name="github.com/user/foo", url="http://localhost/pkg/github.com/user/foo/")

    assert target.document_path == "pkg/github.com/user/foo/index.html"


def test_select_skips_standard_library_and_duplicates() -> None:
    discovery = PackageDiscovery("http://localhost:6060")

    targets = discovery.select(parse_html(pages.LISTING_PAGE))

    assert [t.name for t in targets] == [
        "github.com/user/foo",
        "github.com/user/bar",
        "github.com/user/dir",
        "golang.org/x/text",
    ]
    assert targets[0].url == "http://localhost:6060/pkg/github.com/user/foo/"


def test_select_applies_filters() -> None:
    discovery = PackageDiscovery("http://localhost:6060", ["user/foo", "golang.org/x/*"])

    targets = discovery.select(parse_html(pages.LISTING_PAGE))

    assert [t.name for t in targets] == ["github.com/user/foo", "golang.org/x/text"]


def test_select_with_no_packages_returns_empty_list() -> None:
    discovery = PackageDiscovery("http://localhost:6060")

    assert discovery.select(parse_html("<html><body><h1>Packages</h1></body></html>")) == []


def test_discover_fetches_listing(godoc: FakeGodoc) -> None:
    async def scenario():
        async with serve(godoc) as base_url, PageFetcher() as fetcher:
            return await PackageDiscovery(base_url, ["bar"]).discover(fetcher)

    targets = asyncio.run(scenario())

    assert [t.name for t in targets] == ["github.com/user/bar"]
    assert godoc.hits["pkg/"] == 1


def test_discover_raises_when_listing_is_unavailable() -> None:
    async def scenario():
        async with serve(FakeGodoc()) as base_url, PageFetcher() as fetcher:
            await PackageDiscovery(base_url).discover(fetcher)

    with pytest.raises(FetchError) as excinfo:
        asyncio.run(scenario())

    assert excinfo.value.status == 404
