"""Tests for the asset mirror."""

from __future__ import annotations

import asyncio
from pathlib import Path

from godocset.crawler.fetcher import PageFetcher, parse_html
from godocset.crawler.mirror import AssetMirror
from godocset.docset import DocsetBundle
from tests._fixtures import pages
from tests._fixtures.godoc_server import FakeGodoc, serve


def _mirror(godoc: FakeGodoc, bundle: DocsetBundle, root: str = "lib/godoc/"):
    async def scenario():
        async with serve(godoc) as base_url, PageFetcher() as fetcher:
            return await AssetMirror(base_url, fetcher, bundle).mirror(root)

    return asyncio.run(scenario())


def test_list_entries_skips_parent_and_header_rows() -> None:
    soup = parse_html(pages.dirlist("images/", "style.css", "godocs.js"))

    assert AssetMirror.list_entries(soup) == ["images/", "style.css", "godocs.js"]


def test_list_entries_skips_self_references() -> None:
    soup = parse_html(pages.dirlist("./", ".", "images/../", "./style.css", "images/./"))

    assert AssetMirror.list_entries(soup) == ["style.css", "images/"]


def test_self_referencing_listing_is_walked_once(godoc: FakeGodoc, bundle: DocsetBundle) -> None:
    godoc.add("lib/godoc/analysis/", pages.dirlist("./", "help.js"))

    leaves = _mirror(godoc, bundle)

    assert "lib/godoc/analysis/help.js" in [leaf.path for leaf in leaves]
    assert godoc.hits["lib/godoc/analysis/"] == 1


def test_mirror_copies_stylesheets_and_scripts_verbatim(godoc: FakeGodoc, bundle: DocsetBundle) -> None:
    leaves = _mirror(godoc, bundle)

    documents = Path(bundle.documents_dir)
    assert sorted(leaf.path for leaf in leaves) == [
        "lib/godoc/analysis/help.js",
        "lib/godoc/jquery.js",
        "lib/godoc/style.css",
    ]
    assert (documents / "lib/godoc/style.css").read_bytes() == pages.STYLE_CSS
    assert (documents / "lib/godoc/jquery.js").read_bytes() == pages.JQUERY_JS
    assert (documents / "lib/godoc/analysis/help.js").read_bytes() == pages.HELP_JS


def test_failing_asset_does_not_stop_its_siblings(godoc: FakeGodoc, bundle: DocsetBundle, caplog) -> None:
    leaves = _mirror(godoc, bundle)

    assert not (Path(bundle.documents_dir) / "lib/godoc/broken.js").exists()
    assert len(leaves) == 3
    assert "Skipping asset /lib/godoc/broken.js" in caplog.text


def test_unlistable_subdirectory_is_skipped(godoc: FakeGodoc, bundle: DocsetBundle, caplog) -> None:
    godoc.add("lib/godoc/", pages.dirlist("images/", "style.css"))

    leaves = _mirror(godoc, bundle)

    assert [leaf.path for leaf in leaves] == ["lib/godoc/style.css"]
    assert godoc.hits["lib/godoc/images/"] == 1
    assert "Cannot list /lib/godoc/images/" in caplog.text


def test_missing_root_mirrors_nothing(bundle: DocsetBundle) -> None:
    assert _mirror(FakeGodoc(), bundle) == []
