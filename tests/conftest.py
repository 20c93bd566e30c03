from __future__ import annotations

import logging
from pathlib import Path

import pytest

from godocset.docset import DocsetBundle, SearchIndex
from godocset.utils import log
from tests._fixtures.godoc_server import FakeGodoc, standard_godoc


@pytest.fixture
def godoc() -> FakeGodoc:
    """Provide a fake godoc server with the standard pages."""
    return standard_godoc()


@pytest.fixture
def bundle(tmp_path: Path) -> DocsetBundle:
    """Provide a docset layout rooted at the pytest tmp_path."""
    return DocsetBundle(str(tmp_path), "GoDoc")


@pytest.fixture
def index(bundle: DocsetBundle):
    """Provide an empty search index inside the bundle."""
    search_index = SearchIndex.create(bundle.index_path)
    yield search_index
    search_index.close()


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logger configuration done by the CLI."""
    yield
    logger = logging.getLogger(log.ROOT_LOGGER)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    log._quiet = False
