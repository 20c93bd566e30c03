"""
Utility modules for the docset builder.

Contains logging, path handling utilities, and constants.
"""

from .log import setup_logger, get_logger
from .paths import document_path, join_url, get_relative_path, ensure_dir, ensure_parent_dir
from .constants import (
    DEFAULT_USER_AGENT,
    DEFAULT_TIMEOUT,
    DEFAULT_CONCURRENCY,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_DOCSET_NAME,
    DEFAULT_ASSET_ROOT,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "document_path",
    "join_url",
    "get_relative_path",
    "ensure_dir",
    "ensure_parent_dir",
    "DEFAULT_USER_AGENT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_CONCURRENCY",
    "DEFAULT_RETRIES",
    "DEFAULT_RETRY_DELAY",
    "DEFAULT_DOCSET_NAME",
    "DEFAULT_ASSET_ROOT",
]
