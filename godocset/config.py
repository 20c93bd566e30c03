"""
Configuration of a docset build.

Values come from an optional JSON or YAML configuration file and are
overridden by command line flags. The resulting DocsetConfig is passed
explicitly to every component.
"""

import json
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .utils.constants import (
    CONFIG_FILE_NAMES,
    CONFIG_SEARCH_PATHS,
    DEFAULT_ASSET_ROOT,
    DEFAULT_CONCURRENCY,
    DEFAULT_DOCSET_NAME,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
)


@dataclass(frozen=True)
class DocsetConfig:
    """Settings of one docset build."""

    name: str = DEFAULT_DOCSET_NAME
    output: str = ""
    icon: Optional[str] = None
    filters: List[str] = field(default_factory=list)
    goroot: Optional[str] = None
    silent: bool = False

    # Crawl against an already running server instead of starting godoc
    server_url: Optional[str] = None
    asset_root: str = DEFAULT_ASSET_ROOT
    concurrency: int = DEFAULT_CONCURRENCY
    strategy: str = "window"
    retries: int = DEFAULT_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    timeout: int = DEFAULT_TIMEOUT

    def with_overrides(self, **values: Any) -> "DocsetConfig":
        """
        Get a copy with the given values applied.

        Args:
            values: Field values; None means "not given" and is ignored

        Returns:
            Updated configuration
        """
        given = {key: value for key, value in values.items() if value is not None}
        return replace(self, **given)


def parse_filters(value: Optional[str]) -> List[str]:
    """
    Split a comma separated filter list.

    Args:
        value: e.g. 'github.com/user/pkg1,user/pkg2'

    Returns:
        Non-empty, stripped filters
    """
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def find_config_file() -> Optional[str]:
    """Get the first default configuration file that exists."""
    for directory in CONFIG_SEARCH_PATHS:
        for name in CONFIG_FILE_NAMES:
            candidate = os.path.join(directory, name)
            if os.path.isfile(candidate):
                return candidate
    return None


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Get a section of the configuration document, case-insensitively."""
    for key, value in data.items():
        if key.lower() == name:
            if not isinstance(value, dict):
                raise ConfigError(f"'{key}' must be an object")
            return {k.lower(): v for k, v in value.items()}
    return {}


def config_from_dict(data: Dict[str, Any]) -> DocsetConfig:
    """
    Build a configuration from a parsed configuration document.

    Args:
        data: Document shaped like
            ``{"options": {"silent": false},
               "docset": {"name", "icon", "output", "filters"},
               "go": {"goroot": ...}}``

    Returns:
        Configuration with defaults for missing values
    """
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a JSON object")

    options = _section(data, "options")
    docset = _section(data, "docset")
    go = _section(data, "go")

    filters = docset.get("filters")
    if isinstance(filters, str):
        filters = parse_filters(filters)
    elif filters is not None and not isinstance(filters, list):
        raise ConfigError("'docset.filters' must be a list or a comma separated string")

    return DocsetConfig().with_overrides(
        name=docset.get("name") or None,
        output=docset.get("output"),
        icon=docset.get("icon") or None,
        filters=[str(f) for f in filters] if filters else None,
        goroot=go.get("goroot") or None,
        silent=options.get("silent"),
    )


def load_config(path: Optional[str] = None) -> DocsetConfig:
    """
    Load the configuration file.

    Args:
        path: Explicit file; the default locations are searched when None

    Returns:
        Loaded configuration, or defaults when no default file exists

    Raises:
        ConfigError: If an explicit file is missing, or a file is malformed
    """
    if path is None:
        path = find_config_file()
        if path is None:
            return DocsetConfig()
    elif not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.endswith((".yaml", ".yml")):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    return config_from_dict(data)
