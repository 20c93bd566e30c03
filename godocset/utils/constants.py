"""
Shared constants for the docset builder.

Contains common configuration values used across multiple modules.
"""

# User agent sent with every request to the documentation server
DEFAULT_USER_AGENT = "godocset/1.0 (+https://github.com/godocset/godocset)"

# Default request timeout in seconds
DEFAULT_TIMEOUT = 30

# Packages crawled concurrently
DEFAULT_CONCURRENCY = 10

# Attempts per package page, and the fixed pause between attempts in seconds
DEFAULT_RETRIES = 5
DEFAULT_RETRY_DELAY = 2.0

# Readiness probe of a freshly started godoc server
READY_PROBE_INTERVAL = 0.5
READY_PROBE_ATTEMPTS = 15

# Default docset display name
DEFAULT_DOCSET_NAME = "GoDoc"

# Static asset tree mirrored next to the package pages
DEFAULT_ASSET_ROOT = "lib/godoc/"

# Names of the optional configuration file, in lookup order, and the
# directories searched for it
CONFIG_FILE_NAMES = ("godocset-config.json", "godocset-config.yaml", "godocset-config.yml")
CONFIG_SEARCH_PATHS = ("/tmp", ".")
