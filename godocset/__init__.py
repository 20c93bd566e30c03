"""
GoDocset - build offline Dash docsets from a running godoc server.

This package crawls the package pages served by godoc, rewrites them for
offline viewing, mirrors the static assets and builds a searchable index of
the documented symbols.
"""

__version__ = "1.0.0"
__author__ = "GoDocset Team"
