"""
Docset output modules.

Contains the bundle layout writer and the search index.
"""

from .bundle import DocsetBundle
from .index import SearchIndex

__all__ = [
    "DocsetBundle",
    "SearchIndex",
]
