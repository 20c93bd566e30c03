"""
Path and URL utilities for the docset builder.

Provides document path generation, relative reference computation and
directory management.
"""

import os
import posixpath
from urllib.parse import urlparse


def document_path(package_name: str) -> str:
    """
    Get the docset-relative document path of a package page.
    
    Args:
        package_name: Import path of the package (e.g. 'github.com/user/pkg')
        
    Returns:
        Path string such as 'pkg/github.com/user/pkg/index.html'
    """
    return posixpath.join("pkg", package_name.strip("/"), "index.html")


def join_url(base_url: str, *parts: str) -> str:
    """
    Join a server root and path segments with single slashes.
    
    Args:
        base_url: Server root such as 'http://localhost:6060'
        parts: Path segments; a trailing slash on the last one is kept
        
    Returns:
        Joined URL string
    """
    url = base_url.rstrip("/")
    for part in parts:
        if part:
            url = f"{url}/{part.lstrip('/')}"
    return url


def is_server_rooted(reference: str) -> bool:
    """
    Check if a reference is an absolute path on the serving host.
    
    Args:
        reference: href or src attribute value
        
    Returns:
        True for '/lib/style.css', False for 'style.css',
        '//cdn.example.com/x.js' or 'https://example.com/x.js'
    """
    parsed = urlparse(reference)
    return not parsed.scheme and not parsed.netloc and reference.startswith("/")


def get_relative_path(from_document: str, to_path: str) -> str:
    """
    Calculate the relative path from a document to another docset path.
    
    Both paths are relative to the docset's Documents directory and use
    forward slashes.
    
    Args:
        from_document: Document path, e.g. 'pkg/foo/index.html'
        to_path: Target path, e.g. 'lib/godoc/style.css'
        
    Returns:
        Relative path string, e.g. '../../lib/godoc/style.css'
        
    Raises:
        ValueError: If either path is empty
    """
    if not to_path:
        raise ValueError("empty target path")
    from_dir = posixpath.dirname(from_document) or posixpath.curdir
    return posixpath.relpath(to_path, from_dir)


def ensure_dir(path: str) -> None:
    """
    Ensure a directory exists, creating it if necessary.
    
    Args:
        path: Directory path to ensure exists
    """
    os.makedirs(path, exist_ok=True)


def ensure_parent_dir(file_path: str) -> None:
    """
    Ensure the parent directory of a file exists.
    
    Args:
        file_path: File path whose parent directory should exist
    """
    parent = os.path.dirname(file_path)
    if parent:
        ensure_dir(parent)
