"""
Docset bundle layout.

Resolves the directories of a ``<name>.docset`` bundle and writes its
manifest, icon, documents and assets.
"""

import os
import plistlib
import shutil
from typing import Optional, Union

from ..utils.log import get_logger
from ..utils.paths import ensure_dir, ensure_parent_dir


# Icon used when none is configured
DEFAULT_ICON = os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets", "godoc.png")


class DocsetBundle:
    """
    File layout of a Dash docset.

    Every write goes below the bundle directory; documents and assets go
    below ``Contents/Resources/Documents``.
    """

    def __init__(self, output_dir: str, name: str):
        """
        Initialize the bundle layout.

        Args:
            output_dir: Directory the bundle is created in ('' for the working directory)
            name: Docset display name
        """
        if not name:
            raise ValueError("docset name must not be empty")

        self.name = name
        self.root = os.path.abspath(os.path.join(output_dir or os.curdir, f"{name}.docset"))
        self.contents_dir = os.path.join(self.root, "Contents")
        self.resources_dir = os.path.join(self.contents_dir, "Resources")
        self.documents_dir = os.path.join(self.resources_dir, "Documents")
        self.index_path = os.path.join(self.resources_dir, "docSet.dsidx")
        self.icon_path = os.path.join(self.resources_dir, "icon.png")
        self.plist_path = os.path.join(self.contents_dir, "Info.plist")
        self.logger = get_logger("bundle")

    @property
    def display_name(self) -> str:
        """Docset name with its first letter upper-cased."""
        return self.name[:1].upper() + self.name[1:]

    def write_icon(self, icon_path: Optional[str] = None) -> str:
        """
        Copy the docset icon into the bundle.

        Args:
            icon_path: PNG file to use; the bundled godoc icon when None

        Returns:
            Path of the written icon
        """
        source = icon_path or DEFAULT_ICON
        ensure_parent_dir(self.icon_path)
        shutil.copyfile(source, self.icon_path)
        self.logger.debug(f"Wrote icon {source} -> {self.icon_path}")
        return self.icon_path

    def write_plist(self) -> str:
        """
        Write the ``Info.plist`` manifest Dash requires.

        Returns:
            Path of the written manifest
        """
        plist = {
            "CFBundleIdentifier": self.name,
            "CFBundleName": self.display_name,
            "DocSetPlatformFamily": self.name,
            "isDashDocset": True,
        }
        ensure_dir(self.contents_dir)
        with open(self.plist_path, "wb") as f:
            plistlib.dump(plist, f)
        self.logger.debug(f"Wrote {self.plist_path}")
        return self.plist_path

    def document_file(self, relative_path: str) -> str:
        """
        Resolve a Documents-relative path to a file path.

        Args:
            relative_path: Path such as 'pkg/foo/index.html'

        Returns:
            Absolute file path inside the bundle

        Raises:
            ValueError: If the path escapes the Documents directory
        """
        target = os.path.normpath(os.path.join(self.documents_dir, relative_path.lstrip("/")))
        if os.path.commonpath([target, self.documents_dir]) != self.documents_dir:
            raise ValueError(f"path escapes the docset: {relative_path}")
        return target

    def write_document(self, relative_path: str, html: str) -> str:
        """
        Write a rewritten page into the bundle.

        Args:
            relative_path: Documents-relative path of the page
            html: Page content

        Returns:
            Path of the written file
        """
        target = self.document_file(relative_path)
        ensure_parent_dir(target)
        with open(target, "w", encoding="utf-8") as f:
            f.write(html)
        return target

    def write_asset(self, relative_path: str, data: Union[bytes, str]) -> str:
        """
        Write a mirrored stylesheet or script verbatim into the bundle.

        Args:
            relative_path: Documents-relative path of the asset
            data: Raw file content

        Returns:
            Path of the written file
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        target = self.document_file(relative_path)
        ensure_parent_dir(target)
        with open(target, "wb") as f:
            f.write(data)
        return target
