"""
Symbol extractor for godoc package pages.

Walks the headings and declaration blocks of a package page and produces the
entries of the docset search index.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from bs4 import BeautifulSoup

from ..utils.log import get_logger


class SymbolKind(str, Enum):
    """Entry types understood by Dash."""

    PACKAGE = "Package"
    FUNCTION = "Function"
    TYPE = "Type"
    METHOD = "Method"
    VARIABLE = "Variable"
    CONSTANT = "Constant"


@dataclass(frozen=True)
class SymbolEntry:
    """One row of the search index."""

    name: str
    kind: SymbolKind
    path: str

    def as_row(self) -> tuple:
        """Get the (name, type, path) triple stored in the index."""
        return (self.name, self.kind.value, self.path)


# Section states while walking a page
_CONSTANTS = "constants"
_VARIABLES = "variables"
_TYPE = "type"

_SECTION_KIND = {
    _CONSTANTS: SymbolKind.CONSTANT,
    _VARIABLES: SymbolKind.VARIABLE,
}


class SymbolExtractor:
    """
    Extracts documented symbols from a godoc package page.

    godoc renders functions as ``<h2 id="Name">func ...``, types as
    ``<h2 id="Name">type ...``, methods as ``<h3 id="Type.Name">func (...)``
    and declares constants and variables as ``<span id="Name">`` inside the
    ``<pre>`` blocks of the Constants, Variables and type sections. Those ids
    are the anchors the index points at.
    """

    def __init__(self):
        """Initialize the symbol extractor."""
        self.logger = get_logger("extractor")

    def extract(
        self,
        soup: BeautifulSoup,
        package_name: str,
        document_path: str
    ) -> List[SymbolEntry]:
        """
        Extract all index entries from a parsed package page.

        Args:
            soup: Parsed package page
            package_name: Import path of the package
            document_path: Docset-relative path of the saved page

        Returns:
            Entries in page order, the package itself first, without duplicates
        """
        entries: List[SymbolEntry] = [
            SymbolEntry(package_name, SymbolKind.PACKAGE, document_path)
        ]
        section: Optional[str] = None

        for element in soup.find_all(['h2', 'h3', 'pre']):
            if element.name == 'pre':
                if section is not None:
                    entries.extend(self._declared_names(element, section, document_path))
                continue

            anchor = element.get('id')
            if not anchor:
                continue

            text = element.get_text(" ", strip=True)

            if element.name == 'h2' and anchor == 'pkg-constants':
                section = _CONSTANTS
            elif element.name == 'h2' and anchor == 'pkg-variables':
                section = _VARIABLES
            elif text.startswith('func '):
                kind = SymbolKind.METHOD if '.' in anchor else SymbolKind.FUNCTION
                entries.append(SymbolEntry(anchor, kind, f"{document_path}#{anchor}"))
                section = None
            elif element.name == 'h2' and text.startswith('type '):
                entries.append(SymbolEntry(anchor, SymbolKind.TYPE, f"{document_path}#{anchor}"))
                section = _TYPE
            elif element.name == 'h2':
                # pkg-overview, pkg-index, pkg-examples, pkg-files, pkg-subdirectories, notes
                section = None

        unique = list(dict.fromkeys(entries))
        self.logger.debug(f"Extracted {len(unique)} symbols from {package_name}")
        return unique

    def _declared_names(
        self,
        block,
        section: str,
        document_path: str
    ) -> List[SymbolEntry]:
        """
        Collect the constants or variables declared in a ``<pre>`` block.

        Args:
            block: The ``<pre>`` element
            section: Section the block belongs to
            document_path: Docset-relative path of the saved page

        Returns:
            Entries for every undotted ``span[id]`` of the block
        """
        kind = self._block_kind(block, section)
        if kind is None:
            return []

        found = []
        for span in block.find_all('span', id=True):
            anchor = span['id']
            # Dotted ids are struct fields and interface methods
            if '.' in anchor:
                continue
            found.append(SymbolEntry(anchor, kind, f"{document_path}#{anchor}"))
        return found

    @staticmethod
    def _block_kind(block, section: str) -> Optional[SymbolKind]:
        """Get the kind of declaration a ``<pre>`` block holds."""
        keyword = block.get_text().lstrip().split(None, 1)
        keyword = keyword[0] if keyword else ""

        if keyword == 'const':
            return SymbolKind.CONSTANT
        if keyword == 'var':
            return SymbolKind.VARIABLE
        return _SECTION_KIND.get(section)
