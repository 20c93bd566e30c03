"""
Link rewriter for making package pages viewable offline.

Rewrites server-rooted stylesheet and script references into paths relative
to the page's location inside the docset.
"""

from bs4 import BeautifulSoup

from ..utils.log import get_logger
from ..utils.paths import get_relative_path, is_server_rooted


class LinkRewriter:
    """
    Rewrites stylesheet and script references in a package page.

    Only references ending in .css or .js are touched. A reference whose
    relative path cannot be computed is logged and left as it is.
    """

    def __init__(self):
        """Initialize the link rewriter."""
        self.logger = get_logger("rewriter")

    def rewrite(self, soup: BeautifulSoup, document_path: str) -> int:
        """
        Rewrite references in a parsed page in place.

        Args:
            soup: Parsed page
            document_path: Docset-relative path the page will be saved to

        Returns:
            Number of rewritten references
        """
        rewritten = self._rewrite_stylesheets(soup, document_path)
        rewritten += self._rewrite_scripts(soup, document_path)
        return rewritten

    def _rewrite_stylesheets(self, soup: BeautifulSoup, document_path: str) -> int:
        """Rewrite link href attributes pointing at stylesheets."""
        count = 0
        for link in soup.find_all('link', href=True):
            if self._rewrite_attribute(link, 'href', '.css', document_path):
                count += 1
        return count

    def _rewrite_scripts(self, soup: BeautifulSoup, document_path: str) -> int:
        """Rewrite script src attributes pointing at scripts."""
        count = 0
        for script in soup.find_all('script', src=True):
            if self._rewrite_attribute(script, 'src', '.js', document_path):
                count += 1
        return count

    def _rewrite_attribute(
        self,
        element,
        attribute: str,
        suffix: str,
        document_path: str
    ) -> bool:
        """
        Rewrite a single reference attribute.

        Args:
            element: Tag carrying the reference
            attribute: Attribute name ('href' or 'src')
            suffix: Required file suffix ('.css' or '.js')
            document_path: Docset-relative path of the page

        Returns:
            True if the attribute was changed
        """
        reference = element.get(attribute, '').strip()

        if not reference.endswith(suffix) or not is_server_rooted(reference):
            return False

        try:
            relative = get_relative_path(document_path, reference.lstrip('/'))
        except ValueError as e:
            self.logger.warning(f"Cannot relativize {reference} for {document_path}: {e}")
            return False

        element[attribute] = relative
        return True
