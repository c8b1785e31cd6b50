# harvest_service/parsing/document.py
"""
Thin query layer over a parsed HTML page.

Everything the classifier and the entry extractor need from a page goes
through RaceDocument, so both stay independent of the HTML parser in use.
"""

from typing import List, Optional

from selectolax.lexbor import LexborHTMLParser, LexborNode

from ..utils.text import clean_text


class RaceDocument:
    """Queryable view of one fetched race page."""

    def __init__(self, html: str):
        self.html = html or ""
        self._tree = LexborHTMLParser(self.html)
        self._body_text: Optional[str] = None

    def _first_text(self, selector: str) -> str:
        node = self._tree.css_first(selector)
        return clean_text(node.text(separator=" ")) if node is not None else ""

    @property
    def title(self) -> str:
        """Raw text of the <title> element."""
        return self._first_text("title")

    @property
    def first_heading(self) -> str:
        return self._first_text("h1")

    @property
    def body_text(self) -> str:
        if self._body_text is None:
            root = self._tree.body or self._tree.root
            self._body_text = (
                clean_text(root.text(separator=" ")) if root is not None else ""
            )
        return self._body_text

    def select(self, selector: str) -> List[LexborNode]:
        return self._tree.css(selector)

    def has(self, selector: str) -> bool:
        return self._tree.css_first(selector) is not None

    @staticmethod
    def cell_texts(row: LexborNode, selector: str = "td") -> List[str]:
        """Trimmed text of each cell in a row, in column order."""
        return [clean_text(cell.text(separator=" ")) for cell in row.css(selector)]
