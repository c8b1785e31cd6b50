"""
Page parsing for harvested race pages: document queries, page
classification and horse-table extraction.
"""

from .classifier import RaceMetadata, classify_page
from .document import RaceDocument
from .entries import extract_entries, require_minimum

__all__ = [
    "RaceDocument",
    "RaceMetadata",
    "classify_page",
    "extract_entries",
    "require_minimum",
]
