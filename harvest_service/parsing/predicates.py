# harvest_service/parsing/predicates.py
"""
Content-shape predicates for table cells.

Race tables do not label their columns reliably, so field identity is
recovered from what a cell looks like. Each predicate here is a pure
function of the cell text; `first_match` applies one over a bounded
window of a row.
"""

import re
from typing import Callable, Optional, Sequence, Tuple

from .constants import POSITION_MAX, POSITION_MIN

CellPredicate = Callable[[str], bool]

LETTER_RE = re.compile(r"[A-Za-z]")
DIGITS_RE = re.compile(r"^\d+$")
# "57kg", "57.5 kg", "480kg(+4)"
WEIGHT_RE = re.compile(r"\d+(?:\.\d+)?\s*kg", re.IGNORECASE)
# "M", "F4", "G10" style sex/age codes
SEX_CODE_RE = re.compile(r"^[A-Za-z]\d{0,2}$")
PUNCTUATION_RE = re.compile(r"[.\-'’]")

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50
JOCKEY_MIN_LENGTH = 4
JOCKEY_MAX_LENGTH = 30


def parse_position(text: str, low: int = POSITION_MIN, high: int = POSITION_MAX) -> Optional[int]:
    """
    Returns the integer when the cell is exactly a decimal number in range.
    "1st", "1.5" and "01" are not positions.
    """
    text = text.strip()
    if not DIGITS_RE.match(text):
        return None
    value = int(text)
    if str(value) != text or not low <= value <= high:
        return None
    return value


def is_position(text: str) -> bool:
    return parse_position(text) is not None


def _has_name_shape(text: str) -> bool:
    return (
        bool(LETTER_RE.search(text))
        and not DIGITS_RE.match(text)
        and not WEIGHT_RE.search(text)
    )


def is_name_like(text: str) -> bool:
    text = text.strip()
    if not NAME_MIN_LENGTH <= len(text) <= NAME_MAX_LENGTH:
        return False
    if SEX_CODE_RE.match(text):
        return False
    return _has_name_shape(text)


def is_jockey_like(text: str, horse_name: Optional[str] = None, strict: bool = True) -> bool:
    """
    Jockeys are usually rendered as an initial plus surname ("C. Lemaire"),
    so the strict form also requires a capital letter or punctuation.
    """
    text = text.strip()
    if not JOCKEY_MIN_LENGTH <= len(text) <= JOCKEY_MAX_LENGTH:
        return False
    if horse_name is not None and text == horse_name:
        return False
    if not _has_name_shape(text):
        return False
    if strict and not (any(c.isupper() for c in text) or PUNCTUATION_RE.search(text)):
        return False
    return True


def jockey_predicate(horse_name: Optional[str], strict: bool = True) -> CellPredicate:
    return lambda text: is_jockey_like(text, horse_name, strict=strict)


def first_match(
    cells: Sequence[str],
    start: int,
    stop: int,
    predicate: CellPredicate,
) -> Optional[Tuple[int, str]]:
    """
    Index and text of the first cell in cells[start:stop] accepted by the
    predicate. The window is clipped to the row.
    """
    for idx in range(max(start, 0), min(stop, len(cells))):
        if predicate(cells[idx]):
            return idx, cells[idx].strip()
    return None
