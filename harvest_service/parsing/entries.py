# harvest_service/parsing/entries.py
"""
Horse-table extraction.

Two strategies share one contract, `extract_row(cells) -> HorseEntry | None`:

* StructuredRowClass reads fixed columns from rows carrying a known
  entry-row class.
* HeuristicScan re-derives field identity per row from cell shape:
  a position in the first few cells, then the nearest name-like cell,
  then the nearest jockey-like cell after it.

Known limitation: a row whose name or jockey search fails is dropped, it
is never re-anchored on a later position-looking cell.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence

import structlog
from pydantic import ValidationError
from selectolax.lexbor import LexborNode

from ..core.exceptions import ExtractionReject
from ..models import HorseEntry
from .document import RaceDocument
from .predicates import first_match, is_name_like, is_position, jockey_predicate, parse_position

log = structlog.get_logger(__name__)


class ExtractionStrategy(ABC):
    """Turns the rows of a race page into horse entries."""

    name: str = "base"

    @abstractmethod
    def applies_to(self, document: RaceDocument) -> bool:
        raise NotImplementedError

    @abstractmethod
    def rows(self, document: RaceDocument) -> List[LexborNode]:
        raise NotImplementedError

    @abstractmethod
    def extract_row(self, cells: Sequence[str]) -> Optional[HorseEntry]:
        raise NotImplementedError

    def extract(self, document: RaceDocument) -> List[HorseEntry]:
        """Deduplicated entries, first occurrence per position wins, sorted."""
        seen_positions = set()
        entries: List[HorseEntry] = []
        for row in self.rows(document):
            entry = self.extract_row(RaceDocument.cell_texts(row))
            if entry is None or entry.position in seen_positions:
                continue
            seen_positions.add(entry.position)
            entries.append(entry)
        entries.sort(key=lambda e: e.position)
        return entries


def _build_entry(position: int, name: str, jockey: str) -> Optional[HorseEntry]:
    try:
        return HorseEntry(position=position, name=name, jockey=jockey)
    except ValidationError:
        return None


@dataclass(frozen=True)
class StructuredRowClass(ExtractionStrategy):
    """Fixed-column extraction for rows tagged with an entry-row class."""

    row_class: str
    position_col: int
    name_col: int
    jockey_col: int
    strict_jockey: bool = True
    name: str = "structured"

    @property
    def selector(self) -> str:
        return f"tr.{self.row_class}"

    def applies_to(self, document: RaceDocument) -> bool:
        return document.has(self.selector)

    def rows(self, document: RaceDocument) -> List[LexborNode]:
        return document.select(self.selector)

    def extract_row(self, cells: Sequence[str]) -> Optional[HorseEntry]:
        if len(cells) <= max(self.position_col, self.name_col, self.jockey_col):
            return None
        position = parse_position(cells[self.position_col])
        horse = cells[self.name_col]
        jockey = cells[self.jockey_col]
        if position is None or not is_name_like(horse):
            return None
        if not jockey_predicate(horse, self.strict_jockey)(jockey):
            return None
        return _build_entry(position, horse, jockey)


@dataclass(frozen=True)
class HeuristicScan(ExtractionStrategy):
    """Column-free scan over every table row with enough cells."""

    min_cells: int = 4
    position_prefix: int = 3
    name_window: int = 3
    jockey_offset: int = 2
    jockey_reach: int = 6
    strict_jockey: bool = True
    name: str = "heuristic"

    def applies_to(self, document: RaceDocument) -> bool:
        return document.has("table tr")

    def rows(self, document: RaceDocument) -> List[LexborNode]:
        return document.select("table tr")

    def extract_row(self, cells: Sequence[str]) -> Optional[HorseEntry]:
        if len(cells) < self.min_cells:
            return None

        anchor = first_match(cells, 0, self.position_prefix, is_position)
        if anchor is None:
            return None
        anchor_idx, position_text = anchor
        position = parse_position(position_text)

        name_hit = first_match(cells, anchor_idx + 1, anchor_idx + 1 + self.name_window, is_name_like)
        if name_hit is None:
            return None
        name_idx, horse = name_hit

        jockey_hit = first_match(
            cells,
            max(anchor_idx + self.jockey_offset, name_idx + 1),
            anchor_idx + self.jockey_reach + 1,
            jockey_predicate(horse, self.strict_jockey),
        )
        if jockey_hit is None:
            return None

        return _build_entry(position, horse, jockey_hit[1])


ENTRY_PAGE_COLUMNS = StructuredRowClass(row_class="HorseList", position_col=1, name_col=3, jockey_col=6)
RESULT_PAGE_COLUMNS = StructuredRowClass(row_class="HorseList", position_col=2, name_col=3, jockey_col=6)


def default_strategies(page_kind: str = "entry", strict_jockey: bool = True) -> List[ExtractionStrategy]:
    """Structured extraction for the page kind first, heuristic scan as fallback."""
    columns = RESULT_PAGE_COLUMNS if page_kind == "result" else ENTRY_PAGE_COLUMNS
    return [
        replace(columns, strict_jockey=strict_jockey),
        HeuristicScan(strict_jockey=strict_jockey),
    ]


def extract_entries(
    document: RaceDocument,
    strategies: Optional[Iterable[ExtractionStrategy]] = None,
    minimum: int = 0,
) -> List[HorseEntry]:
    """
    Runs each applicable strategy in order and returns the first result
    holding at least `minimum` entries, else the largest result seen.
    """
    best: List[HorseEntry] = []
    for strategy in strategies if strategies is not None else default_strategies():
        if not strategy.applies_to(document):
            continue
        entries = strategy.extract(document)
        log.debug("strategy_result", strategy=strategy.name, entries=len(entries))
        if entries and len(entries) >= minimum:
            return entries
        if len(entries) > len(best):
            best = entries
    return best


def require_minimum(entries: List[HorseEntry], minimum: int, race_id: Optional[str] = None) -> List[HorseEntry]:
    """A short horse list points at mis-parsed structure, so the page is dropped."""
    if len(entries) < minimum:
        raise ExtractionReject(
            f"found {len(entries)} horses, need {minimum}",
            found=len(entries),
            minimum=minimum,
            race_id=race_id,
        )
    return entries
