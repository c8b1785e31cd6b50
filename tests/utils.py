# tests/utils.py
from datetime import date
from html import escape
from typing import List
from typing import Optional
from typing import Sequence

from harvest_service.models import CandidateId
from harvest_service.models import HorseEntry
from harvest_service.models import RaceRecord

FIELD = [
    ("Silver Comet", "M. Demuro"),
    ("Night Parade", "C. Lemaire"),
    ("Autumn Breeze", "Y. Take"),
    ("Iron Lantern", "K. Tosaki"),
    ("Blue Harbor", "T. Yokoyama"),
    ("Crimson Tide", "R. Moore"),
]


def heuristic_rows(count: int = 4) -> List[List[str]]:
    """Rows shaped like the plain entry table: number, horse, jockey, weight."""
    return [[str(i + 1), name, jockey, "57kg"] for i, (name, jockey) in enumerate(FIELD[:count])]


def structured_rows(count: int = 4) -> List[List[str]]:
    """Rows in the documented entry-page column order."""
    return [
        [str(i // 2 + 1), str(i + 1), "", name, "M4", "57.0", jockey, "Trainer"]
        for i, (name, jockey) in enumerate(FIELD[:count])
    ]


def table_html(rows: Sequence[Sequence[str]], row_class: Optional[str] = None) -> str:
    attr = f' class="{row_class}"' if row_class else ""
    body = "".join(
        f"<tr{attr}>" + "".join(f"<td>{escape(cell)}</td>" for cell in row) + "</tr>"
        for row in rows
    )
    return f"<table><tr><th>No</th><th>Horse</th><th>Jockey</th><th>Wt</th></tr>{body}</table>"


def race_page_html(
    title: str = "Japan Cup (G1) | netkeiba",
    rows: Optional[Sequence[Sequence[str]]] = None,
    row_class: Optional[str] = None,
    heading: str = "",
    info: str = "T2400m / Weather: Fine",
    body_date: str = "2026/10/18",
) -> str:
    rows = heuristic_rows() if rows is None else rows
    return (
        f"<html><head><title>{escape(title)}</title></head><body>"
        f"<h1>{escape(heading)}</h1>"
        f"<div class='RaceData'>{escape(info)} {escape(body_date)}</div>"
        f"{table_html(rows, row_class)}"
        "</body></html>"
    )


def make_candidate(venue: str = "05", meeting: int = 5, day: int = 8, race: int = 11, year: int = 2026) -> CandidateId:
    return CandidateId(year=year, venue_code=venue, meeting=meeting, day=day, race_number=race)


def make_record(
    title: str = "Japan Cup",
    race_date: date = date(2026, 10, 18),
    venue: str = "Tokyo",
    grade: Optional[str] = None,
    horses: int = 4,
) -> RaceRecord:
    return RaceRecord(
        title=title,
        grade=grade,
        date=race_date,
        venue=venue,
        distance="2400m",
        surface="Turf",
        horses=[
            HorseEntry(position=i + 1, name=name, jockey=jockey)
            for i, (name, jockey) in enumerate(FIELD[:horses])
        ],
        source_urls=["https://en.netkeiba.com/race/shutuba.html?race_id=202605050811"],
    )
