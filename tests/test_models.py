# tests/test_models.py
from datetime import date

import pytest
from pydantic import ValidationError

from harvest_service.models import FetchOutcome
from harvest_service.models import FetchStatus
from harvest_service.models import HorseEntry
from harvest_service.models import RaceRecord
from tests.utils import make_candidate
from tests.utils import make_record


def test_horse_entry_model_creation():
    entry = HorseEntry(position=1, name="Silver Comet", jockey="M. Demuro")
    assert entry.position == 1
    assert entry.name == "Silver Comet"


@pytest.mark.parametrize(
    "fields",
    [
        {"position": 0, "name": "Silver Comet", "jockey": "M. Demuro"},
        {"position": 21, "name": "Silver Comet", "jockey": "M. Demuro"},
        {"position": 1, "name": "12345", "jockey": "M. Demuro"},
        {"position": 1, "name": "x" * 51, "jockey": "M. Demuro"},
        {"position": 1, "name": "Silver Comet", "jockey": "Abe"},
        {"position": 1, "name": "Silver Comet", "jockey": "12345"},
    ],
)
def test_horse_entry_validation(fields):
    with pytest.raises(ValidationError):
        HorseEntry(**fields)


def test_race_record_rejects_unsorted_or_duplicate_horses():
    horses = [
        HorseEntry(position=2, name="Night Parade", jockey="C. Lemaire"),
        HorseEntry(position=1, name="Silver Comet", jockey="M. Demuro"),
    ]
    with pytest.raises(ValidationError):
        RaceRecord(title="Japan Cup", date=date(2026, 10, 18), venue="Tokyo", horses=horses)

    with pytest.raises(ValidationError):
        RaceRecord(title="Japan Cup", date=date(2026, 10, 18), venue="Tokyo", horses=[horses[1], horses[1]])


def test_race_record_rejects_unknown_grade():
    with pytest.raises(ValidationError):
        make_record(grade="G4")


def test_race_record_is_immutable():
    record = make_record()
    with pytest.raises(ValidationError):
        record.title = "Changed"


def test_race_record_serializes_with_camel_case_urls():
    payload = make_record(grade="G1").model_dump(mode="json", by_alias=True)

    assert payload["date"] == "2026-10-18"
    assert payload["grade"] == "G1"
    assert payload["sourceUrls"] == ["https://en.netkeiba.com/race/shutuba.html?race_id=202605050811"]
    assert set(payload) == {"id", "title", "grade", "date", "venue", "distance", "surface", "horses", "sourceUrls"}


def test_fetch_outcome_constructors():
    candidate = make_candidate()
    assert FetchOutcome.success(candidate, "u", "<html>").status is FetchStatus.SUCCESS
    assert FetchOutcome.not_found(candidate, "u").body is None
    assert FetchOutcome.transient(candidate, "u", "boom").error == "boom"
