# tests/test_persistence.py
import json
from datetime import date
from datetime import datetime
from datetime import timezone

from harvest_service.aggregation.aggregator import Aggregator
from harvest_service.persistence import dump_races
from harvest_service.persistence import load_races
from harvest_service.persistence import parse_races
from harvest_service.persistence import write_results
from tests.utils import make_record


def _result():
    agg = Aggregator()
    agg.add(make_record(title="Japan Cup", grade="G1", race_date=date(2026, 10, 18)))
    agg.add(make_record(title="Kyoto Race", venue="Kyoto", race_date=date(2026, 10, 12), horses=5))
    return agg.finalize(datetime(2026, 10, 19, tzinfo=timezone.utc))


def test_races_round_trip_field_for_field():
    races = _result().races
    assert parse_races(dump_races(races)) == races


def test_write_results_creates_both_files(tmp_path):
    result = _result()
    races_path, summary_path = write_results(result, tmp_path / "out")

    races = json.loads(races_path.read_text(encoding="utf-8"))
    summary = json.loads(summary_path.read_text(encoding="utf-8"))

    assert races[0]["title"] == "Japan Cup"
    assert races[0]["date"] == "2026-10-18"
    assert races[0]["horses"][0] == {"position": 1, "name": "Silver Comet", "jockey": "M. Demuro"}
    assert summary["totalRaces"] == 2
    assert summary["gradedStakes"] == 1
    assert summary["dateRange"] == {"earliest": "2026-10-12", "latest": "2026-10-18"}
    assert load_races(races_path) == result.races
