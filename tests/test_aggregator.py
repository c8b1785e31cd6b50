# tests/test_aggregator.py
from datetime import date
from datetime import datetime
from datetime import timezone

from harvest_service.aggregation.aggregator import Aggregator
from harvest_service.aggregation.aggregator import summarize
from tests.utils import make_record

NOW = datetime(2026, 10, 19, tzinfo=timezone.utc)


def test_ids_follow_receipt_order():
    agg = Aggregator()
    first = agg.add(make_record(title="Race A", race_date=date(2026, 10, 1)))
    second = agg.add(make_record(title="Race B", race_date=date(2026, 10, 5)))

    assert (first.id, second.id) == (1, 2)


def test_added_record_is_a_new_object():
    agg = Aggregator()
    original = make_record()
    stored = agg.add(original)

    assert original.id == 0
    assert stored.id == 1
    assert stored is not original


def test_duplicates_across_scan_are_dropped():
    agg = Aggregator()
    assert agg.add(make_record()) is not None
    assert agg.add(make_record()) is None
    assert agg.duplicates == 1
    assert len(agg) == 1


def test_finalize_sorts_by_date_descending_and_keeps_receipt_order_on_ties():
    agg = Aggregator()
    agg.add(make_record(title="Old", race_date=date(2026, 10, 1)))
    agg.add(make_record(title="Tie One", race_date=date(2026, 10, 18)))
    agg.add(make_record(title="Newest", race_date=date(2026, 10, 25)))
    agg.add(make_record(title="Tie Two", race_date=date(2026, 10, 18)))

    result = agg.finalize(NOW)

    assert [r.title for r in result.races] == ["Newest", "Tie One", "Tie Two", "Old"]
    assert [r.id for r in result.races] == [3, 2, 4, 1]


def test_summary_counts():
    races = [
        make_record(title="Japan Cup", grade="G1", race_date=date(2026, 10, 18)),
        make_record(title="Kyoto Race", venue="Kyoto", race_date=date(2026, 10, 12)),
        make_record(title="Tokyo Race", race_date=date(2026, 10, 18)),
    ]

    summary = summarize(races, NOW)

    assert summary.total_races == 3
    assert summary.graded_stakes == 1
    assert summary.date_range.earliest == date(2026, 10, 12)
    assert summary.date_range.latest == date(2026, 10, 18)
    assert summary.by_venue == {"Tokyo": 2, "Kyoto": 1}
    assert summary.by_date == {"2026-10-12": 1, "2026-10-18": 2}


def test_summary_payload_for_empty_run():
    payload = summarize([], NOW).to_payload()

    assert payload == {
        "lastUpdated": "2026-10-19T00:00:00Z",
        "totalRaces": 0,
        "gradedStakes": 0,
        "dateRange": None,
    }
