# harvest_service/persistence.py
"""JSON output for a finished harvest: races.json plus summary.json."""

import json
from pathlib import Path
from typing import List, Tuple, Union

from pydantic import TypeAdapter

from .aggregation.aggregator import HarvestResult
from .models import RaceRecord

RACES_FILE = "races.json"
SUMMARY_FILE = "summary.json"

_RACE_LIST = TypeAdapter(List[RaceRecord])


def dump_races(races: List[RaceRecord]) -> str:
    return _RACE_LIST.dump_json(races, by_alias=True, indent=2).decode("utf-8")


def parse_races(payload: Union[str, bytes]) -> List[RaceRecord]:
    return _RACE_LIST.validate_json(payload)


def write_results(result: HarvestResult, output_dir: Union[str, Path]) -> Tuple[Path, Path]:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    races_path = out / RACES_FILE
    summary_path = out / SUMMARY_FILE
    races_path.write_text(dump_races(result.races), encoding="utf-8")
    summary_path.write_text(
        json.dumps(result.summary.to_payload(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return races_path, summary_path


def load_races(path: Union[str, Path]) -> List[RaceRecord]:
    return parse_races(Path(path).read_bytes())
