import sys
from datetime import datetime
from datetime import timezone
from pathlib import Path

import pytest

# Make 'harvest_service' importable regardless of where pytest is run from.
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from harvest_service.config import Settings  # noqa: E402

FIXED_NOW = datetime(2026, 10, 19, 3, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def test_settings(tmp_path):
    """Settings that ignore any local .env file."""
    return Settings(
        _env_file=None,
        BASE_URL="https://en.netkeiba.com",
        BATCH_SIZE=5,
        BATCH_DELAY_MS=0,
        MAX_CANDIDATES=20,
        VENUE_CODES=["05"],
        MEETING_RANGE=(5, 5),
        DAY_RANGE=(8, 8),
        RACE_RANGE=(1, 12),
        OUTPUT_DIR=str(tmp_path / "out"),
    )
