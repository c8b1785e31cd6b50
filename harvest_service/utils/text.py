# harvest_service/utils/text.py
# Centralized text normalization utilities
import re
from typing import Optional

_WS_RE = re.compile(r"\s+")


def clean_text(text: Optional[str]) -> str:
    """Strips leading/trailing whitespace and collapses internal whitespace."""
    if not text:
        return ""
    return _WS_RE.sub(" ", text).strip()


def truncate(text: str, limit: int = 20) -> str:
    """Shortens long cell text for log output."""
    return text if len(text) <= limit else text[:limit] + "..."
