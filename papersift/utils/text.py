"""Text processing utilities for numerals, keywords and display snippets."""

import re
from typing import Any, Optional

# Decimal numeral: 8, 7.5, -1
NUMERAL_RE = re.compile(r"-?\d+(?:\.\d+)?")

ABSTRACT_PREVIEW_CHARS = 500


def extract_numerals(text: str) -> list[float]:
    """Return every decimal numeral in *text*, in order of appearance."""
    return [float(m) for m in NUMERAL_RE.findall(text)]


def first_numeral(text: str) -> Optional[float]:
    """Return the first decimal numeral in *text*, or None."""
    match = NUMERAL_RE.search(text)
    return float(match.group(0)) if match else None


def is_number(value: Any) -> bool:
    """True for int/float values (bool is not a number here)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_keyword(text: str) -> str:
    """Normalize a search keyword: trimmed and lower-cased."""
    if not isinstance(text, str):
        return ""
    return text.strip().lower()


def join_text(value: Any, sep: str = " ") -> str:
    """Flatten a string or a sequence of strings into one string.

    Non-string scalars are stringified; None becomes ``""``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return sep.join(join_text(v, sep) for v in value if v is not None)
    return str(value)


def truncate(text: str, limit: int = ABSTRACT_PREVIEW_CHARS) -> str:
    """Cut *text* to *limit* characters, appending ``...`` when cut."""
    if not text or len(text) <= limit:
        return text or ""
    return text[:limit] + "..."
