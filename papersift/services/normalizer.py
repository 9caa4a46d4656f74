"""Record normalization: arbitrary JSON records → canonical :class:`Paper`.

Source dumps drift in shape from venue to venue and year to year, so every
canonical field is resolved through an ordered list of candidate source
keys.  The first candidate holding a non-empty value wins; otherwise the
field takes its typed default.  A bad record degrades field by field and
never aborts the batch.
"""

import logging
import math
from typing import Any, Optional

from papersift.models.paper import Paper
from papersift.utils.text import extract_numerals, first_numeral, is_number, join_text

logger = logging.getLogger(__name__)

# Container keys probed (in order) when the payload is not a bare list
PAYLOAD_KEYS = ("papers", "data", "results", "items")

DEFAULT_TITLE = "Untitled"
DEFAULT_AUTHORS = "Unknown Authors"

# Canonical field → candidate source keys, highest priority first
FIELD_CANDIDATES: dict[str, tuple[str, ...]] = {
    "id": ("id", "Id", "ID", "paper_id", "paperId"),
    "title": ("title", "Title"),
    "authors": ("authors", "Authors", "author", "Author"),
    "abstract": ("abstract", "Abstract", "summary", "Summary"),
    "url": ("url", "URL", "link", "Link", "pdf_url"),
    "pdf_url": ("pdf_url", "pdfUrl", "pdf", "PDF", "url"),
    "keywords": ("keywords", "Keywords", "keyword", "tags"),
    "venue": ("venue", "Venue"),
    "affiliations": ("affiliations", "Affiliations", "affiliation", "Affiliation"),
    "status": ("status", "Status", "decision", "Decision"),
    "award": ("award", "Award"),
    "presentation": ("presentation", "Presentation", "type", "Type"),
    "track": ("track", "Track", "category", "Category"),
    "rating": (
        "rating", "Rating", "ratings", "Ratings", "score", "scores",
        "review_scores", "rating_avg",
    ),
}

# Every status-like key folded into the status score
STATUS_FIELDS = (
    "status", "Status", "type", "Type", "award", "Award",
    "presentation", "Presentation", "track", "Track",
    "category", "Category", "decision", "Decision",
)

# Phrase → score; the record's score is the max over all phrases present
STATUS_SCORES: dict[str, int] = {
    "best paper": 100,
    "outstanding paper": 95,
    "award": 90,
    "oral": 85,
    "keynote": 85,
    "invited": 85,
    "plenary": 85,
    "spotlight": 80,
    "highlight": 75,
    "long paper": 70,
    "main conference": 70,
    "accepted": 65,
    "accept": 65,
    "findings": 60,
    "poster": 50,
    "demo": 45,
    "workshop": 40,
    "short": 30,
    "short paper": 30,
    "extended abstract": 20,
    "reject": 5,
    "rejected": 5,
    "withdraw": 1,
    "withdrawn": 1,
}


class PayloadUnwrapError(ValueError):
    """The payload holds no record sequence at all."""


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)) and not value:
        return True
    return False


def resolve(record: dict[str, Any], field: str) -> Any:
    """Return the first non-empty candidate value for *field*, or None."""
    for key in FIELD_CANDIDATES[field]:
        value = record.get(key)
        if not _is_empty(value):
            return value
    return None


def _as_str(value: Any, default: str = "") -> str:
    if _is_empty(value):
        return default
    if isinstance(value, str):
        return value.strip() or default
    if isinstance(value, (list, tuple)):
        return join_text(value, ", ").strip() or default
    return str(value)


def _as_str_tuple(value: Any) -> tuple[str, ...]:
    if _is_empty(value):
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value if not _is_empty(v) and not isinstance(v, dict))
    return (str(value),)


def unwrap_payload(payload: Any) -> list[Any]:
    """Extract the record sequence from a raw JSON payload.

    Raises:
        PayloadUnwrapError: If no list can be found
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in PAYLOAD_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    raise PayloadUnwrapError(
        f"payload of type {type(payload).__name__} has no record list "
        f"(looked for a bare array or one of {', '.join(PAYLOAD_KEYS)})"
    )


# ---------------------------------------------------------------------------
# Derived scores
# ---------------------------------------------------------------------------

def _finite(value: Any) -> Optional[float]:
    """float(value), or None for out-of-range, NaN and infinite values."""
    if value is None:
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def extract_rating(value: Any) -> Optional[float]:
    """Mean of every numeral found in a rating payload, to 2 decimals.

    Accepts a single number, a string (``"8, 7, 9"``), a list of reviewer
    scores (numbers pass through, strings contribute their first numeral,
    so ``"7/10"`` counts as 7) or a reviewer → score mapping.

    Values that are out of float range, NaN or infinite are skipped.
    Returns None when nothing numeric is found (absent, not zero).
    """
    found: list[Optional[float]] = []
    if is_number(value):
        found.append(_finite(value))
    elif isinstance(value, str):
        found.extend(_finite(n) for n in extract_numerals(value))
    elif isinstance(value, (list, tuple, dict)):
        items = value.values() if isinstance(value, dict) else value
        for item in items:
            if is_number(item):
                found.append(_finite(item))
            elif isinstance(item, str):
                found.append(_finite(first_numeral(item)))
    numbers = [n for n in found if n is not None]
    if not numbers:
        return None
    mean = _finite(sum(numbers) / len(numbers))
    return round(mean, 2) if mean is not None else None


def get_status_score(record: dict[str, Any]) -> int:
    """Score a record's acceptance/award standing (0–100).

    All status-like fields are folded into one lower-cased string; the
    score is the highest-valued phrase found in it, so ``"Oral"`` plus
    ``"Best Paper"`` scores 100.
    """
    if not isinstance(record, dict):
        return 0
    text = " ".join(
        join_text(record.get(key)) for key in STATUS_FIELDS if record.get(key)
    ).lower()
    if not text:
        return 0
    return max(
        (score for phrase, score in STATUS_SCORES.items() if phrase in text),
        default=0,
    )


# ---------------------------------------------------------------------------
# Authors
# ---------------------------------------------------------------------------

def _author_name(author: dict[str, Any]) -> str:
    for key in ("name", "Name", "full_name", "fullName"):
        if isinstance(author.get(key), str) and author[key].strip():
            return author[key].strip()
    given = author.get("given") or author.get("first_name") or ""
    family = author.get("family") or author.get("last_name") or ""
    return " ".join([str(given), str(family)]).strip()


def _author_affiliation(author: dict[str, Any]) -> str:
    for key in ("affiliation", "Affiliation", "institution", "org"):
        value = author.get(key)
        if not _is_empty(value):
            return join_text(value, ", ").strip()
    return ""


def author_names(authors: Any) -> str:
    """Plain author rendering (names only) used for search text."""
    if _is_empty(authors):
        return ""
    if isinstance(authors, (list, tuple)):
        names = []
        for author in authors:
            if isinstance(author, dict):
                name = _author_name(author)
            else:
                name = join_text(author).strip()
            if name:
                names.append(name)
        return ", ".join(names)
    if isinstance(authors, dict):
        return _author_name(authors)
    return str(authors).strip()


def format_authors(authors: Any, affiliations: Any = None) -> str:
    """Render authors for display, with affiliations when known.

    * mapping entries → ``"name (affiliation)"`` or ``"name"``
    * string entries → joined with ``", "``
    * a separate *affiliations* value is appended as ``" (a, b)"`` only
      when the rendered string carries no parenthesis yet
    """
    if isinstance(authors, (list, tuple)):
        parts = []
        for author in authors:
            if isinstance(author, dict):
                name = _author_name(author)
                if not name:
                    continue
                affiliation = _author_affiliation(author)
                parts.append(f"{name} ({affiliation})" if affiliation else name)
            elif not _is_empty(author):
                parts.append(join_text(author).strip())
        rendered = ", ".join(p for p in parts if p)
    elif isinstance(authors, dict):
        rendered = format_authors([authors])
    else:
        rendered = _as_str(authors)

    affiliation_text = join_text(affiliations, ", ").strip()
    if rendered and affiliation_text and "(" not in rendered:
        rendered = f"{rendered} ({affiliation_text})"
    return rendered or DEFAULT_AUTHORS


def build_search_text(title: str, authors: str, abstract: str, keywords: Any) -> str:
    """Lower-cased title + authors + abstract + keywords."""
    return " ".join(
        [title, authors, abstract, join_text(keywords)]
    ).lower()


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------

class RecordNormalizer:
    """Maps raw JSON payloads onto canonical :class:`Paper` records."""

    def normalize(self, payload: Any, collection: str, period: str) -> list[Paper]:
        """Normalize a whole payload.

        Args:
            payload: Decoded JSON (bare list, or object with a list field)
            collection: Collection key the payload was loaded for
            period: Period the payload was loaded for

        Returns:
            Papers in source order

        Raises:
            PayloadUnwrapError: If the payload holds no record list
        """
        records = unwrap_payload(payload)
        papers = [
            self.normalize_record(record, collection, period, index)
            for index, record in enumerate(records)
        ]
        logger.info(
            "Normalized %d records for %s %s", len(papers), collection, period
        )
        return papers

    def normalize_record(
        self,
        record: Any,
        collection: str,
        period: str,
        index: int,
    ) -> Paper:
        """Normalize one raw record; never raises."""
        if not isinstance(record, dict):
            logger.debug(
                "Record %d in %s %s is %s, using defaults",
                index, collection, period, type(record).__name__,
            )
            record = {}

        raw_title = resolve(record, "title")
        raw_authors = resolve(record, "authors")
        raw_abstract = resolve(record, "abstract")
        raw_keywords = resolve(record, "keywords")
        raw_affiliations = resolve(record, "affiliations")

        title = _as_str(raw_title, DEFAULT_TITLE)
        abstract = _as_str(raw_abstract)

        try:
            rating_score = extract_rating(resolve(record, "rating"))
        except (TypeError, ValueError, OverflowError) as e:
            logger.debug("Record %d: unreadable rating (%s)", index, e)
            rating_score = None

        return Paper(
            id=_as_str(resolve(record, "id"), f"{collection}-{period}-{index}"),
            title=title,
            authors=format_authors(raw_authors, raw_affiliations),
            abstract=abstract,
            venue=_as_str(resolve(record, "venue"), f"{collection} {period}"),
            collection=collection,
            period=str(period),
            affiliations=_as_str_tuple(raw_affiliations),
            url=_as_str(resolve(record, "url")),
            pdf_url=_as_str(resolve(record, "pdf_url")),
            keywords=_as_str_tuple(raw_keywords),
            status=_as_str(resolve(record, "status")),
            award=_as_str(resolve(record, "award")),
            presentation=_as_str(resolve(record, "presentation")),
            track=_as_str(resolve(record, "track")),
            rating_score=rating_score,
            status_score=get_status_score(record),
            search_text=build_search_text(
                _as_str(raw_title),
                author_names(raw_authors),
                _as_str(raw_abstract),
                raw_keywords,
            ),
        )
