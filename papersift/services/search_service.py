"""Keyword search and ranking over one loaded paper set.

Two modes:

* **browse** (no keywords) – every paper, ordered by
  ``rating ↓, status score ↓, title ↑`` (case-insensitive).
* **search** – papers matching at least one keyword (plain substring
  containment in ``search_text``), ordered by
  ``match count ↓, rating ↓, status score ↓, relevance ↓``.
  Full ties keep their input order (stable sort).

Relevance per matched keyword::

    +10  keyword in title
    +5   keyword in abstract
    +n   occurrences of keyword in search_text

plus a completeness bonus of ``match_count / len(keywords) * 20``.
"""

import functools
import logging
from typing import Iterable, Sequence

from papersift.models.paper import Paper, RankedPaper
from papersift.utils.text import normalize_keyword

logger = logging.getLogger(__name__)

TITLE_WEIGHT = 10
ABSTRACT_WEIGHT = 5
COMPLETENESS_WEIGHT = 20
RATING_EPSILON = 0.001


# ---------------------------------------------------------------------------
# Keyword set
# ---------------------------------------------------------------------------

class SearchKeywordSet:
    """Lower-cased, trimmed, de-duplicated search keywords.

    Iteration follows insertion order (used for redisplay and for the
    order of ``matched_keywords``); matching itself is order-free.
    """

    def __init__(self, keywords: Iterable[str] = ()):
        self._items: dict[str, None] = {}
        for kw in keywords:
            self.add(kw)

    def add(self, keyword: str) -> bool:
        """Add a keyword; False if blank or already present."""
        kw = normalize_keyword(keyword)
        if not kw or kw in self._items:
            return False
        self._items[kw] = None
        return True

    def remove(self, keyword: str) -> bool:
        """Remove a keyword; False if it was not present."""
        kw = normalize_keyword(keyword)
        if kw not in self._items:
            return False
        del self._items[kw]
        return True

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, keyword: object) -> bool:
        return isinstance(keyword, str) and normalize_keyword(keyword) in self._items

    def __iter__(self):
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def as_tuple(self) -> tuple[str, ...]:
        return tuple(self._items)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def match_keywords(paper: Paper, keywords: Sequence[str]) -> list[str]:
    """Keywords (in *keywords* order) found in the paper's search text."""
    text = paper.search_text
    return [kw for kw in keywords if kw.lower() in text]


def relevance_score(
    paper: Paper,
    matched: Sequence[str],
    keywords: Sequence[str],
) -> float:
    """Heuristic relevance of *paper* for the matched keywords."""
    if not keywords:
        return 0.0
    title = paper.title.lower()
    abstract = paper.abstract.lower()
    text = paper.search_text

    score = 0.0
    for kw in matched:
        kw = kw.lower()
        if kw in title:
            score += TITLE_WEIGHT
        if kw in abstract:
            score += ABSTRACT_WEIGHT
        score += text.count(kw)

    score += len(matched) / len(keywords) * COMPLETENESS_WEIGHT
    return score


def _rating(item: RankedPaper) -> float:
    return item.rating_score if item.rating_score is not None else 0.0


def browse_key(item: RankedPaper) -> tuple[float, int, str]:
    """Sort key for browse mode."""
    return (-_rating(item), -item.status_score, item.title.lower())


def _compare_search(a: RankedPaper, b: RankedPaper) -> int:
    """Search-mode comparator; negative when *a* ranks first."""
    if a.match_count != b.match_count:
        return b.match_count - a.match_count
    rating_diff = _rating(b) - _rating(a)
    if abs(rating_diff) > RATING_EPSILON:
        return 1 if rating_diff > 0 else -1
    if a.status_score != b.status_score:
        return b.status_score - a.status_score
    if a.relevance_score != b.relevance_score:
        return 1 if b.relevance_score > a.relevance_score else -1
    return 0


search_key = functools.cmp_to_key(_compare_search)


def browse_order(papers: Iterable[Paper]) -> list[RankedPaper]:
    """All papers in browse order."""
    ranked = [RankedPaper.browse(p) for p in papers]
    ranked.sort(key=browse_key)
    return ranked


def search_order(papers: Iterable[Paper], keywords: Sequence[str]) -> list[RankedPaper]:
    """Matching papers in search order.

    A paper whose scoring fails is logged and left out; the rest of the
    batch is still ranked.
    """
    results: list[RankedPaper] = []
    for paper in papers:
        try:
            matched = match_keywords(paper, keywords)
            if not matched:
                continue
            results.append(
                RankedPaper.matched(
                    paper, matched, relevance_score(paper, matched, keywords)
                )
            )
        except Exception:
            logger.warning(
                "Scoring failed for paper %s, skipping",
                getattr(paper, "id", "?"),
                exc_info=True,
            )
    results.sort(key=search_key)
    return results


def rank_papers(papers: Iterable[Paper], keywords: Sequence[str]) -> list[RankedPaper]:
    """Browse when *keywords* is empty, search otherwise."""
    if not keywords:
        return browse_order(papers)
    return search_order(papers, keywords)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class RankedSearchEngine:
    """Owns one loaded paper set, one keyword set and the last result.

    Callers only ever receive tuples/lists built fresh per run; the loaded
    papers themselves are immutable.
    """

    def __init__(
        self,
        papers: Iterable[Paper] = (),
        keywords: Iterable[str] = (),
    ) -> None:
        self._papers: tuple[Paper, ...] = tuple(papers)
        self._keywords = SearchKeywordSet(keywords)
        self._results: tuple[RankedPaper, ...] = ()

    # -- state ---------------------------------------------------------------

    @property
    def papers(self) -> tuple[Paper, ...]:
        return self._papers

    @property
    def keywords(self) -> tuple[str, ...]:
        return self._keywords.as_tuple()

    @property
    def results(self) -> tuple[RankedPaper, ...]:
        return self._results

    @property
    def is_search_mode(self) -> bool:
        return len(self._keywords) > 0

    def load(self, papers: Iterable[Paper]) -> None:
        """Replace the paper set wholesale (results are cleared)."""
        self._papers = tuple(papers)
        self._results = ()

    # -- keywords ------------------------------------------------------------

    def add_keyword(self, keyword: str) -> bool:
        return self._keywords.add(keyword)

    def remove_keyword(self, keyword: str) -> bool:
        return self._keywords.remove(keyword)

    def clear_keywords(self) -> None:
        self._keywords.clear()

    def has_keyword(self, keyword: str) -> bool:
        return keyword in self._keywords

    # -- ranking -------------------------------------------------------------

    def run(self) -> list[RankedPaper]:
        """Rank the loaded papers against the current keywords.

        The result is stored (see :attr:`results`) and returned.
        """
        kws = list(self._keywords)
        ranked = rank_papers(self._papers, kws)
        self._results = tuple(ranked)
        logger.debug(
            "Ranked %d of %d papers (%s)",
            len(ranked), len(self._papers),
            f"keywords={kws}" if kws else "browse",
        )
        return ranked
