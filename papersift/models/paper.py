"""Paper, catalog and ranking data models."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SourceCoordinate:
    """A (collection, period) pair that may have a backing data file."""

    collection: str
    period: str

    @property
    def key(self) -> str:
        """Catalog key: the collection id upper-cased."""
        return self.collection.upper()

    @property
    def path(self) -> str:
        """Resource path relative to the data root."""
        name = self.collection.lower()
        return f"{name}/{name}{self.period}.json"


@dataclass(frozen=True)
class CatalogEntry:
    """A coordinate confirmed to have a backing data file."""

    collection: str
    period: str
    path: str


# collection key → entries, newest period first
Catalog = dict[str, list[CatalogEntry]]


@dataclass(frozen=True)
class Paper:
    """Canonical, schema-stable bibliographic record."""

    id: str
    title: str
    authors: str
    abstract: str = ""
    venue: str = ""
    collection: str = ""
    period: str = ""
    affiliations: tuple[str, ...] = ()
    url: str = ""
    pdf_url: str = ""
    keywords: tuple[str, ...] = ()
    status: str = ""
    award: str = ""
    presentation: str = ""
    track: str = ""

    # Derived at normalization time
    rating_score: Optional[float] = None
    status_score: int = 0
    search_text: str = ""


@dataclass(frozen=True)
class RankedPaper:
    """A paper annotated with its keyword-match context.

    Never copies or mutates the wrapped :class:`Paper`.
    """

    paper: Paper
    match_count: int = 0
    matched_keywords: tuple[str, ...] = ()
    relevance_score: float = 0.0

    @classmethod
    def browse(cls, paper: Paper) -> "RankedPaper":
        """Wrap a paper for browse mode (no keywords)."""
        return cls(paper=paper)

    @classmethod
    def matched(
        cls,
        paper: Paper,
        matched_keywords: list[str],
        relevance_score: float,
    ) -> "RankedPaper":
        """Wrap a paper that matched at least one search keyword."""
        return cls(
            paper=paper,
            match_count=len(matched_keywords),
            matched_keywords=tuple(matched_keywords),
            relevance_score=relevance_score,
        )

    # -- read-through accessors ------------------------------------------

    @property
    def id(self) -> str:
        return self.paper.id

    @property
    def title(self) -> str:
        return self.paper.title

    @property
    def rating_score(self) -> Optional[float]:
        return self.paper.rating_score

    @property
    def status_score(self) -> int:
        return self.paper.status_score


@dataclass(frozen=True)
class PageInfo:
    """One page of ranked results plus pagination metadata."""

    number: int
    size: int
    total_items: int
    total_pages: int
    items: list[RankedPaper] = field(default_factory=list)
