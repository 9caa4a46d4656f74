"""Search session: discovery → load → normalize → rank → page.

One :class:`SearchSession` owns the catalog, the loaded paper set, the
keyword set and the current ranked result.  Collaborators (transport,
settings, status sink) are injected so the whole pipeline runs without
any rendering surface.
"""

import asyncio
import logging
import re
from typing import Optional, Protocol

from papersift.config import Settings
from papersift.models.paper import Catalog, CatalogEntry, PageInfo, RankedPaper, SourceCoordinate
from papersift.services.discovery_service import SourceProbe, catalog_periods, find_entry
from papersift.services.normalizer import PayloadUnwrapError, RecordNormalizer
from papersift.services.pager import ResultPager
from papersift.services.search_service import RankedSearchEngine
from papersift.services.transport import Transport, TransportError

logger = logging.getLogger(__name__)

# Collection ids and periods become path segments under the data root
COORDINATE_RE = re.compile(r"[A-Za-z0-9_-]+")


class InvalidCoordinateError(ValueError):
    """A collection or period that cannot name a file under the data root."""


class StatusSink(Protocol):
    """Presentation collaborator receiving user-facing status messages."""

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class _NullSink:
    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


class SearchSession:
    """Stateful front of the engine, one per user/view."""

    def __init__(
        self,
        transport: Transport,
        settings: Optional[Settings] = None,
        sink: Optional[StatusSink] = None,
    ):
        """Initialize session.

        Args:
            transport: Data-file transport (HTTP or local directory)
            settings: Application settings (loads the singleton if not provided)
            sink: Status message receiver (e.g. ConsoleUI); silent if omitted
        """
        self.settings = settings or Settings.load()
        self.transport = transport
        self.sink: StatusSink = sink or _NullSink()

        self.probe = SourceProbe(transport, timeout=self.settings.probe_timeout)
        self.normalizer = RecordNormalizer()
        self.engine = RankedSearchEngine()
        self.pager = ResultPager(self.settings.page_size)

        self._catalog: Catalog = {}
        self._loaded: Optional[CatalogEntry] = None
        self._current_page = 1
        self._load_lock = asyncio.Lock()

    def apply_settings(self) -> None:
        """Pick up a changed page size and probe timeout; back to page 1."""
        self.probe.timeout = self.settings.probe_timeout
        self.pager = ResultPager(self.settings.page_size)
        self._current_page = 1

    # -- catalog -------------------------------------------------------------

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def catalog_periods(self) -> dict[str, list[str]]:
        return catalog_periods(self._catalog)

    def periods_for(self, collection: str) -> list[str]:
        return [e.period for e in self._catalog.get(collection.upper(), [])]

    async def discover(self) -> Catalog:
        """Probe all configured coordinates and replace the catalog."""
        self._catalog = await self.probe.discover(
            self.settings.collections, self.settings.periods
        )
        if not self._catalog:
            self.sink.error(
                f"No data files found under {self.settings.data_root}"
            )
        else:
            self.sink.success(
                f"Found data for {len(self._catalog)} collections"
            )
        return self._catalog

    # -- loading -------------------------------------------------------------

    @property
    def loaded(self) -> Optional[CatalogEntry]:
        """Coordinate of the currently loaded paper set."""
        return self._loaded

    def _resolve_entry(self, collection: str, period: str) -> CatalogEntry:
        entry = find_entry(self._catalog, collection, period)
        if entry is not None:
            return entry
        period = str(period)
        if not (COORDINATE_RE.fullmatch(collection) and COORDINATE_RE.fullmatch(period)):
            raise InvalidCoordinateError(
                f"invalid collection/period: {collection!r} {period!r}"
            )
        coord = SourceCoordinate(collection=collection, period=period)
        return CatalogEntry(collection=coord.key, period=coord.period, path=coord.path)

    async def load(self, collection: str, period: str) -> int:
        """Fetch, normalize and rank one collection/period.

        Returns:
            Number of papers loaded (0 when the payload holds no records)

        Raises:
            TransportError: If the file cannot be fetched; the previously
                loaded set is kept
            InvalidCoordinateError: If the coordinate is not catalogued and
                is not a plain name
        """
        async with self._load_lock:
            try:
                entry = self._resolve_entry(collection, period)
            except InvalidCoordinateError as e:
                self.sink.error(str(e))
                raise
            try:
                payload = await self.transport.fetch_json(entry.path)
            except TransportError as e:
                logger.error("Loading %s failed: %s", entry.path, e)
                self.sink.error(f"Failed to load {entry.path}: {e}")
                raise

            try:
                papers = self.normalizer.normalize(payload, entry.collection, entry.period)
            except PayloadUnwrapError as e:
                logger.warning("No records in %s: %s", entry.path, e)
                papers = []

            self.engine.load(papers)
            self._loaded = entry
            self._rerun()

            label = f"{entry.collection} {entry.period}"
            if papers:
                self.sink.success(f"Loaded {len(papers)} papers from {label}")
            else:
                self.sink.warning(f"0 papers loaded from {label}")
            return len(papers)

    # -- keywords ------------------------------------------------------------

    @property
    def keywords(self) -> tuple[str, ...]:
        return self.engine.keywords

    def add_keyword(self, keyword: str) -> bool:
        """Add a keyword and re-rank; False for blank or duplicate keywords."""
        if not keyword or not keyword.strip():
            return False
        if self.engine.has_keyword(keyword):
            self.sink.warning(f'Keyword "{keyword.strip()}" already exists')
            return False
        self.engine.add_keyword(keyword)
        self._rerun_if_loaded()
        return True

    def remove_keyword(self, keyword: str) -> bool:
        removed = self.engine.remove_keyword(keyword)
        if removed:
            self._rerun_if_loaded()
        return removed

    def clear_keywords(self) -> None:
        self.engine.clear_keywords()
        self._rerun_if_loaded()

    # -- searching -----------------------------------------------------------

    def search(self) -> list[RankedPaper]:
        """Re-rank the loaded papers against the current keywords."""
        if not self.engine.papers:
            self.sink.warning("Load a collection and period first")
            return []
        results = self._rerun()
        if self.engine.is_search_mode:
            self.sink.success(
                f"{len(results)} matching papers for: {', '.join(self.keywords)}"
            )
        return results

    def _rerun(self) -> list[RankedPaper]:
        self._current_page = 1
        return self.engine.run()

    def _rerun_if_loaded(self) -> None:
        if self.engine.papers:
            self._rerun()

    @property
    def results(self) -> tuple[RankedPaper, ...]:
        return self.engine.results

    # -- paging --------------------------------------------------------------

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def total_pages(self) -> int:
        return self.pager.total_pages(len(self.results))

    def go_to_page(self, page_number: int) -> int:
        """Move to *page_number* (clamped); returns the page actually shown."""
        self._current_page = self.pager.clamp(page_number, len(self.results))
        return self._current_page

    def page_info(self, page_number: Optional[int] = None) -> PageInfo:
        """The current (or given) page of results."""
        if page_number is not None:
            self.go_to_page(page_number)
        return self.pager.page_info(self.results, self._current_page)
