"""Source discovery: probe every (collection, period) coordinate for a data file.

All probes run concurrently; each one races its own timeout.  A probe that
times out or errors counts as "absent" and never aborts its siblings, so one
slow or broken source cannot hide the rest of the catalog.
"""

import asyncio
import logging
from typing import Iterable, Optional, Sequence

from papersift.models.paper import Catalog, CatalogEntry, SourceCoordinate
from papersift.services.transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 3.0  # seconds


class DiscoveryProbeFailure(Exception):
    """A single coordinate probe failed; always downgraded to "absent"."""

    def __init__(self, coordinate: SourceCoordinate, cause: BaseException):
        self.coordinate = coordinate
        self.cause = cause
        super().__init__(f"{coordinate.path}: {cause!r}")


def build_coordinates(
    collections: Iterable[str],
    periods: Sequence[str],
) -> list[SourceCoordinate]:
    """Cross product of *collections* × *periods*."""
    return [
        SourceCoordinate(collection=c, period=str(p))
        for c in collections
        for p in periods
    ]


def _period_key(period: str) -> tuple[int, object]:
    """Sort key: numeric periods numerically, anything else as text."""
    try:
        return (1, int(period))
    except ValueError:
        return (0, period)


def build_catalog(found: Iterable[SourceCoordinate]) -> Catalog:
    """Group confirmed coordinates by collection key, newest period first."""
    catalog: Catalog = {}
    for coord in found:
        catalog.setdefault(coord.key, []).append(
            CatalogEntry(collection=coord.key, period=coord.period, path=coord.path)
        )
    for entries in catalog.values():
        entries.sort(key=lambda e: _period_key(e.period), reverse=True)
    return catalog


def catalog_periods(catalog: Catalog) -> dict[str, list[str]]:
    """Collection → periods view for selection widgets (collections A–Z)."""
    return {key: [e.period for e in catalog[key]] for key in sorted(catalog)}


def find_entry(
    catalog: Catalog,
    collection: str,
    period: str,
) -> Optional[CatalogEntry]:
    """Look up the catalog entry for one coordinate."""
    for entry in catalog.get(collection.upper(), []):
        if entry.period == str(period):
            return entry
    return None


class SourceProbe:
    """Builds an availability catalog by probing a transport."""

    def __init__(self, transport: Transport, timeout: float = DEFAULT_PROBE_TIMEOUT):
        """Initialize probe.

        Args:
            transport: Anything with an async ``exists(path)``
            timeout: Per-probe timeout in seconds
        """
        self.transport = transport
        self.timeout = timeout

    async def _probe(self, coord: SourceCoordinate) -> bool:
        """Check one coordinate; raises DiscoveryProbeFailure on error/timeout."""
        try:
            return await asyncio.wait_for(
                self.transport.exists(coord.path), timeout=self.timeout
            )
        except Exception as e:
            raise DiscoveryProbeFailure(coord, e) from e

    async def discover(
        self,
        collections: Iterable[str],
        periods: Sequence[str],
    ) -> Catalog:
        """Probe every coordinate concurrently and return the catalog.

        Args:
            collections: Collection ids (any case)
            periods: Candidate periods, e.g. ``["2015", ..., "2026"]``

        Returns:
            Collection key → entries (period descending); collections with
            no confirmed period are omitted
        """
        coords = build_coordinates(collections, periods)
        outcomes = await asyncio.gather(
            *(self._probe(c) for c in coords),
            return_exceptions=True,
        )

        found: list[SourceCoordinate] = []
        failures = 0
        for coord, outcome in zip(coords, outcomes):
            if isinstance(outcome, BaseException):
                failures += 1
                logger.debug("Probe failed, treating as absent: %s", outcome)
                continue
            if outcome:
                found.append(coord)

        catalog = build_catalog(found)
        logger.info(
            "Discovery: %d probes, %d found, %d failed, %d collections",
            len(coords), len(found), failures, len(catalog),
        )
        return catalog

    def discover_sync(
        self,
        collections: Iterable[str],
        periods: Sequence[str],
    ) -> Catalog:
        """Blocking wrapper around :meth:`discover` for scripts."""
        return asyncio.run(self.discover(collections, periods))
