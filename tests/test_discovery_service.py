import asyncio

from conftest import write_dump

from papersift.models.paper import CatalogEntry, SourceCoordinate
from papersift.services.discovery_service import (
    SourceProbe,
    build_coordinates,
    catalog_periods,
    find_entry,
)
from papersift.services.transport import FileTransport


class FakeTransport:
    """exists() driven by a path → outcome mapping.

    Outcomes: True/False, an exception instance to raise, or "hang".
    """

    def __init__(self, outcomes: dict):
        self.outcomes = outcomes
        self.calls: list[str] = []

    async def exists(self, path: str) -> bool:
        self.calls.append(path)
        outcome = self.outcomes.get(path, False)
        if outcome == "hang":
            await asyncio.sleep(10)
            return True
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_coordinate_path_convention() -> None:
    coord = SourceCoordinate("ICLR", "2024")
    assert coord.path == "iclr/iclr2024.json"
    assert coord.key == "ICLR"


def test_build_coordinates_is_cross_product() -> None:
    coords = build_coordinates(["a", "b"], ["2023", "2024"])
    assert len(coords) == 4
    assert {(c.collection, c.period) for c in coords} == {
        ("a", "2023"), ("a", "2024"), ("b", "2023"), ("b", "2024"),
    }


def test_discover_groups_sorts_and_omits_empty_collections() -> None:
    transport = FakeTransport({
        "iclr/iclr2022.json": True,
        "iclr/iclr2024.json": True,
        "acl/acl2023.json": True,
    })
    probe = SourceProbe(transport, timeout=1.0)

    catalog = asyncio.run(probe.discover(["iclr", "acl", "kdd"], ["2022", "2023", "2024"]))

    assert set(catalog) == {"ICLR", "ACL"}
    assert [e.period for e in catalog["ICLR"]] == ["2024", "2022"]
    assert catalog["ACL"] == [CatalogEntry("ACL", "2023", "acl/acl2023.json")]
    assert len(transport.calls) == 9


def test_discover_isolates_errors_and_timeouts() -> None:
    transport = FakeTransport({
        "iclr/iclr2023.json": RuntimeError("connection reset"),
        "iclr/iclr2024.json": "hang",
        "acl/acl2023.json": True,
        "acl/acl2024.json": True,
    })
    probe = SourceProbe(transport, timeout=0.05)

    catalog = asyncio.run(probe.discover(["iclr", "acl"], ["2023", "2024"]))

    assert "ICLR" not in catalog
    assert [e.period for e in catalog["ACL"]] == ["2024", "2023"]


def test_discover_with_nothing_found_is_empty_catalog() -> None:
    probe = SourceProbe(FakeTransport({}))
    assert asyncio.run(probe.discover(["iclr"], ["2024"])) == {}


def test_discover_is_idempotent(tmp_path) -> None:
    write_dump(tmp_path, "kdd", "2023", [])
    probe = SourceProbe(FileTransport(tmp_path))

    first = probe.discover_sync(["kdd"], ["2022", "2023"])
    second = probe.discover_sync(["kdd"], ["2022", "2023"])

    assert first == second == {"KDD": [CatalogEntry("KDD", "2023", "kdd/kdd2023.json")]}
    assert first is not second


def test_catalog_views() -> None:
    catalog = {
        "KDD": [CatalogEntry("KDD", "2024", "kdd/kdd2024.json")],
        "ACL": [
            CatalogEntry("ACL", "2024", "acl/acl2024.json"),
            CatalogEntry("ACL", "2022", "acl/acl2022.json"),
        ],
    }
    assert catalog_periods(catalog) == {"ACL": ["2024", "2022"], "KDD": ["2024"]}
    assert find_entry(catalog, "acl", "2022").path == "acl/acl2022.json"
    assert find_entry(catalog, "acl", "2019") is None
