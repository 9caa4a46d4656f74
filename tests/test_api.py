from pathlib import Path

import pytest
import yaml
from fastapi.testclient import TestClient

from conftest import write_dump

from papersift.gui.app import create_app


@pytest.fixture
def client(settings):
    root = Path(settings.data_root)
    write_dump(root, "iclr", "2024", [
        {"title": "Graph attention", "abstract": "We attend.", "status": "Oral"},
        {"title": "Message passing", "abstract": "A graph method for graph data."},
        {"title": "Image models", "abstract": "Pixels only."},
    ])
    write_dump(root, "iclr", "2023", {"papers": [{"title": f"P{i}"} for i in range(12)]})
    write_dump(root, "acl", "2022", {"unexpected": True})

    with TestClient(create_app(settings)) as c:
        yield c


def test_health(client) -> None:
    body = client.get("/health").json()
    assert body["status"] == "ok"


def test_catalog_built_on_startup(client) -> None:
    assert client.get("/api/catalog").json() == {
        "ACL": ["2022"],
        "ICLR": ["2024", "2023"],
    }
    assert client.post("/api/catalog/refresh").status_code == 200


def test_load_search_and_page(client) -> None:
    resp = client.post("/api/load", json={"collection": "iclr", "period": "2024"})
    assert resp.json() == {"loaded": 3, "collection": "ICLR", "period": "2024"}

    assert client.post("/api/keywords", json={"keyword": "Graph"}).json() == {"keywords": ["graph"]}
    assert client.post("/api/keywords", json={"keyword": "graph"}).status_code == 409
    assert client.post("/api/keywords", json={"keyword": "  "}).status_code == 422

    body = client.get("/api/results").json()
    assert body["total_items"] == 2
    assert [item["title"] for item in body["items"]] == ["Graph attention", "Message passing"]
    assert body["items"][0]["matched_keywords"] == ["graph"]
    assert body["items"][0]["status_score"] == 85

    assert client.delete("/api/keywords/graph").json() == {"keywords": []}
    assert client.delete("/api/keywords/graph").status_code == 404
    assert client.get("/api/results").json()["total_items"] == 3


def test_results_page_clamps(client) -> None:
    client.post("/api/load", json={"collection": "ICLR", "period": "2023"})

    body = client.get("/api/results", params={"page": 99}).json()

    assert body["page"] == 2
    assert body["total_pages"] == 2
    assert len(body["items"]) == 2
    assert body["window"] == [1, 2]


def test_clear_keywords(client) -> None:
    client.post("/api/keywords", json={"keyword": "a"})
    client.post("/api/keywords", json={"keyword": "b"})
    assert client.delete("/api/keywords").json() == {"keywords": []}
    assert client.get("/api/keywords").json() == {"keywords": []}


def test_load_unwrap_failure_is_zero_loaded(client) -> None:
    resp = client.post("/api/load", json={"collection": "acl", "period": "2022"})
    assert resp.status_code == 200
    assert resp.json()["loaded"] == 0


def test_load_missing_file_is_bad_gateway(client, settings) -> None:
    # catalogued at startup, gone by the time it is loaded
    (Path(settings.data_root) / "iclr" / "iclr2024.json").unlink()
    resp = client.post("/api/load", json={"collection": "iclr", "period": "2024"})
    assert resp.status_code == 502
    assert resp.json()["detail"]["status"] == 404


def test_load_uncatalogued_coordinate_is_not_found(client) -> None:
    resp = client.post("/api/load", json={"collection": "kdd", "period": "2016"})
    assert resp.status_code == 404


def test_load_cannot_escape_data_root(client, settings) -> None:
    (Path(settings.data_root).parent / "secret.json").write_text(
        '[{"title": "leaked"}]', encoding="utf-8"
    )

    resp = client.post("/api/load", json={"collection": ".", "period": "/../secret"})

    assert resp.status_code == 404
    titles = [p["title"] for p in client.get("/api/results").json()["items"]]
    assert "leaked" not in titles


def test_update_settings_applies_and_persists(client, settings) -> None:
    client.post("/api/load", json={"collection": "iclr", "period": "2023"})

    resp = client.put("/api/settings", json={"page_size": 5})

    assert resp.status_code == 200
    assert resp.json()["page_size"] == 5
    assert client.get("/api/results").json()["total_pages"] == 3
    saved = yaml.safe_load(settings.config_path.read_text(encoding="utf-8"))
    assert saved["page_size"] == 5
    assert saved["collections"] == ["iclr", "acl", "kdd"]


def test_update_settings_rejects_zero_page_size(client, settings) -> None:
    resp = client.put("/api/settings", json={"page_size": 0})
    assert resp.status_code == 422
    assert not settings.config_path.exists()
