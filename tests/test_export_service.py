from conftest import make_paper

from papersift.models.paper import RankedPaper
from papersift.services.export_service import MarkdownExporter


def test_export_writes_ranked_papers(tmp_path) -> None:
    results = [
        RankedPaper.matched(make_paper("1", "Graph nets", rating=7.5, status_score=85), ["graph"], 31.0),
        RankedPaper.matched(make_paper("2", "More graphs"), ["graph"], 20.0),
    ]
    exporter = MarkdownExporter(tmp_path / "exports")

    path = exporter.export(results, ["graph"], "ICLR-2024")

    assert path.parent == tmp_path / "exports"
    assert path.name.startswith("ICLR-2024-")
    text = path.read_text(encoding="utf-8")
    assert "Keywords: graph" in text
    assert "## 1. Graph nets" in text
    assert "## 2. More graphs" in text
    assert "- Rating: 7.5" in text
    assert "- Matched: graph" in text


def test_export_empty_results(tmp_path) -> None:
    path = MarkdownExporter(tmp_path).export([], label="KDD-2022")
    assert "Papers: 0" in path.read_text(encoding="utf-8")
