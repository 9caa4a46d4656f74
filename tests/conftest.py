import json
from pathlib import Path

import pytest

from papersift.config import Settings
from papersift.models.paper import Paper


@pytest.fixture
def settings(tmp_path: Path):
    """Fresh Settings singleton pointing at a temporary data root."""
    Settings.reset()
    data_root = tmp_path / "data"
    data_root.mkdir()
    s = Settings(
        data_root=str(data_root),
        collections=["iclr", "acl", "kdd"],
        first_period=2022,
        last_period=2024,
        probe_timeout=1.0,
        page_size=10,
        metadata_dir=tmp_path / ".metadata",
        export_dir=tmp_path / "exports",
    )
    yield s
    Settings.reset()


def write_dump(root: Path, collection: str, period: str, payload) -> Path:
    """Write a JSON dump using the {c}/{c}{period}.json layout."""
    folder = root / collection.lower()
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / f"{collection.lower()}{period}.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def make_paper(
    id: str,
    title: str,
    abstract: str = "",
    authors: str = "A. Author",
    rating: float | None = None,
    status_score: int = 0,
    keywords: tuple[str, ...] = (),
) -> Paper:
    """Build a Paper with search text derived the way the normalizer does."""
    search_text = " ".join([title, authors, abstract, " ".join(keywords)]).lower()
    return Paper(
        id=id,
        title=title,
        authors=authors,
        abstract=abstract,
        keywords=keywords,
        rating_score=rating,
        status_score=status_score,
        search_text=search_text,
    )
