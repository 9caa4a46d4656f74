from pathlib import Path

import pytest

from conftest import write_dump

from papersift.cli import create_parser, main


@pytest.fixture
def data_root(settings, monkeypatch) -> Path:
    monkeypatch.setenv("COLUMNS", "200")
    root = Path(settings.data_root)
    write_dump(root, "iclr", "2024", [
        {"title": "Graph attention", "rating": [6, 8]},
        {"title": "Image models"},
    ])
    return root


def test_parser_collects_repeated_keywords() -> None:
    args = create_parser().parse_args(["search", "ICLR", "2024", "-k", "graph", "-k", "gnn", "--page", "2"])
    assert args.keywords == ["graph", "gnn"]
    assert args.page == 2


def test_catalog_command(data_root, capsys) -> None:
    assert main(["catalog"]) == 0
    out = capsys.readouterr().out
    assert "ICLR" in out
    assert "2024" in out


def test_search_command(data_root, capsys) -> None:
    assert main(["search", "iclr", "2024", "-k", "graph"]) == 0
    out = capsys.readouterr().out
    assert "Graph attention" in out
    assert "Image models" not in out


def test_search_missing_file_exits_nonzero(data_root, capsys) -> None:
    assert main(["search", "kdd", "2016"]) == 1
    assert "Error" in capsys.readouterr().out


def test_export_command(data_root, settings) -> None:
    assert main(["export", "iclr", "2024"]) == 0
    files = list(Path(settings.export_dir).glob("ICLR-2024-*.md"))
    assert len(files) == 1


def test_zero_page_size_is_rejected(data_root, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["search", "iclr", "2024", "--page-size", "0"])
    assert exc.value.code == 2
    assert "--page-size must be >= 1" in capsys.readouterr().err


def test_search_path_like_collection_exits_nonzero(data_root) -> None:
    assert main(["search", "../iclr", "2024"]) == 1
