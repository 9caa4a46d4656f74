from datetime import date
from pathlib import Path

import pytest

from papersift.config import DEFAULT_COLLECTIONS, Settings, save_settings


@pytest.fixture(autouse=True)
def _fresh_singleton():
    Settings.reset()
    yield
    Settings.reset()


def _write_config(base: Path, text: str) -> None:
    (base / ".metadata").mkdir(parents=True, exist_ok=True)
    (base / ".metadata" / "papersift.yaml").write_text(text, encoding="utf-8")


def test_defaults_without_config(tmp_path) -> None:
    settings = Settings.load(tmp_path)

    assert settings.collections == DEFAULT_COLLECTIONS
    assert settings.page_size == 10
    assert settings.probe_timeout == 3.0
    assert settings.data_root == str(tmp_path / "data")
    assert settings.periods[0] == "2015"
    assert settings.periods[-1] == str(date.today().year)


def test_load_is_singleton(tmp_path) -> None:
    assert Settings.load(tmp_path) is Settings.load(tmp_path)


def test_load_from_yaml(tmp_path) -> None:
    _write_config(tmp_path, """
data_root: https://example.org/data
collections: [ICLR, acl]
first_period: 2020
last_period: 2022
page_size: 25
probe_timeout: 1.5
""")
    settings = Settings.load(tmp_path)

    assert settings.data_root == "https://example.org/data"
    assert settings.collections == ["iclr", "acl"]
    assert settings.periods == ["2020", "2021", "2022"]
    assert settings.page_size == 25
    assert settings.probe_timeout == 1.5


def test_invalid_values_fall_back(tmp_path) -> None:
    _write_config(tmp_path, "page_size: zero\nprobe_timeout: [1]\nfirst_period: 2019\n")
    settings = Settings.load(tmp_path)

    assert settings.page_size == 10
    assert settings.probe_timeout == 3.0
    assert settings.first_period == 2019


def test_malformed_yaml_uses_defaults(tmp_path) -> None:
    _write_config(tmp_path, "data_root: [unclosed\n")
    assert Settings.load(tmp_path).page_size == 10


def test_example_template_is_copied(tmp_path) -> None:
    (tmp_path / ".metadata.example").mkdir()
    (tmp_path / ".metadata.example" / "papersift.yaml").write_text("page_size: 7\n", encoding="utf-8")

    settings = Settings.load(tmp_path)

    assert (tmp_path / ".metadata" / "papersift.yaml").exists()
    assert settings.page_size == 7


def test_update_and_save_roundtrip(tmp_path) -> None:
    settings = Settings.load(tmp_path)
    settings.update(page_size=20, data_root="https://example.org/d")
    with pytest.raises(AttributeError):
        settings.update(nope=1)

    save_settings(settings.config_path, settings)
    reloaded = Settings.reload(tmp_path)

    assert reloaded is not settings
    assert reloaded.page_size == 20
    assert reloaded.data_root == "https://example.org/d"
