"""Configuration management.

``Settings`` is a **metaclass-based singleton**: the first call to
``Settings.load()`` creates the instance; every later call returns
the same object.  Use ``update()`` to change values at runtime, or
``reload()`` to re-read everything from disk.

User-editable configuration lives in ``.metadata/papersift.yaml``:

* ``data_root``      – local directory or http(s) URL holding the JSON dumps
* ``collections``    – collection vocabulary probed during discovery
* ``first_period`` / ``last_period`` – inclusive period range
* ``probe_timeout``  – per-probe timeout (seconds)
* ``fetch_timeout``  – full-body fetch timeout (seconds)
* ``page_size``      – results per page

On first run, missing files are copied from ``.metadata.example/``.
"""

import logging
import shutil
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "papersift.yaml"

DEFAULT_COLLECTIONS = [
    "aaai", "nips", "icml", "iclr", "acl", "emnlp", "naacl",
    "cvpr", "iccv", "eccv", "sigir", "www", "kdd", "ijcai",
]
DEFAULT_FIRST_PERIOD = 2015


# ---------------------------------------------------------------------------
# Singleton metaclass
# ---------------------------------------------------------------------------

class _SettingsMeta(type):
    """Metaclass that enforces a process-wide singleton for *Settings*.

    * First ``Settings(...)`` creates and caches the instance.
    * Later ``Settings(...)`` calls return the cached instance (args ignored).
    """

    _instances: dict[type, Any] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]


# ---------------------------------------------------------------------------
# Settings dataclass (singleton)
# ---------------------------------------------------------------------------

@dataclass
class Settings(metaclass=_SettingsMeta):
    """Application settings — singleton with runtime-mutable values.

    Usage::

        settings = Settings.load()               # first call → create
        settings = Settings.load()               # later → same object
        settings.update(data_root="https://…")   # runtime change
        settings = Settings.reload()             # re-read from disk
    """

    data_root: str = "data"
    collections: list[str] = field(default_factory=lambda: list(DEFAULT_COLLECTIONS))
    first_period: int = DEFAULT_FIRST_PERIOD
    last_period: Optional[int] = None
    probe_timeout: float = 3.0
    fetch_timeout: float = 20.0
    page_size: int = 10
    metadata_dir: Path = Path(".metadata")
    export_dir: Path = Path("exports")

    # ── Computed properties ────────────────────────────────────────────

    @property
    def config_path(self) -> Path:
        return self.metadata_dir / CONFIG_FILENAME

    @property
    def periods(self) -> list[str]:
        """Candidate periods, ascending, ``first_period``..``last_period``.

        ``last_period`` defaults to the current year.
        """
        last = self.last_period or date.today().year
        return [str(y) for y in range(self.first_period, last + 1)]

    # ── Runtime helpers ───────────────────────────────────────────────

    def update(self, **kwargs: Any) -> None:
        """Mutate settings fields at runtime.

        >>> Settings.load().update(page_size=20)
        """
        for key, value in kwargs.items():
            if not hasattr(self, key):
                raise AttributeError(f"Settings has no field '{key}'")
            setattr(self, key, value)

    # ── Factory / lifecycle ───────────────────────────────────────────

    @classmethod
    def load(cls, base_dir: Optional[Path] = None) -> "Settings":
        """Load or return the singleton Settings instance.

        On first call the singleton is created; subsequent calls return
        the cached instance.  Pass *base_dir* to override the project
        root (defaults to the repository root one level above ``papersift/``).
        """
        if cls in _SettingsMeta._instances:
            return _SettingsMeta._instances[cls]  # type: ignore[return-value]

        if base_dir is None:
            base_dir = Path(__file__).resolve().parent.parent

        metadata_dir = base_dir / ".metadata"
        cls._ensure_default_files(base_dir, metadata_dir)

        values = _load_config(metadata_dir / CONFIG_FILENAME)

        data_root = str(values.get("data_root", "data"))
        if not data_root.startswith(("http://", "https://")) and not Path(data_root).is_absolute():
            data_root = str(base_dir / data_root)

        return cls(
            data_root=data_root,
            collections=values.get("collections", list(DEFAULT_COLLECTIONS)),
            first_period=values.get("first_period", DEFAULT_FIRST_PERIOD),
            last_period=values.get("last_period"),
            probe_timeout=values.get("probe_timeout", 3.0),
            fetch_timeout=values.get("fetch_timeout", 20.0),
            page_size=values.get("page_size", 10),
            metadata_dir=metadata_dir,
            export_dir=base_dir / values.get("export_dir", "exports"),
        )

    @classmethod
    def reload(cls, base_dir: Optional[Path] = None) -> "Settings":
        """Discard the current singleton and re-load from disk."""
        cls.reset()
        return cls.load(base_dir)

    @classmethod
    def reset(cls) -> None:
        """Discard the singleton so the next ``load()`` re-creates it."""
        _SettingsMeta._instances.pop(cls, None)

    # ── Private ───────────────────────────────────────────────────────

    @staticmethod
    def _ensure_default_files(base_dir: Path, metadata_dir: Path) -> None:
        """Copy ``.metadata.example/`` templates when real files are missing."""
        metadata_dir.mkdir(parents=True, exist_ok=True)

        example_dir = base_dir / ".metadata.example"
        if not example_dir.exists():
            return

        for example_file in example_dir.iterdir():
            if example_file.is_file():
                target = metadata_dir / example_file.name
                if not target.exists():
                    shutil.copy2(example_file, target)
                    logger.info("Created .metadata/%s from template", example_file.name)


# ---------------------------------------------------------------------------
# YAML loaders
# ---------------------------------------------------------------------------

def _coerce(values: dict[str, Any]) -> dict[str, Any]:
    """Keep only well-typed config values; bad ones fall back to defaults."""
    out: dict[str, Any] = {}

    if isinstance(values.get("data_root"), str) and values["data_root"].strip():
        out["data_root"] = values["data_root"].strip()

    collections = values.get("collections")
    if isinstance(collections, list):
        cleaned = [str(c).strip().lower() for c in collections if str(c).strip()]
        if cleaned:
            out["collections"] = cleaned

    for key in ("first_period", "last_period", "page_size"):
        try:
            if values.get(key) is not None:
                out[key] = int(values[key])
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid %s in config: %r", key, values[key])

    for key in ("probe_timeout", "fetch_timeout"):
        try:
            if values.get(key) is not None:
                out[key] = float(values[key])
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid %s in config: %r", key, values[key])

    if isinstance(values.get("export_dir"), str) and values["export_dir"].strip():
        out["export_dir"] = values["export_dir"].strip()

    if out.get("page_size", 1) < 1:
        logger.warning("Ignoring page_size < 1 in config")
        out.pop("page_size")
    return out


def _load_config(path: Path) -> dict[str, Any]:
    """Load ``papersift.yaml``; missing or malformed files give ``{}``."""
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Could not read %s, using defaults: %s", path, e)
        return {}
    if not isinstance(data, dict):
        return {}
    return _coerce(data)


def save_settings(path: Path, settings: Settings) -> None:
    """Persist the user-editable settings to ``papersift.yaml``."""
    data: dict[str, Any] = {
        "data_root": settings.data_root,
        "collections": list(settings.collections),
        "first_period": settings.first_period,
        "last_period": settings.last_period,
        "probe_timeout": settings.probe_timeout,
        "fetch_timeout": settings.fetch_timeout,
        "page_size": settings.page_size,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write("# PaperSift settings\n")
        f.write("# data_root: local directory or http(s) URL with {collection}/{collection}{year}.json\n\n")
        yaml.dump(
            data,
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
