"""Common routes: health check and settings."""

from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from papersift import __version__
from papersift.config import save_settings
from papersift.gui.state import get_session, state

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok", "version": __version__}


# ============================================================================
# Settings
# ============================================================================


class SettingsPayload(BaseModel):
    """Request body for updating settings; omitted fields are unchanged."""
    page_size: Optional[int] = Field(None, ge=1)
    probe_timeout: Optional[float] = Field(None, gt=0)
    collections: Optional[list[str]] = None


def _settings_dict() -> dict:
    s = state.settings
    return {
        "data_root": s.data_root,
        "collections": list(s.collections),
        "periods": s.periods,
        "probe_timeout": s.probe_timeout,
        "page_size": s.page_size,
    }


@router.get("/api/settings")
async def get_settings():
    return _settings_dict()


@router.put("/api/settings")
async def update_settings(body: SettingsPayload):
    """Apply changes to the live session and persist to ``papersift.yaml``.

    New collections are only probed on the next ``/api/catalog/refresh``.
    """
    changes = body.model_dump(exclude_none=True)
    if "collections" in changes:
        changes["collections"] = [c.strip() for c in changes["collections"] if c.strip()]
    state.settings.update(**changes)
    get_session().apply_settings()
    save_settings(state.settings.config_path, state.settings)
    return _settings_dict()
