"""Catalog routes: available collections/periods and re-discovery."""

from fastapi import APIRouter

from papersift.gui.state import get_session

router = APIRouter()


@router.get("/catalog")
async def get_catalog():
    """Collection → periods (newest first) for the selection widgets."""
    return get_session().catalog_periods()


@router.post("/catalog/refresh")
async def refresh_catalog():
    """Re-probe every coordinate and replace the catalog."""
    session = get_session()
    await session.discover()
    return session.catalog_periods()
