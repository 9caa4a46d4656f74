"""Search routes: load a paper set, manage keywords, read ranked pages."""

from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from papersift.gui.state import get_session
from papersift.models.paper import RankedPaper
from papersift.services.discovery_service import find_entry
from papersift.services.pager import page_window
from papersift.services.transport import TransportError
from papersift.utils.text import truncate

router = APIRouter()


class LoadRequest(BaseModel):
    collection: str
    period: str


class KeywordRequest(BaseModel):
    keyword: str


def _ranked_to_dict(item: RankedPaper) -> dict:
    """Flatten a ranked paper into one JSON object."""
    data = asdict(item.paper)
    data.update(
        match_count=item.match_count,
        matched_keywords=list(item.matched_keywords),
        relevance_score=item.relevance_score,
        abstract_preview=truncate(item.paper.abstract),
    )
    return data


# ============================================================================
# Loading
# ============================================================================


@router.post("/load")
async def load_papers(body: LoadRequest):
    """Fetch, normalize and rank one catalogued collection/period."""
    session = get_session()
    if find_entry(session.catalog, body.collection, body.period) is None:
        raise HTTPException(
            status_code=404,
            detail=f"No data file for {body.collection.upper()} {body.period}",
        )
    try:
        count = await session.load(body.collection, body.period)
    except TransportError as e:
        raise HTTPException(
            status_code=502,
            detail={"path": e.path, "status": e.status, "message": str(e)},
        )
    loaded = session.loaded
    return {
        "loaded": count,
        "collection": loaded.collection if loaded else body.collection.upper(),
        "period": loaded.period if loaded else body.period,
    }


# ============================================================================
# Keywords
# ============================================================================


@router.get("/keywords")
async def get_keywords():
    return {"keywords": list(get_session().keywords)}


@router.post("/keywords")
async def add_keyword(body: KeywordRequest):
    """Add a keyword; 409 if it already exists, 422 if blank."""
    session = get_session()
    if not body.keyword.strip():
        raise HTTPException(status_code=422, detail="Keyword is empty")
    if not session.add_keyword(body.keyword):
        raise HTTPException(status_code=409, detail="Keyword already exists")
    return {"keywords": list(session.keywords)}


@router.delete("/keywords/{keyword}")
async def remove_keyword(keyword: str):
    session = get_session()
    if not session.remove_keyword(keyword):
        raise HTTPException(status_code=404, detail="Keyword not found")
    return {"keywords": list(session.keywords)}


@router.delete("/keywords")
async def clear_keywords():
    session = get_session()
    session.clear_keywords()
    return {"keywords": []}


# ============================================================================
# Results
# ============================================================================


@router.get("/results")
async def get_results(page: int = Query(1, description="Page number (clamped)")):
    """One page of the current ranked results plus pagination info."""
    session = get_session()
    info = session.page_info(page)
    return {
        "page": info.number,
        "page_size": info.size,
        "total_items": info.total_items,
        "total_pages": info.total_pages,
        "window": page_window(info.number, info.total_pages),
        "keywords": list(session.keywords),
        "items": [_ranked_to_dict(item) for item in info.items],
    }
