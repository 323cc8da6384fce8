from typing import Optional

from fastapi import APIRouter, Depends

from reeltrack.api.dependencies import get_gateway
from reeltrack.schemas import MediaKind, TimeWindow
from reeltrack.tmdb.gateway import MetadataGateway

router = APIRouter(prefix="/catalog", tags=["catalog"])


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- ENDPOINTS ---

@router.get("/movie")
async def movie_details(id: Optional[str] = None, gateway: MetadataGateway = Depends(get_gateway)):
    entry = await gateway.get_by_id(MediaKind.MOVIE, id)
    return _dump(entry)


@router.get("/tv")
async def tv_details(id: Optional[str] = None, gateway: MetadataGateway = Depends(get_gateway)):
    entry = await gateway.get_by_id(MediaKind.TV, id)
    return _dump(entry)


@router.get("/search")
async def search(
    query: Optional[str] = None,
    type: Optional[str] = None,
    gateway: MetadataGateway = Depends(get_gateway),
):
    """Search one media kind (movie by default), at most 10 results."""
    kind = MediaKind.parse(type, default=MediaKind.MOVIE)
    results = await gateway.search(kind, query)
    return {"results": [_dump(r) for r in results]}


@router.get("/trending")
async def trending(
    type: Optional[str] = None,
    window: Optional[str] = None,
    gateway: MetadataGateway = Depends(get_gateway),
):
    kind = MediaKind.parse(type, default=MediaKind.MOVIE)
    time_window = TimeWindow.WEEK if (window or "").strip().lower() == "week" else TimeWindow.DAY
    results = await gateway.trending(kind, time_window)
    return {"results": [_dump(r) for r in results]}
