from fastapi import APIRouter, Depends, Path

from reeltrack.api.dependencies import current_user_id, get_watchlist_service, path_kind
from reeltrack.core.errors import BadRequest
from reeltrack.schemas import MediaKind, Theme, ThemeUpdate
from reeltrack.services.watchlist import WatchlistService

router = APIRouter(prefix="/user", tags=["user"])


# --- Watchlist ---

@router.get("/watchlist/{kind}")
async def list_watchlist(
    kind: MediaKind = Depends(path_kind),
    user_id: str = Depends(current_user_id),
    service: WatchlistService = Depends(get_watchlist_service),
):
    items = await service.list_user_items(user_id, kind)
    return {"items": [i.model_dump(mode="json", by_alias=True, exclude_none=True) for i in items]}


@router.post("/watchlist/{kind}/{external_id}")
async def add_to_watchlist(
    external_id: int = Path(...),
    kind: MediaKind = Depends(path_kind),
    user_id: str = Depends(current_user_id),
    service: WatchlistService = Depends(get_watchlist_service),
):
    entry = await service.add_item(user_id, kind, external_id)
    return {"added": True, "item": entry.model_dump(mode="json", by_alias=True, exclude_none=True)}


@router.delete("/watchlist/{kind}/{external_id}")
async def remove_from_watchlist(
    external_id: int = Path(...),
    kind: MediaKind = Depends(path_kind),
    user_id: str = Depends(current_user_id),
    service: WatchlistService = Depends(get_watchlist_service),
):
    await service.remove_item(user_id, kind, external_id)
    return {"removed": True}


# --- Preferences ---

@router.get("/preferences")
async def preferences(
    user_id: str = Depends(current_user_id),
    service: WatchlistService = Depends(get_watchlist_service),
):
    prefs = await service.get_preferences(user_id)
    return {
        "theme": prefs.theme.value,
        "movieIds": sorted(prefs.movie_ids),
        "tvShowIds": sorted(prefs.tv_show_ids),
    }


@router.put("/preferences/theme")
async def update_theme(
    body: ThemeUpdate,
    user_id: str = Depends(current_user_id),
    service: WatchlistService = Depends(get_watchlist_service),
):
    try:
        theme = Theme(body.theme)
    except ValueError:
        raise BadRequest(f"Unknown theme: {body.theme}")
    await service.set_theme(user_id, theme)
    return {"theme": theme.value}
