from fastapi import HTTPException, Request

from reeltrack.core.errors import BadRequest
from reeltrack.schemas import MediaKind
from reeltrack.services.watchlist import WatchlistService
from reeltrack.tmdb.gateway import MetadataGateway

SESSION_USER_KEY = "user_id"


def get_gateway(request: Request) -> MetadataGateway:
    return request.app.state.gateway


def get_watchlist_service(request: Request) -> WatchlistService:
    return request.app.state.watchlist_service


def current_user_id(request: Request) -> str:
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        raise HTTPException(status_code=401, detail="Not signed in")
    return user_id


def path_kind(kind: str) -> MediaKind:
    try:
        return MediaKind.parse(kind)
    except ValueError:
        raise BadRequest(f"Unknown media kind: {kind}")
