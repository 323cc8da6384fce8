import logging
import uuid

from fastapi import APIRouter, Depends, Request

from reeltrack.api.dependencies import SESSION_USER_KEY, get_watchlist_service
from reeltrack.services.watchlist import WatchlistService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/anonymous")
async def anonymous_sign_in(request: Request, service: WatchlistService = Depends(get_watchlist_service)):
    """
    Sign in anonymously: reuse the session's user id or mint a new one,
    then make sure the user's watchlist document exists.
    """
    user_id = request.session.get(SESSION_USER_KEY)
    created = False
    if not user_id:
        user_id = uuid.uuid4().hex
        request.session[SESSION_USER_KEY] = user_id
        created = True
        logger.info("Anonymous sign-in, new user %s", user_id)

    prefs = await service.get_preferences(user_id)
    return {"user_id": user_id, "created": created, "theme": prefs.theme.value}


@router.get("/status")
async def status(request: Request):
    user_id = request.session.get(SESSION_USER_KEY)
    return {"signed_in": bool(user_id), "user_id": user_id}


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"signed_in": False}
