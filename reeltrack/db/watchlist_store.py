import logging

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from reeltrack.db.database import Database
from reeltrack.db.models import UserRow, WatchlistRef
from reeltrack.schemas import MediaKind, Theme, UserWatchlist

logger = logging.getLogger(__name__)

DEFAULT_THEME = Theme.DARK


class WatchlistStore:
    """Per-user reference sets into the catalog, plus the theme preference.

    Each referenced id is its own row, so adds and removes of different ids
    never overwrite each other.
    """

    def __init__(self, db: Database):
        self._db = db

    async def _insert_ignore(self, session: AsyncSession, model, **values) -> None:
        insert = self._db.conflict_insert
        if insert is not None:
            await session.execute(insert(model).values(**values).on_conflict_do_nothing())
            return

        # generic fallback: check, then insert
        conditions = [getattr(model, k) == v for k, v in values.items()]
        existing = await session.execute(select(model).where(*conditions))
        if existing.first() is None:
            session.add(model(**values))

    async def _ensure_user(self, session: AsyncSession, user_id: str) -> None:
        await self._insert_ignore(session, UserRow, user_id=user_id, theme=DEFAULT_THEME.value)

    async def get_or_create(self, user_id: str) -> UserWatchlist:
        async with self._db.session("watchlist read") as session:
            result = await session.execute(select(UserRow).where(UserRow.user_id == user_id))
            user = result.scalar_one_or_none()
            if user is None:
                logger.info("Creating watchlist document for user %s", user_id)
                await self._ensure_user(session, user_id)
                return UserWatchlist(theme=DEFAULT_THEME)

            refs = await session.execute(
                select(WatchlistRef.kind, WatchlistRef.external_id).where(WatchlistRef.user_id == user_id)
            )
            movie_ids, tv_show_ids = set(), set()
            for kind, external_id in refs.all():
                if kind == MediaKind.MOVIE.value:
                    movie_ids.add(external_id)
                elif kind == MediaKind.TV.value:
                    tv_show_ids.add(external_id)

            try:
                theme = Theme(user.theme)
            except ValueError:
                theme = DEFAULT_THEME
            return UserWatchlist(movie_ids=movie_ids, tv_show_ids=tv_show_ids, theme=theme)

    async def add_reference(self, user_id: str, kind: MediaKind, external_id: int) -> None:
        async with self._db.session("watchlist add") as session:
            await self._ensure_user(session, user_id)
            await self._insert_ignore(
                session, WatchlistRef, user_id=user_id, kind=kind.value, external_id=int(external_id)
            )

    async def remove_reference(self, user_id: str, kind: MediaKind, external_id: int) -> None:
        async with self._db.session("watchlist remove") as session:
            await session.execute(
                delete(WatchlistRef).where(
                    WatchlistRef.user_id == user_id,
                    WatchlistRef.kind == kind.value,
                    WatchlistRef.external_id == int(external_id),
                )
            )

    async def set_theme(self, user_id: str, theme: Theme) -> None:
        async with self._db.session("theme update") as session:
            await self._ensure_user(session, user_id)
            await session.execute(update(UserRow).where(UserRow.user_id == user_id).values(theme=theme.value))
