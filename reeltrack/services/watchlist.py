import logging
from typing import List

from reeltrack.db.catalog_store import CatalogStore
from reeltrack.db.watchlist_store import WatchlistStore
from reeltrack.schemas import CatalogEntry, MediaKind, Theme, UserWatchlist
from reeltrack.tmdb.gateway import MetadataGateway

logger = logging.getLogger(__name__)


class WatchlistService:
    """User-facing watchlist operations over the catalog, the user store and TMDB.

    Nothing here spans a transaction: a failure between the catalog upsert and
    the reference write leaves an unreferenced catalog entry, which is harmless.
    """

    def __init__(self, gateway: MetadataGateway, catalog: CatalogStore, watchlists: WatchlistStore):
        self.gateway = gateway
        self.catalog = catalog
        self.watchlists = watchlists

    async def list_user_items(self, user_id: str, kind: MediaKind) -> List[CatalogEntry]:
        watchlist = await self.watchlists.get_or_create(user_id)
        ids = watchlist.ids_for(kind)
        if not ids:
            return []

        entries = await self.catalog.list_all(kind)
        # ids without a catalog entry are dropped
        return [e for e in entries if e.external_id in ids]

    async def add_item(self, user_id: str, kind: MediaKind, external_id: int) -> CatalogEntry:
        entry = await self.gateway.get_by_id(kind, external_id)
        stored = await self.catalog.upsert(entry)
        await self.watchlists.add_reference(user_id, kind, stored.external_id)
        logger.info("User %s added %s/%s (%s)", user_id, kind.value, stored.external_id, stored.title)
        return stored

    async def remove_item(self, user_id: str, kind: MediaKind, external_id: int) -> None:
        # the shared catalog entry stays, other users may reference it
        await self.watchlists.remove_reference(user_id, kind, external_id)
        logger.info("User %s removed %s/%s", user_id, kind.value, external_id)

    async def get_preferences(self, user_id: str) -> UserWatchlist:
        return await self.watchlists.get_or_create(user_id)

    async def set_theme(self, user_id: str, theme: Theme) -> None:
        await self.watchlists.set_theme(user_id, theme)
