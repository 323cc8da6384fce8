"""Async client for the catalog endpoints, as used by the dashboard UI."""

from typing import Any, Dict, List

import httpx

from reeltrack.core.errors import ClientError
from reeltrack.schemas import CatalogEntry, MediaKind, SearchResult, TimeWindow, TrendingResult


class CatalogClient:
    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def _get(self, path: str, what: str, **params: Any) -> Dict[str, Any]:
        resp = await self._http.get(path, params=params)
        if not resp.is_success:
            try:
                message = resp.json().get("error") or resp.text
            except (ValueError, AttributeError):
                message = resp.text
            raise ClientError(resp.status_code, f"{what} failed: {message}")
        return resp.json()

    async def fetch_movie(self, external_id: int) -> CatalogEntry:
        data = await self._get("/catalog/movie", "TMDB fetch", id=external_id)
        return CatalogEntry.model_validate(data)

    async def fetch_tv_show(self, external_id: int) -> CatalogEntry:
        data = await self._get("/catalog/tv", "TMDB TV fetch", id=external_id)
        return CatalogEntry.model_validate(data)

    async def search(self, kind: MediaKind, query: str) -> List[SearchResult]:
        data = await self._get("/catalog/search", "TMDB search", type=kind.value, query=query)
        return [SearchResult.model_validate(r) for r in data.get("results", [])]

    async def trending(self, kind: MediaKind, window: TimeWindow = TimeWindow.DAY) -> List[TrendingResult]:
        data = await self._get("/catalog/trending", "TMDB trending", type=kind.value, window=window.value)
        return [TrendingResult.model_validate(r) for r in data.get("results", [])]
