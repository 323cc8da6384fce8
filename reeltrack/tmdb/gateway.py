import asyncio
import logging
from typing import Any, List, Optional, Type, TypeVar, Union

import httpx
from pydantic import ValidationError

from reeltrack.core.config import Settings
from reeltrack.core.errors import BadRequest, NotConfigured, UpstreamError
from reeltrack.schemas import CatalogEntry, MediaKind, SearchResult, TimeWindow, TrendingResult
from reeltrack.tmdb import normalize
from reeltrack.tmdb.cache import ResponseCache
from reeltrack.tmdb.records import TmdbMovieDetails, TmdbPage, TmdbTvDetails, UpstreamRecord

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10
TRENDING_LIMIT = 20

R = TypeVar("R", bound=UpstreamRecord)


def parse_external_id(raw: Union[str, int, None]) -> int:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise BadRequest("Missing required query param: id")
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()):
        raise BadRequest(f"Invalid id: {raw!r}")
    return int(text)


class MetadataGateway:
    """Server-side proxy to the TMDB API.

    The API key never leaves this object; callers get normalized
    `CatalogEntry` / `SearchResult` / `TrendingResult` records back.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: Optional[str],
        base_url: str = "https://api.themoviedb.org/3",
        image_base: str = normalize.IMAGE_BASE,
        language: str = "en-US",
        cache: Optional[ResponseCache] = None,
        detail_ttl: float = 60 * 60,
        list_ttl: float = 60 * 10,
    ):
        self._http = http
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._image_base = image_base.rstrip("/")
        self._language = language
        self._cache = cache if cache is not None else ResponseCache()
        self._detail_ttl = detail_ttl
        self._list_ttl = list_ttl

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, settings: Settings) -> "MetadataGateway":
        return cls(
            http,
            api_key=settings.TMDB_API_KEY,
            base_url=settings.TMDB_BASE_URL,
            image_base=settings.TMDB_IMAGE_BASE,
            language=settings.TMDB_LANGUAGE,
            detail_ttl=settings.TMDB_DETAIL_TTL,
            list_ttl=settings.TMDB_LIST_TTL,
        )

    # --- HELPERS ---

    def _require_api_key(self) -> str:
        if not self._api_key:
            raise NotConfigured("TMDB_API_KEY is not set on the server")
        return self._api_key

    async def _get(self, path: str, what: str, **params: Any) -> Any:
        query = {"api_key": self._require_api_key(), **params}
        try:
            resp = await self._http.get(f"{self._base_url}/{path}", params=query)
        except httpx.HTTPError as exc:
            logger.warning("TMDB %s request failed: %s", what, exc)
            raise UpstreamError(f"TMDB {what} fetch failed: {exc}", body=str(exc)) from exc

        if not resp.is_success:
            text = resp.text
            logger.warning("TMDB %s returned %s for %s", what, resp.status_code, path)
            raise UpstreamError(
                f"TMDB {what} fetch failed: {resp.status_code} {text}",
                status=resp.status_code,
                body=text,
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamError(
                f"TMDB {what} fetch failed: invalid JSON", status=resp.status_code, body=resp.text
            ) from exc

    @staticmethod
    def _record(model: Type[R], payload: Any, what: str) -> R:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise UpstreamError(f"TMDB {what} payload malformed: {exc}", body=str(payload)[:500]) from exc

    # --- OPERATIONS ---

    async def get_by_id(self, kind: MediaKind, external_id: Union[str, int, None]) -> CatalogEntry:
        tmdb_id = parse_external_id(external_id)
        self._require_api_key()

        key = ("detail", kind, tmdb_id)
        cached = self._cache.get(key)
        if cached is not None:
            return cached.model_copy(deep=True)

        if kind is MediaKind.MOVIE:
            entry = await self._movie(tmdb_id)
        else:
            entry = await self._tv(tmdb_id)

        self._cache.set(key, entry, self._detail_ttl)
        return entry.model_copy(deep=True)

    async def _movie(self, tmdb_id: int) -> CatalogEntry:
        details_res, credits_res = await asyncio.gather(
            self._get(f"movie/{tmdb_id}", "details", language=self._language),
            self._get(f"movie/{tmdb_id}/credits", "credits", language=self._language),
            return_exceptions=True,
        )
        # details failure wins over a credits failure
        for res in (details_res, credits_res):
            if isinstance(res, BaseException):
                raise res

        details = self._record(TmdbMovieDetails, details_res, "details")
        return normalize.movie_entry(details, credits_res, tmdb_id, self._image_base)

    async def _tv(self, tmdb_id: int) -> CatalogEntry:
        payload = await self._get(f"tv/{tmdb_id}", "TV details", language=self._language)
        details = self._record(TmdbTvDetails, payload, "TV details")
        return normalize.tv_entry(details, tmdb_id, self._image_base)

    async def search(self, kind: MediaKind, query: Optional[str], limit: int = SEARCH_LIMIT) -> List[SearchResult]:
        if not query or not query.strip():
            return []
        self._require_api_key()

        key = ("search", kind, query, limit)
        cached = self._cache.get(key)
        if cached is not None:
            return [r.model_copy(deep=True) for r in cached]

        payload = await self._get(
            f"search/{kind.value}",
            "search",
            language=self._language,
            include_adult="false",
            query=query,
        )
        page = self._record(TmdbPage, payload, "search")
        results = [
            normalize.search_result(r, kind, self._image_base)
            for r in page.results[:limit]
            if r.id is not None
        ]
        self._cache.set(key, results, self._list_ttl)
        return [r.model_copy(deep=True) for r in results]

    async def trending(
        self, kind: MediaKind, window: TimeWindow = TimeWindow.DAY, limit: int = TRENDING_LIMIT
    ) -> List[TrendingResult]:
        self._require_api_key()

        key = ("trending", kind, window, limit)
        cached = self._cache.get(key)
        if cached is not None:
            return [r.model_copy(deep=True) for r in cached]

        payload = await self._get(f"trending/{kind.value}/{window.value}", "trending")
        page = self._record(TmdbPage, payload, "trending")
        results = [
            normalize.trending_result(r, kind, self._image_base)
            for r in page.results[:limit]
            if r.id is not None
        ]
        self._cache.set(key, results, self._list_ttl)
        return [r.model_copy(deep=True) for r in results]
