"""Pure transforms from upstream TMDB records to catalog payloads."""

from typing import Any, List, Optional

from reeltrack.schemas import CatalogEntry, MediaKind, SearchResult, TrendingResult
from reeltrack.tmdb.records import TmdbMovieDetails, TmdbTitle, TmdbTvDetails

IMAGE_BASE = "https://image.tmdb.org/t/p"
LIST_SIZE = "w185"
DETAIL_SIZE = "w500"


# --- HELPERS ---

def poster_url(poster_path: Any, size: str = DETAIL_SIZE, image_base: str = IMAGE_BASE) -> Optional[str]:
    if isinstance(poster_path, str) and poster_path:
        return f"{image_base}/{size}{poster_path}"
    return None


def year_from_date(date: Any) -> Optional[int]:
    """Year from the leading four characters of a `YYYY-MM-DD` string."""
    if isinstance(date, str) and len(date) >= 4 and date[:4].isascii() and date[:4].isdigit():
        return int(date[:4])
    return None


def top_cast(credits: Any, limit: int = 3) -> List[str]:
    """First `limit` cast names from a raw credits payload, falsy names dropped."""
    cast = credits.get("cast") if isinstance(credits, dict) else None
    if not isinstance(cast, list):
        return []
    names = [c.get("name") if isinstance(c, dict) else None for c in cast[:limit]]
    return [n for n in names if n]


def pick_title(record: TmdbTitle) -> str:
    return record.title or record.name or "Untitled"


def _release_date(record: TmdbTitle, kind: MediaKind) -> Optional[str]:
    if kind is MediaKind.TV:
        return record.first_air_date or record.release_date
    return record.release_date or record.first_air_date


# --- RECORDS ---

def movie_entry(
    details: TmdbMovieDetails, credits: Any, requested_id: int, image_base: str = IMAGE_BASE
) -> CatalogEntry:
    return CatalogEntry(
        kind=MediaKind.MOVIE,
        external_id=details.id if details.id is not None else requested_id,
        title=pick_title(details),
        year=year_from_date(details.release_date),
        overview=details.overview or "",
        top_cast=top_cast(credits),
        image_url=poster_url(details.poster_path, DETAIL_SIZE, image_base),
        rating=details.vote_average,
    )


def tv_entry(details: TmdbTvDetails, requested_id: int, image_base: str = IMAGE_BASE) -> CatalogEntry:
    networks: List[str] = []
    for network in details.networks:
        if network.name and network.name not in networks:
            networks.append(network.name)

    next_episode = details.next_episode_to_air
    return CatalogEntry(
        kind=MediaKind.TV,
        external_id=details.id if details.id is not None else requested_id,
        title=pick_title(details),
        year=year_from_date(details.first_air_date),
        overview=details.overview or "",
        image_url=poster_url(details.poster_path, DETAIL_SIZE, image_base),
        rating=details.vote_average,
        networks=networks,
        status=details.status,
        first_air_date=details.first_air_date,
        last_air_date=details.last_air_date,
        next_air_date=next_episode.air_date if next_episode else None,
    )


def search_result(record: TmdbTitle, kind: MediaKind, image_base: str = IMAGE_BASE) -> SearchResult:
    return SearchResult(
        external_id=record.id,
        title=pick_title(record),
        year=year_from_date(_release_date(record, kind)),
        overview=record.overview or "",
        image_url=poster_url(record.poster_path, LIST_SIZE, image_base),
    )


def trending_result(record: TmdbTitle, kind: MediaKind, image_base: str = IMAGE_BASE) -> TrendingResult:
    media_type = MediaKind.parse(record.media_type, default=kind)
    return TrendingResult(
        external_id=record.id,
        title=pick_title(record),
        year=year_from_date(_release_date(record, media_type)),
        overview=record.overview or "",
        image_url=poster_url(record.poster_path, LIST_SIZE, image_base),
        media_type=media_type,
        popularity=record.popularity,
        vote_average=record.vote_average,
    )
