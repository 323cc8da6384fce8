"""Upstream TMDB payload records.

Every field is optional. A field of the wrong type is treated as missing so
that one odd value does not fail the whole response.
"""

from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _number_or_none(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None


def _dicts_only(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _dict_or_none(value: Any) -> Any:
    return value if isinstance(value, dict) else None


OptStr = Annotated[Optional[str], BeforeValidator(_str_or_none)]
OptNumber = Annotated[Optional[float], BeforeValidator(_number_or_none)]
OptInt = Annotated[Optional[int], BeforeValidator(_int_or_none)]


class UpstreamRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TmdbNamed(UpstreamRecord):
    name: OptStr = None


class TmdbEpisode(UpstreamRecord):
    air_date: OptStr = None


class TmdbTitle(UpstreamRecord):
    id: OptInt = None
    title: OptStr = None
    name: OptStr = None
    overview: OptStr = None
    # kept raw, poster_url() decides what counts as a path
    poster_path: Any = None
    release_date: OptStr = None
    first_air_date: OptStr = None
    media_type: OptStr = None
    popularity: OptNumber = None
    vote_average: OptNumber = None


class TmdbMovieDetails(TmdbTitle):
    pass


class TmdbTvDetails(TmdbTitle):
    networks: Annotated[List[TmdbNamed], BeforeValidator(_dicts_only)] = []
    status: OptStr = None
    last_air_date: OptStr = None
    next_episode_to_air: Annotated[Optional[TmdbEpisode], BeforeValidator(_dict_or_none)] = None


class TmdbPage(UpstreamRecord):
    results: Annotated[List[TmdbTitle], BeforeValidator(_dicts_only)] = []
