from datetime import datetime
from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MediaKind(str, Enum):
    MOVIE = "movie"
    TV = "tv"

    @classmethod
    def parse(cls, value: Optional[str], default: Optional["MediaKind"] = None) -> "MediaKind":
        """Resolve a query/path value; unknown values fall back to `default` or raise ValueError."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            if default is not None:
                return default
            raise


class TimeWindow(str, Enum):
    DAY = "day"
    WEEK = "week"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CatalogEntry(CamelModel):
    kind: MediaKind
    external_id: int
    title: str = "Untitled"
    year: Optional[int] = None
    overview: str = ""
    image_url: Optional[str] = None
    rating: Optional[float] = None

    # movie only
    top_cast: List[str] = Field(default_factory=list)

    # tv only
    networks: List[str] = Field(default_factory=list)
    status: Optional[str] = None
    first_air_date: Optional[str] = None
    last_air_date: Optional[str] = None
    next_air_date: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SearchResult(CamelModel):
    external_id: int
    title: str = "Untitled"
    year: Optional[int] = None
    overview: str = ""
    image_url: Optional[str] = None


class TrendingResult(SearchResult):
    media_type: MediaKind
    popularity: Optional[float] = None
    vote_average: Optional[float] = None


class UserWatchlist(CamelModel):
    movie_ids: Set[int] = Field(default_factory=set)
    tv_show_ids: Set[int] = Field(default_factory=set)
    theme: Theme = Theme.DARK

    def ids_for(self, kind: MediaKind) -> Set[int]:
        return self.movie_ids if kind is MediaKind.MOVIE else self.tv_show_ids


class ThemeUpdate(BaseModel):
    theme: str
