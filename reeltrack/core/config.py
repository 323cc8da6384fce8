import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be an integer, got {raw!r}") from exc


class Settings:
    """Runtime configuration read from the environment (and .env).

    Keyword arguments override the environment, which is how tests build
    isolated settings.
    """

    def __init__(self, **overrides):
        self.TMDB_API_KEY: Optional[str] = os.getenv("TMDB_API_KEY") or None
        self.TMDB_BASE_URL: str = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3")
        self.TMDB_IMAGE_BASE: str = os.getenv("TMDB_IMAGE_BASE", "https://image.tmdb.org/t/p")
        self.TMDB_LANGUAGE: str = os.getenv("TMDB_LANGUAGE", "en-US")
        self.TMDB_TIMEOUT: float = float(os.getenv("TMDB_TIMEOUT", "10.0"))
        # seconds
        self.TMDB_DETAIL_TTL: int = _env_int("TMDB_DETAIL_TTL", 60 * 60)
        self.TMDB_LIST_TTL: int = _env_int("TMDB_LIST_TTL", 60 * 10)

        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./reeltrack.db")
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-change-me")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise TypeError(f"Unknown setting: {key}")
            setattr(self, key, value)


settings = Settings()
