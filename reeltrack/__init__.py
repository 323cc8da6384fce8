"""Personal movie and TV watchlist backend on top of TMDB."""

__version__ = "0.1.0"
