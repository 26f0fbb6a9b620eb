"""Poster lookup against TMDb for movie recommendations."""

from typing import Optional

import requests

from rasika.config.settings import settings
from rasika.utils.logger import get_logger

logger = get_logger(__name__)

REQUEST_TIMEOUT = 10


def search_movies(title: str) -> list:
    """Return the first page of TMDb movie search results for a title ([] on any failure)."""
    params = {
        "api_key": settings.TMDB_API_KEY,
        "query": title,
        "include_adult": "false",
        "language": "en-US",
        "page": "1",
    }
    try:
        resp = requests.get(f"{settings.TMDB_API_URL}/search/movie", params=params, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        logger.warning("TMDb search failed for '%s': %s", title, repr(e))
        return []
    if resp.status_code != 200:
        logger.warning("TMDb search for '%s' returned %s", title, resp.status_code)
        return []
    try:
        payload = resp.json()
    except ValueError as e:
        logger.warning("TMDb search for '%s' returned a non-JSON body: %s", title, repr(e))
        return []
    return payload.get("results") or []


def get_movie_poster_url(title: str) -> Optional[str]:
    """Return a poster URL for the best matching movie, preferring results that have one."""
    if not title or not title.strip():
        logger.warning("get_movie_poster_url called with an empty title")
        return None
    if not settings.tmdb_enabled:
        logger.warning("TMDB_API_KEY is not set; poster lookup disabled")
        return None

    results = search_movies(title.strip())
    if not results:
        return None
    movie = next((r for r in results if r.get("poster_path")), results[0])
    poster_path = movie.get("poster_path")
    if not poster_path:
        return None
    return f"{settings.TMDB_IMAGE_BASE_URL}{poster_path}"
