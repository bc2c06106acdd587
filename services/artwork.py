"""
Album Art Resolver - artwork lookups against the iTunes Search API
"""

import logging
import threading
from typing import Dict, Optional
from urllib.parse import quote_plus

import httpx

from config.settings import settings

LOW_RES_TOKEN = "100x100"
HIGH_RES_TOKEN = "600x600"


class ArtworkCache:
    """Process-lifetime artist/title -> artwork URL mapping.

    Unbounded; entries only leave through ``clear()``.
    """

    def __init__(self):
        self._entries: Dict[str, str] = {}
        self._lock = threading.Lock()

    @staticmethod
    def key(artist: str, title: str) -> str:
        return f"{artist}|{title}"

    def get(self, artist: str, title: str) -> Optional[str]:
        with self._lock:
            return self._entries.get(self.key(artist, title))

    def put(self, artist: str, title: str, url: str) -> None:
        with self._lock:
            self._entries[self.key(artist, title)] = url

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class ArtworkResolver:
    """Resolves high resolution album art, falling back to a placeholder image"""

    def __init__(
        self,
        cache: Optional[ArtworkCache] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.cache = cache if cache is not None else ArtworkCache()
        self.client = client or httpx.AsyncClient(timeout=settings.artwork_timeout_seconds)
        self.search_url = settings.artwork_search_url
        self.logger = logging.getLogger("artwork_resolver")

    async def resolve_artwork(self, artist: str, title: str) -> str:
        """Return an artwork URL for the song. Never raises."""
        cached = self.cache.get(artist, title)
        if cached is not None:
            self.logger.debug(f"Cache hit for: {artist} - {title}")
            return cached

        try:
            self.logger.info(f"Fetching album art from iTunes API: {artist} - {title}")
            response = await self.client.get(
                self.search_url,
                params={"term": f"{artist} {title}", "entity": "song", "limit": "1"},
            )
            response.raise_for_status()
            results = response.json().get("results") or []

            if not results:
                self.logger.warning(f"No results found for: {artist} - {title}")
                return self.fallback_url(title)

            artwork_url = results[0]["artworkUrl100"]
            high_res_url = artwork_url.replace(LOW_RES_TOKEN, HIGH_RES_TOKEN)

            self.logger.info(f"Found album art: {high_res_url}")
            self.cache.put(artist, title, high_res_url)
            return high_res_url

        except Exception as e:
            self.logger.error(f"Error fetching album art for {artist} - {title}: {e}")
            return self.fallback_url(title)

    @staticmethod
    def fallback_url(title: Optional[str]) -> str:
        """Placeholder image that shows the song title"""
        return f"{settings.artwork_fallback_base_url}?text={quote_plus(title or 'Music')}"

    def clear_cache(self) -> None:
        self.cache.clear()
        self.logger.info("Album art cache cleared")

    def cache_size(self) -> int:
        return len(self.cache)

    async def close(self):
        """Cleanup resources"""
        await self.client.aclose()
