"""
Now Playing - station metadata enriched with album art
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from config.settings import settings
from models.database import utcnow
from services.artwork import ArtworkResolver

logger = logging.getLogger(__name__)


# =============================================================================
# UPSTREAM METADATA PROXY
# =============================================================================

class MetadataProxy:
    """Proxies a station's own metadata document and adds ``album_art``"""

    FALLBACK_ART = "https://dummyimage.com/300x300/FF6B35/ffffff.png?text=RadioAwa"

    def __init__(
        self,
        resolver: ArtworkResolver,
        metadata_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.resolver = resolver
        self.metadata_url = metadata_url or settings.english_metadata_url
        self.client = client or httpx.AsyncClient(timeout=settings.metadata_timeout_seconds)
        self.logger = logging.getLogger("metadata_proxy")

    async def fetch(self) -> Dict[str, Any]:
        try:
            self.logger.info(f"Fetching station metadata from {self.metadata_url}")
            response = await self.client.get(self.metadata_url)
            response.raise_for_status()
            metadata = response.json()
            if not isinstance(metadata, dict):
                raise ValueError(f"unexpected metadata payload: {type(metadata).__name__}")

            artist = str(metadata.get("artist") or "Unknown Artist")
            title = str(metadata.get("title") or "Unknown Track")
            metadata["album_art"] = await self.resolver.resolve_artwork(artist, title)

            self.logger.info(f"Metadata enriched with album art for: {artist} - {title}")
            return metadata

        except Exception as e:
            self.logger.error(f"Error fetching station metadata: {e}")
            return {
                "artist": "RadioAwa",
                "title": "English Station",
                "album": "Live Stream",
                "album_art": self.FALLBACK_ART,
            }

    async def close(self):
        await self.client.aclose()


# =============================================================================
# SIMULATED PLAYLIST
# =============================================================================

def _song(artist: str, title: str, album: str) -> Dict[str, str]:
    return {"artist": artist, "title": title, "album": album}


HINDI_SONGS: List[Dict[str, str]] = [
    _song("Arijit Singh", "Tum Hi Ho", "Aashiqui 2"),
    _song("Shreya Ghoshal", "Sunn Raha Hai", "Aashiqui 2"),
    _song("Atif Aslam", "Jeene Laga Hoon", "Ramaiya Vastavaiya"),
    _song("Arijit Singh", "Chahun Main Ya Naa", "Aashiqui 2"),
    _song("Mohit Chauhan", "Tum Se Hi", "Jab We Met"),
    _song("Shreya Ghoshal", "Teri Meri", "Bodyguard"),
    _song("Arijit Singh", "Channa Mereya", "Ae Dil Hai Mushkil"),
    _song("Neha Kakkar", "Aankh Marey", "Simmba"),
    _song("Armaan Malik", "Bol Do Na Zara", "Azhar"),
    _song("Atif Aslam", "Pehli Nazar Mein", "Race"),
    _song("Arijit Singh", "Ae Dil Hai Mushkil", "Ae Dil Hai Mushkil"),
    _song("Shreya Ghoshal", "Deewani Mastani", "Bajirao Mastani"),
    _song("Arijit Singh", "Raabta", "Agent Vinod"),
    _song("Neha Kakkar", "Dilbar", "Satyameva Jayate"),
    _song("Sonu Nigam", "Abhi Mujh Mein Kahin", "Agneepath"),
]

DEMO_NOTICE = (
    "METADATA MISMATCH: this station is a LIVE radio stream - the songs actually playing "
    "differ from what is displayed here. The simulated metadata shows popular Hindi "
    "classics for demonstration purposes only."
)


class PlaylistRotation:
    """Simulated now-playing for stations that publish no metadata of their own.

    Advances one song every ``song_duration`` and wraps around the catalogue.
    """

    HISTORY_SIZE = 5

    def __init__(
        self,
        resolver: ArtworkResolver,
        songs: Optional[List[Dict[str, str]]] = None,
        song_duration: timedelta = timedelta(minutes=4),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.resolver = resolver
        self.songs = songs or HINDI_SONGS
        self.song_duration = song_duration
        self.clock = clock
        self.current_index = 0
        self.last_change = clock()
        self._lock = threading.Lock()

    def _rotate(self) -> None:
        now = self.clock()
        if now - self.last_change >= self.song_duration:
            self.current_index = (self.current_index + 1) % len(self.songs)
            self.last_change = now

    def _snapshot(self) -> Tuple[Dict[str, str], List[Dict[str, str]]]:
        """Current song and the songs before it, read under one lock"""
        with self._lock:
            self._rotate()
            size = len(self.songs)
            history = [
                self.songs[(self.current_index - i) % size]
                for i in range(1, self.HISTORY_SIZE + 1)
            ]
            return self.songs[self.current_index], history

    async def current(self) -> Dict[str, Any]:
        song, history = self._snapshot()
        metadata: Dict[str, Any] = {
            **song,
            "album_art": await self.resolver.resolve_artwork(song["artist"], song["title"]),
            "timestamp": self.clock().isoformat(),
            "is_demo": True,
            "demo_notice": DEMO_NOTICE,
        }

        for position, previous in enumerate(history, start=1):
            metadata[f"prev_artist_{position}"] = previous["artist"]
            metadata[f"prev_title_{position}"] = previous["title"]

        return metadata

    async def artwork(self) -> Dict[str, str]:
        song, _ = self._snapshot()
        url = await self.resolver.resolve_artwork(song["artist"], song["title"])
        return {"url": url, "artist": song["artist"], "title": song["title"]}

    async def advance(self) -> Dict[str, Any]:
        with self._lock:
            self.current_index = (self.current_index + 1) % len(self.songs)
            self.last_change = self.clock()
        logger.info(f"Playlist advanced to index {self.current_index}")
        return await self.current()

    def playlist(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "totalSongs": len(self.songs),
                "currentIndex": self.current_index,
                "currentSong": self.songs[self.current_index],
                "playlist": list(self.songs),
            }
