"""
Rating Service - thumbs up / thumbs down votes on station songs
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from models.database import utcnow
from models.rating import Rating, RatingType
from models.schemas import RatingCountsResponse, RatingOutcome, RatingRequest, RatingResponse
from models.song import Song
from models.station import Station
from services.errors import RadioServiceError, RateLimitExceeded, StationNotFound, StorageFailure
from services.repository import RadioRepository

MESSAGES = {
    RatingOutcome.CREATED: "Rating submitted successfully",
    RatingOutcome.UPDATED: "Rating updated successfully",
    RatingOutcome.UNCHANGED: "Rating already submitted",
}


class RatingService:
    """Records votes and keeps each song's aggregate counts in step with its ratings.

    Every public call is one unit of work on ``session``: it commits on success
    and rolls back on any failure, so a song's counts and its ratings are never
    written separately.
    """

    def __init__(
        self,
        session: AsyncSession,
        max_votes: Optional[int] = None,
        window_hours: Optional[int] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session = session
        self.repository = RadioRepository(session)
        self.max_votes = max_votes if max_votes is not None else settings.rating_max_votes_per_window
        self.window_hours = window_hours if window_hours is not None else settings.rating_window_hours
        self.clock = clock
        self.logger = logging.getLogger("rating_service")

    async def submit_rating(self, request: RatingRequest, ip_address: Optional[str] = None) -> RatingResponse:
        try:
            station = await self._get_station(request.station_code)
            await self._check_rate_limit(station, ip_address)

            song = await self._get_or_create_song(station, request.artist, request.title)
            outcome = await self._apply_vote(song, request.user_id, request.rating_type, ip_address)

            await self.session.commit()
        except RadioServiceError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error(f"Failed to store rating for {request.artist} - {request.title}: {e}")
            raise StorageFailure(f"Failed to submit rating: {e}") from e

        self.logger.info(
            f"Rating {outcome.value}: {request.rating_type.value} for {song.artist} - {song.title} "
            f"on {station.code} (up={song.thumbs_up_count}, down={song.thumbs_down_count})"
        )
        return RatingResponse(
            song_id=song.id,
            artist=song.artist,
            title=song.title,
            thumbs_up_count=song.thumbs_up_count,
            thumbs_down_count=song.thumbs_down_count,
            user_rating=request.rating_type,
            message=MESSAGES[outcome],
            outcome=outcome,
        )

    async def get_rating_counts(
        self, station_code: str, artist: str, title: str, user_id: Optional[str] = None
    ) -> RatingCountsResponse:
        try:
            station = await self._get_station(station_code)
            song = await self.repository.find_song(station, artist, title)

            if song is None:
                return RatingCountsResponse(artist=artist, title=title)

            user_rating = None
            if user_id:
                rating = await self.repository.find_rating(song, user_id)
                if rating is not None:
                    user_rating = RatingType(rating.rating_type)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to read rating counts for {artist} - {title}: {e}")
            raise StorageFailure(f"Failed to read rating counts: {e}") from e

        return RatingCountsResponse(
            song_id=song.id,
            artist=song.artist,
            title=song.title,
            thumbs_up_count=song.thumbs_up_count,
            thumbs_down_count=song.thumbs_down_count,
            user_rating=user_rating,
        )

    async def _get_station(self, station_code: str) -> Station:
        station = await self.repository.resolve_station(station_code)
        if station is None:
            raise StationNotFound(station_code)
        return station

    async def _check_rate_limit(self, station: Station, ip_address: Optional[str]) -> None:
        if not ip_address:
            return

        since = self.clock() - timedelta(hours=self.window_hours)
        recent_votes = await self.repository.count_ratings_by_origin_since(station, ip_address, since)

        if recent_votes >= self.max_votes:
            self.logger.warning(
                f"Rate limit hit for {ip_address} on {station.code}: {recent_votes} votes in {self.window_hours}h"
            )
            raise RateLimitExceeded(self.max_votes, self.window_hours)

    async def _get_or_create_song(self, station: Station, artist: str, title: str) -> Song:
        song = await self.repository.find_song(station, artist, title, for_update=True)
        if song:
            return song

        # A concurrent first vote may insert the same song, the loser reads the winner's row
        created = await self.repository.insert_song_if_absent(station, artist, title)
        song = await self.repository.find_song(station, artist, title, for_update=True)
        if created:
            self.logger.debug(f"Created song {song.id}: {artist} - {title} on {station.code}")
        return song

    async def _apply_vote(
        self, song: Song, user_id: str, rating_type: RatingType, ip_address: Optional[str]
    ) -> RatingOutcome:
        rating = await self.repository.find_rating(song, user_id, for_update=True)

        if rating is not None:
            if rating.rating_type == rating_type.value:
                return RatingOutcome.UNCHANGED

            # Vote changed: move one unit from the old polarity to the new one
            self._adjust_count(song, rating_type.opposite, -1)
            self._adjust_count(song, rating_type, +1)
            rating.rating_type = rating_type.value
            rating.ip_address = ip_address
            await self.repository.save_rating(rating)
            await self.repository.save_song(song)
            return RatingOutcome.UPDATED

        rating = Rating(
            song_id=song.id,
            user_id=user_id,
            ip_address=ip_address,
            rating_type=rating_type.value,
        )
        await self.repository.save_rating(rating)
        self._adjust_count(song, rating_type, +1)
        await self.repository.save_song(song)
        return RatingOutcome.CREATED

    @staticmethod
    def _adjust_count(song: Song, rating_type: RatingType, delta: int) -> None:
        if rating_type is RatingType.THUMBS_UP:
            song.thumbs_up_count = max(0, song.thumbs_up_count + delta)
        else:
            song.thumbs_down_count = max(0, song.thumbs_down_count + delta)
