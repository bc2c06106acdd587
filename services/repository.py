"""
Persistence access for stations, songs and ratings.

Writes are flushed, never committed: the caller owns the transaction.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from models.database import utcnow
from models.rating import Rating
from models.song import Song
from models.station import Station


class RadioRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    # -------------------------------------------------------------------------
    # Stations
    # -------------------------------------------------------------------------

    async def resolve_station(self, code: str) -> Optional[Station]:
        stmt = select(Station).where(Station.code == code)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_stations(self, active_only: bool = True) -> List[Station]:
        stmt = select(Station).order_by(Station.display_order, Station.id)
        if active_only:
            stmt = stmt.where(Station.is_active.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # -------------------------------------------------------------------------
    # Songs
    # -------------------------------------------------------------------------

    async def find_song(
        self, station: Station, artist: str, title: str, for_update: bool = False
    ) -> Optional[Song]:
        stmt = select(Song).where(
            Song.station_id == station.id,
            Song.artist == artist,
            Song.title == title,
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save_song(self, song: Song) -> Song:
        self.session.add(song)
        await self.session.flush()
        return song

    async def insert_song_if_absent(self, station: Station, artist: str, title: str) -> bool:
        """Insert a zero-count song unless another transaction already has.

        Returns True when this call created the row.
        """
        dialect = self.session.get_bind().dialect.name
        insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
        now = utcnow()
        stmt = (
            insert(Song)
            .values(
                station_id=station.id,
                artist=artist,
                title=title,
                thumbs_up_count=0,
                thumbs_down_count=0,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["station_id", "artist", "title"])
        )
        conn = await self.session.connection()
        result = await conn.execute(stmt)
        return result.rowcount == 1

    # -------------------------------------------------------------------------
    # Ratings
    # -------------------------------------------------------------------------

    async def find_rating(
        self, song: Song, user_id: str, for_update: bool = False
    ) -> Optional[Rating]:
        stmt = select(Rating).where(Rating.song_id == song.id, Rating.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save_rating(self, rating: Rating) -> Rating:
        self.session.add(rating)
        await self.session.flush()
        return rating

    async def count_ratings_by_origin_since(
        self, station: Station, ip_address: str, since: datetime
    ) -> int:
        """Ratings cast from ``ip_address`` on this station's songs after ``since``"""
        stmt = (
            select(func.count(Rating.id))
            .join(Song, Rating.song_id == Song.id)
            .where(
                Song.station_id == station.id,
                Rating.ip_address == ip_address,
                Rating.created_at > since,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
