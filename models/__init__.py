# models/__init__.py
from models.station import Station
from models.song import Song
from models.rating import Rating, RatingType
from models.database import Base, engine, AsyncSessionLocal, get_session

__all__ = [
    "Station",
    "Song",
    "Rating",
    "RatingType",
    "Base",
    "engine",
    "AsyncSessionLocal",
    "get_session",
]
