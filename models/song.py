# models/song.py
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from models.database import Base, utcnow

class Song(Base):
    __tablename__ = "songs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    station_id = Column(Integer, ForeignKey("stations.id"), nullable=False)
    artist = Column(String(500), nullable=False)
    title = Column(String(500), nullable=False)
    thumbs_up_count = Column(Integer, nullable=False, default=0)
    thumbs_down_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relacionamentos
    station = relationship("Station", back_populates="songs")
    ratings = relationship("Rating", back_populates="song", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("station_id", "artist", "title", name="unique_station_song"),
        CheckConstraint("thumbs_up_count >= 0", name="non_negative_thumbs_up"),
        CheckConstraint("thumbs_down_count >= 0", name="non_negative_thumbs_down"),
    )
