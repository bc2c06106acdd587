# models/station.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime
from sqlalchemy.orm import relationship

from models.database import Base, utcnow

class Station(Base):
    __tablename__ = "stations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(50), unique=True, nullable=False)
    name = Column(String(200), nullable=False)
    stream_url = Column(String(500), nullable=False)
    metadata_url = Column(String(500), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, default=0)
    stream_format = Column(String(100))
    stream_quality = Column(String(100))
    stream_codec = Column(String(50))
    stream_bitrate = Column(String(50))
    genre = Column(String(100))
    tagline = Column(String(200))
    logo_url = Column(String(500))
    description = Column(String(1000))
    source_info = Column(String(500))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    songs = relationship("Song", back_populates="station", cascade="all, delete-orphan")
