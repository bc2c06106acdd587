# models/rating.py
import enum

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from models.database import Base, utcnow

class RatingType(str, enum.Enum):
    THUMBS_UP = "THUMBS_UP"
    THUMBS_DOWN = "THUMBS_DOWN"

    @property
    def opposite(self) -> "RatingType":
        return RatingType.THUMBS_DOWN if self is RatingType.THUMBS_UP else RatingType.THUMBS_UP

class Rating(Base):
    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    song_id = Column(Integer, ForeignKey("songs.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), nullable=False)
    ip_address = Column(String(45))
    rating_type = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    song = relationship("Song", back_populates="ratings")

    __table_args__ = (
        UniqueConstraint("song_id", "user_id", name="unique_song_user"),
        CheckConstraint(
            "rating_type IN ('THUMBS_UP', 'THUMBS_DOWN')",
            name="valid_rating_type"
        ),
        Index("idx_ratings_ip_created", "ip_address", "created_at"),
    )
