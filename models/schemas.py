# models/schemas.py
import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.rating import RatingType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RatingOutcome(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class RatingRequest(CamelModel):
    station_code: str = Field(min_length=1, max_length=50)
    artist: str = Field(min_length=1, max_length=500)
    title: str = Field(min_length=1, max_length=500)
    user_id: str = Field(min_length=1, max_length=36)
    rating_type: RatingType


class RatingCountsResponse(CamelModel):
    song_id: Optional[int] = None
    artist: str
    title: str
    thumbs_up_count: int = 0
    thumbs_down_count: int = 0
    user_rating: Optional[RatingType] = None


class RatingResponse(RatingCountsResponse):
    message: str
    outcome: RatingOutcome


class StationResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    code: str
    name: str
    stream_url: str
    metadata_url: str
    is_active: bool
    display_order: Optional[int] = None
    genre: Optional[str] = None
    tagline: Optional[str] = None
    logo_url: Optional[str] = None
    description: Optional[str] = None


class ArtworkResponse(BaseModel):
    url: str
    artist: str
    title: str


class EnvironmentInfoResponse(CamelModel):
    deployment_mode: str
    environment: str
    app_version: str
    python_version: str
    uptime_seconds: int
