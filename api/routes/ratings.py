# api/routes/ratings.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_client_ip, get_rating_service
from models.schemas import RatingCountsResponse, RatingRequest, RatingResponse
from services.errors import RateLimitExceeded, StationNotFound, StorageFailure
from services.rating_service import RatingService

router = APIRouter(prefix="/ratings")

@router.post("", response_model=RatingResponse)
async def submit_rating(
    payload: RatingRequest,
    ip_address: Optional[str] = Depends(get_client_ip),
    service: RatingService = Depends(get_rating_service),
):
    try:
        return await service.submit_rating(payload, ip_address)
    except RateLimitExceeded as e:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(e))
    except StationNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageFailure as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

@router.get("/counts", response_model=RatingCountsResponse)
async def get_rating_counts(
    station_code: str = Query(..., alias="stationCode"),
    artist: str = Query(...),
    title: str = Query(...),
    user_id: Optional[str] = Query(None, alias="userId"),
    service: RatingService = Depends(get_rating_service),
):
    try:
        return await service.get_rating_counts(station_code, artist, title, user_id)
    except StationNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageFailure as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
