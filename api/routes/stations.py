# api/routes/stations.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from models.database import get_session
from models.schemas import StationResponse
from services.repository import RadioRepository

router = APIRouter(prefix="/stations")

@router.get("", response_model=List[StationResponse])
async def list_active_stations(session: AsyncSession = Depends(get_session)):
    return await RadioRepository(session).list_stations(active_only=True)

@router.get("/all", response_model=List[StationResponse])
async def list_all_stations(session: AsyncSession = Depends(get_session)):
    return await RadioRepository(session).list_stations(active_only=False)

@router.get("/{code}", response_model=StationResponse)
async def get_station(code: str, session: AsyncSession = Depends(get_session)):
    station = await RadioRepository(session).resolve_station(code)
    if station is None:
        raise HTTPException(status_code=404, detail=f"Station not found: {code}")
    return station
