# api/routes/artwork.py
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_artwork_resolver
from models.schemas import ArtworkResponse
from services.artwork import ArtworkResolver

router = APIRouter(prefix="/artwork")

@router.get("", response_model=ArtworkResponse)
async def resolve_artwork(
    artist: str = Query(..., min_length=1),
    title: str = Query(..., min_length=1),
    resolver: ArtworkResolver = Depends(get_artwork_resolver),
):
    url = await resolver.resolve_artwork(artist, title)
    return ArtworkResponse(url=url, artist=artist, title=title)

@router.get("/cache")
async def cache_stats(resolver: ArtworkResolver = Depends(get_artwork_resolver)):
    return {"size": resolver.cache_size()}

@router.delete("/cache")
async def clear_cache(resolver: ArtworkResolver = Depends(get_artwork_resolver)):
    resolver.clear_cache()
    return {"size": resolver.cache_size()}
