# api/routes/metadata.py
from fastapi import APIRouter, Depends

from api.dependencies import get_metadata_proxy, get_playlist
from services.now_playing import MetadataProxy, PlaylistRotation

router = APIRouter(prefix="/metadata")

@router.get("/english")
async def english_metadata(proxy: MetadataProxy = Depends(get_metadata_proxy)):
    return await proxy.fetch()

@router.get("/hindi")
async def hindi_metadata(playlist: PlaylistRotation = Depends(get_playlist)):
    return await playlist.current()

@router.get("/hindi/artwork")
async def hindi_artwork(playlist: PlaylistRotation = Depends(get_playlist)):
    return await playlist.artwork()

@router.post("/hindi/next")
async def hindi_next(playlist: PlaylistRotation = Depends(get_playlist)):
    return await playlist.advance()

@router.get("/hindi/playlist")
async def hindi_playlist(playlist: PlaylistRotation = Depends(get_playlist)):
    return playlist.playlist()
