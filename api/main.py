# api/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import artwork, health, metadata, ratings, stations
from config.settings import settings
from services.artwork import ArtworkResolver
from services.now_playing import MetadataProxy, PlaylistRotation

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    resolver = ArtworkResolver()
    app.state.artwork_resolver = resolver
    app.state.metadata_proxy = MetadataProxy(resolver)
    app.state.playlist = PlaylistRotation(resolver)
    logger.info(f"Radio Pulse API starting ({settings.environment})")
    try:
        yield
    finally:
        await app.state.metadata_proxy.close()
        await resolver.close()

app = FastAPI(title="Radio Pulse API", version=settings.app_version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_allowed_origins.split(",") if origin.strip()],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(stations.router, prefix="/api", tags=["stations"])
app.include_router(ratings.router, prefix="/api", tags=["ratings"])
app.include_router(metadata.router, prefix="/api", tags=["metadata"])
app.include_router(artwork.router, prefix="/api", tags=["artwork"])

@app.get("/")
async def root():
    return {"message": "Radio Pulse API"}
