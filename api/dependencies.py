# api/dependencies.py
import ipaddress
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from models.database import get_session
from services.artwork import ArtworkResolver
from services.now_playing import MetadataProxy, PlaylistRotation
from services.rating_service import RatingService

# Proxy headers checked in order before falling back to the socket peer
CLIENT_IP_HEADERS = (
    "X-Forwarded-For",
    "Proxy-Client-IP",
    "WL-Proxy-Client-IP",
    "HTTP_X_FORWARDED_FOR",
    "HTTP_X_FORWARDED",
    "HTTP_X_CLUSTER_CLIENT_IP",
    "HTTP_CLIENT_IP",
    "HTTP_FORWARDED_FOR",
    "HTTP_FORWARDED",
    "HTTP_VIA",
    "REMOTE_ADDR",
)


def _parse_ip(value: str) -> Optional[str]:
    try:
        return str(ipaddress.ip_address(value))
    except ValueError:
        return None


def get_client_ip(request: Request) -> Optional[str]:
    for header in CLIENT_IP_HEADERS:
        value = request.headers.get(header)
        if not value or value.lower() == "unknown":
            continue
        # X-Forwarded-For may carry a chain, the first entry is the client
        ip = _parse_ip(value.split(",")[0].strip())
        if ip:
            return ip
    return request.client.host if request.client else None


def get_rating_service(session: AsyncSession = Depends(get_session)) -> RatingService:
    return RatingService(session)


def get_artwork_resolver(request: Request) -> ArtworkResolver:
    return request.app.state.artwork_resolver


def get_metadata_proxy(request: Request) -> MetadataProxy:
    return request.app.state.metadata_proxy


def get_playlist(request: Request) -> PlaylistRotation:
    return request.app.state.playlist
