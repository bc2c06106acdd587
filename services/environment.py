# services/environment.py
import platform
import time
from pathlib import Path

from config.settings import settings
from models.schemas import EnvironmentInfoResponse

_STARTED_AT = time.monotonic()


def detect_deployment_mode() -> str:
    """docker or local, unless DEPLOYMENT_MODE says otherwise"""
    if settings.deployment_mode:
        return settings.deployment_mode.lower()

    if Path("/.dockerenv").exists():
        return "docker"

    cgroup = Path("/proc/1/cgroup")
    try:
        if cgroup.exists() and "docker" in cgroup.read_text():
            return "docker"
    except OSError:
        pass

    return "local"


def get_environment_info() -> EnvironmentInfoResponse:
    return EnvironmentInfoResponse(
        deployment_mode=detect_deployment_mode(),
        environment=settings.environment,
        app_version=settings.app_version,
        python_version=platform.python_version(),
        uptime_seconds=int(time.monotonic() - _STARTED_AT),
    )
