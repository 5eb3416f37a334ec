from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse, PlainTextResponse

from ....core.config import Settings
from ...deps import get_app_settings

router = APIRouter(tags=["ops"])

ENDPOINTS = (
    ("POST", "/webhook", "GitHub webhook endpoint"),
    ("GET", "/health", "Health check"),
    ("GET", "/metrics", "Prometheus metrics"),
)


@router.get("/health")
def health(settings: Settings = Depends(get_app_settings)) -> JSONResponse:
    # Liveness only: storage is optional, so the database is not consulted
    return JSONResponse({"status": "healthy", "service": settings.service_name})


@router.get("/", response_class=PlainTextResponse)
def root(settings: Settings = Depends(get_app_settings)) -> str:
    lines = [settings.app_name, "Endpoints:"]
    lines += [f"- {method} {path} - {purpose}" for method, path, purpose in ENDPOINTS]
    return "\n".join(lines) + "\n"
