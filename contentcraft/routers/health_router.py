"""Health check endpoint."""
from fastapi import APIRouter

from contentcraft.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    """Liveness probe; reports which store backend is configured."""
    return {"status": "ok", "store_backend": get_settings().store_backend}
