from fastapi import APIRouter

from app.core.config import settings


router = APIRouter(prefix="/healthz", tags=["health"])


@router.get("")
def healthz() -> dict[str, str]:
    # Liveness only; the airport directory is not probed
    return {"status": "ok", "service": settings.app_name, "env": settings.app_env}
