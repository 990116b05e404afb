from fastapi import APIRouter

from app.api.distance import router as distance_router
from app.api.public.health import router as health_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(distance_router)
