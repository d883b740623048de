from fastapi import APIRouter

from .endpoints.feed import router as feed_router
from .endpoints.health import router as health_router

api_router = APIRouter()


@api_router.get("/")
async def root():
    return {"message": "Reelfeed API is running"}


api_router.include_router(feed_router)
api_router.include_router(health_router)
