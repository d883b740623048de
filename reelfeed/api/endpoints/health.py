from fastapi import APIRouter

from reelfeed.core.version import __version__

router = APIRouter(tags=["health"])


@router.get("/health", summary="Simple readiness probe")
async def health_check() -> dict[str, str]:
    return {"status": "ok", "version": __version__}
