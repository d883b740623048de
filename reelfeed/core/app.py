from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from reelfeed.api.main import api_router
from reelfeed.services.catalog.service import get_catalog_service

from .config import settings
from .version import __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events (startup/shutdown).
    """
    logger.info(f"Reelfeed {__version__} starting (catalog={settings.CATALOG_API_URL})")
    yield
    try:
        await get_catalog_service().close()
        logger.info("Catalog HTTP client closed")
    except Exception as exc:
        logger.warning(f"Failed to close catalog HTTP client: {exc}")


app = FastAPI(
    title="Reelfeed",
    description="Personalized video feed: discovery/comfort sourcing, ranking and mixing",
    version=__version__,
    lifespan=lifespan,
    docs_url=None if settings.APP_ENV == "production" else "/docs",
    redoc_url=None if settings.APP_ENV == "production" else "/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(api_router)
