import functools

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from reelfeed.models.feed import FeedRequest, FeedResponse
from reelfeed.models.video import CandidateVideo
from reelfeed.services.catalog.service import get_catalog_service
from reelfeed.services.recommendation.engine import RecommendationEngine

router = APIRouter(prefix="/feed", tags=["feed"])


@functools.lru_cache(maxsize=1)
def get_recommendation_engine() -> RecommendationEngine:
    return RecommendationEngine(get_catalog_service())


def _response(videos: list[CandidateVideo]) -> FeedResponse:
    return FeedResponse(videos=videos, count=len(videos))


@router.post("", response_model=FeedResponse, response_model_by_alias=True)
async def get_feed(request: FeedRequest, engine: RecommendationEngine = Depends(get_recommendation_engine)):
    """
    Personalized feed page.

    An empty list is a valid answer (nothing to recommend right now), not an error.
    """
    try:
        return _response(await engine.get_feed(request))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error building feed page {request.page}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/shorts", response_model=FeedResponse, response_model_by_alias=True)
async def get_shorts_feed(request: FeedRequest, engine: RecommendationEngine = Depends(get_recommendation_engine)):
    try:
        return _response(await engine.get_shorts_feed(request))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error building shorts feed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/legacy", response_model=FeedResponse, response_model_by_alias=True)
async def get_legacy_feed(engine: RecommendationEngine = Depends(get_recommendation_engine)):
    """Unpersonalized shuffled listing."""
    return _response(await engine.get_legacy_feed())
