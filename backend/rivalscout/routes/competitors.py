"""
Competitor Suggest Endpoint
POST /api/competitors/suggest: four business and four search competitors for a domain.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from rivalscout.core.cache_manager import get_cache
from rivalscout.core.provider_factory import get_competitor_finder
from rivalscout.modules.competitor.competitor_finder import empty_result
from rivalscout.utils.validators import validate_domain

logger = logging.getLogger(__name__)

router = APIRouter()


class SuggestRequest(BaseModel):
    domain: Optional[str] = None


@router.post("/competitors/suggest")
async def suggest_competitors(req: SuggestRequest):
    """
    Returns ``{businessCompetitors, searchCompetitors, debug}``.

    Results are cached per root domain; concurrent requests for the same
    domain share one computation.
    """
    try:
        root = validate_domain(req.domain)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    finder = get_competitor_finder()
    try:
        return await get_cache("competitors").resolve(root, lambda: finder.suggest(root))
    except Exception as e:
        logger.error("Competitor suggest failed for %s: %s", root, e, exc_info=True)
        return empty_result()
