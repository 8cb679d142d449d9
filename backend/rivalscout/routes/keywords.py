"""
Keyword Suggest Endpoint
POST /api/keywords/suggest: up to eight diverse keywords for a domain.
"""

import logging

from fastapi import APIRouter, HTTPException

from rivalscout.core.cache_manager import get_cache
from rivalscout.core.provider_factory import get_keyword_finder
from rivalscout.modules.keywords.keyword_finder import empty_result
from rivalscout.routes.competitors import SuggestRequest
from rivalscout.utils.validators import validate_domain

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/keywords/suggest")
async def suggest_keywords(req: SuggestRequest):
    try:
        root = validate_domain(req.domain)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    finder = get_keyword_finder()
    try:
        return await get_cache("keywords").resolve(root, lambda: finder.suggest(root))
    except Exception as e:
        logger.error("Keyword suggest failed for %s: %s", root, e, exc_info=True)
        return empty_result()
