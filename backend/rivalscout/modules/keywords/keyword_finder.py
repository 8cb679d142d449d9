# rivalscout/modules/keywords/keyword_finder.py
"""
Keyword discovery pipeline.

Phrases are mined from the site's own content, enriched with search metrics,
expanded through keyword ideas and the phrases the site already ranks for,
then scored and narrowed to a short, diverse list.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from rivalscout.core.async_helpers import gather_settled, run_in_thread
from rivalscout.core.errors import ProviderError
from rivalscout.modules.keywords.keyword_ranking import (
    DEFAULT_MAX_KEYWORDS,
    one_word_fallback,
    pick_final_keywords,
    rank_keywords,
    seed_vocabulary,
)
from rivalscout.modules.keywords.text_miner import (
    is_bad_keyword,
    is_only_generic,
    mine_candidates,
    select_idea_seeds,
    to_rich_keyword,
)
from rivalscout.modules.models import KeywordRow, SiteProfile
from rivalscout.modules.providers.dataforseo import DataForSEOClient
from rivalscout.modules.providers.site_profile import SiteProfileSource
from rivalscout.modules.text_similarity import clean_text, uniq
from rivalscout.utils.domains import Locale, brand_token, infer_locale

logger = logging.getLogger(__name__)

MAX_SEED_PHRASES = 70
MAX_IDEA_SEEDS = 6
IDEAS_PER_SEED = 120
SITE_KEYWORDS_LIMIT = 400


def empty_result() -> Dict[str, Any]:
    return {"keywords": []}


def provider_rows(items: List[dict], source: str, brand: str) -> List[KeywordRow]:
    """Normalize provider phrases to 2-4 word keywords, dropping junk."""
    rows = []
    for it in items:
        raw = clean_text(it.get("phrase"))
        if not raw:
            continue
        kw = clean_text(to_rich_keyword(raw))
        if not kw or is_bad_keyword(kw, brand) or is_only_generic(kw):
            continue
        rows.append(KeywordRow(
            phrase=kw,
            volume=it.get("volume", 0.0),
            cpc=it.get("cpc", 0.0),
            source=source,
        ))
    return rows


class KeywordFinder:
    """Suggests up to eight keywords for a root domain."""

    def __init__(
        self,
        profiles: SiteProfileSource,
        metrics: DataForSEOClient,
        max_keywords: int = DEFAULT_MAX_KEYWORDS,
    ):
        self.profiles = profiles
        self.metrics = metrics
        self.max_keywords = max_keywords

    async def _load_profile(self, root: str) -> Optional[SiteProfile]:
        try:
            return await self.profiles.profile(root)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Site profile failed for %s: %s", root, e)
            return None

    async def _idea_rows(self, seeds: List[str], locale: Locale, brand: str) -> List[KeywordRow]:
        if not self.metrics.configured or not seeds:
            return []
        results = await gather_settled(
            (self.metrics.keyword_ideas(s, locale, limit=IDEAS_PER_SEED) for s in seeds),
            default=list,
            label="Keyword ideas",
        )
        rows = []
        for items in results:
            rows.extend(provider_rows(items, "idea", brand))
        return rows

    async def _rank_rows(self, root: str, locale: Locale, brand: str) -> List[KeywordRow]:
        if not self.metrics.configured:
            return []
        try:
            items = await self.metrics.keywords_for_site(root, locale, limit=SITE_KEYWORDS_LIMIT)
        except (ProviderError, httpx.HTTPError) as e:
            logger.warning("Keywords for site failed for %s: %s", root, e)
            return []
        return provider_rows(items, "rank", brand)

    async def suggest(self, root: str) -> Dict[str, Any]:
        locale = infer_locale(root)
        brand = brand_token(root)

        profile = await self._load_profile(root) or SiteProfile()

        seeds = uniq(clean_text(s) for s in profile.seeds)[:MAX_SEED_PHRASES]
        seed_all, seed_specific = seed_vocabulary(seeds)

        # 1) Mine phrases from the site's own content
        mined = await run_in_thread(mine_candidates, profile, brand)

        # 2) Metrics for mined phrases (empty mapping when unavailable)
        metrics: Dict[str, dict] = {}
        if self.metrics.configured and mined:
            metrics = await self.metrics.keyword_metrics(mined, locale)

        # 3) Ideas from the strongest mined phrases, and 4) what the site ranks for
        idea_seeds = select_idea_seeds(mined, MAX_IDEA_SEEDS)
        idea_rows, rank_rows = await asyncio.gather(
            self._idea_rows(idea_seeds, locale, brand),
            self._rank_rows(root, locale, brand),
        )

        mined_rows = []
        for kw in mined:
            m = metrics.get(kw.lower())
            mined_rows.append(KeywordRow(
                phrase=kw,
                volume=m["volume"] if m else 0.0,
                cpc=m["cpc"] if m else 0.0,
                competition=m["competition"] if m else 0.0,
                source="mined+metrics" if m else "mined",
            ))

        combined = [*mined_rows, *idea_rows, *rank_rows]

        # 5) Score, select, and top up with single words if still short
        ranked = rank_keywords(combined, seed_all, seed_specific, profile.site_type)
        keywords = pick_final_keywords(
            [c.name for c in ranked], seed_all, seed_specific, self.max_keywords
        )
        if len(keywords) < self.max_keywords:
            singles_from = [*(r.phrase for r in combined), *(s for s in seeds if not is_bad_keyword(s, brand))]
            keywords = one_word_fallback(singles_from, keywords, self.max_keywords)

        logger.info("Keywords for %s: %d picked from %d candidates", root, len(keywords), len(ranked))

        return {
            "keywords": keywords,
            "debug": {
                "siteType": profile.site_type,
                "location_name": locale.location_name,
                "language_code": locale.language_code,
                "minedCount": len(mined),
                "metricsReturnedCount": len(metrics),
                "ideaSeeds": idea_seeds,
                "ideaCount": len(idea_rows),
                "rankCount": len(rank_rows),
                "seedTokensAllSize": len(seed_all),
                "seedTokensSpecificSize": len(seed_specific),
            },
        }
