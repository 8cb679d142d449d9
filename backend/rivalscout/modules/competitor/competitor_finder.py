# rivalscout/modules/competitor/competitor_finder.py
"""
Competitor discovery pipeline.

site profile -> probes -> parallel SERP collection -> ranking -> intent filter
-> padding to a fixed bucket size. Produces two buckets: business competitors
(platform probes) and search competitors (organic-overlap probes).
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from rivalscout.modules.competitor.intent_classifier import IntentClassifier
from rivalscout.modules.competitor.padding import fill_to_n
from rivalscout.modules.competitor.probe_builder import (
    OTHER,
    SEARCH_ENGINE,
    build_platform_queries,
    build_search_probes,
    detect_primary_intent,
    to_probes,
)
from rivalscout.modules.competitor.ranking import candidate_domains, rank_competitors
from rivalscout.modules.competitor.serp_aggregator import SerpAggregator
from rivalscout.modules.models import SiteProfile
from rivalscout.modules.providers.site_profile import SiteProfileSource
from rivalscout.utils.domains import infer_locale, is_blocked_domain, is_self_domain, root_domain

logger = logging.getLogger(__name__)

BUCKET_SIZE = 4
RANK_LIMIT = 30
CLASSIFY_WINDOW = 18
MAX_PROBES_PER_BUCKET = 8
DEBUG_CANDIDATES = 12

KeywordChips = Callable[[str], Awaitable[List[str]]]


def empty_result() -> Dict[str, Any]:
    return {"businessCompetitors": [], "searchCompetitors": []}


class CompetitorFinder:
    """Finds up to four business and four search competitors for a root domain."""

    def __init__(
        self,
        profiles: SiteProfileSource,
        aggregator: SerpAggregator,
        classifier: IntentClassifier,
        keyword_chips: Optional[KeywordChips] = None,
        bucket_size: int = BUCKET_SIZE,
    ):
        self.profiles = profiles
        self.aggregator = aggregator
        self.classifier = classifier
        self.keyword_chips = keyword_chips
        self.bucket_size = bucket_size

    async def _load_profile(self, root: str) -> Optional[SiteProfile]:
        try:
            return await self.profiles.profile(root)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Site profile failed for %s: %s", root, e)
            return None

    async def _load_chips(self, root: str) -> List[str]:
        if self.keyword_chips is None:
            return []
        try:
            return list(await self.keyword_chips(root))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Keyword chips failed for %s: %s", root, e)
            return []

    async def suggest(self, root: str) -> Dict[str, Any]:
        locale = infer_locale(root)

        # 1) Site profile
        profile = await self._load_profile(root)
        primary_intent = detect_primary_intent(profile)
        profile = profile or SiteProfile()

        # 2) Keyword chips only feed search probes for non-search-engine sites
        chips = await self._load_chips(root) if primary_intent != SEARCH_ENGINE else []

        # 3) Probes
        platform_queries = build_platform_queries(profile, primary_intent, root)[:MAX_PROBES_PER_BUCKET]
        search_queries = build_search_probes(primary_intent, chips, profile.seeds, root)[:MAX_PROBES_PER_BUCKET]

        # 4) SERP collection, both buckets at once
        platform_rows, search_rows = await asyncio.gather(
            self.aggregator.collect(to_probes(platform_queries, locale), root),
            self.aggregator.collect(to_probes(search_queries, locale), root),
        )
        logger.info(
            "SERP rows for %s: platform=%d search=%d",
            root, len(platform_rows), len(search_rows),
        )

        # 5) Rank
        exclude_root = root_domain(root)
        platform_candidates = candidate_domains(
            rank_competitors(platform_rows, exclude_root=exclude_root, max_results=RANK_LIMIT)
        )
        search_candidates = candidate_domains(
            rank_competitors(search_rows, exclude_root=exclude_root, max_results=RANK_LIMIT)
        )

        # 6) Intent filter
        expected_intent = SEARCH_ENGINE if primary_intent == SEARCH_ENGINE else OTHER
        platform_filtered, search_filtered = await asyncio.gather(
            self.classifier.filter_by_intent(platform_candidates[:CLASSIFY_WINDOW], expected_intent, root),
            self.classifier.filter_by_intent(search_candidates[:CLASSIFY_WINDOW], expected_intent, root),
        )

        # 7) Pad each bucket; overlap between buckets is allowed
        def exclude(d: str) -> bool:
            return is_self_domain(d, root) or is_blocked_domain(d)

        business = fill_to_n(
            platform_filtered,
            [search_filtered, platform_candidates, search_candidates],
            self.bucket_size,
            exclude=exclude,
        )
        search = fill_to_n(
            search_filtered,
            [platform_filtered, search_candidates, platform_candidates],
            self.bucket_size,
            exclude=exclude,
        )

        return {
            "businessCompetitors": business,
            "searchCompetitors": search,
            "debug": {
                "siteType": profile.site_type,
                "primaryIntent": primary_intent,
                "location_name": locale.location_name,
                "language_code": locale.language_code,
                "platformQueriesUsed": platform_queries,
                "searchProbesUsed": search_queries,
                "platformRaw": len(platform_rows),
                "searchRaw": len(search_rows),
                "platformCandidates": platform_candidates[:DEBUG_CANDIDATES],
                "searchCandidates": search_candidates[:DEBUG_CANDIDATES],
            },
        }
