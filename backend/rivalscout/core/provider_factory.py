"""
Discovery Service Factory
Centralizes provider and pipeline construction from Settings.
Routes should use get_competitor_finder() / get_keyword_finder() instead of
building clients themselves.

Providers:
  - dataforseo → SERP, search volume, keyword ideas, keywords for site
  - serper     → SERP fallback
  - site profile → remote service (SITE_PROFILE_URL) or homepage profiler
"""

import logging
from functools import lru_cache
from typing import List

from rivalscout.core.cache_manager import get_cache
from rivalscout.core.config import Settings, get_settings
from rivalscout.modules.competitor.competitor_finder import CompetitorFinder
from rivalscout.modules.competitor.intent_classifier import IntentClassifier
from rivalscout.modules.competitor.serp_aggregator import SerpAggregator
from rivalscout.modules.keywords.keyword_finder import KeywordFinder
from rivalscout.modules.providers import (
    DataForSEOClient,
    HomepageProfiler,
    PageFetcher,
    RemoteSiteProfileClient,
    SerperClient,
)
from rivalscout.modules.providers.site_profile import SiteProfileSource

logger = logging.getLogger(__name__)


def build_profile_source(settings: Settings, fetcher: PageFetcher) -> SiteProfileSource:
    """Remote profile service when configured, else the built-in homepage profiler."""
    if settings.site_profile_url:
        logger.info("Site profiles from %s", settings.site_profile_url)
        return RemoteSiteProfileClient(settings.site_profile_url, timeout=settings.provider_timeout)
    return HomepageProfiler(fetcher)


@lru_cache()
def get_page_fetcher() -> PageFetcher:
    settings = get_settings()
    return PageFetcher(timeout=settings.page_fetch_timeout, user_agent=settings.user_agent)


@lru_cache()
def get_dataforseo_client() -> DataForSEOClient:
    settings = get_settings()
    return DataForSEOClient(
        settings.dataforseo_login,
        settings.dataforseo_password,
        timeout=settings.provider_timeout,
    )


@lru_cache()
def get_serper_client() -> SerperClient:
    settings = get_settings()
    return SerperClient(settings.serper_api_key, timeout=settings.provider_timeout)


@lru_cache()
def get_profile_source() -> SiteProfileSource:
    return build_profile_source(get_settings(), get_page_fetcher())


@lru_cache()
def get_keyword_finder() -> KeywordFinder:
    return KeywordFinder(get_profile_source(), get_dataforseo_client())


async def keyword_chips(root: str) -> List[str]:
    """Keyword suggestions for *root*, shared with the keywords endpoint cache."""
    finder = get_keyword_finder()
    result = await get_cache("keywords").resolve(root, lambda: finder.suggest(root))
    return list(result.get("keywords") or [])


@lru_cache()
def get_competitor_finder() -> CompetitorFinder:
    settings = get_settings()
    fetcher = get_page_fetcher()
    aggregator = SerpAggregator(
        primary=get_dataforseo_client(),
        fallback=get_serper_client(),
        depth=settings.serp_depth,
        max_results=settings.serp_max_results,
    )
    classifier = IntentClassifier(fetcher.fetch, timeout=settings.page_fetch_timeout)
    return CompetitorFinder(
        get_profile_source(),
        aggregator,
        classifier,
        keyword_chips=keyword_chips,
    )


def providers_status() -> dict:
    """Which collaborators have credentials (for the health endpoint)."""
    settings = get_settings()
    return {
        "dataforseo_configured": settings.dataforseo_configured,
        "serper_configured": bool(settings.serper_api_key),
        "site_profile": "remote" if settings.site_profile_url else "homepage",
    }
