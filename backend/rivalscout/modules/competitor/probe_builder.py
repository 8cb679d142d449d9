# rivalscout/modules/competitor/probe_builder.py
"""
Turns a site profile into the bounded set of SERP queries ("probes").

Platform probes surface business competitors; search probes surface sites that
overlap in organic search.
"""

from typing import List, Optional

from rivalscout.modules.models import Probe, SiteProfile
from rivalscout.modules.text_similarity import clean_text, tokenize, uniq
from rivalscout.utils.domains import Locale, brand_token

SEARCH_ENGINE = "search_engine"
OTHER = "other"

MAX_SEARCH_ENGINE_PROBES = 10
MAX_PLATFORM_PROBES = 6
MAX_SEARCH_PROBES = 8

_HEAD_NOUNS = {
    "SaaS": "software",
    "Ecommerce": "store",
    "Publisher": "blog",
}


def detect_primary_intent(profile: Optional[SiteProfile]) -> str:
    """
    "search_engine" when the profile says so or the site describes itself as
    one, else "other".
    """
    if profile is None:
        return OTHER
    if profile.primary_intent == SEARCH_ENGINE:
        return SEARCH_ENGINE
    blob = profile.signal_text
    if (
        "search engine" in blob
        or "search the web" in blob
        or ("search" in blob and "results" in blob)
    ):
        return SEARCH_ENGINE
    return OTHER


def build_search_engine_probes(root: str) -> List[str]:
    # Forces SERPs to bring up Bing/DDG/etc instead of random generic sites
    brand = brand_token(root) or "google"
    return uniq([
        "search engine",
        "web search engine",
        "private search engine",
        "search engine alternative",
        "best search engines",
        "ai search engine",
        "answer engine",
        f"{brand} alternatives",
        f"{brand} vs bing",
        f"{brand} vs duckduckgo",
        "search engine like google",
    ])[:MAX_SEARCH_ENGINE_PROBES]


def build_platform_probes(seeds: List[str], site_type: str) -> List[str]:
    s = [
        x for x in uniq(clean_text(seed) for seed in seeds or [])
        if len(tokenize(x)) >= 2
    ][:10]
    head = _HEAD_NOUNS.get(site_type, "services")

    return uniq([
        f"{s[0]} {head}" if len(s) > 0 else "",
        f"{s[1]} {head}" if len(s) > 1 else "",
        f"{s[2]} {head}" if len(s) > 2 else "",
        f"{s[0]} tools" if len(s) > 0 else "",
        f"{s[1]} alternatives" if len(s) > 1 else "",
    ])[:MAX_PLATFORM_PROBES]


def build_search_probes(
    primary_intent: str,
    keyword_chips: List[str],
    seeds: List[str],
    root: str,
) -> List[str]:
    if primary_intent == SEARCH_ENGINE:
        # keyword chips for a search engine are too noisy
        return build_search_engine_probes(root)[:MAX_SEARCH_PROBES]

    chips = [
        k for k in uniq(clean_text(c) for c in keyword_chips or [])
        if len(tokenize(k)) >= 2
    ][:8]
    seed_fallback = [
        s for s in uniq(" ".join(tokenize(seed)[:4]) for seed in seeds or [])
        if len(tokenize(s)) >= 2
    ][:6]

    return uniq([*chips, *seed_fallback])[:MAX_SEARCH_PROBES]


def build_platform_queries(profile: SiteProfile, primary_intent: str, root: str) -> List[str]:
    if primary_intent == SEARCH_ENGINE:
        return build_search_engine_probes(root)
    return build_platform_probes(profile.seeds, profile.site_type)


def to_probes(queries: List[str], locale: Locale, limit: int = 8) -> List[Probe]:
    return [Probe(query=q, locale=locale) for q in queries[:limit]]
