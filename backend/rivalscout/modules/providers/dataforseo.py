# rivalscout/modules/providers/dataforseo.py
"""
DataForSEO client: organic SERP, search volume, keyword ideas, keywords for site.

Every endpoint takes a one-task array and answers with the envelope
``{"status_code": 20000, "tasks": [{"status_code": 20000, "result": [...]}]}``.
"""

import logging
from typing import Dict, List, Optional

import httpx

from rivalscout.core.errors import ProviderError, ProviderNotConfigured
from rivalscout.modules.text_similarity import clean_text
from rivalscout.utils.domains import Locale
from rivalscout.utils.payloads import as_list, as_number, dig, pluck

logger = logging.getLogger(__name__)

DATAFORSEO_BASE_URL = "https://api.dataforseo.com"

SERP_PATH = "/v3/serp/google/organic/live/advanced"
SEARCH_VOLUME_PATH = "/v3/keywords_data/google/search_volume/live"
KEYWORD_IDEAS_PATH = "/v3/dataforseo_labs/google/keyword_ideas/live"
KEYWORDS_FOR_SITE_PATH = "/v3/dataforseo_labs/google/keywords_for_site/live"

MAX_METRICS_KEYWORDS = 200


def _keyword_row(item: dict) -> Optional[Dict[str, float]]:
    """
    Map a Labs item to {phrase, volume, cpc}.

    phrase: keyword → keyword_data.keyword → keyword_info.keyword
    volume: search_volume → keyword_data.search_volume → keyword_info.search_volume
    cpc:    cpc → keyword_info.cpc
    """
    phrase = clean_text(pluck(item, "keyword", "keyword_data.keyword", "keyword_info.keyword"))
    if not phrase:
        return None
    return {
        "phrase": phrase,
        "volume": as_number(pluck(item, "search_volume", "keyword_data.search_volume", "keyword_info.search_volume")),
        "cpc": as_number(pluck(item, "cpc", "keyword_info.cpc")),
    }


class DataForSEOClient:
    """Async DataForSEO client using HTTP basic auth."""

    name = "dataforseo"

    def __init__(
        self,
        login: str,
        password: str,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.login = login
        self.password = password
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.login and self.password)

    async def _post(self, path: str, task: dict) -> dict:
        if not self.configured:
            raise ProviderNotConfigured(self.name)

        async with httpx.AsyncClient(
            base_url=DATAFORSEO_BASE_URL,
            auth=(self.login, self.password),
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            resp = await client.post(path, json=[task])

        if resp.status_code >= 400:
            logger.error("DataForSEO error: %s %s %s", path, resp.status_code, resp.text[:300])
            raise ProviderError(self.name, f"{path} failed ({resp.status_code})", resp.status_code)

        try:
            data = resp.json()
        except ValueError:
            raise ProviderError(self.name, f"{path} returned invalid JSON", resp.status_code)

        task_status = as_number(dig(data, "tasks.0.status_code"))
        if task_status >= 40000:
            message = dig(data, "tasks.0.status_message") or "task error"
            raise ProviderError(self.name, f"{path}: {message}", int(task_status))
        return data

    async def ranked_results(self, query: str, locale: Locale, depth: int = 10) -> List[dict]:
        """Organic results as [{url, position}], in SERP order."""
        data = await self._post(SERP_PATH, {
            "keyword": query,
            "location_name": locale.location_name,
            "language_code": locale.language_code,
            "depth": depth,
            "device": "desktop",
        })
        items = as_list(dig(data, "tasks.0.result.0.items"))

        results = []
        for item in items:
            url = item.get("url") if isinstance(item, dict) else None
            if not url:
                continue
            results.append({"url": url, "position": len(results) + 1})
        return results

    async def keyword_metrics(self, keywords: List[str], locale: Locale) -> Dict[str, dict]:
        """
        Search volume, cpc and competition keyed by lowercase phrase.

        Best-effort: any failure yields an empty mapping.
        Field order: keyword → keyword_info.keyword, search_volume →
        keyword_info.search_volume, cpc → keyword_info.cpc,
        competition → keyword_info.competition.
        """
        if not keywords:
            return {}

        try:
            data = await self._post(SEARCH_VOLUME_PATH, {
                "keywords": keywords[:MAX_METRICS_KEYWORDS],
                "location_name": locale.location_name,
                "language_code": locale.language_code,
            })
        except (ProviderError, httpx.HTTPError) as e:
            logger.warning("Keyword metrics unavailable: %s", e)
            return {}

        metrics = {}
        for item in as_list(dig(data, "tasks.0.result")):
            phrase = clean_text(pluck(item, "keyword", "keyword_info.keyword"))
            if not phrase:
                continue
            metrics[phrase.lower()] = {
                "volume": as_number(pluck(item, "search_volume", "keyword_info.search_volume")),
                "cpc": as_number(pluck(item, "cpc", "keyword_info.cpc")),
                "competition": as_number(pluck(item, "competition", "keyword_info.competition")),
            }
        return metrics

    async def keyword_ideas(self, seed: str, locale: Locale, limit: int = 120) -> List[dict]:
        data = await self._post(KEYWORD_IDEAS_PATH, {
            "keywords": [seed],
            "location_name": locale.location_name,
            "language_code": locale.language_code,
            "limit": limit,
            "offset": 0,
        })
        rows = (_keyword_row(it) for it in as_list(dig(data, "tasks.0.result.0.items")) if isinstance(it, dict))
        return [r for r in rows if r]

    async def keywords_for_site(self, target: str, locale: Locale, limit: int = 400) -> List[dict]:
        """Phrases the target already ranks for."""
        data = await self._post(KEYWORDS_FOR_SITE_PATH, {
            "target": target,
            "location_name": locale.location_name,
            "language_code": locale.language_code,
            "limit": limit,
            "offset": 0,
        })
        rows = (_keyword_row(it) for it in as_list(dig(data, "tasks.0.result.0.items")) if isinstance(it, dict))
        return [r for r in rows if r]
