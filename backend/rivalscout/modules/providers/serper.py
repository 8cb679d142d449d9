# rivalscout/modules/providers/serper.py
import logging
from typing import List, Optional

import httpx

from rivalscout.core.errors import ProviderError, ProviderNotConfigured
from rivalscout.utils.domains import Locale
from rivalscout.utils.payloads import as_list

logger = logging.getLogger(__name__)

SERPER_URL = "https://google.serper.dev/search"


class SerperClient:
    """Google Serper search, the fallback ranked-result provider."""

    name = "serper"

    def __init__(
        self,
        api_key: str,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def ranked_results(self, query: str, locale: Locale, depth: int = 10) -> List[dict]:
        """Organic results as [{url, position}], in SERP order."""
        if not self.configured:
            raise ProviderNotConfigured(self.name)

        payload = {
            "q": query,
            "gl": locale.country_code,
            "hl": locale.language_code,
            "num": depth,
        }
        headers = {"X-API-KEY": self.api_key, "Content-Type": "application/json"}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(SERPER_URL, json=payload, headers=headers)

        if resp.status_code >= 400:
            raise ProviderError(self.name, f"search failed ({resp.status_code})", resp.status_code)
        try:
            data = resp.json()
        except ValueError:
            raise ProviderError(self.name, "invalid JSON", resp.status_code)

        results = []
        for item in as_list(data.get("organic") if isinstance(data, dict) else None):
            link = item.get("link") if isinstance(item, dict) else None
            if not link:
                continue
            results.append({"url": link, "position": len(results) + 1})
        return results
