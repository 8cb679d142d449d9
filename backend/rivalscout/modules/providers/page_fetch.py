# rivalscout/modules/providers/page_fetch.py
import asyncio
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "RivalScout/1.0 (+competitor-profiler)"


class PageFetcher:
    """
    Homepage downloader with a hard wall-clock timeout.

    ``fetch`` never raises: any failure, non-2xx status or empty body gives None.
    """

    def __init__(
        self,
        timeout: float = 6.5,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    async def fetch(self, url: str, timeout: Optional[float] = None) -> Optional[str]:
        limit = timeout if timeout is not None else self.timeout
        try:
            # httpx timeouts are per operation, wait_for bounds the whole download
            return await asyncio.wait_for(self._get(url, limit), timeout=limit)
        except asyncio.TimeoutError:
            logger.debug("Fetch timed out after %.1fs: %s", limit, url)
        except httpx.HTTPError as e:
            logger.debug("Fetch failed for %s: %s", url, e)
        except Exception as e:
            logger.warning("Unexpected error fetching %s: %s: %s", url, type(e).__name__, e)
        return None

    async def _get(self, url: str, limit: float) -> Optional[str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml",
        }
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=limit,
            headers=headers,
            transport=self._transport,
        ) as client:
            resp = await client.get(url)

        if resp.status_code >= 400:
            logger.debug("Fetch %s returned %s", url, resp.status_code)
            return None
        return resp.text or None
