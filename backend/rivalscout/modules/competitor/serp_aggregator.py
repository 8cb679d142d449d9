# rivalscout/modules/competitor/serp_aggregator.py
import asyncio
import logging
from typing import List, Optional, Protocol

from rivalscout.core.async_helpers import gather_settled
from rivalscout.modules.models import Probe, ResultRow
from rivalscout.utils.domains import Locale, domain_from_url, is_self_domain

logger = logging.getLogger(__name__)


class RankedResultProvider(Protocol):
    name: str

    @property
    def configured(self) -> bool: ...

    async def ranked_results(self, query: str, locale: Locale, depth: int = 10) -> List[dict]: ...


class SerpAggregator:
    """
    Issues probes against a primary ranked-result provider, falling back to a
    secondary one, and collects one ResultRow per ranked domain.
    """

    def __init__(
        self,
        primary: Optional[RankedResultProvider],
        fallback: Optional[RankedResultProvider] = None,
        depth: int = 10,
        max_results: int = 12,
    ):
        self.primary = primary
        self.fallback = fallback
        self.depth = depth
        self.max_results = max_results

    async def serp_domains(self, probe: Probe) -> List[str]:
        """Result hosts for one probe. Returns [] when every provider fails."""
        for provider in (self.primary, self.fallback):
            if provider is None or not provider.configured:
                continue
            try:
                results = await provider.ranked_results(probe.query, probe.locale, depth=self.depth)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning("%s failed for '%s': %s", provider.name, probe.query, e)
                continue
            return [d for d in (domain_from_url(r.get("url")) for r in results) if d]

        logger.debug("No ranked-result provider answered '%s'", probe.query)
        return []

    def rows_for_probe(self, probe: Probe, domains: List[str], target: str) -> List[ResultRow]:
        rows = []
        for idx, domain in enumerate(domains[:self.max_results]):
            if is_self_domain(domain, target):
                continue
            rows.append(ResultRow(domain=domain, probe=probe, position=idx + 1))
        return rows

    async def collect(self, probes: List[Probe], target: str) -> List[ResultRow]:
        """Run all probes concurrently. Rows keep probe order, then rank order."""
        results = await gather_settled(
            (self.serp_domains(p) for p in probes),
            default=list,
            label="SERP probe",
        )

        rows: List[ResultRow] = []
        for probe, domains in zip(probes, results):
            rows.extend(self.rows_for_probe(probe, domains, target))
        return rows
