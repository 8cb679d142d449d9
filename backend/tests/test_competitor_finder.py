"""
End-to-end tests for the competitor pipeline with fake collaborators.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import FakeProvider
from rivalscout.core.errors import ProviderError
from rivalscout.modules.competitor.competitor_finder import CompetitorFinder
from rivalscout.modules.competitor.intent_classifier import IntentClassifier
from rivalscout.modules.competitor.probe_builder import build_search_engine_probes
from rivalscout.modules.competitor.serp_aggregator import SerpAggregator
from rivalscout.modules.models import SiteProfile
from rivalscout.utils.domains import is_blocked_domain

SERP = [
    "https://acme.io",
    "https://www.rival1.com/pricing",
    "https://rival2.com",
    "https://www.reddit.com/r/invoicing",
    "https://dict.com/invoice",
    "https://rival3.com",
    "https://app.rival4.com",
    "https://rival5.com",
]


def _profiles(profile):
    source = MagicMock()
    source.profile = AsyncMock(return_value=profile)
    return source


def _fetch(pages=None):
    async def fetch(url, timeout):
        if pages is not None:
            return pages.get(url)
        if "dict.com" in url:
            return "<title>Free Dictionary</title>"
        return "<title>Accounting software for teams</title>"
    return fetch


def _finder(profile, provider=None, fetch=None, chips=None):
    provider = provider or FakeProvider("primary", lambda q: SERP)
    return CompetitorFinder(
        _profiles(profile),
        SerpAggregator(provider),
        IntentClassifier(fetch or _fetch()),
        keyword_chips=chips,
    )


@pytest.mark.asyncio
async def test_suggest_returns_four_filtered_competitors_per_bucket(saas_profile):
    chips = AsyncMock(return_value=["invoice software", "billing automation"])
    result = await _finder(saas_profile, chips=chips).suggest("acme.io")

    expected = ["rival1.com", "rival2.com", "rival3.com", "rival4.com"]
    assert result["businessCompetitors"] == expected
    assert result["searchCompetitors"] == expected

    debug = result["debug"]
    assert debug["siteType"] == "SaaS"
    assert debug["primaryIntent"] == "other"
    assert debug["location_name"] == "United States"
    assert debug["platformQueriesUsed"] == [
        "Invoice automation software software",
        "Expense tracking for teams software",
        "Invoice automation software tools",
        "Expense tracking for teams alternatives",
    ]
    assert debug["searchProbesUsed"] == [
        "invoice software",
        "billing automation",
        "invoice automation software",
        "expense tracking for teams",
    ]
    # 7 non-self rows per probe
    assert debug["platformRaw"] == 28
    assert debug["searchRaw"] == 28
    assert debug["platformCandidates"][:3] == ["rival1.com", "rival2.com", "dict.com"]
    assert "reddit.com" not in debug["platformCandidates"]
    chips.assert_awaited_once_with("acme.io")


@pytest.mark.asyncio
async def test_search_engine_sites_use_template_probes_and_skip_chips():
    profile = SiteProfile(title="Acme - the private search engine")
    chips = AsyncMock(return_value=["should not be used"])
    pages = {
        "https://rival1.com": "<title>Rival1 web search</title>",
        "https://rival2.com": "<title>Rival2 - ask anything</title>",
        "https://rival3.com": "<title>Rival3 shop</title>",
    }

    result = await _finder(profile, fetch=_fetch(pages), chips=chips).suggest("acme.io")

    chips.assert_not_awaited()
    assert result["debug"]["primaryIntent"] == "search_engine"
    assert result["debug"]["platformQueriesUsed"] == build_search_engine_probes("acme.io")[:8]
    assert result["debug"]["searchProbesUsed"] == build_search_engine_probes("acme.io")[:8]
    assert result["businessCompetitors"][:2] == ["rival1.com", "rival2.com"]


@pytest.mark.asyncio
async def test_unreachable_candidates_are_padded_from_ranked_lists(saas_profile):
    result = await _finder(saas_profile, fetch=_fetch(pages={})).suggest("acme.io")

    for bucket in ("businessCompetitors", "searchCompetitors"):
        domains = result[bucket]
        assert len(domains) == 4
        assert len(set(domains)) == 4
        assert not any(is_blocked_domain(d) for d in domains)
        assert "acme.io" not in domains


@pytest.mark.asyncio
async def test_provider_failures_yield_empty_buckets(saas_profile):
    provider = FakeProvider("primary", error=ProviderError("primary", "down", 503))
    result = await _finder(saas_profile, provider=provider).suggest("acme.io")

    assert result["businessCompetitors"] == []
    assert result["searchCompetitors"] == []
    assert result["debug"]["platformRaw"] == 0


@pytest.mark.asyncio
async def test_profile_failure_degrades_to_default_profile():
    finder = _finder(None)
    finder.profiles.profile = AsyncMock(side_effect=RuntimeError("crawler down"))

    result = await finder.suggest("acme.co.in")

    assert result["debug"]["siteType"] == "Website"
    assert result["debug"]["location_name"] == "India"
    assert result["businessCompetitors"] == []
