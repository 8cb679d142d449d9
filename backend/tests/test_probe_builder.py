"""
Tests for probe (SERP query) construction.
"""
import pytest

from rivalscout.modules.competitor.probe_builder import (
    OTHER,
    SEARCH_ENGINE,
    build_platform_probes,
    build_platform_queries,
    build_search_engine_probes,
    build_search_probes,
    detect_primary_intent,
    to_probes,
)
from rivalscout.modules.models import SiteProfile
from rivalscout.utils.domains import Locale


def test_detect_primary_intent():
    assert detect_primary_intent(None) == OTHER
    assert detect_primary_intent(SiteProfile(title="DuckDuckGo - Private Search Engine")) == SEARCH_ENGINE
    assert detect_primary_intent(SiteProfile(description="Search and get results fast")) == SEARCH_ENGINE
    assert detect_primary_intent(SiteProfile(seeds=["invoice automation"])) == OTHER


@pytest.mark.parametrize("field", ["primaryIntent", "primaryIntentSignal", "primary_intent"])
def test_detect_primary_intent_trusts_profile_intent(field):
    profile = SiteProfile.from_payload({"seeds": ["acme app"], field: "search_engine"})

    assert profile.primary_intent == SEARCH_ENGINE
    assert detect_primary_intent(profile) == SEARCH_ENGINE


def test_detect_primary_intent_falls_back_to_text_when_profile_says_other():
    profile = SiteProfile.from_payload({"primaryIntent": "other", "signals": {"title": "Private Search Engine"}})
    assert detect_primary_intent(profile) == SEARCH_ENGINE

    profile = SiteProfile.from_payload({"primaryIntent": "other", "seeds": ["invoice automation"]})
    assert detect_primary_intent(profile) == OTHER


def test_search_engine_probes_reference_brand_and_are_capped():
    probes = build_search_engine_probes("duckduckgo.com")
    assert "duckduckgo alternatives" in probes
    assert "duckduckgo vs bing" in probes
    assert len(probes) == 10
    assert len(set(probes)) == 10


def test_platform_probes_use_site_type_head_noun():
    probes = build_platform_probes(["invoice automation", "expense tracking", "crm"], "SaaS")
    assert probes == [
        "invoice automation software",
        "expense tracking software",
        "invoice automation tools",
        "expense tracking alternatives",
    ]


def test_platform_probes_default_head_noun():
    probes = build_platform_probes(["dental implants"], "Website")
    assert probes == ["dental implants services", "dental implants tools"]


def test_platform_probes_without_usable_seeds():
    assert build_platform_probes(["crm", ""], "SaaS") == []


def test_search_probes_chips_then_seed_fallback():
    probes = build_search_probes(
        OTHER,
        ["crm software", "crm", "crm software"],
        ["cloud based invoice automation platform"],
        "acme.io",
    )
    assert probes == ["crm software", "cloud based invoice automation"]


def test_search_probes_capped_at_eight():
    chips = [f"topic{i} software" for i in range(12)]
    assert len(build_search_probes(OTHER, chips, [], "acme.io")) == 8


def test_search_probes_for_search_engine_ignore_chips():
    probes = build_search_probes(SEARCH_ENGINE, ["crm software"], [], "duckduckgo.com")
    assert probes == build_search_engine_probes("duckduckgo.com")[:8]


def test_platform_queries_switch_on_intent(saas_profile):
    assert build_platform_queries(saas_profile, SEARCH_ENGINE, "acme.io") == build_search_engine_probes("acme.io")
    assert build_platform_queries(saas_profile, OTHER, "acme.io") == build_platform_probes(saas_profile.seeds, "SaaS")


def test_to_probes_attaches_locale():
    locale = Locale(location_name="India")
    probes = to_probes(["a b", "c d", "e f"], locale, limit=2)
    assert [p.query for p in probes] == ["a b", "c d"]
    assert all(p.locale == locale for p in probes)
