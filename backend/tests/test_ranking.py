"""
Tests for competitor and keyword scoring.
"""
import random

import pytest

from rivalscout.modules.competitor.ranking import candidate_domains, competitor_score, rank_competitors
from rivalscout.modules.keywords.keyword_ranking import (
    best_row_per_phrase,
    one_word_fallback,
    pick_final_keywords,
    rank_keywords,
    score_keyword,
    seed_vocabulary,
)
from rivalscout.modules.models import KeywordRow, Probe, ResultRow
from rivalscout.modules.text_similarity import jaccard_tokens


def _scenario_rows():
    a, b = Probe("acme pricing plans"), Probe("acme customer support")
    return [
        ResultRow("rival1.com", a, 1),
        ResultRow("rival2.com", a, 2),
        ResultRow("rival1.com", a, 3),
        ResultRow("rival2.com", b, 1),
    ]


# --- Competitors ---

def test_competitor_score_formula():
    assert competitor_score(2, 1.5) == pytest.approx(191)
    assert competitor_score(1, 2) == pytest.approx(88)


def test_unique_probe_count_outranks_repeated_hits():
    ranked = rank_competitors(_scenario_rows(), exclude_root="acme.io")

    assert candidate_domains(ranked) == ["rival2.com", "rival1.com"]
    assert ranked[0].score == pytest.approx(191)
    assert ranked[0].probe_count == 2
    assert ranked[1].score == pytest.approx(88)
    assert ranked[1].avg_position == pytest.approx(2.0)


def test_ranking_groups_by_root_and_skips_target_and_blocked():
    p = Probe("crm software")
    rows = [
        ResultRow("app.rival.com", p, 1),
        ResultRow("www.rival.com", Probe("crm tools"), 2),
        ResultRow("blog.acme.io", p, 3),
        ResultRow("reddit.com", p, 4),
    ]
    ranked = rank_competitors(rows, exclude_root="acme.io")

    assert candidate_domains(ranked) == ["rival.com"]
    assert ranked[0].probe_count == 2


def test_app_store_hosts_do_not_surface_their_parent_roots():
    p = Probe("invoice app alternatives")
    rows = [
        ResultRow("play.google.com", p, 1),
        ResultRow("apps.apple.com", p, 2),
        ResultRow("en.m.wikipedia.org", p, 3),
        ResultRow("rival.com", p, 4),
    ]

    assert candidate_domains(rank_competitors(rows)) == ["rival.com"]


def test_ranking_is_deterministic_and_breaks_ties_by_name():
    p = Probe("crm software")
    rows = [ResultRow(d, p, 1) for d in ("zeta.com", "alpha.com", "mid.com")] + _scenario_rows()

    expected = candidate_domains(rank_competitors(rows))
    assert expected == ["rival2.com", "alpha.com", "mid.com", "zeta.com", "rival1.com"]

    rng = random.Random(7)
    for _ in range(5):
        shuffled = list(rows)
        rng.shuffle(shuffled)
        assert candidate_domains(rank_competitors(shuffled)) == expected


def test_ranking_respects_max_results():
    p = Probe("crm software")
    rows = [ResultRow(f"rival{i}.com", p, i + 1) for i in range(10)]
    assert len(rank_competitors(rows, max_results=4)) == 4


# --- Keywords ---

def test_seed_vocabulary_splits_specific_tokens():
    all_tokens, specific = seed_vocabulary(["Invoice automation software", "SEO marketing"])
    assert all_tokens == {"invoice", "automation", "software", "seo", "marketing"}
    assert specific == {"invoice", "automation", "software"}


def test_best_row_prefers_highest_priority_source():
    rows = [
        KeywordRow("invoice automation", source="rank"),
        KeywordRow("invoice automation", volume=10, source="mined+metrics"),
        KeywordRow("invoice automation", source="idea"),
    ]
    assert best_row_per_phrase(rows)["invoice automation"].source == "mined+metrics"


def test_score_keyword_formula():
    all_tokens, specific = seed_vocabulary(["Invoice automation software", "SEO marketing"])
    row = KeywordRow("invoice automation", volume=999, cpc=2.0, source="mined+metrics")

    # 42 + log10(1000)*13 + 2*2.1 + 1.8 + 2*22 + 2*7
    assert score_keyword(row, all_tokens, specific) == pytest.approx(145.0)


def test_generic_and_agencies_penalties():
    row = KeywordRow("agencies london", source="rank")
    local = score_keyword(row, set(), set(), site_type="LocalBusiness")
    other = score_keyword(row, set(), set(), site_type="Website")
    assert local - other == pytest.approx(8)

    generic = score_keyword(KeywordRow("seo agency", source="rank"), set(), set())
    specific = score_keyword(KeywordRow("seo audits", source="rank"), set(), set())
    assert specific - generic == pytest.approx(25)


def test_rank_keywords_sorted_best_first():
    rows = [
        KeywordRow("receipt scanning", source="rank"),
        KeywordRow("invoice automation", volume=500, source="mined+metrics"),
        KeywordRow("expense tracking", source="mined"),
    ]
    ranked = rank_keywords(rows, set(), set())
    assert [c.name for c in ranked] == ["invoice automation", "expense tracking", "receipt scanning"]


def test_pick_final_keywords_enforces_diversity():
    ranked = ["invoice automation", "invoice automation app", "expense tracking", "receipt scanning"]
    all_tokens = {"invoice", "automation", "expense", "receipt"}

    chosen = pick_final_keywords(ranked, all_tokens, set())

    assert chosen == ["invoice automation", "expense tracking", "receipt scanning"]
    for i, a in enumerate(chosen):
        for b in chosen[i + 1:]:
            assert jaccard_tokens(a, b) < 0.62


def test_pick_final_keywords_relaxed_pass_fills_remaining_slots():
    chosen = pick_final_keywords(["travel deals", "invoice scanner"], {"invoice"}, {"invoice"})
    assert chosen == ["invoice scanner", "travel deals"]


def test_first_picks_need_specific_overlap():
    all_tokens = {"invoice", "automation", "billing", "software"}
    specific = {"invoice", "automation", "billing"}

    chosen = pick_final_keywords(["software platform", "billing automation"], all_tokens, specific)
    assert chosen == ["billing automation", "software platform"]


def test_pick_final_keywords_caps_output():
    ranked = [f"topic{i} widgets" for i in range(20)]
    assert len(pick_final_keywords(ranked, set(), set(), max_keywords=8)) <= 8


def test_one_word_fallback_adds_specific_single_tokens():
    out = one_word_fallback(["crm", "seo", "crm", "invoice automation", "payroll"], ["invoice automation"])
    assert out == ["invoice automation", "crm", "payroll"]
