from rivalscout.modules.competitor.padding import fill_to_n
from rivalscout.utils.domains import is_blocked_domain


def test_fills_from_pools_in_order_without_duplicates():
    out = fill_to_n(["a.com"], [["A.com", "b.com"], ["c.com", "d.com", "e.com"]], 4)
    assert out == ["a.com", "b.com", "c.com", "d.com"]


def test_exclude_predicate_applies_to_every_source():
    out = fill_to_n(
        ["reddit.com", "rival1.com"],
        [["github.com", "rival2.com"], ["rival3.com", "rival4.com"]],
        4,
        exclude=is_blocked_domain,
    )
    assert out == ["rival1.com", "rival2.com", "rival3.com", "rival4.com"]


def test_primary_longer_than_n_is_truncated():
    assert fill_to_n(["a.com", "b.com", "c.com"], [], 2) == ["a.com", "b.com"]


def test_short_pools_give_short_output():
    assert fill_to_n([], [["a.com"], [""], []], 4) == ["a.com"]
