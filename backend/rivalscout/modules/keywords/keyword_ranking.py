# rivalscout/modules/keywords/keyword_ranking.py
import math
from typing import Dict, Iterable, List, Set, Tuple

from rivalscout.modules.keywords.text_miner import (
    GENERIC_TOKENS,
    is_good_token,
    is_only_generic,
)
from rivalscout.modules.models import CandidateScore, KeywordRow
from rivalscout.modules.text_similarity import jaccard_tokens, overlap_count, tokenize, uniq

# Source-origin boosts, best first
SOURCE_BOOSTS = {
    "mined+metrics": 42,
    "mined": 32,
    "idea": 22,
    "rank": 10,
}

DIVERSITY_JACCARD = 0.62
DEFAULT_MAX_KEYWORDS = 8


def seed_vocabulary(seeds: Iterable[str]) -> Tuple[Set[str], Set[str]]:
    """
    Token vocabulary of the site's seed phrases.

    Returns (all tokens of 3+ chars, the subset without generic marketing words).
    """
    all_tokens = {t for s in seeds for t in tokenize(s) if len(t) >= 3}
    specific = {t for t in all_tokens if t not in GENERIC_TOKENS}
    return all_tokens, specific


def best_row_per_phrase(rows: List[KeywordRow]) -> Dict[str, KeywordRow]:
    """For each phrase keep the row whose source has the highest boost."""
    best: Dict[str, KeywordRow] = {}
    for row in rows:
        current = best.get(row.phrase)
        if current is None or SOURCE_BOOSTS.get(row.source, 0) > SOURCE_BOOSTS.get(current.source, 0):
            best[row.phrase] = row
    return best


def score_keyword(
    row: KeywordRow,
    seed_tokens_all: Set[str],
    seed_tokens_specific: Set[str],
    site_type: str = "Website",
) -> float:
    toks = tokenize(row.phrase)

    source_boost = SOURCE_BOOSTS.get(row.source, 0)
    volume_score = math.log10(max(0.0, row.volume) + 1) * 13
    cpc_score = row.cpc * 2.1
    length_bonus = min(10, len(row.phrase) / 10)
    overlap_score = (
        overlap_count(toks, seed_tokens_specific) * 22
        + overlap_count(toks, seed_tokens_all) * 7
    )
    generic_penalty = 25 if is_only_generic(row.phrase) else 0

    # "agencies <city>" style phrases only make sense for local businesses
    type_penalty = 8 if site_type != "LocalBusiness" and len(toks) == 2 and toks[0] == "agencies" else 0

    return (
        source_boost
        + volume_score
        + cpc_score
        + length_bonus
        + overlap_score
        - generic_penalty
        - type_penalty
    )


def rank_keywords(
    rows: List[KeywordRow],
    seed_tokens_all: Set[str],
    seed_tokens_specific: Set[str],
    site_type: str = "Website",
) -> List[CandidateScore]:
    """Score every distinct phrase and sort best first (ties by phrase)."""
    best = best_row_per_phrase(rows)
    scored = [
        CandidateScore(name=phrase, score=score_keyword(row, seed_tokens_all, seed_tokens_specific, site_type))
        for phrase, row in best.items()
    ]
    scored.sort(key=lambda c: (-c.score, c.name))
    return scored


def _too_similar(chosen: List[str], kw: str) -> bool:
    return any(jaccard_tokens(k, kw) >= DIVERSITY_JACCARD for k in chosen)


def pick_final_keywords(
    ranked: List[str],
    seed_tokens_all: Set[str],
    seed_tokens_specific: Set[str],
    max_keywords: int = DEFAULT_MAX_KEYWORDS,
) -> List[str]:
    """
    Diverse, seed-aligned selection from phrases sorted best first.

    First pass requires seed overlap (specific overlap for the first three picks);
    the second pass drops the overlap requirements to fill remaining slots.
    """
    chosen: List[str] = []
    chosen_lower: Set[str] = set()

    for kw in ranked:
        if len(chosen) >= max_keywords:
            break
        key = kw.lower()
        if key in chosen_lower or _too_similar(chosen, kw):
            continue

        toks = tokenize(kw)
        if seed_tokens_all and overlap_count(toks, seed_tokens_all) == 0:
            continue
        if (
            len(seed_tokens_specific) >= 3
            and overlap_count(toks, seed_tokens_specific) == 0
            and len(chosen) < 3
        ):
            continue

        chosen.append(kw)
        chosen_lower.add(key)

    if len(chosen) < max_keywords:
        for kw in ranked:
            if len(chosen) >= max_keywords:
                break
            key = kw.lower()
            if key in chosen_lower or _too_similar(chosen, kw):
                continue
            chosen.append(kw)
            chosen_lower.add(key)

    return chosen[:max_keywords]


def one_word_fallback(phrases: Iterable[str], chosen: List[str], max_keywords: int = DEFAULT_MAX_KEYWORDS) -> List[str]:
    """Top up *chosen* with single informative tokens taken from *phrases*."""
    singles = []
    for phrase in phrases:
        toks = [t for t in tokenize(phrase) if is_good_token(t)]
        if len(toks) == 1 and toks[0] not in GENERIC_TOKENS:
            singles.append(toks[0])

    out = list(chosen)
    for token in uniq(singles):
        if len(out) >= max_keywords:
            break
        if token in out or _too_similar(out, token):
            continue
        out.append(token)
    return out
