# rivalscout/modules/keywords/text_miner.py
"""
Candidate phrase mining from crawled site text.

Body samples are mined for 2-4 word n-grams, merged with seeds, slug phrases and
structured-data values, then each raw phrase is narrowed to its best 2-4 word
window and quality-filtered.
"""

import re
from collections import Counter
from typing import List, Optional

from rivalscout.modules.models import SiteProfile
from rivalscout.modules.text_similarity import clean_text, tokenize, uniq

BAD_PHRASES = [
    "learn more",
    "more",
    "more about",
    "about",
    "about us",
    "contact",
    "privacy",
    "terms",
    "login",
    "sign in",
    "signin",
    "signup",
    "sign up",
    "careers",
    "jobs",
    "press",
    "home",
    "homepage",
]

QUERY_MODIFIERS = frozenset({
    "meaning", "means", "definition", "define", "example", "examples",
    "pdf", "ppt", "doc", "notes", "mcq", "quiz", "question", "questions",
    "near", "best", "top", "latest", "new", "your", "free", "download",
    "template", "guide", "how", "what", "why", "when", "where",
})

LANGUAGE_MODIFIERS = frozenset({
    "hindi", "marathi", "urdu", "tamil", "telugu", "kannada", "malayalam",
    "gujarati", "punjabi", "bengali", "english",
})

# Kept small: generic-only phrases are penalized, not banned
GENERIC_TOKENS = frozenset({
    "seo", "web", "website", "marketing", "business", "digital", "online",
    "media", "social", "strategy", "services", "service", "solutions",
    "company", "agency", "agencies", "brand", "branding", "growth",
    "management", "platform", "tools", "tool",
})

STOPWORDS = frozenset({"the", "a", "an", "and", "or", "to", "of", "in", "for", "with", "on", "by"})

NGRAM_WEIGHTS = {2: 1.2, 3: 0.9, 4: 0.6}

_YEAR_RE = re.compile(r"\b(19|20)\d{2}\b")
_DIGITS_RE = re.compile(r"^\d+$")

MAX_BODY_SAMPLES = 6
MAX_MINED_NGRAMS = 180
MAX_CANDIDATES = 260


def is_good_token(t: str) -> bool:
    if not t or len(t) < 2:
        return False
    if _DIGITS_RE.match(t):
        return False
    if t in QUERY_MODIFIERS or t in LANGUAGE_MODIFIERS or t in STOPWORDS:
        return False
    return True


def is_only_generic(phrase: str) -> bool:
    toks = tokenize(phrase)
    if not toks:
        return True
    return all(t in GENERIC_TOKENS for t in toks)


def is_yearish(s: str) -> bool:
    return bool(_YEAR_RE.search(str(s or "")))


def is_bad_keyword(kw: str, brand: Optional[str] = None) -> bool:
    k = str(kw or "").lower()
    if not k or len(k) < 3 or len(k) > 80:
        return True
    if is_yearish(k):
        return True

    for bp in BAD_PHRASES:
        if k == bp or k.startswith(bp + " ") or k.endswith(" " + bp):
            return True

    if brand and k == brand.lower():
        return True
    return False


def window_score(ws: List[str]) -> float:
    """Phrase quality of a token window: informative tokens up, generic ends down."""
    non_generic = sum(1 for t in ws if t not in GENERIC_TOKENS)
    generic = len(ws) - non_generic

    score = non_generic * 8 - generic * 2
    score += len("".join(ws)) / 10

    if ws[0] in GENERIC_TOKENS:
        score -= 3
    if ws[-1] in GENERIC_TOKENS:
        score -= 2
    return score


def to_rich_keyword(raw: str, min_words: int = 2, max_words: int = 4) -> str:
    """
    Best-scoring contiguous ``min_words``..``max_words`` window of *raw*.
    Returns "" when no window has at least one non-generic token.
    """
    tokens = [t for t in tokenize(raw) if is_good_token(t)]
    n = len(tokens)

    best = ""
    best_score = float("-inf")
    for length in range(min_words, min(max_words, n) + 1):
        for i in range(0, n - length + 1):
            ws = tokens[i:i + length]
            if all(t in GENERIC_TOKENS for t in ws):
                continue
            score = window_score(ws)
            if score > best_score:
                best_score = score
                best = " ".join(ws)
    return best


def top_body_ngrams(samples: List[str], top_k: int = MAX_MINED_NGRAMS) -> List[str]:
    """Frequency-weighted 2/3/4-grams over body samples, heaviest first."""
    weights = Counter()
    for sample in samples[:MAX_BODY_SAMPLES]:
        toks = [t for t in tokenize(sample) if len(t) >= 3 and is_good_token(t)]
        for i in range(len(toks)):
            for n, w in NGRAM_WEIGHTS.items():
                window = toks[i:i + n]
                if len(window) == n:
                    weights[" ".join(window)] += w

    # sorted() is stable, ties keep first-seen order
    ranked = sorted(weights.items(), key=lambda kv: kv[1], reverse=True)
    return [phrase for phrase, _ in ranked[:top_k]]


def structured_data_texts(entities: List[dict]) -> List[str]:
    texts = []
    for entity in entities:
        for key in ("name", "serviceType", "category", "description"):
            value = entity.get(key)
            if isinstance(value, str):
                texts.append(value)
    return texts


def mine_candidates(profile: SiteProfile, brand: Optional[str] = None) -> List[str]:
    """
    Distinct, quality-filtered 2-4 word phrases mined from a site profile.

    Order: structured data, slug phrases, seeds, then body n-grams.
    """
    seeds = uniq(clean_text(s) for s in profile.seeds)[:120]
    slugs = uniq(clean_text(s) for s in profile.slug_phrases)[:100]
    mined_body = top_body_ngrams(profile.body_text_samples)

    raw = uniq([*structured_data_texts(profile.json_ld_entities), *slugs, *seeds, *mined_body])

    rich = []
    for phrase in raw:
        kw = clean_text(to_rich_keyword(phrase))
        if not kw:
            continue
        if is_bad_keyword(kw, brand) or is_only_generic(kw):
            continue
        rich.append(kw)

    return uniq(rich)[:MAX_CANDIDATES]


def select_idea_seeds(phrases: List[str], max_seeds: int = 6) -> List[str]:
    """Pick the phrases most worth expanding through a keyword-ideas provider."""
    cleaned = uniq(clean_text(p) for p in phrases)

    scored = []
    for seed in cleaned:
        toks = [t for t in tokenize(seed) if is_good_token(t)]
        wc = len(toks)

        score = {2: 12, 3: 10, 4: 8, 1: -6}.get(wc, 0)
        if toks and all(t in GENERIC_TOKENS for t in toks):
            score -= 30
        score += min(10, len(seed) / 7)
        scored.append((seed, score))

    scored.sort(key=lambda x: x[1], reverse=True)
    return [seed for seed, _ in scored[:max_seeds]]
