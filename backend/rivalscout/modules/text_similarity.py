# rivalscout/modules/text_similarity.py
import re
from typing import Iterable, List

_NON_WORD = re.compile(r"[^\w\s]|_")
_SPACES = re.compile(r"\s+")


def clean_text(s) -> str:
    return _SPACES.sub(" ", str(s or "")).strip()


def tokenize(s) -> List[str]:
    """Lowercase letters/digits tokens (Unicode-aware), punctuation dropped."""
    text = _NON_WORD.sub(" ", clean_text(s).lower())
    return [t for t in _SPACES.split(text) if t]


def jaccard_tokens(a: str, b: str) -> float:
    ta = set(tokenize(a))
    tb = set(tokenize(b))
    union = ta | tb
    if not union:
        return 0.0
    return len(ta & tb) / len(union)


def overlap_count(tokens: Iterable[str], vocabulary: set) -> int:
    return sum(1 for t in tokens if t in vocabulary)


def uniq(items: Iterable) -> list:
    """Drop falsy items and duplicates, keeping first appearance."""
    seen = set()
    out = []
    for item in items or []:
        if not item or item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out
