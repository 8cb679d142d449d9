# rivalscout/modules/competitor/intent_classifier.py
"""
Light-crawl intent filter.

Each candidate's homepage is fetched and its title, meta description and first
<h1> are matched against ordered term sets. The first matching rule assigns the
role; unreachable candidates are dropped without error.
"""

import asyncio
import logging
import re
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

from rivalscout.modules.competitor.probe_builder import SEARCH_ENGINE
from rivalscout.utils.domains import is_blocked_domain, is_self_domain

logger = logging.getLogger(__name__)

# Roles
AI_ANSWER_ENGINE = "ai_answer_engine"
ECOMMERCE = "ecommerce"
PAYMENTS = "payments"
DICTIONARY = "dictionary"
MUSIC = "music"
MAPS = "maps"
SUPPORT_PORTAL = "support_portal"
SOCIAL = "social"
OTHER = "other"

SEARCH_ROLES = frozenset({SEARCH_ENGINE, AI_ANSWER_ENGINE})
WRONG_VERTICALS = frozenset({DICTIONARY, MUSIC, PAYMENTS, SUPPORT_PORTAL})

FETCH_TIMEOUT_SECONDS = 6.5

PageFetch = Callable[[str, float], Awaitable[Optional[str]]]


def _has(text: str, *terms: str) -> bool:
    """Substring match; terms of 3 chars or fewer must match a whole word."""
    for term in terms:
        if len(term) <= 3:
            if re.search(rf"\b{re.escape(term)}\b", text):
                return True
        elif term in text:
            return True
    return False


def _sign_in_portal(t: str) -> bool:
    return _has(t, "sign in", "log in", "create account") and _has(t, "support", "help center")


# Evaluated in order, first match wins
ROLE_RULES: Sequence[Tuple[Callable[[str], bool], str]] = (
    (lambda t: _has(t, "search the web", "web search", "search engine", "search results", "private search",
                    "duckduckgo", "brave search", "bing search", "yandex", "ecosia"), SEARCH_ENGINE),
    (lambda t: _has(t, "answer engine", "ai answers", "ask anything", "powered by ai", "search and answer",
                    "perplexity", "you.com", "and you can ask", "ai search"), AI_ANSWER_ENGINE),
    (lambda t: _has(t, "add to cart", "checkout", "shop", "store", "buy now", "shipping"), ECOMMERCE),
    (lambda t: _has(t, "payments", "accept payments", "pos", "invoices", "merchant"), PAYMENTS),
    (lambda t: _has(t, "dictionary", "definition", "thesaurus"), DICTIONARY),
    (lambda t: _has(t, "listen", "music", "playlist", "podcasts"), MUSIC),
    (lambda t: _has(t, "maps", "directions", "route planner", "navigation"), MAPS),
    (_sign_in_portal, SUPPORT_PORTAL),
    (lambda t: _has(t, "social network", "friends", "followers", "posts"), SOCIAL),
)


def classify_role(text: str) -> str:
    t = (text or "").lower()
    for predicate, role in ROLE_RULES:
        if predicate(t):
            return role
    return OTHER


def extract_title_and_description(html: str) -> str:
    """<title>, meta description and first <h1> as one whitespace-normalized string."""
    soup = BeautifulSoup(html or "", "lxml")

    title = soup.title.get_text(" ") if soup.title else ""
    meta = soup.find("meta", attrs={"name": re.compile("^description$", re.I)})
    desc = meta.get("content", "") if meta else ""
    h1 = soup.find("h1")
    h1_text = h1.get_text(" ") if h1 else ""

    return " ".join(f"{title} {desc} {h1_text}".split())


def role_allowed(role: str, expected_intent: str) -> bool:
    if expected_intent == SEARCH_ENGINE:
        return role in SEARCH_ROLES
    return role not in WRONG_VERTICALS


class IntentClassifier:
    """Classifies candidate homepages and keeps those matching the expected intent."""

    def __init__(self, fetch: PageFetch, timeout: float = FETCH_TIMEOUT_SECONDS):
        self._fetch = fetch
        self.timeout = timeout

    async def role_of(self, domain: str) -> Optional[str]:
        """Role of the domain's homepage, None when it cannot be fetched."""
        html = await self._fetch(f"https://{domain}", self.timeout)
        if not html:
            return None
        return classify_role(extract_title_and_description(html))

    async def filter_by_intent(
        self,
        candidates: List[str],
        expected_intent: str,
        target: str,
    ) -> List[str]:
        """Candidates whose role fits *expected_intent*, in their original order."""
        eligible = [
            d for d in candidates
            if d and not is_self_domain(d, target) and not is_blocked_domain(d)
        ]
        roles = await asyncio.gather(*(self.role_of(d) for d in eligible))

        kept = []
        for domain, role in zip(eligible, roles):
            if role is None:
                logger.debug("Intent filter: %s unreachable, dropped", domain)
                continue
            if role_allowed(role, expected_intent):
                kept.append(domain)
            else:
                logger.debug("Intent filter: %s is %s, dropped", domain, role)
        return kept
