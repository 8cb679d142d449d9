# rivalscout/modules/providers/site_profile.py
"""
Site profile sources.

A remote profile service is used when ``SITE_PROFILE_URL`` is configured.
Otherwise the target's homepage is fetched and summarized locally.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from rivalscout.modules.models import SiteProfile
from rivalscout.modules.providers.page_fetch import PageFetcher
from rivalscout.modules.text_similarity import clean_text, uniq
from rivalscout.utils.domains import is_self_domain

logger = logging.getLogger(__name__)

MAX_SEEDS = 70
MAX_SLUG_PHRASES = 100
MAX_BODY_SAMPLES = 6
BODY_SAMPLE_CHARS = 1200

_TITLE_SPLIT_RE = re.compile(r"\s[|\-–—:]\s|\|")
_SLUG_SPLIT_RE = re.compile(r"[-_+.]+")

_SAAS_TYPES = {"SoftwareApplication", "WebApplication", "MobileApplication"}
_ECOMMERCE_TYPES = {"Product", "Offer", "AggregateOffer", "Store", "OnlineStore"}
_PUBLISHER_TYPES = {"Blog", "BlogPosting", "NewsArticle", "Article", "NewsMediaOrganization"}
_LOCAL_TYPES = {"LocalBusiness", "ProfessionalService", "Restaurant", "Dentist", "HomeAndConstructionBusiness"}


class SiteProfileSource(Protocol):
    async def profile(self, root: str) -> Optional[SiteProfile]: ...


class RemoteSiteProfileClient:
    """POSTs ``{"domain": root}`` to the profile service and maps its payload."""

    def __init__(self, url: str, timeout: float = 20.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def profile(self, root: str) -> Optional[SiteProfile]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.url, json={"domain": root})
            resp.raise_for_status()
            return SiteProfile.from_payload(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Site profile unavailable for %s: %s", root, e)
            return None


# ---------------------------------------------------------
# Homepage profiler
# ---------------------------------------------------------
def _title_segments(title: str) -> List[str]:
    return [clean_text(p) for p in _TITLE_SPLIT_RE.split(title or "") if clean_text(p)]


def _json_ld_entities(soup: BeautifulSoup) -> List[Dict[str, Any]]:
    entities: List[Dict[str, Any]] = []

    def collect(node):
        if isinstance(node, list):
            for child in node:
                collect(child)
        elif isinstance(node, dict):
            if "@graph" in node:
                collect(node["@graph"])
            if node.get("@type"):
                entities.append(node)

    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            collect(json.loads(script.string or ""))
        except (ValueError, TypeError):
            continue
    return entities


def _entity_types(entities: List[Dict[str, Any]]) -> set:
    types = set()
    for e in entities:
        t = e.get("@type")
        if isinstance(t, str):
            types.add(t)
        elif isinstance(t, list):
            types.update(x for x in t if isinstance(x, str))
    return types


def _slug_phrases(soup: BeautifulSoup, base_url: str) -> List[str]:
    phrases = []
    for a in soup.find_all("a", href=True):
        href = urljoin(base_url, a["href"])
        parsed = urlparse(href)
        if parsed.scheme not in ("http", "https") or not is_self_domain(parsed.hostname, base_url):
            continue
        segment = parsed.path.rstrip("/").rsplit("/", 1)[-1]
        words = [w for w in _SLUG_SPLIT_RE.split(segment.lower()) if w and not w.isdigit()]
        if len(words) >= 2 and words[-1] not in ("html", "php", "aspx"):
            phrases.append(" ".join(words))
    return uniq(phrases)[:MAX_SLUG_PHRASES]


def infer_site_type(entity_types: set, text: str) -> str:
    """Coarse site type from JSON-LD types first, page vocabulary second."""
    if entity_types & _LOCAL_TYPES:
        return "LocalBusiness"
    if entity_types & _SAAS_TYPES:
        return "SaaS"
    if entity_types & _ECOMMERCE_TYPES:
        return "Ecommerce"
    if entity_types & _PUBLISHER_TYPES:
        return "Publisher"

    t = text.lower()
    if "add to cart" in t or "shop now" in t or "free shipping" in t:
        return "Ecommerce"
    if "pricing" in t and any(w in t for w in ("free trial", "software", "platform", "sign up")):
        return "SaaS"
    if "latest posts" in t or "read more" in t or "articles" in t:
        return "Publisher"
    return "Website"


def profile_from_html(html: str, url: str) -> SiteProfile:
    soup = BeautifulSoup(html, "lxml")
    entities = _json_ld_entities(soup)

    for tag in soup(["script", "style", "noscript", "iframe"]):
        tag.decompose()

    title = clean_text(soup.title.get_text()) if soup.title else ""
    meta = soup.find("meta", attrs={"name": "description"})
    description = clean_text(meta.get("content")) if meta and meta.get("content") else ""
    h1s = [clean_text(h.get_text()) for h in soup.find_all("h1")]
    subheads = [clean_text(h.get_text()) for h in soup.find_all(["h2", "h3"])][:30]

    meta_kw = soup.find("meta", attrs={"name": "keywords"})
    keywords = []
    if meta_kw and meta_kw.get("content"):
        keywords = [clean_text(k) for k in meta_kw["content"].split(",")]

    first_sentence = description.split(".")[0] if description else ""
    seeds = uniq([*_title_segments(title), first_sentence, *h1s, *subheads, *keywords])[:MAX_SEEDS]

    paragraphs = " ".join(clean_text(p.get_text(" ")) for p in soup.find_all(["p", "li"]))
    samples = [
        paragraphs[i:i + BODY_SAMPLE_CHARS]
        for i in range(0, min(len(paragraphs), BODY_SAMPLE_CHARS * MAX_BODY_SAMPLES), BODY_SAMPLE_CHARS)
    ]

    return SiteProfile(
        site_type=infer_site_type(_entity_types(entities), f"{title} {description} {paragraphs}"),
        seeds=[s for s in seeds if s],
        title=title,
        description=description,
        h1s=[h for h in h1s if h],
        slug_phrases=_slug_phrases(soup, url),
        json_ld_entities=entities,
        body_text_samples=samples,
    )


class HomepageProfiler:
    """Builds a SiteProfile from the target's own homepage."""

    def __init__(self, fetcher: PageFetcher, timeout: float = 15.0):
        self.fetcher = fetcher
        self.timeout = timeout

    async def profile(self, root: str) -> Optional[SiteProfile]:
        url = f"https://{root}"
        html = await self.fetcher.fetch(url, timeout=self.timeout)
        if not html:
            logger.warning("Homepage profile unavailable for %s", root)
            return None
        return profile_from_html(html, url)
