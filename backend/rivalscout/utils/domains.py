"""
Domain canonicalization.

Every component compares candidates by root domain (eTLD+1): identity,
self-exclusion, the noise blocklist and cache keys all go through here.
"""

import ipaddress
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from urllib.parse import urlparse

import tldextract

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

# Fallback-only, used when the public suffix lookup gives no answer
_TWO_LABEL_SUFFIXES = {"co.in", "org.in", "net.in", "ac.in", "co.uk", "org.uk"}

# Aggregators, Q&A, social and app stores: never a competitor
BLOCK_DOMAINS = frozenset({
    "wikipedia.org",
    "reddit.com",
    "quora.com",
    "medium.com",
    "pinterest.com",
    "github.com",
    "stackoverflow.com",
    "play.google.com",
    "apps.apple.com",
    "facebook.com",
    "instagram.com",
    "linkedin.com",
    "twitter.com",
    "x.com",
})

_INDIA_SUFFIXES = (".in", ".co.in", ".org.in", ".net.in")


@dataclass(frozen=True)
class Locale:
    location_name: str = "United States"
    language_code: str = "en"

    @property
    def country_code(self) -> str:
        """Two-letter country code for providers that take ``gl``."""
        return "in" if self.location_name == "India" else "us"


@lru_cache()
def _get_extractor() -> tldextract.TLDExtract:
    # Bundled public suffix snapshot only, no network fetch
    return tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)


def normalize_host(value) -> Optional[str]:
    """
    Normalize a URL, bare host or mixed-case input into a Host.

    >>> normalize_host("HTTPS://WWW.Example.COM/path")
    'example.com'
    """
    if not value or not isinstance(value, str):
        return None

    s = value.strip().lower()
    if not s:
        return None

    try:
        if not _SCHEME_RE.match(s):
            s = f"https://{s}"
        host = urlparse(s).hostname or ""
    except ValueError:
        host = ""

    if not host:
        host = _SCHEME_RE.sub("", s).split("/")[0]

    host = host.strip().rstrip(".")
    if host.startswith("www."):
        host = host[4:]
    return host or None


def naive_root(host: str) -> str:
    """Last two labels, or three for known two-label country suffixes."""
    if not host:
        return ""
    parts = host.split(".")
    if len(parts) <= 2:
        return host

    last2 = ".".join(parts[-2:])
    if last2 in _TWO_LABEL_SUFFIXES:
        return ".".join(parts[-3:])
    return last2


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        return False


def root_domain(value) -> str:
    """
    Registrable domain (eTLD+1) for a URL or host. Returns "" for unusable input.

    accounts.google.com -> google.com, shop.example.co.uk -> example.co.uk
    """
    host = normalize_host(value)
    if not host:
        return ""
    if _is_ip(host):
        return host
    if len(host.split(".")) <= 2:
        return host

    try:
        ext = _get_extractor()(host)
    except Exception as e:
        logger.warning("Public suffix lookup failed for %s: %s", host, e)
        return naive_root(host)

    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return naive_root(host)


def brand_token(value) -> str:
    """First label of the root domain: example.co.uk -> example."""
    root = root_domain(value)
    return root.split(".")[0] if root else ""


def is_self_domain(candidate, target) -> bool:
    """
    True when *candidate* belongs to the same property as *target*.

    Covers equal hosts, subdomains, equal root domains and brand pages such as
    about.google when scanning google.com.
    """
    c_host = normalize_host(candidate)
    t_host = normalize_host(target)
    if not c_host or not t_host:
        return False

    if c_host == t_host or c_host.endswith(f".{t_host}"):
        return True

    c_root = root_domain(c_host)
    t_root = root_domain(t_host)
    if c_root and t_root and c_root == t_root:
        return True

    brand = t_root.split(".")[0] if t_root else ""
    if brand and (c_host == f"about.{brand}" or c_root == f"about.{brand}"):
        return True

    return False


def is_blocked_domain(domain) -> bool:
    """True for noise hosts and their subdomains (en.wikipedia.org, play.google.com)."""
    if not domain:
        return True
    host = domain.lower()
    return host in BLOCK_DOMAINS or any(host.endswith(f".{b}") for b in BLOCK_DOMAINS)


def infer_locale(host) -> Locale:
    h = (normalize_host(host) or "").lower()
    if h.endswith(_INDIA_SUFFIXES):
        return Locale(location_name="India", language_code="en")
    return Locale()


def domain_from_url(url) -> str:
    """Host of an absolute result URL, "" when it has none."""
    if not url or not isinstance(url, str):
        return ""
    try:
        host = urlparse(url.strip()).hostname or ""
    except ValueError:
        return ""
    host = host.lower()
    return host[4:] if host.startswith("www.") else host
