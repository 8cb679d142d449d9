"""
Tests for domain canonicalization and request validation.
"""
import pytest

from rivalscout.utils.domains import (
    Locale,
    brand_token,
    domain_from_url,
    infer_locale,
    is_blocked_domain,
    is_self_domain,
    naive_root,
    normalize_host,
    root_domain,
)
from rivalscout.utils.validators import validate_domain


# --- Host / root domain ---

def test_normalize_host_strips_scheme_www_and_path():
    assert normalize_host("HTTPS://WWW.Example.COM/x") == "example.com"
    assert normalize_host("  shop.example.com  ") == "shop.example.com"


@pytest.mark.parametrize("value", [None, "", "   ", 42])
def test_normalize_host_rejects_empty_or_non_string(value):
    assert normalize_host(value) is None


def test_root_domain_is_case_insensitive_and_idempotent():
    root = root_domain("HTTPS://WWW.Example.COM/x")
    assert root == "example.com"
    assert root_domain(root) == root


def test_root_domain_uses_public_suffix():
    assert root_domain("accounts.google.com") == "google.com"
    assert root_domain("shop.example.co.uk") == "example.co.uk"
    assert root_domain("blog.acme.co.in") == "acme.co.in"


def test_root_domain_keeps_ip_literals():
    assert root_domain("192.168.0.1") == "192.168.0.1"


def test_root_domain_unusable_input():
    assert root_domain(None) == ""
    assert root_domain("") == ""


def test_naive_root_fallback_table():
    assert naive_root("a.b.co.in") == "b.co.in"
    assert naive_root("a.b.example.com") == "example.com"
    assert naive_root("example.com") == "example.com"


def test_brand_token():
    assert brand_token("https://www.example.co.uk/") == "example"
    assert brand_token("") == ""


# --- Self / blocked ---

@pytest.mark.parametrize("candidate", ["shop.example.com", "example.com", "about.example", "WWW.EXAMPLE.COM"])
def test_self_domains_are_detected(candidate):
    assert is_self_domain(candidate, "example.com")


def test_other_tld_is_not_self():
    assert not is_self_domain("example.net", "example.com")
    assert not is_self_domain("", "example.com")


def test_blocked_domains():
    assert is_blocked_domain("Reddit.com")
    assert is_blocked_domain("play.google.com")
    assert is_blocked_domain("")
    assert not is_blocked_domain("rival.com")
    assert is_blocked_domain("en.wikipedia.org")
    assert is_blocked_domain("apps.apple.com")
    assert not is_blocked_domain("apple.com")
    assert not is_blocked_domain("notreddit.com")


# --- Locale ---

def test_infer_locale_india_suffixes():
    assert infer_locale("shop.example.co.in").location_name == "India"
    assert infer_locale("example.in").country_code == "in"


def test_infer_locale_defaults_to_united_states():
    locale = infer_locale("example.com")
    assert locale == Locale()
    assert locale.country_code == "us"
    assert locale.language_code == "en"


def test_domain_from_url():
    assert domain_from_url("https://www.Rival.com/page?q=1") == "rival.com"
    assert domain_from_url("not a url") == ""
    assert domain_from_url(None) == ""


# --- Validation ---

def test_validate_domain_returns_root():
    assert validate_domain("https://blog.acme.io/pricing") == "acme.io"


@pytest.mark.parametrize("value,expected", [
    ("bücher.de", "xn--bcher-kva.de"),
    ("https://shop.Bücher.de/angebote", "xn--bcher-kva.de"),
    ("example.xn--p1ai", "example.xn--p1ai"),
    ("пример.рф", "xn--e1afmkfd.xn--p1ai"),
])
def test_validate_domain_accepts_internationalized_names(value, expected):
    assert validate_domain(value) == expected


@pytest.mark.parametrize("bad", [None, "", "   ", "127.0.0.1", "not_a_domain!", "localhost", "a..com"])
def test_validate_domain_rejects(bad):
    with pytest.raises(ValueError):
        validate_domain(bad)
