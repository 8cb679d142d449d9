"""
Target-domain validation for incoming requests.
"""

import ipaddress
import re

from rivalscout.utils.domains import normalize_host, root_domain

# One or more DNS labels followed by an alphabetic or punycode TLD
_HOST_PATTERN = re.compile(
    r"^(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+(?:[a-z]{2,63}|xn--[a-z0-9-]{1,59})$",
    re.IGNORECASE,
)


def validate_domain(domain: str) -> str:
    """
    Validates a scan target and returns its root domain.

    Args:
        domain: URL or bare host supplied by the client.

    Returns:
        The root domain (eTLD+1), lowercase ASCII (punycode for IDNs).

    Raises:
        ValueError: If the domain is missing, malformed or an IP address.
    """
    if not domain or not isinstance(domain, str) or not domain.strip():
        raise ValueError("domain is required")

    host = normalize_host(domain)
    if not host:
        raise ValueError("invalid domain")

    # Block IP literals (SSRF prevention, and they have no registrable domain)
    try:
        ipaddress.ip_address(host)
        raise ValueError(f"IP addresses are not allowed: {host}")
    except ValueError as ve:
        if "not allowed" in str(ve):
            raise

    # Internationalized names are checked in their ASCII (punycode) form
    try:
        host = host.encode("idna").decode("ascii")
    except UnicodeError:
        raise ValueError(f"invalid domain: {host}")

    if not _HOST_PATTERN.match(host):
        raise ValueError(f"invalid domain: {host}")

    root = root_domain(host)
    if not root:
        raise ValueError("invalid domain")
    return root
