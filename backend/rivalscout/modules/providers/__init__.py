"""
External collaborators: ranked-result, keyword-metrics, page and site-profile providers.
"""

from .dataforseo import DataForSEOClient
from .serper import SerperClient
from .page_fetch import PageFetcher
from .site_profile import HomepageProfiler, RemoteSiteProfileClient, profile_from_html

__all__ = [
    "DataForSEOClient",
    "SerperClient",
    "PageFetcher",
    "HomepageProfiler",
    "RemoteSiteProfileClient",
    "profile_from_html",
]
