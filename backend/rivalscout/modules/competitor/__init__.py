"""
Competitor Discovery Module
Probe building, SERP aggregation, ranking, intent filtering and padding.
"""

from .probe_builder import (
    build_platform_probes,
    build_search_engine_probes,
    build_search_probes,
    detect_primary_intent,
)
from .serp_aggregator import SerpAggregator
from .ranking import competitor_score, rank_competitors
from .intent_classifier import IntentClassifier, classify_role, extract_title_and_description
from .padding import fill_to_n
from .competitor_finder import CompetitorFinder

__all__ = [
    # Probes
    "build_platform_probes",
    "build_search_engine_probes",
    "build_search_probes",
    "detect_primary_intent",

    # SERP & ranking
    "SerpAggregator",
    "competitor_score",
    "rank_competitors",

    # Intent filter
    "IntentClassifier",
    "classify_role",
    "extract_title_and_description",

    # Output
    "fill_to_n",
    "CompetitorFinder",
]
