"""
Shared value types for the discovery pipeline.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from rivalscout.utils.domains import Locale
from rivalscout.utils.payloads import as_list


def _strings(value: Any) -> List[str]:
    return [v for v in as_list(value) if isinstance(v, str) and v.strip()]


@dataclass(frozen=True)
class Probe:
    """One locale-scoped query sent to a ranked-result provider."""
    query: str
    locale: Locale = Locale()


@dataclass(frozen=True)
class ResultRow:
    """One ranked appearance of a domain for a probe."""
    domain: str
    probe: Probe
    position: int


@dataclass
class CandidateScore:
    """A scored domain or phrase, recomputed per request."""
    name: str
    score: float
    probe_count: int = 0
    avg_position: float = 0.0


@dataclass
class KeywordRow:
    phrase: str
    volume: float = 0.0
    cpc: float = 0.0
    competition: float = 0.0
    source: str = "mined"


@dataclass
class SiteProfile:
    """Crawl summary of the scanned site. Read-only input to the engine."""
    site_type: str = "Website"
    seeds: List[str] = field(default_factory=list)
    title: str = ""
    description: str = ""
    h1s: List[str] = field(default_factory=list)
    slug_phrases: List[str] = field(default_factory=list)
    json_ld_entities: List[Dict[str, Any]] = field(default_factory=list)
    body_text_samples: List[str] = field(default_factory=list)
    primary_intent: str = ""

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> "SiteProfile":
        """
        Build a profile from a loosely-typed collaborator document.

        Field lookups (first present wins):
          site_type          siteType → site_type → "Website"
          title/description  signals.title / signals.description → title / description
          h1s                signals.h1s → h1s
          slug_phrases       slugPhrases → slug_phrases
          json_ld_entities   jsonLdEntities → structuredDataEntities → json_ld_entities
          body_text_samples  bodyTextSamples → body_text_samples
          primary_intent     primaryIntent → primaryIntentSignal → primary_intent
        """
        if not isinstance(payload, dict):
            return cls()

        signals = payload.get("signals") if isinstance(payload.get("signals"), dict) else {}

        def first(*values):
            for v in values:
                if v is not None:
                    return v
            return None

        site_type = first(payload.get("siteType"), payload.get("site_type"))
        intent = first(
            payload.get("primaryIntent"),
            payload.get("primaryIntentSignal"),
            payload.get("primary_intent"),
        )
        entities = first(
            payload.get("jsonLdEntities"),
            payload.get("structuredDataEntities"),
            payload.get("json_ld_entities"),
        )

        return cls(
            site_type=site_type if isinstance(site_type, str) and site_type else "Website",
            seeds=_strings(payload.get("seeds")),
            title=str(first(signals.get("title"), payload.get("title")) or ""),
            description=str(first(signals.get("description"), payload.get("description")) or ""),
            h1s=_strings(first(signals.get("h1s"), payload.get("h1s"))),
            slug_phrases=_strings(first(payload.get("slugPhrases"), payload.get("slug_phrases"))),
            json_ld_entities=[e for e in as_list(entities) if isinstance(e, dict)],
            body_text_samples=_strings(
                first(payload.get("bodyTextSamples"), payload.get("body_text_samples"))
            ),
            primary_intent=intent.strip().lower() if isinstance(intent, str) else "",
        )

    @property
    def signal_text(self) -> str:
        """Title, description, h1s and seeds as one lowercase blob."""
        parts = [self.title, self.description, *self.h1s, *self.seeds]
        return " ".join(p for p in parts if p).lower()
