# rivalscout/modules/competitor/ranking.py
from typing import Dict, List, Optional

from rivalscout.modules.models import CandidateScore, ResultRow
from rivalscout.utils.domains import is_blocked_domain, root_domain


def competitor_score(unique_probe_count: int, avg_position: float) -> float:
    """Distinct probes dominate; average position only orders domains with equal reach."""
    return unique_probe_count * 100 - avg_position * 6


def rank_competitors(
    rows: List[ResultRow],
    exclude_root: Optional[str] = None,
    max_results: int = 20,
) -> List[CandidateScore]:
    """
    Group rows by root domain and order them by competitor_score.

    Ties are broken by domain name so identical inputs give identical output.
    """
    groups: Dict[str, dict] = {}

    for r in rows:
        root = root_domain(r.domain)
        if not root:
            continue
        if exclude_root and root == exclude_root:
            continue
        # App stores live on subdomains of otherwise legitimate roots
        if is_blocked_domain(r.domain) or is_blocked_domain(root):
            continue

        g = groups.setdefault(root, {"hits": 0, "pos_sum": 0, "probes": set()})
        g["hits"] += 1
        g["pos_sum"] += r.position or 10
        g["probes"].add(r.probe.query)

    scored = []
    for domain, g in groups.items():
        unique = len(g["probes"])
        avg_pos = g["pos_sum"] / g["hits"] if g["hits"] else 99
        scored.append(CandidateScore(
            name=domain,
            score=competitor_score(unique, avg_pos),
            probe_count=unique,
            avg_position=round(avg_pos, 2),
        ))

    scored.sort(key=lambda c: (-c.score, c.name))
    return scored[:max_results]


def candidate_domains(scored: List[CandidateScore]) -> List[str]:
    return [c.name for c in scored]
