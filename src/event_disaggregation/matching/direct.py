"""
Direct matching of near-identical rising/reduction pairs.

Each rising point claims every later reduction (inside the temporal window)
whose negated deltas are within ``closeness_threshold`` percent. A reduction
claimed by several rises stays only with the closest of them; each rise then
takes its closest remaining reduction.
"""
from typing import Dict, List

from ..points.poi import PointOfInterest
from .result import MatchResult, StageContext


def collect_claims(points: List[PointOfInterest], ctx: StageContext) -> Dict[int, Dict[int, float]]:
    """Map rising index -> {reduction index: distance} for every qualifying reduction."""
    cfg = ctx.config
    claims = {}
    for i, rise in enumerate(points):
        if not rise.rising:
            continue
        found = {}
        for j in range(i + 1, len(points)):
            reduction = points[j]
            if reduction.rising or reduction.minute - rise.minute >= cfg.temporal_threshold:
                continue
            distance = rise.pct_distance(reduction.negated())
            if distance < cfg.closeness_threshold:
                found[j] = distance
        if found:
            claims[i] = found
    return claims


def resolve_conflicts(claims: Dict[int, Dict[int, float]]) -> Dict[int, Dict[int, float]]:
    """Keep, for each reduction, only the claims at its minimum distance."""
    best = {}
    for found in claims.values():
        for j, distance in found.items():
            if j not in best or distance < best[j]:
                best[j] = distance
    return {
        i: {j: d for j, d in found.items() if d <= best[j]}
        for i, found in claims.items()
    }


def match_direct_pairs(points: List[PointOfInterest], ctx: StageContext) -> MatchResult:
    claims = resolve_conflicts(collect_claims(points, ctx))
    result = MatchResult(remaining=[])
    used = set()

    for i in sorted(claims):
        available = [(d, j) for j, d in claims[i].items() if j not in used]
        if not available:
            continue
        # min over (distance, index): ties go to the earliest reduction
        _, j = min(available)
        used.add(i)
        used.add(j)
        result.add('matching', (points[i], points[j]))

    if used:
        ctx.log.debug(f"Direct matches: {result.pairs}")
    result.remaining = [p for k, p in enumerate(points) if k not in used]
    return result
