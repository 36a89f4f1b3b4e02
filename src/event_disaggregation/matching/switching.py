"""
Switching-noise removal.

A reduction followed within a few minutes by a rising point of the same
size is a quick off/on flicker rather than an appliance cycle. Both points
are dropped and the pair is kept only for traceability.
"""
from typing import List

from ..points.poi import PointOfInterest
from .result import MatchResult, StageContext


def remove_switching_pairs(points: List[PointOfInterest], ctx: StageContext) -> MatchResult:
    """
    Drop (reduction, rising) flicker pairs, scanning reductions latest first.

    For each reduction the candidates are the rising points strictly after it
    and less than ``switching_window`` minutes away; the closest one under
    ``switching_threshold`` is removed together with the reduction.
    """
    cfg = ctx.config
    rising = [p for p in points if p.rising]
    removed = set()
    result = MatchResult(remaining=[])

    for reduction in reversed([p for p in points if not p.rising]):
        target = reduction.negated()
        best, best_distance = None, float('inf')
        for rise in rising:
            if rise in removed:
                continue
            if not (reduction.minute < rise.minute < reduction.minute + cfg.switching_window):
                continue
            distance = rise.pct_distance(target)
            if distance < cfg.switching_threshold and distance < best_distance:
                best, best_distance = rise, distance

        if best is not None:
            ctx.log.debug(f"Switching pair {reduction} / {best} ({best_distance:.2f}%)")
            removed.add(reduction)
            removed.add(best)
            result.discarded.append((reduction, best))

    result.remaining = [p for p in points if p not in removed]
    return result
