"""
Dense-cluster folding.

A large rise and a matching large reduction with many small transitions
packed between them are one appliance cycle with a complex profile. The
span is folded into a single (rise, reduction) pair and every interior point
is removed.
"""
import math
from typing import List

from ..points.poi import PointOfInterest, negate, pct_distance, vector_sum
from .result import MatchResult, StageContext


def concentration(count: int, rise: PointOfInterest, reduction: PointOfInterest) -> float:
    """Points per 100 minutes between ``rise`` and ``reduction``."""
    duration = reduction.minute - rise.minute
    if duration <= 0:
        return math.inf
    return 100 * count / duration


def _span_balances(span: List[PointOfInterest], threshold: float) -> bool:
    rising_sum = vector_sum(p for p in span if p.rising)
    reduction_sum = vector_sum(p for p in span if not p.rising)
    return pct_distance(rising_sum, negate(reduction_sum)) < threshold


def fold_dense_clusters(points: List[PointOfInterest], ctx: StageContext) -> MatchResult:
    """
    Fold dense spans, scanning rising points from the latest.

    For a rise, every later reduction closing a span of at least
    ``min_cluster_points`` points qualifies when the span is concentrated
    enough, the reduction cancels the rise and the span's summed rises cancel
    its summed reductions. The shortest qualifying span wins.
    """
    cfg = ctx.config
    result = MatchResult(remaining=list(points))
    temp = result.remaining
    if len(temp) < cfg.min_cluster_points:
        return result

    i = len(temp) - 1
    while i >= 0:
        rise = temp[i]
        if rise.rising:
            chosen = None
            for j in range(len(temp) - 1, i, -1):
                reduction = temp[j]
                count = j - i + 1
                if reduction.rising or count < cfg.min_cluster_points:
                    continue
                if concentration(count, rise, reduction) < cfg.concentration_threshold:
                    continue
                if rise.pct_distance(reduction.negated()) >= cfg.cluster_threshold:
                    continue
                if _span_balances(temp[i:j + 1], cfg.cluster_threshold):
                    chosen = j

            if chosen is not None:
                ctx.log.debug(f"Cluster {temp[i]} .. {temp[chosen]} ({chosen - i + 1} points)")
                result.add('clusters', (temp[i], temp[chosen]))
                del temp[i:chosen + 1]
        i -= 1

    return result
