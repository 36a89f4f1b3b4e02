"""
Decomposition helpers: chronological clusters, cluster trimming and the
expansion of a selected candidate into final pairs.
"""
from typing import List, Tuple

from ..points.poi import PointOfInterest, sort_chronologically


def chronological_clusters(points: List[PointOfInterest], n_clusters: int) -> List[List[PointOfInterest]]:
    """Split chronological points into ``n_clusters`` contiguous chunks of near-equal size."""
    ordered = sort_chronologically(points)
    n_clusters = max(1, min(n_clusters, len(ordered)))
    base, extra = divmod(len(ordered), n_clusters)
    clusters = []
    position = 0
    for k in range(n_clusters):
        size = base + (1 if k < extra else 0)
        clusters.append(ordered[position:position + size])
        position += size
    return [c for c in clusters if c]


def trim_cluster(cluster: List[PointOfInterest], cap: int) -> Tuple[List[PointOfInterest], List[PointOfInterest]]:
    """
    Remove the weakest points of an oversized cluster.

    Returns:
        Tuple of (kept points in chronological order, removed points)
    """
    if len(cluster) <= cap:
        return list(cluster), []
    by_magnitude = sorted(cluster, key=lambda p: abs(p.p_diff), reverse=True)
    kept, removed = by_magnitude[:cap], by_magnitude[cap:]
    return sort_chronologically(kept), removed


def create_final_pairs(points: List[PointOfInterest], indices: List[int], ctx):
    """
    Expand one selected candidate into (rising, reduction) pairs.

    1 rise : 1 reduction is a direct pair. 1 rise : k reductions gives k pairs,
    each with a synthesized start at the rise minute carrying the negated
    reduction deltas. k rises : 1 reduction gives k pairs with synthesized
    ends at the reduction minute.
    """
    members = [points[k] for k in indices]
    rising = [p for p in members if p.rising]
    reduction = [p for p in members if not p.rising]

    if len(rising) == 1 and len(reduction) == 1:
        return [(rising[0], reduction[0])]
    if len(rising) == 1:
        start_minute = rising[0].minute
        return [
            (ctx.synthesize(start_minute, True, -red.p_diff, -red.q_diff), red)
            for red in reduction
        ]
    end_minute = reduction[0].minute
    return [
        (rise, ctx.synthesize(end_minute, False, -rise.p_diff, -rise.q_diff))
        for rise in rising
    ]
