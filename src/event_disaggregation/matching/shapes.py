"""
Basic two- and three-point shapes.

  chair           rise, reduction, reduction   rise ~ -(red1 + red2)
  inverted chair  rise, rise, reduction        rise1 + rise2 ~ -red
  triangle        rise, reduction 1 minute apart
  rectangle       rise, reduction further apart

Chairs and inverted chairs are decomposed into two pairs each, sharing a
synthesized point at the minute of the shared end.
"""
from typing import List

from ..points.poi import PointOfInterest, negate, pct_distance, vector_sum
from .result import MatchResult, StageContext


def _has_both_directions(points: List[PointOfInterest]) -> bool:
    return any(p.rising for p in points) and any(not p.rising for p in points)


def detect_chairs(pois: List[PointOfInterest], ctx: StageContext, result: MatchResult):
    cfg = ctx.config
    for i in range(len(pois) - 2, -1, -1):
        if len(pois) <= i + 2:
            continue
        rise, red1, red2 = pois[i], pois[i + 1], pois[i + 2]
        if not (rise.rising and not red1.rising and not red2.rising):
            continue
        if red2.minute - rise.minute >= cfg.temporal_threshold:
            continue
        if pct_distance(rise.negated(), vector_sum([red1, red2])) < cfg.chair_distance_threshold:
            for red in (red1, red2):
                start = ctx.synthesize(rise.minute, True, -red.p_diff, -red.q_diff)
                result.add('chairs', (start, red))
            del pois[i:i + 3]


def detect_inverted_chairs(pois: List[PointOfInterest], ctx: StageContext, result: MatchResult):
    cfg = ctx.config
    for i in range(len(pois) - 2, -1, -1):
        if len(pois) <= i + 2:
            continue
        rise1, rise2, red = pois[i], pois[i + 1], pois[i + 2]
        if not (rise1.rising and rise2.rising and not red.rising):
            continue
        if red.minute - rise1.minute >= cfg.temporal_threshold:
            continue
        if pct_distance(negate(vector_sum([rise1, rise2])), red.vector) < cfg.inversed_chair_distance_threshold:
            for rise in (rise1, rise2):
                end = ctx.synthesize(red.minute, False, -rise.p_diff, -rise.q_diff)
                result.add('inverted_chairs', (rise, end))
            del pois[i:i + 3]


def detect_triangles_rectangles(pois: List[PointOfInterest], ctx: StageContext, result: MatchResult):
    cfg = ctx.config
    for i in range(len(pois) - 1, -1, -1):
        if len(pois) <= i + 1:
            continue
        rise, red = pois[i], pois[i + 1]
        if not (rise.rising and not red.rising):
            continue
        gap = red.minute - rise.minute
        if gap >= cfg.temporal_threshold:
            continue
        shape = 'triangles' if gap == 1 else 'rectangles'
        limit = cfg.triangle_distance_threshold if gap == 1 else cfg.rectangle_distance_threshold
        if rise.pct_distance(red.negated()) < limit:
            result.add(shape, (rise, red))
            del pois[i:i + 2]


def detect_basic_shapes(points: List[PointOfInterest], ctx: StageContext) -> MatchResult:
    """Run chairs, inverted chairs, then triangles/rectangles over one shrinking list."""
    result = MatchResult(remaining=list(points))
    pois = result.remaining

    detect_chairs(pois, ctx, result)
    if _has_both_directions(pois):
        detect_inverted_chairs(pois, ctx, result)
    if _has_both_directions(pois):
        detect_triangles_rectangles(pois, ctx, result)
    return result
