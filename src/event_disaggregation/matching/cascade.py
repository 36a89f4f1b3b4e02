"""
Shape cascade: the ordered stages that resolve the easy pairs of an event.

Each stage is a function ``(points, ctx) -> MatchResult`` over the
chronological open points. The cascade applies them left to right to the
event, moving produced pairs to ``final_pairs`` and switching pairs to
``switching_pairs``.
"""
from typing import Callable, List, Tuple

from .clusters import fold_dense_clusters
from .direct import match_direct_pairs
from .result import MatchResult, StageContext
from .shapes import detect_basic_shapes
from .switching import remove_switching_pairs

Stage = Callable[..., MatchResult]

SHAPE_STAGES: List[Tuple[str, Stage]] = [
    ('Switching', remove_switching_pairs),
    ('Matching', match_direct_pairs),
    ('Clusters', fold_dense_clusters),
    ('Basic', detect_basic_shapes),
]


def apply_stage(event, name: str, stage: Stage, ctx: StageContext) -> MatchResult:
    """Run one stage on the event's open points and apply its result."""
    log = ctx.log
    log.info(f"Before {name}: Rising {len(event.rising_points)} Reduction Points: {len(event.reduction_points)}")

    result = stage(event.open_points(), ctx)
    event.switching_pairs.extend(result.discarded)
    for shape, pairs in result.pairs_by_shape.items():
        event.add_pairs(shape, pairs)
    event.set_open_points(result.remaining)

    log.info(f"After {name}: Rising {len(event.rising_points)} Reduction Points: {len(event.reduction_points)}")
    return result


def run_shape_cascade(event, ctx: StageContext, stages=None):
    """
    Apply the cascade to one event.

    Stages after the first only run while both rising and reduction points
    remain open.
    """
    stages = stages if stages is not None else SHAPE_STAGES
    for position, (name, stage) in enumerate(stages):
        if position > 0 and not (event.rising_points and event.reduction_points):
            ctx.log.debug(f"Skipping {name} and later stages: one direction is empty")
            break
        apply_stage(event, name, stage, ctx)
