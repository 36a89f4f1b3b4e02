"""Shape matching: switching removal, direct matching, cluster folding and basic shapes."""

from .result import MatchResult, StageContext, Pair
from .switching import remove_switching_pairs
from .direct import match_direct_pairs
from .clusters import fold_dense_clusters
from .shapes import detect_basic_shapes
from .cascade import SHAPE_STAGES, apply_stage, run_shape_cascade

__all__ = [
    'MatchResult',
    'StageContext',
    'Pair',
    'remove_switching_pairs',
    'match_direct_pairs',
    'fold_dense_clusters',
    'detect_basic_shapes',
    'SHAPE_STAGES',
    'apply_stage',
    'run_shape_cascade',
]
