"""Points of interest: extraction, metrics and noise-threshold tuning."""

from .poi import PointOfInterest, pct_distance, norm, negate, vector_sum, sort_chronologically
from .extractor import PoiExtractor, normalize_consumption, percentage_derivative
from .tuning import tune_threshold, apply_threshold, reconstruct_curve

__all__ = [
    'PointOfInterest',
    'pct_distance',
    'norm',
    'negate',
    'vector_sum',
    'sort_chronologically',
    'PoiExtractor',
    'normalize_consumption',
    'percentage_derivative',
    'tune_threshold',
    'apply_threshold',
    'reconstruct_curve',
]
