"""Event segmentation over the raw power curve."""

from .background import estimate_background, event_threshold
from .segmenter import EventSegmenter

__all__ = [
    'estimate_background',
    'event_threshold',
    'EventSegmenter',
]
