"""
Event disaggregation for aggregate household power measurements.

Subpackages:
    core          - config, presets, logging, run-scoped ids, input preparation
    detection     - background threshold and event segmentation
    points        - point of interest extraction and noise-threshold tuning
    matching      - shape cascade (switching, direct, clusters, basic shapes)
    combinatorial - set-packing matcher for the remaining points
    events        - Event entity and per-event lifecycle
    pipeline      - run orchestration and output frames
"""

__version__ = '0.1.0'

from .core.config import DisaggregationConfig, get_preset, list_presets
from .events.event import Event
from .points.poi import PointOfInterest
from .pipeline.runner import DisaggregationRunner, run_disaggregation

__all__ = [
    'DisaggregationConfig',
    'get_preset',
    'list_presets',
    'Event',
    'PointOfInterest',
    'DisaggregationRunner',
    'run_disaggregation',
]
