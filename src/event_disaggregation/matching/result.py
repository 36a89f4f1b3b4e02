"""Shared types for the matching stages."""
from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional, Tuple, Union

from ..core.config import DisaggregationConfig
from ..core.ids import IdCounter
from ..core.logging_setup import RunLogger
from ..points.poi import PointOfInterest

Pair = Tuple[PointOfInterest, PointOfInterest]


@dataclass
class StageContext:
    """What every stage needs besides the points: thresholds, ids for synthesized points, a logger."""
    config: DisaggregationConfig = field(default_factory=DisaggregationConfig)
    point_ids: IdCounter = field(default_factory=IdCounter)
    log: Optional[Union[RunLogger, logging.Logger]] = None  # RunLogger inside a run

    def __post_init__(self):
        if self.log is None:
            self.log = logging.getLogger('event_disaggregation.matching')

    def synthesize(self, minute: int, rising: bool, p_diff: float, q_diff: float) -> PointOfInterest:
        return PointOfInterest(self.point_ids.next(), minute, rising, p_diff, q_diff, synthetic=True)


@dataclass
class MatchResult:
    """
    Output of one stage.

    ``pairs_by_shape`` maps a shape name to its (rising, reduction) pairs;
    ``discarded`` holds (reduction, rising) switching pairs that never become
    final pairs; ``remaining`` are the still-open points, chronologically.
    """
    remaining: List[PointOfInterest]
    pairs_by_shape: Dict[str, List[Pair]] = field(default_factory=dict)
    discarded: List[Pair] = field(default_factory=list)

    @property
    def pairs(self) -> List[Pair]:
        return [pair for pairs in self.pairs_by_shape.values() for pair in pairs]

    def add(self, shape: str, pair: Pair):
        self.pairs_by_shape.setdefault(shape, []).append(pair)
