"""
Event entity: one contiguous window of above-background consumption.

The event owns its power sub-arrays, its open point sets and every pair the
matching stages produce for it.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..points.poi import PointOfInterest, sort_chronologically

Pair = Tuple[PointOfInterest, PointOfInterest]

STATUS_DETECTED = 'detected'
STATUS_EXTRACTED = 'extracted'
STATUS_MATCHED = 'matched'
STATUS_EMPTY = 'empty'
STATUS_FAILED = 'failed'


@dataclass
class Event:
    """A segmented event and the state of its point-matching lifecycle."""
    id: int
    start_minute: int
    end_minute: int
    active_power: np.ndarray = field(repr=False)
    reactive_power: np.ndarray = field(repr=False)
    rising_points: List[PointOfInterest] = field(default_factory=list, repr=False)
    reduction_points: List[PointOfInterest] = field(default_factory=list, repr=False)
    final_pairs: List[Pair] = field(default_factory=list, repr=False)
    switching_pairs: List[Pair] = field(default_factory=list, repr=False)
    unmatched_points: List[PointOfInterest] = field(default_factory=list, repr=False)
    shape_counts: Dict[str, int] = field(default_factory=dict)
    threshold: Optional[float] = None
    status: str = STATUS_DETECTED
    error: Optional[str] = None

    @property
    def duration(self) -> int:
        return self.end_minute - self.start_minute

    def open_points(self) -> List[PointOfInterest]:
        """Rising and reduction points merged in chronological order."""
        return sort_chronologically(self.rising_points + self.reduction_points)

    def open_count(self) -> int:
        return len(self.rising_points) + len(self.reduction_points)

    def set_open_points(self, points: List[PointOfInterest]):
        """Replace both open sets from one chronological list."""
        ordered = sort_chronologically(points)
        self.rising_points = [p for p in ordered if p.rising]
        self.reduction_points = [p for p in ordered if not p.rising]

    def add_pairs(self, stage: str, pairs: List[Pair]):
        self.final_pairs.extend(pairs)
        self.shape_counts[stage] = self.shape_counts.get(stage, 0) + len(pairs)

    def sort_final_pairs(self):
        self.final_pairs.sort(key=lambda pair: (pair[0].minute, pair[1].minute))

    def mean_values(self) -> Tuple[float, float]:
        """Mean absolute active/reactive delta over the open points."""
        points = self.rising_points + self.reduction_points
        if not points:
            return (0.0, 0.0)
        mean_p = sum(abs(p.p_diff) for p in points) / len(points)
        mean_q = sum(abs(p.q_diff) for p in points) / len(points)
        return (mean_p, mean_q)

