"""
Candidate subset generation for the set-packing formulation.

Every anchor point (rising or reduction) is combined with subsets of the
opposite-direction points it could plausibly pair with. A subset whose
summed deltas cancel the anchor within the distance threshold becomes a
candidate: an incidence bitmask over the ordered point list plus a weight
``1 / (distance + NEAR_ZERO)``.
"""
from dataclasses import dataclass
import itertools
import math
from typing import Dict, List

import numpy as np

from ..points.poi import PointOfInterest, pct_distance, vector_sum


@dataclass
class Candidate:
    """One subset: bit k of ``mask`` is set when point k participates."""
    mask: int
    weight: float
    anchor: int

    @property
    def size(self) -> int:
        return bin(self.mask).count('1')

    @property
    def distance(self) -> float:
        return 1 / self.weight

    def indices(self) -> List[int]:
        return [k for k in range(self.mask.bit_length()) if self.mask >> k & 1]


def mask_of(indices) -> int:
    mask = 0
    for k in indices:
        mask |= 1 << k
    return mask


def eligible_reductions(index: int, points: List[PointOfInterest], config) -> List[int]:
    """Reductions after a rising anchor, no larger than (1 + fringe) times it."""
    anchor = points[index]
    limit = (1 + config.pair_error_fringe) * anchor.p_diff
    time_limit = anchor.minute + config.temporal_threshold if config.time_limited_pairing else math.inf
    return [
        k for k in range(index + 1, len(points))
        if not points[k].rising and points[k].minute <= time_limit and limit > -points[k].p_diff
    ]


def eligible_risings(index: int, points: List[PointOfInterest], config) -> List[int]:
    """Rising points before a reduction anchor, no larger than (1 + fringe) times it."""
    anchor = points[index]
    limit = -(1 + config.pair_error_fringe) * anchor.p_diff
    time_limit = anchor.minute - config.temporal_threshold if config.time_limited_pairing else -math.inf
    return [
        k for k in range(index)
        if points[k].rising and points[k].minute >= time_limit and limit > points[k].p_diff
    ]


def anchor_distance(anchor: PointOfInterest, subset: List[PointOfInterest]) -> float:
    """
    Percentage distance between an anchor and the subset that should cancel it.

    Rising anchors are the reference; for a reduction anchor the summed
    rises are the reference.
    """
    total = vector_sum(subset)
    if anchor.rising:
        return anchor.pct_distance((-total[0], -total[1]))
    return pct_distance(total, anchor.negated())


def generate_candidates(points: List[PointOfInterest], threshold: float, config) -> List[Candidate]:
    """
    Enumerate candidates for every anchor, deduplicated by mask.

    Subset sizes grow from 1 to ``max_points_limit``; growth stops once the
    best weight seen for the anchor no longer improves.
    """
    found: Dict[int, Candidate] = {}

    for i, anchor in enumerate(points):
        partners = eligible_reductions(i, points, config) if anchor.rising else eligible_risings(i, points, config)
        previous_best = current_best = -math.inf

        for size in range(1, min(config.max_points_limit, len(partners)) + 1):
            for combo in itertools.combinations(partners, size):
                distance = anchor_distance(anchor, [points[k] for k in combo])
                weight = 1 / (distance + config.near_zero)
                if 1 / weight >= threshold:
                    continue
                current_best = max(current_best, weight)
                mask = mask_of(combo) | (1 << i)
                if mask not in found:
                    found[mask] = Candidate(mask, weight, i)

            if previous_best < current_best or current_best == -math.inf:
                previous_best = current_best
            else:
                break

    return list(found.values())


def incidence_matrix(candidates: List[Candidate], n_points: int) -> np.ndarray:
    """Candidates x points 0/1 matrix."""
    matrix = np.zeros((len(candidates), n_points), dtype=int)
    for row, candidate in enumerate(candidates):
        matrix[row, candidate.indices()] = 1
    return matrix
