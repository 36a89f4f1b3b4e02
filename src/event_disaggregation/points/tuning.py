"""
Adaptive noise threshold for points of interest.

Candidate thresholds run from the smallest |pDiff| up to the largest in
steps of half the smallest. A candidate is accepted when, after dropping the
points below it, the remaining rises and reductions still balance and the
piecewise-constant curve rebuilt from them stays close to the real curve.
The last accepted candidate wins.
"""
import logging
import math
from typing import List, Tuple

import numpy as np

from .poi import PointOfInterest, sort_chronologically

logger = logging.getLogger(__name__)


def apply_threshold(rising: List[PointOfInterest], reduction: List[PointOfInterest],
                    threshold: float) -> Tuple[List[PointOfInterest], List[PointOfInterest]]:
    """Keep the points whose |pDiff| is at least ``threshold``."""
    kept_rising = [p for p in rising if abs(p.p_diff) >= threshold]
    kept_reduction = [p for p in reduction if abs(p.p_diff) >= threshold]
    return kept_rising, kept_reduction


def reconstruct_curve(points: List[PointOfInterest], length: int) -> np.ndarray:
    """
    Rebuild a piecewise-constant active power curve from chronological points.

    The level after point k holds from ``minute_k + 1`` up to ``minute_{k+1}``;
    samples outside the covered range are zero.
    """
    curve = np.zeros(length)
    level = 0.0
    for current, following in zip(points, points[1:]):
        level += current.p_diff
        curve[current.minute + 1:following.minute + 1] = level
    return curve


def imbalance(rising_sum: float, reduction_sum: float) -> float:
    """Percentage by which reductions fail to cancel rises."""
    numerator = rising_sum + reduction_sum
    if rising_sum == 0:
        return 0.0 if numerator == 0 else math.inf
    return abs(100 * numerator / rising_sum)


def candidate_thresholds(magnitudes: List[float]) -> List[float]:
    """Thresholds from the smallest magnitude (inclusive) to the largest (exclusive)."""
    ordered = sorted(magnitudes)
    step = ordered[0] / 2
    if step == 0:
        return []
    candidates = []
    value = ordered[0]
    while value < ordered[-1]:
        candidates.append(value)
        value += step
    return candidates


def reconstruction_error(points: List[PointOfInterest], curve) -> float:
    """Percentage error between cumulative sums of the real and rebuilt curves."""
    rebuilt = reconstruct_curve(points, len(curve))
    sum_old = float(np.sum(curve))
    sum_new = float(np.sum(rebuilt))
    if sum_old == 0:
        return 0.0 if sum_new == 0 else math.inf
    return 100 * abs(sum_old - sum_new) / sum_old


def tune_threshold(rising: List[PointOfInterest], reduction: List[PointOfInterest],
                   active_curve, config, log=None) -> float:
    """
    Search for the noise threshold of one event.

    Args:
        rising: Chronological rising points
        reduction: Chronological reduction points
        active_curve: Normalized active power of the event
        config: DisaggregationConfig with the tuning limits
        log: Optional logger

    Returns:
        Accepted threshold, or ``config.default_threshold`` if none qualifies
    """
    log = log or logger
    threshold = config.default_threshold
    magnitudes = [abs(p.p_diff) for p in rising + reduction]
    if not magnitudes:
        return threshold

    candidates = candidate_thresholds(magnitudes)
    if not candidates:
        log.debug(f"No tuning candidates, default threshold {threshold}W")
        return threshold

    for candidate in candidates:
        kept_rising, kept_reduction = apply_threshold(rising, reduction, candidate)
        if len(kept_rising) == len(rising) and len(kept_reduction) == len(reduction):
            continue

        dev_p = imbalance(sum(p.p_diff for p in kept_rising), sum(p.p_diff for p in kept_reduction))
        dev_q = imbalance(sum(p.q_diff for p in kept_rising), sum(p.q_diff for p in kept_reduction))
        if not (dev_p < config.difference_limit_active and dev_q < config.difference_limit_reactive):
            continue

        survivors = sort_chronologically(kept_rising + kept_reduction)
        error = reconstruction_error(survivors, active_curve)

        too_many_zeros = False
        if config.max_reconstruction_zeros is not None:
            rebuilt = reconstruct_curve(survivors, len(active_curve))
            too_many_zeros = int(np.count_nonzero(rebuilt == 0)) >= config.max_reconstruction_zeros

        log.debug(f"Candidate {candidate:.1f}W: devP={dev_p:.2f} devQ={dev_q:.2f} error={error:.2f}")
        if error < config.old_difference_limit and not too_many_zeros:
            threshold = candidate

    return threshold

