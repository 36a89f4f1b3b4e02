"""
Background threshold estimation.

The event threshold is the installation's background level plus an offset.
The background level is the series minimum by default; the daily estimators
use the median or mean of per-day minimums instead.
"""
import logging

import numpy as np

logger = logging.getLogger(__name__)


def estimate_background(active_power, estimator: str = 'minimum', samples_per_day: int = 1440) -> float:
    """
    Estimate the background consumption level.

    Args:
        active_power: Active power samples
        estimator: 'minimum', 'daily_median' or 'daily_mean'
        samples_per_day: Samples per day for the daily estimators

    Returns:
        Background level in watts
    """
    active = np.asarray(active_power, dtype=float)
    if active.size == 0:
        return 0.0
    if estimator == 'minimum':
        return float(active.min())

    n_days = int(np.ceil(active.size / samples_per_day))
    daily_minimums = np.array([
        active[day * samples_per_day:(day + 1) * samples_per_day].min()
        for day in range(n_days)
    ])
    if estimator == 'daily_median':
        return float(np.median(daily_minimums))
    if estimator == 'daily_mean':
        return float(np.mean(daily_minimums))
    raise ValueError(f"Unknown threshold estimator: '{estimator}'")


def event_threshold(active_power, offset: float, estimator: str = 'minimum',
                    samples_per_day: int = 1440, multiplier: float = 1.5) -> float:
    """
    Compute the event detection threshold.

    With the 'minimum' estimator the threshold is ``min + offset``. The daily
    estimators switch to ``multiplier * base`` once the base exceeds the offset.
    """
    base = estimate_background(active_power, estimator, samples_per_day)
    if estimator == 'minimum' or base < offset:
        threshold = base + offset
    else:
        threshold = multiplier * base
    logger.debug(f"Background {base:.1f}W ({estimator}) -> event threshold {threshold:.1f}W")
    return threshold
