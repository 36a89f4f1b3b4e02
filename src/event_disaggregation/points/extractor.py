"""
Point of interest extraction from an event's power arrays.

Steps:
  1. Normalize both arrays to start (and end) at zero
  2. Percentage derivative of the active/reactive curves
  3. Mark samples whose derivative exceeds the significance limit
  4. Split marked samples into isolated points and contiguous groups
  5. Turn points/groups into rising and reduction POIs, widening each change
     window by one sample when the neighbouring movement continues it
  6. Sort chronologically and remove points below the noise threshold
"""
import logging
import math
from typing import List, Optional, Tuple

import numpy as np

from ..core.config import DisaggregationConfig
from ..core.ids import IdCounter
from .poi import PointOfInterest, sort_chronologically
from .tuning import tune_threshold, apply_threshold

logger = logging.getLogger(__name__)


# ============================================================================
# Signal helpers
# ============================================================================

def normalize_consumption(active, reactive) -> Tuple[np.ndarray, np.ndarray]:
    """
    Subtract the first sample from both arrays.

    Negative active values are clamped to zero; the last sample of both
    arrays is forced to zero so the event nominally ends where it started.
    """
    active = np.asarray(active, dtype=float).copy()
    reactive = np.asarray(reactive, dtype=float).copy()
    if active.size == 0:
        return active, reactive

    active -= active[0]
    reactive -= reactive[0]
    np.maximum(active, 0, out=active)
    active[-1] = 0.0
    reactive[-1] = 0.0
    return active, reactive


def percentage_derivative(values) -> np.ndarray:
    """
    ``100 * (x[i+1] - x[i]) / x[i]`` for every index.

    Zero at the last index and between two zero samples. A step away from a
    zero sample gives a signed infinity.
    """
    values = np.asarray(values, dtype=float)
    n = values.size
    derivative = np.zeros(n)
    for i in range(n - 1):
        current, following = values[i], values[i + 1]
        if current == 0:
            if following == 0:
                derivative[i] = 0.0
            else:
                derivative[i] = math.copysign(math.inf, following)
        else:
            derivative[i] = 100 * (following - current) / current
    return derivative


def derivative_markers(derivative, limit: float) -> np.ndarray:
    markers = np.zeros(len(derivative), dtype=int)
    markers[derivative > limit] = 1
    markers[derivative < -limit] = -1
    return markers


def split_marker_runs(markers) -> Tuple[List[int], List[List[int]]]:
    """
    Split nonzero marker indices into isolated points and contiguous groups.

    Returns:
        Tuple of (individual indices, list of groups of indices)
    """
    individuals = []
    groups = []
    run = []
    for i, marker in enumerate(markers):
        if marker != 0:
            run.append(i)
            continue
        if len(run) == 1:
            individuals.append(run[0])
        elif run:
            groups.append(run)
        run = []
    if len(run) == 1:
        individuals.append(run[0])
    elif run:
        groups.append(run)
    return individuals, groups


# ============================================================================
# Extractor
# ============================================================================

class PoiExtractor:
    """
    Extract classified rising and reduction points for one event.

    One extractor instance handles one event at a time; the per-event signal
    state (normalized curves, derivative, markers) is kept on the instance
    between ``extract`` calls for inspection.
    """

    def __init__(self, config: Optional[DisaggregationConfig] = None,
                 point_ids: Optional[IdCounter] = None):
        self.config = config or DisaggregationConfig()
        self.point_ids = point_ids or IdCounter()
        self.active = np.empty(0)
        self.reactive = np.empty(0)
        self.derivative = np.empty(0)
        self.markers = np.empty(0, dtype=int)
        self._rising: List[PointOfInterest] = []
        self._reduction: List[PointOfInterest] = []

    def extract(self, event, threshold: Optional[float] = None, log=None):
        """
        Populate ``event.rising_points`` and ``event.reduction_points``.

        Args:
            event: Event to analyse (mutated in place)
            threshold: Fixed noise threshold; defaults to the config value,
                automatic tuning when both are None
            log: Optional logger

        Returns:
            The noise threshold that was applied
        """
        log = log or logger
        cfg = self.config
        if threshold is None:
            threshold = cfg.cleaning_threshold

        self.active, self.reactive = normalize_consumption(event.active_power, event.reactive_power)
        self.derivative = percentage_derivative(self.active)
        self.markers = derivative_markers(self.derivative, cfg.derivative_limit)
        self._rising = []
        self._reduction = []

        individuals, groups = split_marker_runs(self.markers)
        log.debug(f"Individuals: {individuals} Groups: {groups}")

        rising_individuals = [i for i in individuals if self.markers[i] > 0]
        reduction_individuals = [i for i in individuals if self.markers[i] < 0]
        for index in rising_individuals:
            self._single_rising(index)
        for index in reduction_individuals:
            self._single_reduction(index)

        for group in groups:
            total = int(self.markers[group].sum())
            if total == len(group):
                self._all_rising(group)
            elif total == -len(group):
                self._all_reduction(group)
            else:
                self._mixed(group)

        rising = sort_chronologically(self._rising)
        reduction = sort_chronologically(self._reduction)

        if threshold is None:
            threshold = tune_threshold(rising, reduction, self.active, cfg, log)

        event.rising_points, event.reduction_points = apply_threshold(rising, reduction, threshold)
        event.threshold = threshold
        log.debug(f"Cleaning threshold {threshold:.1f}W: rising {len(rising)}->{len(event.rising_points)}, "
                  f"reduction {len(reduction)}->{len(event.reduction_points)}")
        return threshold

    # ------------------------------------------------------------------
    # Point construction
    # ------------------------------------------------------------------

    def _new_point(self, minute: int, rising: bool, start: int, end: int) -> PointOfInterest:
        p_diff = self.active[end] - self.active[start]
        q_diff = self.reactive[end] - self.reactive[start]
        return PointOfInterest(self.point_ids.next(), minute, rising, float(p_diff), float(q_diff))

    def _extend_back(self, index: int, sign: int) -> int:
        """Move a window start one sample back if the previous step continues the movement."""
        der, mar = self.derivative, self.markers
        if index > 1 and sign * der[index - 1] > 0 and (sign * der[index - 2] <= 0 or mar[index - 2] == 0):
            return index - 1
        return index

    def _extend_forward(self, index: int, sign: int) -> int:
        """Move a window end one sample forward if the movement continues past it."""
        der, mar = self.derivative, self.markers
        if index < len(der) - 1 and sign * der[index] > 0 and (sign * der[index + 1] <= 0 or mar[index + 1] == 0):
            return index + 1
        return index

    def _single_rising(self, index: int):
        start = self._extend_back(index, 1)
        end = self._extend_forward(index + 1, 1)
        self._rising.append(self._new_point(index, True, start, end))

    def _single_reduction(self, index: int):
        start = self._extend_back(index, -1)
        end = self._extend_forward(index + 1, -1)
        self._reduction.append(self._new_point(index, False, start, end))

    def _paired_windows(self, group: List[int], sign: int):
        """Yield (index, window start, window end) for each pair of a same-sign group."""
        first, last = group[0], group[-1]
        even = len(group) % 2 == 0
        for i in range(first, last, 2):
            start, end = i, i + 2
            if i == first:
                start = self._extend_back(i, sign)
            elif i >= last - 2 and even:
                end = i + 1
                if sign * self.derivative[end + 1] > 0:
                    end += 1
                end = self._extend_forward(end, sign)
            yield i, start, end

    def _all_rising(self, group: List[int]):
        if len(group) % 2 == 1:
            self._single_rising(group[-1])
        for i, start, end in self._paired_windows(group, 1):
            self._rising.append(self._new_point(i, True, start, end))

    def _all_reduction(self, group: List[int]):
        if len(group) % 2 == 1:
            self._single_reduction(group[-1])
        for i, start, end in self._paired_windows(group, -1):
            self._reduction.append(self._new_point(i + 1, False, start, end))

    def _mixed(self, group: List[int]):
        """Split a mixed-sign group at sign changes and dispatch each run."""
        runs = []
        current = [group[0]]
        for index in group[1:]:
            if self.markers[index] == self.markers[current[-1]]:
                current.append(index)
            else:
                runs.append(current)
                current = [index]
        runs.append(current)

        for run in (r for r in runs if self.markers[r[0]] > 0):
            if len(run) == 1:
                self._single_rising(run[0])
            else:
                self._all_rising(run)
        for run in (r for r in runs if self.markers[r[0]] < 0):
            if len(run) == 1:
                self._single_reduction(run[0])
            else:
                self._all_reduction(run)
