"""
Event segmentation over the raw power curve.

An event starts one sample before the curve crosses above the threshold and
ends at the first sample back at or below it, once no sample inside the
lookahead window rises above the threshold again. Spans whose mean active
power falls below the threshold are noise and are dropped.
"""
import logging
from typing import List, Optional

import numpy as np

from ..core.config import DisaggregationConfig
from ..core.ids import IdCounter
from ..core.data_loader import validate_power_arrays
from ..events.event import Event
from .background import event_threshold

logger = logging.getLogger(__name__)


class EventSegmenter:
    """Scans a power series and emits chronologically ordered events."""

    def __init__(self, config: Optional[DisaggregationConfig] = None,
                 event_ids: Optional[IdCounter] = None):
        self.config = config or DisaggregationConfig()
        self.event_ids = event_ids or IdCounter()
        self.threshold = None

    def segment(self, active_power, reactive_power, log=None) -> List[Event]:
        """
        Split the series into events.

        Args:
            active_power: Active power samples
            reactive_power: Reactive power samples (same length)
            log: Optional logger, defaults to the module logger

        Returns:
            List of Event objects in chronological order
        """
        log = log or logger
        cfg = self.config
        validate_power_arrays(active_power, reactive_power)
        active = np.asarray(active_power, dtype=float)
        reactive = np.asarray(reactive_power, dtype=float)
        n = active.size

        self.threshold = event_threshold(
            active, cfg.background_offset, cfg.threshold_estimator,
            cfg.samples_per_day, cfg.background_multiplier)
        thr = self.threshold

        events = []
        start = end = -1
        started = False

        for i in range(n):
            if not started and active[i] > thr:
                start = i - 1
                started = True
            elif started and active[i] <= thr:
                lookahead = active[i + 1:min(i + cfg.event_time_limit, n)]
                if np.any(lookahead > thr):
                    continue
                end = i
                event = self._close(active, reactive, start, end, thr, log)
                if event is not None:
                    events.append(event)
                start = end = -1
                started = False

        if started:
            log.debug(f"Discarding incomplete event starting at {start}")

        log.info(f"Segmented {len(events)} events (threshold {thr:.1f}W, {n} samples)")
        return events

    def _close(self, active, reactive, start, end, thr, log) -> Optional[Event]:
        cfg = self.config
        if start < 0:
            log.debug(f"Discarding event ending at {end}: series starts above threshold")
            return None

        mean_active = float(active[start:end + 1].mean())
        if mean_active < thr:
            log.debug(f"Discarding span {start}-{end}: mean {mean_active:.1f}W below threshold")
            return None

        # duration counts both boundary samples
        duration = end - start + 1
        if cfg.remove_large_events and duration >= cfg.large_event_threshold:
            log.info(f"Removing large event {start}-{end} ({duration} minutes)")
            return None

        return Event(
            id=self.event_ids.next(),
            start_minute=start,
            end_minute=end,
            active_power=active[start:end + 1].copy(),
            reactive_power=reactive[start:end + 1].copy(),
        )
