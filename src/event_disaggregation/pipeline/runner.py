"""
Disaggregation runner: one processing run over a complete power series.

Handles:
- Run-scoped id counters and logger
- Event segmentation plus a duration check of the segmented events
- Per-event lifecycle with failures isolated to the offending event
"""
import logging
import time
import traceback
import uuid
from typing import List, Optional

import numpy as np
from tqdm import tqdm

from ..combinatorial.solver import SetPackingSolver
from ..core.config import DisaggregationConfig, get_preset
from ..core.data_loader import prepare_power_arrays
from ..core.ids import RunIds
from ..core.logging_setup import RunLogger, setup_logging
from ..detection.segmenter import EventSegmenter
from ..events.event import Event, STATUS_FAILED
from ..events.lifecycle import EventProcessor
from .output import events_to_dataframe, pairs_to_dataframe


class DisaggregationRunner:
    """Owns the state of one run: config, id counters, solver and logger."""

    def __init__(self, config: Optional[DisaggregationConfig] = None,
                 solver: Optional[SetPackingSolver] = None,
                 run_id: Optional[str] = None,
                 logger: Optional[logging.Logger] = None,
                 show_progress: bool = False):
        self.config = config or DisaggregationConfig()
        self.run_id = run_id or uuid.uuid4().hex[:8]
        self.ids = RunIds()
        self.logger = RunLogger(logger or logging.getLogger('event_disaggregation'), self.run_id)
        self.segmenter = EventSegmenter(self.config, self.ids.events)
        self.processor = EventProcessor(self.config, self.ids.points, solver)
        self.show_progress = show_progress

    def segment(self, active_power, reactive_power) -> List[Event]:
        events = self.segmenter.segment(active_power, reactive_power, log=self.logger)
        self._check_durations(events)
        return events

    def _check_durations(self, events: List[Event]):
        if not events:
            return
        durations = np.sort(np.array([e.duration for e in events]))
        self.logger.debug(f"Event durations: {durations.tolist()}")
        long_events = int(np.count_nonzero(durations > self.config.samples_per_day))
        if long_events:
            self.logger.warning(f"{long_events} events last longer than a day")

    def process(self, events: List[Event]) -> List[Event]:
        """Run every event through its lifecycle; a failing event is marked and skipped."""
        iterator = tqdm(events, desc=f"Events run_{self.run_id}", leave=False) if self.show_progress else events
        for event in iterator:
            event_log = self.logger.for_event(event.id)
            try:
                self.processor.process(event, log=event_log)
            except Exception as e:
                event.status = STATUS_FAILED
                event.error = str(e)
                event_log.error(f"Failed to process event: {e}")
                event_log.debug(traceback.format_exc())
                continue
        return events

    def run(self, active_power, reactive_power) -> List[Event]:
        start = time.time()
        events = self.process(self.segment(active_power, reactive_power))
        failed = sum(1 for e in events if e.status == STATUS_FAILED)
        pairs = sum(len(e.final_pairs) for e in events)
        self.logger.info(f"Processed {len(events)} events ({failed} failed), "
                         f"{pairs} final pairs in {time.time() - start:.1f}s")
        return events


def run_disaggregation(
    data,
    preset: str = 'default',
    config: Optional[DisaggregationConfig] = None,
    solver: Optional[SetPackingSolver] = None,
    run_id: Optional[str] = None,
    logs_directory: Optional[str] = None,
    quiet: bool = False,
) -> dict:
    """
    Run the full disaggregation over a measurement series.

    Args:
        data: DataFrame with timestamp/active/reactive columns, or an iterable
            of (timestamp_index, active, reactive) triples
        preset: Preset name, used when ``config`` is not given
        config: Explicit configuration
        solver: Set-packing solver (defaults to the scipy MILP solver)
        run_id: Optional run identifier
        logs_directory: Directory for the run log file
        quiet: If True, log warnings only and hide progress

    Returns:
        dict with results: {'success': bool, 'events': list, 'pairs': DataFrame,
        'summary': DataFrame, 'timestamps': ndarray, 'error': str or None}
    """
    try:
        config = config or get_preset(preset)
    except KeyError as e:
        return {'success': False, 'events': [], 'error': f"Unknown preset: {e}"}

    run_id = run_id or uuid.uuid4().hex[:8]
    logger = setup_logging(run_id, logs_directory, level=logging.WARNING if quiet else logging.INFO)

    try:
        timestamps, active, reactive = prepare_power_arrays(data)
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return {'success': False, 'events': [], 'error': str(e)}

    runner = DisaggregationRunner(config, solver, run_id, logger, show_progress=not quiet)
    events = runner.run(active, reactive)

    return {
        'success': True,
        'events': events,
        'pairs': pairs_to_dataframe(events, timestamps),
        'summary': events_to_dataframe(events),
        'timestamps': timestamps,
        'error': None,
    }
