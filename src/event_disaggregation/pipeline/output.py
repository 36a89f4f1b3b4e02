"""
Downstream output frames.

Flattens events and their final pairs into pandas DataFrames for the
appliance-identification collaborator. Serialization is left to the caller.
"""
from typing import List, Optional

import pandas as pd

PAIR_COLUMNS = [
    'event_id', 'event_start', 'rise_id', 'rise_minute', 'reduction_id', 'reduction_minute',
    'start', 'end', 'rise_p', 'rise_q', 'reduction_p', 'reduction_q',
    'synthetic_rise', 'synthetic_reduction',
]

EVENT_COLUMNS = [
    'event_id', 'start', 'end', 'duration', 'threshold', 'status', 'pairs',
    'switching_pairs', 'unmatched', 'error',
]


def pairs_to_dataframe(events: List, timestamps=None) -> pd.DataFrame:
    """
    One row per final pair.

    ``start``/``end`` are absolute sample offsets; when ``timestamps`` is
    given they are mapped to the corresponding timestamp values.
    """
    rows = []
    for event in events:
        for rise, reduction in event.final_pairs:
            start = event.start_minute + rise.minute
            end = event.start_minute + reduction.minute
            if timestamps is not None:
                start, end = timestamps[start], timestamps[end]
            rows.append({
                'event_id': event.id,
                'event_start': event.start_minute,
                'rise_id': rise.id,
                'rise_minute': rise.minute,
                'reduction_id': reduction.id,
                'reduction_minute': reduction.minute,
                'start': start,
                'end': end,
                'rise_p': rise.p_diff,
                'rise_q': rise.q_diff,
                'reduction_p': reduction.p_diff,
                'reduction_q': reduction.q_diff,
                'synthetic_rise': rise.synthetic,
                'synthetic_reduction': reduction.synthetic,
            })
    return pd.DataFrame(rows, columns=PAIR_COLUMNS)


def events_to_dataframe(events: List) -> pd.DataFrame:
    """One summary row per event."""
    rows = [{
        'event_id': event.id,
        'start': event.start_minute,
        'end': event.end_minute,
        'duration': event.duration,
        'threshold': event.threshold,
        'status': event.status,
        'pairs': len(event.final_pairs),
        'switching_pairs': len(event.switching_pairs),
        'unmatched': len(event.unmatched_points),
        'error': event.error,
    } for event in events]
    return pd.DataFrame(rows, columns=EVENT_COLUMNS)


def shape_counts_to_dataframe(events: List, shapes: Optional[List[str]] = None) -> pd.DataFrame:
    """Event x shape matrix of how many pairs each stage produced."""
    frame = pd.DataFrame(
        [dict(event.shape_counts, event_id=event.id) for event in events]
    )
    if frame.empty:
        return pd.DataFrame(columns=['event_id'] + (shapes or []))
    frame = frame.set_index('event_id').fillna(0).astype(int)
    if shapes:
        frame = frame.reindex(columns=shapes, fill_value=0)
    return frame.reset_index()
