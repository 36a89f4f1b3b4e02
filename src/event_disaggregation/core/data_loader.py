"""
Input preparation for the disaggregation engine.

Turns a time-ordered measurement series (DataFrame or triples) into the two
aligned dense arrays the engine consumes.
"""
from typing import Iterable, Tuple, Union

import numpy as np
import pandas as pd

TIMESTAMP_COLUMN = 'timestamp'
ACTIVE_COLUMN = 'active'
REACTIVE_COLUMN = 'reactive'


def prepare_power_arrays(
    data: Union[pd.DataFrame, Iterable[Tuple[int, float, float]]],
    timestamp_column: str = TIMESTAMP_COLUMN,
    active_column: str = ACTIVE_COLUMN,
    reactive_column: str = REACTIVE_COLUMN,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Build aligned active/reactive arrays from a measurement series.

    Duplicate timestamps are resolved last-write-wins. Gaps are not
    interpolated: the dense arrays only contain the timestamps present.

    Args:
        data: DataFrame with timestamp/active/reactive columns, or an iterable
            of ``(timestamp_index, active, reactive)`` triples
        timestamp_column: Name of the timestamp column
        active_column: Name of the active power column
        reactive_column: Name of the reactive power column

    Returns:
        Tuple of (timestamps, active, reactive) numpy arrays

    Raises:
        ValueError: If columns are missing, timestamps decrease, or values are not finite
    """
    if isinstance(data, pd.DataFrame):
        missing = [c for c in (timestamp_column, active_column, reactive_column) if c not in data.columns]
        if missing:
            raise ValueError(f"Missing columns: {missing}")
        frame = data[[timestamp_column, active_column, reactive_column]].copy()
        frame.columns = [TIMESTAMP_COLUMN, ACTIVE_COLUMN, REACTIVE_COLUMN]
    else:
        frame = pd.DataFrame(list(data), columns=[TIMESTAMP_COLUMN, ACTIVE_COLUMN, REACTIVE_COLUMN])

    frame = frame.reset_index(drop=True)

    timestamps = frame[TIMESTAMP_COLUMN]
    if len(timestamps) > 1 and not timestamps.is_monotonic_increasing:
        raise ValueError("Timestamps must be non-decreasing")

    frame = frame.drop_duplicates(subset=TIMESTAMP_COLUMN, keep='last')

    try:
        active = frame[ACTIVE_COLUMN].to_numpy(dtype=float)
        reactive = frame[REACTIVE_COLUMN].to_numpy(dtype=float)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Power columns must be numeric: {exc}") from exc

    validate_power_arrays(active, reactive)
    return frame[TIMESTAMP_COLUMN].to_numpy(), active, reactive


def validate_power_arrays(active, reactive) -> None:
    """Reject mismatched, multi-dimensional or non-finite power arrays."""
    active = np.asarray(active, dtype=float)
    reactive = np.asarray(reactive, dtype=float)

    if active.ndim != 1 or reactive.ndim != 1:
        raise ValueError("Power arrays must be one-dimensional")
    if len(active) != len(reactive):
        raise ValueError(f"Mismatched lengths: active={len(active)}, reactive={len(reactive)}")
    if not (np.all(np.isfinite(active)) and np.all(np.isfinite(reactive))):
        raise ValueError("Power arrays contain NaN or infinite values")
