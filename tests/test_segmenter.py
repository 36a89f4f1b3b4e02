"""
Unit tests for detection: background threshold, event segmentation and
input preparation.

Tests cover:
  1. estimate_background() / event_threshold(): minimum and daily estimators
  2. EventSegmenter.segment(): event boundaries, lookahead, noise spans
  3. prepare_power_arrays(): DataFrame and triple inputs, rejection of bad series
"""
import numpy as np
import pandas as pd
import pytest

from event_disaggregation.core.config import DisaggregationConfig
from event_disaggregation.core.data_loader import prepare_power_arrays
from event_disaggregation.core.ids import IdCounter
from event_disaggregation.detection.background import estimate_background, event_threshold
from event_disaggregation.detection.segmenter import EventSegmenter

# ============================================================================
# Helpers
# ============================================================================


def _segment(active, reactive=None, config=None, event_ids=None):
    if reactive is None:
        reactive = [0.0] * len(active)
    segmenter = EventSegmenter(config or DisaggregationConfig(), event_ids)
    return segmenter.segment(np.array(active, dtype=float), np.array(reactive, dtype=float))


# ============================================================================
# Background threshold
# ============================================================================


class TestBackground:

    def test_minimum_estimator(self):
        assert estimate_background([50, 20, 70]) == 20.0
        assert event_threshold([50, 20, 70], offset=30) == 50.0

    def test_daily_estimators(self):
        active = [10.0] * 4 + [50.0] * 4
        assert estimate_background(active, 'daily_median', samples_per_day=4) == 30.0
        assert estimate_background(active, 'daily_mean', samples_per_day=4) == 30.0

    def test_daily_threshold_switches_to_multiplier(self):
        active = [100.0] * 8
        # base 100 >= offset 30 -> 1.5 * base
        assert event_threshold(active, 30, 'daily_median', 4, 1.5) == 150.0
        # base 10 < offset 30 -> base + offset
        assert event_threshold([10.0] * 8, 30, 'daily_median', 4, 1.5) == 40.0

    def test_empty_series(self):
        assert estimate_background([]) == 0.0

    def test_unknown_estimator(self):
        with pytest.raises(ValueError):
            estimate_background([1, 2, 3], 'maximum')


# ============================================================================
# Segmentation
# ============================================================================


class TestSegmenter:

    def test_flat_curve_has_no_events(self):
        assert _segment([50, 50, 50]) == []

    def test_single_block(self):
        events = _segment([0, 0, 1000, 1000, 1000, 0, 0], [0, 0, 200, 200, 200, 0, 0])
        assert len(events) == 1
        event = events[0]
        assert (event.start_minute, event.end_minute) == (1, 5)
        np.testing.assert_array_equal(event.active_power, [0, 1000, 1000, 1000, 0])
        np.testing.assert_array_equal(event.reactive_power, [0, 200, 200, 200, 0])
        assert event.status == 'detected'

    def test_dip_inside_lookahead_does_not_split(self):
        events = _segment([0, 0, 1000, 1000, 10, 1000, 1000, 0, 0, 0])
        assert len(events) == 1
        assert (events[0].start_minute, events[0].end_minute) == (1, 7)

    def test_dip_beyond_lookahead_splits(self):
        active = [0, 0, 1000, 1000] + [0] * 6 + [1000, 1000, 0, 0]
        events = _segment(active)
        assert [(e.start_minute, e.end_minute) for e in events] == [(1, 4), (9, 12)]
        assert [e.id for e in events] == [1, 2]

    def test_series_starting_above_threshold_is_dropped(self):
        assert _segment([1000, 1000, 0, 0]) == []

    def test_incomplete_trailing_event_is_dropped(self):
        assert _segment([0, 0, 1000, 1000]) == []

    def test_low_mean_span_is_noise(self):
        # span [0, 40, 0] has mean 13.3W, below the 30W threshold
        assert _segment([0, 0, 40, 0, 0, 0, 0, 0]) == []

    def test_large_event_removal(self):
        config = DisaggregationConfig(remove_large_events=True, large_event_threshold=3)
        assert _segment([0, 0, 1000, 1000, 1000, 0, 0], config=config) == []

    def test_large_event_duration_counts_both_boundaries(self):
        series = [0, 0, 1000, 1000, 1000, 0, 0]
        at_threshold = DisaggregationConfig(remove_large_events=True, large_event_threshold=5)
        assert _segment(series, config=at_threshold) == []
        below_threshold = DisaggregationConfig(remove_large_events=True, large_event_threshold=6)
        assert len(_segment(series, config=below_threshold)) == 1

    def test_event_ids_are_run_scoped(self):
        ids = IdCounter()
        first = _segment([0, 0, 1000, 0, 0, 0, 0, 0], event_ids=ids)
        second = _segment([0, 0, 1000, 0, 0, 0, 0, 0], event_ids=ids)
        assert [e.id for e in first + second] == [1, 2]
        fresh = _segment([0, 0, 1000, 0, 0, 0, 0, 0])
        assert fresh[0].id == 1

    def test_events_are_chronological_and_disjoint(self):
        rng = np.random.default_rng(7)
        active = np.where(rng.random(500) > 0.7, 800.0, 5.0)
        events = _segment(active)
        for prev, curr in zip(events, events[1:]):
            assert prev.end_minute < curr.start_minute
        for event in events:
            assert len(event.active_power) == event.end_minute - event.start_minute + 1

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError):
            _segment([0, 1, 2], [0, 1])


# ============================================================================
# Input preparation
# ============================================================================


class TestPreparePowerArrays:

    def test_dataframe_input(self):
        df = pd.DataFrame({'timestamp': [0, 1, 2], 'active': [1, 2, 3], 'reactive': [0, 0, 1]})
        timestamps, active, reactive = prepare_power_arrays(df)
        np.testing.assert_array_equal(timestamps, [0, 1, 2])
        np.testing.assert_array_equal(active, [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(reactive, [0.0, 0.0, 1.0])

    def test_triples_with_duplicate_timestamps(self):
        timestamps, active, _ = prepare_power_arrays([(0, 1, 0), (1, 2, 0), (1, 5, 0), (2, 3, 0)])
        np.testing.assert_array_equal(timestamps, [0, 1, 2])
        np.testing.assert_array_equal(active, [1.0, 5.0, 3.0])

    def test_missing_column(self):
        with pytest.raises(ValueError, match='Missing columns'):
            prepare_power_arrays(pd.DataFrame({'timestamp': [0], 'active': [1]}))

    def test_decreasing_timestamps(self):
        with pytest.raises(ValueError):
            prepare_power_arrays([(1, 1, 0), (0, 2, 0)])

    def test_non_finite_values(self):
        with pytest.raises(ValueError):
            prepare_power_arrays([(0, 1, 0), (1, float('nan'), 0)])
