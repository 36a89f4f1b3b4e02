"""
Unit tests for the matching stages.

Tests cover:
  1. remove_switching_pairs(): flicker detection window and traceability
  2. match_direct_pairs(): claims, conflicts and the temporal window
  3. fold_dense_clusters(): dense span folding
  4. detect_basic_shapes(): chairs, inverted chairs, triangles, rectangles
  5. run_shape_cascade(): stage order and point conservation on an event
"""
import logging

import numpy as np

from event_disaggregation.core.config import DisaggregationConfig
from event_disaggregation.core.ids import IdCounter
from event_disaggregation.core.logging_setup import RunLogger
from event_disaggregation.events.event import Event
from event_disaggregation.matching import (
    StageContext,
    detect_basic_shapes,
    fold_dense_clusters,
    match_direct_pairs,
    remove_switching_pairs,
    run_shape_cascade,
)
from event_disaggregation.points.poi import PointOfInterest

# ============================================================================
# Helpers
# ============================================================================


class _Points:
    """Builds points with increasing ids; the sign of p decides the direction."""

    def __init__(self):
        self.ids = IdCounter()

    def __call__(self, minute, p, q=0.0):
        return PointOfInterest(self.ids.next(), minute, p > 0, float(p), float(q))


def _ctx(**overrides):
    return StageContext(config=DisaggregationConfig(**overrides), point_ids=IdCounter(start=1000))


def _make_event(points):
    event = Event(id=1, start_minute=0, end_minute=100,
                  active_power=np.zeros(101), reactive_power=np.zeros(101))
    event.set_open_points(points)
    return event


# ============================================================================
# Switching
# ============================================================================


class TestSwitching:

    def test_flicker_pair_is_discarded(self):
        poi = _Points()
        red = poi(10, -500, -50)
        rise = poi(12, 500, 50)
        other = poi(30, 200)
        result = remove_switching_pairs([red, rise, other], _ctx())
        assert result.discarded == [(red, rise)]
        assert result.remaining == [other]
        assert result.pairs == []

    def test_rise_outside_window_is_kept(self):
        poi = _Points()
        points = [poi(10, -500), poi(15, 500)]
        result = remove_switching_pairs(points, _ctx())
        assert result.discarded == []
        assert result.remaining == points

    def test_rise_before_reduction_is_not_switching(self):
        poi = _Points()
        points = [poi(8, 500), poi(10, -500)]
        assert remove_switching_pairs(points, _ctx()).discarded == []

    def test_closest_rise_wins(self):
        poi = _Points()
        red = poi(10, -500)
        far = poi(11, 540)
        near = poi(12, 505)
        result = remove_switching_pairs([red, far, near], _ctx())
        assert result.discarded == [(red, near)]
        assert result.remaining == [far]


# ============================================================================
# Direct matching
# ============================================================================


class TestDirectMatching:

    def test_identical_pair(self):
        poi = _Points()
        rise, red = poi(0, 1000, 200), poi(5, -1000, -200)
        small_rise, small_red = poi(6, 300), poi(8, -500)
        result = match_direct_pairs([rise, red, small_rise, small_red], _ctx())
        assert result.pairs_by_shape == {'matching': [(rise, red)]}
        assert result.remaining == [small_rise, small_red]

    def test_conflict_goes_to_closest_rise(self):
        poi = _Points()
        exact, near, red = poi(0, 1000), poi(1, 1020), poi(5, -1000)
        result = match_direct_pairs([exact, near, red], _ctx())
        assert result.pairs == [(exact, red)]
        assert result.remaining == [near]

    def test_reduction_before_rise_is_ignored(self):
        poi = _Points()
        points = [poi(0, -1000), poi(5, 1000)]
        assert match_direct_pairs(points, _ctx()).pairs == []

    def test_temporal_window(self):
        poi = _Points()
        points = [poi(0, 1000), poi(200, -1000)]
        assert match_direct_pairs(points, _ctx()).pairs == []
        assert len(match_direct_pairs(points, _ctx(temporal_threshold=300)).pairs) == 1


# ============================================================================
# Dense clusters
# ============================================================================


class TestClusters:

    def test_dense_span_is_folded(self):
        poi = _Points()
        points = [poi(0, 1000), poi(1, 100), poi(2, -100), poi(3, 50), poi(4, -50), poi(5, -1000)]
        result = fold_dense_clusters(points, _ctx())
        assert result.pairs_by_shape == {'clusters': [(points[0], points[5])]}
        assert result.remaining == []

    def test_sparse_span_is_kept(self):
        poi = _Points()
        points = [poi(0, 1000), poi(10, 100), poi(20, -100), poi(30, 50), poi(40, -50), poi(50, -1000)]
        result = fold_dense_clusters(points, _ctx())
        assert result.pairs == []
        assert result.remaining == points

    def test_unbalanced_interior_is_kept(self):
        poi = _Points()
        points = [poi(0, 1000), poi(1, 400), poi(2, 400), poi(3, -1000)]
        assert fold_dense_clusters(points, _ctx()).pairs == []

    def test_too_few_points(self):
        poi = _Points()
        points = [poi(0, 1000), poi(1, -1000)]
        assert fold_dense_clusters(points, _ctx()).remaining == points


# ============================================================================
# Basic shapes
# ============================================================================


class TestBasicShapes:

    def test_chair_splits_the_rise(self):
        poi = _Points()
        rise, red1, red2 = poi(0, 1000, 100), poi(3, -400, -40), poi(5, -600, -60)
        result = detect_basic_shapes([rise, red1, red2], _ctx())
        pairs = result.pairs_by_shape['chairs']
        assert [pair[1] for pair in pairs] == [red1, red2]
        for start, red in pairs:
            assert start.synthetic and start.rising
            assert start.minute == rise.minute
            assert start.vector == red.negated()
        assert result.remaining == []

    def test_inverted_chair_splits_the_reduction(self):
        poi = _Points()
        rise1, rise2, red = poi(0, 400), poi(2, 600), poi(6, -1000)
        result = detect_basic_shapes([rise1, rise2, red], _ctx())
        pairs = result.pairs_by_shape['inverted_chairs']
        assert [pair[0] for pair in pairs] == [rise1, rise2]
        for rise, end in pairs:
            assert end.synthetic and not end.rising
            assert end.minute == red.minute
            assert end.vector == rise.negated()

    def test_triangle_and_rectangle(self):
        poi = _Points()
        tri = [poi(3, 500), poi(4, -540)]
        rect = [poi(20, 300), poi(30, -320)]
        result = detect_basic_shapes(tri + rect, _ctx())
        assert result.pairs_by_shape['triangles'] == [tuple(tri)]
        assert result.pairs_by_shape['rectangles'] == [tuple(rect)]
        assert result.remaining == []

    def test_synthetic_ids_are_fresh(self):
        poi = _Points()
        ctx = _ctx()
        result = detect_basic_shapes([poi(0, 1000), poi(3, -400), poi(5, -600)], ctx)
        ids = [pair[0].id for pair in result.pairs]
        assert ids == [1000, 1001]
        assert ctx.point_ids.last == 1001


# ============================================================================
# Cascade
# ============================================================================


class TestCascade:

    def _cascade_points(self):
        poi = _Points()
        return [
            poi(0, 1000, 200), poi(5, -1000, -200),      # direct pair
            poi(10, -500, -50), poi(12, 500, 50),        # switching flicker
            poi(20, 400), poi(22, 600), poi(30, -1000),  # inverted chair
            poi(40, 300, 30),                            # left open
        ]

    def test_stage_results(self):
        points = self._cascade_points()
        event = _make_event(points)
        run_shape_cascade(event, _ctx())

        assert event.shape_counts == {'matching': 1, 'inverted_chairs': 2}
        assert event.switching_pairs == [(points[2], points[3])]
        assert event.rising_points == [points[7]]
        assert event.reduction_points == []

    def test_every_point_is_accounted_for_once(self):
        points = self._cascade_points()
        event = _make_event(points)
        run_shape_cascade(event, _ctx())

        seen = [p for pair in event.final_pairs for p in pair if not p.synthetic]
        seen += [p for pair in event.switching_pairs for p in pair]
        seen += event.open_points()
        ids = [p.id for p in seen]
        assert len(ids) == len(set(ids))
        # the inverted chair's reduction is replaced by two synthesized ends
        shared_end = points[6]
        assert set(ids) | {shared_end.id} == {p.id for p in points}
        ends = [red for _, red in event.final_pairs if red.synthetic]
        assert all(red.minute == shared_end.minute for red in ends)

    def test_pairs_are_rise_then_reduction(self):
        event = _make_event(self._cascade_points())
        run_shape_cascade(event, _ctx())
        for rise, red in event.final_pairs:
            assert rise.rising and not red.rising
            assert rise.minute <= red.minute

    def test_one_direction_stops_after_switching(self):
        poi = _Points()
        event = _make_event([poi(0, 500), poi(1, 400)])
        calls = []

        def recording(name):
            def stage(points, ctx):
                calls.append(name)
                return match_direct_pairs(points, ctx)
            return stage

        stages = [(name, recording(name)) for name in ('first', 'second', 'third')]
        run_shape_cascade(event, _ctx(), stages=stages)
        assert calls == ['first']
        assert len(event.rising_points) == 2

    def test_stage_logs_carry_the_event_prefix(self, caplog):
        base = logging.getLogger('event_disaggregation.test_cascade_prefix')
        ctx = StageContext(config=DisaggregationConfig(), point_ids=IdCounter(start=1000),
                           log=RunLogger(base, 'abc').for_event(1))
        event = _make_event(self._cascade_points())
        with caplog.at_level(logging.INFO, logger=base.name):
            run_shape_cascade(event, ctx)
        assert "[run_abc/event_1] Before Switching" in caplog.text
        assert "[run_abc/event_1] After Basic" in caplog.text
