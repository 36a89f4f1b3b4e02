"""
Unit tests for points.poi: distance metrics and the PointOfInterest type.
"""
import math

import pytest

from event_disaggregation.points.poi import (
    PointOfInterest,
    negate,
    norm,
    pct_distance,
    sort_chronologically,
    vector_sum,
)


def _poi(id_, minute, p, q, rising=None):
    if rising is None:
        rising = p > 0
    return PointOfInterest(id_, minute, rising, float(p), float(q))


class TestPctDistance:

    def test_identical_vectors(self):
        assert pct_distance((1000, 200), (1000, 200)) == 0.0

    def test_normalized_by_first_operand(self):
        # |(10, 0)| / |(100, 0)| = 10%
        assert pct_distance((100, 0), (90, 0)) == pytest.approx(10.0)
        assert pct_distance((90, 0), (100, 0)) == pytest.approx(100 * 10 / 90)

    def test_zero_base(self):
        assert pct_distance((0, 0), (0, 0)) == 0.0
        assert math.isinf(pct_distance((0, 0), (1, 0)))

    def test_norm_and_negate(self):
        assert norm((3, 4)) == 5.0
        assert negate((3, -4)) == (-3, 4)


class TestPointOfInterest:

    def test_direction_and_vectors(self):
        rise = _poi(1, 0, 1000, 200)
        assert rise.direction == 'rising'
        assert rise.vector == (1000.0, 200.0)
        assert rise.negated() == (-1000.0, -200.0)

    def test_matching_reduction_distance(self):
        rise = _poi(1, 0, 1000, 200)
        red = _poi(2, 5, -1000, -200)
        assert rise.pct_distance(red.negated()) == 0.0
        assert rise.abs_distance((990, 200)) == pytest.approx(10.0)

    def test_identity_equality(self):
        a = _poi(1, 0, 100, 0)
        b = _poi(1, 0, 100, 0)
        assert a != b
        assert len({a, b}) == 2

    def test_vector_sum(self):
        points = [_poi(1, 0, -500, -100), _poi(2, 3, -500, -100)]
        assert vector_sum(points) == (-1000.0, -200.0)

    def test_sort_is_stable(self):
        a = _poi(1, 4, 100, 0)
        b = _poi(2, 2, -100, 0)
        c = _poi(3, 4, -50, 0)
        assert sort_chronologically([a, b, c]) == [b, a, c]
