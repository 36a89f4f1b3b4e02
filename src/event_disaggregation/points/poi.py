"""
Point of interest: an atomic active/reactive power transition.

Distances are percentages normalized by the magnitude of the first operand.
"""
from dataclasses import dataclass
import math
from typing import Iterable, Tuple

Vector = Tuple[float, float]


def norm(vector: Vector) -> float:
    return math.sqrt(vector[0] ** 2 + vector[1] ** 2)


def pct_distance(a: Vector, b: Vector) -> float:
    """100 * |a - b| / |a|; infinite when ``a`` is the zero vector and ``b`` is not."""
    diff = math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2)
    base = norm(a)
    if base == 0:
        return 0.0 if diff == 0 else math.inf
    return 100 * diff / base


def negate(vector: Vector) -> Vector:
    return (-vector[0], -vector[1])


def vector_sum(points: Iterable['PointOfInterest']) -> Vector:
    p = q = 0.0
    for point in points:
        p += point.p_diff
        q += point.q_diff
    return (p, q)


@dataclass(frozen=True, eq=False)
class PointOfInterest:
    """
    A detected rising or reduction transition inside one event.

    ``minute`` is the offset inside the event. Identity (not value) equality
    is used, so two points with identical deltas stay distinct.
    """
    id: int
    minute: int
    rising: bool
    p_diff: float
    q_diff: float
    synthetic: bool = False

    @property
    def direction(self) -> str:
        return 'rising' if self.rising else 'reduction'

    @property
    def vector(self) -> Vector:
        return (self.p_diff, self.q_diff)

    def negated(self) -> Vector:
        return (-self.p_diff, -self.q_diff)

    def norm(self) -> float:
        return norm(self.vector)

    def pct_distance(self, other: Vector) -> float:
        """Percentage distance of ``other`` from this point's deltas."""
        return pct_distance(self.vector, other)

    def abs_distance(self, other: Vector) -> float:
        return math.sqrt((self.p_diff - other[0]) ** 2 + (self.q_diff - other[1]) ** 2)

    def __repr__(self):
        kind = 'R' if self.rising else 'D'
        return f"POI{self.id}({kind}@{self.minute}: {self.p_diff:.1f}W, {self.q_diff:.1f}VAr)"


def sort_chronologically(points):
    """Stable sort by minute; insertion order breaks ties."""
    return sorted(points, key=lambda point: point.minute)
