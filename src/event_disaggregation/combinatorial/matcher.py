"""
Combinatorial matcher: resolves the points the shape cascade left open.

Small sets are solved directly (``SimpleSolution``). Large sets are split into
chronological clusters for every cluster-count bias in the configured range;
the bias with the lowest overall distance wins (first one on ties).
"""
import logging
import math
from typing import List, Optional, Tuple, Union

from ..matching.result import Pair, StageContext
from ..points.poi import PointOfInterest
from .solution import ComplexSolution, SimpleSolution
from .solver import MilpSetPackingSolver, SetPackingSolver

logger = logging.getLogger(__name__)


class CombinatorialMatcher:
    """Set-packing based matcher for ambiguous points of one event."""

    def __init__(self, ctx: Optional[StageContext] = None, solver: Optional[SetPackingSolver] = None):
        self.ctx = ctx or StageContext()
        self.config = self.ctx.config
        self.solver = solver or MilpSetPackingSolver(time_limit=self.config.solver_time_limit)

    def bias_range(self, n_points: int) -> range:
        base = math.ceil(n_points / self.config.max_points_of_interest)
        start = max(self.config.min_cluster_bias, 1 - base)
        return range(start, self.config.max_cluster_bias + 1)

    def solve(self, points: List[PointOfInterest]) -> Union[SimpleSolution, ComplexSolution]:
        """Simple solution below the cluster size, otherwise the best bias of the sweep."""
        log = self.ctx.log
        if len(points) < self.config.max_points_of_interest:
            solution = SimpleSolution.solve(points, self.config, self.solver, log)
            log.debug(f"Simple solution: {'partial' if solution.choose_partial else 'full'}, "
                      f"distance {solution.distance:.4f}")
            return solution

        best = None
        for bias in self.bias_range(len(points)):
            candidate = ComplexSolution.solve(points, bias, self.config, self.solver, log)
            previous = best.distance if best is not None else math.inf
            log.debug(f"Bias {bias}: previous distance {previous:.4f} new distance {candidate.distance:.4f}")
            if best is None or candidate.distance < best.distance:
                best = candidate
        return best

    def resolve(self, points: List[PointOfInterest]) -> Tuple[List[Pair], float]:
        """
        Solve the set-packing problem for chronological ``points``.

        Returns:
            Tuple of (final pairs, overall normalized distance)
        """
        solution = self.solve(points)
        return solution.extract_pairs(self.ctx), solution.distance

    def match(self, event) -> List[Pair]:
        """
        Resolve the open points of ``event``.

        Produced pairs are appended to ``final_pairs``. A point consumed by a
        selected candidate counts as matched even when its pairs carry
        synthesized splits instead of the point itself; every other open point
        moves to ``unmatched_points``. Both open sets are empty afterwards.
        """
        log = self.ctx.log
        points = event.open_points()
        log.info(f"Before Combinations: Rising {len(event.rising_points)} "
                 f"Reduction Points: {len(event.reduction_points)}")

        pairs = []
        used = set()
        if len(points) > 1 and event.rising_points and event.reduction_points:
            solution = self.solve(points)
            pairs = solution.extract_pairs(self.ctx)
            used = set(solution.covered_points())
            log.info(f"Extracted Pair Size: {len(pairs)} (distance {solution.distance:.4f})")
            event.add_pairs('combinations', pairs)
        elif len(points) < 2:
            log.debug("Not many POIs")
        elif not event.rising_points:
            log.debug("No Rising Points")
        else:
            log.debug("No Reduction Points")

        event.unmatched_points.extend(p for p in points if p not in used)
        event.rising_points = []
        event.reduction_points = []
        log.info(f"After Combinations: matched {len(used)} of {len(points)} points, "
                 f"{len(event.unmatched_points)} unmatched")
        return pairs
