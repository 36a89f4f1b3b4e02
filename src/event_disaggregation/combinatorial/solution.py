"""
Set-packing solutions over a list of points.

``solve_points`` formulates and solves one problem; ``SimpleSolution`` and
``ComplexSolution`` arbitrate between partial (at-most-once) and full
(exactly-once) coverage for small and decomposed point sets.
"""
from dataclasses import dataclass, field
import logging
import math
from typing import List, Optional

from ..points.poi import PointOfInterest, sort_chronologically
from .candidates import Candidate, generate_candidates, incidence_matrix
from .decomposition import chronological_clusters, create_final_pairs, trim_cluster
from .solver import SetPackingSolver

logger = logging.getLogger(__name__)


@dataclass
class Solution:
    """Result of one solver invocation."""
    points: List[PointOfInterest]
    candidates: List[Candidate]
    selected: List[int]
    remaining: List[PointOfInterest]
    exact: bool = False

    @property
    def has_solution(self) -> bool:
        return bool(self.selected)

    @property
    def matched_distance(self) -> float:
        """Sum of per-point candidate distances; infinite without a solution."""
        if not self.selected:
            return math.inf
        return sum(self.candidates[k].distance / self.candidates[k].size for k in self.selected)

    def distance(self, penalty: Optional[float] = None) -> float:
        """Normalized distance, plus ``penalty`` per watt of every remaining point when given."""
        total = self.matched_distance
        if penalty is not None:
            total += sum(abs(p.p_diff) * penalty for p in self.remaining)
        return total

    def extract_pairs(self, ctx):
        pairs = []
        for k in self.selected:
            pairs.extend(create_final_pairs(self.points, self.candidates[k].indices(), ctx))
        return pairs

    def covered_points(self) -> List[PointOfInterest]:
        """Input points consumed by the selected candidates, synthesized splits aside."""
        covered = 0
        for k in self.selected:
            covered |= self.candidates[k].mask
        return [p for k, p in enumerate(self.points) if covered >> k & 1]


def solve_points(points: List[PointOfInterest], threshold: float, exact: bool,
                 config, solver: SetPackingSolver, log=None) -> Solution:
    """
    Generate candidates for ``points`` and solve the set-packing problem.

    An empty candidate set, or no returned selection, leaves every point remaining.
    """
    log = log or logger
    candidates = generate_candidates(points, threshold, config)
    mode = 'FULL' if exact else 'PARTIAL'
    log.debug(f"{mode} solve: {len(points)} points, {len(candidates)} candidates (threshold {threshold})")

    selected = []
    if candidates:
        matrix = incidence_matrix(candidates, len(points))
        costs = [int(config.cost_scale * c.weight) for c in candidates]
        selected = sorted(solver.solve(matrix, costs, exact))

    covered = 0
    for k in selected:
        covered |= candidates[k].mask
    remaining = [p for k, p in enumerate(points) if not covered >> k & 1]
    return Solution(list(points), candidates, selected, remaining, exact)


def full_is_acceptable(full: Optional[Solution], full_distance: float,
                       partial_distance: float, margin: float) -> bool:
    """Full coverage wins when it exists and is at most ``margin`` worse than partial."""
    if full is None or not full.has_solution:
        return False
    return full_distance - partial_distance <= margin


# ============================================================================
# Small point sets
# ============================================================================

@dataclass
class SimpleSolution:
    """
    Partial solve, optional second level over its leftovers, and a full solve
    over the whole set when anything is left unmatched.
    """
    levels: List[Solution] = field(default_factory=list)
    full: Optional[Solution] = None
    choose_partial: bool = True
    distance: float = math.inf
    remaining: List[PointOfInterest] = field(default_factory=list)

    @classmethod
    def solve(cls, points, config, solver, log=None) -> 'SimpleSolution':
        log = log or logger
        result = cls()
        partial = solve_points(points, config.distance_threshold, False, config, solver, log)
        result.levels.append(partial)

        if partial.remaining:
            result.full = solve_points(points, config.perfect_match_distance_threshold, True,
                                       config, solver, log)

        if len(partial.remaining) > config.add_cluster_threshold:
            second = solve_points(partial.remaining, config.second_distance_threshold, True,
                                  config, solver, log)
            result.levels.append(second)

        penalty = config.remaining_points_power_penalty
        if len(result.levels) == 1:
            partial_distance = partial.distance(penalty)
        else:
            # leftovers of the first level are accounted for by the second
            partial_distance = partial.matched_distance + result.levels[1].distance(penalty)
        full_distance = result.full.distance(penalty) if result.full is not None else math.inf

        log.debug(f"Full distance {full_distance:.4f} Partial distance {partial_distance:.4f}")
        if full_is_acceptable(result.full, full_distance, partial_distance, config.acceptance_full_threshold):
            result.choose_partial = False
            result.distance = full_distance
            result.remaining = []
        else:
            result.distance = partial_distance
            result.remaining = list(result.levels[-1].remaining)
        return result

    def extract_pairs(self, ctx):
        if not self.choose_partial:
            return self.full.extract_pairs(ctx)
        pairs = []
        for level in self.levels:
            pairs.extend(level.extract_pairs(ctx))
        return pairs

    def covered_points(self) -> List[PointOfInterest]:
        if not self.choose_partial:
            return self.full.covered_points()
        return [p for level in self.levels for p in level.covered_points()]


# ============================================================================
# Large point sets
# ============================================================================

def solve_cluster(points, config, solver, log=None) -> Solution:
    """Partial solve of one cluster, replaced by a full solve when close enough."""
    partial = solve_points(points, config.distance_threshold, False, config, solver, log)
    if not partial.remaining:
        return partial
    full = solve_points(points, config.second_distance_threshold, True, config, solver, log)
    if full_is_acceptable(full, full.distance(), partial.distance(), config.acceptance_full_threshold):
        return full
    return partial


@dataclass
class ComplexSolution:
    """Cluster-by-cluster solution of a large point set for one cluster-count bias."""
    bias: int
    clusters: List[List[PointOfInterest]] = field(default_factory=list)
    solutions: List[Solution] = field(default_factory=list)
    remaining: List[PointOfInterest] = field(default_factory=list)
    distance: float = 0.0

    @classmethod
    def solve(cls, points, bias: int, config, solver, log=None) -> 'ComplexSolution':
        """
        Decompose ``points`` into ``ceil(n / max_points_of_interest) + bias``
        chronological clusters and solve them in order.

        Points trimmed from an oversized cluster, and points a cluster leaves
        unmatched, move into the next cluster. After the last cluster, enough
        leftovers (with a finite last solve) form one more cluster; otherwise
        they stay remaining.
        """
        log = log or logger
        result = cls(bias=bias)
        n_clusters = math.ceil(len(points) / config.max_points_of_interest) + bias
        clusters = chronological_clusters(points, n_clusters)
        result.clusters = clusters
        log.debug(f"Clusters: {len(points)} / {config.max_points_of_interest} + {bias} = {len(clusters)}")

        i = 0
        while i < len(clusters):
            is_last = i == len(clusters) - 1
            kept, removed = trim_cluster(clusters[i], config.removal_max_points)
            clusters[i] = kept
            if removed:
                if is_last:
                    result.remaining.extend(removed)
                else:
                    clusters[i + 1] = sort_chronologically(clusters[i + 1] + removed)

            solution = solve_cluster(clusters[i], config, solver, log)
            result.solutions.append(solution)
            leftovers = solution.remaining

            if leftovers:
                if not is_last:
                    clusters[i + 1] = sort_chronologically(clusters[i + 1] + leftovers)
                elif (len(leftovers) + len(result.remaining) > config.add_cluster_threshold
                      and math.isfinite(solution.distance())):
                    clusters.append(sort_chronologically(leftovers + result.remaining))
                    result.remaining = []
                else:
                    result.remaining.extend(leftovers)
            i += 1

        result.remaining = sort_chronologically(result.remaining)
        finite = [s.distance() for s in result.solutions if math.isfinite(s.distance())]
        result.distance = sum(finite) + sum(
            abs(p.p_diff) * config.remaining_points_power_penalty for p in result.remaining)
        return result

    def extract_pairs(self, ctx):
        pairs = []
        for solution in self.solutions:
            pairs.extend(solution.extract_pairs(ctx))
        return pairs

    def covered_points(self) -> List[PointOfInterest]:
        return [p for solution in self.solutions for p in solution.covered_points()]
