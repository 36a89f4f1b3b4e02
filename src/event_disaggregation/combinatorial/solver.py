"""
Weighted set-packing solver capability.

``SetPackingSolver.solve`` receives a candidates x points 0/1 matrix and an
integer cost per candidate, and returns the indices of the selected
candidates maximizing total cost with every point covered at most once
(``exact=False``) or exactly once (``exact=True``). An empty list means no
solution.
"""
import logging
from typing import List, Optional, Sequence

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp

logger = logging.getLogger(__name__)


class SetPackingSolver:
    """Interface for set-packing solvers."""

    def solve(self, matrix, costs: Sequence[int], exact: bool) -> List[int]:
        raise NotImplementedError


class MilpSetPackingSolver(SetPackingSolver):
    """Set packing through ``scipy.optimize.milp`` (HiGHS branch and bound)."""

    def __init__(self, time_limit: Optional[float] = None):
        self.time_limit = time_limit

    def solve(self, matrix, costs: Sequence[int], exact: bool) -> List[int]:
        matrix = np.asarray(matrix, dtype=float)
        if matrix.ndim != 2 or matrix.shape[0] == 0:
            return []
        n_candidates, n_points = matrix.shape

        lower = np.ones(n_points) if exact else np.zeros(n_points)
        constraint = LinearConstraint(matrix.T, lower, np.ones(n_points))
        options = {'mip_rel_gap': 0}
        if self.time_limit is not None:
            options['time_limit'] = self.time_limit

        try:
            res = milp(
                c=-np.asarray(costs, dtype=float),
                constraints=[constraint],
                integrality=np.ones(n_candidates),
                bounds=Bounds(0, 1),
                options=options,
            )
        except ValueError as exc:
            logger.warning(f"Set-packing solve failed: {exc}")
            return []

        if res.x is None:
            logger.debug(f"No set-packing solution ({'exact' if exact else 'partial'}): {res.message}")
            return []
        return [k for k in range(n_candidates) if res.x[k] > 0.5]
