"""Set-packing matcher for the points the shape cascade could not resolve."""

from .candidates import Candidate, generate_candidates, incidence_matrix
from .solver import SetPackingSolver, MilpSetPackingSolver
from .decomposition import chronological_clusters, trim_cluster, create_final_pairs
from .solution import Solution, SimpleSolution, ComplexSolution, solve_points, solve_cluster
from .matcher import CombinatorialMatcher

__all__ = [
    'Candidate',
    'generate_candidates',
    'incidence_matrix',
    'SetPackingSolver',
    'MilpSetPackingSolver',
    'chronological_clusters',
    'trim_cluster',
    'create_final_pairs',
    'Solution',
    'SimpleSolution',
    'ComplexSolution',
    'solve_points',
    'solve_cluster',
    'CombinatorialMatcher',
]
