"""
Default values for every tunable threshold of the disaggregation engine.

All values are empirically tuned. They are the defaults of
``DisaggregationConfig``; code should read them from a config instance.
"""

# ============================================================================
# Background / event segmentation
# ============================================================================
BACKGROUND_THRESHOLD = 30          # watts added on top of the background level
EVENT_TIME_LIMIT = 5               # samples of lookahead before an event end is confirmed
MINUTES_PER_DAY = 1440             # samples per day (1-minute resolution)
LARGE_EVENT_THRESHOLD = MINUTES_PER_DAY  # minutes; only used when large-event removal is on
BACKGROUND_MULTIPLIER = 1.5        # daily-minimum estimators: threshold = 1.5 * base
                                   # once the base exceeds the offset

# ============================================================================
# Point of interest extraction
# ============================================================================
DERIVATIVE_LIMIT = 5               # percent change marking a significant sample

# ============================================================================
# Noise threshold tuning
# ============================================================================
DEFAULT_THRESHOLD = 10             # watts, used when no candidate is accepted
DIFFERENCE_LIMIT_ACTIVE = 10       # percent imbalance between summed rises/reductions (P)
DIFFERENCE_LIMIT_REACTIVE = 20     # percent imbalance between summed rises/reductions (Q)
OLD_DIFFERENCE_LIMIT = 10          # percent error of the reconstructed cumulative curve
MAX_ZEROS_THRESHOLD = 3            # zero samples rejecting a reconstruction (when enabled)

# ============================================================================
# Shape matching
# ============================================================================
SWITCHING_THRESHOLD = 10           # percent
SWITCHING_WINDOW = 5               # minutes after a reduction
CLOSENESS_THRESHOLD = 5            # percent, direct matching
TEMPORAL_THRESHOLD = 180           # minutes between the two ends of any pair
CONCENTRATION_THRESHOLD = 50       # points per 100 minutes
CLUSTER_THRESHOLD = 15             # percent
MIN_CLUSTER_POINTS = 4             # points inside a folded cluster (ends included)
CHAIR_DISTANCE_THRESHOLD = 10      # percent
INVERSED_CHAIR_DISTANCE_THRESHOLD = 10
TRIANGLE_DISTANCE_THRESHOLD = 10
RECTANGLE_DISTANCE_THRESHOLD = 10

# ============================================================================
# Combinatorial matching
# ============================================================================
PAIR_ERROR_FRINGE = 0.2            # eligible partner magnitude up to 120% of the anchor
NEAR_ZERO = 1.0e-6
MAX_POINTS_LIMIT = 4               # largest subset size enumerated per anchor
DISTANCE_THRESHOLD = 20            # percent, partial solutions
SECOND_DISTANCE_THRESHOLD = 30     # percent, full solutions inside clusters / second level
PERFECT_MATCH_DISTANCE_THRESHOLD = 60  # percent, full solution on a small set
ACCEPTANCE_FULL_THRESHOLD = 5      # full accepted if at most this much worse than partial
MAX_POINTS_OF_INTEREST = 15        # above this the set is decomposed into clusters
REMOVAL_MAX_POINTS = 15            # hard cap on cluster size after cleaning
ADD_CLUSTER_THRESHOLD = 5          # leftovers that justify one more solve
REMAINING_POINTS_POWER_PENALTY = 0.2  # distance per watt of an unmatched point
MIN_CLUSTER_BIAS = -2
MAX_CLUSTER_BIAS = 2
COST_SCALE = 10000                 # weight -> integer objective coefficient

# ============================================================================
# Solver
# ============================================================================
SOLVER_TIME_LIMIT = 30.0           # seconds per ILP solve
