"""
Disaggregation configuration management.

Every empirical threshold used by the engine is a field of
``DisaggregationConfig``. Named presets live in ``PRESETS``.
"""
from dataclasses import dataclass, asdict, fields, replace
from typing import Dict, Any, Optional
import json
import os
from datetime import datetime

from . import constants as C

THRESHOLD_ESTIMATORS = ('minimum', 'daily_median', 'daily_mean')


@dataclass
class DisaggregationConfig:
    """Configuration for one disaggregation run."""
    name: str = 'default'
    description: str = 'Default thresholds'

    # Segmentation
    background_offset: float = C.BACKGROUND_THRESHOLD
    threshold_estimator: str = 'minimum'  # 'minimum', 'daily_median' or 'daily_mean'
    samples_per_day: int = C.MINUTES_PER_DAY
    background_multiplier: float = C.BACKGROUND_MULTIPLIER
    event_time_limit: int = C.EVENT_TIME_LIMIT
    remove_large_events: bool = False
    large_event_threshold: int = C.LARGE_EVENT_THRESHOLD

    # Extraction and cleaning
    derivative_limit: float = C.DERIVATIVE_LIMIT
    cleaning_threshold: Optional[float] = None  # None = automatic tuning
    default_threshold: float = C.DEFAULT_THRESHOLD
    difference_limit_active: float = C.DIFFERENCE_LIMIT_ACTIVE
    difference_limit_reactive: float = C.DIFFERENCE_LIMIT_REACTIVE
    old_difference_limit: float = C.OLD_DIFFERENCE_LIMIT
    max_reconstruction_zeros: Optional[int] = None  # None disables the zero-count guard

    # Shape cascade
    switching_threshold: float = C.SWITCHING_THRESHOLD
    switching_window: int = C.SWITCHING_WINDOW
    closeness_threshold: float = C.CLOSENESS_THRESHOLD
    temporal_threshold: int = C.TEMPORAL_THRESHOLD
    concentration_threshold: float = C.CONCENTRATION_THRESHOLD
    cluster_threshold: float = C.CLUSTER_THRESHOLD
    min_cluster_points: int = C.MIN_CLUSTER_POINTS
    chair_distance_threshold: float = C.CHAIR_DISTANCE_THRESHOLD
    inversed_chair_distance_threshold: float = C.INVERSED_CHAIR_DISTANCE_THRESHOLD
    triangle_distance_threshold: float = C.TRIANGLE_DISTANCE_THRESHOLD
    rectangle_distance_threshold: float = C.RECTANGLE_DISTANCE_THRESHOLD

    # Combinatorial matching
    pair_error_fringe: float = C.PAIR_ERROR_FRINGE
    near_zero: float = C.NEAR_ZERO
    max_points_limit: int = C.MAX_POINTS_LIMIT
    time_limited_pairing: bool = True
    distance_threshold: float = C.DISTANCE_THRESHOLD
    second_distance_threshold: float = C.SECOND_DISTANCE_THRESHOLD
    perfect_match_distance_threshold: float = C.PERFECT_MATCH_DISTANCE_THRESHOLD
    acceptance_full_threshold: float = C.ACCEPTANCE_FULL_THRESHOLD
    max_points_of_interest: int = C.MAX_POINTS_OF_INTEREST
    removal_max_points: int = C.REMOVAL_MAX_POINTS
    add_cluster_threshold: int = C.ADD_CLUSTER_THRESHOLD
    remaining_points_power_penalty: float = C.REMAINING_POINTS_POWER_PENALTY
    min_cluster_bias: int = C.MIN_CLUSTER_BIAS
    max_cluster_bias: int = C.MAX_CLUSTER_BIAS
    cost_scale: int = C.COST_SCALE
    solver_time_limit: float = C.SOLVER_TIME_LIMIT

    def __post_init__(self):
        if self.threshold_estimator not in THRESHOLD_ESTIMATORS:
            raise ValueError(f"Unknown threshold estimator: '{self.threshold_estimator}'. "
                             f"Available: {list(THRESHOLD_ESTIMATORS)}")
        if self.max_points_limit < 1:
            raise ValueError("max_points_limit must be at least 1")
        if self.max_points_of_interest < 1 or self.removal_max_points < 1:
            raise ValueError("cluster sizes must be positive")

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return asdict(self)

    def to_json(self, file_path: str):
        """Save config to JSON file."""
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DisaggregationConfig':
        """Create config from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_json(cls, file_path: str) -> 'DisaggregationConfig':
        with open(file_path) as f:
            return cls.from_dict(json.load(f))

    def replace(self, **changes) -> 'DisaggregationConfig':
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def with_cluster_size(self, points_per_cluster: int) -> 'DisaggregationConfig':
        """Resize clusters; the removal cap follows at 1.5x the cluster size."""
        return self.replace(
            max_points_of_interest=points_per_cluster,
            removal_max_points=(3 * points_per_cluster) // 2,
        )


# ============================================================================
# Presets
# ============================================================================

PRESETS = {
    'default': DisaggregationConfig(),

    'fixed_cleaning': DisaggregationConfig(
        name='fixed_cleaning',
        description='Fixed 30W cleaning threshold instead of automatic tuning',
        cleaning_threshold=30,
    ),

    'unbounded_pairing': DisaggregationConfig(
        name='unbounded_pairing',
        description='Combinatorial candidates without the temporal pairing window',
        time_limited_pairing=False,
    ),

    'strict_tuning': DisaggregationConfig(
        name='strict_tuning',
        description='Daily-median background and zero-count guard on curve reconstruction',
        threshold_estimator='daily_median',
        max_reconstruction_zeros=C.MAX_ZEROS_THRESHOLD,
    ),
}


def get_preset(name: str) -> DisaggregationConfig:
    """
    Get a preset configuration by name.

    Args:
        name: Preset name (e.g., 'default', 'fixed_cleaning')

    Returns:
        DisaggregationConfig object

    Raises:
        KeyError: If preset name not found
    """
    if name in PRESETS:
        return PRESETS[name]
    raise KeyError(f"Preset '{name}' not found. Available: {list(PRESETS.keys())}")


def list_presets() -> Dict[str, str]:
    """List available presets with descriptions."""
    return {name: config.description for name, config in PRESETS.items()}


def save_run_metadata(config: DisaggregationConfig, output_dir: str, run_id: str = None) -> str:
    """
    Save run metadata to output directory.

    Args:
        config: Configuration used for the run
        output_dir: Directory to save metadata
        run_id: Optional run identifier

    Returns:
        Path of the written metadata file
    """
    os.makedirs(output_dir, exist_ok=True)

    metadata = {
        'timestamp': datetime.now().isoformat(),
        'run_id': run_id,
        'config': config.to_dict(),
    }

    metadata_path = os.path.join(output_dir, 'run_metadata.json')
    with open(metadata_path, 'w') as f:
        json.dump(metadata, f, indent=2)
    return metadata_path
