"""Core infrastructure for disaggregation runs."""

# Config
from .config import (
    DisaggregationConfig,
    get_preset,
    list_presets,
    save_run_metadata,
    PRESETS,
)

# Logging
from .logging_setup import (
    setup_logging,
    RunLogger,
)

# Ids
from .ids import IdCounter, RunIds

# Data loading
from .data_loader import prepare_power_arrays, validate_power_arrays

__all__ = [
    # Config
    'DisaggregationConfig',
    'get_preset',
    'list_presets',
    'save_run_metadata',
    'PRESETS',
    # Logging
    'setup_logging',
    'RunLogger',
    # Ids
    'IdCounter',
    'RunIds',
    # Data loading
    'prepare_power_arrays',
    'validate_power_arrays',
]
