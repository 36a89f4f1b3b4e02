"""Run orchestration and downstream output frames."""

from .runner import DisaggregationRunner, run_disaggregation
from .output import pairs_to_dataframe, events_to_dataframe, shape_counts_to_dataframe

__all__ = [
    'DisaggregationRunner',
    'run_disaggregation',
    'pairs_to_dataframe',
    'events_to_dataframe',
    'shape_counts_to_dataframe',
]
