"""
Per-event lifecycle: extraction, shape cascade, combinatorial matching.

Each stage consumes points from the event's open sets; when the lifecycle
ends both open sets are empty and every point is either in a final pair, a
switching pair or ``unmatched_points``.
"""
import logging
from typing import Optional

from ..combinatorial.matcher import CombinatorialMatcher
from ..combinatorial.solver import MilpSetPackingSolver, SetPackingSolver
from ..core.config import DisaggregationConfig
from ..core.ids import IdCounter
from ..matching.cascade import run_shape_cascade
from ..matching.result import StageContext
from ..points.extractor import PoiExtractor
from .event import STATUS_EMPTY, STATUS_EXTRACTED, STATUS_MATCHED

logger = logging.getLogger(__name__)


class EventProcessor:
    """Drives events through every matching stage with shared run state."""

    def __init__(self, config: Optional[DisaggregationConfig] = None,
                 point_ids: Optional[IdCounter] = None,
                 solver: Optional[SetPackingSolver] = None):
        self.config = config or DisaggregationConfig()
        self.point_ids = point_ids or IdCounter()
        self.solver = solver or MilpSetPackingSolver(time_limit=self.config.solver_time_limit)
        self.extractor = PoiExtractor(self.config, self.point_ids)

    def process(self, event, log=None):
        """Run the full lifecycle on ``event`` (mutated in place) and return it."""
        log = log or logger
        ctx = StageContext(config=self.config, point_ids=self.point_ids, log=log)

        threshold = self.extractor.extract(event, log=log)
        event.status = STATUS_EXTRACTED
        mean_p, mean_q = event.mean_values()
        log.info(f"Threshold {threshold:.1f}W: Rising {len(event.rising_points)} "
                 f"Reduction Points: {len(event.reduction_points)} "
                 f"(mean {mean_p:.1f}W / {mean_q:.1f}VAr)")

        run_shape_cascade(event, ctx)
        CombinatorialMatcher(ctx, self.solver).match(event)

        event.sort_final_pairs()
        event.status = STATUS_MATCHED if event.final_pairs else STATUS_EMPTY
        log.info(f"Final pairs: {len(event.final_pairs)} ({event.shape_counts})")
        return event
