"""Event entity and per-event processing."""

from .event import (
    Event,
    Pair,
    STATUS_DETECTED,
    STATUS_EXTRACTED,
    STATUS_MATCHED,
    STATUS_EMPTY,
    STATUS_FAILED,
)

__all__ = [
    'Event',
    'Pair',
    'STATUS_DETECTED',
    'STATUS_EXTRACTED',
    'STATUS_MATCHED',
    'STATUS_EMPTY',
    'STATUS_FAILED',
]
