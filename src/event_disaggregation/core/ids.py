"""Run-scoped id counters for events and points of interest."""
from dataclasses import dataclass, field
import itertools


@dataclass
class IdCounter:
    """Monotonic counter starting at ``start``; one instance per run and entity kind."""
    start: int = 1
    _counter: itertools.count = field(init=False, repr=False)
    last: int = field(init=False, default=0)

    def __post_init__(self):
        self._counter = itertools.count(self.start)
        self.last = self.start - 1

    def next(self) -> int:
        self.last = next(self._counter)
        return self.last


@dataclass
class RunIds:
    """The counters owned by one processing run."""
    events: IdCounter = field(default_factory=IdCounter)
    points: IdCounter = field(default_factory=IdCounter)
