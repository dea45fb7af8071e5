import logging
import threading
from collections import deque
from datetime import datetime
from typing import Iterable, Optional
import numpy as np
from PySide6.QtCore import QObject, Signal, Slot
from rrmonitor.utils import (
    NamedSignal,
    Sample,
    SampleView,
    HealthClassification,
    classify_value,
    healthiness_score,
    view_sample,
)
from rrmonitor.config import SERIES_CAPACITY, MIN_PLOT_RR, MAX_PLOT_RR

logger = logging.getLogger(__name__)


class RollingSeries(QObject):
    """Bounded, time-ordered window of RR-interval samples.

    Writers and readers share one lock. Readers only ever get immutable
    copies, so a bulk replacement is never observed half-done.
    """

    series_update = Signal(NamedSignal)

    def __init__(
        self, capacity: int = SERIES_CAPACITY, seed: Optional[Iterable[Sample]] = None
    ):
        super().__init__()
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ValueError(f"Capacity must be a positive integer, got {capacity}.")
        self.capacity: int = capacity
        self._lock = threading.Lock()
        # Once a bounded length deque is full, when new items are added,
        # a corresponding number of items are discarded from the opposite end.
        self._samples: deque[Sample] = deque(seed or (), capacity)

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    @Slot(object)
    def append(self, sample: Sample):
        with self._lock:
            self._samples.append(sample)
            snapshot = self._snapshot()
        self.series_update.emit(NamedSignal("RRIntervals", snapshot))

    @Slot(object)
    def replace_all(self, samples: Iterable[Sample]):
        replacement: deque[Sample] = deque(samples, self.capacity)
        with self._lock:
            self._samples = replacement
            snapshot = self._snapshot()
        logger.debug(f"Replaced series with {len(snapshot)} sample(s).")
        self.series_update.emit(NamedSignal("RRIntervals", snapshot))

    def latest(self) -> Optional[Sample]:
        with self._lock:
            return self._samples[-1] if self._samples else None

    def samples(self) -> tuple[Sample, ...]:
        with self._lock:
            return tuple(self._samples)

    def snapshot(self) -> tuple[SampleView, ...]:
        with self._lock:
            return self._snapshot()

    def as_arrays(self, now: Optional[datetime] = None) -> tuple[np.ndarray, np.ndarray]:
        """Return (seconds, values) for plotting, with seconds relative to
        `now` (negative for past samples)."""
        samples = self.samples()
        if now is None:
            now = samples[-1].timestamp if samples else datetime.now()
        seconds = np.array(
            [(s.timestamp - now).total_seconds() for s in samples], dtype=float
        )
        values = np.array([s.value for s in samples], dtype=float)
        return (seconds, values)

    def plot_range(self) -> tuple[float, float]:
        """Return the y-axis range for plotting: the healthiness band, widened
        to fit any samples outside it."""
        _, values = self.as_arrays()
        if not values.size:
            return (MIN_PLOT_RR, MAX_PLOT_RR)
        return (
            min(MIN_PLOT_RR, float(values.min())),
            max(MAX_PLOT_RR, float(values.max())),
        )

    @staticmethod
    def classify(sample: Sample) -> HealthClassification:
        return classify_value(sample.value)

    @staticmethod
    def healthiness_score(value: float) -> float:
        return healthiness_score(value)

    def _snapshot(self) -> tuple[SampleView, ...]:
        return tuple(view_sample(s) for s in self._samples)
