import math
import logging
import threading
from datetime import datetime, timedelta
from typing import Optional, Sequence
from PySide6.QtCore import QObject, Signal, QTimer, Slot
from rrmonitor.model import RollingSeries
from rrmonitor.utils import Sample
from rrmonitor.config import (
    SIMULATION_BASE,
    SIMULATION_AMPLITUDE,
    SIMULATION_PERIOD,
    TICK_INTERVAL,
)

logger = logging.getLogger(__name__)


class SignalSource:
    """Produces RR intervals, either simulated or taken from an external
    batch. Never touches a buffer."""

    def __init__(
        self,
        base: float = SIMULATION_BASE,
        amplitude: float = SIMULATION_AMPLITUDE,
        period: float = SIMULATION_PERIOD,
    ):
        self.base = base
        self.amplitude = amplitude
        self.period = period

    def simulate_value(self, tick: int) -> float:
        """Sine wave around the center of the healthy range.

        With the default parameters the value swings between 0.5 and 1.1
        seconds, so both healthy and out-of-range intervals show up.
        """
        if tick < 0:
            raise ValueError(f"Tick must be non-negative, got {tick}.")
        return self.base + self.amplitude * math.sin(2 * math.pi * tick / self.period)

    def ingest_external(
        self, values: Sequence[float], now: Optional[datetime] = None
    ) -> Optional[list[Sample]]:
        """Stamp a chronological batch one second apart, ending one second
        before `now`. Returns None if there is no data."""
        if len(values) == 0:
            return None
        if now is None:
            now = datetime.now()
        n_values = len(values)
        return [
            Sample(now - timedelta(seconds=n_values - i), float(value))
            for i, value in enumerate(values)
        ]

    def seed(self, count: int, now: Optional[datetime] = None) -> list[Sample]:
        if now is None:
            now = datetime.now()
        return [
            Sample(now - timedelta(seconds=count - i), self.simulate_value(i))
            for i in range(count)
        ]


class SimulationDriver(QObject):
    """Appends one simulated sample to the series per timer tick.

    `stop` holds the tick lock, so once it returns no tick is in flight and
    none will append afterwards.
    """

    status_update = Signal(str)

    def __init__(
        self,
        series: RollingSeries,
        source: Optional[SignalSource] = None,
        start_tick: int = 0,
        interval: int = TICK_INTERVAL,
    ):
        super().__init__()
        self.series = series
        self.source = source or SignalSource()
        self.tick_count: int = start_tick
        self._running: bool = False
        self._lock = threading.RLock()

        self.timer = QTimer()
        self.timer.setInterval(interval)
        self.timer.timeout.connect(self.tick)

    @property
    def running(self) -> bool:
        return self._running

    def start(self):
        with self._lock:
            if self._running:
                return
            self._running = True
        self.timer.start()
        self.status_update.emit("Simulating RR intervals.")

    def stop(self):
        with self._lock:
            if not self._running:
                return
            self._running = False
            self.timer.stop()
        self.status_update.emit("Stopped simulation.")

    @Slot()
    def tick(self) -> Optional[Sample]:
        with self._lock:
            if not self._running:
                return None
            sample = Sample(datetime.now(), self.source.simulate_value(self.tick_count))
            self.tick_count += 1
            self.series.append(sample)
        logger.debug(f"Simulated RR interval {sample.value:.3f} s.")
        return sample
