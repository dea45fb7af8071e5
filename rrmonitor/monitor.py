import logging
from typing import Optional, Sequence
from PySide6.QtCore import QObject, QThread, Signal, Slot
from rrmonitor.model import RollingSeries
from rrmonitor.source import SignalSource, SimulationDriver
from rrmonitor.health import HealthDataSource, HealthDataWorker
from rrmonitor.utils import NamedSignal
from rrmonitor.config import SERIES_CAPACITY

logger = logging.getLogger(__name__)


class Monitor(QObject):
    """Owns the RR-interval window and everything that writes to it.

    Lives on the main thread. The simulation timer fires there, and fetch
    results from the worker thread are delivered there through queued
    connections, so all writes to the series happen on one thread.
    """

    status_update = Signal(str)
    fetch_requested = Signal()
    heart_rate_requested = Signal()
    heart_rate_update = Signal(NamedSignal)

    def __init__(
        self,
        store: HealthDataSource,
        capacity: int = SERIES_CAPACITY,
        source: Optional[SignalSource] = None,
    ):
        super().__init__()
        self.source = source or SignalSource()
        self.series = RollingSeries(capacity, self.source.seed(capacity))
        self.error_message: Optional[str] = None
        self.heart_rate: Optional[float] = None  # beats per minute

        self.driver = SimulationDriver(self.series, self.source, start_tick=capacity)
        self.driver.status_update.connect(self.show_status)

        self.worker = HealthDataWorker(store)
        self.worker.intervals_update.connect(self.update_intervals)
        self.worker.heart_rate_update.connect(self.update_heart_rate)
        self.worker.fetch_error.connect(self.handle_fetch_error)
        self.worker.status_update.connect(self.show_status)
        self.worker_thread = QThread()
        self.fetch_requested.connect(self.worker.fetch)
        self.heart_rate_requested.connect(self.worker.fetch_heart_rate)
        self.worker.moveToThread(self.worker_thread)

    def start(self):
        self.worker_thread.start()
        self.driver.start()

    def shutdown(self):
        """Stop the simulation and the fetch thread."""
        logger.info("Closing threads...")
        self.driver.stop()
        self.worker_thread.quit()
        self.worker_thread.wait()

    def refresh(self):
        """Request a fetch from the health-data store. Nothing is retried
        automatically; calling this again is the retry."""
        self.fetch_requested.emit()

    def refresh_heart_rate(self):
        self.heart_rate_requested.emit()

    @Slot(object)
    def update_intervals(self, intervals: Sequence[float]):
        samples = self.source.ingest_external(intervals)
        if samples is None:
            # keep simulating
            self.error_message = "No RR interval data available"
            self.show_status(self.error_message)
            return
        self.driver.stop()
        self.series.replace_all(samples)
        self.error_message = None
        self.show_status(f"Showing {len(samples)} RR interval(s) from health data.")

    @Slot(object)
    def update_heart_rate(self, bpm: Optional[float]):
        if bpm is None:
            self.error_message = "No data available"
            self.show_status(self.error_message)
            return
        self.heart_rate = bpm
        self.error_message = None
        self.heart_rate_update.emit(NamedSignal("HeartRate", bpm))
        self.show_status(f"Heart rate: {bpm:.0f} BPM")

    @Slot(str)
    def handle_fetch_error(self, message: str):
        self.error_message = message
        self.show_status(f"Error: {message}")

    @Slot(str)
    def show_status(self, status: str):
        logger.info(status)
        self.status_update.emit(status)
