import logging
from datetime import datetime, timedelta
from typing import Optional, Protocol, Sequence
from PySide6.QtCore import QObject, Signal, Slot
from rrmonitor.config import FETCH_WINDOW_HOURS, FETCH_LIMIT, HEART_RATE_WINDOW_MINUTES

logger = logging.getLogger(__name__)


class HealthDataError(Exception):
    pass


class AuthorizationError(HealthDataError):
    pass


class AvailabilityError(HealthDataError):
    pass


class HealthDataSource(Protocol):
    """Health-data store.

    Both queries raise HealthDataError (or a subclass) if the store cannot
    deliver. Missing data is not an error: RR intervals come back as an empty
    sequence, heart rate as None.
    """

    def fetch_latest_intervals(self) -> Sequence[float]:
        """RR intervals in seconds from the past FETCH_WINDOW_HOURS, oldest
        first, at most FETCH_LIMIT of them."""
        ...

    def fetch_latest_heart_rate(self) -> Optional[float]:
        """Most recent heart rate in beats per minute from the past
        HEART_RATE_WINDOW_MINUTES."""
        ...


class SimulatedHealthStore:
    """Stands in for a platform health store.

    Holds timestamped records and answers the same windowed, most-recent-first
    queries a real store would, or raises `error` if one is given. Values
    passed to the constructor are recorded one second apart, the last one at
    `now`.
    """

    def __init__(
        self,
        intervals: Sequence[float] = (),
        heart_rates: Sequence[float] = (),
        error: Optional[HealthDataError] = None,
        window_hours: int = FETCH_WINDOW_HOURS,
        limit: int = FETCH_LIMIT,
        heart_rate_window_minutes: int = HEART_RATE_WINDOW_MINUTES,
        now: Optional[datetime] = None,
    ):
        self.window_hours = window_hours
        self.limit = limit
        self.heart_rate_window_minutes = heart_rate_window_minutes
        self.error = error
        self.n_fetches: int = 0
        if now is None:
            now = datetime.now()
        self._intervals: list[tuple[datetime, float]] = []
        self._heart_rates: list[tuple[datetime, float]] = []
        for i, value in enumerate(intervals):
            self.add_interval(now - timedelta(seconds=len(intervals) - 1 - i), value)
        for i, bpm in enumerate(heart_rates):
            self.add_heart_rate(now - timedelta(seconds=len(heart_rates) - 1 - i), bpm)

    def add_interval(self, timestamp: datetime, value: float):
        self._intervals.append((timestamp, value))

    def add_heart_rate(self, timestamp: datetime, bpm: float):
        self._heart_rates.append((timestamp, bpm))

    def fetch_latest_intervals(self, now: Optional[datetime] = None) -> list[float]:
        records = self._query(self._intervals, timedelta(hours=self.window_hours), now)
        # the query is sorted newest first; hand out chronological order
        return [value for _, value in reversed(records[: self.limit])]

    def fetch_latest_heart_rate(self, now: Optional[datetime] = None) -> Optional[float]:
        records = self._query(
            self._heart_rates, timedelta(minutes=self.heart_rate_window_minutes), now
        )
        return records[0][1] if records else None

    def _query(
        self,
        records: list[tuple[datetime, float]],
        window: timedelta,
        now: Optional[datetime],
    ) -> list[tuple[datetime, float]]:
        self.n_fetches += 1
        if self.error is not None:
            raise self.error
        if now is None:
            now = datetime.now()
        start = now - window
        return sorted(
            (r for r in records if start <= r[0] <= now),
            key=lambda r: r[0],
            reverse=True,
        )


class HealthDataWorker(QObject):
    """Runs queries against the health-data collaborator.

    Meant to be moved to its own QThread. Results leave through signals, so
    the receiving side gets them on its own thread via queued connections.
    """

    intervals_update = Signal(object)
    heart_rate_update = Signal(object)
    fetch_error = Signal(str)
    status_update = Signal(str)

    def __init__(self, store: HealthDataSource):
        super().__init__()
        self.store = store

    @Slot()
    def fetch(self):
        self.status_update.emit(
            f"Fetching RR intervals from the past {FETCH_WINDOW_HOURS} hours."
        )
        try:
            intervals = list(self.store.fetch_latest_intervals())
        except HealthDataError as e:
            self._report_error(e)
            return
        logger.info(f"Fetched {len(intervals)} RR interval(s).")
        self.intervals_update.emit(intervals)

    @Slot()
    def fetch_heart_rate(self):
        try:
            bpm = self.store.fetch_latest_heart_rate()
        except HealthDataError as e:
            self._report_error(e)
            return
        self.heart_rate_update.emit(None if bpm is None else float(bpm))

    def _report_error(self, error: HealthDataError):
        if isinstance(error, AuthorizationError):
            message = f"Not authorized to read health data: {error}"
        elif isinstance(error, AvailabilityError):
            message = f"Health data unavailable: {error}"
        else:
            message = f"Couldn't fetch health data: {error}"
        logger.warning(message)
        self.fetch_error.emit(message)
