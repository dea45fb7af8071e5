import sys
import signal
import logging
from typing import Optional
from PySide6.QtCore import QCoreApplication, QTimer
from rrmonitor.monitor import Monitor
from rrmonitor.health import HealthDataSource, SimulatedHealthStore
from rrmonitor.utils import NamedSignal, SampleView


def format_latest(view: SampleView) -> str:
    return f"Current: {view.sample.value:.2f} s {view.classification.value}"


class Application(QCoreApplication):
    def __init__(self, sys_argv, store: Optional[HealthDataSource] = None):
        super(Application, self).__init__(sys_argv)
        self._monitor = Monitor(store or SimulatedHealthStore())
        self._monitor.series.series_update.connect(self.print_latest)
        self._monitor.status_update.connect(print)
        self.aboutToQuit.connect(self.stop)
        # let the interpreter run now and then so SIGINT gets handled
        self._heartbeat = QTimer()
        self._heartbeat.setInterval(250)
        self._heartbeat.timeout.connect(lambda: None)

    @property
    def monitor(self) -> Monitor:
        return self._monitor

    def start(self):
        """Start simulating and ask the health store for its latest data."""
        self._heartbeat.start()
        self._monitor.start()
        self._monitor.refresh()
        self._monitor.refresh_heart_rate()

    def stop(self):
        self._heartbeat.stop()
        self._monitor.shutdown()

    def print_latest(self, series: NamedSignal):
        if series.value:
            print(format_latest(series.value[-1]))


def main():
    logging.basicConfig(
        level=logging.WARNING, format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )
    app = Application(sys.argv)
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    app.start()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
