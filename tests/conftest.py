import pytest
from PySide6.QtCore import QCoreApplication

from rrmonitor.app import Application
from rrmonitor.health import SimulatedHealthStore


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QCoreApplication.instance()
    if app is None:
        app = Application([], SimulatedHealthStore([0.65, 0.95], heart_rates=[72.0]))
    yield app
