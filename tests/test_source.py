import math
from datetime import datetime, timedelta

import numpy as np
import pytest

from rrmonitor.model import RollingSeries
from rrmonitor.source import SignalSource, SimulationDriver

NOW = datetime(2025, 6, 15, 12, 0, 0)


def test_simulate_value_is_deterministic():
    source = SignalSource()
    for tick in (0, 1, 7, 29, 30, 1000):
        assert source.simulate_value(tick) == source.simulate_value(tick)
    assert SignalSource().simulate_value(13) == source.simulate_value(13)


def test_simulate_value_follows_sine_wave():
    source = SignalSource()
    assert source.simulate_value(0) == pytest.approx(0.8)
    assert source.simulate_value(7.5) == pytest.approx(1.1)
    assert source.simulate_value(22.5) == pytest.approx(0.5)
    assert source.simulate_value(30) == pytest.approx(source.simulate_value(0))


def test_simulate_value_rejects_negative_tick():
    with pytest.raises(ValueError):
        SignalSource().simulate_value(-1)


def test_ingest_external_empty_means_no_data():
    assert SignalSource().ingest_external([]) is None
    assert SignalSource().ingest_external(np.array([])) is None


def test_ingest_external_stamps_one_second_apart():
    samples = SignalSource().ingest_external([0.7, 0.9, 1.1], now=NOW)
    assert [s.value for s in samples] == [0.7, 0.9, 1.1]
    assert [s.timestamp for s in samples] == [
        NOW - timedelta(seconds=3),
        NOW - timedelta(seconds=2),
        NOW - timedelta(seconds=1),
    ]


def test_ingest_external_accepts_implausible_values():
    samples = SignalSource().ingest_external([-0.2, 9.0], now=NOW)
    assert [s.value for s in samples] == [-0.2, 9.0]


def test_seed_spans_past_ticks():
    source = SignalSource()
    samples = source.seed(60, now=NOW)
    assert len(samples) == 60
    assert samples[0].timestamp == NOW - timedelta(seconds=60)
    assert samples[-1].timestamp == NOW - timedelta(seconds=1)
    assert [s.value for s in samples] == [source.simulate_value(i) for i in range(60)]


def test_custom_wave_parameters():
    source = SignalSource(base=1.0, amplitude=0.1, period=4)
    assert source.simulate_value(1) == pytest.approx(1.0 + 0.1 * math.sin(math.pi / 2))


def test_driver_appends_only_while_running():
    series = RollingSeries(capacity=5)
    driver = SimulationDriver(series)
    assert driver.tick() is None
    assert len(series) == 0

    driver.start()
    assert driver.running
    assert driver.timer.isActive()
    sample = driver.tick()
    assert series.latest() == sample
    assert sample.value == pytest.approx(SignalSource().simulate_value(0))
    driver.stop()


def test_driver_scenario_keeps_last_ticks():
    series = RollingSeries(capacity=5)
    source = SignalSource()
    driver = SimulationDriver(series, source)
    driver.start()
    for _ in range(7):
        driver.tick()
    driver.stop()

    assert [s.value for s in series.samples()] == [
        source.simulate_value(t) for t in range(2, 7)
    ]


def test_driver_stop_is_synchronous():
    series = RollingSeries(capacity=5)
    driver = SimulationDriver(series)
    messages = []
    driver.status_update.connect(messages.append)
    driver.start()
    driver.tick()
    driver.stop()

    assert not driver.running
    assert not driver.timer.isActive()
    assert driver.tick() is None
    assert len(series) == 1
    assert messages == ["Simulating RR intervals.", "Stopped simulation."]


def test_driver_continues_from_start_tick():
    series = RollingSeries(capacity=3)
    driver = SimulationDriver(series, start_tick=10)
    driver.start()
    sample = driver.tick()
    driver.stop()
    assert sample.value == SignalSource().simulate_value(10)
    assert driver.tick_count == 11
