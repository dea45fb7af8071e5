from datetime import datetime

import pytest

from rrmonitor.utils import (
    HealthClassification,
    Sample,
    classify_value,
    health_color,
    healthiness_score,
    view_sample,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.6, HealthClassification.HEALTHY),
        (0.5999, HealthClassification.BELOW_RANGE),
        (1.0, HealthClassification.HEALTHY),
        (1.0001, HealthClassification.ABOVE_RANGE),
        (0.8, HealthClassification.HEALTHY),
        (-1.0, HealthClassification.BELOW_RANGE),
        (42.0, HealthClassification.ABOVE_RANGE),
    ],
)
def test_classify_value(value, expected):
    assert classify_value(value) is expected


def test_classification_labels():
    assert HealthClassification.HEALTHY.value == "Healthy"
    assert HealthClassification.BELOW_RANGE.value == "Below Range"
    assert HealthClassification.ABOVE_RANGE.value == "Above Range"


def test_healthiness_score_peaks_at_center():
    assert healthiness_score(0.8) == 1.0


def test_healthiness_score_reaches_zero_at_edges():
    assert healthiness_score(0.4) == 0.0
    assert healthiness_score(1.2) == 0.0


def test_healthiness_score_is_clamped():
    assert healthiness_score(0.0) == 0.0
    assert healthiness_score(5.0) == 0.0
    assert healthiness_score(-3.0) == 0.0


def test_healthiness_score_is_linear_inside_band():
    assert healthiness_score(0.6) == pytest.approx(0.5)
    assert healthiness_score(1.0) == pytest.approx(0.5)


def test_health_color():
    assert health_color(0.8) == (0.0, 1.0, 0.0)
    assert health_color(2.0) == (1.0, 0.0, 0.0)
    red, green, blue = health_color(0.6)
    assert red == pytest.approx(0.5)
    assert green == pytest.approx(0.5)
    assert blue == 0.0


def test_view_sample():
    sample = Sample(datetime(2025, 6, 15, 12, 0, 0), 0.5)
    view = view_sample(sample)
    assert view.sample is sample
    assert view.classification is HealthClassification.BELOW_RANGE
    assert view.score == pytest.approx(0.25)


def test_health_color_is_pure_red_at_band_edges():
    assert health_color(1.2) == (1.0, 0.0, 0.0)
    assert health_color(0.4) == (1.0, 0.0, 0.0)
