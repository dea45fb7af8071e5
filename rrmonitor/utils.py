from collections import namedtuple
from datetime import datetime
from enum import Enum
from typing import NamedTuple
from rrmonitor.config import (
    MIN_HEALTHY_RR,
    MAX_HEALTHY_RR,
    HEALTHINESS_CENTER,
    HEALTHINESS_HALF_WIDTH,
)


NamedSignal = namedtuple("NamedSignal", "name value")


class Sample(NamedTuple):
    timestamp: datetime
    value: float  # seconds


class HealthClassification(Enum):
    HEALTHY = "Healthy"
    BELOW_RANGE = "Below Range"
    ABOVE_RANGE = "Above Range"


class SampleView(NamedTuple):
    sample: Sample
    classification: HealthClassification
    score: float


def classify_value(value: float) -> HealthClassification:
    """Both bounds of the healthy range count as healthy."""
    if value < MIN_HEALTHY_RR:
        return HealthClassification.BELOW_RANGE
    if value > MAX_HEALTHY_RR:
        return HealthClassification.ABOVE_RANGE
    return HealthClassification.HEALTHY


def healthiness_score(value: float) -> float:
    score = 1.0 - abs(value - HEALTHINESS_CENTER) / HEALTHINESS_HALF_WIDTH
    # snap float noise at the band edges
    score = round(score, 12)
    return min(max(score, 0.0), 1.0)


def health_color(value: float) -> tuple[float, float, float]:
    """Return RGB channels in [0, 1], fading from red (score 0) to green
    (score 1)."""
    score = healthiness_score(value)
    return (1.0 - score, score, 0.0)


def view_sample(sample: Sample) -> SampleView:
    return SampleView(
        sample, classify_value(sample.value), healthiness_score(sample.value)
    )
