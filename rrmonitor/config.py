from typing import Final


SERIES_CAPACITY: Final[int] = 60  # samples
TICK_INTERVAL: Final[int] = 1000  # milliseconds

SIMULATION_BASE: Final[float] = 0.8  # seconds
SIMULATION_AMPLITUDE: Final[float] = 0.3  # seconds
SIMULATION_PERIOD: Final[float] = 30.0  # ticks

MIN_HEALTHY_RR: Final[float] = 0.6  # seconds
MAX_HEALTHY_RR: Final[float] = 1.0  # seconds
# Score is 1 at the center of the healthy range and falls to 0 one
# half-width beyond either bound (0.4 and 1.2 seconds).
HEALTHINESS_CENTER: Final[float] = 0.8  # seconds
HEALTHINESS_HALF_WIDTH: Final[float] = 0.4  # seconds

MIN_PLOT_RR: Final[float] = 0.4  # seconds
MAX_PLOT_RR: Final[float] = 1.2  # seconds

FETCH_WINDOW_HOURS: Final[int] = 24
FETCH_LIMIT: Final[int] = 10  # samples
HEART_RATE_WINDOW_MINUTES: Final[int] = 60
