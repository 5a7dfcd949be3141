"""
Timing classification of incoming IMU samples.
"""

import logging
from enum import Enum

from ..math.utils import interval_bounds

logger = logging.getLogger(__name__)


class CadenceVerdict(Enum):
    ON_TIME = "on_time"
    LATE = "late"
    TOO_SOON = "too_soon"
    TIME_INVERSION = "time_inversion"

    @property
    def accepted(self) -> bool:
        """Late samples are still used, too-soon and inverted ones are not."""
        return self in (CadenceVerdict.ON_TIME, CadenceVerdict.LATE)


def classify_interval(elapsed: float, nominal: float, tolerance: float) -> CadenceVerdict:
    """
    Classify the time since the previous IMU sample.

    Args:
        elapsed: Seconds since the previous acceleration sample
        nominal: Nominal IMU period in seconds
        tolerance: Allowed deviation as a fraction of the period

    Returns:
        CadenceVerdict for the interval
    """
    min_interval, max_interval = interval_bounds(nominal, tolerance)

    if elapsed > max_interval:
        return CadenceVerdict.LATE
    if elapsed >= min_interval:
        return CadenceVerdict.ON_TIME
    if elapsed > 0.0:
        return CadenceVerdict.TOO_SOON
    return CadenceVerdict.TIME_INVERSION


class CadenceGuard:
    """
    Tracks IMU arrival times and flags samples that break the cadence.

    The last timestamp moves on every evaluated sample, accepted or not.
    """

    def __init__(self, nominal: float, tolerance: float, last_timestamp: float):
        """
        Args:
            nominal: Nominal IMU period in seconds
            tolerance: Allowed deviation as a fraction of the period
            last_timestamp: Reference time for the first evaluated sample
        """
        self.nominal = nominal
        self.tolerance = tolerance
        self.last_timestamp = last_timestamp
        self.min_interval, self.max_interval = interval_bounds(nominal, tolerance)

        self.counts = {verdict: 0 for verdict in CadenceVerdict}

    def check(self, now: float) -> CadenceVerdict:
        """Classify a sample arriving at `now` and remember its time."""
        elapsed = now - self.last_timestamp
        self.last_timestamp = now

        verdict = classify_interval(elapsed, self.nominal, self.tolerance)
        self.counts[verdict] += 1

        if verdict is CadenceVerdict.LATE:
            logger.warning("IMU data is late! Previous data obtained %.3fs ago", elapsed)
        elif verdict is CadenceVerdict.TOO_SOON:
            logger.warning("IMU data received too soon! Previous data obtained %.3fs ago", elapsed)
        elif verdict is CadenceVerdict.TIME_INVERSION:
            logger.warning("IMU time inversion: %.3fs since previous data", elapsed)

        return verdict
