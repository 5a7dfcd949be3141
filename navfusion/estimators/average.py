"""
Sliding-window moving average of position fixes.
"""

import logging
from collections import deque
from typing import Deque, Iterable, Optional

import numpy as np

from ..logs import Component
from ..telemetry import Position, Sample, Telemetry
from .base import Estimator

logger = logging.getLogger(__name__)


def window_mean(samples: Iterable[Sample]) -> np.ndarray:
    """
    Arithmetic mean of the x, y, z components.

    Raises:
        ValueError: if there are no samples
    """
    vectors = [sample.vector for sample in samples]
    if not vectors:
        raise ValueError("Cannot average an empty window")
    return np.mean(vectors, axis=0)


class MovingAverageEstimator(Estimator):
    """
    Emits the mean of the last N position samples after every position fix.

    There is no bootstrap. Acceleration samples are ignored.
    """

    name = "MovingAverage"
    component = Component.AVERAGE

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.window: Deque[Sample] = deque(maxlen=self.config.buffer_length)
        self.ignored_count = 0

    def process(self, telemetry: Telemetry) -> Optional[Position]:
        if not telemetry.is_position:
            self.ignored_count += 1
            logger.debug("%s ignoring %s", self.name, telemetry)
            return None

        self.window.append(telemetry.as_position())
        return self._position_estimate(window_mean(self.window))
