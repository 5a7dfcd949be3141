"""
Initial state from the first two position fixes.
"""

import logging
from typing import Optional

import numpy as np

from ..errors import TimestampOrderError
from ..math.constants import STATE_SIZE
from ..telemetry import Sample, Telemetry

logger = logging.getLogger(__name__)

REQUIRED_POSITION_SAMPLES = 2


class StateBootstrap:
    """
    Derives position and velocity from two consecutive position samples.

    Velocity cannot be observed from a single fix, so the first one is only
    remembered and the second one completes the state by finite difference
    over the measured interval between the two sample timestamps.
    Acceleration samples are ignored.
    """

    def __init__(self):
        self.samples_received = 0
        self._previous: Optional[Sample] = None
        self._state: Optional[np.ndarray] = None

    @property
    def is_complete(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> Optional[np.ndarray]:
        """Initial [x, y, z, vx, vy, vz] once complete, otherwise None."""
        return None if self._state is None else self._state.copy()

    def feed(self, telemetry: Telemetry) -> Optional[np.ndarray]:
        """
        Consume one telemetry sample.

        Returns:
            The initial state when this sample completes the bootstrap

        Raises:
            TimestampOrderError: the second fix is not later than the first,
                or the derived state is not finite
            RuntimeError: the bootstrap has already completed
        """
        if self.is_complete:
            raise RuntimeError("Bootstrap already complete")

        if not telemetry.is_position:
            return None

        sample = telemetry.as_position()
        self.samples_received += 1

        if self._previous is None:
            self._previous = sample
            return None

        dt = sample.timestamp - self._previous.timestamp
        if not dt > 0:
            raise TimestampOrderError(
                f"Position fix at {sample.timestamp:.6f} does not follow "
                f"previous fix at {self._previous.timestamp:.6f}"
            )

        state = np.zeros(STATE_SIZE)
        state[0:3] = sample.vector
        state[3:6] = (sample.vector - self._previous.vector) / dt
        if not np.all(np.isfinite(state)):
            raise TimestampOrderError(
                f"Position fixes {dt:.3g} s apart give a non-finite velocity"
            )

        self._state = state
        self._previous = None

        logger.debug("State bootstrapped after %d position samples: %s",
                     self.samples_received, state)
        return state.copy()
