"""
Open-loop inertial navigation (dead reckoning without corrections).
"""

from typing import Optional

import numpy as np

from ..logs import Component
from ..telemetry import Position, Telemetry
from .base import BootstrappedEstimator
from .models import MotionModel
from .state import InertialState


class InertialNavigator(BootstrappedEstimator):
    """
    Integrates acceleration with the same model as the Kalman filter.

    Position samples only count toward the bootstrap; afterwards they are
    read and dropped, so the estimate drifts freely. No cadence checks.
    """

    name = "InertialNavigator"
    component = Component.INERTIAL_NAVIGATOR

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.model = MotionModel(self.config)
        self.state = InertialState()
        self.integration_count = 0

    def initialize(self, state: np.ndarray):
        self.state = InertialState(x=state)

    def step(self, telemetry: Telemetry) -> Optional[Position]:
        if not telemetry.is_acceleration:
            return None

        u = telemetry.as_acceleration().vector
        self.state.x = self.model.propagate(self.state.x, u)
        self.integration_count += 1

        return self._position_estimate(self.state.x)
