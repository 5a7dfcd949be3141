"""
Linear Kalman filter fusing IMU acceleration and GPS position.
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, Optional

import numpy as np

from ..channels import Receiver, Sender
from ..config import EstimatorConfig
from ..errors import SingularInnovationError
from ..logs import Component, TelemetrySink
from ..math.constants import STATE_SIZE
from ..telemetry import Position, Telemetry
from .base import BootstrappedEstimator
from .cadence import CadenceGuard, CadenceVerdict
from .models import MotionModel
from .state import KalmanState

logger = logging.getLogger(__name__)


class KalmanFilter:
    """
    Predict/correct steps on a 6D position-velocity state.

    Prediction uses the measured acceleration as control input, correction
    uses a position measurement. Both run with the nominal-period model.
    """

    def __init__(self, config: EstimatorConfig):
        """
        Initialize the Kalman filter.

        Args:
            config: Estimator configuration the model is derived from
        """
        self.model = MotionModel(config)
        self.state = KalmanState(
            x=np.zeros(STATE_SIZE),
            P=self.model.Q * config.initial_covariance_scale
        )
        self._identity = np.eye(STATE_SIZE)

        # Statistics
        self.prediction_count = 0
        self.correction_count = 0

    def initialize(self, x: np.ndarray):
        """Set the state mean, keeping the current covariance."""
        self.state.x = np.asarray(x, dtype=float).copy()

    def predict(self, acceleration: np.ndarray) -> KalmanState:
        """
        Prediction step.

        Args:
            acceleration: Measured acceleration [ax, ay, az] in m/s²

        Returns:
            Predicted state
        """
        A, Q = self.model.A, self.model.Q

        self.state.x = self.model.propagate(self.state.x, acceleration)
        self.state.P = A @ self.state.P @ A.T + Q

        self.prediction_count += 1
        return self.state

    def correct(self, position: np.ndarray) -> KalmanState:
        """
        Correction step with a position measurement.

        Args:
            position: Measured position [x, y, z] in meters

        Returns:
            Corrected state

        Raises:
            SingularInnovationError: innovation covariance is not invertible
        """
        H, R = self.model.H, self.model.R

        # Innovation (measurement residual)
        y = position - H @ self.state.x

        # Innovation covariance
        S = H @ self.state.P @ H.T + R

        try:
            S_inv = np.linalg.inv(S)
        except np.linalg.LinAlgError as e:
            raise SingularInnovationError(f"Innovation covariance is singular: {e}") from e
        if not np.all(np.isfinite(S_inv)):
            raise SingularInnovationError("Innovation covariance inverse is not finite")

        # Kalman gain
        K = self.state.P @ H.T @ S_inv

        self.state.x = self.state.x + K @ y
        self.state.P = (self._identity - K @ H) @ self.state.P

        self.correction_count += 1
        return self.state

    def get_statistics(self) -> Dict[str, Any]:
        return {
            'predictions': self.prediction_count,
            'corrections': self.correction_count,
            'position_uncertainty': self.state.position_uncertainty,
            'state_uncertainty': self.state.uncertainty.tolist()
        }


class KalmanEstimator(BootstrappedEstimator):
    """
    Kalman filter running on its own thread.

    After the bootstrap every acceleration sample goes through the cadence
    guard; accepted ones predict, position samples always correct. Each
    accepted sample produces a position estimate.

    Late samples are integrated with the nominal period, so the extra elapsed
    time is not accounted for.
    """

    name = "KalmanFilter"
    component = Component.KALMAN

    def __init__(self,
                 config: EstimatorConfig,
                 input_rx: Receiver,
                 subscribers: Optional[Iterable[Sender]] = None,
                 sink: Optional[TelemetrySink] = None,
                 clock: Callable[[], float] = time.time):
        super().__init__(config, input_rx, subscribers, sink, clock)
        self.filter = KalmanFilter(config)
        self.cadence = CadenceGuard(
            nominal=config.sample_period,
            tolerance=config.timing_tolerance,
            last_timestamp=clock()
        )
        self.rejected_count = 0

    @property
    def state(self) -> KalmanState:
        return self.filter.state

    def initialize(self, state: np.ndarray):
        self.filter.initialize(state)

    def step(self, telemetry: Telemetry) -> Optional[Position]:
        if telemetry.is_acceleration:
            verdict = self.cadence.check(self.clock())
            if not verdict.accepted:
                self.rejected_count += 1
                return None
            self.filter.predict(telemetry.as_acceleration().vector)
        else:
            self.filter.correct(telemetry.as_position().vector)

        return self._position_estimate(self.filter.state.x)

    def get_statistics(self) -> Dict[str, Any]:
        stats = self.filter.get_statistics()
        stats['rejected'] = self.rejected_count
        stats['late'] = self.cadence.counts[CadenceVerdict.LATE]
        stats['emitted'] = self.emitted_count
        return stats
