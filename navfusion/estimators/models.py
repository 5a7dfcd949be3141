"""
Linear motion and measurement model shared by the estimators.

State: [x, y, z, vx, vy, vz], control input: [ax, ay, az].
"""

import numpy as np

from ..config import EstimatorConfig
from ..math.constants import STATE_SIZE, MEASUREMENT_SIZE


def transition_matrix(dt: float) -> np.ndarray:
    """
    Constant velocity state transition.

    Args:
        dt: Nominal time step in seconds

    Returns:
        6x6 matrix A
    """
    A = np.eye(STATE_SIZE)
    A[0, 3] = dt  # dx/dvx
    A[1, 4] = dt  # dy/dvy
    A[2, 5] = dt  # dz/dvz
    return A


def control_matrix(dt: float) -> np.ndarray:
    """
    Maps an acceleration input onto position and velocity.

    Args:
        dt: Nominal time step in seconds

    Returns:
        6x3 matrix B
    """
    B = np.zeros((STATE_SIZE, MEASUREMENT_SIZE))
    B[0:3, 0:3] = np.eye(MEASUREMENT_SIZE) * 0.5 * dt**2
    B[3:6, 0:3] = np.eye(MEASUREMENT_SIZE) * dt
    return B


def observation_matrix() -> np.ndarray:
    """3x6 matrix H selecting position from the state."""
    H = np.zeros((MEASUREMENT_SIZE, STATE_SIZE))
    H[0:3, 0:3] = np.eye(MEASUREMENT_SIZE)
    return H


def process_noise_matrix(dt: float, acc_sigma: float) -> np.ndarray:
    """
    Discrete white noise acceleration covariance.

    Args:
        dt: Nominal time step in seconds
        acc_sigma: Acceleration noise scale

    Returns:
        6x6 process noise covariance matrix Q
    """
    I3 = np.eye(MEASUREMENT_SIZE)
    Q = np.block([
        [I3 * dt**4 / 4.0, I3 * dt**3 / 2.0],
        [I3 * dt**3 / 2.0, I3 * dt**2]
    ])
    return Q * acc_sigma


def measurement_noise_matrix(gps_sigma: float) -> np.ndarray:
    """3x3 GPS measurement noise covariance matrix R."""
    return np.eye(MEASUREMENT_SIZE) * gps_sigma


class MotionModel:
    """
    Matrices of the linear model, computed once from the configuration.

    The arrays are read-only; the model is time-invariant because it always
    uses the nominal IMU period.
    """

    def __init__(self, config: EstimatorConfig):
        dt = config.sample_period
        self.dt = dt
        self.A = self._freeze(transition_matrix(dt))
        self.B = self._freeze(control_matrix(dt))
        self.H = self._freeze(observation_matrix())
        self.Q = self._freeze(process_noise_matrix(dt, config.acc_sigma))
        self.R = self._freeze(measurement_noise_matrix(config.gps_sigma))

    @staticmethod
    def _freeze(matrix: np.ndarray) -> np.ndarray:
        matrix.setflags(write=False)
        return matrix

    def propagate(self, state: np.ndarray, acceleration: np.ndarray) -> np.ndarray:
        """Mean propagation x' = A x + B u."""
        return self.A @ state + self.B @ acceleration

    def __str__(self) -> str:
        return (
            f"A:\n{self.A}\nB:\n{self.B}\nH:\n{self.H}\n"
            f"Q:\n{self.Q}\nR:\n{self.R}"
        )
