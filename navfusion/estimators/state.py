"""
Estimator state containers.
"""

import numpy as np
from dataclasses import dataclass, field
from enum import Enum

from ..math.constants import STATE_SIZE


class EstimatorPhase(Enum):
    BOOTSTRAPPING = "bootstrapping"
    RUNNING = "running"
    STOPPED = "stopped"


def _zero_state() -> np.ndarray:
    return np.zeros(STATE_SIZE)


@dataclass
class InertialState:
    """
    Mean-only navigation state.

    State vector: [x, y, z, vx, vy, vz]
    - x, y, z: Position in meters
    - vx, vy, vz: Velocity in m/s
    """

    x: np.ndarray = field(default_factory=_zero_state)

    def __post_init__(self):
        self.x = np.asarray(self.x, dtype=float)
        if self.x.shape != (STATE_SIZE,):
            raise ValueError(f"State vector must have {STATE_SIZE} elements")

    @property
    def position(self) -> np.ndarray:
        """Get position as [x, y, z] vector."""
        return self.x[0:3].copy()

    @property
    def velocity(self) -> np.ndarray:
        """Get velocity as [vx, vy, vz] vector."""
        return self.x[3:6].copy()

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.x[3:6]))

    def __str__(self) -> str:
        px, py, pz, vx, vy, vz = self.x
        return (
            f"{type(self).__name__}(pos=[{px:.2f}, {py:.2f}, {pz:.2f}], "
            f"vel=[{vx:.2f}, {vy:.2f}, {vz:.2f}])"
        )


@dataclass
class KalmanState(InertialState):
    """Navigation state with its 6x6 covariance matrix P."""

    P: np.ndarray = field(default_factory=lambda: np.eye(STATE_SIZE))

    def __post_init__(self):
        super().__post_init__()
        self.P = np.asarray(self.P, dtype=float)
        if self.P.shape != (STATE_SIZE, STATE_SIZE):
            raise ValueError(f"Covariance must be {STATE_SIZE}x{STATE_SIZE}")

    @property
    def uncertainty(self) -> np.ndarray:
        """Standard deviation of every state component."""
        return np.sqrt(np.diag(self.P))

    @property
    def position_uncertainty(self) -> float:
        """3D RMS position error."""
        return float(np.sqrt(np.trace(self.P[0:3, 0:3])))

    def copy(self) -> 'KalmanState':
        return KalmanState(x=self.x.copy(), P=self.P.copy())
