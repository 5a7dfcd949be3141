"""
Position estimators: Kalman filter, inertial navigator and moving average.
"""

import time
from enum import Enum
from typing import Callable, Iterable, Optional

from ..channels import Receiver, Sender
from ..config import EstimatorConfig
from ..logs import TelemetrySink
from .average import MovingAverageEstimator, window_mean
from .base import Estimator, StopReason, broadcast
from .bootstrap import StateBootstrap
from .cadence import CadenceGuard, CadenceVerdict, classify_interval
from .inertial import InertialNavigator
from .kalman import KalmanEstimator, KalmanFilter
from .models import MotionModel
from .state import EstimatorPhase, InertialState, KalmanState


class EstimatorKind(Enum):
    KALMAN = "kalman"
    INERTIAL_NAVIGATOR = "inertial_navigator"
    AVERAGE = "average"


_ESTIMATORS = {
    EstimatorKind.KALMAN: KalmanEstimator,
    EstimatorKind.INERTIAL_NAVIGATOR: InertialNavigator,
    EstimatorKind.AVERAGE: MovingAverageEstimator,
}


def create_estimator(kind: EstimatorKind,
                     config: EstimatorConfig,
                     input_rx: Receiver,
                     subscribers: Optional[Iterable[Sender]] = None,
                     sink: Optional[TelemetrySink] = None,
                     clock: Callable[[], float] = time.time) -> Estimator:
    """Construct an estimator of the given kind, not yet started."""
    return _ESTIMATORS[kind](config, input_rx, subscribers, sink=sink, clock=clock)


def spawn_estimator(kind: EstimatorKind,
                    config: EstimatorConfig,
                    input_rx: Receiver,
                    subscribers: Optional[Iterable[Sender]] = None,
                    sink: Optional[TelemetrySink] = None,
                    clock: Callable[[], float] = time.time) -> Estimator:
    """Construct an estimator and start its thread."""
    estimator = create_estimator(kind, config, input_rx, subscribers, sink=sink, clock=clock)
    estimator.start()
    return estimator


__all__ = [
    "CadenceGuard",
    "CadenceVerdict",
    "Estimator",
    "EstimatorKind",
    "EstimatorPhase",
    "InertialNavigator",
    "InertialState",
    "KalmanEstimator",
    "KalmanFilter",
    "KalmanState",
    "MotionModel",
    "MovingAverageEstimator",
    "StateBootstrap",
    "StopReason",
    "broadcast",
    "classify_interval",
    "create_estimator",
    "spawn_estimator",
    "window_mean",
]
