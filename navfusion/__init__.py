"""
GPS/IMU position estimation engine.

This package provides:
- Kalman filter fusing acceleration and GPS position streams
- Open-loop inertial navigator and moving-average smoother
- Telemetry types, channels and a telemetry sink for wiring them together
"""

__version__ = "1.0.0"

from .channels import channel, Sender, Receiver
from .config import Config, EstimatorConfig
from .errors import (
    ChannelClosed,
    ConfigError,
    EstimatorError,
    SingularInnovationError,
    TelemetryKindError,
    TimestampOrderError,
)
from .estimators import (
    EstimatorKind,
    InertialNavigator,
    KalmanEstimator,
    MovingAverageEstimator,
    create_estimator,
    spawn_estimator,
)
from .logs import Component, TelemetrySink, configure_logging
from .registry import CommunicationRegistry, DataSource
from .telemetry import Acceleration, Position, Sample, Telemetry, TelemetryKind

__all__ = [
    "Acceleration",
    "ChannelClosed",
    "CommunicationRegistry",
    "Component",
    "Config",
    "ConfigError",
    "DataSource",
    "EstimatorConfig",
    "EstimatorError",
    "EstimatorKind",
    "InertialNavigator",
    "KalmanEstimator",
    "MovingAverageEstimator",
    "Position",
    "Receiver",
    "Sample",
    "Sender",
    "SingularInnovationError",
    "Telemetry",
    "TelemetryKind",
    "TelemetryKindError",
    "TelemetrySink",
    "TimestampOrderError",
    "channel",
    "configure_logging",
    "create_estimator",
    "spawn_estimator",
]
