"""
Sensor samples and the telemetry union passed between estimators.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

import numpy as np

from .errors import TelemetryKindError


@dataclass(frozen=True)
class Sample:
    """
    A 3-axis measurement with the time it was taken.

    For acceleration samples x, y, z are in m/s², for position samples in
    meters. Timestamp is seconds since the epoch.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    timestamp: float = field(default_factory=time.time)

    @property
    def vector(self) -> np.ndarray:
        """Get the measurement as a numpy vector."""
        return np.array([self.x, self.y, self.z], dtype=float)

    @classmethod
    def from_vector(cls, vector: np.ndarray, timestamp: Optional[float] = None) -> 'Sample':
        """Build a sample from the first three components of a vector."""
        if len(vector) < 3:
            raise ValueError("Sample vector must have at least 3 elements")
        if timestamp is None:
            timestamp = time.time()
        return cls(
            x=float(vector[0]),
            y=float(vector[1]),
            z=float(vector[2]),
            timestamp=timestamp
        )


class TelemetryKind(Enum):
    ACCELERATION = "acceleration"
    POSITION = "position"


@dataclass(frozen=True)
class Telemetry:
    """
    Tagged sample: either an Acceleration or a Position.

    Use the concrete variants; the base class only carries the shared
    accessors.
    """

    data: Sample
    kind: ClassVar[Optional[TelemetryKind]] = None

    def __post_init__(self):
        if self.kind is None:
            raise TypeError("Telemetry must be created as Acceleration or Position")

    @property
    def is_acceleration(self) -> bool:
        return self.kind is TelemetryKind.ACCELERATION

    @property
    def is_position(self) -> bool:
        return self.kind is TelemetryKind.POSITION

    def as_acceleration(self) -> Sample:
        """Return the sample, failing if this is not an acceleration."""
        if not self.is_acceleration:
            raise TelemetryKindError(f"Expected acceleration telemetry, got {self.kind.value}")
        return self.data

    def as_position(self) -> Sample:
        """Return the sample, failing if this is not a position."""
        if not self.is_position:
            raise TelemetryKindError(f"Expected position telemetry, got {self.kind.value}")
        return self.data

    def __str__(self) -> str:
        return (
            f"{type(self).__name__}([{self.data.x:.3f}, {self.data.y:.3f}, "
            f"{self.data.z:.3f}] @ {self.data.timestamp:.3f})"
        )


@dataclass(frozen=True)
class Acceleration(Telemetry):
    """Accelerometer-derived acceleration sample."""

    kind: ClassVar[TelemetryKind] = TelemetryKind.ACCELERATION


@dataclass(frozen=True)
class Position(Telemetry):
    """Position fix or position estimate."""

    kind: ClassVar[TelemetryKind] = TelemetryKind.POSITION
