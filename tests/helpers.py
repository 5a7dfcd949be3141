"""
Shared test utilities.
"""

import os
import sys

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from navfusion.telemetry import Acceleration, Position, Sample


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, dt: float):
        self.now += dt


def position(x, y, z, timestamp=0.0):
    return Position(Sample(x=x, y=y, z=z, timestamp=timestamp))


def acceleration(x, y, z, timestamp=0.0):
    return Acceleration(Sample(x=x, y=y, z=z, timestamp=timestamp))
