"""
Timing utilities and tuning constants for the estimators.
"""

from .utils import cycle_duration, interval_bounds
from .constants import *

__all__ = ["cycle_duration", "interval_bounds"]
