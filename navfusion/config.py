"""
Configuration for the navigation estimators.
"""

import copy
import json
import os
from dataclasses import dataclass, asdict
from typing import Dict, Any

from .errors import ConfigError
from .math.constants import *
from .math.utils import cycle_duration


@dataclass(frozen=True)
class EstimatorConfig:
    """
    Fully specified estimator configuration, fixed at construction.

    All matrices of the motion model are derived from these values once,
    using the nominal IMU period rather than measured sample intervals.
    """

    imu_frequency_hz: float = IMU_FREQUENCY_HZ
    acc_sigma: float = KALMAN_ACC_SIGMA
    gps_sigma: float = KALMAN_GPS_SIGMA
    timing_tolerance: float = KALMAN_TIMING_TOLERANCE
    buffer_length: int = BUFFER_LENGTH
    initial_covariance_scale: float = INITIAL_COVARIANCE_SCALE

    def __post_init__(self):
        if not self.imu_frequency_hz > 0:
            raise ConfigError(f"IMU frequency must be positive, got {self.imu_frequency_hz}")
        if not self.acc_sigma > 0:
            raise ConfigError(f"Acceleration sigma must be positive, got {self.acc_sigma}")
        if not self.gps_sigma > 0:
            raise ConfigError(f"GPS sigma must be positive, got {self.gps_sigma}")
        if not 0.0 <= self.timing_tolerance < 1.0:
            raise ConfigError(f"Timing tolerance must be in [0, 1), got {self.timing_tolerance}")
        if isinstance(self.buffer_length, bool) or not isinstance(self.buffer_length, int) \
                or self.buffer_length < 1:
            raise ConfigError(f"Buffer length must be a positive integer, got {self.buffer_length}")
        if not self.initial_covariance_scale > 0:
            raise ConfigError("Initial covariance scale must be positive")

    @property
    def sample_period(self) -> float:
        """Nominal IMU period in seconds."""
        return cycle_duration(self.imu_frequency_hz)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Config:
    """Configuration manager backed by an optional JSON file."""

    DEFAULT_CONFIG = {
        # Estimator tuning
        "estimator": {
            "imu_frequency_hz": IMU_FREQUENCY_HZ,
            "acc_sigma": KALMAN_ACC_SIGMA,
            "gps_sigma": KALMAN_GPS_SIGMA,
            "timing_tolerance": KALMAN_TIMING_TOLERANCE,
            "buffer_length": BUFFER_LENGTH,
            "initial_covariance_scale": INITIAL_COVARIANCE_SCALE
        },

        # Sensor rates not used by the estimators themselves
        "gps_frequency_hz": GPS_FREQUENCY_HZ,

        # Diagnostics
        "log_level": "INFO",
        "log_file": None
    }

    def __init__(self, config_file: str = "navfusion.json"):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration file, missing means defaults
        """
        self.config_file = config_file
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file and os.path.exists(config_file):
            self.load_config()

    def load_config(self):
        """
        Load configuration from file and merge it over the defaults.

        Raises:
            ConfigError: if the file cannot be read or parsed
        """
        try:
            with open(self.config_file, 'r') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load config {self.config_file}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Config {self.config_file} must contain a JSON object")

        self._merge_config(self.config, file_config)

    def save_config(self):
        """Save current configuration to file."""
        with open(self.config_file, 'w') as f:
            json.dump(self.config, f, indent=2)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]):
        """Recursively merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default=None):
        """Get configuration value by dotted key with optional default."""
        value = self.config

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """Set configuration value by dotted key."""
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    @property
    def estimator(self) -> EstimatorConfig:
        """Build the immutable estimator configuration."""
        section = self.config["estimator"]
        unknown = set(section) - set(self.DEFAULT_CONFIG["estimator"])
        if unknown:
            raise ConfigError(f"Unknown estimator settings: {sorted(unknown)}")
        return EstimatorConfig(**section)

    @property
    def gps_frequency_hz(self) -> float:
        return self.config["gps_frequency_hz"]

    @property
    def log_level(self) -> str:
        return self.config["log_level"]

    @property
    def log_file(self):
        return self.config["log_file"]
