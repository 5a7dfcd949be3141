"""
Exceptions raised by the estimation engine.
"""


class EstimatorError(RuntimeError):
    """Fatal condition that stops an estimator thread."""


class TimestampOrderError(EstimatorError):
    """Timestamps do not advance, so elapsed time cannot be used."""


class SingularInnovationError(EstimatorError):
    """Innovation covariance could not be inverted during correction."""


class TelemetryKindError(TypeError):
    """An acceleration sample was used as a position sample or vice versa."""


class ChannelClosed(Exception):
    """The other end of a channel is gone."""


class ConfigError(ValueError):
    """Invalid estimator configuration."""
