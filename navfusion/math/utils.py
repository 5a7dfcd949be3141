"""
Timing helpers shared by the estimators.
"""


def cycle_duration(frequency_hz):
    """
    Period of a task running at the given rate.

    Args:
        frequency_hz (float): Refresh rate in Hz, must be positive

    Returns:
        float: Period in seconds
    """
    if frequency_hz <= 0:
        raise ValueError(f"Frequency must be positive, got {frequency_hz}")
    return 1.0 / frequency_hz


def interval_bounds(nominal, tolerance):
    """
    Acceptable interval range around a nominal period.

    Args:
        nominal (float): Nominal period in seconds
        tolerance (float): Tolerance as a fraction of the period

    Returns:
        tuple: (min_interval, max_interval) in seconds
    """
    return nominal * (1.0 - tolerance), nominal * (1.0 + tolerance)
