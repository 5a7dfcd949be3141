"""
Default tuning constants for the navigation estimators.
"""

# Sensor refresh rates (Hz)
IMU_FREQUENCY_HZ = 20.0
GPS_FREQUENCY_HZ = 5.0

# Kalman tuning parameters
KALMAN_ACC_SIGMA = 1.0     # Acceleration (process) noise scale
KALMAN_GPS_SIGMA = 10.0    # GPS (measurement) noise scale
KALMAN_TIMING_TOLERANCE = 0.02  # 0.01 = 1% of the nominal IMU period

# Initial covariance is Q scaled by this, an arbitrarily uncertain start
INITIAL_COVARIANCE_SCALE = 10000.0

# Moving average window
BUFFER_LENGTH = 3

# State layout: [x, y, z, vx, vy, vz]
STATE_SIZE = 6
MEASUREMENT_SIZE = 3
