"""
Registry that collects subscriber senders per data source before wiring.
"""

import threading
from enum import Enum
from typing import Dict, List, Optional

from .channels import Sender


class DataSource(Enum):
    IMU = "imu"
    GPS = "gps"
    KALMAN = "kalman"
    AVERAGE = "average"
    INERTIAL_NAVIGATOR = "inertial_navigator"


class CommunicationRegistry:
    """
    Consumers register the sender of their input channel for each source
    they want to listen to; the producer of that source later takes the
    whole list and owns it from then on.
    """

    def __init__(self):
        self._transmitters: Dict[DataSource, List[Sender]] = {}
        self._lock = threading.Lock()

    def register_for_input(self, source: DataSource, transmitter: Sender):
        with self._lock:
            self._transmitters.setdefault(source, []).append(transmitter)

    def take_registered_transmitters(self, source: DataSource) -> Optional[List[Sender]]:
        """Remove and return the senders for a source, None if there are none."""
        with self._lock:
            return self._transmitters.pop(source, None)
