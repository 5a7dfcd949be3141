"""
Thread scaffolding shared by all estimators.

Every estimator is a single-input, multi-output stream transformer: it reads
telemetry from one receiver on its own thread, turns some of it into position
estimates and broadcasts those to its subscribers. It stops when the input is
closed, when no subscriber is left, or on a fatal EstimatorError.
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, Iterable, List, Optional

import numpy as np

from ..channels import Receiver, Sender
from ..config import EstimatorConfig
from ..errors import ChannelClosed, EstimatorError
from ..logs import Component, TelemetrySink
from ..telemetry import Position, Sample, Telemetry
from .bootstrap import StateBootstrap
from .state import EstimatorPhase

logger = logging.getLogger(__name__)


class StopReason(Enum):
    INPUT_CLOSED = "input_closed"
    NO_SUBSCRIBERS = "no_subscribers"
    FAILED = "failed"


def broadcast(subscribers: Iterable[Sender], telemetry: Telemetry) -> List[Sender]:
    """
    Send telemetry to every subscriber and keep only those that took it.

    Args:
        subscribers: Current subscriber senders
        telemetry: Estimate to deliver

    Returns:
        Subscribers whose receiver is still open
    """
    live = []
    for subscriber in subscribers:
        try:
            subscriber.send(telemetry)
        except ChannelClosed:
            logger.debug("Dropping closed subscriber %r", subscriber)
            continue
        live.append(subscriber)
    return live


class Estimator:
    """Base class: owns the input, the subscribers and the worker thread."""

    name = "Estimator"
    component = Component.GENERAL

    def __init__(self,
                 config: EstimatorConfig,
                 input_rx: Receiver,
                 subscribers: Optional[Iterable[Sender]] = None,
                 sink: Optional[TelemetrySink] = None,
                 clock: Callable[[], float] = time.time):
        """
        Args:
            config: Estimator configuration
            input_rx: Merged telemetry input
            subscribers: Senders that receive every estimate
            sink: Optional collector that gets a copy of every estimate
            clock: Time source for emitted timestamps and arrival times
        """
        self.config = config
        self.input_rx = input_rx
        self.subscribers: List[Sender] = list(subscribers or [])
        self.sink = sink
        self.clock = clock

        self.phase = EstimatorPhase.RUNNING
        self.stop_reason: Optional[StopReason] = None
        self.error: Optional[Exception] = None
        self.emitted_count = 0

        self._thread: Optional[threading.Thread] = None

    def process(self, telemetry: Telemetry) -> Optional[Position]:
        """
        Apply one sample to the estimator state.

        Returns:
            Position estimate to broadcast, or None when nothing is emitted
        """
        raise NotImplementedError

    def _position_estimate(self, vector: np.ndarray) -> Position:
        return Position(Sample.from_vector(vector, timestamp=self.clock()))

    def start(self) -> threading.Thread:
        """Run the estimator on a dedicated daemon thread."""
        if self._thread is not None:
            raise RuntimeError(f"{self.name} already started")
        self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the thread. Returns True if it has finished."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run(self):
        """Thread body: consume until the input closes or nobody listens."""
        try:
            self.stop_reason = self._consume()
        except EstimatorError as e:
            self.error = e
            self.stop_reason = StopReason.FAILED
            logger.error("%s failed: %s", self.name, e, exc_info=True)
        except Exception as e:
            self.error = e
            self.stop_reason = StopReason.FAILED
            logger.exception("%s crashed", self.name)
        finally:
            self.phase = EstimatorPhase.STOPPED
            self.input_rx.close()
            for subscriber in self.subscribers:
                subscriber.close()
            self.subscribers = []

            reason = self.stop_reason.value if self.stop_reason else "error"
            logger.info("%s removed (%s)", self.name, reason)
            if self.sink is not None:
                self.sink.log(Component.GENERAL, f"{self.name} removed")

    def _consume(self) -> StopReason:
        for telemetry in self.input_rx:
            estimate = self.process(telemetry)
            if estimate is None:
                continue

            self.subscribers = broadcast(self.subscribers, estimate)
            if not self.subscribers:
                return StopReason.NO_SUBSCRIBERS

            self.emitted_count += 1
            if self.sink is not None:
                self.sink.log(self.component, estimate)

        return StopReason.INPUT_CLOSED


class BootstrappedEstimator(Estimator):
    """Estimator that waits for two position fixes before it starts."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.bootstrap = StateBootstrap()
        self.phase = EstimatorPhase.BOOTSTRAPPING

    def process(self, telemetry: Telemetry) -> Optional[Position]:
        if self.phase is EstimatorPhase.BOOTSTRAPPING:
            initial_state = self.bootstrap.feed(telemetry)
            if initial_state is not None:
                self.initialize(initial_state)
                self.phase = EstimatorPhase.RUNNING
                logger.info("%s initialized: %s", self.name, initial_state)
            return None

        return self.step(telemetry)

    def initialize(self, state: np.ndarray):
        """Take over the bootstrapped [x, y, z, vx, vy, vz]."""
        raise NotImplementedError

    def step(self, telemetry: Telemetry) -> Optional[Position]:
        """Process a sample once the state is initialized."""
        raise NotImplementedError
