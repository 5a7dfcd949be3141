"""
Multi-producer, single-consumer channel used to wire sensors and estimators.

Closing works like dropping an endpoint: once every sender is closed the
receiver drains what is queued and then reports the channel as closed, and
once the receiver is closed every send fails.
"""

import threading
from queue import Queue, Empty
from typing import Any, Optional, Tuple

from .errors import ChannelClosed

_CLOSED = object()


class _ChannelState:
    def __init__(self):
        self.queue = Queue()
        self.lock = threading.Lock()
        self.senders = 0
        self.receiver_open = True
        self.drained = False


class Sender:
    """Sending end of a channel. Clone it to add producers."""

    def __init__(self, state: _ChannelState):
        self._state = state
        self._open = True
        with state.lock:
            state.senders += 1

    def send(self, item: Any) -> None:
        """
        Queue an item for the receiver.

        Raises:
            ChannelClosed: if the receiver is closed or this sender was closed
        """
        with self._state.lock:
            if not self._open:
                raise ChannelClosed("Sender already closed")
            if not self._state.receiver_open:
                raise ChannelClosed("Receiver closed")
            self._state.queue.put(item)

    def clone(self) -> 'Sender':
        if not self._open:
            raise ChannelClosed("Cannot clone a closed sender")
        return Sender(self._state)

    def close(self) -> None:
        """Retire this sender. Closing twice is a no-op."""
        with self._state.lock:
            if not self._open:
                return
            self._open = False
            self._state.senders -= 1
            if self._state.senders == 0:
                self._state.queue.put(_CLOSED)

    @property
    def is_closed(self) -> bool:
        """True if this sender is closed or nobody is listening anymore."""
        return not self._open or not self._state.receiver_open

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class Receiver:
    """Receiving end of a channel."""

    def __init__(self, state: _ChannelState):
        self._state = state

    def recv(self, timeout: Optional[float] = None) -> Any:
        """
        Block until an item arrives.

        Args:
            timeout: Seconds to wait, None waits forever

        Returns:
            The next item in arrival order

        Raises:
            ChannelClosed: all senders are closed and the queue is drained
            queue.Empty: nothing arrived within the timeout
        """
        if self._state.drained:
            raise ChannelClosed("All senders closed")
        item = self._state.queue.get(timeout=timeout)
        if item is _CLOSED:
            self._state.drained = True
            raise ChannelClosed("All senders closed")
        return item

    def try_recv(self) -> Any:
        """Return the next item, or None if nothing is queued right now."""
        try:
            return self.recv(timeout=0)
        except Empty:
            return None

    def close(self) -> None:
        """Stop listening. Pending and future sends are discarded."""
        with self._state.lock:
            self._state.receiver_open = False

    def __iter__(self):
        while True:
            try:
                yield self.recv()
            except ChannelClosed:
                return

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def channel() -> Tuple[Sender, Receiver]:
    """Create a connected (Sender, Receiver) pair."""
    state = _ChannelState()
    return Sender(state), Receiver(state)
