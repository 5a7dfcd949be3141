"""
Diagnostics logging setup and the per-component telemetry sink.
"""

import csv
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from queue import Queue
from typing import Any, Dict, List, Optional

from .telemetry import Telemetry

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach handlers to the package logger.

    Args:
        level: Logging level name
        log_file: Optional file to mirror the log into

    Returns:
        The configured package logger
    """
    root = logging.getLogger("navfusion")
    root.setLevel(level.upper())

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root


class Component(Enum):
    """Names under which the sink collects entries."""

    GENERAL = "general"
    KALMAN = "kalman"
    INERTIAL_NAVIGATOR = "inertial_navigator"
    AVERAGE = "average"


@dataclass(frozen=True)
class LogEntry:
    timestamp: float
    data: Any


class TelemetrySink:
    """
    Fire-and-forget collector of estimator outputs keyed by component.

    Entries are handed to a background thread through an unbounded queue, so
    log() never blocks the caller on storage.
    """

    def __init__(self):
        self._queue = Queue()
        self._storage: Dict[Component, List[LogEntry]] = {}
        self._lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._closed = False
        self._worker = threading.Thread(target=self._store_loop, name="telemetry-sink", daemon=True)
        self._worker.start()

    def _store_loop(self):
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    return
                component, entry = item
                with self._lock:
                    self._storage.setdefault(component, []).append(entry)
            finally:
                self._queue.task_done()

    def log(self, component: Component, data: Any) -> None:
        """Record data for a component. Dropped silently once closed."""
        with self._state_lock:
            if self._closed:
                return
            self._queue.put((component, LogEntry(timestamp=time.time(), data=data)))

    def get_data(self, component: Component) -> Optional[List[LogEntry]]:
        """Copy of stored entries, or None if the component never logged."""
        with self._lock:
            entries = self._storage.get(component)
            return list(entries) if entries is not None else None

    def flush(self) -> None:
        """Wait until every queued entry is stored."""
        self._queue.join()

    def close(self) -> None:
        """Store what is queued and stop the worker."""
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(None)
        self._worker.join()

    def write_csv(self, component: Component, path: str) -> int:
        """
        Export a component's telemetry entries as CSV.

        Rows are timestamp, x, y, z where timestamp is the sample time.
        Entries that are not telemetry are skipped.

        Returns:
            Number of rows written
        """
        self.flush()
        entries = self.get_data(component) or []

        Path(path).parent.mkdir(parents=True, exist_ok=True)
        rows = 0
        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(["timestamp", "x", "y", "z"])
            for entry in entries:
                if not isinstance(entry.data, Telemetry):
                    continue
                sample = entry.data.data
                writer.writerow([sample.timestamp, sample.x, sample.y, sample.z])
                rows += 1

        logger.info("Saved %d %s entries to %s", rows, component.value, path)
        return rows
