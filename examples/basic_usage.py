#!/usr/bin/env python3
"""
Basic usage example of the position estimators.

Simulated IMU and GPS producers follow a helical trajectory in real time and
feed the Kalman filter, the inertial navigator and the moving average, each
on its own thread. At the end the position error of every estimator is
printed.
"""

import argparse
import logging
import os
import sys
import threading
import time

import numpy as np

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from navfusion import (
    Acceleration,
    CommunicationRegistry,
    Config,
    DataSource,
    EstimatorKind,
    Position,
    Sample,
    TelemetrySink,
    Component,
    channel,
    configure_logging,
    spawn_estimator,
)
from navfusion.estimators import broadcast
from navfusion.math import cycle_duration

logger = logging.getLogger("navfusion.examples")

HELIX_RADIUS = 20.0      # meters
HELIX_FREQUENCY = 0.5    # rad/s
HELIX_CLIMB = 1.0        # m/s
IMU_NOISE_SIGMA = 1.0    # m/s²
GPS_NOISE_SIGMA = 3.0    # meters


def helix(t):
    """True position and acceleration of the platform at time t."""
    w = HELIX_FREQUENCY
    pos = np.array([
        HELIX_RADIUS * np.cos(w * t),
        HELIX_RADIUS * np.sin(w * t),
        HELIX_CLIMB * t
    ])
    acc = np.array([
        -HELIX_RADIUS * w**2 * np.cos(w * t),
        -HELIX_RADIUS * w**2 * np.sin(w * t),
        0.0
    ])
    return pos, acc


def run_sensor(name, period, transmitters, make_telemetry, start_time, duration, rng):
    """Producer loop sending noisy telemetry to every registered consumer."""
    next_tick = time.time()
    while transmitters:
        now = time.time()
        t = now - start_time
        if t > duration:
            break

        telemetry = make_telemetry(t, now, rng)
        transmitters = broadcast(transmitters, telemetry)

        next_tick += period
        time.sleep(max(0.0, next_tick - time.time()))

    for tx in transmitters:
        tx.close()
    logger.info("%s producer removed", name)


def imu_telemetry(t, now, rng):
    _, acc = helix(t)
    return Acceleration(Sample.from_vector(acc + rng.normal(0.0, IMU_NOISE_SIGMA, 3), now))


def gps_telemetry(t, now, rng):
    pos, _ = helix(t)
    return Position(Sample.from_vector(pos + rng.normal(0.0, GPS_NOISE_SIGMA, 3), now))


def collect(rx, start_time, results):
    """Consumer: compare every estimate with the true position."""
    for telemetry in rx:
        estimate = telemetry.as_position()
        truth, _ = helix(estimate.timestamp - start_time)
        results.append(np.linalg.norm(estimate.vector - truth))


def main():
    parser = argparse.ArgumentParser(description="Run the estimators on a simulated helix")
    parser.add_argument("--config", default="navfusion.json", help="JSON configuration file")
    parser.add_argument("--duration", type=float, default=10.0, help="Simulation length in seconds")
    parser.add_argument("--csv-dir", default=None, help="Directory to save estimator logs as CSV")
    args = parser.parse_args()

    config = Config(args.config)
    configure_logging(config.log_level, config.log_file)
    estimator_config = config.estimator

    registry = CommunicationRegistry()
    sink = TelemetrySink()

    # Wire every estimator to the sensors it listens to and to a collector
    sources = {
        EstimatorKind.KALMAN: (DataSource.IMU, DataSource.GPS),
        EstimatorKind.INERTIAL_NAVIGATOR: (DataSource.IMU, DataSource.GPS),
        EstimatorKind.AVERAGE: (DataSource.GPS,),
    }
    start_time = time.time()
    estimators, consumers, errors = [], [], {}

    for kind, inputs in sources.items():
        input_tx, input_rx = channel()
        for source in inputs:
            registry.register_for_input(source, input_tx.clone())
        input_tx.close()

        output_tx, output_rx = channel()
        errors[kind] = []
        consumer = threading.Thread(target=collect, args=(output_rx, start_time, errors[kind]),
                                    name=f"{kind.value}-collector", daemon=True)
        consumer.start()
        consumers.append(consumer)

        estimators.append(spawn_estimator(kind, estimator_config, input_rx, [output_tx], sink=sink))

    producers = [
        threading.Thread(
            target=run_sensor,
            args=("IMU", estimator_config.sample_period,
                  registry.take_registered_transmitters(DataSource.IMU) or [],
                  imu_telemetry, start_time, args.duration, np.random.default_rng()),
            name="imu", daemon=True),
        threading.Thread(
            target=run_sensor,
            args=("GPS", cycle_duration(config.gps_frequency_hz),
                  registry.take_registered_transmitters(DataSource.GPS) or [],
                  gps_telemetry, start_time, args.duration, np.random.default_rng()),
            name="gps", daemon=True),
    ]
    for producer in producers:
        producer.start()

    for thread in producers + consumers:
        thread.join()
    for estimator in estimators:
        estimator.join()

    print("=== Position error after %.1f s ===" % args.duration)
    for kind, values in errors.items():
        if values:
            print(f"{kind.value:>20}: mean {np.mean(values):7.2f} m, final {values[-1]:7.2f} m "
                  f"({len(values)} estimates)")
        else:
            print(f"{kind.value:>20}: no estimates")

    if args.csv_dir:
        for component in (Component.KALMAN, Component.INERTIAL_NAVIGATOR, Component.AVERAGE):
            sink.write_csv(component, os.path.join(args.csv_dir, f"{component.value}.csv"))
    sink.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
