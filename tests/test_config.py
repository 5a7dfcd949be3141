#!/usr/bin/env python3
"""
Unit tests for configuration and the telemetry sink.
"""

import csv
import json
import logging
import os
import tempfile
import unittest

from helpers import position

from navfusion.config import Config, EstimatorConfig
from navfusion.errors import ConfigError
from navfusion.logs import Component, TelemetrySink, configure_logging


class TestEstimatorConfig(unittest.TestCase):
    """Test EstimatorConfig class."""

    def test_defaults(self):
        config = EstimatorConfig()

        self.assertEqual(config.imu_frequency_hz, 20.0)
        self.assertEqual(config.acc_sigma, 1.0)
        self.assertEqual(config.gps_sigma, 10.0)
        self.assertEqual(config.timing_tolerance, 0.02)
        self.assertEqual(config.buffer_length, 3)
        self.assertAlmostEqual(config.sample_period, 0.05)

    def test_invalid_values(self):
        invalid = [
            {'imu_frequency_hz': 0.0},
            {'acc_sigma': -1.0},
            {'gps_sigma': 0.0},
            {'timing_tolerance': 1.0},
            {'timing_tolerance': -0.1},
            {'buffer_length': 0},
            {'buffer_length': 2.5},
            {'initial_covariance_scale': 0.0},
            {'imu_frequency_hz': float('nan')},
            {'acc_sigma': float('nan')},
            {'gps_sigma': float('nan')},
            {'initial_covariance_scale': float('nan')},
        ]

        for kwargs in invalid:
            with self.assertRaises(ConfigError, msg=str(kwargs)):
                EstimatorConfig(**kwargs)

    def test_immutable(self):
        config = EstimatorConfig()
        with self.assertRaises(Exception):
            config.acc_sigma = 2.0


class TestConfig(unittest.TestCase):
    """Test Config file manager."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "navfusion.json")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_missing_file_uses_defaults(self):
        config = Config(self.path)

        self.assertEqual(config.estimator, EstimatorConfig())
        self.assertEqual(config.log_level, "INFO")
        self.assertFalse(os.path.exists(self.path))

    def test_file_overrides_defaults(self):
        with open(self.path, 'w') as f:
            json.dump({"estimator": {"imu_frequency_hz": 10.0}, "log_level": "DEBUG"}, f)

        config = Config(self.path)

        self.assertAlmostEqual(config.estimator.sample_period, 0.1)
        self.assertEqual(config.estimator.gps_sigma, 10.0)
        self.assertEqual(config.log_level, "DEBUG")

    def test_save_and_reload(self):
        config = Config(self.path)
        config.set("estimator.buffer_length", 5)
        config.save_config()

        reloaded = Config(self.path)
        self.assertEqual(reloaded.estimator.buffer_length, 5)

    def test_dotted_get_and_set(self):
        config = Config(self.path)

        self.assertEqual(config.get("estimator.acc_sigma"), 1.0)
        self.assertIsNone(config.get("estimator.missing"))
        self.assertEqual(config.get("nothing.here", 7), 7)

        config.set("custom.nested.value", 3)
        self.assertEqual(config.get("custom.nested.value"), 3)

    def test_malformed_file(self):
        with open(self.path, 'w') as f:
            f.write("{not json")

        with self.assertRaises(ConfigError):
            Config(self.path)

    def test_unknown_estimator_setting(self):
        config = Config(self.path)
        config.set("estimator.bogus", 1)

        with self.assertRaises(ConfigError):
            config.estimator

    def test_nan_in_file_rejected(self):
        with open(self.path, 'w') as f:
            f.write('{"estimator": {"gps_sigma": NaN}}')

        config = Config(self.path)

        with self.assertRaises(ConfigError):
            config.estimator

    def test_invalid_estimator_setting(self):
        config = Config(self.path)
        config.set("estimator.timing_tolerance", 2.0)

        with self.assertRaises(ConfigError):
            config.estimator


class TestTelemetrySink(unittest.TestCase):
    """Test TelemetrySink class."""

    def setUp(self):
        self.sink = TelemetrySink()

    def tearDown(self):
        self.sink.close()

    def test_single_component_log(self):
        self.sink.log(Component.GENERAL, "test message")
        self.sink.flush()

        data = self.sink.get_data(Component.GENERAL)
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0].data, "test message")

    def test_component_without_entries(self):
        self.assertIsNone(self.sink.get_data(Component.AVERAGE))

    def test_components_are_separate(self):
        self.sink.log(Component.KALMAN, position(1.0, 2.0, 3.0))
        self.sink.log(Component.GENERAL, "kalman started")
        self.sink.flush()

        self.assertEqual(len(self.sink.get_data(Component.KALMAN)), 1)
        self.assertEqual(self.sink.get_data(Component.GENERAL)[0].data, "kalman started")

    def test_log_after_close_is_dropped(self):
        self.sink.close()
        self.sink.log(Component.GENERAL, "late")

        self.assertIsNone(self.sink.get_data(Component.GENERAL))

    def test_write_csv(self):
        self.sink.log(Component.KALMAN, position(1.0, 2.0, 3.0, timestamp=10.0))
        self.sink.log(Component.KALMAN, position(4.0, 5.0, 6.0, timestamp=11.0))

        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "logs", "kalman.csv")
            rows = self.sink.write_csv(Component.KALMAN, path)

            with open(path, newline='') as f:
                content = list(csv.reader(f))

        self.assertEqual(rows, 2)
        self.assertEqual(content[0], ["timestamp", "x", "y", "z"])
        self.assertEqual([float(v) for v in content[2]], [11.0, 4.0, 5.0, 6.0])


class TestConfigureLogging(unittest.TestCase):
    """Test logging setup."""

    def tearDown(self):
        root = logging.getLogger("navfusion")
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        root.setLevel(logging.NOTSET)

    def test_file_handler(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = os.path.join(tmpdir, "navfusion.log")
            root = configure_logging("debug", log_file)

            self.assertEqual(root.level, logging.DEBUG)
            self.assertEqual(len(root.handlers), 2)

            logging.getLogger("navfusion.test").warning("hello")
            for handler in root.handlers:
                handler.flush()

            with open(log_file) as f:
                self.assertIn("hello", f.read())

            self.tearDown()


if __name__ == '__main__':
    unittest.main()
