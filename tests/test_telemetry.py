#!/usr/bin/env python3
"""
Unit tests for telemetry types, channels and the communication registry.
"""

import unittest
import threading
from queue import Empty

import numpy as np

from helpers import acceleration, position

from navfusion.channels import channel
from navfusion.errors import ChannelClosed, TelemetryKindError
from navfusion.registry import CommunicationRegistry, DataSource
from navfusion.telemetry import Acceleration, Position, Sample, Telemetry, TelemetryKind


class TestSample(unittest.TestCase):
    """Test Sample class."""

    def test_initialization(self):
        sample = Sample(x=1.0, y=2.0, z=3.0, timestamp=5.0)

        self.assertEqual(sample.x, 1.0)
        self.assertEqual(sample.y, 2.0)
        self.assertEqual(sample.z, 3.0)
        self.assertEqual(sample.timestamp, 5.0)

    def test_default_timestamp(self):
        self.assertIsNotNone(Sample().timestamp)
        self.assertGreater(Sample().timestamp, 0.0)

    def test_vector_property(self):
        sample = Sample(x=1.0, y=2.0, z=3.0)
        np.testing.assert_array_equal(sample.vector, [1.0, 2.0, 3.0])

    def test_from_vector(self):
        sample = Sample.from_vector(np.array([4.0, 5.0, 6.0, 7.0, 8.0, 9.0]), timestamp=1.5)

        self.assertEqual((sample.x, sample.y, sample.z), (4.0, 5.0, 6.0))
        self.assertEqual(sample.timestamp, 1.5)

    def test_from_short_vector_fails(self):
        with self.assertRaises(ValueError):
            Sample.from_vector(np.array([1.0, 2.0]))

    def test_immutable(self):
        sample = Sample(x=1.0)
        with self.assertRaises(Exception):
            sample.x = 2.0


class TestTelemetry(unittest.TestCase):
    """Test the Acceleration/Position union."""

    def test_kinds(self):
        acc = acceleration(1.0, 2.0, 3.0)
        pos = position(1.0, 2.0, 3.0)

        self.assertIs(acc.kind, TelemetryKind.ACCELERATION)
        self.assertIs(pos.kind, TelemetryKind.POSITION)
        self.assertTrue(acc.is_acceleration)
        self.assertFalse(acc.is_position)
        self.assertTrue(pos.is_position)

    def test_matching_accessors(self):
        sample = Sample(x=1.0, y=2.0, z=3.0, timestamp=0.0)

        self.assertEqual(Acceleration(sample).as_acceleration(), sample)
        self.assertEqual(Position(sample).as_position(), sample)

    def test_confusing_kinds_fails_loudly(self):
        with self.assertRaises(TelemetryKindError):
            acceleration(1.0, 2.0, 3.0).as_position()

        with self.assertRaises(TelemetryKindError):
            position(1.0, 2.0, 3.0).as_acceleration()

    def test_base_class_cannot_be_created(self):
        with self.assertRaises(TypeError):
            Telemetry(Sample())

    def test_same_sample_different_kinds_not_equal(self):
        sample = Sample(timestamp=0.0)
        self.assertNotEqual(Acceleration(sample), Position(sample))


class TestChannel(unittest.TestCase):
    """Test the multi-producer channel."""

    def test_fifo_order(self):
        tx, rx = channel()
        for i in range(5):
            tx.send(i)

        self.assertEqual([rx.recv() for _ in range(5)], [0, 1, 2, 3, 4])

    def test_iteration_ends_when_all_senders_closed(self):
        tx, rx = channel()
        tx2 = tx.clone()

        tx.send("a")
        tx2.send("b")
        tx.close()
        self.assertEqual(rx.recv(), "a")

        tx2.send("c")
        tx2.close()

        self.assertEqual(list(rx), ["b", "c"])
        with self.assertRaises(ChannelClosed):
            rx.recv()

    def test_send_fails_after_receiver_closed(self):
        tx, rx = channel()
        rx.close()

        self.assertTrue(tx.is_closed)
        with self.assertRaises(ChannelClosed):
            tx.send(1)

    def test_closed_sender_cannot_send_or_clone(self):
        tx, rx = channel()
        tx.close()
        tx.close()  # second close is a no-op

        with self.assertRaises(ChannelClosed):
            tx.send(1)
        with self.assertRaises(ChannelClosed):
            tx.clone()

    def test_try_recv_and_timeout(self):
        tx, rx = channel()

        self.assertIsNone(rx.try_recv())
        with self.assertRaises(Empty):
            rx.recv(timeout=0.01)

        tx.send(42)
        self.assertEqual(rx.try_recv(), 42)

    def test_context_manager_closes_sender(self):
        tx, rx = channel()
        with tx:
            tx.send(1)

        self.assertEqual(list(rx), [1])

    def test_concurrent_senders(self):
        tx, rx = channel()
        senders = [tx.clone() for _ in range(4)]
        tx.close()

        def produce(sender, base):
            with sender:
                for i in range(100):
                    sender.send((base, i))

        threads = [threading.Thread(target=produce, args=(s, n)) for n, s in enumerate(senders)]
        for t in threads:
            t.start()

        received = list(rx)
        for t in threads:
            t.join(timeout=5.0)

        self.assertEqual(len(received), 400)
        # FIFO per sender
        for base in range(4):
            self.assertEqual([i for b, i in received if b == base], list(range(100)))


class TestCommunicationRegistry(unittest.TestCase):
    """Test CommunicationRegistry class."""

    def test_new_registry_is_empty(self):
        registry = CommunicationRegistry()
        for source in DataSource:
            self.assertIsNone(registry.take_registered_transmitters(source))

    def test_take_moves_ownership(self):
        tx, _ = channel()
        registry = CommunicationRegistry()
        registry.register_for_input(DataSource.IMU, tx.clone())
        registry.register_for_input(DataSource.GPS, tx)

        self.assertEqual(len(registry.take_registered_transmitters(DataSource.IMU)), 1)
        self.assertIsNone(registry.take_registered_transmitters(DataSource.IMU))
        self.assertEqual(len(registry.take_registered_transmitters(DataSource.GPS)), 1)

    def test_multiple_subscribers(self):
        tx, _ = channel()
        registry = CommunicationRegistry()
        registry.register_for_input(DataSource.KALMAN, tx.clone())
        registry.register_for_input(DataSource.KALMAN, tx)

        self.assertEqual(len(registry.take_registered_transmitters(DataSource.KALMAN)), 2)


if __name__ == '__main__':
    unittest.main()
