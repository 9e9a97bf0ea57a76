#!/usr/bin/env python3
"""
Test sysfs GPIO pin handler against a mock sysfs tree
"""
import os
import sys
import tempfile
import threading
import time
import unittest

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from gpioctl.core.config import Config
from gpioctl.core.errors import ExportUnavailable, SysfsIOError
from gpioctl.protocols.gpio import Direction, ExportStatus, SysfsPin, SysfsSimulator


class SysfsTestCase(unittest.TestCase):
    """Base class with a temporary mock sysfs tree"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.base = self.tmp.name
        self.sim = SysfsSimulator(self.base)
        self.pin = SysfsPin(self.base, 22, settle_timeout=0.02, poll_interval=0.005)

    def tearDown(self):
        self.tmp.cleanup()

    def control(self, name):
        return os.path.join(self.base, name)

    def read_control(self, name):
        with open(self.control(name)) as f:
            return f.read()


class TestExport(SysfsTestCase):
    """Test export lifecycle"""

    def test_existing_pin_dir_skips_export(self):
        """Pre-existing pin directory leaves export untouched"""
        self.sim.provision(22)
        self.sim.add_control_files()

        status = self.pin.ensure_exported()

        self.assertEqual(status, ExportStatus.ALREADY_EXPORTED)
        self.assertEqual(self.read_control("export"), "")

    def test_missing_export_is_not_an_error(self):
        """No export control file returns success"""
        status = self.pin.ensure_exported()

        self.assertEqual(status, ExportStatus.EXPORT_UNAVAILABLE)
        self.assertFalse(os.path.exists(self.control("export")))

    def test_export_raises_unavailable(self):
        """The lower-level export call names the missing control file"""
        with self.assertRaises(ExportUnavailable) as ctx:
            self.pin.export()
        self.assertEqual(ctx.exception.path, self.control("export"))

    def test_export_writes_pin_number(self):
        """Export writes the pin number, gives up waiting with a warning"""
        self.sim.add_control_files()

        with self.assertLogs("gpioctl.protocols.gpio", level="WARNING") as logs:
            status = self.pin.ensure_exported()

        self.assertEqual(status, ExportStatus.EXPORTED)
        self.assertEqual(self.read_control("export"), "22")
        self.assertFalse(self.pin.exists())
        self.assertTrue(any("not present" in line for line in logs.output))

    def test_export_waits_for_pin_dir(self):
        """Export returns once the kernel has created the pin directory"""
        self.sim.add_control_files()
        pin = SysfsPin(self.base, 22, settle_timeout=2.0, poll_interval=0.005)
        timer = threading.Timer(0.1, self.sim.provision, args=(22,))
        timer.start()

        started = time.monotonic()
        status = pin.ensure_exported()
        elapsed = time.monotonic() - started
        timer.join()

        self.assertEqual(status, ExportStatus.EXPORTED)
        self.assertTrue(pin.exists())
        self.assertGreaterEqual(elapsed, 0.05)
        self.assertLess(elapsed, 1.5)

    @unittest.skipUnless(os.path.exists("/dev/full"), "requires /dev/full")
    def test_export_write_failure_is_raised(self):
        """Export file that opens but rejects the write is fatal here"""
        os.symlink("/dev/full", self.control("export"))
        with self.assertRaises(SysfsIOError) as ctx:
            self.pin.ensure_exported()
        self.assertEqual(ctx.exception.operation, "write")

    def test_exists_is_not_cached(self):
        self.assertFalse(self.pin.exists())
        self.sim.provision(22)
        self.assertTrue(self.pin.exists())

    def test_unexport(self):
        self.sim.provision(22)
        self.sim.add_control_files()

        self.assertTrue(self.pin.unexport())
        self.assertEqual(self.read_control("unexport"), "22")

    def test_unexport_without_pin_dir(self):
        self.sim.add_control_files()
        self.assertFalse(self.pin.unexport())
        self.assertEqual(self.read_control("unexport"), "")


class TestDirection(SysfsTestCase):
    """Test direction control"""

    def setUp(self):
        super().setUp()
        self.sim.provision(22, direction="in")

    def test_set_and_get_direction(self):
        self.pin.set_direction(Direction.OUT)
        self.assertEqual(self.sim.read(22, "direction"), "out")
        self.assertEqual(self.pin.get_direction(), Direction.OUT)

        self.pin.set_direction("in")
        self.assertEqual(self.pin.get_direction(), Direction.IN)

    def test_invalid_direction(self):
        with self.assertRaises(ValueError):
            self.pin.set_direction("sideways")

    def test_direction_without_pin_dir(self):
        pin = SysfsPin(self.base, 23)
        with self.assertRaises(SysfsIOError):
            pin.set_direction(Direction.OUT)


class TestValue(SysfsTestCase):
    """Test value read/write"""

    def setUp(self):
        super().setUp()
        self.sim.provision(22, direction="out")

    def _set_raw(self, content):
        with open(self.pin.value_path, "w") as f:
            f.write(content)

    def test_round_trip(self):
        """Written level reads back on a round-tripping store"""
        self.pin.set_value(True)
        self.assertTrue(self.pin.get_value())
        self.assertEqual(self.sim.read(22, "value"), "1\n")

        self.pin.set_value(False)
        self.assertFalse(self.pin.get_value())
        self.assertEqual(self.sim.read(22, "value"), "0\n")

    def test_lenient_parse(self):
        """Only a leading '1' reads as HIGH"""
        cases = [("1\n", True), ("1", True), ("", False), ("x", False), ("0\n", False), (" 1", False)]
        for content, expected in cases:
            with self.subTest(content=content):
                self._set_raw(content)
                self.assertEqual(self.pin.get_value(), expected)

    def test_missing_value_file(self):
        os.remove(self.pin.value_path)
        with self.assertRaises(SysfsIOError):
            self.pin.get_value()


class TestFromConfig(unittest.TestCase):
    """Test construction from configuration"""

    def test_from_config(self):
        config = Config(pin=17, sysfs_base="/tmp/mockgpio", read_capacity=8,
                        export_settle_timeout=0.1, export_poll_interval=0.02)
        pin = SysfsPin.from_config(config)

        self.assertEqual(pin.pin, 17)
        self.assertEqual(pin.pin_dir, os.path.join("/tmp/mockgpio", "gpio17"))
        self.assertEqual(pin.read_capacity, 8)
        self.assertEqual(pin.settle_timeout, 0.1)
        self.assertEqual(pin.poll_interval, 0.02)


if __name__ == "__main__":
    unittest.main()
