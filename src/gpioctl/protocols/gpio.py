"""
gpioctl GPIO Sysfs Handler
Export lifecycle, direction and value control for one pin through the
sysfs GPIO interface, plus a simulator that provisions a mock tree.
"""

import os
import time
import logging
from enum import Enum
from typing import Union

from ..core.channel import read_text, write_text
from ..core.config import Config
from ..core.errors import ExportUnavailable, SysfsIOError

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Pin direction as written to the sysfs ``direction`` file"""
    IN = "in"
    OUT = "out"


class ExportStatus(Enum):
    """Outcome of ensure_exported"""
    ALREADY_EXPORTED = "already_exported"
    EXPORTED = "exported"
    EXPORT_UNAVAILABLE = "export_unavailable"


class SysfsPin:
    """
    Sysfs GPIO Pin

    Owns the export/unexport lifecycle and the direction/value transitions
    of one pin under a sysfs base directory. Existence is re-checked on
    every call since the kernel owns the directory. Failures are raised as
    ``SysfsIOError``; deciding whether they are fatal is left to the caller.
    """

    def __init__(self, base_path: str, pin: int,
                 settle_timeout: float = 0.25,
                 poll_interval: float = 0.01,
                 read_capacity: int = 16):
        """
        Initialize pin handler

        Args:
            base_path: Sysfs GPIO root, normally /sys/class/gpio
            pin: GPIO line number
            settle_timeout: Longest wait for the pin directory after export
            poll_interval: Sleep between directory checks while settling
            read_capacity: Read buffer size for value/direction files
        """
        self.base_path = str(base_path)
        self.pin = int(pin)
        self.settle_timeout = settle_timeout
        self.poll_interval = poll_interval
        self.read_capacity = read_capacity

    @classmethod
    def from_config(cls, config: Config) -> 'SysfsPin':
        """Create pin handler from configuration"""
        return cls(
            config.sysfs_base,
            config.pin,
            settle_timeout=config.export_settle_timeout,
            poll_interval=config.export_poll_interval,
            read_capacity=config.read_capacity,
        )

    @property
    def pin_dir(self) -> str:
        return os.path.join(self.base_path, f"gpio{self.pin}")

    @property
    def direction_path(self) -> str:
        return os.path.join(self.pin_dir, "direction")

    @property
    def value_path(self) -> str:
        return os.path.join(self.pin_dir, "value")

    def _control_path(self, name: str) -> str:
        return os.path.join(self.base_path, name)

    def exists(self) -> bool:
        """Check whether the pin directory is present right now"""
        return os.path.isdir(self.pin_dir)

    def export(self):
        """
        Ask the kernel to create the pin directory

        Raises:
            ExportUnavailable: the export control file could not be opened
            SysfsIOError: the export file opened but the write failed
        """
        path = self._control_path("export")
        try:
            write_text(path, str(self.pin), create=False)
        except SysfsIOError as e:
            if e.operation == "open":
                raise ExportUnavailable(path, e) from e
            raise

    def ensure_exported(self) -> ExportStatus:
        """
        Export the pin unless its directory already exists

        A missing export control file is not an error: in a mock tree or on
        a board where the line is provisioned elsewhere the directory is
        expected to be there already.
        """
        if self.exists():
            logger.debug(f"GPIO{self.pin} already exported at {self.pin_dir}")
            return ExportStatus.ALREADY_EXPORTED

        try:
            self.export()
        except ExportUnavailable as e:
            logger.warning(f"GPIO{self.pin}: {e}, assuming pin is provisioned elsewhere")
            return ExportStatus.EXPORT_UNAVAILABLE

        self._wait_for_pin_dir()
        logger.info(f"GPIO{self.pin} exported")
        return ExportStatus.EXPORTED

    def _wait_for_pin_dir(self) -> bool:
        """Poll until the kernel has created the pin directory"""
        deadline = time.monotonic() + self.settle_timeout
        while not self.exists():
            if time.monotonic() >= deadline:
                logger.warning(
                    f"GPIO{self.pin}: {self.pin_dir} not present {self.settle_timeout:.3f}s after export"
                )
                return False
            time.sleep(self.poll_interval)
        return True

    def unexport(self) -> bool:
        """
        Release the pin

        Returns:
            True if an unexport write was issued, False if the pin was not
            exported
        """
        if not self.exists():
            return False
        write_text(self._control_path("unexport"), str(self.pin), create=False)
        logger.info(f"GPIO{self.pin} unexported")
        return True

    def set_direction(self, direction: Union[Direction, str]):
        """Write ``in`` or ``out`` to the direction file"""
        direction = Direction(direction)
        write_text(self.direction_path, direction.value)
        logger.debug(f"GPIO{self.pin} direction set to {direction.value}")

    def get_direction(self) -> Direction:
        """Read the direction file"""
        raw = read_text(self.direction_path, self.read_capacity).strip()
        try:
            return Direction(raw)
        except ValueError:
            raise ValueError(f"GPIO{self.pin}: unexpected direction {raw!r}")

    def get_value(self) -> bool:
        """
        Read the pin level

        Returns:
            True (HIGH) when the first character is '1'. Anything else,
            including an empty file, reads as LOW.
        """
        raw = read_text(self.value_path, self.read_capacity)
        return raw[:1] == "1"

    def set_value(self, level: bool):
        """Write the pin level"""
        write_text(self.value_path, "1\n" if level else "0\n")
        logger.debug(f"GPIO{self.pin} value set to {int(bool(level))}")

    def __repr__(self) -> str:
        return f"SysfsPin(base_path={self.base_path!r}, pin={self.pin})"


class SysfsSimulator:
    """
    Mock sysfs GPIO tree for development and testing

    Lays out ``<base>/gpio<N>/{direction,value}`` as regular files so the
    real ``SysfsPin`` code paths can run without a kernel interface. Regular
    files round-trip writes, so a value written reads back unchanged.
    """

    def __init__(self, base_path: str):
        """Initialize simulator rooted at base_path"""
        self.base_path = str(base_path)
        os.makedirs(self.base_path, exist_ok=True)
        logger.info(f"GPIO SIM: mock sysfs tree at {self.base_path}")

    def provision(self, pin: int, direction: str = "in", value: str = "0") -> str:
        """Create a pin directory with direction and value files"""
        pin_dir = os.path.join(self.base_path, f"gpio{pin}")
        os.makedirs(pin_dir, exist_ok=True)
        with open(os.path.join(pin_dir, "direction"), "w") as f:
            f.write(f"{direction}\n")
        with open(os.path.join(pin_dir, "value"), "w") as f:
            f.write(f"{value}\n")
        logger.debug(f"GPIO SIM: provisioned gpio{pin} ({direction}, {value})")
        return pin_dir

    def add_control_files(self):
        """Create empty export/unexport files that accept writes"""
        for name in ("export", "unexport"):
            open(os.path.join(self.base_path, name), "a").close()

    def read(self, pin: int, name: str) -> str:
        """Read a provisioned pin attribute"""
        with open(os.path.join(self.base_path, f"gpio{pin}", name)) as f:
            return f.read()
