"""
gpioctl - sysfs GPIO control and state reporting
Exports a pin, reads it as input, drives it HIGH as output, verifies the
level and reports it to an HTTP endpoint.
"""

__version__ = "1.0.0"

from .core.config import Config
from .core.run import ControlRun, RunState
from .protocols.gpio import Direction, ExportStatus, SysfsPin, SysfsSimulator
from .sequencer import ControlSequencer
from .web.reporter import StateReporter

__all__ = [
    "Config",
    "ControlRun",
    "RunState",
    "Direction",
    "ExportStatus",
    "SysfsPin",
    "SysfsSimulator",
    "ControlSequencer",
    "StateReporter",
]
