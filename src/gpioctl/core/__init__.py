"""
gpioctl Core Module
Configuration, error types, the sysfs file channel and the run record.
"""

from .config import Config
from .errors import GPIOError, SysfsIOError, ExportUnavailable, NetworkError, VerificationUnknown
from .run import ControlRun, RunState

__all__ = [
    "Config",
    "GPIOError",
    "SysfsIOError",
    "ExportUnavailable",
    "NetworkError",
    "VerificationUnknown",
    "ControlRun",
    "RunState",
]
