"""
gpioctl Errors
Exception types raised by the sysfs channel, pin manager and reporter.
"""

from typing import Optional


class GPIOError(Exception):
    """Base class for all gpioctl failures"""


class SysfsIOError(GPIOError):
    """
    Open, read, write or sync failure on a sysfs pseudo-file.

    Keeps the underlying OS error code and message so callers can
    tell a missing pin directory (ENOENT) from a busy line (EBUSY).
    """

    def __init__(self, operation: str, path: str, cause: OSError):
        self.operation = operation
        self.path = str(path)
        self.errno = cause.errno
        self.strerror = cause.strerror or str(cause)
        super().__init__(f"{operation} {self.path}: {self.strerror}")


class ExportUnavailable(GPIOError):
    """The export control file could not be opened"""

    def __init__(self, path: str, cause: Optional[SysfsIOError] = None):
        self.path = str(path)
        reason = cause.strerror if cause else "not available"
        super().__init__(f"export control {self.path}: {reason}")


class NetworkError(GPIOError):
    """Transport failure or timeout while reporting pin state"""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"GET {url} failed: {reason}")


class VerificationUnknown(GPIOError):
    """Read-back after the output write failed"""

    def __init__(self, pin: int, reason: str):
        self.pin = pin
        super().__init__(f"GPIO{pin} verify read failed: {reason}")
