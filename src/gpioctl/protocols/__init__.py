"""
gpioctl Protocols Module
Sysfs GPIO pin handler and mock tree simulator.
"""

from .gpio import Direction, ExportStatus, SysfsPin, SysfsSimulator

__all__ = ["Direction", "ExportStatus", "SysfsPin", "SysfsSimulator"]
