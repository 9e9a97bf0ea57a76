"""
gpioctl Web Module
HTTP reporting of the observed pin state.
"""

from .reporter import StateReporter

__all__ = ["StateReporter"]
