"""
gpioctl Configuration Module
Run configuration for the GPIO control sequence and the state reporter.
"""

import os
import json
from dataclasses import dataclass, fields, replace
from typing import Dict, Any
from urllib.parse import urlparse


DEFAULT_SYSFS_BASE = "/sys/class/gpio"
DEFAULT_REPORT_URL = "http://myserver.com/gpio"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.lower() in _TRUE


def _coerce(name: str, value: Any, field_type: type) -> Any:
    if field_type is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in _TRUE + _FALSE:
            return value.lower() in _TRUE
        raise ValueError(f"Invalid value for {name}: {value!r} (expected a boolean)")

    if isinstance(value, bool) or isinstance(value, (list, dict)):
        raise ValueError(f"Invalid value for {name}: {value!r} (expected {field_type.__name__})")
    try:
        return field_type(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for {name}: {value!r} (expected {field_type.__name__})")


@dataclass(frozen=True)
class Config:
    """
    gpioctl Configuration

    Read once at startup and passed explicitly to the sequencer, the pin
    manager and the reporter. Frozen: overrides produce a new instance
    through ``with_overrides``.
    """

    # Pin settings
    pin: int = 22
    sysfs_base: str = DEFAULT_SYSFS_BASE
    read_capacity: int = 16
    export_settle_timeout: float = 0.25
    export_poll_interval: float = 0.01
    unexport_on_exit: bool = False

    # Reporter settings
    report_url: str = DEFAULT_REPORT_URL
    report_timeout: float = 5.0
    report_enabled: bool = True
    user_agent: str = "gpioctl/1.0"

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def from_env(cls) -> 'Config':
        """Create configuration from environment variables"""
        return cls(
            pin=int(os.getenv("GPIO_PIN", str(cls.pin))),
            sysfs_base=os.getenv("SYSFS_GPIO_BASE") or cls.sysfs_base,
            export_settle_timeout=float(os.getenv("GPIO_EXPORT_SETTLE", str(cls.export_settle_timeout))),
            unexport_on_exit=_env_bool("GPIO_UNEXPORT", cls.unexport_on_exit),

            report_url=os.getenv("GPIO_REPORT_URL") or cls.report_url,
            report_timeout=float(os.getenv("GPIO_REPORT_TIMEOUT", str(cls.report_timeout))),
            report_enabled=_env_bool("GPIO_REPORT_ENABLED", cls.report_enabled),

            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from JSON file"""
        try:
            with open(config_path, 'r') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ValueError(f"Error loading config file {config_path}: {e}")

        if not isinstance(config_data, dict):
            raise ValueError(f"Error loading config file {config_path}: expected a JSON object")

        # Environment first, then file values for known keys
        return cls.from_env().with_overrides(**config_data)

    def with_overrides(self, **overrides) -> 'Config':
        """
        Return a copy with known, non-None fields replaced

        Values are converted to the field's type, so JSON strings such as
        "2.5" or "false" are accepted.

        Raises:
            ValueError: a value cannot be converted to its field's type
        """
        types = {f.name: f.type for f in fields(self)}
        changes = {}
        for key, value in overrides.items():
            if key not in types or value is None:
                continue
            changes[key] = _coerce(key, value, types[key])
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return {
            "gpio": {
                "pin": self.pin,
                "sysfs_base": self.sysfs_base,
                "read_capacity": self.read_capacity,
                "export_settle_timeout": self.export_settle_timeout,
                "export_poll_interval": self.export_poll_interval,
                "unexport_on_exit": self.unexport_on_exit,
            },
            "report": {
                "url": self.report_url,
                "timeout": self.report_timeout,
                "enabled": self.report_enabled,
                "user_agent": self.user_agent,
            },
            "logging": {
                "level": self.log_level,
                "format": self.log_format,
            }
        }

    def save_to_file(self, config_path: str):
        """Save configuration as a flat JSON object loadable by from_file"""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        with open(config_path, 'w') as f:
            json.dump(data, f, indent=2)

    def validate(self) -> bool:
        """Validate configuration settings"""
        errors = []

        if not isinstance(self.pin, int) or self.pin < 0:
            errors.append(f"Invalid pin: {self.pin}")

        if not self.sysfs_base:
            errors.append("Empty sysfs base path")

        if self.read_capacity < 2:
            errors.append(f"Read capacity too small: {self.read_capacity}")

        if self.export_settle_timeout < 0 or self.export_poll_interval < 0:
            errors.append("Export settle values must not be negative")

        if self.report_timeout <= 0:
            errors.append(f"Invalid report timeout: {self.report_timeout}")

        if urlparse(self.report_url).scheme not in ("http", "https"):
            errors.append(f"Invalid report URL: {self.report_url}")

        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"Invalid log level: {self.log_level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

        return True
