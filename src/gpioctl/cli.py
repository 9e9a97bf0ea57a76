#!/usr/bin/env python3
"""
gpioctl CLI Entry Point
Runs the GPIO control sequence on one pin and reports the result.
"""

import sys
import argparse
import logging
import tempfile
from typing import Optional, List

from . import __version__
from .core.config import Config, LOG_LEVELS
from .protocols.gpio import SysfsSimulator
from .sequencer import ControlSequencer
from .web.reporter import StateReporter


def setup_logging(level: str = "INFO", log_file: Optional[str] = None,
                  log_format: str = Config.log_format):
    """Setup logging configuration"""
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(log_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler if specified
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser"""
    parser = argparse.ArgumentParser(
        prog="gpioctl",
        description="Read, drive and verify one sysfs GPIO pin, then report its state over HTTP"
    )
    parser.add_argument(
        "pin",
        nargs="?",
        type=int,
        help="GPIO pin number (default: from config or 22)"
    )
    parser.add_argument(
        "url",
        nargs="?",
        type=str,
        help="Report endpoint base URL (default: from config or http://myserver.com/gpio)"
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Configuration file path"
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=list(LOG_LEVELS),
        help="Logging level (default: from config or INFO)"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Log file path (default: console only)"
    )
    parser.add_argument(
        "--sysfs-base",
        type=str,
        help="Sysfs GPIO base directory (default: $SYSFS_GPIO_BASE or /sys/class/gpio)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Report timeout in seconds (default: 5)"
    )
    parser.add_argument(
        "--no-report",
        action="store_true",
        help="Skip the HTTP state report"
    )
    parser.add_argument(
        "--unexport",
        action="store_true",
        help="Unexport the pin when the run ends"
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Run against a mock sysfs tree in a temporary directory"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the run summary as JSON"
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"gpioctl {__version__}"
    )
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Build configuration: defaults, environment, config file, then flags"""
    if args.config:
        config = Config.from_file(args.config)
    else:
        config = Config.from_env()

    config = config.with_overrides(
        pin=args.pin,
        report_url=args.url,
        sysfs_base=args.sysfs_base,
        report_timeout=args.timeout,
        log_level=args.log_level,
    )
    if args.no_report:
        config = config.with_overrides(report_enabled=False)
    if args.unexport:
        config = config.with_overrides(unexport_on_exit=True)

    config.validate()
    return config


def run(config: Config, json_output: bool = False) -> int:
    """Run the control sequence and return the process exit code"""
    reporter = StateReporter.from_config(config) if config.report_enabled else None
    sequencer = ControlSequencer(config, reporter=reporter)
    result = sequencer.run()

    if json_output:
        print(result.to_json())
    else:
        outcome = f"{result.state.value} with warnings" if result.warned else result.state.value
        print(f"GPIO{result.pin}: {outcome} "
              f"(warnings: {len(result.warnings)}, exit: {result.exit_code})")
    return result.exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for gpioctl"""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except ValueError as e:
        print(f"gpioctl: {e}", file=sys.stderr)
        return 2

    logger = setup_logging(config.log_level, args.log_file, config.log_format)

    try:
        if args.simulate:
            with tempfile.TemporaryDirectory(prefix="gpioctl-sim-") as base:
                simulator = SysfsSimulator(base)
                simulator.provision(config.pin)
                simulator.add_control_files()
                return run(config.with_overrides(sysfs_base=base), args.json)
        return run(config, args.json)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, stopping")
        return 130


if __name__ == "__main__":
    sys.exit(main())
