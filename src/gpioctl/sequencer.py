"""
gpioctl Control Sequencer
Runs the fixed export, input read, output write and verify protocol on one
pin and decides which failures end the run.
"""

import logging
from typing import Optional

from .core.config import Config
from .core.errors import GPIOError, VerificationUnknown
from .core.run import ControlRun, RunState, level_name
from .protocols.gpio import Direction, SysfsPin
from .web.reporter import StateReporter

logger = logging.getLogger(__name__)


class ControlSequencer:
    """
    GPIO Control Sequencer

    Steps up to and including the input read only warn on failure. Setting
    the output direction and writing HIGH are fatal. The verify read is best
    effort: the run still completes and is reported with LOW when the level
    could not be read back.
    """

    def __init__(self, config: Config, pin: Optional[SysfsPin] = None,
                 reporter: Optional[StateReporter] = None):
        """
        Initialize sequencer

        Args:
            config: Run configuration
            pin: Pin handler, built from config when omitted
            reporter: State reporter; no report is sent when None
        """
        self.config = config
        self.pin = pin or SysfsPin.from_config(config)
        self.reporter = reporter

    @property
    def name(self) -> str:
        return f"GPIO{self.pin.pin}"

    def run(self) -> ControlRun:
        """Execute the sequence once"""
        run = ControlRun(pin=self.pin.pin)
        logger.info(f"Using sysfs base: {self.pin.base_path} | GPIO pin: {self.pin.pin}")

        try:
            self._input_phase(run)
            if self._output_phase(run):
                self._verify_phase(run)
                run.advance(RunState.DONE)
                self._report(run)
        finally:
            if self.config.unexport_on_exit:
                self._release(run)

        if run.aborted:
            logger.error(f"{self.name}: run aborted: {run.error}")
        else:
            logger.info(f"{self.name}: run complete with {len(run.warnings)} warning(s)")
        return run

    def _input_phase(self, run: ControlRun):
        try:
            status = self.pin.ensure_exported()
            logger.debug(f"{self.name}: export status {status.value}")
        except GPIOError as e:
            self._warn(run, f"{self.name}: export may have failed: {e}")
        run.advance(RunState.EXPORTED)

        try:
            self.pin.set_direction(Direction.IN)
        except GPIOError as e:
            self._warn(run, f"{self.name}: setting direction 'in' failed: {e}")
        run.advance(RunState.INPUT_CONFIGURED)

        try:
            run.input_value = self.pin.get_value()
            logger.info(f"[a] {self.name} (INPUT) value: {level_name(run.input_value).upper()}")
        except GPIOError as e:
            message = f"{self.name}: failed to read as input: {e}"
            logger.error(message)
            run.warn(message)
        run.advance(RunState.INPUT_READ)

    def _output_phase(self, run: ControlRun) -> bool:
        """Returns False when the run was aborted"""
        try:
            self.pin.set_direction(Direction.OUT)
        except GPIOError as e:
            run.abort(f"{self.name}: failed to set direction to out: {e}")
            return False
        run.advance(RunState.OUTPUT_CONFIGURED)

        try:
            self.pin.set_value(True)
        except GPIOError as e:
            run.abort(f"{self.name}: failed to write HIGH: {e}")
            return False
        run.written_value = True
        run.advance(RunState.OUTPUT_WRITTEN)
        return True

    def _verify_phase(self, run: ControlRun):
        try:
            run.verified_value = self.pin.get_value()
            logger.info(f"[b] {self.name} (OUTPUT) verify value: {level_name(run.verified_value).upper()}")
        except GPIOError as e:
            unknown = VerificationUnknown(self.pin.pin, str(e))
            logger.error(f"{unknown}, reporting {level_name(run.reported_level)}")
            run.warn(str(unknown))
        run.advance(RunState.VERIFIED)

    def _report(self, run: ControlRun):
        if self.reporter is None:
            logger.debug(f"{self.name}: state report disabled")
            return
        run.report_status = self.reporter.report(self.pin.pin, run.reported_level)

    def _release(self, run: ControlRun):
        try:
            self.pin.unexport()
        except GPIOError as e:
            self._warn(run, f"{self.name}: unexport failed: {e}")

    @staticmethod
    def _warn(run: ControlRun, message: str):
        logger.warning(message)
        run.warn(message)
