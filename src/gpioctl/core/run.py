"""
gpioctl Run Record
State and observed values of one pass through the control sequence.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
from enum import Enum


class RunState(Enum):
    """States of the control sequence"""
    START = "start"
    EXPORTED = "exported"
    INPUT_CONFIGURED = "input_configured"
    INPUT_READ = "input_read"
    OUTPUT_CONFIGURED = "output_configured"
    OUTPUT_WRITTEN = "output_written"
    VERIFIED = "verified"
    DONE = "done"
    ABORTED = "aborted"


def level_name(level: Optional[bool]) -> str:
    """Map a level to the name used in reports"""
    return "high" if level else "low"


@dataclass
class ControlRun:
    """
    Trace of one control sequence run

    Values are None when the corresponding step did not happen or failed.
    """
    pin: int
    state: RunState = RunState.START
    history: List[RunState] = field(default_factory=list)
    input_value: Optional[bool] = None
    written_value: Optional[bool] = None
    verified_value: Optional[bool] = None
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None
    report_status: Optional[int] = None

    def __post_init__(self):
        if not self.history:
            self.history.append(self.state)

    def advance(self, state: RunState):
        """Move to the next state and record it"""
        self.state = state
        self.history.append(state)

    def warn(self, message: str):
        self.warnings.append(message)

    def abort(self, message: str):
        self.error = message
        self.advance(RunState.ABORTED)

    @property
    def aborted(self) -> bool:
        return self.state == RunState.ABORTED

    @property
    def warned(self) -> bool:
        return bool(self.warnings)

    @property
    def exit_code(self) -> int:
        return 1 if self.aborted else 0

    @property
    def reported_level(self) -> bool:
        """Level handed to the reporter; unknown verification reports LOW"""
        return bool(self.verified_value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert run to dictionary"""
        return {
            "pin": self.pin,
            "state": self.state.value,
            "history": [s.value for s in self.history],
            "input": None if self.input_value is None else level_name(self.input_value),
            "written": None if self.written_value is None else level_name(self.written_value),
            "verified": None if self.verified_value is None else level_name(self.verified_value),
            "warnings": list(self.warnings),
            "error": self.error,
            "report_status": self.report_status,
            "exit_code": self.exit_code,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def __str__(self) -> str:
        return f"ControlRun(GPIO{self.pin}, state={self.state.value}, exit={self.exit_code})"
