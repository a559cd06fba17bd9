"""
bftape error model.

Program-level faults are values, not exceptions:

    - ErrorKind:  closed set of failure kinds (CODE_END included)
    - StepError:  (kind, position) record kept as the machine's last error
    - StepResult: what step()/run() return; truthy on success

Exceptions are reserved for host contract violations (bad tape index,
bad hook value). Those derive from BFTapeError or are plain builtins.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Why a step failed."""
    NONE = "none"
    CODE_END = "code_end"              # normal end of program, no open loops
    LOOP_IS_UNEND = "loop_is_unend"    # '[' never closed
    LOOP_IS_UNSTART = "loop_is_unstart"  # ']' with no open '['
    OVERFLOW = "overflow"
    UNDERFLOW = "underflow"
    MEMORY_OVER = "memory_over"
    MEMORY_UNDER = "memory_under"

    @property
    def is_fault(self) -> bool:
        """True for real faults; NONE and CODE_END are not faults."""
        return self not in (ErrorKind.NONE, ErrorKind.CODE_END)


@dataclass(frozen=True)
class StepError:
    """Last recorded failure: kind plus the instruction pointer at failure."""
    kind: ErrorKind = ErrorKind.NONE
    position: int = -1

    def __str__(self) -> str:
        if self.kind is ErrorKind.NONE:
            return "no error"
        return f"{self.kind.name} at ip={self.position}"


NO_ERROR = StepError()


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of step() or run().

    Truthiness mirrors `ok` so hosts can write `if not machine.step(): ...`.
    On failure `error` carries the recorded StepError.
    """
    ok: bool
    error: Optional[StepError] = None

    def __bool__(self) -> bool:
        return self.ok

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind if self.error is not None else ErrorKind.NONE


SUCCESS = StepResult(True)


def failure(kind: ErrorKind, position: int) -> StepResult:
    """Build a failing StepResult for `kind` at `position`."""
    return StepResult(False, StepError(kind, position))


class BFTapeError(Exception):
    """Host contract violation while driving a machine."""
    pass


class HookValueError(BFTapeError, ValueError):
    """An input hook returned a value that cannot be stored in a cell."""
    pass
