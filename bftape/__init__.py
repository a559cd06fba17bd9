# bftape/__init__.py
"""
bftape public API surface.

    - Machine, MachineState, RUN_UNTIL_HALT: the step executor
    - Instruction, parse_program, render_program: program loading
    - Tape, TAPE_CAPACITY, CELL_MIN, CELL_MAX: cell storage
    - ErrorKind, StepError, StepResult: errors as values
    - BFTapeError, HookValueError: host contract violations
    - stream_input, stream_output, EOF_VALUE: host I/O adapters
    - StepTrace: optional execution trace (BFTAPE_TRACE=1)
"""

from __future__ import annotations

from .errors import (
    BFTapeError,
    ErrorKind,
    HookValueError,
    StepError,
    StepResult,
)
from .hooks import EOF_VALUE, stream_input, stream_output
from .instruction import (
    ALPHABET,
    COMMENT_POLICY,
    Instruction,
    parse_program,
    render_program,
)
from .machine import RUN_UNTIL_HALT, Machine, MachineState
from .tape import CELL_MAX, CELL_MIN, TAPE_CAPACITY, Tape
from .trace import StepTrace

__all__ = [
    # machine
    "Machine",
    "MachineState",
    "RUN_UNTIL_HALT",

    # program
    "Instruction",
    "ALPHABET",
    "COMMENT_POLICY",
    "parse_program",
    "render_program",

    # tape
    "Tape",
    "TAPE_CAPACITY",
    "CELL_MIN",
    "CELL_MAX",

    # errors
    "ErrorKind",
    "StepError",
    "StepResult",
    "BFTapeError",
    "HookValueError",

    # hooks
    "EOF_VALUE",
    "stream_input",
    "stream_output",

    # trace
    "StepTrace",
]
