"""
bftape Machine - single-step tape interpreter.

State model:
- program:     tuple of Instruction (filtered source)
- tape:        fixed-capacity signed 64-bit cells
- cursor:      ip (program index, may sit at len(program)) + pointer (tape index)
- loop stack:  ip of every '[' entered with a non-zero guard, innermost last
- last error:  StepError, ErrorKind.NONE until a step fails

Every step either succeeds and advances ip, or fails and records a
StepError. A failing step leaves the machine as it was, except a zero-guard
'[' whose forward scan runs off the end: ip is then left at the end of the
program, so the next step fails through the end-of-program check. Loop
targets are found lazily, by counting nesting depth.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from .errors import (
    NO_ERROR,
    SUCCESS,
    ErrorKind,
    StepError,
    StepResult,
    failure,
)
from .hooks import as_input_hook, as_output_hook, coerce_input, coerce_output
from .instruction import Instruction, Program, parse_program, render_program
from .tape import CELL_MAX, CELL_MIN, TAPE_CAPACITY, Tape
from .trace import StepTrace

# run() count meaning "until the machine halts"
RUN_UNTIL_HALT = -1


class MachineState(Enum):
    """Execution state derived from the last step."""
    READY = auto()
    HALTED_OK = auto()
    HALTED_ERROR = auto()


@dataclass
class Cursor:
    """Machine cursor."""
    ip: int = 0
    pointer: int = 0


class Machine:
    """
    Embeddable interpreter for the eight-instruction tape language.

    Typical host loop:

        out = []
        m = Machine("+++.", output_hook=out.append)
        m.run()
        if m.last_error.kind is not ErrorKind.CODE_END:
            ...  # a real fault

    Hooks may be swapped between steps with set_input/set_output.
    """

    def __init__(
        self,
        source: str = "",
        input_hook=None,
        output_hook=None,
        *,
        capacity: int = TAPE_CAPACITY,
        trace: Optional[bool] = None,
    ) -> None:
        self._tape = Tape(capacity)
        self._trace = StepTrace(enabled=trace)
        self._program: Program = ()
        self._cursor = Cursor()
        self._loops: List[int] = []
        self._last_error: StepError = NO_ERROR
        self._halted = False
        self.set_input(input_hook)
        self.set_output(output_hook)
        self.load(source)

    # --- Program ---

    def load(self, source: str) -> None:
        """Replace the program with the filtered `source` and reset."""
        self._program = parse_program(source)
        self.reset()

    @property
    def source(self) -> str:
        """Loaded program rendered back to text."""
        return render_program(self._program)

    @source.setter
    def source(self, value: str) -> None:
        self.load(value)

    @property
    def program(self) -> Program:
        return self._program

    def __str__(self) -> str:
        return self.source

    def __repr__(self) -> str:
        return (
            f"Machine(ip={self._cursor.ip}, pointer={self._cursor.pointer}, "
            f"program_length={len(self._program)}, state={self.state.name})"
        )

    # --- Tape access ---

    def __getitem__(self, i: int) -> int:
        return self._tape[i]

    def __setitem__(self, i: int, value: int) -> None:
        self._tape[i] = value

    @property
    def tape(self) -> Tape:
        return self._tape

    @property
    def capacity(self) -> int:
        return self._tape.capacity

    # --- Cursor / state (read-only to the host) ---

    @property
    def ip(self) -> int:
        """Index of the next instruction to execute."""
        return self._cursor.ip

    @property
    def pointer(self) -> int:
        """Index of the active cell."""
        return self._cursor.pointer

    @property
    def loop_depth(self) -> int:
        return len(self._loops)

    @property
    def last_error(self) -> StepError:
        return self._last_error

    @property
    def state(self) -> MachineState:
        if not self._halted:
            return MachineState.READY
        if self._last_error.kind is ErrorKind.CODE_END:
            return MachineState.HALTED_OK
        return MachineState.HALTED_ERROR

    @property
    def trace(self) -> StepTrace:
        return self._trace

    # --- Hooks ---

    def set_input(self, hook) -> None:
        """Install an input hook: a callable or a readable text stream."""
        self._input = as_input_hook(hook)

    def set_output(self, hook) -> None:
        """Install an output hook: a callable or a writable text stream."""
        self._output = as_output_hook(hook)

    # --- Execution ---

    def reset(self) -> None:
        """Reset cursor, tape, loop stack and last error; keep the program."""
        self._cursor = Cursor()
        self._tape.reset()
        self._loops = []
        self._last_error = NO_ERROR
        self._halted = False
        self._trace.reset(len(self._program))

    def _fail(self, kind: ErrorKind, position: int) -> StepResult:
        self._last_error = StepError(kind, position)
        self._halted = True
        self._trace.error(position, kind.value)
        return failure(kind, position)

    def _match_forward(self, start: int) -> Optional[int]:
        """Index of the ']' matching the '[' at `start`, or None."""
        depth = 0
        for j in range(start + 1, len(self._program)):
            ins = self._program[j]
            if ins is Instruction.LOOP_START:
                depth += 1
            elif ins is Instruction.LOOP_END:
                if depth == 0:
                    return j
                depth -= 1
        return None

    def step(self) -> StepResult:
        """
        Execute one instruction.

        Returns:
            SUCCESS, or a failing StepResult whose error is also stored as
            last_error. Reaching the end of the program fails with CODE_END
            (or LOOP_IS_UNEND if a loop is still open).
        """
        ip = self._cursor.ip
        ptr = self._cursor.pointer

        if ip >= len(self._program):
            if not self._loops:
                return self._fail(ErrorKind.CODE_END, ip)
            return self._fail(ErrorKind.LOOP_IS_UNEND, ip)

        ins = self._program[ip]
        tape = self._tape
        next_ip = ip

        if ins is Instruction.INCREMENT:
            if tape[ptr] == CELL_MAX:
                return self._fail(ErrorKind.OVERFLOW, ip)
            tape[ptr] += 1

        elif ins is Instruction.DECREMENT:
            if tape[ptr] == CELL_MIN:
                return self._fail(ErrorKind.UNDERFLOW, ip)
            tape[ptr] -= 1

        elif ins is Instruction.MOVE_RIGHT:
            if ptr == tape.capacity - 1:
                return self._fail(ErrorKind.MEMORY_OVER, ip)
            self._cursor.pointer = ptr + 1

        elif ins is Instruction.MOVE_LEFT:
            if ptr == 0:
                return self._fail(ErrorKind.MEMORY_UNDER, ip)
            self._cursor.pointer = ptr - 1

        elif ins is Instruction.READ_INPUT:
            tape[ptr] = coerce_input(self._input())

        elif ins is Instruction.WRITE_OUTPUT:
            self._output(coerce_output(tape[ptr]))

        elif ins is Instruction.LOOP_START:
            if tape[ptr] != 0:
                self._loops.append(ip)
            else:
                end = self._match_forward(ip)
                if end is None:
                    # the scan leaves ip at the end of the program
                    self._cursor.ip = len(self._program)
                    return self._fail(ErrorKind.LOOP_IS_UNEND, self._cursor.ip)
                next_ip = end

        elif ins is Instruction.LOOP_END:
            if not self._loops:
                return self._fail(ErrorKind.LOOP_IS_UNSTART, ip)
            next_ip = self._loops.pop() - 1

        self._cursor.ip = next_ip + 1
        self._halted = False
        self._trace.step(ip, ins.char, self._cursor.pointer, tape[self._cursor.pointer])
        return SUCCESS

    def run(self, count: int = RUN_UNTIL_HALT) -> StepResult:
        """
        Execute up to `count` steps; a negative count runs until halt.

        Stops at the first failing step and returns it. Reaching the normal
        end of the program (CODE_END) counts as success; last_error still
        records it.
        """
        remaining = count
        while remaining != 0:
            result = self.step()
            if not result:
                if result.kind is ErrorKind.CODE_END:
                    return SUCCESS
                return result
            if remaining > 0:
                remaining -= 1
        return SUCCESS
