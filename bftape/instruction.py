"""
Instruction alphabet and program loader.

The alphabet is fixed: + - > < , . [ ]

Comment policy: any character outside the alphabet is a comment. Loading
never fails on unrecognized input; such characters are dropped and do not
occupy a program position. This matches the long-standing convention of
the language, where prose and whitespace around code are legal.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Tuple

COMMENT_POLICY = "drop"


class Instruction(Enum):
    """The eight instructions, each bound to its literal character."""
    INCREMENT = "+"
    DECREMENT = "-"
    MOVE_RIGHT = ">"
    MOVE_LEFT = "<"
    READ_INPUT = ","
    WRITE_OUTPUT = "."
    LOOP_START = "["
    LOOP_END = "]"

    @property
    def char(self) -> str:
        return _TO_CHAR[self]

    @classmethod
    def from_char(cls, ch: str) -> "Instruction":
        """Map a literal character to its Instruction; KeyError if not one."""
        return _FROM_CHAR[ch]

    def __str__(self) -> str:
        return self.char


# Explicit tables; the enum values are not relied on for the mapping.
_TO_CHAR: Dict[Instruction, str] = {
    Instruction.INCREMENT: "+",
    Instruction.DECREMENT: "-",
    Instruction.MOVE_RIGHT: ">",
    Instruction.MOVE_LEFT: "<",
    Instruction.READ_INPUT: ",",
    Instruction.WRITE_OUTPUT: ".",
    Instruction.LOOP_START: "[",
    Instruction.LOOP_END: "]",
}
_FROM_CHAR: Dict[str, Instruction] = {ch: ins for ins, ch in _TO_CHAR.items()}

ALPHABET = frozenset(_FROM_CHAR)

Program = Tuple[Instruction, ...]


def parse_program(text: str) -> Program:
    """
    Build a Program from raw source text.

    Keeps recognized symbols in their original order and drops everything
    else (see COMMENT_POLICY).

    Raises:
        TypeError: If text is not a str.
    """
    if not isinstance(text, str):
        raise TypeError(f"source must be str, got {type(text).__name__}")
    return tuple(_FROM_CHAR[ch] for ch in text if ch in _FROM_CHAR)


def render_program(program: Iterable[Instruction]) -> str:
    """Render a Program back to its literal text."""
    return "".join(_TO_CHAR[ins] for ins in program)
