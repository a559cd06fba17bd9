"""
Host I/O hooks.

The machine talks to the outside world only through two callables:

    InputHook:  () -> str | int      called on ','
    OutputHook: (str) -> None        called on '.'

Hosts may pass either a callable or a text stream. Streams are adapted to
read or write exactly one character per call.
"""

from __future__ import annotations

from typing import Any, Callable, Union

from .errors import HookValueError
from .tape import CELL_MAX, CELL_MIN

InputHook = Callable[[], Union[str, int]]
OutputHook = Callable[[str], Any]

# Value stored when an input stream is exhausted (a -1 read seen as a
# 16-bit code unit).
EOF_VALUE = 0xFFFF

CHAR_MASK = 0xFFFF


def null_input() -> int:
    """Input hook for machines built without one: always end-of-input."""
    return EOF_VALUE


def null_output(ch: str) -> None:
    """Output hook for machines built without one: discards the character."""
    return None


def stream_input(stream) -> InputHook:
    """Adapt a readable text stream to an input hook."""
    def read_one() -> Union[str, int]:
        ch = stream.read(1)
        if not ch:
            return EOF_VALUE
        return ch
    return read_one


def stream_output(stream) -> OutputHook:
    """Adapt a writable text stream to an output hook."""
    def write_one(ch: str) -> None:
        stream.write(ch)
    return write_one


def as_input_hook(source) -> InputHook:
    """
    Accept a callable or a readable stream and return an input hook.

    None yields null_input.

    Raises:
        TypeError: If source is neither callable nor has a read() method.
    """
    if source is None:
        return null_input
    if callable(source):
        return source
    if callable(getattr(source, "read", None)):
        return stream_input(source)
    raise TypeError(f"input hook must be callable or readable, got {type(source).__name__}")


def as_output_hook(sink) -> OutputHook:
    """
    Accept a callable or a writable stream and return an output hook.

    None yields null_output.

    Raises:
        TypeError: If sink is neither callable nor has a write() method.
    """
    if sink is None:
        return null_output
    if callable(sink):
        return sink
    if callable(getattr(sink, "write", None)):
        return stream_output(sink)
    raise TypeError(f"output hook must be callable or writable, got {type(sink).__name__}")


def coerce_input(value: Any) -> int:
    """
    Convert an input hook's return value to a cell integer.

    A one-character str becomes its code point; an int is taken as is.

    Raises:
        HookValueError: For any other value, multi-character strings,
            and ints outside the cell range.
    """
    if isinstance(value, bool):
        raise HookValueError(f"input hook returned bool {value!r}")
    if isinstance(value, str):
        if len(value) != 1:
            raise HookValueError(f"input hook must return one character, got {value!r}")
        return ord(value)
    if isinstance(value, int):
        if not CELL_MIN <= value <= CELL_MAX:
            raise HookValueError(f"input hook value {value} outside cell range")
        return value
    raise HookValueError(f"input hook returned unsupported {type(value).__name__}")


def coerce_output(value: int) -> str:
    """Convert a cell value to the character handed to the output hook."""
    return chr(value & CHAR_MASK)
