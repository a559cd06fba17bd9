"""
Fixed-capacity tape of signed 64-bit cells.

Direct indexing is a raw accessor: indexes outside [0, capacity-1] are a
caller bug and raise IndexError (negative indexes do not wrap). Bounds on
the machine's tape pointer are enforced by the step executor, not here.
"""

from __future__ import annotations

from array import array

TAPE_CAPACITY = 32768

CELL_BITS = 64
CELL_MIN = -(1 << (CELL_BITS - 1))
CELL_MAX = (1 << (CELL_BITS - 1)) - 1

_TYPECODE = "q"  # signed long long


class Tape:
    """Contiguous zero-initialized cell buffer."""

    def __init__(self, capacity: int = TAPE_CAPACITY) -> None:
        if not isinstance(capacity, int) or capacity < 1:
            raise ValueError(f"capacity must be a positive int, got {capacity!r}")
        self._capacity = capacity
        self._cells = array(_TYPECODE, bytes(array(_TYPECODE).itemsize * capacity))

    @property
    def capacity(self) -> int:
        return self._capacity

    def _check(self, i: int) -> None:
        if not 0 <= i < self._capacity:
            raise IndexError(f"tape index {i} out of range [0, {self._capacity - 1}]")

    def __getitem__(self, i: int) -> int:
        self._check(i)
        return self._cells[i]

    def __setitem__(self, i: int, value: int) -> None:
        self._check(i)
        if not CELL_MIN <= value <= CELL_MAX:
            raise OverflowError(f"cell value {value} outside [{CELL_MIN}, {CELL_MAX}]")
        self._cells[i] = value

    def __len__(self) -> int:
        return self._capacity

    def reset(self) -> None:
        """Zero every cell."""
        self._cells = array(_TYPECODE, bytes(self._cells.itemsize * self._capacity))
