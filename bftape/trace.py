"""
Step trace for bftape machines.

Records one canonical JSON event per executed step so a host can inspect
or persist an execution history. Disabled by default; when disabled every
method is a no-op.

Feature flag: set BFTAPE_TRACE=1 to enable tracing for machines created
without an explicit trace= argument.

Event shape (v1), pinned by docs/schemas/bftape-trace-event.v1.json:

    {"v":1,"type":"step","i":0,"mu":{"ip":0,"op":"+","pointer":0,"cell":1}}
    {"v":1,"type":"step.error","i":1,"mu":{"ip":1,"kind":"overflow"}}
    {"v":1,"type":"reset","i":2,"mu":{"program_length":4}}
"""

from __future__ import annotations

import json
import os
from collections import deque
from typing import Any, Deque, Dict, List, Optional

TRACE_EVENT_V = 1
TRACE_EVENT_KEY_ORDER = ("v", "type", "i", "mu")
TRACE_EVENT_TYPES = frozenset(["step", "step.error", "reset"])

# Feature flag
BFTAPE_TRACE_ENABLED = os.environ.get("BFTAPE_TRACE", "0") == "1"

# Oldest events are dropped past this many
MAX_TRACE_EVENTS = 10000


def canon_event_json(ev: Dict[str, Any]) -> str:
    """Serialize one event as compact JSON with stable key order."""
    ordered = {k: ev[k] for k in TRACE_EVENT_KEY_ORDER if k in ev}
    return json.dumps(ordered, ensure_ascii=False, separators=(",", ":"), sort_keys=False)


class StepTrace:
    """
    Bounded in-memory trace of machine events.

    Indices are contiguous across the whole life of the trace, including
    dropped events, so `events[0]["i"] == dropped`.
    """

    def __init__(self, enabled: Optional[bool] = None, max_events: int = MAX_TRACE_EVENTS) -> None:
        self._enabled = enabled if enabled is not None else BFTAPE_TRACE_ENABLED
        self._events: Deque[Dict[str, Any]] = deque(maxlen=max_events)
        self._index = 0

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def events(self) -> List[Dict[str, Any]]:
        """Copy of the retained events (for inspection/golden comparison)."""
        return list(self._events)

    @property
    def dropped(self) -> int:
        """Number of events evicted by the size cap."""
        return self._index - len(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        self._events.clear()
        self._index = 0

    def _emit(self, event_type: str, mu: Dict[str, Any]) -> None:
        if event_type not in TRACE_EVENT_TYPES:
            raise ValueError(f"unknown trace event type: {event_type!r}")
        if not self._enabled:
            return
        self._events.append({"v": TRACE_EVENT_V, "type": event_type, "i": self._index, "mu": mu})
        self._index += 1

    def step(self, ip: int, op: str, pointer: int, cell: int) -> None:
        """Record a successful step (state after the step)."""
        self._emit("step", {"ip": ip, "op": op, "pointer": pointer, "cell": cell})

    def error(self, ip: int, kind: str) -> None:
        """Record a failing step."""
        self._emit("step.error", {"ip": ip, "kind": kind})

    def reset(self, program_length: int) -> None:
        """Record a load or reset of the machine."""
        self._emit("reset", {"program_length": program_length})

    def to_jsonl(self) -> str:
        """Serialize retained events to JSONL (newline-terminated)."""
        lines = [canon_event_json(ev) for ev in self._events]
        return "\n".join(lines) + ("\n" if lines else "")
