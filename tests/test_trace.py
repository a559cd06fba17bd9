"""
Tests for the step trace.

Covers:
- Feature flag / explicit enable
- Event contents and contiguous indices
- Size cap
- JSONL output and schema contract
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bftape import Machine, StepTrace
from bftape.trace import TRACE_EVENT_TYPES

EVENT_SCHEMA = Path(__file__).resolve().parent.parent / "docs" / "schemas" / "bftape-trace-event.v1.json"


def _load_json(p: Path):
    return json.loads(p.read_text(encoding="utf-8"))


class TestTraceFlag:

    def test_disabled_trace_records_nothing(self):
        m = Machine("+++", trace=False)
        m.run()
        assert not m.trace.is_enabled
        assert m.trace.events == []
        assert m.trace.to_jsonl() == ""

    def test_env_flag_is_default(self, monkeypatch):
        monkeypatch.setattr("bftape.trace.BFTAPE_TRACE_ENABLED", True)
        assert StepTrace().is_enabled
        monkeypatch.setattr("bftape.trace.BFTAPE_TRACE_ENABLED", False)
        assert not StepTrace().is_enabled

    def test_explicit_argument_wins(self, monkeypatch):
        monkeypatch.setattr("bftape.trace.BFTAPE_TRACE_ENABLED", False)
        assert Machine(trace=True).trace.is_enabled


class TestTraceEvents:

    def test_events_for_short_run(self):
        m = Machine("+>", trace=True)
        m.run()
        assert m.trace.events == [
            {"v": 1, "type": "reset", "i": 0, "mu": {"program_length": 2}},
            {"v": 1, "type": "step", "i": 1, "mu": {"ip": 0, "op": "+", "pointer": 0, "cell": 1}},
            {"v": 1, "type": "step", "i": 2, "mu": {"ip": 1, "op": ">", "pointer": 1, "cell": 0}},
            {"v": 1, "type": "step.error", "i": 3, "mu": {"ip": 2, "kind": "code_end"}},
        ]

    def test_indices_stay_contiguous_across_reset(self):
        m = Machine("<", trace=True)
        m.step()
        m.reset()
        m.step()
        assert [ev["i"] for ev in m.trace.events] == [0, 1, 2, 3]
        assert [ev["type"] for ev in m.trace.events] == ["reset", "step.error", "reset", "step.error"]

    def test_loop_end_records_its_own_position(self):
        m = Machine("+[-]", trace=True)
        m.run(4)
        last = m.trace.events[-1]
        assert last["mu"]["op"] == "]"
        assert last["mu"]["ip"] == 3

    def test_events_is_a_copy(self):
        m = Machine("+", trace=True)
        m.trace.events.clear()
        assert len(m.trace) == 1

    def test_clear(self):
        m = Machine("+", trace=True)
        m.run()
        m.trace.clear()
        assert len(m.trace) == 0
        assert m.trace.dropped == 0


class TestTraceEventTypes:

    @pytest.mark.parametrize("enabled", [True, False])
    def test_unknown_event_type_rejected(self, enabled):
        t = StepTrace(enabled=enabled)
        with pytest.raises(ValueError, match="unknown trace event type"):
            t._emit("halt", {})
        assert len(t) == 0

    def test_emitted_types_are_the_declared_set(self):
        m = Machine("+<", trace=True)
        m.run()
        assert {ev["type"] for ev in m.trace.events} == TRACE_EVENT_TYPES


class TestTraceCap:

    def test_oldest_events_dropped(self):
        t = StepTrace(enabled=True, max_events=3)
        for n in range(5):
            t.step(n, "+", 0, n + 1)
        assert len(t) == 3
        assert t.dropped == 2
        assert t.events[0]["i"] == 2


class TestTraceJsonl:

    def test_jsonl_is_compact_and_newline_terminated(self):
        m = Machine("+", trace=True)
        m.step()
        out = m.trace.to_jsonl()
        assert out.endswith("\n")
        lines = out.splitlines()
        assert lines[1] == '{"v":1,"type":"step","i":1,"mu":{"ip":0,"op":"+","pointer":0,"cell":1}}'

    def test_schema_file_exists(self):
        assert EVENT_SCHEMA.exists(), "Missing docs/schemas/bftape-trace-event.v1.json"

    def test_events_validate_against_schema(self):
        jsonschema = pytest.importorskip("jsonschema")
        schema = _load_json(EVENT_SCHEMA)
        m = Machine("++[>+<-]>.<<", trace=True)
        m.run()
        for line in m.trace.to_jsonl().splitlines():
            jsonschema.validate(instance=json.loads(line), schema=schema)

    def test_schema_rejects_unknown_event_type(self):
        jsonschema = pytest.importorskip("jsonschema")
        schema = _load_json(EVENT_SCHEMA)
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate(instance={"v": 1, "type": "halt", "i": 0, "mu": {}}, schema=schema)
