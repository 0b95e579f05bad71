"""
Semantic test: the replay CLI drives a coordinator from scripted events.

Invariant:
Transport messages and emitted histograms are printed as JSON lines in the
order they happen; combination errors exit non-zero.
"""

from __future__ import annotations

import json

import pytest

from histogram_brush.runtime.replay import main

CONFIG = {
    "dimensions": [
        {"name": "X", "range": [0, 100], "bins": 10},
        {"name": "Y", "range": [0, 50], "bins": 10},
    ]
}

EVENTS = [
    {"kind": "brush", "dimension": "X", "range": [20, 80]},
    {"kind": "result", "activeDimension": "X", "dimension": "Y", "index": 20, "data": [0, 0, 1, 1, 2, 2, 2, 3, 3, 4]},
    {"kind": "result", "activeDimension": "X", "dimension": "Y", "index": 80, "data": [0, 1, 3, 4, 5, 6, 7, 8, 8, 9]},
    {"kind": "state", "dimension": "X", "range": [20, 80]},
    {"kind": "preload", "dimension": "X", "value": 90},
    {"kind": "load", "dimension": "X", "value": 20},
]


def _write(tmp_path, events, config=CONFIG):
    config_path = tmp_path / "config.json"
    events_path = tmp_path / "events.jsonl"
    config_path.write_text(json.dumps(config), encoding="utf-8")
    lines = ["# scripted session"] + [json.dumps(e) for e in events] + [""]
    events_path.write_text("\n".join(lines), encoding="utf-8")
    return config_path, events_path


def test_replay_prints_messages_and_histograms(tmp_path, capsys) -> None:
    config_path, events_path = _write(tmp_path, EVENTS)
    record_path = tmp_path / "domain.jsonl"

    rc = main(["--config", str(config_path), "--events", str(events_path), "--record", str(record_path)])

    assert rc == 0
    out = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    expected = [0, 1, 2, 3, 3, 4, 5, 5, 5, 5]
    assert out == [
        {"kind": "send", "message": {"type": "setRange", "dimension": "X", "range": [20.0, 80.0]}},
        {"kind": "histogram", "dimension": "Y", "data": expected},
        {"kind": "histogram", "dimension": "Y", "data": expected},
        {"kind": "send", "message": {"type": "preload", "dimension": "X", "value": 90}},
    ]
    assert record_path.read_text(encoding="utf-8").strip()


def test_replay_exits_non_zero_on_length_mismatch(tmp_path, capsys) -> None:
    events = [
        {"kind": "brush", "dimension": "X", "range": [20, 80]},
        {"kind": "result", "activeDimension": "X", "dimension": "Y", "index": 20, "data": [0, 1]},
        {"kind": "result", "activeDimension": "X", "dimension": "Y", "index": 80, "data": [0]},
    ]
    config_path, events_path = _write(tmp_path, events)

    rc = main(["--config", str(config_path), "--events", str(events_path)])

    assert rc == 1
    assert "cannot combine" in capsys.readouterr().err


def test_replay_rejects_unknown_event_kind(tmp_path) -> None:
    config_path, events_path = _write(tmp_path, [{"kind": "teleport"}])

    with pytest.raises(ValueError):
        main(["--config", str(config_path), "--events", str(events_path)])


def test_replay_writes_prometheus_counters(tmp_path) -> None:
    config_path, events_path = _write(tmp_path, EVENTS)
    metrics_path = tmp_path / "metrics.prom"

    rc = main(["--config", str(config_path), "--events", str(events_path), "--metrics", str(metrics_path)])

    assert rc == 0
    text = metrics_path.read_text(encoding="utf-8")
    assert 'histogram_brush_cache_lookups_total{outcome="miss"} 1.0' in text
    assert 'histogram_brush_cache_lookups_total{outcome="hit"} 1.0' in text
    assert 'histogram_brush_transport_requests_total{type="setRange"} 1.0' in text
    assert 'histogram_brush_histograms_emitted_total{source="result"} 1.0' in text


@pytest.mark.parametrize(
    "event",
    [
        {"kind": "brush", "dimension": "X", "range": [80, 20]},
        {"kind": "result", "activeDimension": "X", "dimension": "Y", "index": 20, "data": "oops"},
    ],
)
def test_replay_exits_non_zero_on_malformed_event(tmp_path, capsys, event) -> None:
    config_path, events_path = _write(tmp_path, [event])

    rc = main(["--config", str(config_path), "--events", str(events_path)])

    assert rc == 1
    assert "Error: " in capsys.readouterr().err
