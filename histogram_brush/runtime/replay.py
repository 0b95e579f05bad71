from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any

from prometheus_client import write_to_textfile
from pydantic import ValidationError

from histogram_brush.adapters.transport import OutgoingMessage, RecordingTransport
from histogram_brush.core.config.coordinator_config import CoordinatorConfig
from histogram_brush.core.coordinator.query_coordinator import QueryCoordinator
from histogram_brush.core.domain.errors import HistogramBrushError
from histogram_brush.core.events.event_bus import EventBus
from histogram_brush.core.events.sinks.file_recorder import FileRecorderSink
from histogram_brush.core.events.sinks.prometheus_sink import PrometheusEventSink
from histogram_brush.core.events.sinks.sink_logging import LoggingEventSink

LOGGER = logging.getLogger(__name__)

EVENT_KINDS = frozenset({"init", "activate", "state", "brush", "load", "preload", "result"})

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ReplaySummary:
    events: int = 0
    messages_sent: int = 0
    histograms: list[tuple[str, list[float]]] = field(default_factory=list)


def _read_events(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(path)
    events: list[dict[str, Any]] = []
    for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        obj = json.loads(line)
        if not isinstance(obj, dict) or obj.get("kind") not in EVENT_KINDS:
            raise ValueError(f"{path}:{lineno}: expected an object with kind in {sorted(EVENT_KINDS)}")
        events.append(obj)
    return events


def _write_line(out: IO[str], record: dict[str, Any]) -> None:
    out.write(json.dumps(record) + "\n")


def replay(
    config: CoordinatorConfig,
    events: Iterable[dict[str, Any]],
    *,
    out: IO[str],
    event_bus: EventBus | None = None,
) -> ReplaySummary:
    """
    Drive a coordinator with a scripted sequence of UI and result events.

    Every transport message and every emitted histogram is written to ``out``
    as one JSON line, in the order it happened.
    """
    summary = ReplaySummary()

    def _on_send(message: OutgoingMessage) -> None:
        summary.messages_sent += 1
        _write_line(out, {"kind": "send", "message": message.to_wire()})

    def _on_histogram(dimension: str, data: list[float]) -> None:
        summary.histograms.append((dimension, data))
        _write_line(out, {"kind": "histogram", "dimension": dimension, "data": data})

    coordinator = QueryCoordinator.from_config(
        config,
        RecordingTransport(forward=_on_send),
        event_bus=event_bus,
    )
    handler = coordinator.on_result(_on_histogram)

    for event in events:
        summary.events += 1
        kind = event["kind"]

        if kind == "result":
            payload = {k: v for k, v in event.items() if k != "kind"}
            handler(payload)
            continue

        if kind == "init":
            coordinator.init(event.get("resolutions"))
            continue

        dimension = coordinator.dimension(event["dimension"])
        if kind == "activate":
            coordinator.set_active_dimension(dimension)
        elif kind == "state":
            coordinator.set_state(dimension, event["range"])
        elif kind == "brush":
            coordinator.set_range(dimension, event["range"])
        elif kind == "load":
            coordinator.load(dimension, event["value"])
        elif kind == "preload":
            coordinator.preload(dimension, event["value"])

    return summary


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Replay brush and result events through a range-query coordinator"
    )

    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to coordinator JSON config (dimensions and resolutions).",
    )

    parser.add_argument(
        "--events",
        type=Path,
        required=True,
        help="Path to a JSON-lines file of events to replay.",
    )

    parser.add_argument(
        "--record",
        type=Path,
        default=None,
        help="Optional JSON-lines file receiving every domain event.",
    )

    parser.add_argument(
        "--metrics",
        type=Path,
        default=None,
        help="Optional file receiving Prometheus counters in text exposition format.",
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level for the coordinator (default: WARNING).",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = CoordinatorConfig.from_json_file(args.config)
    events = _read_events(args.events)

    bus = EventBus(sinks=[LoggingEventSink(LOGGER)])
    if args.record is not None:
        bus.register(FileRecorderSink(args.record))
    metrics = PrometheusEventSink() if args.metrics is not None else None
    if metrics is not None:
        bus.register(metrics)

    try:
        summary = replay(config, events, out=sys.stdout, event_bus=bus)
    except (HistogramBrushError, ValidationError) as exc:
        LOGGER.error("replay_failed", extra={"error": str(exc)})
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        bus.close()
        if metrics is not None:
            write_to_textfile(str(args.metrics), metrics.registry)

    print(
        f"Replayed {summary.events} events: {summary.messages_sent} messages sent, "
        f"{len(summary.histograms)} histograms emitted.",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
