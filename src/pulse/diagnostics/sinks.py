"""Logging sinks and the isolating dispatcher.

Every completion record is fanned out to all configured sinks. A sink that
fails is logged and skipped; the remaining sinks and the caller are never
affected, even when every sink fails.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

import structlog

from pulse.config import PulseSettings
from pulse.diagnostics.models import CompletionRecord
from pulse.errors import SinkWriteError

logger = structlog.get_logger(__name__)

MONITORING_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

PROCESSES_LOG = "processes.log"
SUBAGENTS_LOG = "subagents.log"


class Sink(ABC):
    """Append-only destination for completion records."""

    name: str = "sink"

    @abstractmethod
    def write(self, record: CompletionRecord) -> None:
        """Append one record.

        Args:
            record: Record to write (read-only)

        Raises:
            SinkWriteError: If the backing store is unavailable
        """
        pass


def _append_line(path: Path, line: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError as e:
        raise SinkWriteError(f"Cannot append to {path}: {e}") from e


class ActivityLogSink(Sink):
    """Per-session JSONL activity stream.

    Events go to ``<activity_dir>/<session_id>.jsonl``. Without a session id
    there is no stream to append to and the write is skipped.
    """

    name = "activity"

    def __init__(self, activity_dir: Path, session_id: str) -> None:
        self.activity_dir = Path(activity_dir)
        self.session_id = session_id

    @property
    def stream_path(self) -> Path:
        safe_id = re.sub(r"[^A-Za-z0-9._-]", "_", self.session_id)
        return self.activity_dir / f"{safe_id}.jsonl"

    def write(self, record: CompletionRecord) -> None:
        if not self.session_id:
            logger.debug("activity_skipped", reason="no session id")
            return
        event = {"session_id": self.session_id, **record.to_dict()}
        _append_line(self.stream_path, json.dumps(event, ensure_ascii=False))


def _format_value(value: str) -> str:
    if not value or any(ch.isspace() or ch in "=\"" for ch in value):
        return json.dumps(value, ensure_ascii=False)
    return value


def format_monitoring_line(record: CompletionRecord) -> str:
    """Render a record as a greppable ``key=value`` line.

    Example:
        [2026-01-01 12:00:00] event=SubagentStop type=research outcome=success
    """
    timestamp = record.timestamp.strftime(MONITORING_TIMESTAMP_FORMAT)
    fields = [f"event={_format_value(record.event_name)}"]
    fields.extend(f"{k}={_format_value(v)}" for k, v in record.context.items())
    fields.append(f"outcome={record.outcome.value}")
    return f"[{timestamp}] " + " ".join(fields)


class MonitoringLogSink(Sink):
    """Plain-text monitoring log used for pattern analysis."""

    name = "monitoring"

    def __init__(self, log_path: Path) -> None:
        self.log_path = Path(log_path)

    def write(self, record: CompletionRecord) -> None:
        _append_line(self.log_path, format_monitoring_line(record))


class StructlogSink(Sink):
    """Emits the record as a structured log event on stderr."""

    name = "structlog"

    def __init__(self, level: str = "info") -> None:
        self.level = level

    def write(self, record: CompletionRecord) -> None:
        log = getattr(logger, self.level, logger.info)
        log(
            "hook_completed",
            hook_event=record.event_name,
            outcome=record.outcome.value,
            **dict(record.context),
        )


def dispatch(record: CompletionRecord, sinks: Sequence[Sink]) -> None:
    """Write a record to every sink in registration order.

    A sink failure of any kind is logged and discarded. This function never
    raises.

    Args:
        record: Record to fan out
        sinks: Sinks in registration order
    """
    for sink in sinks:
        try:
            sink.write(record)
        except Exception as e:
            logger.warning(
                "sink_write_failed",
                sink=getattr(sink, "name", type(sink).__name__),
                error=str(e),
                error_type=type(e).__name__,
            )


def default_sinks(
    settings: PulseSettings,
    session_id: str,
    monitoring_log: str,
) -> list[Sink]:
    """Build the standard sink set for a hook.

    Args:
        settings: Process settings (for log directories)
        session_id: Current session id (may be empty)
        monitoring_log: File name under the debug directory

    Returns:
        Activity, monitoring and structlog sinks, in that order
    """
    return [
        ActivityLogSink(settings.activity_dir, session_id),
        MonitoringLogSink(settings.debug_dir / monitoring_log),
        StructlogSink(),
    ]
