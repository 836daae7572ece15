"""Value types shared by the diagnostic hook engine.

All types are immutable snapshots scoped to a single hook invocation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType


class ProbeState(str, Enum):
    """Outcome of a single port probe."""

    LISTENING = "listening"
    NOT_LISTENING = "not_listening"
    CHECK_FAILED = "check_failed"
    TIMED_OUT = "timed_out"

    @property
    def succeeded(self) -> bool:
        """True if the probe ran to a clean answer."""
        return self in (ProbeState.LISTENING, ProbeState.NOT_LISTENING)


class Outcome(str, Enum):
    """Overall outcome carried by a completion record."""

    SUCCESS = "success"
    FAILURE = "failure"
    UNKNOWN = "unknown"


class ReportContext(str, Enum):
    """Lifecycle event a report is rendered for."""

    START = "start"
    END = "end"
    SUBAGENT_COMPLETION = "subagent_completion"


@dataclass(frozen=True)
class Target:
    """One monitored port.

    Attributes:
        id: Port number as a string
        label: Human-readable description (empty for custom ports)
        enabled: Whether the port is probed
    """

    id: str
    label: str = ""
    enabled: bool = True


@dataclass(frozen=True)
class ProbeResult:
    """Classified result of probing one target."""

    target: Target
    state: ProbeState


@dataclass(frozen=True)
class CompletionRecord:
    """Payload handed to every logging sink.

    The context mapping is wrapped in a read-only proxy on construction, so
    sinks share the record without being able to change it.
    """

    event_name: str
    context: Mapping[str, str] = field(default_factory=dict)
    outcome: Outcome = Outcome.UNKNOWN
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "context",
            MappingProxyType({str(k): str(v) for k, v in self.context.items()}),
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize for JSON sinks."""
        return {
            "event_name": self.event_name,
            "context": dict(self.context),
            "outcome": self.outcome.value,
            "timestamp": self.timestamp.isoformat(),
        }


class Phase(str, Enum):
    """Scored phases of one hook invocation."""

    CONFIG = "config"
    GATHER = "gather"
    DISPLAY = "display"


class ConfigOutcome(str, Enum):
    """Which settings source was used."""

    LOADED = "loaded"
    MISSING = "missing"
    INVALID = "invalid"


class GatherOutcome(str, Enum):
    """How fact gathering went across all probes."""

    ALL_OK = "all_ok"
    PARTIAL = "partial"
    ALL_FAILED = "all_failed"


class DisplayOutcome(str, Enum):
    """How rendering the summary went."""

    OK = "ok"
    DEGRADED = "degraded"
    FAILED = "failed"
