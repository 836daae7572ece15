"""Per-invocation settings resolution for hooks.

Settings files are JSONC (JSON plus ``//`` comments). A file is resolved once
per hook invocation into a frozen pydantic model. Resolution never raises:
any read or parse failure discards the partial result and yields the
compiled-in defaults, together with a ConfigOutcome for health scoring.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pulse.diagnostics.models import ConfigOutcome, Target
from pulse.errors import ConfigInvalidError, ConfigUnavailableError, PulseError

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 2.0
DEFAULT_PROBE_COMMAND = "lsof"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


# === Port monitoring ===


class PortEntry(_Frozen):
    """A described port from the ``monitored_ports`` list."""

    number: str
    description: str = ""
    enabled: bool = True

    @field_validator("number", mode="before")
    @classmethod
    def _number_as_text(cls, value: Any) -> Any:
        # Ports may be written as JSON numbers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


DEFAULT_PORTS: tuple[PortEntry, ...] = (
    PortEntry(number="3000", description="React/Next.js"),
    PortEntry(number="8000", description="Django/Python HTTP server"),
    PortEntry(number="8080", description="Generic HTTP server"),
    PortEntry(number="5173", description="Vite dev server"),
    PortEntry(number="4200", description="Angular CLI dev server"),
)


class PortsSection(_Frozen):
    """Which ports to monitor."""

    enabled: bool = True
    monitored_ports: tuple[PortEntry, ...] = DEFAULT_PORTS
    custom_ports: tuple[str, ...] = ()

    @field_validator("custom_ports", mode="before")
    @classmethod
    def _custom_as_text(cls, value: Any) -> Any:
        if isinstance(value, list | tuple):
            return tuple(
                str(v) if isinstance(v, int) and not isinstance(v, bool) else v
                for v in value
            )
        return value


class DisplaySection(_Frozen):
    """How the port summary is rendered."""

    show_at_start: bool = True
    show_at_end: bool = True
    icon: str = "🔌"
    start_message: str = "Active dev servers on ports:"
    end_message: str = "Dev servers still running on ports:"
    separator: str = ", "
    show_descriptions: bool = False


class BehaviorSection(_Frozen):
    """How probing behaves."""

    silent_failures: bool = True
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    check_command: str = DEFAULT_PROBE_COMMAND
    require_lsof: bool = False
    concurrent: bool = True

    @field_validator("timeout_seconds")
    @classmethod
    def _finite_positive_timeout(cls, value: float) -> float:
        # JSON allows Infinity and NaN; neither is a usable deadline
        if not math.isfinite(value) or value <= 0:
            return DEFAULT_TIMEOUT_SECONDS
        return value


class PortMonitorSettings(_Frozen):
    """Settings for the session start/end port monitoring hooks."""

    ports: PortsSection = Field(default_factory=PortsSection)
    display: DisplaySection = Field(default_factory=DisplaySection)
    behavior: BehaviorSection = Field(default_factory=BehaviorSection)

    @property
    def enabled(self) -> bool:
        return self.ports.enabled

    @property
    def targets(self) -> tuple[Target, ...]:
        return merge_targets(self.ports.monitored_ports, self.ports.custom_ports)

    @property
    def timeout(self) -> float:
        return self.behavior.timeout_seconds

    @property
    def probe_command(self) -> str:
        return self.behavior.check_command or DEFAULT_PROBE_COMMAND

    @property
    def require_probe_command(self) -> bool:
        return self.behavior.require_lsof

    @property
    def silent_failures(self) -> bool:
        return self.behavior.silent_failures


def merge_targets(
    monitored: tuple[PortEntry, ...],
    custom: tuple[str, ...],
) -> tuple[Target, ...]:
    """Merge described and custom ports into one ordered target list.

    Monitored ports come first, then custom ports. A repeated id keeps the
    position of its first occurrence; its enabled flag is taken from the
    last occurrence and its label from the first non-empty one.

    Args:
        monitored: Described ports in configuration order
        custom: Extra port numbers (always enabled, no label)

    Returns:
        Targets with unique ids
    """
    merged: dict[str, Target] = {}
    entries = [(p.number, p.description, p.enabled) for p in monitored]
    entries.extend((number, "", True) for number in custom)

    for port_id, label, enabled in entries:
        port_id = port_id.strip()
        if not port_id:
            continue
        previous = merged.get(port_id)
        if previous is not None:
            label = previous.label or label
        merged[port_id] = Target(id=port_id, label=label, enabled=enabled)

    return tuple(merged.values())


# === Subagent completion ===


class AgentSection(_Frozen):
    """Subagent completion display settings."""

    enabled: bool = True
    show_completion: bool = True
    show_errors: bool = True
    header: str = "SUBAGENT COMPLETION"
    success: str = "✓ Subagent [{type}] completed successfully"
    failure: str = "⚠️  Subagent [{type}] completed with errors (exit code: {code})"
    default: str = "✓ Subagent [{type}] completed"
    silent_failures: bool = True


class SubagentSettings(_Frozen):
    """Settings for the subagent stop hook."""

    agent: AgentSection = Field(default_factory=AgentSection)

    @property
    def enabled(self) -> bool:
        return self.agent.enabled

    @property
    def silent_failures(self) -> bool:
        return self.agent.silent_failures


# === Resolution ===

SettingsT = TypeVar("SettingsT", bound=BaseModel)


def strip_jsonc_comments(text: str) -> str:
    """Remove ``//`` comments that sit outside JSON strings.

    Args:
        text: JSONC document

    Returns:
        Plain JSON text
    """
    out: list[str] = []
    in_string = False
    escaped = False
    i = 0
    while i < len(text):
        ch = text[i]
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
            out.append(ch)
        elif ch == "/" and text.startswith("//", i):
            newline = text.find("\n", i)
            if newline == -1:
                break
            i = newline
            continue
        else:
            out.append(ch)
        i += 1
    return "".join(out)


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigUnavailableError(f"Cannot read {path}: {e}") from e


def _parse_source(text: str, model: type[SettingsT]) -> SettingsT:
    try:
        data = json.loads(strip_jsonc_comments(text))
        return model.model_validate(data)
    except (json.JSONDecodeError, ValidationError, TypeError, ValueError) as e:
        raise ConfigInvalidError(str(e)) from e


def load_settings(
    path: Path,
    model: type[SettingsT],
) -> tuple[SettingsT, ConfigOutcome]:
    """Resolve settings and report which source was used.

    Args:
        path: Settings file to read
        model: Settings model class; ``model()`` must build the defaults

    Returns:
        Tuple of (settings, outcome). Never raises for file problems.
    """
    try:
        settings = _parse_source(_read_source(Path(path)), model)
    except ConfigUnavailableError as e:
        logger.debug("settings_unavailable", path=str(path), error=str(e))
        return model(), ConfigOutcome.MISSING
    except PulseError as e:
        logger.info("settings_invalid", path=str(path), error=str(e))
        return model(), ConfigOutcome.INVALID

    return settings, ConfigOutcome.LOADED


def resolve(path: Path, model: type[SettingsT]) -> SettingsT:
    """Resolve settings, falling back to defaults on any failure."""
    settings, _ = load_settings(path, model)
    return settings
