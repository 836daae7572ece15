"""Pulse Configuration Module.

Provides the process-level settings shared by every hook: where Pulse keeps
its config files and logs, and how hook processes log. All settings support
environment variable overrides with PULSE_ prefix.

Hook-specific settings (ports to watch, display strings, subagent messages)
live in JSONC files under ``config_dir`` and are resolved per invocation by
``pulse.diagnostics.settings``.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default paths
PULSE_HOME = Path.home() / ".pulse"

PROCESSES_CONFIG_NAME = "processes.jsonc"
SUBAGENT_CONFIG_NAME = "subagent.jsonc"

# Default processes.jsonc content
DEFAULT_PROCESSES_CONFIG = """\
// Pulse port monitoring configuration
// Used by the session start and session end hooks.
{
  "ports": {
    // Master switch for port monitoring
    "enabled": true,
    "monitored_ports": [
      {"number": "3000", "description": "React/Next.js", "enabled": true},
      {"number": "8000", "description": "Django/Python HTTP server", "enabled": true},
      {"number": "8080", "description": "Generic HTTP server", "enabled": true},
      {"number": "5173", "description": "Vite dev server", "enabled": true},
      {"number": "4200", "description": "Angular CLI dev server", "enabled": true}
    ],
    // Extra port numbers to check (no description)
    "custom_ports": []
  },
  "display": {
    "show_at_start": true,
    "show_at_end": true,
    "icon": "🔌",
    "start_message": "Active dev servers on ports:",
    "end_message": "Dev servers still running on ports:",
    "separator": ", ",
    "show_descriptions": false
  },
  "behavior": {
    "silent_failures": true,
    // Max wait per port check
    "timeout_seconds": 2,
    // lsof or ss
    "check_command": "lsof",
    "require_lsof": false,
    "concurrent": true
  }
}
"""

# Default subagent.jsonc content
DEFAULT_SUBAGENT_CONFIG = """\
// Pulse subagent completion configuration
// Placeholders: {type} = subagent type, {code} = exit code
{
  "agent": {
    "enabled": true,
    "show_completion": true,
    "show_errors": true,
    "header": "SUBAGENT COMPLETION",
    "success": "✓ Subagent [{type}] completed successfully",
    "failure": "⚠️  Subagent [{type}] completed with errors (exit code: {code})",
    "default": "✓ Subagent [{type}] completed",
    "silent_failures": true
  }
}
"""


class PulseSettings(BaseSettings):
    """Pulse process configuration.

    All settings can be overridden via environment variables with PULSE_ prefix.
    For example, PULSE_LOG_LEVEL=debug sets log_level to debug.
    """

    model_config = SettingsConfigDict(
        env_prefix="PULSE_",
        env_nested_delimiter="__",
    )

    # Paths
    home: Path = Field(
        default=PULSE_HOME,
        description="Base directory for Pulse config and logs",
    )

    # Logging
    log_level: str = Field(
        default="warning",
        description="Logging level (debug, info, warning, error)",
    )
    log_format: str = Field(
        default="console",
        description="Log renderer for stderr (console or json)",
    )

    @property
    def config_dir(self) -> Path:
        """Directory holding the hook JSONC files."""
        return self.home / "config"

    @property
    def debug_dir(self) -> Path:
        """Directory for monitoring logs."""
        return self.home / "debug"

    @property
    def activity_dir(self) -> Path:
        """Directory for per-session activity streams."""
        return self.home / "activity"

    @property
    def processes_config(self) -> Path:
        """Port monitoring settings file."""
        return self.config_dir / PROCESSES_CONFIG_NAME

    @property
    def subagent_config(self) -> Path:
        """Subagent completion settings file."""
        return self.config_dir / SUBAGENT_CONFIG_NAME


def get_settings() -> PulseSettings:
    """Build settings from the current environment.

    Called once per hook invocation so that no configuration is cached
    across processes or tests.
    """
    return PulseSettings()
