"""Tests for the SessionStart and SessionEnd hooks."""

from __future__ import annotations

import io
import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from pulse.hooks import session_end, session_start

# Fake lsof: ports 3000 and 8080 are listening, others exit 1 like lsof does
FAKE_LSOF = """\
case "$2" in
  :3000|:8080) echo 4242; exit 0 ;;
esac
exit 1"""


@pytest.fixture
def fake_lsof(
    make_command: Callable[[str, str], Path], monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Put a fake lsof first on PATH."""
    command = make_command("lsof", FAKE_LSOF)
    monkeypatch.setenv("PATH", f"{command.parent}{os.pathsep}{os.environ['PATH']}")
    return command


def _run_main(main: Callable[[], None], payload: dict[str, Any] | None = None) -> str:
    stdin = io.StringIO(json.dumps(payload) if payload is not None else "")
    stdout = io.StringIO()
    with patch.object(sys, "stdin", stdin), patch.object(sys, "stdout", stdout):
        main()
    return stdout.getvalue()


class TestSessionStart:
    """Tests for the SessionStart hook entry point."""

    def test_reports_listening_ports(self, pulse_home: Path, fake_lsof: Path) -> None:
        """Test default ports are probed and listening ones shown."""
        output = _run_main(session_start.main, {"session_id": "sess-1"})
        assert output == "🔌 Active dev servers on ports: 3000, 8080\n"

    def test_writes_logs(self, pulse_home: Path, fake_lsof: Path) -> None:
        """Test the monitoring log and activity stream receive the record."""
        _run_main(session_start.main, {"session_id": "sess-1"})

        monitoring = (pulse_home / "debug" / "processes.log").read_text()
        assert "event=SessionStart" in monitoring
        assert "listening=3000,8080" in monitoring
        assert "health=55" in monitoring

        event = json.loads((pulse_home / "activity" / "sess-1.jsonl").read_text())
        assert event["session_id"] == "sess-1"
        assert event["event_name"] == "SessionStart"

    def test_descriptions_from_config(
        self,
        write_config: Callable[[str, Any], Path],
        fake_lsof: Path,
    ) -> None:
        """Test configured display settings are applied."""
        write_config(
            "processes.jsonc",
            {
                "ports": {
                    "monitored_ports": [
                        {"number": "8080", "description": "API", "enabled": True}
                    ]
                },
                "display": {"show_descriptions": True, "icon": ">"},
            },
        )
        output = _run_main(session_start.main)
        assert output == "> Active dev servers on ports: 8080 (API)\n"

    def test_disabled_prints_nothing(
        self,
        pulse_home: Path,
        write_config: Callable[[str, Any], Path],
        fake_lsof: Path,
    ) -> None:
        """Test a disabled hook leaves stdout and logs untouched."""
        write_config("processes.jsonc", {"ports": {"enabled": False}})
        assert _run_main(session_start.main, {"session_id": "s"}) == ""
        assert not (pulse_home / "debug" / "processes.log").exists()

    def test_probe_command_missing(
        self, pulse_home: Path, write_config: Callable[[str, Any], Path]
    ) -> None:
        """Test a missing probe command prints nothing and exits normally."""
        write_config(
            "processes.jsonc",
            {"behavior": {"check_command": "pulse-no-such-probe-command"}},
        )
        assert _run_main(session_start.main) == ""
        assert "health=30" in (pulse_home / "debug" / "processes.log").read_text()

    def test_bootstrap_failure_is_silent(
        self, pulse_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a crash before the hook runs is logged, not raised."""

        def explode() -> None:
            raise RuntimeError("settings broken")

        monkeypatch.setattr("pulse.hooks.ports.get_settings", explode)
        assert _run_main(session_start.main) == ""
        assert "settings broken" in (pulse_home / "hook_errors.log").read_text()


class TestSessionEnd:
    """Tests for the SessionEnd hook entry point."""

    def test_reports_running_ports(self, pulse_home: Path, fake_lsof: Path) -> None:
        """Test the end message is used."""
        output = _run_main(session_end.main)
        assert output == "🔌 Dev servers still running on ports: 3000, 8080\n"
        assert "event=SessionEnd" in (pulse_home / "debug" / "processes.log").read_text()

    def test_show_at_end_off(
        self, write_config: Callable[[str, Any], Path], fake_lsof: Path
    ) -> None:
        """Test show_at_end false suppresses the reminder."""
        write_config("processes.jsonc", {"display": {"show_at_end": False}})
        assert _run_main(session_end.main) == ""
