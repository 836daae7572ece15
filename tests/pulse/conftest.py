"""Test fixtures for Pulse tests."""

from __future__ import annotations

import json
import stat
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from pulse.logging import configure_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove host variables that would leak into hook runs."""
    for var in (
        "CLAUDE_SESSION_ID",
        "SUBAGENT_TYPE",
        "SUBAGENT_STATUS",
        "SUBAGENT_EXIT_CODE",
        "SUBAGENT_ERROR",
        "PULSE_LOG_LEVEL",
        "PULSE_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def pulse_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point Pulse at a temporary home directory."""
    home = tmp_path / ".pulse"
    home.mkdir()
    monkeypatch.setenv("PULSE_HOME", str(home))
    return home


@pytest.fixture
def write_config(pulse_home: Path) -> Callable[[str, Any], Path]:
    """Write a JSON (or raw text) config file into the temp config dir."""

    def _write(name: str, content: Any) -> Path:
        config_dir = pulse_home / "config"
        config_dir.mkdir(exist_ok=True)
        path = config_dir / name
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_command(tmp_path: Path) -> Callable[[str, str], Path]:
    """Create an executable shell script usable as a probe command."""

    def _make(name: str, body: str) -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        path = bin_dir / name
        path.write_text(f"#!/bin/sh\n{body}\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


@pytest.fixture(autouse=True, scope="session")
def stderr_logging() -> None:
    """Route structlog through stdlib logging so nothing reaches stdout."""
    configure_logging()
