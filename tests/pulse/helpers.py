"""Shared fakes for Pulse tests."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Iterable
from typing import Any

from pulse.diagnostics.models import CompletionRecord
from pulse.diagnostics.sinks import Sink

FakeRunner = Callable[..., subprocess.CompletedProcess[str]]


def listening_runner(ports: Iterable[str], failed_code: int = 1) -> FakeRunner:
    """Build a fake subprocess.run that reports only ``ports`` as listening.

    Any other port exits with ``failed_code`` (lsof exits 1 when it finds
    nothing). The port is read from the last argument, with any leading
    colon removed.
    """
    listening = set(ports)

    def _run(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        port = args[-1].lstrip(":")
        if "-i" in args:
            port = args[args.index("-i") + 1].lstrip(":")
        if port in listening:
            return subprocess.CompletedProcess(args, 0, stdout="4242\n", stderr="")
        return subprocess.CompletedProcess(args, failed_code, stdout="", stderr="")

    return _run


class RecordingSink(Sink):
    """Sink that keeps every record it receives."""

    def __init__(self, name: str = "recording") -> None:
        self.name = name
        self.records: list[CompletionRecord] = []

    def write(self, record: CompletionRecord) -> None:
        self.records.append(record)


class FailingSink(Sink):
    """Sink whose backing store is always unavailable."""

    def __init__(self, error: Exception, name: str = "failing") -> None:
        self.name = name
        self.error = error
        self.calls = 0

    def write(self, record: CompletionRecord) -> None:
        self.calls += 1
        raise self.error
