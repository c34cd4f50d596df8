# STS Query Client
# File: tests/conftest.py
# Version: v1

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep real STS_* / AWS_* settings from leaking into tests."""
    for name in list(os.environ):
        if name.startswith("STS_") or name.startswith("AWS_"):
            monkeypatch.delenv(name, raising=False)


class SleepRecorder:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(float(delay))


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()
