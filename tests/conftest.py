"""Shared fakes for hub tests."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import Any

import pytest

from shocker_hub.domain.errors import ConnectionClosedError, ForwardingError
from shocker_hub.domain.models import (
    BroadcastKind,
    ChannelStatistics,
    ConnectionState,
    ForwardingResult,
)

_ids = itertools.count(1)


class FakeConnection:
    """In-memory streaming connection that records sent frames."""

    def __init__(self, fail_sends: bool = False) -> None:
        self.connection_id = f"conn-{next(_ids)}"
        self.remote_address = f"198.51.100.{len(self.connection_id)}:5000"
        self.state = ConnectionState.OPEN
        self.fail_sends = fail_sends
        self.sent: list[str] = []

    async def send_text(self, text: str) -> None:
        if self.fail_sends or self.state is not ConnectionState.OPEN:
            raise ConnectionClosedError(f"{self.connection_id} is gone")
        self.sent.append(text)

    def close(self) -> None:
        self.state = ConnectionState.CLOSED


class FakeControlApi:
    """Control API double recording every call."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.fail_for = fail_for or set()

    async def send_control(
        self,
        credential: str,
        device_ids: list[str],
        intensity: int,
        duration: int,
        kind: BroadcastKind,
    ) -> ForwardingResult:
        self.calls.append(
            {
                "credential": credential,
                "device_ids": list(device_ids),
                "intensity": intensity,
                "duration": duration,
                "kind": kind,
            }
        )
        if credential in self.fail_for:
            raise ForwardingError("connection refused")
        return ForwardingResult(
            enabled=True, success=True, status_code=200, device_ids=device_ids, data={}
        )


class FakeMetricSource:
    """Metric source returning a scripted sequence of counts."""

    def __init__(self, counts: list[int | Exception]) -> None:
        self.counts = list(counts)
        self.fetches = 0

    async def fetch(self) -> ChannelStatistics:
        self.fetches += 1
        value = self.counts.pop(0) if self.counts else self.last_value
        if isinstance(value, Exception):
            raise value
        self.last_value = value
        return ChannelStatistics(subscriber_count=value, channel_name="Test Channel")

    last_value: int = 0


@pytest.fixture
def make_connection() -> Callable[..., FakeConnection]:
    return FakeConnection


@pytest.fixture
def control_api() -> FakeControlApi:
    return FakeControlApi()


@pytest.fixture
def make_control_api() -> Callable[..., FakeControlApi]:
    return FakeControlApi


@pytest.fixture
def make_metric_source() -> Callable[..., FakeMetricSource]:
    return FakeMetricSource
