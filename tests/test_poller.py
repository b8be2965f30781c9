"""Tests for the Smart Breeder status poller."""

import asyncio
from unittest.mock import MagicMock

import pytest

from custom_components.smart_breeder.models import ApiResult, DeviceReading
from custom_components.smart_breeder.poller import PollerStatus, SmartBreederPoller
from custom_components.smart_breeder.store import SmartBreederState

TICK = 0.01


class GatedClient:
    """Client whose status calls block until released."""

    def __init__(self, result: ApiResult | None = None) -> None:
        self.gate = asyncio.Event()
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.result = result or ApiResult(
            success=True,
            message="Device status retrieved successfully",
            data=DeviceReading(ph=7.0, temperature=28.0),
        )

    async def async_get_status(self) -> ApiResult:
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await self.gate.wait()
        finally:
            self.in_flight -= 1
        return self.result


@pytest.mark.asyncio
async def test_single_call_in_flight():
    """Ticks that fire during a pending call are skipped."""
    client = GatedClient()
    state = SmartBreederState()
    poller = SmartBreederPoller(client, state, interval=lambda: TICK)

    poller.start()
    await asyncio.sleep(TICK * 5)

    assert client.calls == 1
    assert poller.skipped_ticks >= 1
    assert poller.status is PollerStatus.RUNNING
    assert state.is_loading

    client.gate.set()
    await asyncio.sleep(TICK * 5)

    assert client.calls >= 2
    assert client.max_in_flight == 1
    assert state.reading.ph == 7.0
    assert state.connection.connected

    await poller.async_shutdown()
    assert poller.status is PollerStatus.IDLE
    assert not state.is_loading


@pytest.mark.asyncio
async def test_result_discarded_after_stop():
    """A call finishing after stop does not touch the state."""
    client = GatedClient()
    state = SmartBreederState()
    poller = SmartBreederPoller(client, state, interval=lambda: TICK)

    poller.start()
    await asyncio.sleep(0)
    poller.stop()
    client.gate.set()
    await poller.async_shutdown()

    assert client.calls == 1
    assert state.reading is None
    assert not state.is_loading

    await asyncio.sleep(TICK * 3)
    assert client.calls == 1


@pytest.mark.asyncio
async def test_failure_recorded():
    """A failed poll is stored as the current error."""
    client = GatedClient(ApiResult(success=False, message="Failed to connect"))
    client.gate.set()
    state = SmartBreederState()
    state.record_reading(DeviceReading(ph=6.8, temperature=27.0))
    poller = SmartBreederPoller(client, state, interval=lambda: TICK)

    poller.start()
    await asyncio.sleep(TICK * 2)
    await poller.async_shutdown()

    assert state.error == "Failed to connect"
    assert state.connection.connected is False
    assert state.reading.ph == 6.8


@pytest.mark.asyncio
async def test_interval_read_on_every_reschedule():
    """Interval changes apply from the next tick."""
    client = GatedClient()
    client.gate.set()
    interval = MagicMock(return_value=TICK)
    poller = SmartBreederPoller(client, SmartBreederState(), interval=interval)

    poller.start()
    await asyncio.sleep(TICK * 4)
    interval.return_value = 60
    await asyncio.sleep(TICK * 4)
    calls = client.calls
    await asyncio.sleep(TICK * 4)
    await poller.async_shutdown()

    assert interval.call_count >= 2
    assert client.calls == calls


def test_default_interval_follows_settings():
    """Without an explicit interval the settings value is used, in seconds."""
    state = SmartBreederState()
    poller = SmartBreederPoller(MagicMock(), state)

    assert poller._interval() == 5
    state.set_settings({"update_interval_ms": 10000})
    assert poller._interval() == 10


@pytest.mark.asyncio
async def test_start_is_idempotent():
    """Starting twice does not double the schedule."""
    client = GatedClient()
    poller = SmartBreederPoller(client, SmartBreederState(), interval=lambda: 60)

    poller.start()
    poller.start()
    await asyncio.sleep(0)
    assert client.calls == 1

    client.gate.set()
    await poller.async_shutdown()
    poller.stop()
    assert poller.status is PollerStatus.IDLE
