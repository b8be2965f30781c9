"""Periodic status polling for Smart Breeder."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import Enum

from .api import SmartBreederApiClient
from .const import LOGGER
from .store import SmartBreederState


class PollerStatus(str, Enum):
    """Lifecycle of the poller."""

    IDLE = "idle"
    SCHEDULED = "scheduled"
    RUNNING = "running"


class SmartBreederPoller:
    """Read the device status at the configured interval.

    At most one status call is in flight. A tick that fires while the previous
    call is still pending is skipped. The interval is read again before every
    reschedule, so settings changes apply from the next tick.
    """

    def __init__(
        self,
        client: SmartBreederApiClient,
        state: SmartBreederState,
        interval: Callable[[], float] | None = None,
    ) -> None:
        """Initialize."""
        self._client = client
        self._state = state
        self._interval = interval or (
            lambda: state.settings.update_interval_ms / 1000
        )
        self._timer: asyncio.TimerHandle | None = None
        self._in_flight: asyncio.Task | None = None
        self._generation = 0
        self._running = False
        self.skipped_ticks = 0

    @property
    def status(self) -> PollerStatus:
        """Return the current lifecycle state."""
        if not self._running:
            return PollerStatus.IDLE
        if self._in_flight is not None and not self._in_flight.done():
            return PollerStatus.RUNNING
        return PollerStatus.SCHEDULED

    @property
    def is_polling(self) -> bool:
        """Return True while a status call is pending."""
        return self._in_flight is not None and not self._in_flight.done()

    def start(self) -> None:
        """Poll now, then keep polling until stopped."""
        if self._running:
            return
        self._running = True
        self._generation += 1
        LOGGER.debug("Starting status polling")
        self._tick()

    def stop(self) -> None:
        """Cancel the pending tick. A call in flight is left to finish."""
        if not self._running:
            return
        self._running = False
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        LOGGER.debug("Stopped status polling")

    async def async_shutdown(self) -> None:
        """Stop and wait for the call in flight, whose result is discarded."""
        self.stop()
        if self._in_flight is not None and not self._in_flight.done():
            await self._in_flight

    def _tick(self) -> None:
        self._timer = None
        if not self._running:
            return

        if self.is_polling:
            self.skipped_ticks += 1
            LOGGER.debug("Previous status call still pending, skipping this tick")
        else:
            self._in_flight = asyncio.get_running_loop().create_task(
                self._async_poll(self._generation)
            )
        self._schedule()

    def _schedule(self) -> None:
        delay = self._interval()
        self._timer = asyncio.get_running_loop().call_later(delay, self._tick)

    async def _async_poll(self, generation: int) -> None:
        self._state.begin_loading()
        try:
            result = await self._client.async_get_status()
        finally:
            self._state.end_loading()

        if generation != self._generation:
            LOGGER.debug("Discarding status received after polling stopped")
            return

        if result.success:
            self._state.record_reading(result.data)
        else:
            self._state.record_failure(result.message)
