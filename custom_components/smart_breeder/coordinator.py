"""DataUpdateCoordinator for Smart Breeder."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.update_coordinator import (
    DataUpdateCoordinator,
    UpdateFailed,
)

from .const import DOMAIN, LOGGER
from .hub import SmartBreederHub
from .store import SmartBreederState


class SmartBreederDataUpdateCoordinator(DataUpdateCoordinator[SmartBreederState]):
    """Push Smart Breeder state changes to entities.

    Polling is done by the hub's poller, so the coordinator has no interval of
    its own; it republishes the state whenever it changes.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        hub: SmartBreederHub,
    ) -> None:
        """Initialize."""
        self.hub = hub
        super().__init__(
            hass,
            LOGGER,
            config_entry=entry,
            name=DOMAIN,
            update_interval=None,
        )
        self._unsub_state = hub.state.async_add_listener(self._handle_state_change)

    @callback
    def _handle_state_change(self) -> None:
        """Republish the state to listening entities."""
        self.async_set_updated_data(self.hub.state)

    async def _async_update_data(self) -> SmartBreederState:
        """Read the device status on demand."""
        result = await self.hub.async_refresh()
        if not result.success:
            raise UpdateFailed(result.message)
        return self.hub.state

    async def async_shutdown(self) -> None:
        """Stop polling and detach from the state."""
        self._unsub_state()
        await self.hub.async_stop()
        await super().async_shutdown()
