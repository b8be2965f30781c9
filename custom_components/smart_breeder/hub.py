"""Smart Breeder hub: the device client, client state and poller together."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from .api import SmartBreederApiClient
from .const import CONTROL_REFRESH_DELAY, LOGGER, SPECIES_NONE_PAYLOAD
from .models import DEFAULT_FISH_SPECIES, ApiResult, SpeciesProfile
from .parser import SmartBreederParser
from .poller import SmartBreederPoller
from .store import SmartBreederState

EMERGENCY_STOP = {"fan": False, "acidPump": False, "basePump": False}


def _describe_control(relays: dict[str, bool]) -> str:
    return ", ".join(
        f"{key} turned {'ON' if value else 'OFF'}" for key, value in relays.items()
    )


class SmartBreederHub:
    """Run device operations and fold their results into the state.

    Every operation returns the client's ``ApiResult`` and never raises.
    """

    def __init__(
        self,
        client: SmartBreederApiClient,
        state: SmartBreederState,
        poller: SmartBreederPoller | None = None,
        refresh_delay: float = CONTROL_REFRESH_DELAY,
    ) -> None:
        """Initialize."""
        self.client = client
        self.state = state
        self.poller = poller or SmartBreederPoller(client, state)
        self.refresh_delay = refresh_delay
        self._parser = SmartBreederParser()

    async def _tracked(self, call: Callable[[], Awaitable[ApiResult]]) -> ApiResult:
        self.state.begin_loading()
        try:
            return await call()
        finally:
            self.state.end_loading()

    async def async_start(self) -> None:
        """Start polling."""
        self.poller.start()

    async def async_stop(self) -> None:
        """Stop polling and wait for the pending status call."""
        await self.poller.async_shutdown()

    async def async_refresh(self) -> ApiResult:
        """Read the status now."""
        result = await self._tracked(self.client.async_get_status)
        if result.success:
            self.state.record_reading(result.data)
        else:
            self.state.record_failure(result.message)
        return result

    async def async_send_control(
        self, relays: dict[str, bool], description: str | None = None
    ) -> ApiResult:
        """Switch relays, then re-read the status after a short grace delay."""
        description = description or _describe_control(relays)
        result = await self._tracked(lambda: self.client.async_send_control(relays))
        self.state.log_action(description, result.success)

        if not result.success:
            self.state.set_error(result.message)
            self.state.push_notification(f"Control command failed: {result.message}")
            return result

        self.state.push_notification(f"Control command executed: {description}")
        # The next scheduled poll may race this write; read back explicitly.
        await asyncio.sleep(self.refresh_delay)
        await self.async_refresh()
        return result

    async def async_emergency_stop(self) -> ApiResult:
        """Turn the fan and both pH pumps off."""
        return await self.async_send_control(
            dict(EMERGENCY_STOP), "Emergency Stop - All devices turned OFF"
        )

    async def async_select_species(self, species: SpeciesProfile | None) -> ApiResult:
        """Select a species and push its ranges; None disables automation."""
        self.state.set_selected_species(species)
        payload = (
            species.as_device_payload() if species else dict(SPECIES_NONE_PAYLOAD)
        )
        result = await self._tracked(
            lambda: self.client.async_send_species_config(payload)
        )

        name = species.name if species else "None"
        self.state.log_action(f"Species set to {name}", result.success)
        if result.success:
            self.state.push_notification(f"Species configuration updated: {name}")
        else:
            self.state.set_error(result.message)
            self.state.push_notification(
                f"Species configuration failed: {result.message}"
            )
        return result

    async def async_send_wifi_config(self, ssid: str, password: str) -> ApiResult:
        """Send Wi-Fi credentials and remember them on success."""
        result = await self._tracked(
            lambda: self.client.async_send_wifi_config(ssid, password)
        )
        if result.success:
            self.state.set_settings({"wifi": {"ssid": ssid, "password": password}})
            self.state.push_notification("Wi-Fi configuration updated")
        else:
            self.state.set_error(result.message)
            self.state.push_notification(
                f"Wi-Fi configuration failed: {result.message}"
            )
        return result

    async def async_test_connection(self) -> ApiResult:
        """Ping the device."""
        result = await self._tracked(self.client.async_ping)
        self.state.set_connected(result.success)
        if result.success:
            self.state.push_notification("Connection test successful")
        else:
            self.state.set_error(result.message)
            self.state.push_notification("Connection test failed")
        return result

    async def async_calibrate(self, action: str) -> ApiResult:
        """Run a calibration step on the device."""
        result = await self._tracked(lambda: self.client.async_calibrate(action))
        self.state.log_action(f"Calibration {action}", result.success)
        if not result.success:
            self.state.set_error(result.message)
        return result

    async def async_load_species_catalog(self) -> ApiResult:
        """Merge the device species list into the built-in catalog."""
        result = await self._tracked(self.client.async_get_species_list)
        if not result.success:
            LOGGER.warning("Keeping current species catalog: %s", result.message)
            return result

        catalog = self._parser.merge_species_catalog(DEFAULT_FISH_SPECIES, result.data)
        self.state.set_species_catalog(catalog)

        selected = self.state.selected_species
        if selected is not None:
            refreshed = self.state.get_species(selected.id)
            if refreshed is not None and refreshed != selected:
                self.state.set_selected_species(refreshed)
        return result
