"""Smart Breeder integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.storage import Store

from .api import SmartBreederApiClient, SmartBreederValidationError
from .const import (
    CONF_HOST,
    CONF_RELAY_URL,
    CONF_UPDATE_INTERVAL,
    DOMAIN,
    LOGGER,
    STORAGE_VERSION,
)
from .coordinator import SmartBreederDataUpdateCoordinator
from .hub import SmartBreederHub
from .store import SmartBreederState

PLATFORMS: list[Platform] = [
    Platform.SENSOR,
    Platform.BINARY_SENSOR,
    Platform.SWITCH,
    Platform.SELECT,
    Platform.BUTTON,
]

# Seconds to coalesce settings writes
SAVE_DELAY = 1


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Smart Breeder from a config entry."""
    storage: Store = Store(hass, STORAGE_VERSION, f"{DOMAIN}.{entry.entry_id}")

    state = SmartBreederState(
        on_persist=lambda: storage.async_delay_save(state.as_persisted, SAVE_DELAY)
    )
    state.restore(await storage.async_load())

    def _persist_address(address: str) -> None:
        hass.config_entries.async_update_entry(
            entry,
            data={**entry.data, CONF_HOST: address},
            title=address,
            unique_id=address,
        )

    client = SmartBreederApiClient.for_origin(
        address=entry.data[CONF_HOST],
        session=async_get_clientsession(hass),
        origin=entry.data.get(CONF_RELAY_URL),
        on_address_change=_persist_address,
    )
    LOGGER.debug("Using %s transport via %s", client.mode, client.base_url)

    hub = SmartBreederHub(client, state)
    coordinator = SmartBreederDataUpdateCoordinator(hass, entry, hub)

    await coordinator.async_config_entry_first_refresh()
    await hub.async_load_species_catalog()

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = coordinator

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    entry.async_on_unload(entry.add_update_listener(async_update_options))
    await hub.async_start()

    return True


async def async_update_options(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Apply edited options to the running hub.

    The interval applies from the next poll; the address from the next call.
    """
    coordinator: SmartBreederDataUpdateCoordinator = hass.data[DOMAIN][
        entry.entry_id
    ]
    hub = coordinator.hub
    options = entry.options

    interval = options.get(CONF_UPDATE_INTERVAL)
    if interval is not None and interval != hub.state.settings.update_interval_ms:
        hub.state.set_settings({CONF_UPDATE_INTERVAL: interval})

    host = options.get(CONF_HOST)
    if host and host != hub.client.address:
        try:
            hub.client.set_address(host)
        except SmartBreederValidationError as exception:
            LOGGER.error("Keeping device address %s: %s", hub.client.address, exception)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    if unload_ok := await hass.config_entries.async_unload_platforms(entry, PLATFORMS):
        coordinator = hass.data[DOMAIN].pop(entry.entry_id)
        await coordinator.async_shutdown()

    return unload_ok
