"""Button platform for Smart Breeder."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from homeassistant.components.button import ButtonEntity, ButtonEntityDescription
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import SmartBreederDataUpdateCoordinator
from .entity import SmartBreederEntity
from .hub import SmartBreederHub
from .models import ApiResult


@dataclass(frozen=True, kw_only=True)
class SmartBreederButtonEntityDescription(ButtonEntityDescription):
    """Describe a Smart Breeder button."""

    press_fn: Callable[[SmartBreederHub], Awaitable[ApiResult]]


ENTITY_DESCRIPTIONS = (
    SmartBreederButtonEntityDescription(
        key="emergency_stop",
        name="Emergency stop",
        icon="mdi:stop-circle",
        press_fn=lambda hub: hub.async_emergency_stop(),
    ),
    SmartBreederButtonEntityDescription(
        key="test_connection",
        name="Test connection",
        icon="mdi:lan-connect",
        entity_category=EntityCategory.DIAGNOSTIC,
        press_fn=lambda hub: hub.async_test_connection(),
    ),
    SmartBreederButtonEntityDescription(
        key="reload_species",
        name="Reload species catalog",
        icon="mdi:database-refresh",
        entity_category=EntityCategory.CONFIG,
        press_fn=lambda hub: hub.async_load_species_catalog(),
    ),
    SmartBreederButtonEntityDescription(
        key="calibrate_ph7",
        name="Calibrate pH 7",
        icon="mdi:test-tube",
        entity_category=EntityCategory.CONFIG,
        press_fn=lambda hub: hub.async_calibrate("ph7"),
    ),
    SmartBreederButtonEntityDescription(
        key="calibrate_ph4",
        name="Calibrate pH 4",
        icon="mdi:test-tube",
        entity_category=EntityCategory.CONFIG,
        press_fn=lambda hub: hub.async_calibrate("ph4"),
    ),
    SmartBreederButtonEntityDescription(
        key="calibrate_temp",
        name="Calibrate temperature",
        icon="mdi:thermometer-check",
        entity_category=EntityCategory.CONFIG,
        press_fn=lambda hub: hub.async_calibrate("temp"),
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the button platform."""
    coordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        SmartBreederButton(coordinator, entity_description)
        for entity_description in ENTITY_DESCRIPTIONS
    )


class SmartBreederButton(SmartBreederEntity, ButtonEntity):
    """Smart Breeder button class."""

    entity_description: SmartBreederButtonEntityDescription

    def __init__(
        self,
        coordinator: SmartBreederDataUpdateCoordinator,
        entity_description: SmartBreederButtonEntityDescription,
    ) -> None:
        """Initialize."""
        super().__init__(coordinator, entity_description.key)
        self.entity_description = entity_description

    async def async_press(self) -> None:
        """Run the device operation."""
        result = await self.entity_description.press_fn(self.coordinator.hub)
        if not result.success:
            raise HomeAssistantError(result.message)
