"""Switch platform for Smart Breeder."""

from __future__ import annotations

from homeassistant.components.switch import SwitchEntity, SwitchEntityDescription
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import SmartBreederDataUpdateCoordinator
from .entity import SmartBreederEntity

ENTITY_DESCRIPTIONS = (
    SwitchEntityDescription(key="fan", name="Fan", icon="mdi:fan"),
    SwitchEntityDescription(key="acidPump", name="Acid pump", icon="mdi:water-minus"),
    SwitchEntityDescription(key="basePump", name="Base pump", icon="mdi:water-plus"),
    SwitchEntityDescription(
        key="waterHeater", name="Water heater", icon="mdi:water-thermometer"
    ),
    SwitchEntityDescription(key="airPump", name="Air pump", icon="mdi:air-filter"),
    SwitchEntityDescription(key="waterFlow", name="Water flow", icon="mdi:waves"),
    SwitchEntityDescription(
        key="rainPump", name="Rain pump", icon="mdi:weather-pouring"
    ),
    SwitchEntityDescription(
        key="lightControl", name="Light", icon="mdi:lightbulb-outline"
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the switch platform."""
    coordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        SmartBreederSwitch(
            coordinator=coordinator,
            entity_description=entity_description,
        )
        for entity_description in ENTITY_DESCRIPTIONS
    )


class SmartBreederSwitch(SmartBreederEntity, SwitchEntity):
    """Smart Breeder relay switch class."""

    def __init__(
        self,
        coordinator: SmartBreederDataUpdateCoordinator,
        entity_description: SwitchEntityDescription,
    ) -> None:
        """Initialize."""
        super().__init__(coordinator, entity_description.key)
        self.entity_description = entity_description

    @property
    def is_on(self) -> bool | None:
        """Return true if the relay is on."""
        reading = self.state_data.reading
        if reading is None:
            return None
        return reading.relay_state(self._key)

    async def _async_set(self, value: bool) -> None:
        result = await self.coordinator.hub.async_send_control({self._key: value})
        if not result.success:
            raise HomeAssistantError(result.message)

    async def async_turn_on(self, **kwargs) -> None:
        """Turn the relay on."""
        await self._async_set(True)

    async def async_turn_off(self, **kwargs) -> None:
        """Turn the relay off."""
        await self._async_set(False)
