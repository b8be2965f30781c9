"""Binary sensor platform for Smart Breeder."""

from __future__ import annotations

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import SmartBreederDataUpdateCoordinator
from .entity import SmartBreederEntity
from .parser import to_bool

SAFETY_FLAGS = (
    ("phSafe", "pH out of range"),
    ("tempSafe", "Temperature out of range"),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the binary_sensor platform."""
    coordinator: SmartBreederDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id]
    entities: list[BinarySensorEntity] = [SmartBreederConnectivitySensor(coordinator)]

    # Safety flags only exist on newer firmware
    reading = coordinator.hub.state.reading
    if reading is not None:
        for key, name in SAFETY_FLAGS:
            if key in reading.raw_data:
                entities.append(SmartBreederSafetySensor(coordinator, key, name))

    async_add_entities(entities)


class SmartBreederConnectivitySensor(SmartBreederEntity, BinarySensorEntity):
    """Whether the last poll reached the device."""

    _attr_device_class = BinarySensorDeviceClass.CONNECTIVITY
    _attr_entity_category = EntityCategory.DIAGNOSTIC
    _attr_name = "Connection"

    def __init__(self, coordinator: SmartBreederDataUpdateCoordinator) -> None:
        """Initialize."""
        super().__init__(coordinator, "connection")

    @property
    def available(self) -> bool:
        """Always available: a lost connection is a state, not an outage."""
        return True

    @property
    def is_on(self) -> bool:
        """Return true if the device answered the last poll."""
        return self.state_data.connection.connected

    @property
    def extra_state_attributes(self) -> dict[str, str | None]:
        """Return the last update time and error."""
        return {
            "last_update": self.state_data.connection.last_update,
            "error": self.state_data.error,
        }


class SmartBreederSafetySensor(SmartBreederEntity, BinarySensorEntity):
    """Problem sensor built from the device's own safety flags."""

    _attr_device_class = BinarySensorDeviceClass.PROBLEM

    def __init__(
        self,
        coordinator: SmartBreederDataUpdateCoordinator,
        key: str,
        name: str,
    ) -> None:
        """Initialize."""
        super().__init__(coordinator, key)
        self._attr_name = name

    @property
    def is_on(self) -> bool | None:
        """Return true when the device reports the value as unsafe."""
        reading = self.state_data.reading
        if reading is None or self._key not in reading.raw_data:
            return None
        return not to_bool(reading.raw_data[self._key])
