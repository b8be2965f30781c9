"""Sensor platform for Smart Breeder."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory, UnitOfTemperature
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import SmartBreederDataUpdateCoordinator
from .entity import SmartBreederEntity
from .store import SmartBreederState


@dataclass(frozen=True, kw_only=True)
class SmartBreederSensorEntityDescription(SensorEntityDescription):
    """Describe a Smart Breeder sensor."""

    value_fn: Callable[[SmartBreederState], Any]
    attributes_fn: Callable[[SmartBreederState], dict[str, Any]] | None = None


def _history(key: str) -> Callable[[SmartBreederState], dict[str, Any]]:
    """Expose the chart history of one measurement."""

    def attributes(state: SmartBreederState) -> dict[str, Any]:
        return {
            "history": [
                {"time": point.time, key: getattr(point, key)}
                for point in state.chart
            ],
            "last_update": state.connection.last_update,
        }

    return attributes


def _activity(state: SmartBreederState) -> dict[str, Any]:
    return {
        "notifications": state.visible_notifications,
        "action_log": [
            {
                "action": entry.action,
                "timestamp": entry.timestamp,
                "success": entry.success,
            }
            for entry in state.action_log
        ],
    }


ENTITY_DESCRIPTIONS = (
    SmartBreederSensorEntityDescription(
        key="ph",
        name="pH",
        device_class=SensorDeviceClass.PH,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda state: state.reading.ph if state.reading else None,
        attributes_fn=_history("ph"),
    ),
    SmartBreederSensorEntityDescription(
        key="temperature",
        name="Water temperature",
        device_class=SensorDeviceClass.TEMPERATURE,
        native_unit_of_measurement=UnitOfTemperature.CELSIUS,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda state: state.reading.temperature if state.reading else None,
        attributes_fn=_history("temperature"),
    ),
    SmartBreederSensorEntityDescription(
        key="system_health",
        name="System health",
        icon="mdi:fishbowl",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda state: state.connection.system_health,
    ),
    SmartBreederSensorEntityDescription(
        key="last_error",
        name="Last error",
        icon="mdi:alert-circle-outline",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda state: state.error,
        attributes_fn=_activity,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the sensor platform."""
    coordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        SmartBreederSensor(
            coordinator=coordinator,
            entity_description=entity_description,
        )
        for entity_description in ENTITY_DESCRIPTIONS
    )


class SmartBreederSensor(SmartBreederEntity, SensorEntity):
    """Smart Breeder Sensor class."""

    entity_description: SmartBreederSensorEntityDescription

    def __init__(
        self,
        coordinator: SmartBreederDataUpdateCoordinator,
        entity_description: SmartBreederSensorEntityDescription,
    ) -> None:
        """Initialize."""
        super().__init__(coordinator, entity_description.key)
        self.entity_description = entity_description

    @property
    def native_value(self) -> Any:
        """Return the native value of the sensor."""
        return self.entity_description.value_fn(self.state_data)

    @property
    def extra_state_attributes(self) -> dict[str, Any] | None:
        """Return the extra attributes of the sensor."""
        if self.entity_description.attributes_fn is None:
            return None
        return self.entity_description.attributes_fn(self.state_data)
