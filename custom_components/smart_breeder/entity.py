"""SmartBreederEntity class."""

from __future__ import annotations

from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import ATTRIBUTION, DOMAIN, NAME, VERSION
from .coordinator import SmartBreederDataUpdateCoordinator
from .store import SmartBreederState


class SmartBreederEntity(CoordinatorEntity[SmartBreederDataUpdateCoordinator]):
    """SmartBreederEntity class."""

    _attr_attribution = ATTRIBUTION
    _attr_has_entity_name = True

    def __init__(
        self, coordinator: SmartBreederDataUpdateCoordinator, key: str
    ) -> None:
        """Initialize."""
        super().__init__(coordinator)
        entry_id = coordinator.config_entry.entry_id
        self._key = key
        self._attr_unique_id = f"{entry_id}_{key}"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=NAME,
            model="Aquarium controller",
            manufacturer=NAME,
            sw_version=VERSION,
        )

    @property
    def state_data(self) -> SmartBreederState:
        """Return the client state."""
        return self.coordinator.hub.state
