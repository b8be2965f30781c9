"""Select platform for Smart Breeder."""

from __future__ import annotations

from homeassistant.components.select import SelectEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, LOGGER
from .coordinator import SmartBreederDataUpdateCoordinator
from .entity import SmartBreederEntity

OPTION_NONE = "None"


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the select platform."""
    coordinator: SmartBreederDataUpdateCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([SmartBreederSpeciesSelect(coordinator)])


class SmartBreederSpeciesSelect(SmartBreederEntity, SelectEntity):
    """Smart Breeder fish species select class."""

    _attr_icon = "mdi:fish"
    _attr_name = "Fish species"

    def __init__(self, coordinator: SmartBreederDataUpdateCoordinator) -> None:
        """Initialize."""
        super().__init__(coordinator, "species")

    @property
    def options(self) -> list[str]:
        """Return the catalog names, plus an option to disable automation."""
        return [OPTION_NONE] + [
            species.name for species in self.state_data.species_catalog
        ]

    @property
    def current_option(self) -> str | None:
        """Return the selected species name."""
        selected = self.state_data.selected_species
        return selected.name if selected else OPTION_NONE

    @property
    def extra_state_attributes(self) -> dict[str, float | bool | str] | None:
        """Return the ranges of the selected species."""
        selected = self.state_data.selected_species
        if selected is None:
            return None
        return {
            "ideal_ph_min": selected.ideal_ph_min,
            "ideal_ph_max": selected.ideal_ph_max,
            "ideal_temp_min": selected.ideal_temp_min,
            "ideal_temp_max": selected.ideal_temp_max,
            "water_flow": selected.water_flow,
            "rain": selected.rain,
            "description": selected.description,
        }

    async def async_select_option(self, option: str) -> None:
        """Change the selected species."""
        if option == OPTION_NONE:
            species = None
        else:
            species = next(
                (s for s in self.state_data.species_catalog if s.name == option),
                None,
            )
            if species is None:
                LOGGER.error("Invalid species selected: %s", option)
                return

        result = await self.coordinator.hub.async_select_species(species)
        if not result.success:
            raise HomeAssistantError(result.message)
