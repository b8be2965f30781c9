"""Parser for Smart Breeder device data."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .models import RELAY_ATTRIBUTES, DeviceReading, SpeciesProfile

_LOGGER = logging.getLogger(__name__)

TRUE_STRINGS = {"true", "1", "on", "yes"}


def to_bool(value: Any) -> bool:
    """Coerce a loosely typed device flag to a bool.

    Older firmware reports flags as strings or numbers. ``"true"``, ``1``,
    ``"on"`` and ``"yes"`` are true; ``"false"``, ``0``, ``"off"``, ``"no"``,
    ``""`` and ``None`` are false. Unrecognized values are false.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return False


def to_float(value: Any) -> float | None:
    """Coerce a numeric device field, returning None when it is unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class SmartBreederParser:
    """Parser for Smart Breeder data."""

    @staticmethod
    def parse_reading(json_data: dict[str, Any]) -> DeviceReading:
        """Parse a status response into a DeviceReading.

        Missing relay fields default to False and missing measurements to None.
        """
        if not isinstance(json_data, dict):
            _LOGGER.warning("Unexpected status payload: %s", json_data)
            json_data = {}

        flags = {
            attribute: to_bool(json_data.get(key))
            for key, attribute in RELAY_ATTRIBUTES.items()
        }
        extra = {
            key: value
            for key, value in json_data.items()
            if key not in RELAY_ATTRIBUTES and key not in ("ph", "temperature")
        }
        return DeviceReading(
            ph=to_float(json_data.get("ph")),
            temperature=to_float(json_data.get("temperature")),
            raw_data=extra,
            **flags,
        )

    @staticmethod
    def _extract_range(
        entry: dict[str, Any], nested_key: str, flat_prefix: str
    ) -> tuple[float, float] | None:
        """Return (min, max) from ``{"idealPh": {...}}`` or ``idealPhMin`` keys."""
        nested = entry.get(nested_key)
        if isinstance(nested, dict):
            low, high = to_float(nested.get("min")), to_float(nested.get("max"))
        else:
            low = to_float(entry.get(f"{flat_prefix}Min"))
            high = to_float(entry.get(f"{flat_prefix}Max"))

        if low is None or high is None:
            return None
        if low > high:
            _LOGGER.warning(
                "Ignoring inverted %s range for %s: %s > %s",
                nested_key,
                entry.get("name"),
                low,
                high,
            )
            return None
        return low, high

    def parse_species_list(self, json_data: Any) -> list[dict[str, Any]]:
        """Normalize the device species list into flat dicts.

        Entries without a name are dropped. Ranges that are missing or inverted
        are reported as None.
        """
        if isinstance(json_data, dict):
            json_data = json_data.get("species", [])
        if not isinstance(json_data, list):
            _LOGGER.warning("Unexpected species list payload: %s", json_data)
            return []

        species = []
        for entry in json_data:
            if not isinstance(entry, dict) or not entry.get("name"):
                continue
            species.append(
                {
                    "id": str(entry["id"]) if entry.get("id") is not None else None,
                    "name": str(entry["name"]),
                    "ph": self._extract_range(entry, "idealPh", "idealPh"),
                    "temp": self._extract_range(entry, "idealTemp", "idealTemp"),
                    "waterFlow": to_bool(entry.get("waterFlow")),
                    "rain": to_bool(entry.get("rain")),
                    "description": entry.get("description", ""),
                }
            )
        return species

    def merge_species_catalog(
        self,
        defaults: Iterable[SpeciesProfile],
        device_species: Any,
    ) -> list[SpeciesProfile]:
        """Overlay the device species list on the built-in catalog.

        Device pH/temperature ranges win when present, matching by id or by
        name. The ``water_flow`` and ``rain`` flags always come from the
        built-in entry. Device species without a built-in match are appended;
        names stay unique, so a repeated name keeps its first entry.
        """
        remaining = self.parse_species_list(device_species)
        merged: list[SpeciesProfile] = []

        for profile in defaults:
            match = next(
                (
                    entry
                    for entry in remaining
                    if entry["id"] == profile.id
                    or entry["name"].lower() == profile.name.lower()
                ),
                None,
            )
            if match is None:
                merged.append(profile)
                continue

            remaining.remove(match)
            ph = match["ph"] or (profile.ideal_ph_min, profile.ideal_ph_max)
            temp = match["temp"] or (profile.ideal_temp_min, profile.ideal_temp_max)
            merged.append(profile.with_ranges(ph[0], ph[1], temp[0], temp[1]))

        known_ids = {profile.id for profile in merged}
        known_names = {profile.name.lower() for profile in merged}
        for entry in remaining:
            if entry["ph"] is None or entry["temp"] is None:
                _LOGGER.debug("Skipping device species without ranges: %s", entry)
                continue
            if entry["name"].lower() in known_names:
                _LOGGER.debug("Skipping duplicate device species: %s", entry)
                continue
            known_names.add(entry["name"].lower())
            species_id = entry["id"] or entry["name"]
            while species_id in known_ids:
                species_id = f"device_{species_id}"
            known_ids.add(species_id)
            merged.append(
                SpeciesProfile(
                    id=species_id,
                    name=entry["name"],
                    ideal_ph_min=entry["ph"][0],
                    ideal_ph_max=entry["ph"][1],
                    ideal_temp_min=entry["temp"][0],
                    ideal_temp_max=entry["temp"][1],
                    water_flow=entry["waterFlow"],
                    rain=entry["rain"],
                    description=entry["description"],
                )
            )

        return merged
