"""Tests for the Smart Breeder client state."""

from unittest.mock import MagicMock

import pytest

from custom_components.smart_breeder.const import (
    HEALTH_ERROR,
    HEALTH_HEALTHY,
    HEALTH_WARNING,
)
from custom_components.smart_breeder.models import (
    DEFAULT_FISH_SPECIES,
    DeviceReading,
    SpeciesProfile,
    WifiSettings,
)
from custom_components.smart_breeder.store import SmartBreederState, system_health

GOLDFISH = DEFAULT_FISH_SPECIES[0]


def _reading(ph: float = 7.0, temperature: float = 28.0) -> DeviceReading:
    return DeviceReading(ph=ph, temperature=temperature)


@pytest.mark.parametrize(
    ("ph", "temperature", "species", "expected"),
    [
        (7.0, 28.0, GOLDFISH, HEALTH_HEALTHY),
        (6.5, 31.0, GOLDFISH, HEALTH_HEALTHY),
        (7.0, 20.0, GOLDFISH, HEALTH_WARNING),
        (9.0, 28.0, GOLDFISH, HEALTH_WARNING),
        (5.0, 20.0, GOLDFISH, HEALTH_ERROR),
        (7.0, 28.0, None, HEALTH_ERROR),
    ],
)
def test_system_health(ph, temperature, species, expected):
    """The reading is rated against the selected species ranges."""
    assert system_health(_reading(ph, temperature), species) == expected


def test_system_health_without_reading():
    """No reading means no health."""
    assert system_health(None, GOLDFISH) == HEALTH_ERROR
    assert system_health(DeviceReading(ph=7.0), GOLDFISH) == HEALTH_ERROR


class TestSmartBreederState:
    """Test the state container."""

    def test_chart_is_bounded(self):
        """Only the newest points are kept, oldest first."""
        state = SmartBreederState()
        for index in range(25):
            state.record_reading(_reading(ph=float(index)))

        assert len(state.chart) == 20
        assert state.chart[0].ph == 5.0
        assert state.chart[-1].ph == 24.0
        assert state.reading.ph == 24.0

    def test_record_reading(self):
        """A reading updates connection status and clears the error."""
        state = SmartBreederState(selected_species=GOLDFISH)
        state.set_error("old error")

        state.record_reading(_reading())

        assert state.error is None
        assert state.connection.connected is True
        assert state.connection.last_update
        assert state.connection.system_health == HEALTH_HEALTHY
        assert len(state.chart[0].time) == len("12:34:56")

    def test_failure_keeps_last_reading(self):
        """A failed poll marks the device disconnected but keeps the data."""
        state = SmartBreederState()
        state.record_reading(_reading(ph=7.3))

        state.record_failure("Failed to connect to device")

        assert state.reading.ph == 7.3
        assert len(state.chart) == 1
        assert state.connection.connected is False
        assert state.error == "Failed to connect to device"

    def test_loading_counter(self):
        """Loading stays on until every pending call has finished."""
        state = SmartBreederState()
        state.begin_loading()
        state.begin_loading()
        state.end_loading()
        assert state.is_loading
        state.end_loading()
        assert not state.is_loading
        state.end_loading()
        assert not state.is_loading

    def test_settings_merge_and_clamp(self):
        """Settings are merged; bad values are corrected or ignored."""
        state = SmartBreederState()

        state.set_settings({"update_interval_ms": 10000, "dark_mode": 1})
        assert state.settings.update_interval_ms == 10000
        assert state.settings.dark_mode is True

        state.set_settings({"update_interval_ms": 200, "colour": "blue"})
        assert state.settings.update_interval_ms == 1000
        assert not hasattr(state.settings, "colour")

        state.set_settings({"update_interval_ms": "soon"})
        assert state.settings.update_interval_ms == 1000

        state.set_settings({"wifi": {"ssid": "tank", "password": "secret"}})
        assert state.settings.wifi == WifiSettings(ssid="tank", password="secret")
        assert state.settings.dark_mode is True

    def test_persistence_round_trip(self):
        """Settings and selected species survive a restart."""
        persist = MagicMock()
        state = SmartBreederState(on_persist=persist)

        state.set_settings({"update_interval_ms": 10000})
        state.set_selected_species(GOLDFISH)
        assert persist.call_count == 2

        state.record_reading(_reading())
        state.push_notification("hello")
        assert persist.call_count == 2

        restored = SmartBreederState()
        restored.restore(state.as_persisted())
        assert restored.settings.update_interval_ms == 10000
        assert restored.selected_species == GOLDFISH

    def test_restore_unreadable(self):
        """Unreadable stored data falls back to defaults."""
        state = SmartBreederState()
        state.restore(
            {
                "settings": {"update_interval_ms": 3000},
                "selected_species": {"id": "9", "name": "Broken"},
            }
        )
        assert state.settings.update_interval_ms == 5000
        assert state.selected_species is None

        state.restore(None)
        assert state.settings.update_interval_ms == 5000

    def test_clear_selected_species(self):
        """Clearing the selection is persisted as None."""
        state = SmartBreederState(selected_species=GOLDFISH)
        state.set_selected_species(None)
        assert state.as_persisted()["selected_species"] is None
        assert state.connection.system_health == HEALTH_ERROR

    def test_species_catalog(self):
        """The catalog starts with the built-in species."""
        state = SmartBreederState()
        assert [species.name for species in state.species_catalog][:2] == [
            "Goldfish",
            "Betta Fish",
        ]
        assert state.get_species("4").name == "Neon Tetra"
        assert state.get_species("missing") is None

        discus = SpeciesProfile(
            id="8",
            name="Discus",
            ideal_ph_min=6.0,
            ideal_ph_max=7.0,
            ideal_temp_min=28.0,
            ideal_temp_max=30.0,
        )
        state.set_species_catalog([discus])
        assert state.get_species("8") == discus

    def test_notifications(self):
        """Only the last five notifications are visible."""
        state = SmartBreederState()
        for index in range(7):
            state.push_notification(f"n{index}")

        assert len(state.notifications) == 7
        assert state.visible_notifications == ["n2", "n3", "n4", "n5", "n6"]

        state.clear_notifications()
        assert state.visible_notifications == []

    def test_action_log(self):
        """The action log keeps the ten newest entries, newest first."""
        state = SmartBreederState()
        for index in range(12):
            state.log_action(f"action {index}", success=index % 2 == 0)

        assert len(state.action_log) == 10
        assert state.action_log[0].action == "action 11"
        assert state.action_log[0].success is False
        assert state.action_log[-1].action == "action 2"

    def test_listeners(self):
        """Listeners are called on change until they unsubscribe."""
        state = SmartBreederState()
        failing = MagicMock(side_effect=RuntimeError("boom"))
        listener = MagicMock()
        state.async_add_listener(failing)
        remove = state.async_add_listener(listener)

        state.push_notification("one")
        assert listener.call_count == 1

        remove()
        remove()
        state.push_notification("two")
        assert listener.call_count == 1
        assert failing.call_count == 2


def test_species_profile_rejects_inverted_ranges():
    """Profiles enforce min <= max."""
    with pytest.raises(ValueError):
        SpeciesProfile(
            id="x",
            name="Broken",
            ideal_ph_min=8.0,
            ideal_ph_max=6.0,
            ideal_temp_min=20.0,
            ideal_temp_max=25.0,
        )
