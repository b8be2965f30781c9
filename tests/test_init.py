"""Tests for setting up the Smart Breeder integration."""

from unittest.mock import AsyncMock, patch

import pytest
from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.smart_breeder.const import CONF_HOST, DOMAIN
from custom_components.smart_breeder.models import ApiResult, DeviceReading
from custom_components.smart_breeder.poller import PollerStatus

CLIENT = "custom_components.smart_breeder.api.SmartBreederApiClient"


@pytest.fixture
def mock_device():
    """Patch the device client with a healthy device."""
    status = ApiResult(
        success=True,
        message="Device status retrieved successfully",
        data=DeviceReading(
            ph=7.2, temperature=28.5, fan=True, raw_data={"phSafe": False}
        ),
    )
    mocks = {
        "async_get_status": AsyncMock(return_value=status),
        "async_get_species_list": AsyncMock(
            return_value=ApiResult(success=False, message="Not supported")
        ),
        "async_send_control": AsyncMock(
            return_value=ApiResult(success=True, message="ok")
        ),
        "async_send_species_config": AsyncMock(
            return_value=ApiResult(success=True, message="ok")
        ),
    }
    with patch.multiple(CLIENT, **mocks):
        yield mocks


@pytest.fixture
def config_entry(hass: HomeAssistant) -> MockConfigEntry:
    """Add a config entry for the default device address."""
    entry = MockConfigEntry(
        domain=DOMAIN,
        title="192.168.0.111",
        data={CONF_HOST: "192.168.0.111"},
        unique_id="192.168.0.111",
    )
    entry.add_to_hass(hass)
    return entry


@pytest.mark.asyncio
async def test_setup_and_unload(hass: HomeAssistant, config_entry, mock_device):
    """Entities reflect the first status read; unload stops polling."""
    assert await hass.config_entries.async_setup(config_entry.entry_id)
    await hass.async_block_till_done()

    assert config_entry.state is ConfigEntryState.LOADED
    assert hass.states.get("sensor.smart_breeder_ph").state == "7.2"
    assert hass.states.get("sensor.smart_breeder_water_temperature").state == "28.5"
    assert hass.states.get("switch.smart_breeder_fan").state == "on"
    assert hass.states.get("switch.smart_breeder_acid_pump").state == "off"
    assert hass.states.get("binary_sensor.smart_breeder_connection").state == "on"
    assert hass.states.get("binary_sensor.smart_breeder_ph_out_of_range").state == (
        "on"
    )
    assert hass.states.get("select.smart_breeder_fish_species").state == "None"

    coordinator = hass.data[DOMAIN][config_entry.entry_id]
    assert coordinator.hub.poller.status is not PollerStatus.IDLE

    assert await hass.config_entries.async_unload(config_entry.entry_id)
    await hass.async_block_till_done()

    assert config_entry.state is ConfigEntryState.NOT_LOADED
    assert coordinator.hub.poller.status is PollerStatus.IDLE


@pytest.mark.asyncio
async def test_setup_device_unreachable(hass: HomeAssistant, config_entry):
    """An unreachable device makes Home Assistant retry the setup."""
    with patch(
        f"{CLIENT}.async_get_status",
        AsyncMock(
            return_value=ApiResult(success=False, message="Failed to connect")
        ),
    ):
        await hass.config_entries.async_setup(config_entry.entry_id)
        await hass.async_block_till_done()

    assert config_entry.state is ConfigEntryState.SETUP_RETRY

    await hass.config_entries.async_unload(config_entry.entry_id)
    await hass.async_block_till_done()


@pytest.mark.asyncio
async def test_switch_turn_on(hass: HomeAssistant, config_entry, mock_device):
    """Turning a switch on sends a single-relay control command."""
    assert await hass.config_entries.async_setup(config_entry.entry_id)
    await hass.async_block_till_done()

    coordinator = hass.data[DOMAIN][config_entry.entry_id]
    coordinator.hub.refresh_delay = 0

    await hass.services.async_call(
        "switch",
        "turn_on",
        {"entity_id": "switch.smart_breeder_acid_pump"},
        blocking=True,
    )
    mock_device["async_send_control"].assert_awaited_once_with({"acidPump": True})

    await hass.services.async_call(
        "select",
        "select_option",
        {"entity_id": "select.smart_breeder_fish_species", "option": "Guppy"},
        blocking=True,
    )
    payload = mock_device["async_send_species_config"].await_args.args[0]
    assert payload["name"] == "Guppy"
    assert hass.states.get("select.smart_breeder_fish_species").state == "Guppy"

    attributes = hass.states.get("sensor.smart_breeder_last_error").attributes
    assert attributes["notifications"][0].startswith("Control command executed")
    assert attributes["notifications"][-1] == "Species configuration updated: Guppy"
    assert [entry["action"] for entry in attributes["action_log"]][0] == (
        "Species set to Guppy"
    )
    assert all(entry["success"] for entry in attributes["action_log"])

    assert await hass.config_entries.async_unload(config_entry.entry_id)
    await hass.async_block_till_done()
