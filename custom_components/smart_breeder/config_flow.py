"""Config flow for Smart Breeder integration."""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import SmartBreederApiClient, is_valid_ipv4
from .const import (
    CONF_HOST,
    CONF_RELAY_URL,
    CONF_UPDATE_INTERVAL,
    CONF_WIFI_PASSWORD,
    CONF_WIFI_SSID,
    DEFAULT_HOST,
    DEFAULT_UPDATE_INTERVAL_MS,
    DOMAIN,
    LOGGER,
    MIN_UPDATE_INTERVAL_MS,
)


class SmartBreederFlowHandler(config_entries.ConfigFlow, domain=DOMAIN):
    """Config flow for Smart Breeder."""

    VERSION = 1

    async def async_step_user(
        self,
        user_input: dict | None = None,
    ) -> config_entries.FlowResult:
        """Handle a flow initialized by the user."""
        errors = {}

        if user_input is not None:
            host = user_input[CONF_HOST].strip()
            relay_url = (user_input.get(CONF_RELAY_URL) or "").strip() or None

            if not is_valid_ipv4(host):
                errors["base"] = "invalid_host"
            else:
                await self.async_set_unique_id(host)
                self._abort_if_unique_id_configured()

                if await self._test_connection(host, relay_url):
                    data = {CONF_HOST: host}
                    if relay_url:
                        data[CONF_RELAY_URL] = relay_url
                    return self.async_create_entry(title=host, data=data)
                errors["base"] = "cannot_connect"

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_HOST, default=DEFAULT_HOST): str,
                    vol.Optional(CONF_RELAY_URL): str,
                }
            ),
            errors=errors,
        )

    async def _test_connection(self, host: str, relay_url: str | None) -> bool:
        """Ping the device, through the relay when one is configured."""
        client = SmartBreederApiClient.for_origin(
            address=host,
            session=async_get_clientsession(self.hass),
            origin=relay_url,
        )
        result = await client.async_ping()
        if not result.success:
            LOGGER.warning("Connection test to %s failed: %s", host, result.message)
        return result.success

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> config_entries.OptionsFlow:
        """Return the options flow."""
        return OptionsFlowHandler()


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Edit the device address, the polling interval and the Wi-Fi credentials.

    Wi-Fi credentials are pushed to the device from the flow and are not kept in
    the entry options.
    """

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        """Manage the options."""
        errors = {}
        hub = self.hass.data[DOMAIN][self.config_entry.entry_id].hub

        if user_input is not None:
            host = user_input[CONF_HOST].strip()
            ssid = (user_input.get(CONF_WIFI_SSID) or "").strip()

            if not is_valid_ipv4(host):
                errors["base"] = "invalid_host"
            elif ssid:
                result = await hub.async_send_wifi_config(
                    ssid, user_input.get(CONF_WIFI_PASSWORD, "")
                )
                if not result.success:
                    errors["base"] = "wifi_failed"

            if not errors:
                return self.async_create_entry(
                    title="",
                    data={
                        CONF_HOST: host,
                        CONF_UPDATE_INTERVAL: user_input[CONF_UPDATE_INTERVAL],
                    },
                )

        defaults = {
            CONF_UPDATE_INTERVAL: hub.state.settings.update_interval_ms,
            **self.config_entry.data,
            **self.config_entry.options,
        }
        schema = vol.Schema(
            {
                vol.Required(CONF_HOST, default=defaults[CONF_HOST]): str,
                vol.Required(
                    CONF_UPDATE_INTERVAL,
                    default=defaults.get(
                        CONF_UPDATE_INTERVAL, DEFAULT_UPDATE_INTERVAL_MS
                    ),
                ): vol.All(vol.Coerce(int), vol.Range(min=MIN_UPDATE_INTERVAL_MS)),
                vol.Optional(CONF_WIFI_SSID): str,
                vol.Optional(CONF_WIFI_PASSWORD): str,
            }
        )
        return self.async_show_form(step_id="init", data_schema=schema, errors=errors)
