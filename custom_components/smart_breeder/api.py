"""Smart Breeder API Client."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Callable
from http import HTTPStatus
from typing import Any

import aiohttp
from yarl import URL

from .const import (
    CALIBRATION_ACTIONS,
    ENDPOINT_CALIBRATE,
    ENDPOINT_CONTROL,
    ENDPOINT_PING,
    ENDPOINT_SPECIES,
    ENDPOINT_SPECIES_LIST,
    ENDPOINT_STATUS,
    ENDPOINT_WIFI,
    LOGGER,
    PING_TIMEOUT,
    RELAY_KEYS,
    RELAY_PREFIX,
    REQUEST_TIMEOUT,
)
from .models import ApiResult
from .parser import SmartBreederParser

MODE_DIRECT = "direct"
MODE_RELAY = "relay"

# Four groups of 1-3 digits. Octets are not range checked.
IPV4_PATTERN = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$")


class SmartBreederApiClientError(Exception):
    """Exception to indicate a general API error."""


class SmartBreederApiClientCommunicationError(SmartBreederApiClientError):
    """Exception to indicate the device could not be reached."""


class SmartBreederApiClientTimeoutError(SmartBreederApiClientCommunicationError):
    """Exception to indicate the device did not answer in time."""


class SmartBreederApiClientResponseError(SmartBreederApiClientError):
    """Exception to indicate the device (or relay) answered with an error."""

    def __init__(self, status: int, payload: Any = None) -> None:
        """Initialize with the HTTP status and the decoded error body."""
        super().__init__(f"Request failed: {status}")
        self.status = status
        self.payload = payload

    @property
    def upstream_message(self) -> str | None:
        """Return the error text carried by the response body, if any."""
        if isinstance(self.payload, dict):
            message = self.payload.get("message") or self.payload.get("error")
            if message:
                return str(message)
        return None


class SmartBreederValidationError(SmartBreederApiClientError):
    """Exception to indicate invalid input (address, settings, commands)."""


def is_valid_ipv4(address: str) -> bool:
    """Return True for dotted-quad syntax."""
    return bool(IPV4_PATTERN.match(address or ""))


def describe_error(exception: Exception, address: str, default: str) -> str:
    """Turn a transport failure into a message for the user."""
    if isinstance(exception, SmartBreederApiClientTimeoutError):
        return f"Request timed out: the device at {address} did not respond."
    if isinstance(exception, SmartBreederApiClientCommunicationError):
        return (
            f"Cannot reach the device at {address}. "
            "Check that it is powered on and connected to the network."
        )
    if isinstance(exception, SmartBreederApiClientResponseError):
        return exception.upstream_message or default
    if isinstance(exception, SmartBreederValidationError):
        return str(exception)
    return default


class SmartBreederApiClient:
    """Smart Breeder API Client.

    Talks to the device either directly (``http://<address>/api``) or through
    the relay (``<origin>/api/proxy``). Public operations never raise: they
    return an ``ApiResult`` whose message is safe to show to the user.
    """

    def __init__(
        self,
        address: str,
        session: aiohttp.ClientSession,
        relay_url: str | None = None,
        on_address_change: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize Smart Breeder API Client."""
        self._address = address
        self._session = session
        self._relay_url = relay_url.rstrip("/") if relay_url else None
        self._on_address_change = on_address_change
        self._parser = SmartBreederParser()

    @classmethod
    def for_origin(
        cls,
        address: str,
        session: aiohttp.ClientSession,
        origin: str | None = None,
        on_address_change: Callable[[str], None] | None = None,
    ) -> SmartBreederApiClient:
        """Pick the transport from the hosting origin.

        A secure origin cannot reach a plain-HTTP device, so it goes through
        the relay mounted on that origin.
        """
        relay_url = None
        if origin and URL(origin).scheme == "https":
            relay_url = f"{origin.rstrip('/')}{RELAY_PREFIX}"
        return cls(address, session, relay_url, on_address_change)

    @property
    def mode(self) -> str:
        """Return the transport mode."""
        return MODE_RELAY if self._relay_url else MODE_DIRECT

    @property
    def address(self) -> str:
        """Return the configured device address."""
        return self._address

    @property
    def base_url(self) -> str:
        """Return the URL every endpoint is relative to."""
        if self._relay_url:
            return self._relay_url
        return f"http://{self._address}/api"

    def set_address(self, address: str) -> bool:
        """Point the client at another device address.

        Returns False when the client goes through the relay, whose target is
        fixed by the relay's own configuration.
        """
        address = (address or "").strip()
        if not is_valid_ipv4(address):
            raise SmartBreederValidationError(f"Invalid IP address: {address!r}")

        if self.mode == MODE_RELAY:
            LOGGER.warning(
                "Ignoring address change to %s: requests go through the relay",
                address,
            )
            return False

        LOGGER.debug("Device address changed from %s to %s", self._address, address)
        self._address = address
        if self._on_address_change:
            self._on_address_change(address)
        return True

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: dict | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> Any:
        """Perform an HTTP request and return the decoded body."""
        url = f"{self.base_url}/{endpoint}"
        try:
            LOGGER.debug("--- REQUEST: %s %s ---", method, url)
            async with self._session.request(
                method,
                url,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                if "application/json" in response.headers.get("Content-Type", ""):
                    body = await response.json(content_type=None)
                else:
                    body = await response.text()

                if response.status >= HTTPStatus.BAD_REQUEST:
                    LOGGER.error(
                        "API Request %s %s failed: %s - %s",
                        method,
                        url,
                        response.status,
                        body,
                    )
                    raise SmartBreederApiClientResponseError(response.status, body)
                return body

        except asyncio.TimeoutError as exception:
            raise SmartBreederApiClientTimeoutError(
                f"Timeout communicating with device: {url}"
            ) from exception
        except aiohttp.ClientConnectionError as exception:
            raise SmartBreederApiClientCommunicationError(
                f"Error communicating with device: {exception}"
            ) from exception
        except (aiohttp.ClientError, ValueError) as exception:
            raise SmartBreederApiClientError(
                f"Unexpected response from device: {exception}"
            ) from exception

    async def _call(
        self,
        method: str,
        endpoint: str,
        success_message: str,
        failure_message: str,
        payload: dict | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> ApiResult:
        try:
            data = await self._request(method, endpoint, payload, timeout)
        except SmartBreederApiClientError as exception:
            LOGGER.error("%s: %s", failure_message, exception)
            return ApiResult(
                success=False,
                message=describe_error(exception, self._address, failure_message),
            )
        return ApiResult(success=True, message=success_message, data=data)

    async def async_get_status(self) -> ApiResult:
        """Read sensor and relay state."""
        result = await self._call(
            "GET",
            ENDPOINT_STATUS,
            "Device status retrieved successfully",
            "Failed to connect to device",
        )
        if result.success:
            result.data = self._parser.parse_reading(result.data)
        return result

    async def async_send_control(self, relays: dict[str, bool]) -> ApiResult:
        """Switch relays. Only the supplied keys are changed on the device."""
        unknown = sorted(set(relays) - set(RELAY_KEYS))
        if unknown or not relays:
            return ApiResult(
                success=False,
                message=f"Invalid control command: {', '.join(unknown) or 'empty'}",
            )
        return await self._call(
            "POST",
            ENDPOINT_CONTROL,
            "Control command sent successfully",
            "Failed to send control command",
            payload={key: bool(value) for key, value in relays.items()},
        )

    async def async_send_species_config(self, species: dict[str, Any]) -> ApiResult:
        """Send a species descriptor, or ``{"type": 0}`` to clear it."""
        return await self._call(
            "POST",
            ENDPOINT_SPECIES,
            "Species configuration sent successfully",
            "Failed to send species configuration",
            payload=species,
        )

    async def async_get_species_list(self) -> ApiResult:
        """Fetch the species catalog known by the device."""
        return await self._call(
            "GET",
            ENDPOINT_SPECIES_LIST,
            "Species list retrieved successfully",
            "Failed to retrieve species list",
        )

    async def async_send_wifi_config(self, ssid: str, password: str) -> ApiResult:
        """Send Wi-Fi credentials to the device."""
        return await self._call(
            "POST",
            ENDPOINT_WIFI,
            "Wi-Fi configuration sent successfully",
            "Failed to send Wi-Fi configuration",
            payload={"ssid": ssid, "password": password},
        )

    async def async_calibrate(self, action: str) -> ApiResult:
        """Run a sensor calibration step (``ph7``, ``ph4`` or ``temp``)."""
        if action not in CALIBRATION_ACTIONS:
            return ApiResult(
                success=False, message=f"Invalid calibration action: {action}"
            )
        return await self._call(
            "POST",
            ENDPOINT_CALIBRATE,
            "Calibration completed successfully",
            "Failed to calibrate sensor",
            payload={"action": action},
        )

    async def async_ping(self) -> ApiResult:
        """Check that the device answers."""
        return await self._call(
            "GET",
            ENDPOINT_PING,
            "Connection successful",
            "Connection failed",
            timeout=PING_TIMEOUT,
        )
