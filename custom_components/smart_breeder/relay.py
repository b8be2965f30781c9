"""Relay that forwards HTTPS callers to a plain-HTTP Smart Breeder device.

Browsers served from a secure origin cannot call the device directly (mixed
content). The relay accepts any method under ``/api/proxy/<path>`` and forwards
it to ``<device>/api/<path>``. Every failure is turned into a structured JSON
payload; no upstream exception escapes a request.
"""

from __future__ import annotations

import asyncio
import json
import os
import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

import aiohttp
from aiohttp import web

from .const import (
    DEFAULT_HOST,
    DEFAULT_RELAY_PORT,
    ENV_DEBUG,
    ENV_DEVICE_ADDRESS,
    ENV_RELAY_PORT,
    LOGGER,
    RELAY_PREFIX,
    RELAY_TIMEOUT,
)
from .reachability import classify

ERROR_CONFIGURATION = "Configuration Error"
ERROR_GATEWAY_TIMEOUT = "Gateway Timeout"
ERROR_SERVICE_UNAVAILABLE = "Service Unavailable"
ERROR_INTERNAL = "Internal Server Error"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS, PATCH",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

BODYLESS_METHODS = ("GET", "HEAD")


@dataclass(frozen=True)
class RelayConfig:
    """Process-wide relay configuration, read-only at request time."""

    device_address: str = DEFAULT_HOST
    timeout: float = RELAY_TIMEOUT
    port: int = DEFAULT_RELAY_PORT
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RelayConfig:
        """Build the configuration from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            device_address=env.get(ENV_DEVICE_ADDRESS) or DEFAULT_HOST,
            port=int(env.get(ENV_RELAY_PORT) or DEFAULT_RELAY_PORT),
            debug=env.get(ENV_DEBUG, "").lower() in ("1", "true", "yes", "on"),
        )

    @property
    def base_url(self) -> str:
        """Device base URL, defaulting to plain HTTP."""
        address = self.device_address.strip().rstrip("/")
        if address.startswith(("http://", "https://")):
            return address
        return f"http://{address}"


@dataclass
class RelayResponse:
    """Response produced by the relay for its caller."""

    status: int
    body: Any = None
    content_type: str = "application/json"


def _error(
    status: HTTPStatus,
    error: str,
    message: str,
    **extra: Any,
) -> RelayResponse:
    body = {"success": False, "error": error, "message": message}
    body.update({key: value for key, value in extra.items() if value is not None})
    return RelayResponse(status=int(status), body=body)


class SmartBreederRelay:
    """Forward requests to the configured device."""

    def __init__(
        self,
        config: RelayConfig,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize the relay."""
        self._config = config
        self._session = session
        self._owns_session = session is None

    @property
    def config(self) -> RelayConfig:
        """Return the relay configuration."""
        return self._config

    def build_target(self, sub_path: str) -> str:
        """Return the device URL for a relay sub-path."""
        return f"{self._config.base_url}/api/{sub_path.lstrip('/')}"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def async_close(self) -> None:
        """Close the outbound session if the relay created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    @staticmethod
    def _encode_body(body: Any) -> str | bytes | None:
        if body is None or body == "" or body == b"":
            return None
        if isinstance(body, (str, bytes)):
            return body
        return json.dumps(body)

    def _configuration_error(self) -> RelayResponse:
        address = self._config.device_address
        return _error(
            HTTPStatus.SERVICE_UNAVAILABLE,
            ERROR_CONFIGURATION,
            (
                f"Device address ({address}) is a local network address and "
                "cannot be reached from the relay host."
            ),
            solutions=[
                f"Expose the device through a tunnel (e.g. ngrok http {address}:80)",
                "Set up port forwarding on your router",
                f"Set {ENV_DEVICE_ADDRESS} to the public address or hostname",
            ],
            help=(
                "Run the relay inside the device's network or point it at a "
                "publicly reachable address."
            ),
        )

    def _timeout_error(self) -> RelayResponse:
        address = self._config.device_address
        return _error(
            HTTPStatus.GATEWAY_TIMEOUT,
            ERROR_GATEWAY_TIMEOUT,
            (
                f"Device at {address} did not respond within "
                f"{self._config.timeout:g} seconds."
            ),
            possibleCauses=[
                "Device is offline or not accessible from the internet",
                f"{ENV_DEVICE_ADDRESS} is incorrect",
                "Network firewall is blocking the connection",
                "Device is on a local network only",
            ],
            solutions=[
                "Verify the device is online and accessible",
                f"Check the {ENV_DEVICE_ADDRESS} environment variable",
                f"Use a tunnel: ngrok http {address}:80",
                "Set up port forwarding on your router",
            ],
        )

    def _unavailable_error(self) -> RelayResponse:
        address = self._config.device_address
        return _error(
            HTTPStatus.SERVICE_UNAVAILABLE,
            ERROR_SERVICE_UNAVAILABLE,
            f"Cannot connect to device at {address}.",
            possibleCauses=[
                "Device is not accessible from the internet",
                f"{ENV_DEVICE_ADDRESS} is incorrect or not set",
                "Device is on a local network (192.168.x.x)",
                "DNS resolution failed",
            ],
            solutions=[
                f"Set the {ENV_DEVICE_ADDRESS} environment variable",
                "Use a tunnel to expose the device publicly",
                "Configure port forwarding on your router",
                "Verify the device is online and reachable",
            ],
        )

    async def forward(
        self,
        method: str,
        sub_path: str,
        body: Any = None,
    ) -> RelayResponse:
        """Forward one request to the device and map the outcome."""
        method = method.upper()
        address = self._config.device_address

        if classify(address).local:
            LOGGER.error(
                "Device address %s is a local network address; "
                "it cannot be reached from the relay host",
                address,
            )
            return self._configuration_error()

        target = self.build_target(sub_path)
        LOGGER.info(
            "[relay] %s /%s -> %s (device address: %s)",
            method,
            sub_path,
            target,
            address,
        )

        data = None if method in BODYLESS_METHODS else self._encode_body(body)

        try:
            async with self._get_session().request(
                method,
                target,
                data=data,
                headers={"Content-Type": "application/json"},
                timeout=aiohttp.ClientTimeout(total=self._config.timeout),
            ) as response:
                if "application/json" in response.headers.get("Content-Type", ""):
                    payload = await response.json(content_type=None)
                    return RelayResponse(status=response.status, body=payload)
                return RelayResponse(
                    status=response.status,
                    body=await response.text(),
                    content_type=response.content_type or "text/plain",
                )

        except asyncio.TimeoutError:
            LOGGER.error(
                "[relay] %s %s timed out after %ss",
                method,
                target,
                self._config.timeout,
            )
            return self._timeout_error()

        except aiohttp.ClientConnectorError as exception:
            LOGGER.error("[relay] Cannot connect to %s: %s", target, exception)
            return self._unavailable_error()

        except Exception as exception:  # noqa: BLE001
            LOGGER.exception("[relay] %s %s failed", method, target)
            return _error(
                HTTPStatus.INTERNAL_SERVER_ERROR,
                ERROR_INTERNAL,
                str(exception) or "Failed to relay request to the device",
                details=traceback.format_exc() if self._config.debug else None,
            )


RELAY_KEY = web.AppKey("relay", SmartBreederRelay)


async def handle_relay_request(request: web.Request) -> web.StreamResponse:
    """Relay any method under the relay prefix to the device."""
    if request.method == "OPTIONS":
        return web.Response(status=HTTPStatus.OK, headers=CORS_HEADERS)

    relay = request.app[RELAY_KEY]
    body = await request.text() if request.can_read_body else None
    result = await relay.forward(request.method, request.match_info["path"], body)

    if isinstance(result.body, str) and result.content_type != "application/json":
        response = web.Response(
            status=result.status, text=result.body, content_type=result.content_type
        )
    else:
        response = web.json_response(result.body, status=result.status)
    response.headers.update(CORS_HEADERS)
    return response


def create_relay_app(
    config: RelayConfig,
    session: aiohttp.ClientSession | None = None,
) -> web.Application:
    """Build the relay web application."""
    relay = SmartBreederRelay(config, session)

    async def _close_relay(app: web.Application) -> None:
        await app[RELAY_KEY].async_close()

    app = web.Application()
    app[RELAY_KEY] = relay
    app.on_cleanup.append(_close_relay)
    app.router.add_route("*", f"{RELAY_PREFIX}/{{path:.*}}", handle_relay_request)
    return app
