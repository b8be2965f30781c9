"""Run the Smart Breeder relay as a standalone web service.

Configuration comes from the environment (or a .env file):
SMART_BREEDER_DEVICE_ADDRESS, SMART_BREEDER_RELAY_PORT, SMART_BREEDER_DEBUG.
"""

import logging

from aiohttp import web
from dotenv import load_dotenv

from custom_components.smart_breeder.const import LOGGER
from custom_components.smart_breeder.reachability import is_local_address
from custom_components.smart_breeder.relay import RelayConfig, create_relay_app


def main():
    load_dotenv()
    config = RelayConfig.from_env()

    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if is_local_address(config.device_address):
        LOGGER.warning(
            "Device address %s is a local network address; every request will "
            "be rejected with a configuration error",
            config.device_address,
        )

    LOGGER.info(
        "Relaying /api/proxy/* to %s on port %s", config.base_url, config.port
    )
    web.run_app(create_relay_app(config), port=config.port, print=None)


if __name__ == "__main__":
    main()
