"""Constants for the Smart Breeder integration."""

from logging import Logger, getLogger

LOGGER: Logger = getLogger(__package__)

DOMAIN = "smart_breeder"
NAME = "Smart Breeder"
VERSION = "1.0.0"

CONF_HOST = "host"
CONF_RELAY_URL = "relay_url"
CONF_UPDATE_INTERVAL = "update_interval_ms"
CONF_WIFI_SSID = "wifi_ssid"
CONF_WIFI_PASSWORD = "wifi_password"

DEFAULT_HOST = "192.168.0.111"

# Device API endpoints, relative to <base>/api/
ENDPOINT_STATUS = "status"
ENDPOINT_CONTROL = "control"
ENDPOINT_SPECIES = "species"
ENDPOINT_SPECIES_LIST = "species/list"
ENDPOINT_CALIBRATE = "calibrate"
ENDPOINT_WIFI = "wifi"
ENDPOINT_PING = "ping"

RELAY_PREFIX = "/api/proxy"

# Seconds
REQUEST_TIMEOUT = 5
PING_TIMEOUT = 3
RELAY_TIMEOUT = 15
CONTROL_REFRESH_DELAY = 0.3

DEFAULT_UPDATE_INTERVAL_MS = 5000
MIN_UPDATE_INTERVAL_MS = 1000
CHART_DATA_LIMIT = 20
ACTION_LOG_LIMIT = 10
VISIBLE_NOTIFICATIONS = 5

RELAY_KEYS = (
    "fan",
    "acidPump",
    "basePump",
    "waterHeater",
    "airPump",
    "waterFlow",
    "rainPump",
    "lightControl",
)

CALIBRATION_ACTIONS = ("ph7", "ph4", "temp")

# Sent to the species endpoint to disable species automation
SPECIES_NONE_PAYLOAD = {"type": 0}

HEALTH_HEALTHY = "healthy"
HEALTH_WARNING = "warning"
HEALTH_ERROR = "error"

STORAGE_VERSION = 1

ENV_DEVICE_ADDRESS = "SMART_BREEDER_DEVICE_ADDRESS"
ENV_RELAY_PORT = "SMART_BREEDER_RELAY_PORT"
ENV_DEBUG = "SMART_BREEDER_DEBUG"
DEFAULT_RELAY_PORT = 8080

ATTRIBUTION = "Data provided by the Smart Breeder controller"
