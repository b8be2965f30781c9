import os

import pytest
from pytest_socket import enable_socket, socket_allow_hosts


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    yield


@pytest.fixture(autouse=True)
def allow_socket_fixture(request):
    """Enable socket for integration tests."""
    if request.node.get_closest_marker("integration"):
        hosts = ["127.0.0.1", "localhost", "::1"]
        if os.getenv("device_address"):
            hosts.append(os.environ["device_address"])
        enable_socket()
        socket_allow_hosts(hosts, allow_unix_socket=True)


pytest_plugins = "pytest_homeassistant_custom_component"
