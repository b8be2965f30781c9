"""Classify device addresses as local/private or publicly routable."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass

LOCAL_HOSTNAMES = {"localhost", "127.0.0.1"}

PRIVATE_NETWORKS = (
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("169.254.0.0/16"),
)

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


@dataclass(frozen=True)
class Reachability:
    """Result of classifying an address."""

    host: str
    local: bool


def extract_host(address: str | None) -> str:
    """Strip scheme, path and port from an address."""
    if not address:
        return ""
    host = _SCHEME_RE.sub("", address.strip())
    host = host.split("/", 1)[0]
    return host.split(":", 1)[0].lower()


def classify(address: str | None) -> Reachability:
    """Return whether an address can only be reached from the local network.

    Hostnames other than ``localhost`` are assumed public (e.g. a tunnel).
    No DNS lookup is made.
    """
    host = extract_host(address)
    if host in LOCAL_HOSTNAMES:
        return Reachability(host=host, local=True)

    try:
        ip = ipaddress.IPv4Address(host)
    except ValueError:
        return Reachability(host=host, local=False)

    return Reachability(
        host=host, local=any(ip in network for network in PRIVATE_NETWORKS)
    )


def is_local_address(address: str | None) -> bool:
    """Shortcut for ``classify(address).local``."""
    return classify(address).local
