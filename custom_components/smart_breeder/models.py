"""Data models for Smart Breeder."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from .const import DEFAULT_UPDATE_INTERVAL_MS, HEALTH_ERROR


@dataclass
class DeviceReading:
    """One snapshot of sensor and relay state reported by the device."""

    ph: float | None = None
    temperature: float | None = None
    fan: bool = False
    acid_pump: bool = False
    base_pump: bool = False
    water_heater: bool = False
    air_pump: bool = False
    water_flow: bool = False
    rain_pump: bool = False
    light_control: bool = False

    # Anything else the firmware reports (phRange, cooldownRemaining, ...)
    raw_data: dict[str, Any] = field(default_factory=dict)

    def relay_state(self, key: str) -> bool:
        """Return a relay flag by its device key (e.g. ``acidPump``)."""
        return getattr(self, RELAY_ATTRIBUTES[key])


# Device key -> DeviceReading attribute
RELAY_ATTRIBUTES = {
    "fan": "fan",
    "acidPump": "acid_pump",
    "basePump": "base_pump",
    "waterHeater": "water_heater",
    "airPump": "air_pump",
    "waterFlow": "water_flow",
    "rainPump": "rain_pump",
    "lightControl": "light_control",
}


@dataclass(frozen=True)
class ChartPoint:
    """A point of the pH/temperature history."""

    time: str
    ph: float | None
    temperature: float | None


@dataclass
class ConnectionStatus:
    """Connection state towards the device."""

    connected: bool = False
    last_update: str = ""
    system_health: str = HEALTH_ERROR


@dataclass
class WifiSettings:
    """Wi-Fi credentials last sent to the device."""

    ssid: str = ""
    password: str = ""


@dataclass
class Settings:
    """User-editable settings, persisted across restarts."""

    update_interval_ms: int = DEFAULT_UPDATE_INTERVAL_MS
    dark_mode: bool = False
    wifi: WifiSettings = field(default_factory=WifiSettings)

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "update_interval_ms": self.update_interval_ms,
            "dark_mode": self.dark_mode,
            "wifi": {"ssid": self.wifi.ssid, "password": self.wifi.password},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Settings:
        """Build settings from stored data, falling back to defaults."""
        if not data:
            return cls()
        wifi = data.get("wifi") or {}
        return cls(
            update_interval_ms=int(
                data.get("update_interval_ms", DEFAULT_UPDATE_INTERVAL_MS)
            ),
            dark_mode=bool(data.get("dark_mode", False)),
            wifi=WifiSettings(
                ssid=wifi.get("ssid", ""), password=wifi.get("password", "")
            ),
        )


@dataclass(frozen=True)
class SpeciesProfile:
    """Ideal ranges and actuator flags for one fish species."""

    id: str
    name: str
    ideal_ph_min: float
    ideal_ph_max: float
    ideal_temp_min: float
    ideal_temp_max: float
    water_flow: bool = False
    rain: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        """Check the range invariants."""
        if self.ideal_ph_min > self.ideal_ph_max:
            raise ValueError(
                f"{self.name}: pH min {self.ideal_ph_min} > max {self.ideal_ph_max}"
            )
        if self.ideal_temp_min > self.ideal_temp_max:
            raise ValueError(
                f"{self.name}: temperature min {self.ideal_temp_min} "
                f"> max {self.ideal_temp_max}"
            )

    def with_ranges(
        self,
        ph_min: float,
        ph_max: float,
        temp_min: float,
        temp_max: float,
    ) -> SpeciesProfile:
        """Return a copy using other ranges but the same flags."""
        return replace(
            self,
            ideal_ph_min=ph_min,
            ideal_ph_max=ph_max,
            ideal_temp_min=temp_min,
            ideal_temp_max=temp_max,
        )

    def as_device_payload(self) -> dict[str, Any]:
        """Return the descriptor expected by the species endpoint."""
        return {
            "name": self.name,
            "idealPh": {"min": self.ideal_ph_min, "max": self.ideal_ph_max},
            "idealTemp": {"min": self.ideal_temp_min, "max": self.ideal_temp_max},
            "waterFlow": self.water_flow,
            "rain": self.rain,
        }

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "idealPhMin": self.ideal_ph_min,
            "idealPhMax": self.ideal_ph_max,
            "idealTempMin": self.ideal_temp_min,
            "idealTempMax": self.ideal_temp_max,
            "waterFlow": self.water_flow,
            "rain": self.rain,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SpeciesProfile:
        """Build a profile from its stored representation."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            ideal_ph_min=float(data["idealPhMin"]),
            ideal_ph_max=float(data["idealPhMax"]),
            ideal_temp_min=float(data["idealTempMin"]),
            ideal_temp_max=float(data["idealTempMax"]),
            water_flow=bool(data.get("waterFlow", False)),
            rain=bool(data.get("rain", False)),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class ActionLogEntry:
    """A user action as shown in the action history."""

    action: str
    timestamp: str
    success: bool


@dataclass
class ApiResult:
    """Outcome of a Device Client operation."""

    success: bool
    message: str
    data: Any = None


DEFAULT_FISH_SPECIES: tuple[SpeciesProfile, ...] = (
    SpeciesProfile(
        id="1",
        name="Goldfish",
        ideal_ph_min=6.5,
        ideal_ph_max=8.0,
        ideal_temp_min=27.0,
        ideal_temp_max=31.0,
        water_flow=True,
        rain=False,
        description="Common goldfish, hardy and adaptable species",
    ),
    SpeciesProfile(
        id="2",
        name="Betta Fish",
        ideal_ph_min=6.5,
        ideal_ph_max=7.5,
        ideal_temp_min=26.5,
        ideal_temp_max=30.5,
        water_flow=False,
        rain=False,
        description="Siamese fighting fish, tropical species",
    ),
    SpeciesProfile(
        id="3",
        name="Guppy",
        ideal_ph_min=7.0,
        ideal_ph_max=8.5,
        ideal_temp_min=25.5,
        ideal_temp_max=29.5,
        water_flow=True,
        rain=False,
        description="Live-bearing tropical fish, colorful and active",
    ),
    SpeciesProfile(
        id="4",
        name="Neon Tetra",
        ideal_ph_min=5.0,
        ideal_ph_max=7.0,
        ideal_temp_min=25.0,
        ideal_temp_max=29.0,
        water_flow=False,
        rain=True,
        description="Small schooling fish, prefers acidic water",
    ),
    SpeciesProfile(
        id="5",
        name="Angelfish",
        ideal_ph_min=6.0,
        ideal_ph_max=7.5,
        ideal_temp_min=28.0,
        ideal_temp_max=32.0,
        water_flow=False,
        rain=True,
        description="Large cichlid, requires stable water conditions",
    ),
    SpeciesProfile(
        id="6",
        name="Comet",
        ideal_ph_min=6.5,
        ideal_ph_max=7.2,
        ideal_temp_min=26.0,
        ideal_temp_max=30.0,
        water_flow=True,
        rain=False,
        description="Comet goldfish, single-tailed variety",
    ),
    SpeciesProfile(
        id="7",
        name="Rohu",
        ideal_ph_min=6.6,
        ideal_ph_max=8.0,
        ideal_temp_min=27.5,
        ideal_temp_max=31.5,
        water_flow=True,
        rain=True,
        description="Rohu fish, popular freshwater species",
    ),
)
