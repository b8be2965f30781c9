"""Client state for Smart Breeder.

A single mutable container that is only changed through its named operations.
Only the settings and the selected species are persisted.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from datetime import datetime
from typing import Any

from .const import (
    ACTION_LOG_LIMIT,
    CHART_DATA_LIMIT,
    HEALTH_ERROR,
    HEALTH_HEALTHY,
    HEALTH_WARNING,
    LOGGER,
    MIN_UPDATE_INTERVAL_MS,
    VISIBLE_NOTIFICATIONS,
)
from .models import (
    DEFAULT_FISH_SPECIES,
    ActionLogEntry,
    ChartPoint,
    ConnectionStatus,
    DeviceReading,
    Settings,
    SpeciesProfile,
    WifiSettings,
)

SETTINGS_FIELDS = ("update_interval_ms", "dark_mode", "wifi")


def system_health(
    reading: DeviceReading | None, species: SpeciesProfile | None
) -> str:
    """Rate the current reading against the selected species."""
    if reading is None or species is None:
        return HEALTH_ERROR
    if reading.ph is None or reading.temperature is None:
        return HEALTH_ERROR

    ph_ok = species.ideal_ph_min <= reading.ph <= species.ideal_ph_max
    temp_ok = species.ideal_temp_min <= reading.temperature <= species.ideal_temp_max
    if ph_ok and temp_ok:
        return HEALTH_HEALTHY
    if ph_ok or temp_ok:
        return HEALTH_WARNING
    return HEALTH_ERROR


class SmartBreederState:
    """Last known device state, history and user preferences."""

    def __init__(
        self,
        chart_capacity: int = CHART_DATA_LIMIT,
        settings: Settings | None = None,
        selected_species: SpeciesProfile | None = None,
        on_persist: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the state."""
        self.reading: DeviceReading | None = None
        self.chart: deque[ChartPoint] = deque(maxlen=chart_capacity)
        self.connection = ConnectionStatus()
        self.error: str | None = None
        self.settings = settings or Settings()
        self.species_catalog: list[SpeciesProfile] = list(DEFAULT_FISH_SPECIES)
        self.selected_species = selected_species
        self.notifications: list[str] = []
        self.action_log: deque[ActionLogEntry] = deque(maxlen=ACTION_LOG_LIMIT)

        self._loading = 0
        self._on_persist = on_persist
        self._listeners: list[Callable[[], None]] = []

    @property
    def is_loading(self) -> bool:
        """Return True while at least one device call is pending."""
        return self._loading > 0

    @property
    def visible_notifications(self) -> list[str]:
        """Return the notifications a UI should show."""
        return self.notifications[-VISIBLE_NOTIFICATIONS:]

    def async_add_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Call listener after every change. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def remove_listener() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove_listener

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:  # noqa: BLE001
                LOGGER.exception("Error in state listener %s", listener)

    def _persist(self) -> None:
        if self._on_persist is None:
            return
        try:
            self._on_persist()
        except Exception:  # noqa: BLE001
            LOGGER.exception("Failed to persist Smart Breeder settings")

    def begin_loading(self) -> None:
        """Mark a device call as pending."""
        self._loading += 1
        self._notify()

    def end_loading(self) -> None:
        """Mark a device call as finished."""
        self._loading = max(0, self._loading - 1)
        self._notify()

    def record_reading(self, reading: DeviceReading) -> None:
        """Store a successful status read."""
        now = datetime.now()
        self.reading = reading
        self.chart.append(
            ChartPoint(
                time=now.strftime("%H:%M:%S"),
                ph=reading.ph,
                temperature=reading.temperature,
            )
        )
        self.error = None
        self.connection.connected = True
        self.connection.last_update = now.isoformat()
        self.connection.system_health = system_health(reading, self.selected_species)
        self._notify()

    def record_failure(self, message: str) -> None:
        """Store a failed device call. The last good reading stays displayed."""
        self.error = message
        self.connection.connected = False
        self._notify()

    def set_error(self, message: str | None) -> None:
        """Store the message of a failed command without touching the reading."""
        self.error = message
        self._notify()

    def set_connected(self, connected: bool) -> None:
        """Update the connection flag without a reading (e.g. after a ping)."""
        self.connection.connected = connected
        self._notify()

    def set_settings(self, partial: dict[str, Any]) -> None:
        """Shallow-merge settings. Invalid values are corrected, never raised."""
        for key, value in partial.items():
            if key not in SETTINGS_FIELDS:
                LOGGER.warning("Ignoring unknown setting %s", key)
                continue

            if key == "update_interval_ms":
                try:
                    value = int(value)
                except (TypeError, ValueError):
                    LOGGER.warning("Ignoring invalid update interval %r", value)
                    continue
                if value < MIN_UPDATE_INTERVAL_MS:
                    LOGGER.warning(
                        "Update interval %s ms is below %s ms, using the minimum",
                        value,
                        MIN_UPDATE_INTERVAL_MS,
                    )
                    value = MIN_UPDATE_INTERVAL_MS
            elif key == "dark_mode":
                value = bool(value)
            elif key == "wifi":
                if isinstance(value, dict):
                    value = WifiSettings(
                        ssid=value.get("ssid", ""), password=value.get("password", "")
                    )
                elif not isinstance(value, WifiSettings):
                    LOGGER.warning("Ignoring invalid wifi settings %r", value)
                    continue

            setattr(self.settings, key, value)

        self._persist()
        self._notify()

    def set_selected_species(self, species: SpeciesProfile | None) -> None:
        """Select a species, or clear the selection with None."""
        self.selected_species = species
        self.connection.system_health = system_health(self.reading, species)
        self._persist()
        self._notify()

    def set_species_catalog(self, catalog: list[SpeciesProfile]) -> None:
        """Replace the species catalog."""
        self.species_catalog = list(catalog)
        self._notify()

    def get_species(self, species_id: str) -> SpeciesProfile | None:
        """Return a catalog entry by id."""
        return next(
            (species for species in self.species_catalog if species.id == species_id),
            None,
        )

    def push_notification(self, text: str) -> None:
        """Add an advisory notification."""
        self.notifications.append(text)
        self._notify()

    def clear_notifications(self) -> None:
        """Remove all notifications."""
        self.notifications.clear()
        self._notify()

    def log_action(self, action: str, success: bool) -> None:
        """Record a user action; the newest entry comes first."""
        self.action_log.appendleft(
            ActionLogEntry(
                action=action,
                timestamp=datetime.now().strftime("%H:%M:%S"),
                success=success,
            )
        )
        self._notify()

    def as_persisted(self) -> dict[str, Any]:
        """Return the fields that survive a restart."""
        return {
            "settings": self.settings.as_dict(),
            "selected_species": (
                self.selected_species.as_dict() if self.selected_species else None
            ),
        }

    def restore(self, data: dict[str, Any] | None) -> None:
        """Load persisted fields. Unreadable data falls back to defaults."""
        if not data:
            return
        try:
            self.settings = Settings.from_dict(data.get("settings"))
            species = data.get("selected_species")
            self.selected_species = (
                SpeciesProfile.from_dict(species) if species else None
            )
        except (KeyError, TypeError, ValueError) as exception:
            LOGGER.warning("Discarding unreadable stored state: %s", exception)
            self.settings = Settings()
            self.selected_species = None
        self._notify()
