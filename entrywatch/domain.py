from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LocationTarget:
    """A watched enrollment location and the latest acceptable date there."""

    id: str
    name: str
    target_date: str  # YYYY-MM-DD


@dataclass(frozen=True)
class Slot:
    start_timestamp: str  # e.g. 2025-03-15T09:00

    @property
    def date_iso(self) -> str:
        return self.start_timestamp.split("T", 1)[0]


def notification_key(location: LocationTarget, slot: Slot) -> str:
    # Same format the state file has always used: "<location id>_<timestamp>".
    return f"{location.id}_{slot.start_timestamp}"


class ConfigError(RuntimeError):
    """Configuration is missing or unusable; the run cannot do anything useful."""
