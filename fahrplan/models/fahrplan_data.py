"""
Fahrplan data models.

This module defines the records returned by the Fahrplan API: station
locations and departure board entries, together with their JSON decoding
and display formatting.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..api.exceptions import DecodeException


def _require(data: Dict[str, Any], key: str, record: str) -> Any:
    if key not in data:
        raise DecodeException(f"{record}: missing field '{key}'")
    return data[key]


def _require_int(data: Dict[str, Any], key: str, record: str) -> int:
    value = _require(data, key, record)
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeException(f"{record}: field '{key}' must be an integer, got {value!r}")
    return value


def _require_float(data: Dict[str, Any], key: str, record: str) -> float:
    value = _require(data, key, record)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeException(f"{record}: field '{key}' must be a number, got {value!r}")
    return float(value)


def _require_str(data: Dict[str, Any], key: str, record: str) -> str:
    value = _require(data, key, record)
    if not isinstance(value, str):
        raise DecodeException(f"{record}: field '{key}' must be a string, got {value!r}")
    return value


def _parse_local_datetime(value: str, record: str) -> datetime:
    """
    Parse an ISO-8601 local date-time such as ``2021-03-02T09:05``.

    Args:
        value: Date-time string from the API
        record: Record name used in error messages

    Returns:
        datetime: Naive datetime

    Raises:
        DecodeException: If the value is not a local ISO date-time
    """
    if "T" not in value:
        raise DecodeException(f"{record}: dateTime {value!r} has no time part")

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise DecodeException(f"{record}: invalid dateTime {value!r}: {e}")

    if parsed.tzinfo is not None:
        raise DecodeException(f"{record}: dateTime {value!r} must not carry a UTC offset")
    return parsed


def _expect_object(data: Any, record: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeException(f"{record}: expected a JSON object, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class Location:
    """
    A station returned by a location search.

    Unique by ``id`` within one search result.
    """

    id: int
    name: str
    lon: float
    lat: float

    @classmethod
    def from_dict(cls, data: Any) -> "Location":
        """
        Create a Location from a decoded JSON object.

        Raises:
            DecodeException: If the object does not match the Location schema
        """
        data = _expect_object(data, "Location")
        return cls(
            id=_require_int(data, "id", "Location"),
            name=_require_str(data, "name", "Location"),
            lon=_require_float(data, "lon", "Location"),
            lat=_require_float(data, "lat", "Location"),
        )

    def format_position(self) -> str:
        """Format coordinates as ``lat, lon`` for display."""
        return f"{self.lat}, {self.lon}"

    def to_display_dict(self) -> dict:
        """Convert location to dictionary for display purposes."""
        return {
            "name": self.name,
            "id": str(self.id),
            "location": self.format_position(),
        }


@dataclass(frozen=True)
class Departure:
    """
    Immutable data class representing one scheduled service at one stop.

    ``track`` is ``None`` when the API sent an explicit null and an empty
    string when the field was left out.
    """

    name: str
    type: str
    board_id: int
    stop_id: int
    stop_name: str
    date_time: datetime
    track: Optional[str]
    details_id: str

    @classmethod
    def from_dict(cls, data: Any) -> "Departure":
        """
        Create a Departure from a decoded JSON object.

        Raises:
            DecodeException: If the object does not match the Departure schema
        """
        data = _expect_object(data, "Departure")

        track = data.get("track", "")
        if track is not None and not isinstance(track, str):
            raise DecodeException(f"Departure: field 'track' must be a string, got {track!r}")

        return cls(
            name=_require_str(data, "name", "Departure"),
            type=_require_str(data, "type", "Departure"),
            board_id=_require_int(data, "boardId", "Departure"),
            stop_id=_require_int(data, "stopId", "Departure"),
            stop_name=_require_str(data, "stopName", "Departure"),
            date_time=_parse_local_datetime(
                _require_str(data, "dateTime", "Departure"), "Departure"
            ),
            track=track,
            details_id=_require_str(data, "detailsId", "Departure"),
        )

    def format_date(self) -> str:
        """Format the scheduled date for display (DD.MM.YYYY)."""
        return f"{self.date_time.day:02d}.{self.date_time.month:02d}.{self.date_time.year:04d}"

    def format_time(self) -> str:
        """Format the scheduled time for display (HH:MM)."""
        return f"{self.date_time.hour:02d}:{self.date_time.minute:02d}"

    def display_track(self) -> str:
        """Track for display, ``-`` when the API reported none."""
        if self.track is None:
            return "-"
        return self.track

    def iso_date_time(self) -> str:
        """Scheduled date-time in the API's query format."""
        return self.date_time.strftime("%Y-%m-%dT%H:%M:%S")

    def format_summary(self) -> str:
        """One-line description used by the details label."""
        return (
            f"{self.name} ({self.type}) from {self.stop_name} "
            f"on {self.format_date()} at {self.format_time()}, "
            f"track {self.display_track()}"
        )

    def to_display_dict(self) -> dict:
        """Convert departure to dictionary for display purposes."""
        return {
            "date": self.format_date(),
            "time": self.format_time(),
            "type": self.type,
            "track": self.display_track(),
            "name": self.name,
        }
