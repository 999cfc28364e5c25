import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class TransitError(Exception):
    """Base class for every failure of a connections lookup"""


class TransitRequestError(TransitError):
    """The HTTP request to the transit API failed"""


class MalformedResponseError(TransitError):
    """The transit API answered with something we cannot read"""


class EmptyItineraryError(TransitError):
    """A connection came back without any sections"""


@dataclass(frozen=True)
class Leg:
    departure_name: str
    departure_time: Optional[time]
    arrival_name: str
    arrival_time: Optional[time]
    duration: Optional[timedelta]
    platform: str


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an API timestamp like 2024-05-01T08:15:00+0200 into an aware datetime.

    Returns None for empty or missing values.
    """
    if not value:
        return None
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Invalid timestamp {value!r}: {e}") from e


def format_timestamp(instant: datetime) -> str:
    return instant.strftime(TIMESTAMP_FORMAT)


def _get_field_as_string(data: Dict[str, Any], field_name: str) -> str:
    # null and non-string values read as ""
    value = data.get(field_name)
    return value if isinstance(value, str) else ""


def _parse_location(section: Dict[str, Any], subfield: str) -> Tuple[str, str, str, str]:
    """Return (arrival, departure, platform, station name) of a section endpoint"""
    location = section.get(subfield)
    if not isinstance(location, dict):
        raise MalformedResponseError(f"Section is missing its '{subfield}' object")

    station = location.get("station")
    if not isinstance(station, dict):
        raise MalformedResponseError(f"Section '{subfield}' is missing its station")

    arrival = _get_field_as_string(location, "arrival")
    departure = _get_field_as_string(location, "departure")
    platform = _get_field_as_string(location, "platform")
    station_name = _get_field_as_string(station, "name")

    return arrival, departure, platform, station_name


def extract_leg(section: Dict[str, Any]) -> Leg:
    if not isinstance(section, dict):
        raise MalformedResponseError(f"Expected a section object, got {type(section).__name__}")

    arrival, _, _, arrival_name = _parse_location(section, "arrival")
    _, departure, platform, departure_name = _parse_location(section, "departure")

    arrival_dt = parse_timestamp(arrival)
    departure_dt = parse_timestamp(departure)

    # Duration comes from the full instants so midnight crossings stay positive
    duration = None
    if arrival_dt and departure_dt:
        duration = arrival_dt - departure_dt
        if duration < timedelta(0):
            logger.warning(f"Negative duration for leg {departure_name} -> {arrival_name}: {duration}")
    else:
        logger.debug(f"Leg {departure_name} -> {arrival_name} has no complete timestamps")

    return Leg(
        departure_name=departure_name,
        departure_time=departure_dt.timetz() if departure_dt else None,
        arrival_name=arrival_name,
        arrival_time=arrival_dt.timetz() if arrival_dt else None,
        duration=duration,
        platform=platform,
    )


def extract_legs(sections: List[Dict[str, Any]]) -> Tuple[Leg, ...]:
    return tuple(extract_leg(section) for section in sections)


def extract_itineraries(document: Any) -> List[Tuple[Leg, ...]]:
    """Build one tuple of legs per connection of an API response, in response order.

    The whole document is read before returning so a malformed response
    never leads to partially rendered output.
    """
    if not isinstance(document, dict):
        raise MalformedResponseError("Response is not a JSON object")

    connections = document.get("connections")
    if not isinstance(connections, list):
        raise MalformedResponseError("Response has no 'connections' array")

    itineraries = []
    for index, connection in enumerate(connections):
        sections = connection.get("sections") if isinstance(connection, dict) else None
        if not isinstance(sections, list):
            raise MalformedResponseError(f"Connection {index} has no 'sections' array")
        if not sections:
            raise EmptyItineraryError(f"Connection {index} has no sections")
        itineraries.append(extract_legs(sections))

    logger.info(f"Extracted {len(itineraries)} itineraries")
    return itineraries
