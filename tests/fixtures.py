"""Builders for literal /connections payloads."""

from typing import Any


def make_section(
    departure_station: str,
    departure: str | None,
    arrival_station: str,
    arrival: str | None,
    platform: str | None = None,
) -> dict[str, Any]:
    """Build a section the way the /connections endpoint shapes it."""
    return {
        "journey": {"category": "IC", "number": "8"},
        "departure": {
            "station": {"id": "8507000", "name": departure_station},
            "arrival": None,
            "departure": departure,
            "platform": platform,
        },
        "arrival": {
            "station": {"id": "8503000", "name": arrival_station},
            "arrival": arrival,
            "departure": None,
            "platform": None,
        },
    }
