"""Shared fixtures: literal transport.opendata.ch responses."""

import io
from typing import Any

import pytest
from rich.console import Console

from tests.fixtures import make_section


@pytest.fixture
def bern_zurich_response() -> dict[str, Any]:
    """One Bern -> Zürich HB connection with a change in Olten."""
    return {
        "connections": [
            {
                "sections": [
                    make_section(
                        "Bern", "2024-05-01T08:02:00+0200", "Olten", "2024-05-01T08:28:00+0200", "7"
                    ),
                    make_section(
                        "Olten",
                        "2024-05-01T08:32:00+0200",
                        "Zürich HB",
                        "2024-05-01T09:00:00+0200",
                        "12",
                    ),
                ]
            }
        ]
    }


@pytest.fixture
def two_connections_response() -> dict[str, Any]:
    """Two direct connections, the second one leaving later."""
    return {
        "connections": [
            {
                "sections": [
                    make_section(
                        "Bern", "2024-05-01T08:02:00+0200", "Zürich HB", "2024-05-01T08:58:00+0200", "8"
                    )
                ]
            },
            {
                "sections": [
                    make_section(
                        "Bern", "2024-05-01T08:32:00+0200", "Zürich HB", "2024-05-01T09:28:00+0200", "9"
                    )
                ]
            },
        ]
    }


@pytest.fixture
def console() -> Console:
    """A wide console writing into memory, without colours."""
    return Console(file=io.StringIO(), width=200, color_system=None)
