from datetime import time, timedelta
from typing import Iterable, Optional, Sequence, Tuple

from rich.console import Console
from rich.measure import Measurement
from rich.table import Table
from rich.text import Text

from sbb_legs import EmptyItineraryError, Leg

MISSING = "—"
COLUMNS = ("From", "Departure", "To", "Arrival", "Platform", "Duration")
# Measuring budget large enough that no column is squeezed
UNBOUNDED_WIDTH = 10_000


def get_range(legs: Sequence[Leg]) -> Tuple[Optional[time], Optional[time]]:
    """First departure and last arrival of an itinerary, in received order"""
    if not legs:
        raise EmptyItineraryError("Cannot render an itinerary without legs")
    return legs[0].departure_time, legs[-1].arrival_time


def format_time(value: Optional[time]) -> str:
    return value.strftime("%H:%M:%S") if value is not None else MISSING


def format_duration(duration: Optional[timedelta]) -> str:
    if duration is None:
        return MISSING
    # int() truncates toward zero, negative durations included
    return f"{int(duration.total_seconds() / 60)}min"


def build_table(legs: Sequence[Leg]) -> Table:
    table = Table()
    for name in COLUMNS:
        table.add_column(name, header_style="bold", no_wrap=True)

    for leg in legs:
        # Text cells keep station names like "Zürich [HB]" away from markup parsing
        table.add_row(
            Text(leg.departure_name),
            Text(format_time(leg.departure_time)),
            Text(leg.arrival_name),
            Text(format_time(leg.arrival_time)),
            Text(leg.platform),
            Text(format_duration(leg.duration)),
        )
    return table


def natural_width(table: Table, console: Console) -> int:
    """Width the table needs to show every cell on one line"""
    options = console.options.update_width(UNBOUNDED_WIDTH)
    return Measurement.get(console, options, table).maximum


def print_table(table: Table, console: Console) -> None:
    """Print a table at its natural width, even past the terminal edge"""
    console_width = console.width
    # Console.print clamps width= to the console, so widen the console itself
    console.width = max(console_width, natural_width(table, console))
    try:
        console.print(table, crop=False)
    finally:
        console.width = console_width


def render_itinerary(legs: Sequence[Leg], console: Optional[Console] = None) -> None:
    console = console or Console()
    start, end = get_range(legs)

    console.print(f"=== {format_time(start)} -> {format_time(end)} ===", markup=False, highlight=False)
    print_table(build_table(legs), console)
    console.print()


def render_itineraries(itineraries: Iterable[Sequence[Leg]], console: Optional[Console] = None) -> None:
    console = console or Console()
    for legs in itineraries:
        render_itinerary(legs, console)
