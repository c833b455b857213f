"""Sorting and table rendering for the room listing."""

from __future__ import annotations

from typing import Iterable, List

from rich import box
from rich.console import Console
from rich.measure import Measurement
from rich.table import Table
from rich.text import Text

from .models import Room

TABLE_HEADERS = ("Title", "ID")

# Upper bound used when measuring the natural width of the table.
_UNBOUNDED_WIDTH = 100_000


def sort_rooms(rooms: Iterable[Room]) -> List[Room]:
    """Return *rooms* ordered by title (case-sensitive, ascending)."""

    return sorted(rooms, key=lambda room: room.title)


def build_rooms_table(rooms: Iterable[Room]) -> Table:
    table = Table(box=box.ASCII)
    for header in TABLE_HEADERS:
        table.add_column(header, no_wrap=True)
    for room in sort_rooms(rooms):
        # Titles are user supplied; keep rich from reading them as markup.
        table.add_row(Text(room.title), Text(room.id))
    return table


def render_rooms_table(rooms: Iterable[Room], console: Console | None = None) -> None:
    """Print a bordered two-column table of *rooms* sorted by title.

    Rows are never wrapped or cropped to the console width, so every room
    id stays whole on its own line.
    """

    console = console or Console()
    table = build_rooms_table(rooms)
    options = console.options.update_width(_UNBOUNDED_WIDTH)
    table.width = Measurement.get(console, options, table).maximum
    console.print(table, crop=False)
