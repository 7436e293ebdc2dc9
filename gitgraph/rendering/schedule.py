from collections.abc import Iterable
from datetime import date
from datetime import timedelta
from typing import NamedTuple

from gitgraph.rendering.errors import MalformedInputError
from gitgraph.rendering.grid import DAYS_PER_WEEK
from gitgraph.rendering.grid import Grid


class ScheduleEvent(NamedTuple):
    """One non-empty grid cell pinned to a calendar date.

    A cell yields exactly one event; ``intensity`` says how many real-world
    actions that date needs.
    """

    date: date
    intensity: int
    source_message: str


def default_start_date(grid: Grid, today: date | None = None) -> date:
    """First day of a window that spans one week per column and ends today."""

    today = today or date.today()
    return today - timedelta(days=grid.width * DAYS_PER_WEEK)


def grid_to_schedule(
    grid: Grid,
    start_date: date | None = None,
    *,
    message: str = "",
    today: date | None = None,
) -> list[ScheduleEvent]:
    """Map every non-empty cell of ``grid`` to a dated event.

    Events come out column-major: columns left to right, then rows top to
    bottom, so the list is already in ascending date order.
    """

    if not isinstance(grid, Grid):
        raise MalformedInputError("a Grid is required to build a schedule")

    if start_date is None:
        start_date = default_start_date(grid, today)

    events: list[ScheduleEvent] = []
    for column, row, intensity in grid.cells():
        if intensity <= 0:
            continue
        offset = column * DAYS_PER_WEEK + row
        events.append(
            ScheduleEvent(
                date=start_date + timedelta(days=offset),
                intensity=intensity,
                source_message=message,
            )
        )
    return events


def intensity_by_date(events: Iterable[ScheduleEvent]) -> dict[date, int]:
    totals: dict[date, int] = {}
    for event in events:
        totals[event.date] = totals.get(event.date, 0) + event.intensity
    return totals


def total_intensity(events: Iterable[ScheduleEvent]) -> int:
    return sum(event.intensity for event in events)
