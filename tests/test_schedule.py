from datetime import date
from datetime import timedelta

import pytest

from gitgraph.rendering.errors import MalformedInputError
from gitgraph.rendering.grid import Grid
from gitgraph.rendering.grid import render_grid
from gitgraph.rendering.schedule import ScheduleEvent
from gitgraph.rendering.schedule import default_start_date
from gitgraph.rendering.schedule import grid_to_schedule
from gitgraph.rendering.schedule import intensity_by_date
from gitgraph.rendering.schedule import total_intensity


START = date(2025, 10, 19)


def test_default_start_date_spans_one_week_per_column() -> None:
    grid = Grid(52, 7)

    assert default_start_date(grid, today=date(2026, 10, 19)) == date(2025, 10, 20)
    assert default_start_date(Grid(53, 7), today=date(2026, 10, 19)) == date(
        2025, 10, 13
    )


def test_events_are_column_major_with_day_offsets() -> None:
    grid = Grid(3, 7)
    grid.set(0, 2, 4)
    grid.set(2, 0, 1)
    grid.set(1, 6, 3)

    events = grid_to_schedule(grid, START, message="HI")

    assert events == [
        ScheduleEvent(date=START + timedelta(days=2), intensity=4, source_message="HI"),
        ScheduleEvent(date=START + timedelta(days=13), intensity=3, source_message="HI"),
        ScheduleEvent(date=START + timedelta(days=14), intensity=1, source_message="HI"),
    ]


def test_one_event_per_non_empty_cell_carrying_intensity() -> None:
    grid = render_grid("A")

    events = grid_to_schedule(grid, START, message="A")

    # 'A' lights 10 of its 15 cells.
    assert len(events) == 10
    assert {event.intensity for event in events} == {4}
    assert total_intensity(events) == 40
    assert all(event.source_message == "A" for event in events)


def test_per_date_sum_matches_grid_cells() -> None:
    grid = render_grid("HELLO :NODE:")
    events = grid_to_schedule(grid, START)

    expected: dict[date, int] = {}
    for column, row, intensity in grid.cells():
        if intensity:
            day = START + timedelta(days=column * 7 + row)
            expected[day] = expected.get(day, 0) + intensity

    assert intensity_by_date(events) == expected


def test_dates_ascend_and_end_before_today() -> None:
    today = date(2026, 10, 19)
    grid = render_grid("WORLD")

    events = grid_to_schedule(grid, today=today)

    dates = [event.date for event in events]
    assert dates == sorted(dates)
    assert dates[0] >= today - timedelta(days=52 * 7)
    assert dates[-1] < today


def test_empty_grid_gives_empty_schedule() -> None:
    assert grid_to_schedule(render_grid(""), START) == []


def test_schedule_requires_a_grid() -> None:
    with pytest.raises(MalformedInputError):
        grid_to_schedule(None)  # type: ignore[arg-type]

    with pytest.raises(MalformedInputError):
        grid_to_schedule([[0] * 7] * 52)  # type: ignore[arg-type]
