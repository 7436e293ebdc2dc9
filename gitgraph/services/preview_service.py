import logging
from datetime import date

from gitgraph.rendering.graphic import GraphicOptions
from gitgraph.rendering.graphic import compose_graphic
from gitgraph.rendering.grid import RenderOptions
from gitgraph.rendering.grid import measure_width
from gitgraph.rendering.grid import render_grid
from gitgraph.rendering.schedule import grid_to_schedule
from gitgraph.rendering.schedule import total_intensity
from gitgraph.rendering.validation import ValidationResult
from gitgraph.rendering.validation import validate_message
from gitgraph.settings import Settings


logger = logging.getLogger(__name__)


class InvalidMessageError(Exception):
    """Raised when a message fails validation before rendering."""

    def __init__(self, result: ValidationResult) -> None:
        super().__init__(result.detail)
        self.result = result


def normalize_message(raw: str) -> str:
    return raw.strip().upper()


def check_message(raw: str, settings: Settings) -> str:
    """Validate ``raw`` with configured limits and return it normalized."""

    stripped = raw.strip()
    result = validate_message(
        stripped,
        min_length=settings.message_min_length,
        max_length=settings.message_max_length,
    )
    if not result.valid:
        logger.info("Rejected message %r: %s", stripped, result.detail)
        raise InvalidMessageError(result)
    return normalize_message(stripped)


def build_preview(
    raw: str, settings: Settings, today: date | None = None
) -> dict[str, object]:
    """Render a message and derive its schedule for preview purposes."""

    message = check_message(raw, settings)
    grid = render_grid(message, RenderOptions(max_width=settings.grid_max_width))
    events = grid_to_schedule(grid, message=message, today=today)

    return {
        "message": message,
        "width": measure_width(message),
        "fully_rendered": grid.fully_rendered,
        "grid": grid.to_lists(),
        "total_intensity": total_intensity(events),
        "events": [
            {"date": event.date.isoformat(), "intensity": event.intensity}
            for event in events
        ],
    }


def build_graphic(
    raw: str,
    settings: Settings,
    theme: str | None = None,
    animation_type: str | None = None,
    seed: int | None = None,
    stats: dict[str, object] | None = None,
) -> str:
    """Compose the SVG for a message, widening the grid so nothing is cut."""

    message = check_message(raw, settings)
    width = max(settings.grid_max_width, measure_width(message))
    grid = render_grid(message, RenderOptions(max_width=width))

    options = GraphicOptions(
        message=message,
        theme=theme or settings.default_theme,
        animation_type=animation_type or settings.default_animation,
        random_seed=seed,
        stats=stats or {},
    )
    return compose_graphic(grid, options)
