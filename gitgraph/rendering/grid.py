import logging
from collections.abc import Iterator
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from gitgraph.rendering.errors import MalformedInputError
from gitgraph.rendering.glyphs import GlyphBitmap
from gitgraph.rendering.glyphs import SPACE_WIDTH
from gitgraph.rendering.glyphs import UNKNOWN_WIDTH
from gitgraph.rendering.glyphs import glyph_width
from gitgraph.rendering.glyphs import lookup
from gitgraph.rendering.glyphs import match_icon
from gitgraph.rendering.glyphs import scale_bitmap


logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
DEFAULT_WEEKS = 52
MIN_INTENSITY = 0
MAX_INTENSITY = 4
ON_INTENSITY = MAX_INTENSITY


class RenderOptions(BaseModel):
    """Layout options for drawing a message onto a grid."""

    model_config = ConfigDict(frozen=True)

    font: Literal["pixel", "slim", "bold"] = "pixel"
    max_width: int = Field(default=DEFAULT_WEEKS, ge=1)
    max_height: int = Field(default=DAYS_PER_WEEK, ge=1)
    char_spacing: int = Field(default=1, ge=0)
    icon_scale: int = Field(default=1, ge=1)
    icons: bool = True


class Grid:
    """Fixed-size intensity matrix addressed as ``grid[column][row]``.

    Writes outside the grid are dropped, mirroring how a contribution
    calendar simply has no cell there.
    """

    def __init__(self, width: int = DEFAULT_WEEKS, height: int = DAYS_PER_WEEK) -> None:
        if width < 1 or height < 1:
            raise ValueError("grid dimensions must be positive")
        self.width = width
        self.height = height
        self.fully_rendered = True
        self._columns = [[MIN_INTENSITY] * height for _ in range(width)]

    def __getitem__(self, column: int) -> tuple[int, ...]:
        return tuple(self._columns[column])

    def __len__(self) -> int:
        return self.width

    def __iter__(self) -> Iterator[tuple[int, ...]]:
        for column in self._columns:
            yield tuple(column)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._columns == other._columns

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height})"

    def get(self, column: int, row: int) -> int:
        if 0 <= column < self.width and 0 <= row < self.height:
            return self._columns[column][row]
        return MIN_INTENSITY

    def set(self, column: int, row: int, intensity: int) -> bool:
        """Write one cell; returns ``False`` when the cell is off the grid."""

        if not MIN_INTENSITY <= intensity <= MAX_INTENSITY:
            raise ValueError(
                f"intensity must be within {MIN_INTENSITY}..{MAX_INTENSITY}"
            )
        if not (0 <= column < self.width and 0 <= row < self.height):
            return False
        self._columns[column][row] = intensity
        return True

    def content_width(self) -> int:
        """Number of columns up to and including the last non-empty one."""

        for column in range(self.width - 1, -1, -1):
            if any(self._columns[column]):
                return column + 1
        return 0

    def cells(self) -> Iterator[tuple[int, int, int]]:
        """Yield ``(column, row, intensity)`` in column-major order."""

        for column_index, column in enumerate(self._columns):
            for row_index, intensity in enumerate(column):
                yield column_index, row_index, intensity

    def to_lists(self) -> list[list[int]]:
        return [list(column) for column in self._columns]


class RenderCursor:
    """Read position in the message and write column on the grid."""

    __slots__ = ("column", "position")

    def __init__(self) -> None:
        self.column = 0
        self.position = 0


def _layout(
    message: str, options: RenderOptions
) -> tuple[list[tuple[int, GlyphBitmap]], int]:
    """Place every glyph and icon of ``message`` on an unbounded strip.

    Returns the ``(start_column, bitmap)`` placements and the final cursor
    column. Both rendering and width measurement go through here.
    """

    cursor = RenderCursor()
    placements: list[tuple[int, GlyphBitmap]] = []

    while cursor.position < len(message):
        icon = match_icon(message, cursor.position) if options.icons else None
        if icon is not None:
            token, bitmap = icon
            bitmap = scale_bitmap(bitmap, options.icon_scale)
            placements.append((cursor.column, bitmap))
            cursor.column += glyph_width(bitmap) + options.char_spacing
            cursor.position += len(token)
            continue

        char = message[cursor.position]
        glyph = lookup(char, options.font)
        if glyph is not None:
            placements.append((cursor.column, glyph))
            cursor.column += glyph_width(glyph) + options.char_spacing
        elif char == " ":
            cursor.column += SPACE_WIDTH
        else:
            cursor.column += UNKNOWN_WIDTH
        cursor.position += 1

    return placements, cursor.column


def _require_message(message: object) -> str:
    if not isinstance(message, str):
        raise MalformedInputError(
            f"message must be a string, got {type(message).__name__}"
        )
    return message


def render_grid(message: str, options: RenderOptions | None = None) -> Grid:
    """Draw ``message`` onto a new grid.

    Characters that do not fit in ``options.max_width`` are dropped
    silently; ``grid.fully_rendered`` reports whether that happened.
    """

    message = _require_message(message)
    options = options or RenderOptions()
    grid = Grid(options.max_width, options.max_height)

    placements, _ = _layout(message, options)
    for start_column, bitmap in placements:
        if start_column >= grid.width:
            grid.fully_rendered = False
            break
        for x in range(glyph_width(bitmap)):
            column = start_column + x
            if column >= grid.width:
                grid.fully_rendered = False
                break
            for y, row in enumerate(bitmap):
                if y >= grid.height:
                    break
                grid.set(column, y, ON_INTENSITY if row[x] else MIN_INTENSITY)

    if not grid.fully_rendered:
        logger.debug("Message %r truncated at %d columns", message, grid.width)
    return grid


def measure_width(message: str, options: RenderOptions | None = None) -> int:
    """Return how many columns ``message`` spans, without trailing spacing."""

    message = _require_message(message)
    options = options or RenderOptions()
    _, end_column = _layout(message, options)
    return max(0, end_column - options.char_spacing)
