"""Animated SVG rendering of a contribution grid.

The document always shows a canonical 53 x 7 calendar. Cells of the input
grid fade in on top of it; content wider than the calendar scrolls
horizontally in a loop so long messages stay readable.
"""

import logging
import math
import re
from collections.abc import Mapping
from random import Random
from types import MappingProxyType
from typing import Any
from typing import Literal
from xml.sax.saxutils import escape

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from gitgraph.rendering.errors import MalformedInputError
from gitgraph.rendering.grid import DAYS_PER_WEEK
from gitgraph.rendering.grid import Grid


logger = logging.getLogger(__name__)

CANONICAL_WEEKS = 53
CANONICAL_DAYS = DAYS_PER_WEEK

MONTH_LABELS = tuple("Jan Feb Mar Apr May Jun Jul Aug Sep Oct Nov Dec".split())
DAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

PADDING_TOP = 40
PADDING_RIGHT = 30
PADDING_BOTTOM = 50
PADDING_LEFT = 40

FONT_STACK = 'Inter, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif'

_XML_QUOTES = {'"': "&quot;", "'": "&apos;"}
# Characters XML 1.0 does not allow anywhere in a document.
_XML_FORBIDDEN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")

# Durations shorter than this would print as zero seconds.
MIN_DURATION = 0.001


class Palette(BaseModel):
    model_config = ConfigDict(frozen=True)

    bg: str
    levels: tuple[str, str, str, str, str]
    text: str
    text_muted: str


PALETTES: Mapping[str, Palette] = MappingProxyType(
    {
        "light": Palette(
            bg="#ffffff",
            levels=("#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39"),
            text="#24292f",
            text_muted="#656d76",
        ),
        "dark": Palette(
            bg="#0d1117",
            levels=("#161b22", "#0e4429", "#006d32", "#26a641", "#39d353"),
            text="#f0f6fc",
            text_muted="#7d8590",
        ),
    }
)


class GraphicOptions(BaseModel):
    """Presentation settings for :func:`compose_graphic`."""

    model_config = ConfigDict(frozen=True)

    title: str = "GitGraph Animator"
    message: str = ""
    theme: Literal["light", "dark"] = "dark"
    animation_type: Literal["wave", "spiral", "fade", "random"] = "wave"
    animation_duration: float = Field(default=2.0, ge=MIN_DURATION)
    scrolling_enabled: bool = True
    scroll_duration: float = Field(default=15.0, ge=MIN_DURATION)
    show_stats: bool = True
    stats: dict[str, Any] = Field(default_factory=dict)
    cell_size: int = Field(default=11, ge=1)
    cell_gap: int = Field(default=2, ge=0)
    random_seed: int | None = None


def escape_xml(value: object) -> str:
    """Escape the five XML metacharacters in ``value``.

    Control characters XML cannot carry at all are dropped.
    """

    if value is None:
        return ""
    return escape(_XML_FORBIDDEN.sub("", str(value)), _XML_QUOTES)


def _num(value: float) -> str:
    """Fixed-point number with at most three decimals, as SMIL clock values need."""

    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def animation_delay(
    animation_type: str,
    column: int,
    row: int,
    duration: float,
    rng: Random | None = None,
) -> float:
    """Seconds a cell waits before fading in."""

    if animation_type == "wave":
        return (column * 0.02 + row * 0.01) % duration
    if animation_type == "spiral":
        return (math.sqrt(column * column + row * row) * 0.05) % duration
    if animation_type == "random":
        return (rng or Random()).random() * duration
    return 0.0


def format_stats(stats: Mapping[str, Any]) -> list[str]:
    """Turn consumer-supplied stats into caption fragments (unescaped)."""

    parts: list[str] = []
    for key, value in stats.items():
        if value is None:
            continue
        if key == "kwh_charged":
            parts.append(f"Energy: {value}kWh")
        elif key == "sessions":
            parts.append(f"Sessions: {value}")
        elif key == "weather" and isinstance(value, Mapping):
            temp = value.get("temp")
            condition = value.get("condition") or ""
            parts.append(f"{temp}°C {condition}".strip())
        else:
            parts.append(f"{key.replace('_', ' ').title()}: {value}")
    return parts


def _style(palette: Palette) -> list[str]:
    return [
        '    <style type="text/css"><![CDATA[',
        f"      .graph-bg {{ fill: {palette.bg}; }}",
        "      .contribution-cell { stroke: none; }",
        f"      .graph-title {{ font-family: {FONT_STACK}; font-size: 16px;"
        f" font-weight: 600; fill: {palette.text}; }}",
        f"      .graph-subtitle {{ font-family: {FONT_STACK}; font-size: 12px;"
        f" fill: {palette.text_muted}; }}",
        f"      .day-label, .month-label {{ font-family: {FONT_STACK};"
        f" font-size: 10px; fill: {palette.text_muted}; }}",
        f"      .stats-text {{ font-family: {FONT_STACK}; font-size: 11px;"
        f" fill: {palette.text_muted}; }}",
        "    ]]></style>",
    ]


def compose_graphic(
    grid: Grid,
    options: GraphicOptions | None = None,
    *,
    rng: Random | None = None,
) -> str:
    """Build a self-contained animated SVG document for ``grid``.

    Output is byte-identical for identical inputs. In ``random`` animation
    mode the delays come from ``rng``, or from a ``Random`` seeded with
    ``options.random_seed`` when no source is given.
    """

    if not isinstance(grid, Grid):
        raise MalformedInputError("a Grid is required to compose a graphic")

    options = options or GraphicOptions()
    palette = PALETTES[options.theme]
    if options.animation_type == "random" and rng is None:
        rng = Random(options.random_seed)

    pitch = options.cell_size + options.cell_gap
    grid_width = CANONICAL_WEEKS * pitch - options.cell_gap
    grid_height = CANONICAL_DAYS * pitch - options.cell_gap
    svg_width = grid_width + PADDING_LEFT + PADDING_RIGHT
    svg_height = grid_height + PADDING_TOP + PADDING_BOTTOM

    content_columns = grid.content_width()
    needs_scrolling = options.scrolling_enabled and content_columns > CANONICAL_WEEKS
    visible_columns = content_columns if needs_scrolling else CANONICAL_WEEKS

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{svg_width}"'
        f' height="{svg_height}" viewBox="0 0 {svg_width} {svg_height}">',
        "  <defs>",
        *_style(palette),
        '    <clipPath id="grid-clip">',
        f'      <rect x="0" y="0" width="{grid_width}" height="{grid_height}" />',
        "    </clipPath>",
        "  </defs>",
        '  <rect width="100%" height="100%" class="graph-bg" rx="6" ry="6" />',
        f'  <text x="{PADDING_LEFT}" y="25" class="graph-title">'
        f"{escape_xml(options.title)}</text>",
        f'  <text x="{svg_width - PADDING_RIGHT}" y="25" class="graph-subtitle"'
        ' text-anchor="end">Contribution Graph</text>',
    ]

    lines.append(
        f'  <g class="months" transform="translate({PADDING_LEFT}, {PADDING_TOP - 5})">'
    )
    weeks_per_month = CANONICAL_WEEKS / len(MONTH_LABELS)
    for index, label in enumerate(MONTH_LABELS):
        x = math.floor(index * weeks_per_month * pitch)
        lines.append(f'    <text x="{x}" y="0" class="month-label">{label}</text>')
    lines.append("  </g>")

    lines.append(
        f'  <g class="days" transform="translate({PADDING_LEFT - 5}, {PADDING_TOP})">'
    )
    for index, label in enumerate(DAY_LABELS):
        if index % 2 == 1:
            y = _num(index * pitch + options.cell_size / 2 + 3)
            lines.append(
                f'    <text x="0" y="{y}" class="day-label" text-anchor="end">'
                f"{label}</text>"
            )
    lines.append("  </g>")

    lines.append(
        f'  <g class="contribution-grid" transform="translate({PADDING_LEFT},'
        f' {PADDING_TOP})" clip-path="url(#grid-clip)">'
    )
    lines.append('    <g class="background-cells">')
    for column in range(CANONICAL_WEEKS):
        for row in range(CANONICAL_DAYS):
            lines.append(
                f'      <rect x="{column * pitch}" y="{row * pitch}"'
                f' width="{options.cell_size}" height="{options.cell_size}"'
                f' fill="{palette.levels[0]}" rx="2" ry="2" />'
            )
    lines.append("    </g>")

    lines.append('    <g class="cells">')
    if needs_scrolling:
        overflow = (content_columns - CANONICAL_WEEKS) * pitch
        logger.debug("Scrolling %d columns of content", content_columns)
        lines.append(
            '      <animateTransform attributeName="transform" type="translate"'
            f' values="0,0; -{overflow},0; -{overflow},0; 0,0"'
            f' dur="{_num(options.scroll_duration)}s" repeatCount="indefinite" />'
        )

    duration = _num(options.animation_duration)
    for column, row, intensity in grid.cells():
        if intensity <= 0 or column >= visible_columns or row >= CANONICAL_DAYS:
            continue
        color = palette.levels[intensity]
        delay = _num(
            animation_delay(
                options.animation_type, column, row, options.animation_duration, rng
            )
        )
        lines.extend(
            [
                f'      <rect x="{column * pitch}" y="{row * pitch}"'
                f' width="{options.cell_size}" height="{options.cell_size}"'
                f' class="contribution-cell" fill="{color}" rx="2" ry="2" opacity="0">',
                '        <animate attributeName="opacity" values="0;1"'
                f' dur="{duration}s" begin="{delay}s" fill="freeze" />',
                '        <animate attributeName="fill"'
                f' values="{palette.levels[0]};{color}"'
                f' dur="{duration}s" begin="{delay}s" fill="freeze" />',
                "      </rect>",
            ]
        )
    lines.append("    </g>")
    lines.append("  </g>")

    if options.show_stats:
        stats_parts = format_stats(options.stats)
        if stats_parts:
            stats_text = escape_xml(" • ".join(stats_parts))
            lines.append(
                f'  <text x="{PADDING_LEFT}" y="{svg_height - 20}"'
                f' class="stats-text">{stats_text}</text>'
            )

    if options.message:
        lines.extend(
            [
                f'  <text x="{_num(svg_width / 2)}" y="{svg_height - 35}"'
                ' class="graph-subtitle" text-anchor="middle">',
                f'    <tspan fill="{palette.text}" font-weight="500">'
                f"{escape_xml(options.message)}</tspan>",
                '    <animate attributeName="opacity" values="0;1;0" dur="2s"'
                ' repeatCount="indefinite" />',
                "  </text>",
            ]
        )

    lines.append("</svg>")
    return "\n".join(lines) + "\n"
