"""Pixel font used to draw messages onto the contribution grid.

Glyphs are written as rows of ``0``/``1`` strings and converted once, at
import time, into immutable tuples of booleans.
"""

from collections.abc import Mapping
from types import MappingProxyType

from gitgraph.rendering.errors import MalformedInputError


GlyphBitmap = tuple[tuple[bool, ...], ...]

GLYPH_HEIGHT = 5
SPACE_WIDTH = 2
UNKNOWN_WIDTH = 1

SUPPORTED_CHARACTERS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789 !?.,:-+=()")


def _bitmap(*rows: str) -> GlyphBitmap:
    return tuple(tuple(cell == "1" for cell in row) for row in rows)


def _table(rows_by_char: dict[str, tuple[str, ...]]) -> Mapping[str, GlyphBitmap]:
    return MappingProxyType(
        {char: _bitmap(*rows) for char, rows in rows_by_char.items()}
    )


PIXEL_GLYPHS = _table(
    {
        "A": ("010", "101", "111", "101", "101"),
        "B": ("110", "101", "110", "101", "110"),
        "C": ("011", "100", "100", "100", "011"),
        "D": ("110", "101", "101", "101", "110"),
        "E": ("111", "100", "110", "100", "111"),
        "F": ("111", "100", "110", "100", "100"),
        "G": ("011", "100", "101", "101", "011"),
        "H": ("101", "101", "111", "101", "101"),
        "I": ("111", "010", "010", "010", "111"),
        "J": ("111", "001", "001", "101", "010"),
        "K": ("101", "110", "100", "110", "101"),
        "L": ("100", "100", "100", "100", "111"),
        "M": ("101", "111", "111", "101", "101"),
        "N": ("110", "101", "101", "101", "101"),
        "O": ("010", "101", "101", "101", "010"),
        "P": ("110", "101", "110", "100", "100"),
        "Q": ("010", "101", "101", "111", "011"),
        "R": ("110", "101", "110", "101", "101"),
        "S": ("011", "100", "010", "001", "110"),
        "T": ("111", "010", "010", "010", "010"),
        "U": ("101", "101", "101", "101", "111"),
        "V": ("101", "101", "101", "101", "010"),
        "W": ("101", "101", "111", "111", "101"),
        "X": ("101", "101", "010", "101", "101"),
        "Y": ("101", "101", "010", "010", "010"),
        "Z": ("111", "001", "010", "100", "111"),
        "0": ("010", "101", "101", "101", "010"),
        "1": ("010", "110", "010", "010", "111"),
        "2": ("110", "001", "010", "100", "111"),
        "3": ("110", "001", "010", "001", "110"),
        "4": ("101", "101", "111", "001", "001"),
        "5": ("111", "100", "110", "001", "110"),
        "6": ("011", "100", "110", "101", "010"),
        "7": ("111", "001", "010", "010", "010"),
        "8": ("010", "101", "010", "101", "010"),
        "9": ("010", "101", "011", "001", "110"),
        "!": ("010", "010", "010", "000", "010"),
        "?": ("010", "101", "001", "010", "010"),
        ".": ("000", "000", "000", "000", "010"),
        ",": ("000", "000", "000", "010", "100"),
        ":": ("000", "010", "000", "010", "000"),
        "-": ("000", "000", "111", "000", "000"),
        "+": ("000", "010", "111", "010", "000"),
        "=": ("000", "111", "000", "111", "000"),
        "(": ("010", "100", "100", "100", "010"),
        ")": ("010", "001", "001", "001", "010"),
    }
)

# Narrow replacements; anything not listed falls back to the pixel glyph.
SLIM_GLYPHS = _table(
    {
        "I": ("1", "1", "1", "1", "1"),
        "1": ("01", "11", "01", "01", "01"),
        "!": ("1", "1", "1", "0", "1"),
        ".": ("0", "0", "0", "0", "1"),
        ",": ("00", "00", "00", "01", "10"),
        ":": ("0", "1", "0", "1", "0"),
    }
)

FONTS: Mapping[str, Mapping[str, GlyphBitmap]] = MappingProxyType(
    {
        "pixel": PIXEL_GLYPHS,
        "slim": SLIM_GLYPHS,
        "bold": _table({}),
    }
)

# Checked in order, so longer tokens sharing a prefix must come first.
ICONS = _table(
    {
        ":NODE:": ("10101", "11011", "10101", "10101", "10101"),
        ":PY:": ("11110", "10001", "11110", "10000", "10000"),
    }
)


def lookup(character: str, font: str = "pixel") -> GlyphBitmap | None:
    """Return the bitmap for ``character`` or ``None`` when it has none.

    Space is a supported character without a bitmap; the renderer treats
    it as a gap.
    """

    try:
        overrides = FONTS[font]
    except KeyError as exc:
        raise MalformedInputError(f"unknown font: {font!r}") from exc

    key = character.upper()
    glyph = overrides.get(key)
    if glyph is None:
        glyph = PIXEL_GLYPHS.get(key)
    return glyph


def match_icon(text: str, position: int) -> tuple[str, GlyphBitmap] | None:
    """Return the icon token starting at ``position`` and its bitmap."""

    for token, bitmap in ICONS.items():
        if text[position : position + len(token)].upper() == token:
            return token, bitmap
    return None


def scale_bitmap(bitmap: GlyphBitmap, scale: int) -> GlyphBitmap:
    """Repeat every cell ``scale`` times horizontally and vertically."""

    if scale <= 1:
        return bitmap

    scaled: list[tuple[bool, ...]] = []
    for row in bitmap:
        scaled_row = tuple(cell for cell in row for _ in range(scale))
        scaled.extend(scaled_row for _ in range(scale))
    return tuple(scaled)


def glyph_width(bitmap: GlyphBitmap) -> int:
    return len(bitmap[0]) if bitmap else 0
