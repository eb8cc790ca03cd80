"""Reading of XPM images into plain pixel grids."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from cubcaster.colornames import text_to_rgb

TRANSPARENT = 0xFF000000

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


class XpmError(ValueError):
    """The XPM data is malformed or cannot be read."""


@dataclass(frozen=True)
class XpmImage:
    """A decoded image: rows of 32-bit 0xAARRGGBB pixel values."""

    width: int
    height: int
    rows: tuple[tuple[int, ...], ...]

    def pixel(self, x: int, y: int) -> int:
        """Return the pixel at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.rows[y][x]


def split_words(text: str) -> list[str]:
    """Split on spaces and tabs, dropping empty words."""
    return [word for word in text.replace("\t", " ").split(" ") if word]


def find_outside_quotes(text: str, needle: str) -> int:
    """Return the first position of ``needle`` not inside double quotes, or -1."""
    if not needle:
        raise ValueError("needle must not be empty")
    quoted = False
    for pos in range(len(text) - len(needle) + 1):
        if text[pos] == '"':
            quoted = not quoted
        if not quoted and text.startswith(needle, pos):
            return pos
    return -1


def strip_comments(text: str) -> str:
    """Blank out C-style comments that lie outside quoted strings.

    Comments are replaced by spaces; a line comment takes its newline with it.
    """
    chars = text
    while (begin := find_outside_quotes(chars, "/*")) != -1:
        end = chars.find("*/", begin + 2)
        stop = len(chars) if end == -1 else end + 2
        chars = chars[:begin] + " " * (stop - begin) + chars[stop:]
    while (begin := find_outside_quotes(chars, "//")) != -1:
        end = chars.find("\n", begin + 2)
        stop = len(chars) if end == -1 else end + 1
        chars = chars[:begin] + " " * (stop - begin) + chars[stop:]
    return chars


def quoted_strings(text: str) -> Iterator[str]:
    """Yield the contents of each complete double-quoted string in order."""
    pos = 0
    while True:
        start = text.find('"', pos)
        if start == -1:
            return
        end = text.find('"', start + 1)
        if end == -1:
            return
        yield text[start + 1 : end]
        pos = end + 1


def _atoi(word: str) -> int:
    match = _INT_PREFIX.match(word)
    return int(match.group(1)) if match else 0


def _next_line(lines: Iterator[str], what: str) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise XpmError(f"missing {what}") from None


def _parse_header(line: str) -> tuple[int, int, int, int]:
    words = split_words(line)
    if len(words) < 4:
        raise XpmError("header needs width, height, colour count and characters per pixel")
    width, height, ncolors, cpp = (_atoi(word) for word in words[:4])
    if width <= 0 or height <= 0 or ncolors <= 0 or cpp <= 0:
        raise XpmError("header values must be positive")
    return width, height, ncolors, cpp


def _parse_color(line: str, cpp: int) -> int:
    words = split_words(line[cpp:])
    try:
        index = words.index("c") + 1
    except ValueError:
        raise XpmError(f"colour line without 'c' key: {line!r}") from None
    if index >= len(words):
        raise XpmError(f"colour line without a colour: {line!r}")
    extra = words[index + 1] if index + 1 < len(words) else None
    return text_to_rgb(words[index], extra)


def parse_xpm(lines: Iterable[str]) -> XpmImage:
    """Decode XPM data given as its sequence of strings (header, colours, rows)."""
    source = iter(lines)
    width, height, ncolors, cpp = _parse_header(_next_line(source, "header"))

    palette: dict[str, int] = {}
    for _ in range(ncolors):
        line = _next_line(source, "colour definition")
        key = line[:cpp]
        value = _parse_color(line, cpp)
        if cpp <= 2:
            palette[key] = value
        else:
            palette.setdefault(key, value)

    rows = []
    for _ in range(height):
        line = _next_line(source, "pixel row")
        row = []
        for x in range(width):
            color = palette.get(line[cpp * x : cpp * x + cpp], 0)
            if color == -1:
                color = TRANSPARENT
            row.append(color & 0xFFFFFFFF)
        rows.append(tuple(row))
    return XpmImage(width, height, tuple(rows))


def xpm_from_text(text: str) -> XpmImage:
    """Decode the text of an XPM file."""
    return parse_xpm(quoted_strings(strip_comments(text)))


def read_xpm_file(path: str | Path) -> XpmImage:
    """Load and decode an XPM file."""
    try:
        text = Path(path).read_text(encoding="latin-1")
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    return xpm_from_text(text)


def good_color(color: int, depth: int, shifts: Sequence[int]) -> int:
    """Convert 0xRRGGBB to a pixel value for a display of the given depth.

    ``shifts`` holds, for red, green and blue in turn, the offset of the
    channel's mask and its width in bits.  Depths of 24 and above keep the
    colour unchanged.
    """
    if depth >= 24:
        return color
    red = (color >> 8) & 0xFF00
    green = color & 0xFF00
    blue = (color << 8) & 0xFF00
    return (
        ((red >> (16 - shifts[1])) << shifts[0])
        + ((green >> (16 - shifts[3])) << shifts[2])
        + ((blue >> (16 - shifts[5])) << shifts[4])
    )