"""Reading of scene description files: textures, colours and the map rows."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from cubcaster.errors import CubError

_BLANK = " \t\n\v\f\r"
_SEPARATORS = " \t"
_DIGITS = "0123456789"
_TEXTURE_KEYS = {"NO": "north", "SO": "south", "WE": "west", "EA": "east"}
_COLOR_KEYS = {"F": "floor", "C": "ceiling"}


@dataclass(frozen=True)
class Color:
    """An RGB colour with each channel in 0..255."""

    red: int
    green: int
    blue: int


@dataclass
class Scene:
    """Everything a scene file declares: wall textures, floor and ceiling, map rows."""

    north: str | None = None
    south: str | None = None
    west: str | None = None
    east: str | None = None
    floor: Color | None = None
    ceiling: Color | None = None
    rows: list[str] = field(default_factory=list)

    def is_complete(self) -> bool:
        """True once all four textures and both colours are known."""
        return None not in (
            self.north,
            self.south,
            self.west,
            self.east,
            self.floor,
            self.ceiling,
        )


def _component(text: str) -> tuple[int, str]:
    """Read one colour channel; return its value and the text after it."""
    rest = text.lstrip(_DIGITS)
    count = len(text) - len(rest)
    if count == 0 or count > 3 or (rest and rest[0] not in "," + _SEPARATORS):
        raise CubError("colors informations are not appropriate")
    value = int(text[:count])
    if value > 255:
        raise CubError("incorrect color number")
    return value, rest


def _separator(text: str) -> str:
    """Skip the comma between two channels and the blanks around it."""
    stripped = text.lstrip(_SEPARATORS)
    if not stripped:
        raise CubError("not enough colors informations")
    if stripped[0] != ",":
        raise CubError("colors informations are not appropriate")
    after = stripped[1:].lstrip(_SEPARATORS)
    if not after:
        raise CubError("not enough colors informations")
    return after


def parse_color(text: str) -> Color:
    """Parse the "R,G,B" part of a floor or ceiling element."""
    text = text.lstrip(_SEPARATORS)
    if not text:
        raise CubError("colors informations are missing")
    red, rest = _component(text)
    green, rest = _component(_separator(rest))
    blue, rest = _component(_separator(rest))
    if rest.lstrip(_SEPARATORS):
        raise CubError("too much colors informations")
    return Color(red, green, blue)


def parse_texture(text: str) -> str:
    """Parse the path part of a texture element: exactly one word."""
    path = text.lstrip(_SEPARATORS)
    if not path:
        raise CubError("texture path is missing")
    if any(char in _SEPARATORS for char in path):
        raise CubError("texture argument is not appropriate")
    return path


def _set_color(scene: Scene, body: str) -> None:
    attr = _COLOR_KEYS[body[0]]
    if getattr(scene, attr) is not None:
        raise CubError("duplicate colors element")
    if len(body) < 2 or body[1] not in _SEPARATORS:
        raise CubError("identifier argument is not appropriate")
    setattr(scene, attr, parse_color(body[1:]))


def _set_texture(scene: Scene, body: str) -> None:
    attr = _TEXTURE_KEYS.get(body[:2])
    if attr is None or len(body) < 3 or body[2] not in _SEPARATORS:
        raise CubError("identifier argument is not appropriate")
    if getattr(scene, attr) is not None:
        raise CubError("duplicate texture element")
    setattr(scene, attr, parse_texture(body[2:]))


def parse_scene(lines: Iterable[str]) -> Scene:
    """Build a scene from the lines of a scene file.

    Elements come first, in any order; the map follows and must be the
    last thing in the file, without empty lines.
    """
    scene = Scene()
    in_map = False
    for raw in lines:
        line = raw.removesuffix("\n")
        body = line.lstrip(_BLANK)
        if not body:
            if in_map:
                raise CubError("map cannot have empty line")
            continue
        head = body[0]
        if head in "10":
            if not in_map:
                if not scene.is_complete():
                    raise CubError("it miss identifier arguments before the map")
                in_map = True
            scene.rows.append(line)
            continue
        if in_map:
            raise CubError("map border is incorrect")
        if head in _COLOR_KEYS:
            _set_color(scene, body)
        elif head in "NSEW":
            _set_texture(scene, body)
        else:
            raise CubError("scene element is not appropriate")
    return scene


def load_scene(path: str | Path) -> Scene:
    """Read and parse a scene file."""
    try:
        with Path(path).open(encoding="utf-8") as handle:
            return parse_scene(handle)
    except OSError as exc:
        raise CubError("map file is not open") from exc


def check_cub_path(path: str | Path) -> Path:
    """Check that the path names a readable ".cub" file and return it."""
    path = Path(path)
    if not str(path).endswith(".cub"):
        raise CubError("map file is incorrect")
    if not path.is_file() or not os.access(path, os.R_OK):
        raise CubError("map file is not open")
    try:
        with path.open("rb"):
            pass
    except OSError as exc:
        raise CubError("map file is not open") from exc
    return path