"""Validation of the map grid and placement of the player."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from cubcaster.errors import CubError

_DIRECTIONS = {"E": 0.0, "N": 90.0, "W": 180.0, "S": 270.0}


@dataclass(frozen=True)
class Player:
    """The starting point: facing letter, cell-centre position and view angle in degrees."""

    direction: str
    x: float
    y: float
    angle: float


def _at(rows: Sequence[str], j: int, i: int) -> str:
    """Character at row j, column i, or '' where there is none."""
    if not 0 <= j < len(rows):
        return ""
    row = rows[j]
    return row[i] if 0 <= i < len(row) else ""


def validate_map(rows: Sequence[str]) -> Player:
    """Check that the map is closed and well formed; return the player."""
    if not rows:
        raise CubError("map is missing in the file")
    check_edge_line(rows[0])
    player: Player | None = None
    j = 1
    while j + 1 < len(rows):
        player = check_middle_line(rows, j, player)
        j += 1
    if j < 2:
        raise CubError("map shape is incorrect, not big enough")
    check_edge_line(rows[j])
    check_closed(rows)
    if player is None:
        raise CubError("map is incorrect, miss a player")
    return player


def check_edge_line(row: str) -> None:
    """The first and last rows may only hold walls and spaces."""
    for char in row.lstrip(" "):
        if char in _DIRECTIONS:
            raise CubError("player can't be in the border")
        if char == "D":
            raise CubError("a door can't be in the border")
        if char not in "1 ":
            raise CubError("map border is incorrect")


def check_middle_line(rows: Sequence[str], j: int, player: Player | None) -> Player | None:
    """Check an inner row; return the player, placed if found on this row."""
    row = rows[j]
    start = len(row) - len(row.lstrip(" "))
    if _at(rows, j, start) != "1":
        raise CubError("map border is incorrect")
    for i in range(start, len(row)):
        char = row[i]
        if char in _DIRECTIONS:
            player = place_player(rows, i, j, player)
        elif char == "D":
            check_door(rows, i, j)
        elif char not in " 10":
            raise CubError("map is incorrect, unrecognized character")
    if row.rstrip(" ")[-1] != "1":
        raise CubError("map border is incorrect")
    return player


def check_door(rows: Sequence[str], i: int, j: int) -> None:
    """A door must sit between two walls with open floor on both other sides."""
    down, up = _at(rows, j + 1, i), _at(rows, j - 1, i)
    right, left = _at(rows, j, i + 1), _at(rows, j, i - 1)
    vertical = down == "0" and up == "0" and right == "1" and left == "1"
    horizontal = down == "1" and up == "1" and right == "0" and left == "0"
    if not (vertical or horizontal):
        raise CubError("door is bad implanted, can't be on a border or surrounded by walls")


def check_closed(rows: Sequence[str]) -> None:
    """Every floor cell must be enclosed: no space or void next to it."""
    for j, row in enumerate(rows):
        for i, char in enumerate(row):
            if char != "0":
                continue
            down, up = _at(rows, j + 1, i), _at(rows, j - 1, i)
            right, left = _at(rows, j, i + 1), _at(rows, j, i - 1)
            if (
                down in ("", " ")
                or up in ("", " ")
                or right in ("", " ")
                or left == " "
            ):
                raise CubError("border not well closed")


def place_player(rows: Sequence[str], i: int, j: int, player: Player | None) -> Player:
    """Create the player found at column i, row j; there may be only one."""
    if player is not None:
        raise CubError("there is more than one player")
    neighbours = (
        _at(rows, j + 1, i),
        _at(rows, j - 1, i),
        _at(rows, j, i + 1),
        _at(rows, j, i - 1),
    )
    if not any(cell in ("0", "D") for cell in neighbours):
        raise CubError(
            "player is bad positioned, can't be on a border or surrounded by walls"
        )
    direction = rows[j][i]
    return Player(direction, i + 0.5, j + 0.5, _DIRECTIONS[direction])