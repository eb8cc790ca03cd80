"""Game state between frames: player motion, view turning, the door and its animation."""

from __future__ import annotations

import math
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum

from cubcaster.mapcheck import Player
from cubcaster.scene import Scene

FOV = 60.0
ROTATE_STEP = 5.0
MOVE_STEP = 0.1001
MOUSE_FACTOR = 0.05
MOUSE_DEAD_ZONE = 2
MOUSE_START = 400
DOOR_DELAY = 5
DOOR_REACH = 2
DOOR_FRAMES = 4
SPRITE_PERIOD = 0.3


class Key(IntEnum):
    """Keyboard symbols the game reacts to."""

    SPACE = 0x0020
    A = 0x0061
    D = 0x0064
    S = 0x0073
    W = 0x0077
    ESCAPE = 0xFF1B
    LEFT = 0xFF51
    RIGHT = 0xFF53


@dataclass
class Door:
    """The door the player has opened, if any, and the door animation state."""

    position: tuple[int, int] | None = None
    is_open: bool = False
    opened_at: float = 0.0
    frame: int = 0
    texture: int = DOOR_FRAMES - 1


def row_length(grid: Sequence[str], y: int) -> int:
    """Length of row ``y``, or -1 when there is no such row."""
    if 0 <= y < len(grid):
        return len(grid[y])
    return -1


def snap_toward(door: int, player: float) -> int:
    """Round the player coordinate toward the door coordinate; 0 when equal."""
    if player > door:
        return math.floor(player)
    if player < door:
        return math.ceil(player)
    return 0


def door_angle(x: int, y: int, px: float, py: float) -> float:
    """Angle in degrees from the player position to the door cell corner."""
    return math.degrees(math.atan2(y - py, x - px))


def _half_up(value: float) -> int:
    """Round half away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _wrap_angle(angle: float) -> float:
    """Bring an angle into (0, 360]."""
    result = math.fmod(angle, 360.0)
    if result <= 0.0:
        result += 360.0
    return result


@dataclass
class World:
    """Map grid, player pose, door and animation timers."""

    grid: list[str]
    x: float
    y: float
    angle: float
    door: Door = field(default_factory=Door)
    mouse: int = MOUSE_START
    sprite_timer: float = 0.0

    @classmethod
    def from_scene(cls, scene: Scene, player: Player) -> World:
        """Start a world from a parsed scene and its validated player."""
        return cls(
            grid=list(scene.rows),
            x=player.x,
            y=player.y,
            angle=player.angle,
            sprite_timer=time.monotonic(),
        )

    def _set_cell(self, x: int, y: int, char: str) -> None:
        row = self.grid[y]
        self.grid[y] = row[:x] + char + row[x + 1 :]

    def rotate(self, key: int) -> bool:
        """Turn the view by one step for the left or right arrow."""
        if key == Key.LEFT:
            self.angle += ROTATE_STEP
            if self.angle >= 360:
                self.angle -= 360
            return True
        if key == Key.RIGHT:
            self.angle -= ROTATE_STEP
            if self.angle <= 0:
                self.angle += 360
            return True
        return False

    def move(self, key: int) -> bool:
        """Step forward, back or sideways; each axis is blocked separately."""
        sin = math.sin(math.radians(self.angle))
        cos = math.cos(math.radians(self.angle))
        directions = {
            Key.W: (cos, -sin),
            Key.S: (-cos, sin),
            Key.A: (-sin, -cos),
            Key.D: (sin, cos),
        }
        if key not in directions:
            return False
        dx, dy = directions[key]
        old_x, old_y = self.x, self.y
        new_y = old_y + MOVE_STEP * dy
        if not self.is_blocked(old_x, new_y):
            self.y = new_y
        new_x = old_x + MOVE_STEP * dx
        if not self.is_blocked(new_x, old_y):
            self.x = new_x
        return True

    def is_blocked(self, x: float, y: float) -> bool:
        """True when the point lies in a wall, a closed door or outside the map."""
        cx, cy = math.floor(x), math.floor(y)
        if cx < 0 or cy < 0 or cx >= row_length(self.grid, cy):
            return True
        cell = self.grid[cy][cx]
        return cell == "1" or (cell == "D" and not self.door.is_open)

    def turn_with_mouse(self, x: int) -> bool:
        """Turn the view from a horizontal mouse move; True if the view changed."""
        delta = x - self.mouse
        changed = False
        if abs(delta) > MOUSE_DEAD_ZONE:
            if delta >= 0:
                self.angle -= delta * MOUSE_FACTOR
            else:
                self.angle = math.ceil(self.angle - delta * MOUSE_FACTOR)
            if self.angle > 360:
                self.angle -= 360
            elif self.angle < 0:
                self.angle += 360
            changed = True
        self.mouse = x
        return changed

    def _in_view(self, angle: float) -> bool:
        start = _wrap_angle(self.angle - FOV / 2)
        end = start + FOV
        spread = abs(angle)
        if end > 360:
            return spread <= end - 360
        return start <= spread <= end

    def try_open_door(self, now: float) -> bool:
        """Open a closed door close to the player and in view; True if one opened."""
        if self.door.is_open:
            return False
        cx, cy = _half_up(self.x), _half_up(self.y)
        for j in range(-DOOR_REACH, DOOR_REACH + 1):
            for i in range(-DOOR_REACH, DOOR_REACH + 1):
                x, y = cx + i, cy + j
                if not 0 <= x < row_length(self.grid, y) or self.grid[y][x] != "D":
                    continue
                if self._in_view(door_angle(x, y, self.x, self.y)):
                    self._set_cell(x, y, "0")
                    self.door.position = (x, y)
                    self.door.is_open = True
                    self.door.opened_at = now
                    return True
        return False

    def update_door(self, now: float) -> bool:
        """Close the open door once the player has left it long enough."""
        door = self.door
        if not door.is_open or door.position is None:
            return False
        x, y = door.position
        if snap_toward(x, self.x) == x and snap_toward(y, self.y) == y:
            return False
        if int(now) - int(door.opened_at) < DOOR_DELAY:
            return False
        self._set_cell(x, y, "D")
        door.position = None
        door.is_open = False
        return True

    def advance_sprite(self, now: float) -> bool:
        """Move the door animation on a frame when its period has passed."""
        if now - self.sprite_timer < SPRITE_PERIOD:
            return False
        self.sprite_timer = now
        door = self.door
        if door.frame == DOOR_FRAMES - 1:
            door.frame = 0
        door.texture = door.frame
        door.frame += 1
        return True