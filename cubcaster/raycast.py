"""Ray casting of the map into a frame buffer, with textured walls and a minimap."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from cubcaster.scene import Color
from cubcaster.world import FOV, World, row_length
from cubcaster.xpm import XpmImage

TILE = 64
WIDTH = 800
HEIGHT = 600
MINIMAP_SIZE = 400

DARK_PINK = 0xAA336A
DARK_PURPLE = 0x301934
PASTEL_PURPLE = 0xB39EB5
BRIGHT_BLUE = 0x0096FF

_BLOCKING = ("1", "D")
_MIN_DISTANCE = 1e-9
_HORIZONTAL_NUDGE = 0.001
_VERTICAL_NUDGE = 0.00001


@dataclass(frozen=True)
class RayHit:
    """Where a ray stopped.

    ``distance`` is already corrected for the angle to the view direction;
    ``x`` and ``y`` are in pixel units (cells times TILE).  ``vertical`` is
    true when the ray met a vertical grid line.
    """

    distance: float
    vertical: bool
    x: float
    y: float


class FrameBuffer:
    """A width by height grid of 32-bit pixel values, initially zero."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"frame size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = [0] * (width * height)

    def put(self, x: int, y: int, color: int) -> None:
        """Set a pixel; points outside the frame are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y * self.width + x] = color & 0xFFFFFFFF

    def get(self, x: int, y: int) -> int:
        """Return the pixel at (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        return self.pixels[y * self.width + x]


def adjust_angle(angle: float) -> float:
    """Bring an angle in degrees into (0, 360]."""
    result = math.fmod(angle, 360.0)
    if result <= 0.0:
        result += 360.0
    return result


def projected_up(angle: float) -> bool:
    """True when the ray points up the screen (whole degrees in [0, 180))."""
    return 0 <= int(angle) < 180


def projected_left(angle: float) -> bool:
    """True when the ray points left (whole degrees in [90, 270))."""
    return 90 <= int(angle) < 270


def pack_rgb(color: Color) -> int:
    """Pack a floor or ceiling colour as an opaque 0xFFRRGGBB pixel."""
    return 0xFF000000 | (color.red << 16) | (color.green << 8) | color.blue


def texture_pixel(texture: XpmImage | None, x: int, y: int) -> int:
    """Pixel of a texture, or 0 when there is no texture or the point is outside."""
    if texture is None or not (0 <= x < texture.width and 0 <= y < texture.height):
        return 0
    return texture.pixel(x, y)


def _divide(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.inf if numerator >= 0 else -math.inf
    return numerator / denominator


def _c_mod(value: float, modulus: float) -> int:
    """Remainder truncated toward zero, with the sign of the dividend."""
    return int(math.fmod(value, modulus))


def _stops(grid: Sequence[str], x: float, y: float, first_row: int = 0) -> bool:
    """True when the point lies in a wall or door, or outside the map."""
    if not (math.isfinite(x) and math.isfinite(y)):
        return True
    row, col = int(y / TILE), int(x / TILE)
    if row < first_row or col < 0 or not x / TILE < row_length(grid, row):
        return True
    return grid[row][col] in _BLOCKING


def _march(
    grid: Sequence[str], x: float, y: float, dx: float, dy: float, first_row: int
) -> tuple[float, float]:
    """Step along grid lines from the first crossing until the ray stops."""
    if _stops(grid, x, y, first_row):
        return x, y
    x += dx
    y += dy
    while not _stops(grid, x, y):
        x += dx
        y += dy
    return x, y


def cast_ray(
    grid: Sequence[str], px: float, py: float, angle: float, view_angle: float
) -> RayHit:
    """Cast one ray from the player at (px, py), in cells, toward ``angle`` degrees."""
    ox, oy = px * TILE, py * TILE
    tangent = math.tan(math.radians(angle))
    up, left = projected_up(angle), projected_left(angle)

    base_y = math.floor(oy / TILE) * TILE
    if up:
        hy, hdy = base_y - _HORIZONTAL_NUDGE, -TILE
    else:
        hy, hdy = base_y + TILE, TILE
    hx = ox + _divide(oy - hy, tangent)
    hdx = abs(_divide(TILE, tangent))
    if left:
        hdx = -hdx
    hx, hy = _march(grid, hx, hy, hdx, hdy, 0)

    base_x = math.floor(ox / TILE) * TILE
    if left:
        vx, vdx = base_x - _VERTICAL_NUDGE, -TILE
    else:
        vx, vdx = base_x + TILE, TILE
    vy = oy + (ox - vx) * tangent
    vdy = abs(TILE * tangent)
    if up:
        vdy = -vdy
    vx, vy = _march(grid, vx, vy, vdx, vdy, 1)

    dist_h = math.hypot(ox - hx, oy - hy)
    dist_v = math.hypot(ox - vx, oy - vy)
    vertical = dist_h > dist_v
    if vertical:
        distance, x, y = dist_v, vx, vy
    else:
        distance, x, y = dist_h, hx, hy
    distance *= math.cos(math.radians(angle - view_angle))
    return RayHit(distance, vertical, x, y)


def _fill_square(frame: FrameBuffer, x: int, y: int, size: int, color: int) -> None:
    for j in range(size):
        for i in range(size):
            frame.put(x + i, y + j, color)


def draw_minimap(
    frame: FrameBuffer, grid: Sequence[str], player_x: float, player_y: float
) -> None:
    """Draw the map and the player as squares in the top-left corner of the frame."""
    rows = len(grid)
    cols = max((len(row) for row in grid), default=0)
    if rows == 0 or cols == 0:
        raise ValueError("cannot draw an empty map")
    scale = min(MINIMAP_SIZE // rows, MINIMAP_SIZE // cols)
    for j, row in enumerate(grid):
        for i, cell in enumerate(row):
            if cell == "D":
                color = DARK_PINK
            elif cell == "1":
                color = DARK_PURPLE
            elif cell != " ":
                color = PASTEL_PURPLE
            else:
                continue
            _fill_square(frame, i * scale, j * scale, scale, color)
    _fill_square(
        frame,
        int((player_x - 0.5) * scale),
        int((player_y - 0.5) * scale),
        scale,
        BRIGHT_BLUE,
    )


@dataclass
class Renderer:
    """Draws a world into its frame with wall, door, floor and ceiling looks."""

    north: XpmImage
    south: XpmImage
    west: XpmImage
    east: XpmImage
    door_frames: Sequence[XpmImage]
    floor: Color
    ceiling: Color
    width: int = WIDTH
    height: int = HEIGHT
    show_minimap: bool = True
    frame: FrameBuffer = field(init=False)

    def __post_init__(self) -> None:
        self.frame = FrameBuffer(self.width, self.height)

    def render(self, world: World) -> FrameBuffer:
        """Cast one ray per column across the field of view and draw the frame."""
        angle = world.angle + FOV / 2
        if angle > 360:
            angle -= 360
        step = FOV / self.width
        for x in range(self.width):
            angle = adjust_angle(angle)
            hit = cast_ray(world.grid, world.x, world.y, angle, world.angle)
            self.draw_column(world, x, hit, angle)
            angle -= step
        if self.show_minimap:
            draw_minimap(self.frame, world.grid, world.x, world.y)
        return self.frame

    def draw_column(self, world: World, x: int, hit: RayHit, angle: float) -> None:
        """Draw ceiling, textured wall and floor for screen column ``x``."""
        distance = max(hit.distance, _MIN_DISTANCE)
        projection = (self.width // 2) / math.tan(math.radians(FOV / 2))
        wall = math.ceil(TILE / distance * projection)
        half = self.height // 2
        ceiling_floor = half - wall / 2
        first = int(ceiling_floor)
        top = self.height - int(wall + ceiling_floor)
        wall_end = int(wall + ceiling_floor)
        low = int(ceiling_floor)
        ceiling_color = pack_rgb(self.ceiling)
        floor_color = pack_rgb(self.floor)

        i, y = self.height, 0
        while y <= self.height:
            if i >= top:
                self.frame.put(x, y, ceiling_color)
            if low <= i <= wall_end:
                y, i = self._draw_wall(world, x, y, i, hit, angle, wall, first)
            if 0 <= i <= low:
                self.frame.put(x, y, floor_color)
            i -= 1
            y += 1

    def _wall_texture(self, angle: float, vertical: bool) -> XpmImage:
        if vertical:
            return self.east if projected_left(angle) else self.west
        return self.south if projected_up(angle) else self.north

    def _texture_for(self, world: World, hit: RayHit, angle: float) -> XpmImage:
        cell = ""
        if math.isfinite(hit.x) and math.isfinite(hit.y):
            row, col = int(hit.y / TILE), int(hit.x / TILE)
            if 0 <= col < row_length(world.grid, row):
                cell = world.grid[row][col]
        if cell == "1":
            return self._wall_texture(angle, hit.vertical)
        return self.door_frames[world.door.texture]

    def _draw_wall(
        self,
        world: World,
        x: int,
        y: int,
        i: int,
        hit: RayHit,
        angle: float,
        wall: int,
        first: int,
    ) -> tuple[int, int]:
        along = hit.y if hit.vertical else hit.x
        offset = math.fmod(along, TILE) if math.isfinite(along) else 0.0
        texture = self._texture_for(world, hit, angle)
        tex_x = offset / TILE * texture.width
        step = texture.height / wall
        tex_y = (first - self.height // 2 + wall / 2) * step
        if wall >= self.height:
            tex_y = ((wall - self.height) / 2) * step
        column = _c_mod(tex_x, texture.width)
        while first <= y <= first + wall and y < self.height:
            row = _c_mod(int(tex_y), texture.height)
            self.frame.put(x, y, texture_pixel(texture, column, row))
            tex_y += step
            y += 1
            i -= 1
        return y, i