import math

import pytest

from cubcaster.raycast import (
    BRIGHT_BLUE,
    DARK_PINK,
    DARK_PURPLE,
    HEIGHT,
    MINIMAP_SIZE,
    PASTEL_PURPLE,
    TILE,
    WIDTH,
    FrameBuffer,
    Renderer,
    RayHit,
    adjust_angle,
    cast_ray,
    draw_minimap,
    pack_rgb,
    projected_left,
    projected_up,
    texture_pixel,
)
from cubcaster.scene import Color
from cubcaster.world import World
from cubcaster.xpm import XpmImage

ROOM = ["11111", "10001", "10001", "10001", "11111"]
DOOR_HALL = ["111111", "100D01", "111111"]
OPEN_HALL = ["111111", "100001", "111111"]

NORTH, SOUTH, WEST, EAST = 0x101010, 0x202020, 0x303030, 0x404040
DOOR_COLORS = (0x505050, 0x606060, 0x707070, 0x808080)
FLOOR = Color(10, 20, 30)
CEILING = Color(40, 50, 60)


def solid(color, size=2):
    return XpmImage(size, size, tuple(tuple(color for _ in range(size)) for _ in range(size)))


def make_renderer(width=80, height=60, show_minimap=False):
    return Renderer(
        north=solid(NORTH),
        south=solid(SOUTH),
        west=solid(WEST),
        east=solid(EAST),
        door_frames=[solid(c) for c in DOOR_COLORS],
        floor=FLOOR,
        ceiling=CEILING,
        width=width,
        height=height,
        show_minimap=show_minimap,
    )


@pytest.mark.parametrize("angle", [-725.5, -30.0, 0.0, 0.25, 90.0, 359.9, 360.0, 370.0, 1000.0])
def test_adjust_angle_range_and_congruence(angle):
    result = adjust_angle(angle)
    assert 0.0 < result <= 360.0
    assert math.isclose(math.fmod(result - angle, 360.0) % 360.0 % 360.0, 0.0, abs_tol=1e-9) or math.isclose(
        (result - angle) % 360.0, 360.0, abs_tol=1e-9
    )


def test_adjust_angle_zero_and_full_turn():
    assert adjust_angle(0.0) == 360.0
    assert adjust_angle(360.0) == 360.0


def test_projected_up_uses_whole_degrees():
    assert projected_up(0.0) is True
    assert projected_up(179.9) is True
    assert projected_up(180.0) is False
    assert projected_up(360.0) is False


def test_projected_left_uses_whole_degrees():
    assert projected_left(90.0) is True
    assert projected_left(89.9) is False
    assert projected_left(269.5) is True
    assert projected_left(270.0) is False


def test_pack_rgb_is_opaque():
    assert pack_rgb(Color(1, 2, 3)) == 0xFF010203
    assert pack_rgb(Color(0, 0, 0)) >> 24 == 0xFF


def test_texture_pixel_inside_and_outside():
    texture = XpmImage(2, 1, ((0x123456, 0x654321),))
    assert texture_pixel(texture, 1, 0) == 0x654321
    assert texture_pixel(texture, 2, 0) == 0
    assert texture_pixel(texture, -1, 0) == 0
    assert texture_pixel(None, 0, 0) == 0


def test_frame_buffer_round_trip_and_mask():
    frame = FrameBuffer(4, 3)
    frame.put(3, 2, 0x00ABCDEF)
    frame.put(0, 0, -1)
    assert frame.get(3, 2) == 0x00ABCDEF
    assert frame.get(0, 0) == 0xFFFFFFFF


def test_frame_buffer_ignores_out_of_range_put():
    frame = FrameBuffer(4, 3)
    frame.put(4, 0, 0x111111)
    frame.put(0, -1, 0x111111)
    assert frame.pixels == [0] * 12


def test_frame_buffer_get_out_of_range_raises():
    frame = FrameBuffer(4, 3)
    with pytest.raises(IndexError):
        frame.get(0, 3)


def test_frame_buffer_rejects_empty_size():
    with pytest.raises(ValueError):
        FrameBuffer(0, 5)


def test_cast_ray_east_hits_vertical_wall():
    hit = cast_ray(ROOM, 2.5, 2.5, 360.0, 360.0)
    assert hit.vertical is True
    assert hit.distance == pytest.approx(1.5 * TILE)
    assert hit.x == pytest.approx(4 * TILE)


def test_cast_ray_west_hits_vertical_wall():
    hit = cast_ray(ROOM, 2.5, 2.5, 180.0, 180.0)
    assert hit.vertical is True
    assert hit.x == pytest.approx(TILE, abs=1e-3)
    assert hit.distance == pytest.approx(1.5 * TILE, abs=1e-3)


def test_cast_ray_north_hits_horizontal_wall():
    hit = cast_ray(ROOM, 2.5, 2.5, 90.0, 90.0)
    assert hit.vertical is False
    assert hit.y == pytest.approx(TILE, abs=0.01)
    assert hit.distance == pytest.approx(1.5 * TILE, abs=0.01)


def test_cast_ray_corrects_for_view_angle():
    straight = cast_ray(ROOM, 2.5, 2.5, 30.0, 30.0)
    tilted = cast_ray(ROOM, 2.5, 2.5, 30.0, 10.0)
    assert tilted.distance == pytest.approx(straight.distance * math.cos(math.radians(20.0)))
    assert (tilted.x, tilted.y) == (straight.x, straight.y)


def test_cast_ray_stops_at_closed_door_and_passes_open_one():
    closed = cast_ray(DOOR_HALL, 1.5, 1.5, 360.0, 360.0)
    opened = cast_ray(OPEN_HALL, 1.5, 1.5, 360.0, 360.0)
    assert closed.x == pytest.approx(3 * TILE)
    assert opened.x == pytest.approx(5 * TILE)
    assert opened.distance > closed.distance


def test_draw_minimap_colours_cells_and_player():
    frame = FrameBuffer(WIDTH, HEIGHT)
    grid = ["11111", "10D01", "10001", "1 001", "11111"]
    scale = MINIMAP_SIZE // len(grid)
    draw_minimap(frame, grid, 3.5, 2.5)
    assert frame.get(1, 1) == DARK_PURPLE
    assert frame.get(2 * scale + 1, scale + 1) == DARK_PINK
    assert frame.get(scale + 1, scale + 1) == PASTEL_PURPLE
    assert frame.get(scale + 1, 3 * scale + 1) == 0
    assert frame.get(3 * scale + 1, 2 * scale + 1) == BRIGHT_BLUE
    assert frame.get(MINIMAP_SIZE + 1, 1) == 0


def test_draw_minimap_rejects_empty_map():
    with pytest.raises(ValueError):
        draw_minimap(FrameBuffer(10, 10), [], 0.5, 0.5)


def test_render_facing_east_draws_west_texture_ceiling_and_floor():
    renderer = make_renderer()
    world = World(grid=list(ROOM), x=2.5, y=2.5, angle=0.0)
    frame = renderer.render(world)
    middle = renderer.width // 2
    assert frame.get(middle, renderer.height // 2) == WEST
    assert frame.get(middle, 0) == pack_rgb(CEILING)
    assert frame.get(middle, renderer.height - 1) == pack_rgb(FLOOR)


def test_render_facing_north_draws_south_texture():
    renderer = make_renderer()
    world = World(grid=list(ROOM), x=2.5, y=2.5, angle=90.0)
    frame = renderer.render(world)
    assert frame.get(renderer.width // 2, renderer.height // 2) == SOUTH


def test_render_door_uses_current_door_frame():
    renderer = make_renderer()
    world = World(grid=list(DOOR_HALL), x=1.5, y=1.5, angle=0.0)
    frame = renderer.render(world)
    centre = (renderer.width // 2, renderer.height // 2)
    assert frame.get(*centre) == DOOR_COLORS[world.door.texture]
    world.door.texture = 0
    frame = renderer.render(world)
    assert frame.get(*centre) == DOOR_COLORS[0]


def test_render_with_minimap_draws_it():
    renderer = make_renderer(width=80, height=60, show_minimap=True)
    world = World(grid=list(ROOM), x=2.5, y=2.5, angle=0.0)
    frame = renderer.render(world)
    assert frame.get(0, 0) == DARK_PURPLE


def test_draw_column_nearer_walls_are_taller():
    renderer = make_renderer()
    world = World(grid=list(ROOM), x=2.5, y=2.5, angle=0.0)

    def wall_pixels(distance):
        hit = RayHit(distance=distance, vertical=True, x=4 * TILE, y=2.5 * TILE)
        renderer.draw_column(world, 3, hit, 360.0)
        return sum(renderer.frame.get(3, y) == WEST for y in range(renderer.height))

    near = wall_pixels(1.0 * TILE)
    far = wall_pixels(3.0 * TILE)
    assert near > far > 0


def test_draw_column_from_cast_ray():
    renderer = make_renderer()
    world = World(grid=list(ROOM), x=2.5, y=2.5, angle=90.0)
    hit = cast_ray(world.grid, world.x, world.y, 90.0, world.angle)
    renderer.draw_column(world, 5, hit, 90.0)
    assert renderer.frame.get(5, renderer.height // 2) == SOUTH
    assert renderer.frame.get(5, 0) == pack_rgb(CEILING)