"""The game: loading a scene, reacting to input and the window loop."""

from __future__ import annotations

import sys
import time
from array import array
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from cubcaster.errors import CubError
from cubcaster.mapcheck import validate_map
from cubcaster.raycast import FrameBuffer, Renderer
from cubcaster.scene import check_cub_path, load_scene
from cubcaster.world import Key, World
from cubcaster.xpm import XpmError, XpmImage, read_xpm_file

TITLE = "cub3D_map"
# Door animation frames, relative to the working directory.
DOOR_TEXTURES = (
    "./textures/Door_4.xpm",
    "./textures/Door_3.xpm",
    "./textures/Door_2.xpm",
    "./textures/Door_1.xpm",
)
_FRAME_RATE = 60
_KEY_REPEAT_DELAY = 200
_KEY_REPEAT_INTERVAL = 30


def _load_texture(path: str | Path | None) -> XpmImage:
    if path is None:
        raise CubError("image not loaded")
    try:
        return read_xpm_file(path)
    except XpmError as exc:
        raise CubError("image not loaded") from exc


def _to_rgbx(frame: FrameBuffer) -> bytes:
    """Pixels of the frame as R, G, B, padding bytes."""
    packed = array(
        "I",
        (
            ((value >> 16) & 0xFF) | (value & 0xFF00) | ((value & 0xFF) << 16)
            for value in frame.pixels
        ),
    )
    if sys.byteorder == "big":
        packed.byteswap()
    return packed.tobytes()


@dataclass
class Game:
    """A running game: the world, how it is drawn and whether it needs drawing."""

    world: World
    renderer: Renderer
    running: bool = True
    dirty: bool = True

    @classmethod
    def load(cls, path: str | Path) -> Game:
        """Check and read a scene file, validate its map and load every texture."""
        scene = load_scene(check_cub_path(path))
        player = validate_map(scene.rows)
        north, south, west, east = (
            _load_texture(texture)
            for texture in (scene.north, scene.south, scene.west, scene.east)
        )
        doors = [_load_texture(texture) for texture in DOOR_TEXTURES]
        renderer = Renderer(
            north=north,
            south=south,
            west=west,
            east=east,
            door_frames=doors,
            floor=scene.floor,
            ceiling=scene.ceiling,
        )
        return cls(world=World.from_scene(scene, player), renderer=renderer)

    def handle_key(self, key: int) -> bool:
        """React to a key press; True when the view changed.

        Escape stops the game.
        """
        if key == Key.ESCAPE:
            self.running = False
            return False
        if self.world.rotate(key) or self.world.move(key):
            self.dirty = True
            return True
        if key == Key.SPACE and self.world.try_open_door(time.monotonic()):
            self.dirty = True
            return True
        return False

    def tick(self, now: float) -> bool:
        """Advance the door animation and close the door when due; True if redrawn."""
        animated = self.world.advance_sprite(now)
        closed = self.world.update_door(now)
        if animated or closed:
            self.dirty = True
            return True
        return False


def run(path: str | Path) -> None:
    """Load the scene and play it in a window until it is closed."""
    game = Game.load(path)

    import pygame

    pygame.init()
    try:
        size = (game.renderer.width, game.renderer.height)
        screen = pygame.display.set_mode(size)
        pygame.display.set_caption(TITLE)
        pygame.key.set_repeat(_KEY_REPEAT_DELAY, _KEY_REPEAT_INTERVAL)
        clock = pygame.time.Clock()
        keys = {
            pygame.K_ESCAPE: Key.ESCAPE,
            pygame.K_LEFT: Key.LEFT,
            pygame.K_RIGHT: Key.RIGHT,
            pygame.K_w: Key.W,
            pygame.K_a: Key.A,
            pygame.K_s: Key.S,
            pygame.K_d: Key.D,
            pygame.K_SPACE: Key.SPACE,
        }
        while game.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.running = False
                elif event.type == pygame.KEYDOWN:
                    key = keys.get(event.key)
                    if key is not None:
                        game.handle_key(key)
                elif event.type == pygame.MOUSEMOTION:
                    if game.world.turn_with_mouse(event.pos[0]):
                        game.dirty = True
            if not game.running:
                break
            game.tick(time.monotonic())
            if game.dirty:
                frame = game.renderer.render(game.world)
                game.dirty = False
                surface = pygame.image.frombuffer(
                    _to_rgbx(frame), (frame.width, frame.height), "RGBX"
                )
                screen.blit(surface, (0, 0))
                pygame.display.flip()
            clock.tick(_FRAME_RATE)
    finally:
        pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry point: play the scene file named by the single argument."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        if len(args) != 1:
            raise CubError("wrong number of arguments")
        run(args[0])
    except CubError as exc:
        print(f"Error\n{exc.message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())