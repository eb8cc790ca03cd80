# cubcaster

cubcaster is a small first-person raycaster. It reads a `.cub` scene file
that describes the wall textures, the floor and ceiling colours and a grid
map, then lets you walk around the map in a pygame window. It draws
textured walls and animated doors that open and close, and shows a minimap
in the top-left corner.

## Installing

```
pip install .
```

## Running

```
cubcaster path/to/level.cub
```

The command takes exactly one argument: a readable file whose name ends in
`.cub`. If the file, the scene inside it or one of the textures is wrong,
it prints `Error` and a one-line reason, and exits with status 1.

Texture paths in the scene are opened as written, so relative paths are
taken from the current working directory. The door animation frames are
always read from `./textures/Door_1.xpm` to `./textures/Door_4.xpm`
relative to the working directory; they must exist for the game to start.

### Controls

| Key          | Action                                          |
|--------------|-------------------------------------------------|
| `W` `S`      | move forward / backward                         |
| `A` `D`      | step left / right                               |
| `←` `→`      | turn left / right by 5 degrees                  |
| mouse motion | turn                                            |
| `Space`      | open a closed door within two cells and in view |
| `Esc`        | quit                                            |

Only one door is open at a time. An open door closes again once at least
five seconds have passed since it opened and you are no longer standing
in its cell.

## The `.cub` format

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm

F 220,100,0
C 225,30,0

11111111
10000001
11D11111
10000N01
11111111
```

* `NO`, `SO`, `WE`, `EA` name the XPM texture for each wall direction.
  Each may appear only once and takes a single path with no blanks in it.
* `F` and `C` give the floor and ceiling colours as `red,green,blue`,
  with each number from 0 to 255 and at most three digits.
* All six elements must come before the map. Blank lines are allowed
  between them but not inside the map, and nothing may follow the map.
* In the map, `1` is a wall, `0` is floor, `D` is a door, and one of
  `N`, `S`, `E`, `W` marks the player's single start and the way they face.
  Spaces are outside the map. The map must be closed by walls, and neither
  the player nor a door may be on its first or last row.
* A door must sit between two walls, with open floor on the other two
  sides.

## Using it as a library

The parts of the program can be used on their own:

```python
from cubcaster.scene import load_scene, parse_color
from cubcaster.mapcheck import validate_map
from cubcaster.xpm import read_xpm_file
from cubcaster.colornames import lookup_color

scene = load_scene("level.cub")
player = validate_map(scene.rows)
print(player)          # Player(direction='N', x=5.5, y=3.5, angle=90.0)

print(parse_color("255, 128,0"))
print(hex(lookup_color("cornflower blue")))

image = read_xpm_file("textures/north.xpm")
print(image.width, image.height, hex(image.pixel(0, 0)))
```

* `cubcaster.scene` — `parse_scene`, `load_scene`, `parse_color`,
  `parse_texture`, `check_cub_path`, and the `Scene` and `Color` classes.
* `cubcaster.mapcheck` — `validate_map` and the `Player` it returns.
* `cubcaster.xpm` — `read_xpm_file`, `xpm_from_text` and `parse_xpm`
  return an `XpmImage` of 32-bit pixel values; transparent (`None`)
  colours become `0xFF000000`.
* `cubcaster.colornames` — `lookup_color` and `text_to_rgb` for XPM
  colour names and `#RRGGBB` values.
* `cubcaster.world` — the `World` state: movement, turning and doors.
* `cubcaster.raycast` — `cast_ray`, `draw_minimap`, `FrameBuffer` and
  the `Renderer` that draws a `World` into an 800×600 frame.
* `cubcaster.app` — `Game`, `run` and the `main` command entry point.

Problems in a scene, map or texture raise `cubcaster.errors.CubError`;
problems in an XPM image raise `cubcaster.xpm.XpmError`.

## What it does not do

There are no enemies, weapons, sound or sprites other than the door
animation. Textures must be XPM files; other image formats are not read.

## Running the tests

```
pip install .[test]
pytest
```