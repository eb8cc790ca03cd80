import pytest

from cubcaster.errors import CubError
from cubcaster.scene import (
    Color,
    Scene,
    check_cub_path,
    load_scene,
    parse_color,
    parse_scene,
    parse_texture,
)

HEADER = [
    "NO ./textures/north.xpm",
    "SO ./textures/south.xpm",
    "WE ./textures/west.xpm",
    "EA ./textures/east.xpm",
    "",
    "F 220,100,0",
    "C 225,30,0",
    "",
]

MAP = [
    "111111",
    "100001",
    "10N001",
    "111111",
]


def test_parse_color_plain():
    assert parse_color("220,100,0") == Color(220, 100, 0)


def test_parse_color_with_blanks():
    assert parse_color("  10 , 20 ,\t30 ") == Color(10, 20, 30)


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "colors informations are missing"),
        ("   ", "colors informations are missing"),
        ("256,0,0", "incorrect color number"),
        ("0,0,999", "incorrect color number"),
        ("1234,0,0", "colors informations are not appropriate"),
        ("a,1,2", "colors informations are not appropriate"),
        ("10;20;30", "colors informations are not appropriate"),
        ("10 x,20,30", "colors informations are not appropriate"),
        ("10,20", "not enough colors informations"),
        ("10", "not enough colors informations"),
        ("10,", "not enough colors informations"),
        ("10,20,30,40", "too much colors informations"),
        ("10,20,30 40", "too much colors informations"),
    ],
)
def test_parse_color_errors(text, message):
    with pytest.raises(CubError, match=message):
        parse_color(text)


def test_parse_texture_strips_leading_blanks():
    assert parse_texture(" \t./textures/a.xpm") == "./textures/a.xpm"


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "texture path is missing"),
        ("  \t", "texture path is missing"),
        (" a.xpm b.xpm", "texture argument is not appropriate"),
        (" a.xpm ", "texture argument is not appropriate"),
    ],
)
def test_parse_texture_errors(text, message):
    with pytest.raises(CubError, match=message):
        parse_texture(text)


def test_empty_scene_is_incomplete():
    assert Scene().is_complete() is False


def test_parse_scene_full():
    scene = parse_scene(HEADER + MAP)
    assert scene.north == "./textures/north.xpm"
    assert scene.south == "./textures/south.xpm"
    assert scene.west == "./textures/west.xpm"
    assert scene.east == "./textures/east.xpm"
    assert scene.floor == Color(220, 100, 0)
    assert scene.ceiling == Color(225, 30, 0)
    assert scene.rows == MAP
    assert scene.is_complete()


def test_parse_scene_strips_newlines_and_keeps_indentation():
    lines = [line + "\n" for line in HEADER] + ["  111\n", "  101\n", "  111"]
    scene = parse_scene(lines)
    assert scene.rows == ["  111", "  101", "  111"]
    assert scene.floor == Color(220, 100, 0)


def test_parse_scene_elements_in_any_order_with_indentation():
    scene = parse_scene(list(reversed(HEADER)) + ["   F_IGNORED"[:0]] + MAP)
    assert scene.rows == MAP
    indented = parse_scene(["  " + line for line in HEADER] + MAP)
    assert indented.east == "./textures/east.xpm"
    assert indented.ceiling == Color(225, 30, 0)


def test_map_before_identifiers():
    with pytest.raises(CubError, match="it miss identifier arguments before the map"):
        parse_scene(HEADER[:3] + MAP)


def test_empty_line_inside_map():
    with pytest.raises(CubError, match="map cannot have empty line"):
        parse_scene(HEADER + MAP[:2] + [""] + MAP[2:])


def test_element_after_map():
    with pytest.raises(CubError, match="map border is incorrect"):
        parse_scene(HEADER + MAP + ["F 1,2,3"])


def test_unknown_element():
    with pytest.raises(CubError, match="scene element is not appropriate"):
        parse_scene(["X something"])


@pytest.mark.parametrize("line", ["NOX path", "NA path", "F10,2,3", "C", "EA"])
def test_bad_identifier(line):
    with pytest.raises(CubError, match="identifier argument is not appropriate"):
        parse_scene([line])


def test_duplicate_texture():
    with pytest.raises(CubError, match="duplicate texture element"):
        parse_scene(["NO a.xpm", "NO b.xpm"])


def test_duplicate_color():
    with pytest.raises(CubError, match="duplicate colors element"):
        parse_scene(["C 1,2,3", "C 4,5,6"])


def test_scene_without_map_has_no_rows():
    scene = parse_scene(HEADER)
    assert scene.rows == []
    assert scene.is_complete()


def test_load_scene_round_trip(tmp_path):
    path = tmp_path / "level.cub"
    path.write_text("\n".join(HEADER + MAP) + "\n", encoding="utf-8")
    assert load_scene(path) == parse_scene(HEADER + MAP)


def test_load_scene_missing_file(tmp_path):
    with pytest.raises(CubError, match="map file is not open"):
        load_scene(tmp_path / "absent.cub")


def test_check_cub_path_accepts_existing_file(tmp_path):
    path = tmp_path / "level.cub"
    path.write_text("", encoding="utf-8")
    assert check_cub_path(str(path)) == path


@pytest.mark.parametrize("name", ["level.txt", "level.cu", "cub", "level.cub.bak"])
def test_check_cub_path_wrong_suffix(tmp_path, name):
    path = tmp_path / name
    path.write_text("", encoding="utf-8")
    with pytest.raises(CubError, match="map file is incorrect"):
        check_cub_path(path)


def test_check_cub_path_missing_file(tmp_path):
    with pytest.raises(CubError, match="map file is not open"):
        check_cub_path(tmp_path / "absent.cub")


def test_check_cub_path_directory(tmp_path):
    folder = tmp_path / "maps.cub"
    folder.mkdir()
    with pytest.raises(CubError, match="map file is not open"):
        check_cub_path(folder)