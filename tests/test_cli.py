from PIL import Image

from softraster.cli import build_config, main, parse_args
from softraster.math3d import Vec3


def small_args(tmp_path, *extra):
    return [str(tmp_path / "missing.obj"), "--width", "32", "--height", "24",
            "--sphere", "4", "6", "--seed", "1", *extra]


def test_writes_text_image_to_stdout(tmp_path, capsys):
    assert main(small_args(tmp_path)) == 0
    out = capsys.readouterr().out
    assert out.startswith("P3\n32 24\n255\n")
    assert out.endswith(" \n\n\n")
    rows = out.split("\n")[3:3 + 24]
    assert all(len(row.split()) == 32 * 3 for row in rows)
    assert any(v != "0" for row in rows for v in row.split())


def test_writes_png_file(tmp_path, capsys):
    target = tmp_path / "frame.png"
    assert main(small_args(tmp_path, "-o", str(target))) == 0
    assert capsys.readouterr().out == ""
    with Image.open(target) as img:
        assert img.size == (32, 24)


def test_invalid_settings_exit_with_error(tmp_path, capsys):
    assert main(small_args(tmp_path, "--near", "5", "--far", "1")) == 1
    assert capsys.readouterr().out == ""


def test_unwritable_output_exits_with_error(tmp_path):
    target = tmp_path / "no" / "such" / "dir" / "frame.ppm"
    assert main(small_args(tmp_path, "-o", str(target))) == 1


def test_build_config_from_args():
    args = parse_args(["m.obj", "--light", "0", "-1", "-1", "--vertex-normals",
                       "--grid", "2", "--fov", "60"])
    config = build_config(args)
    assert config.model_path == "m.obj"
    assert config.light_dir == Vec3(0.0, -1.0, -1.0)
    assert config.normal_source == "vertex"
    assert config.grid_radius == 2
    assert config.fov_y == 60.0
    assert config.width == 800 and config.height == 600


def test_mesh_through_camera_plane_renders(tmp_path):
    model = tmp_path / "tri.obj"
    model.write_text("v -1 -1 0\nv 1 1 0\nv 0 0 0\nf 1 2 3\n", encoding="utf-8")
    target = tmp_path / "frame.ppm"
    argv = [str(model), "--width", "16", "--height", "12", "--grid", "0",
            "--depth", "0", "--seed", "1", "-o", str(target)]
    assert main(argv) == 0
    assert target.read_text(encoding="ascii").startswith("P3\n16 12\n255\n")


def test_stdout_has_one_more_newline_than_file(tmp_path, capsys):
    target = tmp_path / "frame.ppm"
    assert main(small_args(tmp_path, "-o", str(target))) == 0
    capsys.readouterr()
    assert main(small_args(tmp_path)) == 0
    assert capsys.readouterr().out == target.read_text(encoding="ascii") + "\n"
