import argparse
import logging
import sys

from .config import RenderConfig
from .logging_config import setup_logging
from .math3d import Vec3
from .scene import prepare_mesh, render_scene

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    epilog = """\
examples:
  %(prog)s                              Render models/deer.obj (or a sphere) to stdout
  %(prog)s cube.obj -o cube.ppm         Plain-text PPM file
  %(prog)s cube.obj -o cube.png --show  PNG via Pillow, then preview window
  %(prog)s --grid 2 --seed 7            5x5 instances, reproducible rotations
  %(prog)s --light 0 -1 -1 --vertex-normals
"""
    parser = argparse.ArgumentParser(
        prog="softraster",
        description="Offline software rasterizer writing a plain-text PPM image",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    d = RenderConfig()
    parser.add_argument("model", nargs="?", default=d.model_path,
                        help=f"Path to .obj file (default: {d.model_path}); "
                             "a UV sphere is used if it cannot be loaded")
    parser.add_argument("--width", type=int, default=d.width)
    parser.add_argument("--height", type=int, default=d.height)
    parser.add_argument("--fov", type=float, default=d.fov_y,
                        help=f"Vertical field of view in degrees (default: {d.fov_y})")
    parser.add_argument("--near", type=float, default=d.near)
    parser.add_argument("--far", type=float, default=d.far)
    parser.add_argument("--light", type=float, nargs=3, metavar=("X", "Y", "Z"),
                        default=tuple(d.light_dir),
                        help="Light direction (default: 0.1 0.1 -1)")
    parser.add_argument("--vertex-normals", action="store_true",
                        help="Shade each triangle from its averaged vertex normals")
    parser.add_argument("--grid", type=int, default=d.grid_radius,
                        help="Instance grid radius R, renders (2R+1)^2 copies (default: 1)")
    parser.add_argument("--spacing", type=float, default=d.grid_spacing)
    parser.add_argument("--depth", type=float, default=d.grid_depth,
                        help=f"View-space z of the instance grid (default: {d.grid_depth})")
    parser.add_argument("--target-size", type=float, default=d.target_size,
                        help="Bounding-box diagonal the mesh is scaled to")
    parser.add_argument("--sphere", type=int, nargs=2, metavar=("LAT", "LON"),
                        default=(d.sphere_lat, d.sphere_lon),
                        help="Fallback sphere segments (default: 20 20)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for instance rotations")
    parser.add_argument("-o", "--output",
                        help="Write to a file instead of stdout (.ppm/.txt as text, "
                             "other extensions through Pillow)")
    parser.add_argument("--show", action="store_true",
                        help="Show the frame in a pygame window afterwards")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Debug logging")
    parser.add_argument("--log-file", help="Also write the log to this file")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RenderConfig:
    return RenderConfig(
        width=args.width,
        height=args.height,
        fov_y=args.fov,
        near=args.near,
        far=args.far,
        light_dir=Vec3(*args.light),
        normal_source="vertex" if args.vertex_normals else "face",
        grid_radius=args.grid,
        grid_spacing=args.spacing,
        grid_depth=args.depth,
        seed=args.seed,
        model_path=args.model,
        target_size=args.target_size,
        sphere_lat=args.sphere[0],
        sphere_lon=args.sphere[1],
    )


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    try:
        config = build_config(args)
    except ValueError as e:
        logger.error("Invalid settings: %s", e)
        return 1

    mesh = prepare_mesh(config)
    fb, _stats = render_scene(mesh, config)

    if args.output:
        try:
            fb.save(args.output)
        except (OSError, ValueError) as e:
            logger.error("Could not write '%s': %s", args.output, e)
            return 1
    else:
        sys.stdout.write(fb.to_text())
        sys.stdout.write("\n")
        sys.stdout.flush()

    if args.show:
        from .preview import show
        show(fb, title=args.model or "sphere")
    return 0
