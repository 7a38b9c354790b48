"""Command line interface.

Usage:
    phongtracer WIDTH HEIGHT INPUT OUTPUT [options]
    python -m phongtracer WIDTH HEIGHT INPUT OUTPUT [options]

Arguments:
    WIDTH               Image width in pixels (columns)
    HEIGHT              Image height in pixels (rows)
    INPUT               JSON scene file
    OUTPUT              Output image path (.ppm by default, or any extension
                        Pillow can write)

Options:
    --shadow-mode MODE  dim (default) or exclude
    --shadow-test TEST  parametric (default) or segment occlusion test
    --falloff MODEL     linear (default) or quadratic radial falloff
    --exponent MODE     exact (default) or legacy repeated squaring
    --arch ARCH         auto (default, GPU with CPU fallback), cpu or gpu
    --batch-rows ROWS   Rows per progress update (default: whole image)
    --quiet             Suppress progress output

Example:
    phongtracer 640 480 examples/scenes/demo.json demo.ppm --shadow-mode exclude
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Sequence

import taichi as ti

from phongtracer import __version__
from phongtracer.core.errors import PhongTracerError
from phongtracer.core.settings import RenderSettings


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="phongtracer",
        description="Render a JSON scene of spheres, cylinders and planes with Phong shading.",
    )
    parser.add_argument("width", type=_positive_int, help="Image width in pixels")
    parser.add_argument("height", type=_positive_int, help="Image height in pixels")
    parser.add_argument("input", help="JSON scene file")
    parser.add_argument("output", help="Output image path (PPM unless the extension says otherwise)")
    parser.add_argument(
        "--shadow-mode",
        choices=("dim", "exclude"),
        default="dim",
        help="What an occluded light does (default: dim)",
    )
    parser.add_argument(
        "--shadow-test",
        choices=("parametric", "segment"),
        default="parametric",
        help="Which shadow-ray hits occlude: t < |Rdn| or only those before the light "
        "(default: parametric)",
    )
    parser.add_argument(
        "--falloff",
        choices=("linear", "quadratic"),
        default="linear",
        help="Radial falloff model (default: linear)",
    )
    parser.add_argument(
        "--exponent",
        choices=("exact", "legacy"),
        default="exact",
        help="Exponentiation used for specular and spotlight terms (default: exact)",
    )
    parser.add_argument(
        "--arch",
        choices=("auto", "cpu", "gpu"),
        default="auto",
        help="Taichi backend (default: auto, GPU with CPU fallback)",
    )
    parser.add_argument(
        "--batch-rows",
        type=int,
        default=0,
        help="Rows per progress update (default: whole image)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def init_taichi(arch: str, quiet: bool = False) -> None:
    """Initialize Taichi for the requested backend.

    "auto" tries the GPU first and falls back to the CPU.
    """
    if arch == "cpu":
        ti.init(arch=ti.cpu)
    elif arch == "gpu":
        ti.init(arch=ti.gpu)
    else:
        try:
            ti.init(arch=ti.gpu)
            if not quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            if not quiet:
                print("Using CPU backend")


def run(args: argparse.Namespace) -> int:
    """Render a scene file to an image.

    Taichi must already be initialized.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Process exit status (0 on success, 1 on error).
    """
    # Lazy imports to allow Taichi initialization first
    from phongtracer.core.renderer import render_scene
    from phongtracer.output.export import save_image
    from phongtracer.scene.loader import load_scene

    quiet = args.quiet
    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            print(
                f"\r  Progress: {current}/{target} rows ({progress_pct:.1f}%) - {elapsed:.2f}s",
                end="",
                flush=True,
            )

    try:
        settings = RenderSettings(
            shadow_mode=args.shadow_mode,
            shadow_test=args.shadow_test,
            radial_falloff=args.falloff,
            exponent_mode=args.exponent,
        )
        scene = load_scene(args.input)
        if not quiet:
            print(
                f"Loaded {args.input}: {len(scene.surfaces)} surfaces, {len(scene.lights)} lights"
            )
            print(f"Rendering {args.width}x{args.height}...")

        image = render_scene(
            scene,
            args.width,
            args.height,
            settings,
            batch_rows=args.batch_rows,
            callback=progress_callback,
        )
        if not quiet:
            print()  # Newline after progress

        output_file = save_image(image, args.output)
    except (PhongTracerError, ValueError, OSError) as e:
        if not quiet:
            print()
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.ERROR if args.quiet else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )
    init_taichi(args.arch, quiet=args.quiet)

    return run(args)


if __name__ == "__main__":
    sys.exit(main())
