"""Main entry point for pyktree."""

import argparse
import logging
import sys
from pathlib import Path

from PyQt6.QtGui import QSurfaceFormat
from PyQt6.QtWidgets import QApplication

from pyktree.errors import PyktreeError
from pyktree.model.loader import load_tree
from pyktree.view.scene import SceneConfig

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="pyktree",
        description="3D radial viewer for analysed concept trees",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "tree",
        type=Path,
        help="JSON document with the analysed concept tree",
    )
    parser.add_argument(
        "--pixel-ratio",
        type=float,
        default=None,
        metavar="R",
        help="Label rasterization pixel ratio (default: the screen's)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        metavar="N",
        help="Seed for connector curve jitter (default: random)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--msaa",
        type=int,
        choices=[0, 2, 4, 8],
        default=4,
        metavar="N",
        help="Multisample anti-aliasing samples (default: 4)",
    )
    args = parser.parse_args(argv)
    if args.pixel_ratio is not None and args.pixel_ratio <= 0:
        parser.error("--pixel-ratio must be positive")
    return args


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        tree = load_tree(args.tree)
    except PyktreeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Create Qt application
    app = QApplication(sys.argv)

    # Legacy OpenGL 2.1 for PyOpenGL immediate mode
    fmt = QSurfaceFormat()
    fmt.setVersion(2, 1)
    fmt.setProfile(QSurfaceFormat.OpenGLContextProfile.CompatibilityProfile)
    fmt.setDepthBufferSize(24)
    fmt.setSamples(args.msaa)
    QSurfaceFormat.setDefaultFormat(fmt)

    # Imported after the default surface format is set
    from pyktree.controller.controller import Controller

    scene_config = SceneConfig(pixel_ratio=args.pixel_ratio, seed=args.seed)
    controller = Controller(tree, source=args.tree, scene_config=scene_config)
    controller.start()
    controller.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
