import argparse
import math
from pathlib import Path


def _depth(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise argparse.ArgumentTypeError("max depth must be non-negative")
    return value


def parse_args(argv: list[str]):
    p = argparse.ArgumentParser(
        description="Deploy a folder into a sibling '<name>-output' folder, skipping build scripts and VCS metadata.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument(
        "--source",
        "-S",
        type=Path,
        default=Path("."),
        help="Source folder to deploy",
    )
    p.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output folder (defaults to '<source>-output' next to the source)",
    )
    p.add_argument(
        "--force-overwrite",
        "-f",
        action="store_true",
        help="Delete and recreate the output folder without notice",
    )
    p.add_argument(
        "--silent",
        "-s",
        action="store_true",
        help="Do not prompt for anything. Succeed or fail silently",
    )
    p.add_argument(
        "--extra-skip",
        action="append",
        default=None,
        help="Additional globs to skip, relative to the source unless they start with '**' (can repeat)",
    )
    p.add_argument(
        "--no-follow-symlinks",
        dest="follow_symlinks",
        action="store_false",
        help="Skip symlinked files and folders instead of copying their targets",
    )
    p.add_argument(
        "--max-depth",
        type=_depth,
        default=math.inf,
        help="Maximum number of folder levels to descend",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Log debug output")
    return p.parse_args(argv)
