from __future__ import annotations

import logging
import math
import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from .ignore import make_skip
from .prompts import confirm as ask_confirm
from .walk import Pattern, WalkOptions, walk


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_OUTPUT_NOT_EMPTY = 1
EXIT_BAD_SOURCE = 2
EXIT_SAME_PATH = 4
EXIT_OUTPUT_INSIDE_SOURCE = 5
EXIT_COPY_FAILED = 7
EXIT_ABORTED = 8


@dataclass
class DeploySummary:
    files_copied: int = 0
    bytes_copied: int = 0


def _is_relative_to(child: Path, parent: Path) -> bool:
    try:
        child.resolve().relative_to(parent.resolve())
        return True
    except ValueError:
        return False


def _format_size(n: int) -> str:
    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(n)
    for u in units:
        if size < 1024.0 or u == units[-1]:
            return f"{size:.1f} {u}"
        size /= 1024.0


def output_dir_for(source: Path) -> Path:
    source = source.resolve()
    return source.parent / f"{source.name}-output"


def is_dir_empty(path: Path) -> bool:
    try:
        with os.scandir(path) as it:
            for _ in it:
                return False
    except FileNotFoundError:
        pass
    return True


def empty_dir(path: Path) -> None:
    if not path.exists():
        path.mkdir(parents=True)
        return
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def prepare_output_dir(
    output_dir: Path,
    force: bool,
    silent: bool,
    confirm: Callable[[str], bool] = ask_confirm,
) -> bool:
    """Make sure ``output_dir`` may be written to.

    Returns False when it holds files and the user (or ``silent``) did not
    agree to wipe them.
    """
    if not output_dir.exists():
        return True

    if force:
        print(f'Automatically cleaning up directory at "{output_dir}"')
        logger.info(f"Emptying {output_dir} (forced)")
        empty_dir(output_dir)
        return True

    if is_dir_empty(output_dir):
        return True

    if silent:
        print(f'Directory "{output_dir}" exists and is not empty.', file=sys.stderr)
        return False

    print(f'Output directory "{output_dir}" exists.')
    if confirm("Delete and rewrite? (y/n) "):
        logger.info(f"Emptying {output_dir} (confirmed)")
        empty_dir(output_dir)
        return True

    print(f'Directory "{output_dir}" exists and is not empty.', file=sys.stderr)
    return False


def _copy_file(src: Path, dst: Path) -> int:
    shutil.copyfile(src, dst)
    try:
        shutil.copymode(src, dst)
    except OSError:
        logger.debug(f"Could not copy permission bits to {dst}")
    return dst.stat().st_size


def deploy_tree(
    source: Path,
    output_dir: Path,
    skip: Sequence[Pattern],
    follow_symlinks: bool = True,
    max_depth: float = math.inf,
) -> DeploySummary:
    source = source.resolve()
    summary = DeploySummary()
    options = WalkOptions(
        max_depth=max_depth,
        include_files=True,
        include_dirs=False,
        follow_symlinks=follow_symlinks,
        skip=skip,
    )

    for entry in walk(source, options):
        subpath = os.path.relpath(entry.path, source)
        src_file = Path(entry.path)
        dst_file = output_dir / subpath

        print(f'"{src_file}" => "{dst_file}"')

        dst_file.parent.mkdir(parents=True, exist_ok=True)
        summary.bytes_copied += _copy_file(src_file, dst_file)
        summary.files_copied += 1

    return summary


def run_deploy(
    source: Path,
    output_dir: Path | None,
    force: bool,
    silent: bool,
    extra_globs: list[str] | None = None,
    follow_symlinks: bool = True,
    max_depth: float = math.inf,
    confirm: Callable[[str], bool] = ask_confirm,
) -> int:
    if not source.exists() or not source.is_dir():
        print(f"Source not found or not a directory: {source}", file=sys.stderr)
        return EXIT_BAD_SOURCE

    final_dest = (output_dir or output_dir_for(source)).resolve()

    if source.resolve() == final_dest.resolve():
        print("Output resolves to the same path as source; aborting.")
        return EXIT_SAME_PATH
    if _is_relative_to(final_dest, source):
        print("Output directory is inside source; choose a different location.")
        return EXIT_OUTPUT_INSIDE_SOURCE

    try:
        if not prepare_output_dir(final_dest, force=force, silent=silent, confirm=confirm):
            return EXIT_OUTPUT_NOT_EMPTY

        skip = make_skip(source, extra_globs)
        print("Copying files:")
        summary = deploy_tree(
            source,
            final_dest,
            skip,
            follow_symlinks=follow_symlinks,
            max_depth=max_depth,
        )
    except KeyboardInterrupt:
        print("\nAborted by user.")
        return EXIT_ABORTED
    except OSError as e:
        logger.debug("Deploy failed", exc_info=True)
        print(f"Copy failed: {e}", file=sys.stderr)
        return EXIT_COPY_FAILED

    print(f"Done. Copied {summary.files_copied} files ({_format_size(summary.bytes_copied)}).")
    print(f"Output located at: {final_dest}")
    return EXIT_OK
