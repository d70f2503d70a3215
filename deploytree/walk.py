from __future__ import annotations

import logging
import math
import os
import stat
from dataclasses import dataclass, replace
from typing import Iterator, Protocol, Sequence


logger = logging.getLogger(__name__)


class Pattern(Protocol):
    def search(self, string: str): ...


@dataclass(frozen=True)
class WalkEntry:
    path: str
    real_path: str
    name: str
    is_file: bool
    is_dir: bool
    is_symlink: bool


@dataclass(frozen=True)
class WalkOptions:
    max_depth: float = math.inf
    include_files: bool = True
    include_dirs: bool = True
    follow_symlinks: bool = False
    exts: Sequence[str] | None = None
    match: Sequence[Pattern] | None = None
    skip: Sequence[Pattern] | None = None


class WalkError(OSError):
    """An I/O failure while reading a directory, tagged with that directory."""

    def __init__(self, root: str, error: OSError):
        message = error.strerror or str(error)
        super().__init__(error.errno, f'{message} for path "{root}"', error.filename)
        self.root = root

    def __str__(self) -> str:
        return self.strerror


def _create_walk_entry(path: str) -> WalkEntry:
    path = os.path.normpath(path)
    real_path = os.path.realpath(path, strict=True)
    info = os.stat(path)
    return WalkEntry(
        path=path,
        real_path=real_path,
        name=os.path.basename(path),
        is_file=stat.S_ISREG(info.st_mode),
        is_dir=stat.S_ISDIR(info.st_mode),
        is_symlink=os.path.islink(path),
    )


def _include(
    path: str,
    exts: Sequence[str] | None = None,
    match: Sequence[Pattern] | None = None,
    skip: Sequence[Pattern] | None = None,
) -> bool:
    if exts is not None and not any(path.endswith(ext) for ext in exts):
        return False
    if match is not None and not any(pattern.search(path) for pattern in match):
        return False
    if skip and any(pattern.search(path) for pattern in skip):
        return False
    return True


def walk(root: str | os.PathLike, options: WalkOptions | None = None) -> Iterator[WalkEntry]:
    """Walk the tree under ``root``, yielding entries that pass the filters.

    Children are visited in the order ``os.scandir`` returns them and each
    directory is yielded before its contents. ``skip`` patterns also decide
    whether a directory is entered at all, while ``exts`` and ``match`` only
    decide what gets yielded.

    Paths are built by joining names onto ``root``, so a symlinked directory
    keeps its link path in ``WalkEntry.path``; ``real_path`` holds the
    resolved location.

    Any OSError raised while listing a directory is re-raised as a
    WalkError naming the innermost directory that failed.
    """
    opts = options or WalkOptions()
    root = os.fspath(root)

    if opts.max_depth < 0:
        return

    if opts.include_dirs and _include(root, opts.exts, opts.match, opts.skip):
        yield _create_walk_entry(root)

    if opts.max_depth < 1 or not _include(root, skip=opts.skip):
        return

    logger.debug(f"Entering {root}")
    try:
        with os.scandir(root) as it:
            for entry in it:
                path = os.path.normpath(os.path.join(root, entry.name))
                real_path = path
                is_symlink = entry.is_symlink()

                if is_symlink:
                    if not opts.follow_symlinks:
                        logger.debug(f"Skipping symlink {path}")
                        continue
                    real_path = os.path.realpath(path, strict=True)
                    logger.debug(f"Following symlink {path} -> {real_path}")

                if entry.is_file():
                    if opts.include_files and _include(path, opts.exts, opts.match, opts.skip):
                        yield WalkEntry(
                            path=path,
                            real_path=real_path,
                            name=entry.name,
                            is_file=True,
                            is_dir=False,
                            is_symlink=is_symlink,
                        )
                elif entry.is_dir():
                    yield from walk(path, replace(opts, max_depth=opts.max_depth - 1))
                else:
                    logger.debug(f"Skipping special file {path}")
    except WalkError:
        raise
    except OSError as err:
        raise WalkError(root, err) from err
