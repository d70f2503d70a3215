from __future__ import annotations

import os
import re
from pathlib import Path


# Anchored to the source root: deploy tooling and docs living next to the content.
ROOT_SKIP_GLOBS = [
    ".editorconfig",
    "*.bat",
    "*.ps1",
    "*.sh",
    "*.py",
    "README.md",
    "pyproject.toml",
    "images/**",
]

# Matched anywhere in the tree.
TREE_SKIP_GLOBS = [
    "**/*.pdb",
    "**/.gitignore",
    "**/.gitattributes",
    "**/meta.ini",
    "**/*.7z",
    "**/.git/**/*",
    "**/.vscode/**/*",
    "**/__pycache__/**/*",
]

_SEPARATORS = "/\\" if os.sep == "\\" else "/"
_SEP = "[\\\\/]" if os.sep == "\\" else "/"
_NOT_SEP = "[^\\\\/]" if os.sep == "\\" else "[^/]"


def _translate_class(glob: str, i: int) -> tuple[str, int]:
    """Translate a ``[...]`` class starting at ``glob[i] == '['``.

    Returns the regex fragment and the index just past the class, or a
    literal ``[`` when the class is never closed.
    """
    j = i + 1
    if j < len(glob) and glob[j] in "!^":
        j += 1
    if j < len(glob) and glob[j] == "]":
        j += 1
    while j < len(glob) and glob[j] != "]":
        j += 1
    if j >= len(glob):
        return re.escape("["), i + 1

    body = glob[i + 1 : j]
    negate = body[:1] in ("!", "^")
    if negate:
        body = body[1:]
    body = body.replace("\\", "\\\\").replace("[", "\\[")
    if negate:
        # A negated class must not swallow a separator either.
        return f"(?!{_SEP})[^{body}]", j + 1
    return f"[{body}]", j + 1


def _translate(glob: str) -> str:
    out: list[str] = []
    i = 0
    n = len(glob)
    depth = 0  # open {...} groups

    while i < n:
        c = glob[i]
        at_segment_start = i == 0 or glob[i - 1] in _SEPARATORS

        if c == "*" and glob.startswith("**", i) and at_segment_start and (
            i + 2 == n or glob[i + 2] in _SEPARATORS
        ):
            if i + 2 == n:
                out.append(".*")
                i += 2
            else:
                out.append(f"(?:{_NOT_SEP}*{_SEP})*")
                i += 3
            continue

        if c == "*":
            while i < n and glob[i] == "*":
                i += 1
            out.append(f"{_NOT_SEP}*")
            continue

        if c == "?":
            out.append(_NOT_SEP)
        elif c == "[":
            fragment, i = _translate_class(glob, i)
            out.append(fragment)
            continue
        elif c == "{":
            depth += 1
            out.append("(?:")
        elif c == "}" and depth:
            depth -= 1
            out.append(")")
        elif c == "," and depth:
            out.append("|")
        elif c in _SEPARATORS:
            while i + 1 < n and glob[i + 1] in _SEPARATORS:
                i += 1
            out.append(f"{_SEP}+")
        elif c == "\\" and i + 1 < n:
            # Only reachable on POSIX, where backslash is an escape.
            i += 1
            out.append(re.escape(glob[i]))
        else:
            out.append(re.escape(c))
        i += 1

    if depth:
        raise ValueError(f"Unbalanced '{{' in glob: {glob!r}")
    return "".join(out)


def compile_glob(glob: str, case_sensitive: bool | None = None) -> re.Pattern[str]:
    """Compile a glob into an anchored regex matching whole paths.

    ``**`` as a full segment spans any number of directories, ``*`` and
    ``?`` stay within one segment, ``[...]`` and ``{a,b}`` behave as in a
    shell. Case sensitivity follows the platform unless given.
    """
    if case_sensitive is None:
        case_sensitive = os.name != "nt"
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(f"^{_translate(glob)}{_SEP}*\\Z", flags)


def escape_glob(literal: str) -> str:
    return re.sub(r"([*?\[\]{},])", r"[\1]", literal)


def _anchor(source_root: Path, glob: str) -> str:
    if glob.startswith("**") or Path(glob).is_absolute():
        return glob
    return escape_glob(str(source_root)) + "/" + glob


def make_skip(source_root: Path, extra_globs: list[str] | None = None) -> list[re.Pattern[str]]:
    root = source_root.resolve()
    globs = [_anchor(root, g) for g in ROOT_SKIP_GLOBS]
    globs.extend(TREE_SKIP_GLOBS)
    if extra_globs:
        globs.extend(_anchor(root, g) for g in extra_globs)
    return [compile_glob(g) for g in globs]
