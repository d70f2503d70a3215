# File: tests/conftest.py

import os
from pathlib import Path

import pytest


class SortedScandir:
    """Stands in for os.scandir's iterator, yielding entries sorted by name."""

    def __init__(self, entries):
        self._entries = entries

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def __iter__(self):
        return iter(self._entries)


@pytest.fixture
def sorted_scandir(monkeypatch):
    """
    Makes os.scandir deterministic (sorted by name) for ordering tests.
    Returns a set of paths that should fail with PermissionError when listed.
    """
    real_scandir = os.scandir
    failing: set[str] = set()
    calls: list[str] = []

    def fake_scandir(path="."):
        path = os.fspath(path)
        calls.append(path)
        if path in failing:
            raise PermissionError(13, "Permission denied", path)
        with real_scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
        return SortedScandir(entries)

    monkeypatch.setattr(os, "scandir", fake_scandir)
    fake_scandir.failing = failing
    fake_scandir.calls = calls
    return fake_scandir


@pytest.fixture
def site_tree(tmp_path) -> Path:
    """
    A source folder shaped like a typical deploy:
    - content that should be copied (index.html, css/site.css, assets/logo.bin)
    - root-level tooling (deploy.py, build.bat, README.md)
    - VCS / editor metadata (.git/config, .vscode/settings.json, css/.gitignore)
    """
    root = tmp_path / "site"
    root.mkdir()

    (root / "index.html").write_text("<h1>hello</h1>")
    (root / "css").mkdir()
    (root / "css" / "site.css").write_text("body { margin: 0 }")
    (root / "css" / ".gitignore").write_text("*.map")
    (root / "assets").mkdir()
    (root / "assets" / "logo.bin").write_bytes(bytes(range(256)) * 4)

    (root / "deploy.py").write_text("print('deploy')")
    (root / "build.bat").write_text("@echo off")
    (root / "README.md").write_text("# site")

    (root / ".git").mkdir()
    (root / ".git" / "config").write_text("[core]")
    (root / ".git" / "objects").mkdir()
    (root / ".git" / "objects" / "ab").write_text("blob")
    (root / ".vscode").mkdir()
    (root / ".vscode" / "settings.json").write_text("{}")

    return root
