"""Shared test fixtures for duplo."""

import os

import pytest

from duplo.models import SourceFile, SourceLine

SHARED_BLOCK = [
    "int total = 0;",
    "for (i = 0; i < n; i++)",
    "total += values[i];",
    "total = clamp(total);",
    "return total;",
]


@pytest.fixture
def make_source():
    """Build a SourceFile whose lines are numbered 1..n in order."""

    def _make(filename, texts):
        return SourceFile(filename, [SourceLine(t, i) for i, t in enumerate(texts, start=1)])

    return _make


@pytest.fixture
def write_files(tmp_path):
    """Write ``{relative_name: text}`` under tmp_path; return the paths in order."""

    def _write(files):
        paths = []
        for name, text in files.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
            paths.append(str(path))
        return paths

    return _write


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """No global/project config files and no DUPLO_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("DUPLO_"):
            monkeypatch.delenv(key)
    return tmp_path
