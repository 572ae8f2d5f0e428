"""Shared pytest fixtures for cliperge."""

import pytest


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test from inside tmp_path."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def abc_files(workdir):
    """a.txt and b.txt exist, missing.txt does not."""
    (workdir / "a.txt").write_text("hello")
    (workdir / "b.txt").write_text("world")
    return ["a.txt", "missing.txt", "b.txt"]
