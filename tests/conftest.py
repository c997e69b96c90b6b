# tests/conftest.py
from __future__ import annotations

import pytest

from combinadic import runtime


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Fresh workspace and runtime per test; colorama left unwrapped for capsys."""
    monkeypatch.setenv("COMBINADIC_HOME", str(tmp_path / "ws"))
    monkeypatch.setattr("combinadic.cli.colorama_init", lambda **kw: None)
    runtime.reset()
    yield tmp_path / "ws"
    runtime.reset()
