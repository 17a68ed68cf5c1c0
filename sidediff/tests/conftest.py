"""Pytest fixtures for sidediff tests."""

import pytest

from ..renderer import MarkPosition, RenderOptions


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user and project config files out of the tests.

    load_config looks at $SIDEDIFF_CONFIG, the working directory and the
    home directory, so all three point at an empty temporary directory.
    """
    monkeypatch.delenv("SIDEDIFF_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def narrow_options():
    """Two 8-cell text columns, center marks, no hunk headers."""
    return RenderOptions(width=21, mark_position=MarkPosition.CENTER, command=False)
