"""Pytest fixtures for padgen tests."""

import pytest

from padgen.logging import disable_verbose


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run in an empty project directory with no user config and no unit override."""
    (tmp_path / ".git").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("padgen.config.USER_CONFIG_PATH", tmp_path / "no-user-config.toml")
    monkeypatch.delenv("PADGEN_UNITS", raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_global_state(monkeypatch):
    """Undo the CLI's global formatter and verbose logging after each test."""
    monkeypatch.setattr("padgen.units._current_formatter", None)
    yield
    disable_verbose()


@pytest.fixture
def polygon_bounds():
    """Return (min_x, min_y, max_x, max_y) of a list of segments."""

    def _bounds(segments):
        xs = [v for seg in segments for v in seg[0::2]]
        ys = [v for seg in segments for v in seg[1::2]]
        return min(xs), min(ys), max(xs), max(ys)

    return _bounds
