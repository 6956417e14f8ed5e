"""
Pytest configuration and fixtures for the exposure time calculator tests.
"""

import pytest

ENV_OVERRIDES = ['ETC_PIXEL_SCALE', 'ETC_SATURATION_LEVEL', 'ETC_DISPLAY_MAX_POINTS', 'ETC_GRID_DX']


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Fresh configuration singleton, unaffected by the user's config files or environment."""
    from etc_toolkit.utils.config import Config

    monkeypatch.setenv('HOME', str(tmp_path))
    monkeypatch.chdir(tmp_path)
    for var in ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)

    Config.reset()
    yield
    Config.reset()


@pytest.fixture
def visual_sampling():
    """5000-6000 A at 1 A, enough for sky and V band checks without the full grid."""
    from etc_toolkit.grid import Sampling
    return Sampling(5000.0, 1.0, 1001)


@pytest.fixture
def coarse_sampling():
    """Full 3200-10000 A range at 2 A."""
    from etc_toolkit.grid import Sampling
    return Sampling(3200.0, 2.0, 3401)
