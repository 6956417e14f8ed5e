"""
Tests for configuration management.

Run with: pytest tests/test_config.py -v
"""

import pytest
import yaml


class TestConfig:
    """Test configuration management."""

    def test_config_singleton(self):
        """Config should be a singleton."""
        from etc_toolkit.utils.config import get_config
        c1 = get_config()
        c2 = get_config()
        assert c1 is c2

    def test_defaults(self):
        """Built-in telescope and detector defaults."""
        from etc_toolkit.utils.config import get_config

        config = get_config()
        assert config.pixel_scale == 0.11
        assert config.saturation_level == 65000.0
        assert config.display_max_points == 1024
        assert config.default_apertures[0] == 0.5
        # 3.5 m primary with a 42% central obstruction
        assert config.effective_area == pytest.approx(79240, rel=1e-3)

    def test_grid_sampling(self):
        """Default grid covers 3200-10000 A."""
        from etc_toolkit.utils.config import get_config

        sampling = get_config().grid_sampling
        assert sampling.x0 == 3200.0
        assert sampling.xmax == pytest.approx(10000.0)

    def test_config_get_with_default(self):
        """Test config get with default value."""
        from etc_toolkit.utils.config import get_config
        config = get_config()

        assert config.get('nonexistent', 'key', default='fallback') == 'fallback'
        assert config.get('detector', 'read_noise_mode') == '10e- (fast)'

    def test_config_set(self):
        """Nested keys can be set, including new sections."""
        from etc_toolkit.utils.config import get_config
        config = get_config()

        config.set('detector', 'pixel_scale_arcsec', 0.2)
        config.set('site', 'name', 'Kitt Peak')
        assert config.pixel_scale == 0.2
        assert config.get('site', 'name') == 'Kitt Peak'

    def test_env_override(self, monkeypatch):
        """Environment variables override the defaults."""
        from etc_toolkit.utils.config import Config, get_config

        monkeypatch.setenv('ETC_PIXEL_SCALE', '0.25')
        monkeypatch.setenv('ETC_DISPLAY_MAX_POINTS', '512')
        Config.reset()

        config = get_config()
        assert config.pixel_scale == 0.25
        assert config.display_max_points == 512

    def test_yaml_file_merged(self, tmp_path):
        """A config file in the working directory is merged over the defaults."""
        from etc_toolkit.utils.config import Config, get_config

        (tmp_path / 'etc_config.yaml').write_text(
            yaml.safe_dump({'detector': {'saturation_level_e': 50000.0}}))
        Config.reset()

        config = get_config()
        assert config.saturation_level == 50000.0
        # Sibling keys survive the merge
        assert config.pixel_scale == 0.11

    def test_save_round_trip(self, tmp_path):
        """Saved configuration reloads from the home directory."""
        from etc_toolkit.utils.config import Config, get_config

        config = get_config()
        config.set('exposure', 'max_binning', 2)
        config.save()

        saved = tmp_path / '.etc_toolkit' / 'config.yaml'
        assert saved.exists()

        Config.reset()
        assert get_config().get('exposure', 'max_binning') == 2

    def test_as_dict_is_a_copy(self):
        """Editing the exported dict leaves the configuration alone."""
        from etc_toolkit.utils.config import get_config

        config = get_config()
        exported = config.as_dict()
        exported['detector']['pixel_scale_arcsec'] = 99.0
        assert config.pixel_scale == 0.11
