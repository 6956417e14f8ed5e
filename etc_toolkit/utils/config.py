"""
Configuration management for the exposure time calculator.

Supports:
    - YAML configuration files
    - Environment variable overrides
    - Site-specific telescope and detector parameters
"""

import os
import copy
import math
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)


def _wiyn_collecting_area() -> float:
    """Unobstructed area of a 3.5 m primary with a 42% central obstruction (cm²)."""
    primary_radius_m = 3.5 / 2
    obstruction_radius_m = 3.5 * 0.42 / 2
    area_m2 = math.pi * primary_radius_m ** 2 - math.pi * obstruction_radius_m ** 2
    return area_m2 * 1e4


# Default configuration
DEFAULT_CONFIG = {
    # Common wavelength sampling (Angstrom) shared by all spectra
    'grid': {
        'x0': 3200.0,
        'dx': 0.5,
        'n': 13601,               # 3200 - 10000 A
    },

    # Display decimation
    'display': {
        'max_points': 1024,
    },

    # Telescope
    'telescope': {
        'effective_area_cm2': _wiyn_collecting_area(),
        'focal_length_mm': 22050,
        'n_mirrors': 3,
        'image_quality_arcsec': 0.05,  # Added in quadrature to the seeing
        'default_seeing_arcsec': 0.7,
    },

    # Detector
    'detector': {
        'pixel_scale_arcsec': 0.11,
        'saturation_level_e': 65000.0,
        'read_noise_mode': '10e- (fast)',
        'dark_current_mode': '0.008 e-/sec/pix',
        'material': 'Lot 6 as build',
    },

    # Exposure defaults and limits
    'exposure': {
        'apertures': [0.5, 0.75, 1.0, 1.25, 1.5, 1.75, 2.0],  # FWHM units
        'max_time_s': 36000.0,
        'max_repeat': 999,
        'max_binning': 4,
    },
}


class Config:
    """Configuration manager with file and environment overrides."""

    _instance = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self._load_config_file()
        self._apply_env_overrides()

    @classmethod
    def reset(cls):
        """Drop the singleton so the next access reloads defaults."""
        cls._instance = None

    def _load_config_file(self):
        """Load configuration from YAML file if present."""
        config_paths = [
            Path.home() / '.etc_toolkit' / 'config.yaml',
            Path.home() / '.config' / 'etc_toolkit' / 'config.yaml',
            Path.cwd() / 'etc_config.yaml',
        ]

        for config_path in config_paths:
            if config_path.exists():
                try:
                    with open(config_path) as f:
                        user_config = yaml.safe_load(f) or {}
                    self._merge_config(user_config)
                    logger.info(f"Loaded config from: {config_path}")
                    return
                except (OSError, yaml.YAMLError) as e:
                    logger.warning(f"Failed to load {config_path}: {e}")

    def _merge_config(self, user_config: Dict):
        """Deep merge user config into default config."""
        def merge(base, override):
            for key, value in override.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    merge(base[key], value)
                else:
                    base[key] = value
        merge(self._config, user_config)

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        env_mapping = {
            'ETC_PIXEL_SCALE': ('detector', 'pixel_scale_arcsec'),
            'ETC_SATURATION_LEVEL': ('detector', 'saturation_level_e'),
            'ETC_DISPLAY_MAX_POINTS': ('display', 'max_points'),
            'ETC_GRID_DX': ('grid', 'dx'),
        }

        for env_var, config_path in env_mapping.items():
            if env_var in os.environ:
                section, key = config_path
                value = os.environ[env_var]
                # Type conversion
                if key in ['max_points']:
                    value = int(value)
                else:
                    value = float(value)
                self._config[section][key] = value
                logger.debug(f"Config override from {env_var}: {section}.{key} = {value}")

    def get(self, *keys, default=None):
        """Get nested config value."""
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, *keys_and_value):
        """Set nested config value."""
        *keys, value = keys_and_value
        target = self._config
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value

    def save(self, path: Optional[Path] = None):
        """Save current config to YAML file."""
        if path is None:
            path = Path.home() / '.etc_toolkit' / 'config.yaml'
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(self._config, f, default_flow_style=False)
        logger.info(f"Saved config to: {path}")

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._config)

    @property
    def grid_sampling(self):
        from etc_toolkit.grid.spectral_grid import Sampling
        grid = self._config['grid']
        return Sampling(float(grid['x0']), float(grid['dx']), int(grid['n']))

    @property
    def display_max_points(self) -> int:
        return int(self._config['display']['max_points'])

    @property
    def effective_area(self) -> float:
        return float(self._config['telescope']['effective_area_cm2'])

    @property
    def image_quality(self) -> float:
        return float(self._config['telescope']['image_quality_arcsec'])

    @property
    def pixel_scale(self) -> float:
        return float(self._config['detector']['pixel_scale_arcsec'])

    @property
    def saturation_level(self) -> float:
        return float(self._config['detector']['saturation_level_e'])

    @property
    def default_apertures(self) -> List[float]:
        return [float(a) for a in self._config['exposure']['apertures']]

    def __repr__(self):
        return f"Config({self._config})"


# Singleton accessor
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
