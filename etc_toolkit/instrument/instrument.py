"""
Instrument throughput chain and detector selection.

The instrument throughput is the running product

    T(λ) = R_mirror(λ)^N × f_mirror × T_optics(λ) × QE(λ) × T_filter(λ)

where every stage is looked up from the catalog and resampled onto the
working grid. Atmospheric extinction and the collecting area are applied
separately by the calculator because they depend on the pointing.
"""

import logging
from typing import Optional

from etc_toolkit.configuration import ExposureConfig
from etc_toolkit.errors import InvalidConfiguration
from etc_toolkit.grid.spectral_grid import Sampling
from etc_toolkit.grid.throughput import ThroughputFilter
from etc_toolkit.instrument import catalog
from etc_toolkit.instrument.detector import DetectorModel
from etc_toolkit.utils.config import get_config

logger = logging.getLogger(__name__)


def _lookup(table: dict, key: str, what: str):
    if key not in table:
        choices = ', '.join(repr(k) for k in table)
        raise InvalidConfiguration(f"Unknown {what} {key!r}; choose one of {choices}")
    return table[key]


class Instrument:
    """
    Imager on the telescope: optics, filters and detector.

    Filters are built fresh on every call; nothing is shared between
    evaluations.
    """

    def __init__(self, sampling: Optional[Sampling] = None,
                 pixel_scale: Optional[float] = None,
                 saturation_level: Optional[float] = None,
                 n_mirrors: Optional[int] = None):
        """
        Initialize instrument.

        Args:
            sampling: Working wavelength sampling (configured default if None)
            pixel_scale: Unbinned pixel scale in arcsec (configured default if None)
            saturation_level: Saturation in electrons (configured default if None)
            n_mirrors: Number of aluminium reflections (configured default if None)
        """
        config = get_config()
        self.sampling = sampling or config.grid_sampling
        self.pixel_scale = pixel_scale if pixel_scale is not None else config.pixel_scale
        self.saturation_level = (saturation_level if saturation_level is not None
                                 else config.saturation_level)
        self.n_mirrors = n_mirrors if n_mirrors is not None else int(
            config.get('telescope', 'n_mirrors', default=3))

    def validate(self, exposure_config: ExposureConfig):
        """
        Check that every catalog key of the configuration is known.

        Raises:
            InvalidConfiguration: On an unknown filter, detector or mode key
        """
        exposure_config.validate()
        _lookup(catalog.OPTICAL_FILTERS, exposure_config.optical_filter, 'optical filter')
        _lookup(catalog.DETECTOR_MATERIALS, exposure_config.detector_material, 'detector material')
        _lookup(catalog.READ_NOISE_MODES, exposure_config.read_noise_mode, 'read noise mode')
        _lookup(catalog.DARK_CURRENT_MODES, exposure_config.dark_current_mode, 'dark current mode')

    def detector(self, exposure_config: ExposureConfig) -> DetectorModel:
        """Detector model for the selected read noise and dark current modes."""
        read_noise = _lookup(catalog.READ_NOISE_MODES, exposure_config.read_noise_mode,
                             'read noise mode')
        dark_current = _lookup(catalog.DARK_CURRENT_MODES, exposure_config.dark_current_mode,
                               'dark current mode')
        return DetectorModel(
            read_noise_e=read_noise,
            dark_current_e_s=dark_current,
            saturation_level_e=self.saturation_level,
            pixel_scale_arcsec=self.pixel_scale,
        )

    def _table_filter(self, table, name: str) -> ThroughputFilter:
        if table is None:
            return ThroughputFilter.unit(self.sampling, name=name)
        wavelengths, values = table
        return ThroughputFilter.from_table(wavelengths, values, sampling=self.sampling,
                                           method='spline', name=name)

    def optical_filter(self, key: str) -> ThroughputFilter:
        return self._table_filter(_lookup(catalog.OPTICAL_FILTERS, key, 'optical filter'), key)

    def detector_qe(self, material: str) -> ThroughputFilter:
        return self._table_filter(
            _lookup(catalog.DETECTOR_MATERIALS, material, 'detector material'), material)

    def optics(self) -> ThroughputFilter:
        return self._table_filter(catalog.OPTICS_TRANSMISSION, 'optics')

    def mirrors(self, mirror_factor: float = 1.0) -> ThroughputFilter:
        """Reflectivity of all mirrors together, scaled by the mirror factor."""
        if not 0 < mirror_factor <= 1:
            raise InvalidConfiguration(f"Mirror factor must lie in (0, 1], got {mirror_factor}")
        mirrors = self._table_filter(catalog.MIRROR_REFLECTIVITY, f"mirrors^{self.n_mirrors}")
        return mirrors.power(self.n_mirrors).scale(mirror_factor)

    def throughput(self, exposure_config: ExposureConfig, mirror_factor: float = 1.0,
                   filter_only: bool = False) -> ThroughputFilter:
        """
        Instrument throughput for the selected filter and detector.

        Args:
            exposure_config: Selected filter and detector material
            mirror_factor: Mirror cleanliness / vignetting factor
            filter_only: Return the optical filter alone (unit transmission
                for everything else)

        Returns:
            Composed transmission filter
        """
        optical_filter = self.optical_filter(exposure_config.optical_filter)
        if filter_only:
            return ThroughputFilter.compose(optical_filter, name=optical_filter.name)

        stages = [
            self.mirrors(mirror_factor),
            self.optics(),
            self.detector_qe(exposure_config.detector_material),
            optical_filter,
        ]
        total = ThroughputFilter.compose(*stages, sampling=self.sampling,
                                         name=f"instrument+{exposure_config.optical_filter}")
        logger.debug(f"Instrument throughput with filter {exposure_config.optical_filter}: "
                     f"peak {total.ymax():.3f}")
        return total
