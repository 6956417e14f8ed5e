"""
Observing Conditions and Exposure Configuration

Plain value objects that parameterize one evaluation of the calculator.

ObservingConditions groups three sets of properties:

    SOLAR      observation epoch, solar elongation, ecliptic latitude
               (airglow solar-cycle modulation, zodiacal light)
    LUNAR      moon zenith distance, lunar phase, lunar elongation
               (scattered moonlight)
    TELESCOPE  airmass, mirror factor, seeing, collecting area
               (extinction, image size, photon collection)

All objects are frozen. To change a parameter build a new object, e.g.
dataclasses.replace(conditions, telescope=new_telescope); every sky and
throughput grid derived from the old object is rebuilt on the next
evaluation.

Angles are in degrees. The lunar phase angle follows Krisciunas & Schaefer
(1991): 0 is full moon, 180 is new moon.
"""

import math
from dataclasses import dataclass, field

from etc_toolkit.errors import InvalidConfiguration
from etc_toolkit.utils.config import get_config


def _check_range(name: str, value: float, low: float, high: float):
    if not (math.isfinite(value) and low <= value <= high):
        raise InvalidConfiguration(f"{name} must lie between {low:g} and {high:g}, got {value}")


@dataclass(frozen=True)
class SolarProperties:
    """Sun-related quantities that control airglow and zodiacal light."""
    observation_year: float = 2010.0    # Decimal year of the observation
    solar_elongation: float = 180.0     # Target-sun angle (degrees, 0-180)
    ecliptic_latitude: float = 90.0     # Ecliptic latitude of target (degrees, -90-90)

    def validate(self):
        if not (math.isfinite(self.observation_year) and self.observation_year >= 1900):
            raise InvalidConfiguration(
                f"Observation year must be 1900 or later, got {self.observation_year}")
        _check_range("Solar elongation", self.solar_elongation, 0, 180)
        _check_range("Ecliptic latitude", self.ecliptic_latitude, -90, 90)


@dataclass(frozen=True)
class LunarProperties:
    """Moon geometry for the scattered moonlight model."""
    moon_zenith_distance: float = 180.0  # Degrees; >= 90 means moon below horizon
    lunar_phase: float = 180.0           # Phase angle (degrees, 0 = full, 180 = new)
    lunar_elongation: float = 90.0       # Moon-target angle (degrees)

    def validate(self):
        _check_range("Moon zenith distance", self.moon_zenith_distance, 0, 180)
        _check_range("Lunar phase", self.lunar_phase, 0, 180)
        _check_range("Lunar elongation", self.lunar_elongation, 0, 180)

    @property
    def moon_above_horizon(self) -> bool:
        return self.moon_zenith_distance < 90


@dataclass(frozen=True)
class TelescopeProperties:
    """Telescope pointing and image quality."""
    airmass: float = 1.0                # Path length relative to zenith (>= 1)
    mirror_factor: float = 1.0          # Mirror cleanliness / vignetting (0-1]
    seeing: float = field(default_factory=lambda: get_config().get(
        'telescope', 'default_seeing_arcsec', default=0.7))  # Zenith FWHM (arcsec)
    effective_area: float = field(default_factory=lambda: get_config().effective_area)  # cm²

    def validate(self):
        if not (math.isfinite(self.airmass) and self.airmass >= 1):
            raise InvalidConfiguration(f"Airmass must be at least 1, got {self.airmass}")
        if not (math.isfinite(self.mirror_factor) and 0 < self.mirror_factor <= 1):
            raise InvalidConfiguration(
                f"Mirror factor must lie in (0, 1], got {self.mirror_factor}")
        if not (math.isfinite(self.seeing) and self.seeing > 0):
            raise InvalidConfiguration(f"Seeing must be positive, got {self.seeing}")
        if not (math.isfinite(self.effective_area) and self.effective_area > 0):
            raise InvalidConfiguration(
                f"Effective area must be positive, got {self.effective_area}")

    @property
    def zenith_distance(self) -> float:
        """Zenith distance in degrees from the plane-parallel airmass."""
        return math.degrees(math.acos(1.0 / self.airmass))

    def fwhm(self, image_quality: float = None) -> float:
        """
        Delivered image FWHM (arcsec).

        Seeing degrades with airmass as X^0.6 and is added in quadrature
        to the instrument's own image quality.
        """
        if image_quality is None:
            image_quality = get_config().image_quality
        atmospheric = self.seeing * self.airmass ** 0.6
        return math.sqrt(atmospheric ** 2 + image_quality ** 2)


@dataclass(frozen=True)
class ObservingConditions:
    """Everything about the sky and telescope needed for one evaluation."""
    solar: SolarProperties = field(default_factory=SolarProperties)
    lunar: LunarProperties = field(default_factory=LunarProperties)
    telescope: TelescopeProperties = field(default_factory=TelescopeProperties)

    def validate(self):
        """
        Check every parameter against its physical range.

        Raises:
            InvalidConfiguration: On the first out-of-range parameter
        """
        self.solar.validate()
        self.lunar.validate()
        self.telescope.validate()


@dataclass(frozen=True)
class ExposureConfig:
    """Exposure and detector settings for one evaluation."""
    exposure_time: float = 100.0                   # Seconds per frame
    repeat: int = 1                                # Number of frames
    binning: int = 1                               # On-chip binning (n x n)
    optical_filter: str = 'V'                      # Optical filter catalog key
    read_noise_mode: str = field(default_factory=lambda: get_config().get(
        'detector', 'read_noise_mode'))
    detector_material: str = field(default_factory=lambda: get_config().get(
        'detector', 'material'))
    dark_current_mode: str = field(default_factory=lambda: get_config().get(
        'detector', 'dark_current_mode'))

    def validate(self):
        """
        Check exposure time, repeat count and binning.

        Catalog keys are checked by the instrument that resolves them.

        Raises:
            InvalidConfiguration: If a value is out of range
        """
        config = get_config()
        max_time = config.get('exposure', 'max_time_s', default=36000.0)
        max_repeat = config.get('exposure', 'max_repeat', default=999)
        max_binning = config.get('exposure', 'max_binning', default=4)

        if not (math.isfinite(self.exposure_time) and 0 < self.exposure_time <= max_time):
            raise InvalidConfiguration(
                f"Exposure time must be positive and at most {max_time:g} s, "
                f"got {self.exposure_time}")
        if (not math.isfinite(self.repeat) or int(self.repeat) != self.repeat
                or not 1 <= self.repeat <= max_repeat):
            raise InvalidConfiguration(
                f"Repeat count must be an integer between 1 and {max_repeat}, got {self.repeat}")
        if (not math.isfinite(self.binning) or int(self.binning) != self.binning
                or not 1 <= self.binning <= max_binning):
            raise InvalidConfiguration(
                f"Binning must be an integer between 1 and {max_binning}, got {self.binning}")
