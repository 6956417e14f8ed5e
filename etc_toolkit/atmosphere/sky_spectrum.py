"""
Night Sky Spectrum

Sky surface brightness (erg/s/cm²/A/arcsec²) as seen from the ground,
the sum of three components:

1. AIRGLOW
   - Chemiluminescence of the upper atmosphere (O I, Na I, OH bands)
   - Brightens towards the horizon (van Rhijn): X' = 1/sqrt(1 - 0.96 sin²Z)
   - Extinguished by X'-1 airmasses, since the emitting layer is already
     above part of the atmosphere
   - Modulated by the ~11 year solar cycle:
         g = (1 + 0.37 cos(2π (t - 2001.5) / 9.67)) / 1.37

2. ZODIACAL LIGHT
   - Sunlight scattered by interplanetary dust, concentrated towards the
     ecliptic and the sun
   - Brightness h in S10 units, from ecliptic latitude b and solar
     elongation l; a solar spectrum normalized at 5500 A times 2.92e-20 h

3. MOONLIGHT (Krisciunas & Schaefer 1991)
   - Rayleigh and Mie scattering of moonlight:
         f(ρ) = 10^5.36 (1.06 + cos²ρ) + 10^(6.15 - ρ/40)
   - Lunar brightness from the phase angle α:
         V = -12.73 + 0.026|α| + 4e-9 α⁴,  I* = 10^(-0.4 (V + 16.37))
   - B = f(ρ) I* 10^(-0.4 k X_moon) (1 - 10^(-0.4 k X)), zero when the
     moon is below the horizon

References:
    - Krisciunas & Schaefer, 1991: A model of the brightness of moonlight
    - Leinert et al., 1998: The 1997 reference of diffuse night sky brightness
    - Benn & Ellison, 1998: Brightness of the night sky over La Palma
"""

import math
import logging
from typing import Optional

import numpy as np

from etc_toolkit.atmosphere.extinction import AtmosphericExtinction
from etc_toolkit.atmosphere.solar_spectrum import SolarSpectrum
from etc_toolkit.configuration import ObservingConditions
from etc_toolkit.grid.spectral_grid import HC_ERG_ANGSTROM, Sampling, SpectralGrid

logger = logging.getLogger(__name__)

# Steradian to square arcsec
ARCSEC2_PER_SR = (180 / math.pi * 3600) ** 2


def van_rhijn_airmass(zenith_distance_rad: float) -> float:
    """Airmass of a thin emitting layer at ~300 km altitude."""
    return 1.0 / math.sqrt(1.0 - 0.96 * math.sin(zenith_distance_rad) ** 2)


def solar_cycle_factor(year: float) -> float:
    """Airglow modulation by the solar cycle, 1 at solar maximum."""
    amplitude = 0.37      # Solar modulation of airglow
    period = 9.67         # Current solar cycle period (years)
    maximum = 2001.5      # Cycle 23 maximum
    phase = 2 * math.pi * (year - maximum) / period
    return (1 + amplitude * math.cos(phase)) / (1 + amplitude)


class AirglowSpectrum:
    """
    Zenith airglow at solar maximum: smooth continuum plus emission lines.

    Line intensities are in Rayleigh and are converted to surface
    brightness using 1 R = 10^6 / 4π photons/s/cm²/sr.
    """

    # Continuum at 5500 A (erg/s/cm²/A/arcsec²) and its slope
    CONTINUUM_5500 = 3.0e-18
    CONTINUUM_SLOPE = 1.0

    LINE_FWHM = 3.0  # A

    # (center A, intensity Rayleigh)
    LINES = [
        (5577.3, 250),   # [O I]
        (5890.0, 50),    # Na D2
        (5895.9, 30),    # Na D1
        (6300.3, 150),   # [O I]
        (6363.8, 50),    # [O I]
        (6863.0, 200),   # OH (8-3)
        (6923.0, 150),
        (7276.0, 300),   # OH (8-3) / (4-0)
        (7316.0, 300),
        (7340.0, 250),
        (7369.0, 200),
        (7714.0, 350),   # OH (7-2)
        (7751.0, 400),
        (7794.0, 300),
        (7853.0, 250),
        (7914.0, 350),
        (7993.0, 400),
        (8344.0, 600),   # OH (5-1)
        (8399.0, 550),
        (8430.0, 500),
        (8465.0, 450),
        (8827.0, 700),   # OH (6-2)
        (8886.0, 650),
        (8943.0, 500),
        (9376.0, 500),   # OH (9-4)
        (9440.0, 600),
        (9793.0, 400),
        (9872.0, 350),
    ]

    def __init__(self, sampling: Optional[Sampling] = None):
        self.grid = SpectralGrid.from_function(self._continuum, sampling)
        self._add_lines()

    def _continuum(self, wavelengths: np.ndarray) -> np.ndarray:
        return self.CONTINUUM_5500 * (wavelengths / 5500.0) ** self.CONTINUUM_SLOPE

    def _add_lines(self):
        wl = self.grid.wavelengths
        sigma = self.LINE_FWHM / (2 * math.sqrt(2 * math.log(2)))
        lines = np.zeros_like(wl)
        for center, rayleigh in self.LINES:
            photons = rayleigh * 1e6 / (4 * math.pi) / ARCSEC2_PER_SR  # ph/s/cm²/arcsec²
            flux = photons * HC_ERG_ANGSTROM / center                  # erg/s/cm²/arcsec²
            lines += flux / (math.sqrt(2 * math.pi) * sigma) * np.exp(-0.5 * ((wl - center) / sigma) ** 2)
        self.grid.y = self.grid.y + lines


class SkySpectrumModel:
    """
    Sky background derived from observing conditions.

    Every call to update() rebuilds the spectrum from the current
    conditions; nothing is cached between calls.
    """

    def __init__(self, conditions: ObservingConditions,
                 sampling: Optional[Sampling] = None):
        """
        Initialize sky model.

        Args:
            conditions: Solar, lunar and telescope properties
            sampling: Output sampling (configured default if None)
        """
        self.conditions = conditions
        self.sampling = sampling or SpectralGrid._default_sampling()

    def update(self) -> SpectralGrid:
        """
        Compute the sky surface brightness.

        Returns:
            New grid in erg/s/cm²/A/arcsec²

        Raises:
            InvalidConfiguration: If an airmass or angle is out of range
        """
        self.conditions.validate()

        extinction = AtmosphericExtinction(self.sampling)
        solar = SolarSpectrum(self.sampling)

        airglow = self.airglow(extinction)
        zodiacal = self.zodiacal_light(extinction, solar)
        moon = self.moonlight(extinction, solar)

        sky = SpectralGrid.constant(0.0, self.sampling)
        sky.add(airglow).add(zodiacal).add(moon)

        if self.sampling.x0 <= 5500 <= self.sampling.xmax:
            logger.debug(f"Sky at 5500 A: airglow {airglow.interp(5500):.3e}, "
                         f"zodiacal {zodiacal.interp(5500):.3e}, moon {moon.interp(5500):.3e}")
        return sky

    def _target_zenith_distance(self) -> float:
        return math.acos(1.0 / self.conditions.telescope.airmass)

    def airglow(self, extinction: AtmosphericExtinction) -> SpectralGrid:
        """Airglow towards the target, including the solar-cycle modulation."""
        x_glow = van_rhijn_airmass(self._target_zenith_distance())

        glow = AirglowSpectrum(self.sampling).grid
        extinction.apply(glow, x_glow - 1)
        glow.scale(x_glow)
        glow.scale(solar_cycle_factor(self.conditions.solar.observation_year))
        return glow

    def zodiacal_light(self, extinction: AtmosphericExtinction,
                       solar: SolarSpectrum) -> SpectralGrid:
        """Zodiacal light towards the target."""
        solar_props = self.conditions.solar
        elongation = solar_props.solar_elongation
        abs_sin_b = abs(math.sin(math.radians(solar_props.ecliptic_latitude)))
        sin45 = math.sin(math.radians(45))

        # S10 units: pole, ecliptic away from the sun, and towards the sun
        h = 56.5 + 92 * (1 - abs_sin_b)
        if elongation < 100 and abs_sin_b < sin45:
            h += 219.2 * (100 - elongation) / 40 * (sin45 - abs_sin_b) / sin45 * (1 - abs_sin_b)

        zodiacal = solar.normalized(5500, 1.0)
        extinction.apply(zodiacal, self.conditions.telescope.airmass)
        zodiacal.scale(2.92e-20 * h)
        return zodiacal

    def moonlight(self, extinction: AtmosphericExtinction,
                  solar: SolarSpectrum) -> SpectralGrid:
        """Scattered moonlight towards the target; zero with the moon below the horizon."""
        lunar = self.conditions.lunar
        if not lunar.moon_above_horizon:
            return SpectralGrid.constant(0.0, self.sampling)

        x_target = van_rhijn_airmass(self._target_zenith_distance())
        x_moon = van_rhijn_airmass(math.radians(lunar.moon_zenith_distance))
        rho = lunar.lunar_elongation
        phase = lunar.lunar_phase

        relative_extinction = extinction.normalized(5500)

        # Scattering function f(rho): Rayleigh + Mie
        rayleigh = SpectralGrid.from_function(lambda wl: (wl / 5500.0) ** -4, self.sampling)
        rayleigh.div(relative_extinction)
        rayleigh.scale((1.06 + math.cos(math.radians(rho)) ** 2) * 10 ** 5.36)

        mie = SpectralGrid.from_function(lambda wl: (wl / 5500.0) ** -0.5, self.sampling)
        mie.div(relative_extinction)
        mie.scale(10 ** (6.15 - rho / 40))

        brightness = rayleigh.add(mie)

        # Illuminance from the moon outside and inside the atmosphere
        moon_mag = -12.73 + 0.026 * abs(phase) + 4e-9 * phase ** 4
        illuminance = 10 ** (-0.4 * (moon_mag + 16.37))
        brightness.scale(illuminance)
        brightness.scale(extinction.transmission(x_moon))

        # Fraction of the light scattered along the line of sight
        scattered = SpectralGrid(self.sampling.x0, self.sampling.dx,
                                 1.0 - extinction.transmission(x_target).y)
        brightness.scale(scattered)

        # Reflected solar spectrum with the lunar albedo slope
        albedo = SpectralGrid.from_function(lambda wl: 1 + 2.1e-4 * (wl - 5500), self.sampling)
        reflected = solar.normalized(5500, 1.12e-19).scale(albedo)
        return brightness.scale(reflected)
