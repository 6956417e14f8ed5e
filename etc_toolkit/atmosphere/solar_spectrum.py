"""
Solar Spectrum Module

Spectral shape of sunlight, used for the zodiacal light (sunlight scattered
by interplanetary dust) and for moonlight (sunlight reflected by the moon).

Physics:
    The Sun emits radiation approximately as a 5778K blackbody, but with
    absorption features from the solar atmosphere (Fraunhofer lines).

    Both sky components only need the spectral SHAPE: the zodiacal light
    and moonlight models normalize the spectrum at 5500 A and supply
    their own absolute scale.

References:
    - Gueymard, 2004: The sun's total and spectral irradiance
    - Leinert et al., 1998: The 1997 reference of diffuse night sky brightness
"""

import numpy as np
from typing import Optional

from etc_toolkit.grid.spectral_grid import Sampling, SpectralGrid


class SolarSpectrum:
    """
    Solar spectral shape on a wavelength grid in Angstrom.

    Planck function for the solar photosphere with simplified Fraunhofer
    absorption.
    """

    T_SUN = 5778  # K

    # Major Fraunhofer lines: (center A, FWHM A, fractional depth)
    FRAUNHOFER = [
        (3933.7, 50, 0.15),   # Ca II K
        (3968.5, 50, 0.12),   # Ca II H
        (4308.0, 30, 0.08),   # CH G band
        (4861.3, 30, 0.10),   # H-beta
        (5167.3, 20, 0.05),   # Mg I b
        (5183.6, 20, 0.05),   # Mg I b
        (5270.0, 20, 0.04),   # Fe I
        (5889.9, 30, 0.08),   # Na D2
        (5895.9, 30, 0.08),   # Na D1
        (6562.8, 40, 0.12),   # H-alpha
        (8542.1, 30, 0.06),   # Ca II triplet
        (8662.1, 30, 0.05),   # Ca II triplet
    ]

    def __init__(self, sampling: Optional[Sampling] = None):
        """
        Initialize solar spectrum model.

        Args:
            sampling: Wavelength sampling (configured default if None)
        """
        self.grid = SpectralGrid.from_function(self._photosphere, sampling)
        self._apply_fraunhofer_correction()

    def _photosphere(self, wavelengths: np.ndarray) -> np.ndarray:
        """Planck function B(λ,T) for the solar temperature (arbitrary units)."""
        h = 6.626e-34  # Planck constant
        c = 2.998e8    # Speed of light
        k = 1.381e-23  # Boltzmann constant

        wl_m = wavelengths * 1e-10
        exp_term = np.clip(h * c / (wl_m * k * self.T_SUN), 0, 700)
        return (2 * h * c**2 / wl_m**5) / (np.exp(exp_term) - 1)

    def _apply_fraunhofer_correction(self):
        """Apply simplified Fraunhofer absorption as Gaussian dips."""
        wl = self.grid.wavelengths
        correction = np.ones_like(wl)
        for center, width, depth in self.FRAUNHOFER:
            sigma = width / 2.355
            correction -= depth * np.exp(-0.5 * ((wl - center) / sigma)**2)

        self.grid.y = self.grid.y * np.clip(correction, 0.7, 1.0)

    def normalized(self, wavelength: float = 5500.0, value: float = 1.0) -> SpectralGrid:
        """Copy of the spectrum scaled to `value` at `wavelength`."""
        return self.grid.copy().scale_to(wavelength, value)
