"""
Target Spectra

Flux density of the observed object (erg/s/cm²/A above the atmosphere),
built as a sum of named components:

    Blackbody        F(λ) = C1 / λ^5 / (exp(C2 / λT) - 1)
    PowerLaw         F(λ) = λ^index
    EmissionLine     Gaussian of given FWHM holding a given total flux
    ABReference      F(λ) = F_ν c / λ² with F_ν = 3.63e-20 erg/s/cm²/Hz (AB = 0)
    UserSupplied     tabulated spectrum on its own grid

Any component can be wrapped in NormalizedSpectrum to scale it to a V
magnitude (Vega system, at 5500 A) or an AB magnitude at a chosen
wavelength (averaged over a 100 A box).

References:
    - Oke & Gunn, 1983: Secondary standard stars for absolute spectrophotometry
    - Bessell, 1990: UBVRI passbands
"""

import math
import logging
from typing import List, Optional

import numpy as np

from etc_toolkit.errors import InvalidValue
from etc_toolkit.grid.spectral_grid import Sampling, SpectralGrid
from etc_toolkit.grid.throughput import ThroughputFilter
from etc_toolkit.instrument.catalog import JOHNSON_BANDS

logger = logging.getLogger(__name__)


class SpectrumComponent:
    """Base class for one contribution to a target spectrum."""

    name = 'Spectrum'

    def flux(self, wavelengths: np.ndarray) -> np.ndarray:
        """Flux density at the given wavelengths (Angstrom)."""
        raise NotImplementedError

    def grid(self, sampling: Optional[Sampling] = None) -> SpectralGrid:
        """Component sampled on a uniform grid."""
        return SpectralGrid.from_function(self.flux, sampling)


class Blackbody(SpectrumComponent):
    """Planck spectrum in erg/s/cm²/A (per unit solid angle scaling left to normalization)."""

    name = 'Blackbody'

    C1 = 3.74185e11        # 2πhc² in erg A^4 / s / cm²
    C2 = 1.438820545e8     # hc/k in A K

    def __init__(self, temperature: float):
        if not temperature > 0:
            raise InvalidValue(f"The temperature must be positive, got {temperature}")
        self.temperature = float(temperature)

    def flux(self, wavelengths):
        wavelengths = np.asarray(wavelengths, dtype=np.float64)
        exponent = np.clip(self.C2 / (wavelengths * self.temperature), None, 700)
        return (self.C1 / wavelengths ** 5) / np.expm1(exponent)


class PowerLaw(SpectrumComponent):

    name = 'Power Law'

    def __init__(self, index: float):
        self.index = float(index)

    def flux(self, wavelengths):
        return np.asarray(wavelengths, dtype=np.float64) ** self.index


class EmissionLine(SpectrumComponent):
    """Gaussian emission line; `total_flux` in erg/s/cm²."""

    name = 'Emission Line'

    def __init__(self, central_wavelength: float, fwhm: float, total_flux: float):
        if not central_wavelength > 0:
            raise InvalidValue("The central wavelength must be positive.")
        if not fwhm > 0:
            raise InvalidValue("The FWHM must be positive.")
        self.central_wavelength = float(central_wavelength)
        self.fwhm = float(fwhm)
        self.total_flux = float(total_flux)

    @property
    def sigma(self) -> float:
        return self.fwhm / (2 * math.sqrt(2 * math.log(2)))

    def flux(self, wavelengths):
        wavelengths = np.asarray(wavelengths, dtype=np.float64)
        peak = self.total_flux / (math.sqrt(2 * math.pi) * self.sigma)
        return peak * np.exp(-0.5 * ((wavelengths - self.central_wavelength) / self.sigma) ** 2)


class ABReference(SpectrumComponent):
    """Flux density of an AB = 0 source."""

    name = 'AB Reference Flux'

    F_NU = 3.63e-20               # erg/s/cm²/Hz
    SPEED_OF_LIGHT = 2.99792458e18  # A/s

    @classmethod
    def reference_flux(cls, wavelengths):
        wavelengths = np.asarray(wavelengths, dtype=np.float64)
        return cls.F_NU * cls.SPEED_OF_LIGHT / wavelengths ** 2

    def flux(self, wavelengths):
        return self.reference_flux(wavelengths)


class UserSuppliedSpectrum(SpectrumComponent):
    """Tabulated spectrum; rebinned onto the requested sampling, zero outside its range."""

    name = 'User Supplied'

    def __init__(self, grid: SpectralGrid, name: Optional[str] = None):
        self.spectrum = grid.copy()
        if name:
            self.name = name

    @classmethod
    def from_file(cls, path, sampling: Optional[Sampling] = None) -> 'UserSuppliedSpectrum':
        return cls(SpectralGrid.read(path, sampling=sampling), name=str(path))

    def flux(self, wavelengths):
        wavelengths = np.asarray(wavelengths, dtype=np.float64)
        inside = (wavelengths >= self.spectrum.xmin) & (wavelengths <= self.spectrum.xmax)
        values = np.zeros_like(wavelengths)
        values[inside] = self.spectrum.interp(wavelengths[inside])
        return values

    def grid(self, sampling: Optional[Sampling] = None) -> SpectralGrid:
        sampling = sampling or SpectralGrid._default_sampling()
        target = SpectralGrid.constant(1.0, sampling)
        return target.scale(self.spectrum)


class NormalizedSpectrum(SpectrumComponent):
    """
    Component scaled to a given magnitude.

    Vega system: the flux at 5500 A is set to 10^(-0.4 V - 8.43).
    AB system: the mean flux in a 100 A box around `wavelength` is set to
    the AB reference flux times 10^(-0.4 m).
    """

    VEGA = 'vega'
    AB = 'ab'

    V_REFERENCE_WAVELENGTH = 5500.0
    AB_BOX_WIDTH = 100.0

    def __init__(self, component: SpectrumComponent, magnitude: float,
                 system: str = VEGA, wavelength: float = V_REFERENCE_WAVELENGTH):
        if system not in (self.VEGA, self.AB):
            raise InvalidValue(f"Unknown magnitude system {system!r}")
        if not math.isfinite(magnitude):
            raise InvalidValue(f"Magnitude must be finite, got {magnitude}")
        self.component = component
        self.magnitude = float(magnitude)
        self.system = system
        self.wavelength = float(wavelength)
        self.name = f"{component.name} ({system} {magnitude:g})"

    def normalization_factor(self) -> float:
        if self.system == self.VEGA:
            target_flux = 10 ** (-0.4 * self.magnitude - 8.43)
            current = float(self.component.flux(np.array([self.V_REFERENCE_WAVELENGTH]))[0])
            reference = self.V_REFERENCE_WAVELENGTH
        else:
            target_flux = float(ABReference.reference_flux(self.wavelength)) * 10 ** (-0.4 * self.magnitude)
            current = self._box_average()
            reference = self.wavelength

        if current == 0:
            raise InvalidValue(f"No normalization is possible, as the flux vanishes "
                               f"at the reference wavelength ({reference:g} A).")
        return target_flux / current

    def _box_average(self) -> float:
        half = self.AB_BOX_WIDTH / 2
        wavelengths = np.linspace(self.wavelength - half, self.wavelength + half, 201)
        return float(np.mean(self.component.flux(wavelengths)))

    def flux(self, wavelengths):
        return self.component.flux(wavelengths) * self.normalization_factor()

    def grid(self, sampling: Optional[Sampling] = None) -> SpectralGrid:
        return self.component.grid(sampling).scale(self.normalization_factor())


class TargetSpectrum:
    """
    Sum of spectrum components.

    The engine only needs get_number_of_spectra() and grid().
    """

    def __init__(self, components: Optional[List[SpectrumComponent]] = None):
        self._components: List[SpectrumComponent] = []
        for component in components or []:
            self.add(component)

    def add(self, component: SpectrumComponent):
        """Add a component; the same component object may be added only once."""
        if any(existing is component for existing in self._components):
            raise InvalidValue(f"Spectrum component '{component.name}' was already added")
        self._components.append(component)
        logger.debug(f"Target spectrum now {self.name()}")

    def remove(self, component: SpectrumComponent):
        self._components = [c for c in self._components if c is not component]

    @property
    def components(self) -> List[SpectrumComponent]:
        return list(self._components)

    def get_number_of_spectra(self) -> int:
        return len(self._components)

    def name(self) -> str:
        return '::'.join(component.name for component in self._components)

    def grid(self, sampling: Optional[Sampling] = None) -> SpectralGrid:
        """Combined flux of all components on `sampling`."""
        total = SpectralGrid.constant(0.0, sampling)
        for component in self._components:
            total.add(component.grid(total.sampling))
        return total


class JohnsonFilter(ThroughputFilter):
    """Johnson UBVRI passband with its Vega zero point."""

    def __init__(self, band: str, sampling: Optional[Sampling] = None):
        if band not in JOHNSON_BANDS:
            raise InvalidValue(f'The filter band "{band}" is unknown.')
        wavelengths, transmission, ref_wave, ref_flux = JOHNSON_BANDS[band]
        table = ThroughputFilter.from_table(wavelengths, transmission, sampling=sampling,
                                            method='spline')
        super().__init__(table.x0, table.dx, table.y, name=band)
        self.ref_wave = ref_wave
        self.ref_flux = ref_flux

    def magnitude(self, spectrum: SpectralGrid) -> float:
        """
        Vega magnitude of a spectrum in erg/s/cm²/A.

        m = -2.5 log10( Σ T F / Σ T / F_0 )
        """
        weights = spectrum.copy()
        weights.y = np.ones(weights.n)
        weighted = spectrum.copy().scale(self)
        norm = weights.scale(self).integrate()
        if norm == 0:
            raise InvalidValue(f"Spectrum does not overlap the {self.name} band")
        mean_flux = weighted.integrate() / norm
        if mean_flux <= 0:
            raise InvalidValue(f"Spectrum has no positive flux in the {self.name} band")
        return -2.5 * math.log10(mean_flux / self.ref_flux)
