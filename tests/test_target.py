"""
Tests for target spectrum components and Johnson photometry.

Run with: pytest tests/test_target.py -v

References:
    Bessell (1990). PASP, 102, 1181-1199.
    Oke & Gunn (1983). ApJ, 266, 713-717.
"""

import math

import numpy as np
import pytest


class TestComponents:
    """Test individual spectrum components."""

    def test_blackbody_wien_peak(self, coarse_sampling):
        """A 5800 K blackbody peaks near 5000 A (Wien's law)."""
        from etc_toolkit.spectra import Blackbody

        grid = Blackbody(5800).grid(coarse_sampling)
        peak = grid.wavelengths[np.argmax(grid.y)]
        assert peak == pytest.approx(2.8978e7 / 5800, rel=0.01)

    def test_blackbody_rejects_zero_temperature(self):
        """Temperatures must be positive."""
        from etc_toolkit.spectra import Blackbody
        from etc_toolkit.errors import InvalidValue

        with pytest.raises(InvalidValue):
            Blackbody(0.0)

    def test_emission_line_total_flux(self, visual_sampling):
        """The Gaussian line integrates to its total flux."""
        from etc_toolkit.spectra import EmissionLine

        line = EmissionLine(5500.0, fwhm=10.0, total_flux=1e-15)
        assert line.grid(visual_sampling).integrate() == pytest.approx(1e-15, rel=1e-6)

    def test_ab_reference(self):
        """F_λ = F_ν c / λ² for AB = 0."""
        from etc_toolkit.spectra import ABReference

        flux = ABReference().flux(np.array([5500.0]))[0]
        assert flux == pytest.approx(3.63e-20 * 2.99792458e18 / 5500.0 ** 2)

    def test_user_supplied_zero_outside(self, tmp_path, visual_sampling):
        """A user spectrum contributes nothing outside its own range."""
        from etc_toolkit.spectra import UserSuppliedSpectrum

        path = tmp_path / 'object.txt'
        path.write_text("\n".join(f"{wl} 2e-16" for wl in range(5200, 5401)))

        component = UserSuppliedSpectrum.from_file(path)
        grid = component.grid(visual_sampling)
        assert grid.interp(5300.0) == pytest.approx(2e-16)
        assert grid.interp(5100.0) == 0.0
        assert grid.interp(5900.0) == 0.0


class TestNormalization:
    """Test magnitude normalization."""

    def test_vega_v_zero_point(self, visual_sampling):
        """V = 0 means 10^-8.43 erg/s/cm²/A at 5500 A."""
        from etc_toolkit.spectra import Blackbody, NormalizedSpectrum

        spectrum = NormalizedSpectrum(Blackbody(9500), magnitude=0.0)
        grid = spectrum.grid(visual_sampling)
        assert grid.interp(5500.0) == pytest.approx(10 ** -8.43)

    def test_five_magnitudes_is_factor_hundred(self, visual_sampling):
        """Five magnitudes fainter is 100 times less flux."""
        from etc_toolkit.spectra import Blackbody, NormalizedSpectrum

        bright = NormalizedSpectrum(Blackbody(6000), magnitude=15.0).grid(visual_sampling)
        faint = NormalizedSpectrum(Blackbody(6000), magnitude=20.0).grid(visual_sampling)
        np.testing.assert_allclose(bright.y / faint.y, 100.0)

    def test_ab_normalization_of_flat_spectrum(self, visual_sampling):
        """A flat AB spectrum normalized to m_AB has the reference flux scaled by 10^(-0.4 m)."""
        from etc_toolkit.spectra import ABReference, NormalizedSpectrum

        spectrum = NormalizedSpectrum(ABReference(), magnitude=25.0,
                                      system=NormalizedSpectrum.AB, wavelength=5500.0)
        grid = spectrum.grid(visual_sampling)
        expected = ABReference.reference_flux(5500.0) * 10 ** (-0.4 * 25.0)
        assert grid.interp(5500.0) == pytest.approx(expected, rel=1e-3)

    def test_vanishing_flux_cannot_normalize(self):
        """A spectrum with no flux at 5500 A cannot be normalized."""
        from etc_toolkit.spectra import EmissionLine, NormalizedSpectrum
        from etc_toolkit.errors import InvalidValue

        spectrum = NormalizedSpectrum(EmissionLine(8000.0, 1.0, 1e-15), magnitude=20.0)
        with pytest.raises(InvalidValue):
            spectrum.normalization_factor()

    def test_unknown_system(self):
        """Only Vega and AB magnitudes are known."""
        from etc_toolkit.spectra import Blackbody, NormalizedSpectrum
        from etc_toolkit.errors import InvalidValue

        with pytest.raises(InvalidValue):
            NormalizedSpectrum(Blackbody(5000), 20.0, system='st')


class TestTargetSpectrum:
    """Test the sum of components."""

    def test_components_add_up(self, visual_sampling):
        """The target grid is the sum of its components."""
        from etc_toolkit.spectra import EmissionLine, PowerLaw, TargetSpectrum

        continuum = PowerLaw(0.0)
        line = EmissionLine(5500.0, 5.0, 10.0)
        target = TargetSpectrum([continuum, line])

        grid = target.grid(visual_sampling)
        expected = continuum.grid(visual_sampling).add(line.grid(visual_sampling))
        np.testing.assert_allclose(grid.y, expected.y)
        assert target.get_number_of_spectra() == 2
        assert target.name() == 'Power Law::Emission Line'

    def test_same_component_twice(self):
        """A component object can only be added once."""
        from etc_toolkit.spectra import PowerLaw, TargetSpectrum
        from etc_toolkit.errors import InvalidValue

        component = PowerLaw(-2.0)
        target = TargetSpectrum([component])
        with pytest.raises(InvalidValue):
            target.add(component)

        # An equal but distinct component is fine
        target.add(PowerLaw(-2.0))
        assert target.get_number_of_spectra() == 2

    def test_remove(self):
        """Removing the only component leaves an empty target."""
        from etc_toolkit.spectra import PowerLaw, TargetSpectrum

        component = PowerLaw(1.0)
        target = TargetSpectrum([component])
        target.remove(component)
        assert target.get_number_of_spectra() == 0
        assert target.components == []


class TestJohnsonFilter:
    """Test Johnson photometry of synthetic spectra."""

    def test_unknown_band(self):
        """Only UBVRI are defined."""
        from etc_toolkit.spectra import JohnsonFilter
        from etc_toolkit.errors import InvalidValue

        with pytest.raises(InvalidValue):
            JohnsonFilter('K')

    def test_v_magnitude_of_normalized_spectrum(self, coarse_sampling):
        """A 9500 K spectrum normalized to V = 12 measures close to 12 in V."""
        from etc_toolkit.spectra import Blackbody, JohnsonFilter, NormalizedSpectrum

        grid = NormalizedSpectrum(Blackbody(9500), magnitude=12.0).grid(coarse_sampling)
        v = JohnsonFilter('V', coarse_sampling).magnitude(grid)
        assert v == pytest.approx(12.0, abs=0.15)

    def test_magnitude_difference(self, coarse_sampling):
        """Magnitudes differ by -2.5 log10 of the flux ratio."""
        from etc_toolkit.spectra import Blackbody, JohnsonFilter

        band = JohnsonFilter('B', coarse_sampling)
        grid = Blackbody(6000).grid(coarse_sampling)
        m1 = band.magnitude(grid)
        m2 = band.magnitude(grid.copy().scale(10.0))
        assert m1 - m2 == pytest.approx(2.5)
        assert math.isfinite(m1)
