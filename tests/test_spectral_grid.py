"""
Tests for the uniform spectral grid.

Run with: pytest tests/test_spectral_grid.py -v
"""

import numpy as np
import pytest


class TestConstruction:
    """Test grid construction and validation."""

    def test_rejects_non_positive_spacing(self):
        """Spacing must be strictly positive."""
        from etc_toolkit.grid import SpectralGrid
        from etc_toolkit.errors import InvalidValue

        with pytest.raises(InvalidValue):
            SpectralGrid(5000.0, 0.0, [1.0, 2.0])
        with pytest.raises(InvalidValue):
            SpectralGrid(5000.0, -1.0, [1.0, 2.0])

    def test_rejects_empty_and_non_finite_values(self):
        """Empty or NaN samples are rejected unless explicitly allowed."""
        from etc_toolkit.grid import SpectralGrid
        from etc_toolkit.errors import InvalidValue

        with pytest.raises(InvalidValue):
            SpectralGrid(5000.0, 1.0, [])
        with pytest.raises(InvalidValue):
            SpectralGrid(5000.0, 1.0, [1.0, np.nan])

        grid = SpectralGrid(5000.0, 1.0, [1.0, np.nan], allow_undefined=True)
        assert np.isnan(grid.y[1])

    def test_default_sampling_from_config(self):
        """Grids built without a sampling use the configured 3200-10000 A grid."""
        from etc_toolkit.grid import SpectralGrid

        grid = SpectralGrid.constant(1.0)
        assert grid.x0 == 3200.0
        assert grid.dx == 0.5
        assert grid.xmax == pytest.approx(10000.0)

    def test_from_table_zero_outside(self, visual_sampling):
        """Tabulated data are zero outside the table's wavelength range."""
        from etc_toolkit.grid import SpectralGrid

        grid = SpectralGrid.from_table([5200, 5400, 5600], [1.0, 2.0, 1.0],
                                       sampling=visual_sampling, method='linear')
        assert grid.interp(5100) == 0.0
        assert grid.interp(5300) == pytest.approx(1.5)
        assert grid.interp(5400) == pytest.approx(2.0)
        assert grid.interp(5800) == 0.0

    def test_from_table_rejects_unsorted(self):
        """Table wavelengths must increase."""
        from etc_toolkit.grid import SpectralGrid
        from etc_toolkit.errors import InvalidValue

        with pytest.raises(InvalidValue):
            SpectralGrid.from_table([5000, 4900, 5100], [1, 2, 3])


class TestIntegrationAndLookup:
    """Test integrate() and interp()."""

    def test_flat_grid_integral(self):
        """100 samples of 1 at 0.01 A spacing integrate to 1."""
        from etc_toolkit.grid import SpectralGrid

        grid = SpectralGrid(5000.0, 0.01, np.ones(100))
        assert grid.integrate() == pytest.approx(1.0)

    def test_interp_exact_at_samples(self):
        """Interpolation is exact at sample wavelengths and linear between them."""
        from etc_toolkit.grid import SpectralGrid

        grid = SpectralGrid(1000.0, 2.0, [1.0, 3.0, 5.0, 7.0])
        assert grid.interp(1002.0) == 3.0
        assert grid.interp(1003.0) == pytest.approx(4.0)
        assert grid.interp(1006.0) == 7.0
        np.testing.assert_allclose(grid.interp([1000.0, 1005.0]), [1.0, 6.0])

    def test_interp_out_of_domain(self):
        """Wavelengths outside [xmin, xmax] raise OutOfDomain."""
        from etc_toolkit.grid import SpectralGrid
        from etc_toolkit.errors import OutOfDomain

        grid = SpectralGrid(1000.0, 2.0, [1.0, 3.0, 5.0, 7.0])
        with pytest.raises(OutOfDomain):
            grid.interp(999.9)
        with pytest.raises(OutOfDomain):
            grid.interp(1006.1)

    def test_scale_to(self, visual_sampling):
        """scale_to normalizes the value at one wavelength."""
        from etc_toolkit.grid import SpectralGrid

        grid = SpectralGrid.from_function(lambda wl: wl / 1000.0, visual_sampling)
        grid.scale_to(5500.0, 2.0)
        assert grid.interp(5500.0) == pytest.approx(2.0)
        assert grid.interp(5000.0) == pytest.approx(2.0 * 5000 / 5500)


class TestResampling:
    """Test display decimation, refinement and rebinning."""

    def test_decimation_point_count(self):
        """Bin size doubles until at most max_points samples remain."""
        from etc_toolkit.grid import SpectralGrid

        grid = SpectralGrid(3200.0, 0.5, np.arange(2500, dtype=float))
        shown = grid.decimated(max_points=1024)

        # 2500 -> 1250 -> 625
        assert shown.n == 625
        assert shown.dx == pytest.approx(2.0)
        assert shown.x0 == pytest.approx(3200.0 + 1.5 * 0.5)
        assert shown.y[0] == pytest.approx(np.mean([0, 1, 2, 3]))

    def test_decimation_leaves_original(self):
        """decimated() works on a copy."""
        from etc_toolkit.grid import SpectralGrid

        grid = SpectralGrid(3200.0, 0.5, np.ones(3000))
        grid.decimated(max_points=1000)
        assert grid.n == 3000
        assert grid.dx == 0.5

    def test_default_max_points(self):
        """The configured display limit is 1024."""
        from etc_toolkit.grid import SpectralGrid

        shown = SpectralGrid.constant(1.0).decimated()
        assert shown.n <= 1024
        assert shown.n == 13601 // 16

    def test_trailing_samples_dropped(self):
        """Samples that do not fill a whole bin are dropped."""
        from etc_toolkit.grid import SpectralGrid

        grid = SpectralGrid(0.0, 1.0, np.arange(10, dtype=float))
        grid.resample(factor=3)
        assert grid.n == 3
        np.testing.assert_allclose(grid.y, [1.0, 4.0, 7.0])

    def test_bad_factor(self):
        """Resampling factors must be positive integers."""
        from etc_toolkit.grid import SpectralGrid
        from etc_toolkit.errors import InvalidValue

        grid = SpectralGrid(0.0, 1.0, np.ones(10))
        with pytest.raises(InvalidValue):
            grid.resample(factor=0)
        with pytest.raises(InvalidValue):
            grid.refine(1.5)

    def test_refine_then_resample_is_identity(self):
        """refine() is undone by resample() with the same factor."""
        from etc_toolkit.grid import SpectralGrid

        values = np.array([1.0, 4.0, 2.0, 8.0])
        grid = SpectralGrid(5000.0, 2.0, values)
        grid.refine(4).resample(factor=4)

        assert grid.x0 == pytest.approx(5000.0)
        assert grid.dx == pytest.approx(2.0)
        np.testing.assert_allclose(grid.y, values)

    def test_rebin_preserves_area(self):
        """Rebinning onto coarser bins inside the domain keeps the integral."""
        from etc_toolkit.grid import Sampling, SpectralGrid

        rng = np.random.default_rng(42)
        grid = SpectralGrid(5000.0, 0.5, rng.uniform(0, 10, 200))
        before = grid.integrate()

        grid.rebin(Sampling(5000.25, 1.0, 100))
        assert grid.integrate() == pytest.approx(before, rel=1e-10)

    def test_rebin_edge_bins(self):
        """Coarse bins hanging over the domain edge average the covered part only."""
        from etc_toolkit.grid import Sampling, SpectralGrid

        grid = SpectralGrid(5000.0, 1.0, np.ones(101))
        grid.rebin(Sampling(5000.0, 4.0, 26))

        np.testing.assert_allclose(grid.y, 1.0)


class TestArithmetic:
    """Test in-place pointwise arithmetic between grids."""

    def test_scale_by_unit_filter_is_identity(self, visual_sampling):
        """Multiplying by unit transmission changes nothing."""
        from etc_toolkit.grid import SpectralGrid, ThroughputFilter

        grid = SpectralGrid.from_function(lambda wl: np.sin(wl / 100.0) + 2, visual_sampling)
        expected = grid.y.copy()
        grid.scale(ThroughputFilter.unit(visual_sampling))
        np.testing.assert_array_equal(grid.y, expected)

    def test_scale_by_shifted_grid(self):
        """Samples outside the other grid's domain are multiplied by zero."""
        from etc_toolkit.grid import Sampling, SpectralGrid

        grid = SpectralGrid.constant(2.0, Sampling(5000.0, 1.0, 101))
        other = SpectralGrid.constant(3.0, Sampling(5050.0, 1.0, 101))
        grid.scale(other)

        np.testing.assert_array_equal(grid.y[:50], 0.0)
        np.testing.assert_array_equal(grid.y[50:], 6.0)

    def test_scale_by_different_spacing(self):
        """A grid with another spacing is rebinned before multiplying."""
        from etc_toolkit.grid import Sampling, SpectralGrid

        grid = SpectralGrid.constant(2.0, Sampling(5000.0, 1.0, 101))
        other = SpectralGrid.constant(3.0, Sampling(5000.0, 2.0, 51))
        grid.scale(other)

        np.testing.assert_allclose(grid.y, 6.0)

    def test_add_and_div(self):
        """add() is zero outside the other domain; div() skips zero divisors."""
        from etc_toolkit.grid import SpectralGrid

        grid = SpectralGrid(100.0, 1.0, [1.0, 2.0, 3.0, 4.0])
        grid.add(SpectralGrid(102.0, 1.0, [10.0, 10.0, 10.0]))
        np.testing.assert_array_equal(grid.y, [1.0, 2.0, 13.0, 14.0])

        grid.div(SpectralGrid(100.0, 1.0, [2.0, 0.0, 13.0, 0.0]))
        np.testing.assert_array_equal(grid.y, [0.5, 2.0, 1.0, 14.0])

    def test_quantize(self):
        """Energy to photon flux: y * lambda / hc."""
        from etc_toolkit.grid import HC_ERG_ANGSTROM, SpectralGrid

        grid = SpectralGrid(5000.0, 1000.0, [1.0, 1.0]).quantize()
        assert grid.y[0] == pytest.approx(5000.0 / HC_ERG_ANGSTROM)
        assert grid.y[1] == pytest.approx(6000.0 / HC_ERG_ANGSTROM)

    def test_copy_is_independent(self):
        """Changing a copy does not touch the original."""
        from etc_toolkit.grid import SpectralGrid

        grid = SpectralGrid(0.0, 1.0, [1.0, 2.0])
        clone = grid.copy().scale(10.0)
        np.testing.assert_array_equal(grid.y, [1.0, 2.0])
        np.testing.assert_array_equal(clone.y, [10.0, 20.0])


class TestFileIO:
    """Test the two-column text format."""

    def test_write_read_round_trip(self, tmp_path):
        """A written uniform grid reads back with the same sampling."""
        from etc_toolkit.grid import SpectralGrid

        grid = SpectralGrid(4000.0, 0.5, np.linspace(1e-17, 5e-17, 50))
        path = tmp_path / 'spectrum.txt'
        grid.write(path)

        lines = path.read_text().splitlines()
        assert len(lines) == 50
        assert len(lines[0].split()) == 2

        back = SpectralGrid.read(path)
        assert back.x0 == pytest.approx(4000.0)
        assert back.dx == pytest.approx(0.5)
        np.testing.assert_allclose(back.y, grid.y, rtol=1e-8)

    def test_read_comments_and_irregular_table(self, tmp_path, visual_sampling):
        """Comment lines are skipped; irregular tables are resampled."""
        from etc_toolkit.grid import SpectralGrid

        path = tmp_path / 'table.dat'
        path.write_text("# wavelength flux\n! second header\n"
                        "5100 1.0\n5200 1.0\n5450 1.0\n5900 1.0\n")

        grid = SpectralGrid.read(path, sampling=visual_sampling)
        assert grid.sampling == visual_sampling
        assert grid.interp(5500.0) == pytest.approx(1.0)
        assert grid.interp(5050.0) == 0.0

    def test_read_malformed(self, tmp_path):
        """Lines that are not two numbers raise InvalidValue."""
        from etc_toolkit.grid import SpectralGrid
        from etc_toolkit.errors import InvalidValue

        bad_token = tmp_path / 'bad.txt'
        bad_token.write_text("5000 1.0\n5001 abc\n")
        with pytest.raises(InvalidValue):
            SpectralGrid.read(bad_token)

        three_columns = tmp_path / 'three.txt'
        three_columns.write_text("5000 1.0 2.0\n5001 1.0 2.0\n")
        with pytest.raises(InvalidValue):
            SpectralGrid.read(three_columns)

        single = tmp_path / 'single.txt'
        single.write_text("5000 1.0\n")
        with pytest.raises(InvalidValue):
            SpectralGrid.read(single)
