"""
Tests for the command-line interface and plotting.

Run with: pytest tests/test_cli.py -v
"""

import sys

import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest


class TestSnrCli:
    """Test etc-snr."""

    def test_parser_defaults(self):
        """Defaults match a dark-time V band exposure."""
        from cli import build_snr_parser

        args = build_snr_parser().parse_args([])
        assert args.filter == 'V'
        assert args.time == 100.0
        assert args.airmass == 1.0
        assert args.moon_zenith == 180.0

    def test_rejects_unknown_filter(self):
        """Filter choices come from the catalog."""
        from cli import build_snr_parser

        with pytest.raises(SystemExit):
            build_snr_parser().parse_args(['--filter', 'K'])

    def test_run_and_write(self, tmp_path, capsys):
        """A run prints the table and writes the requested files."""
        from cli import run_snr
        from etc_toolkit.grid import SpectralGrid

        sky_path = tmp_path / 'sky.txt'
        throughput_path = tmp_path / 'throughput.txt'
        plot_path = tmp_path / 'snr.png'

        report = run_snr([
            '--magnitude', '19', '--filter', 'R', '--time', '120', '--repeat', '3',
            '--apertures', '1.0', '1.5',
            '--write-sky', str(sky_path),
            '--write-throughput', str(throughput_path),
            '--plot', str(plot_path),
        ])

        out = capsys.readouterr().out
        assert 'S/N' in out
        assert len(report.results) == 2

        sky = SpectralGrid.read(sky_path)
        assert sky.n == report.sky.n
        np.testing.assert_allclose(sky.y, report.sky.y, rtol=1e-8)
        assert throughput_path.exists()
        assert plot_path.stat().st_size > 0

    def test_ab_flat_target(self):
        """A flat AB target normalized at 8000 A gives defined results."""
        from cli import run_snr

        report = run_snr(['--flat', '--ab', '--ab-wavelength', '8000', '--magnitude', '22',
                          '--filter', 'I', '--apertures', '1.0'])
        assert report.results[0].is_defined
        assert 'AB Reference Flux' in report.target_name

    def test_entry_point_exits_cleanly(self, capsys):
        """The console script returns None, so a successful run exits 0."""
        from cli import snr_cli

        with pytest.raises(SystemExit) as exc:
            sys.exit(snr_cli(['--magnitude', '18', '--time', '10', '--apertures', '1.0']))
        assert exc.value.code is None
        assert 'S/N' in capsys.readouterr().out

    def test_invalid_setting_exits(self):
        """Configuration errors exit with status 2."""
        from cli import snr_cli

        with pytest.raises(SystemExit) as exc:
            snr_cli(['--time', '0'])
        assert exc.value.code == 2

    def test_missing_spectrum_exits(self, tmp_path):
        """A missing spectrum file exits with status 1."""
        from cli import snr_cli

        with pytest.raises(SystemExit) as exc:
            snr_cli(['--spectrum', str(tmp_path / 'missing.txt')])
        assert exc.value.code == 1


class TestConfigCli:
    """Test etc-config."""

    def test_show(self, capsys):
        """--show prints the configuration as YAML."""
        from cli import config_cli

        config_cli(['--show'])
        out = capsys.readouterr().out
        assert 'pixel_scale_arcsec: 0.11' in out

    def test_init(self, tmp_path, capsys):
        """--init writes a template once."""
        from cli import config_cli

        config_cli(['--init'])
        assert (tmp_path / '.etc_toolkit' / 'config.yaml').exists()
        capsys.readouterr()

        config_cli(['--init'])
        assert 'already exists' in capsys.readouterr().out


class TestPlotter:
    """Test the matplotlib plots."""

    def test_plot_spectra_decimates(self, coarse_sampling):
        """Plotted lines never exceed the display limit."""
        from etc_toolkit.grid import SpectralGrid
        from etc_toolkit.visualization import ETCPlotter

        grid = SpectralGrid.constant(1.0, coarse_sampling)
        fig = ETCPlotter(max_points=500).plot_spectra({'sky': grid})
        line = fig.axes[0].get_lines()[0]
        assert len(line.get_xdata()) <= 500

    def test_plot_report(self, coarse_sampling):
        """Report plots build without error."""
        from etc_toolkit.configuration import ExposureConfig, ObservingConditions
        from etc_toolkit.exposure import ExposureCalculator
        from etc_toolkit.instrument import Instrument
        from etc_toolkit.spectra import Blackbody, NormalizedSpectrum, TargetSpectrum
        from etc_toolkit.visualization import ETCPlotter

        target = TargetSpectrum([NormalizedSpectrum(Blackbody(5800), 20.0)])
        report = ExposureCalculator(Instrument(sampling=coarse_sampling)).evaluate(
            target, ObservingConditions(), ExposureConfig())

        plotter = ETCPlotter()
        assert len(plotter.plot_report(report).axes) == 3
        assert len(plotter.plot_snr_curve(report).axes) == 2
