"""
ETC Plotter - Matplotlib-based visualizations

Plots of the spectra that enter an exposure evaluation and of the
resulting signal-to-noise as a function of aperture. Spectra are decimated
with SpectralGrid.decimated() before plotting so that no line has more
than ~1000 points.
"""

from typing import Dict, Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from etc_toolkit.grid.spectral_grid import SpectralGrid


class ETCPlotter:
    """
    Visualization of exposure time calculator inputs and results.

    All methods return matplotlib figures that can be saved or displayed.
    """

    COLORS = {
        'target': '#2ecc71',
        'sky': '#3498db',
        'throughput': '#f39c12',
        'snr': '#9b59b6',
        'saturated': '#e74c3c',
    }

    def __init__(self, style: str = 'seaborn-v0_8-whitegrid',
                 max_points: Optional[int] = None):
        """
        Initialize plotter.

        Args:
            style: Matplotlib style to use
            max_points: Display decimation limit (configured default if None)
        """
        try:
            plt.style.use(style)
        except OSError:
            pass  # Use default if style not available
        self.max_points = max_points

    def plot_spectra(self, spectra: Dict[str, SpectralGrid],
                     title: str = "Spectra", log_scale: bool = False) -> Figure:
        """
        Plot one or more spectra against wavelength.

        Args:
            spectra: Dict of {label: grid}
            title: Plot title
            log_scale: Logarithmic y axis

        Returns:
            Matplotlib figure
        """
        fig, ax = plt.subplots(figsize=(12, 6))

        for label, grid in spectra.items():
            shown = grid.decimated(self.max_points)
            ax.plot(shown.wavelengths, shown.y, label=label,
                    color=self.COLORS.get(label), linewidth=1.0)

        ax.set_xlabel("Wavelength (Å)")
        ax.set_ylabel("Value")
        ax.set_title(title)
        if log_scale:
            ax.set_yscale('log')
        ax.legend(loc='best')
        ax.grid(True, alpha=0.3)

        plt.tight_layout()
        return fig

    def plot_snr_curve(self, report, title: str = "S/N versus aperture") -> Figure:
        """
        Plot signal-to-noise and aperture flux against aperture radius.

        Saturating apertures are marked in red.

        Args:
            report: ExposureReport from ExposureCalculator.evaluate
            title: Plot title

        Returns:
            Matplotlib figure
        """
        defined = [r for r in report.results if r.is_defined]
        fig, ax1 = plt.subplots(figsize=(8, 5))

        if defined:
            radii = np.array([r.aperture for r in defined])
            sn = np.array([r.sn for r in defined])
            flux = np.array([r.aperture_flux for r in defined])
            saturated = np.array([r.saturates(report.detector.saturation_level_e) for r in defined])

            ax1.plot(radii, sn, 'o-', color=self.COLORS['snr'], label='S/N')
            if saturated.any():
                ax1.plot(radii[saturated], sn[saturated], 'x', color=self.COLORS['saturated'],
                         markersize=10, label='saturated')

            ax2 = ax1.twinx()
            ax2.plot(radii, flux, 's--', color=self.COLORS['target'], alpha=0.6)
            ax2.set_ylabel("Aperture flux (e-)")

        ax1.set_xlabel("Aperture radius (FWHM)")
        ax1.set_ylabel("S/N")
        ax1.set_title(f"{title} (FWHM {report.fwhm:.2f}\")")
        ax1.legend(loc='lower right')
        ax1.grid(True, alpha=0.3)

        plt.tight_layout()
        return fig

    def plot_report(self, report) -> Figure:
        """Target, sky and throughput of an evaluation in one figure."""
        fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(12, 10))

        target = report.target.decimated(self.max_points)
        sky = report.sky.decimated(self.max_points)
        throughput = report.throughput.decimated(self.max_points)

        ax1.plot(target.wavelengths, target.y, color=self.COLORS['target'])
        ax1.set_ylabel("Target (ph/s/Å)")
        ax1.set_title(report.target_name or "Target")

        ax2.plot(sky.wavelengths, sky.y, color=self.COLORS['sky'])
        ax2.set_ylabel("Sky (ph/s/Å/arcsec²)")

        ax3.plot(throughput.wavelengths, throughput.y, color=self.COLORS['throughput'])
        ax3.set_ylabel("Throughput")
        ax3.set_xlabel("Wavelength (Å)")
        ax3.set_ylim(0, 1.05)

        for ax in (ax1, ax2, ax3):
            ax.grid(True, alpha=0.3)

        plt.tight_layout()
        return fig
