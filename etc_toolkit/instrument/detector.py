"""
Detector Model and Noise Sources

Noise budget of a CCD pixel for exposure time calculations.

Noise Sources in Imaging Detectors:

1. PHOTON (SHOT) NOISE
   - Poisson statistics: σ = √N, for both the object and the sky

2. READ NOISE
   - Constant per read (independent of signal)
   - Added once per binned pixel per frame: on-chip binning sums the
     charge before it is read out

3. DARK CURRENT
   - Accumulates with integration time
   - A binned pixel collects the dark current of binning² physical pixels

Signal-to-Noise Ratio for an aperture of n_pix binned pixels:
    SNR = S / √(S + n_pix (B + D + R²))

    where:
        S = object signal in the aperture (electrons)
        B = sky per binned pixel (electrons)
        D = dark current per binned pixel (electrons)
        R = read noise (electrons RMS)

References:
    - Janesick, 2001: Scientific Charge-Coupled Devices
    - Howell, 2006: Handbook of CCD Astronomy
"""

import numpy as np
from dataclasses import dataclass

from etc_toolkit.errors import InvalidConfiguration


@dataclass(frozen=True)
class DetectorModel:
    """
    Detector parameters.

    All noise values in electrons (e-) unless otherwise specified.
    """
    read_noise_e: float = 10.0          # Read noise (electrons RMS per read)
    dark_current_e_s: float = 0.008     # Dark current (electrons/pixel/second)
    saturation_level_e: float = 65000.0 # Saturation (electrons per binned pixel)
    pixel_scale_arcsec: float = 0.11    # Unbinned pixel scale (arcsec/pixel)

    def __post_init__(self):
        if not self.pixel_scale_arcsec > 0:
            raise InvalidConfiguration(f"Pixel scale must be positive, got {self.pixel_scale_arcsec}")
        if not (self.read_noise_e >= 0 and self.dark_current_e_s >= 0):
            raise InvalidConfiguration("Read noise and dark current must be non-negative")
        if not self.saturation_level_e > 0:
            raise InvalidConfiguration(
                f"Saturation level must be positive, got {self.saturation_level_e}")

    def binned_pixel_scale(self, binning: int = 1) -> float:
        return self.pixel_scale_arcsec * binning

    def binned_pixel_area(self, binning: int = 1) -> float:
        """Solid angle of a binned pixel (arcsec²)."""
        return self.binned_pixel_scale(binning) ** 2

    def dark_electrons(self, integration_time_s: float, binning: int = 1) -> float:
        """Dark current collected by one binned pixel."""
        return self.dark_current_e_s * integration_time_s * binning ** 2

    def pixel_noise(self, sky_e, integration_time_s: float, binning: int = 1):
        """
        Noise of one binned pixel without the object.

        Args:
            sky_e: Sky signal in the binned pixel (electrons)
            integration_time_s: Integration time
            binning: On-chip binning factor

        Returns:
            Noise (electrons RMS)
        """
        dark_e = self.dark_electrons(integration_time_s, binning)
        return np.sqrt(sky_e + dark_e + self.read_noise_e ** 2)

    def calculate_snr(self, signal_e, n_pixels, sky_e,
                      integration_time_s: float, binning: int = 1,
                      repeat: int = 1):
        """
        Calculate signal-to-noise ratio of an aperture measurement.

        SNR = S / √(S + N_frames × n_pix × (B + D + R²))

        Args:
            signal_e: Object signal in the aperture summed over all frames
            n_pixels: Number of binned pixels in the aperture
            sky_e: Sky per binned pixel per frame
            integration_time_s: Integration time per frame
            binning: On-chip binning factor
            repeat: Number of frames

        Returns:
            SNR (same shape as signal_e)
        """
        pixel_variance = self.pixel_noise(sky_e, integration_time_s, binning) ** 2
        total_noise = np.sqrt(signal_e + repeat * n_pixels * pixel_variance)
        return signal_e / total_noise

    def saturates(self, peak_e: float, sky_e: float) -> bool:
        """True if object peak plus sky reaches the saturation level."""
        return peak_e + sky_e >= self.saturation_level_e

    def get_noise_summary(self, integration_time_s: float = 100.0, binning: int = 1) -> str:
        """Get summary of noise characteristics."""
        dark_e = self.dark_electrons(integration_time_s, binning)

        summary = f"""
Detector Noise Model Summary
============================

Pixel scale: {self.pixel_scale_arcsec:.3f}"/pix (binned {binning}x{binning}: {self.binned_pixel_scale(binning):.3f}"/pix)
Saturation: {self.saturation_level_e:,.0f} e-

Noise Sources (for {integration_time_s:.1f} s integration):
  Read Noise: {self.read_noise_e:.1f} e- RMS
  Dark Current: {self.dark_current_e_s:.3f} e-/s/pix -> {dark_e:.1f} e- per binned pixel
  Dark Shot Noise: {np.sqrt(dark_e):.1f} e- RMS
"""
        return summary
