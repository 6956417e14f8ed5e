"""
Exposure Engine

Turns a target spectrum, a sky spectrum and a throughput curve into
aperture photometry predictions.

Signal:
    Photon-rate spectra (photons/s/A, sky per arcsec²) are multiplied by
    the throughput and integrated over wavelength:

        N   = t ∫ F_target(λ) T(λ) dλ              object electrons per frame
        S   = t ∫ F_sky(λ) T(λ) dλ × Ω_pix         sky electrons per binned pixel
        D   = dark × t × binning²                  dark electrons per binned pixel

Point spread function:
    The image is a circular Gaussian of FWHM φ. In binned pixels of size
    p = pixel_scale × binning:

        σ = (φ / p) / (2 √(2 ln 2))

    Encircled energy within radius r:   1 - exp(-r² / 2σ²)
    Fraction in the central pixel:      erf(1 / (2√2 σ))²

Noise:
    For an aperture of n_pix = π r² binned pixels and N_f frames,

        SN = A / √(A + N_f n_pix (S + D + R²))

    where A is the object signal inside the aperture summed over all
    frames. This equals √N_f times the single-frame SN.

Error handling:
    Invalid configuration raises before any computation. An opaque throughput
    or a non-finite result for one aperture marks that aperture undefined;
    the other apertures are still evaluated. A target with no flux in the
    passband is a defined result with SN = 0.
"""

import math
import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
from scipy.special import erf

from etc_toolkit.configuration import ExposureConfig
from etc_toolkit.errors import InvalidConfiguration, InvalidValue, NumericUndefined
from etc_toolkit.exposure.results import PhotometryExposureResult, is_finite_result
from etc_toolkit.grid.spectral_grid import SpectralGrid
from etc_toolkit.instrument.detector import DetectorModel

logger = logging.getLogger(__name__)

FWHM_TO_SIGMA = 1.0 / (2.0 * math.sqrt(2.0 * math.log(2.0)))


@dataclass(frozen=True)
class NoiseBudget:
    """Per-frame quantities shared by all apertures of one evaluation."""
    target_rate: float          # Object electrons per second
    sky_rate: float             # Sky electrons per second per arcsec²
    object_counts: float        # Object electrons per frame
    sky_per_pixel: float        # Sky electrons per binned pixel per frame
    dark_per_pixel: float       # Dark electrons per binned pixel per frame
    pixel_noise: float          # √(S + D + R²) per binned pixel
    pixel_area: float           # Binned pixel solid angle (arcsec²)
    fwhm_pixels: float          # Image FWHM in binned pixels
    sigma_pixels: float         # Gaussian sigma in binned pixels
    throughput_integral: float = 1.0  # ∫ T(λ) dλ over the passband (A)


class ExposureEngine:
    """
    Aperture photometry signal-to-noise calculator.

    Stateless apart from the detector model: run() is a pure function of
    its arguments and never modifies the grids it is given.
    """

    def __init__(self, detector: DetectorModel):
        """
        Initialize engine.

        Args:
            detector: Read noise, dark current, saturation and pixel scale
        """
        self.detector = detector

    def _validate(self, target_spectrum, exposure_config: ExposureConfig,
                  seeing_fwhm: float, apertures: Sequence[float]):
        exposure_config.validate()

        count = getattr(target_spectrum, 'get_number_of_spectra', None)
        if count is None or count() <= 0:
            raise InvalidValue("No spectrum has been selected.")

        if apertures is None or len(apertures) == 0:
            raise InvalidValue("At least one aperture radius is required.")
        for radius in apertures:
            if not (math.isfinite(radius) and radius > 0):
                raise InvalidValue(f"Aperture radii must be positive multiples of the FWHM, got {radius}")

        if not (math.isfinite(seeing_fwhm) and seeing_fwhm > 0):
            raise InvalidConfiguration(f"Image FWHM must be positive, got {seeing_fwhm}")

    def noise_budget(self, target_rate: float, sky_rate: float,
                     exposure_config: ExposureConfig, seeing_fwhm: float,
                     throughput_integral: float = 1.0) -> NoiseBudget:
        """Per-frame signal and noise per binned pixel."""
        t = exposure_config.exposure_time
        binning = exposure_config.binning

        pixel_area = self.detector.binned_pixel_area(binning)
        sky_per_pixel = sky_rate * t * pixel_area
        fwhm_pixels = seeing_fwhm / self.detector.binned_pixel_scale(binning)

        return NoiseBudget(
            target_rate=target_rate,
            sky_rate=sky_rate,
            object_counts=target_rate * t,
            sky_per_pixel=sky_per_pixel,
            dark_per_pixel=self.detector.dark_electrons(t, binning),
            pixel_noise=float(self.detector.pixel_noise(sky_per_pixel, t, binning)),
            pixel_area=pixel_area,
            fwhm_pixels=fwhm_pixels,
            sigma_pixels=fwhm_pixels * FWHM_TO_SIGMA,
            throughput_integral=throughput_integral,
        )

    def run(self, target_spectrum, sky_spectrum: SpectralGrid, throughput: SpectralGrid,
            exposure_config: ExposureConfig, seeing_fwhm: float,
            apertures: Sequence[float]) -> List[PhotometryExposureResult]:
        """
        Predict photometry for each aperture.

        Args:
            target_spectrum: Object with get_number_of_spectra() and
                grid(sampling) returning the photon-rate spectrum
            sky_spectrum: Sky photon rate per arcsec²
            throughput: Transmission to apply to target and sky
            exposure_config: Exposure time, repeats and binning
            seeing_fwhm: Delivered image FWHM (arcsec)
            apertures: Aperture radii in units of the FWHM

        Returns:
            One result per aperture, in the order given

        Raises:
            InvalidConfiguration: Exposure settings or FWHM out of range
            InvalidValue: No target components or unusable apertures
        """
        self._validate(target_spectrum, exposure_config, seeing_fwhm, apertures)

        target = target_spectrum.grid(throughput.sampling).scale(throughput)
        sky = sky_spectrum.copy().scale(throughput)

        with np.errstate(all='ignore'):
            budget = self.noise_budget(target.integrate(), sky.integrate(),
                                       exposure_config, seeing_fwhm,
                                       throughput_integral=throughput.integrate())
        self._log_budget(budget, exposure_config)

        results = []
        for radius in apertures:
            try:
                results.append(self._aperture_result(radius, budget, exposure_config))
            except NumericUndefined as e:
                logger.warning(f"Aperture {radius:g} FWHM undefined: {e}")
                results.append(PhotometryExposureResult.undefined(radius, str(e)))
        return results

    def _aperture_result(self, radius: float, budget: NoiseBudget,
                         exposure_config: ExposureConfig) -> PhotometryExposureResult:
        """Photometry for one aperture radius (FWHM units)."""
        if not (math.isfinite(budget.throughput_integral) and budget.throughput_integral > 0):
            raise NumericUndefined(
                f"no light passes the throughput (integral {budget.throughput_integral:g} A)")
        if not (math.isfinite(budget.target_rate) and budget.target_rate >= 0):
            raise NumericUndefined(f"unusable target rate {budget.target_rate:g} e-/s")

        repeat = exposure_config.repeat
        sigma = budget.sigma_pixels

        radius_pixels = radius * budget.fwhm_pixels
        n_pixels = math.pi * radius_pixels ** 2
        encircled = 1.0 - math.exp(-radius_pixels ** 2 / (2 * sigma ** 2))
        central_fraction = float(erf(1.0 / (2.0 * math.sqrt(2.0) * sigma))) ** 2

        total_flux = budget.object_counts * repeat
        aperture_flux = total_flux * encircled
        aperture_sky = budget.sky_per_pixel * n_pixels * repeat

        with np.errstate(all='ignore'):
            sn = float(self.detector.calculate_snr(
                aperture_flux, n_pixels, budget.sky_per_pixel,
                exposure_config.exposure_time, exposure_config.binning, repeat))
            sb_flux = budget.object_counts * budget.pixel_area
            sb_snr = float(np.float64(sb_flux) / budget.pixel_noise * math.sqrt(repeat))

        result = PhotometryExposureResult(
            aperture=radius,
            sky_level=budget.sky_per_pixel,
            sky_noise=budget.pixel_noise,
            peak_level=budget.object_counts * central_fraction,
            total_flux=total_flux,
            aperture_flux=aperture_flux,
            sn=sn,
            n_pixels=n_pixels,
            aperture_sky=aperture_sky,
            surface_brightness_flux=sb_flux,
            surface_brightness_snr=sb_snr,
        )
        if not is_finite_result(result):
            raise NumericUndefined(f"non-finite photometry for aperture {radius:g} FWHM")
        return result

    def _log_budget(self, budget: NoiseBudget, exposure_config: ExposureConfig):
        logger.info(f"Exposure time per frame ........ [s] : {exposure_config.exposure_time:.1f}")
        logger.info(f"Total flux from object ........ [e-] : {budget.object_counts:.1f}")
        logger.info(f"Sky flux .............. [e-/arcsec²] : "
                    f"{budget.sky_rate * exposure_config.exposure_time:.1f}")
        logger.info(f"Binning ..................... [pixel] : {exposure_config.binning}")
        logger.info(f"Sky per binned pixel ........... [e-] : {budget.sky_per_pixel:.1f}")
        logger.info(f"Dark current per binned pixel . [e-] : {budget.dark_per_pixel:.2f}")
        logger.info(f"Sky & RON & DC noise per bin ... [e-] : {budget.pixel_noise:.2f}")
