"""
Exposure Calculator

End-to-end evaluation for one set of observing conditions and exposure
settings:

    ObservingConditions ──► SkySpectrumModel ──► sky (erg/s/cm²/A/arcsec²)
    TargetSpectrum ──► × collecting area × extinction(airmass) ──► photons/s/A
    ExposureConfig ──► Instrument ──► throughput, detector
    ──► ExposureEngine.run ──► PhotometryExposureResult per aperture

Every call rebuilds all grids from its arguments, so concurrent
evaluations never share a mutable grid.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from etc_toolkit.atmosphere.extinction import AtmosphericExtinction
from etc_toolkit.atmosphere.sky_spectrum import SkySpectrumModel
from etc_toolkit.configuration import ExposureConfig, ObservingConditions
from etc_toolkit.errors import InvalidValue
from etc_toolkit.exposure.engine import ExposureEngine
from etc_toolkit.exposure.results import PhotometryExposureResult
from etc_toolkit.grid.spectral_grid import Sampling, SpectralGrid
from etc_toolkit.grid.throughput import ThroughputFilter
from etc_toolkit.instrument.detector import DetectorModel
from etc_toolkit.instrument.instrument import Instrument
from etc_toolkit.utils.config import get_config

logger = logging.getLogger(__name__)


class PhotonRateSpectrum:
    """Target spectrum after the atmosphere and the collecting area (photons/s/A)."""

    def __init__(self, grid: SpectralGrid, n_components: int, name: str = ''):
        self._grid = grid
        self._n_components = n_components
        self._name = name

    def get_number_of_spectra(self) -> int:
        return self._n_components

    def name(self) -> str:
        return self._name

    def grid(self, sampling: Optional[Sampling] = None) -> SpectralGrid:
        if sampling is None or self._grid.sampling == tuple(sampling):
            return self._grid.copy()
        return SpectralGrid.constant(1.0, sampling).scale(self._grid)


@dataclass
class ExposureReport:
    """Results of one evaluation plus the grids that produced them."""
    results: List[PhotometryExposureResult]
    target: SpectralGrid            # Photons/s/A at the telescope
    sky: SpectralGrid               # Photons/s/A/arcsec² at the telescope
    throughput: ThroughputFilter
    detector: DetectorModel
    fwhm: float                     # Delivered image FWHM (arcsec)
    target_name: str = ''

    def best_result(self) -> Optional[PhotometryExposureResult]:
        """Defined result with the highest S/N."""
        defined = [r for r in self.results if r.is_defined]
        if not defined:
            return None
        return max(defined, key=lambda r: r.sn)

    def saturated(self) -> List[PhotometryExposureResult]:
        return [r for r in self.results if r.saturates(self.detector.saturation_level_e)]

    def summary(self) -> str:
        """Results table."""
        lines = [
            f"Target: {self.target_name}",
            f"Image FWHM: {self.fwhm:.2f}\"",
            "",
            f"{'Aperture':>9} {'Sky/pix':>10} {'Noise/pix':>10} {'Peak':>10} "
            f"{'Total':>12} {'In aper.':>12} {'S/N':>9}",
            "-" * 78,
        ]
        for r in self.results:
            if not r.is_defined:
                lines.append(f"{r.aperture:9.2f}  undefined: {r.undefined_reason}")
                continue
            flag = ' SATURATED' if r.saturates(self.detector.saturation_level_e) else ''
            lines.append(
                f"{r.aperture:9.2f} {r.sky_level:10.1f} {r.sky_noise:10.2f} {r.peak_level:10.1f} "
                f"{r.total_flux:12.1f} {r.aperture_flux:12.1f} {r.sn:9.2f}{flag}")
        return "\n".join(lines)


class ExposureCalculator:
    """
    Host-side orchestration of a full exposure evaluation.

    Usage:
        calculator = ExposureCalculator()
        report = calculator.evaluate(target, ObservingConditions(), ExposureConfig())
        print(report.summary())
    """

    def __init__(self, instrument: Optional[Instrument] = None):
        self.instrument = instrument or Instrument()

    @property
    def sampling(self) -> Sampling:
        return self.instrument.sampling

    def propagation(self, conditions: ObservingConditions) -> SpectralGrid:
        """Collecting area (cm²) times atmospheric transmission at the target airmass."""
        telescope = conditions.telescope
        stage = SpectralGrid.constant(telescope.effective_area, self.sampling)
        return AtmosphericExtinction(self.sampling).apply(stage, telescope.airmass)

    def evaluate(self, target, conditions: ObservingConditions,
                 exposure_config: ExposureConfig,
                 apertures: Optional[Sequence[float]] = None,
                 filter_only: bool = False) -> ExposureReport:
        """
        Evaluate an exposure.

        Args:
            target: TargetSpectrum (erg/s/cm²/A above the atmosphere)
            conditions: Sky and telescope conditions
            exposure_config: Exposure and detector settings
            apertures: Radii in FWHM units (configured defaults if None)
            filter_only: Use the optical filter alone as instrument throughput

        Returns:
            ExposureReport

        Raises:
            InvalidValue: Target has no components
            InvalidConfiguration: Any condition or setting out of range
        """
        if target.get_number_of_spectra() <= 0:
            raise InvalidValue("No spectrum has been selected.")
        conditions.validate()
        self.instrument.validate(exposure_config)
        if apertures is None:
            apertures = get_config().default_apertures

        sky = SkySpectrumModel(conditions, self.sampling).update()
        sky_rate = sky.scale(conditions.telescope.effective_area).quantize()

        target_rate = target.grid(self.sampling).scale(self.propagation(conditions)).quantize()
        rate_spectrum = PhotonRateSpectrum(target_rate, target.get_number_of_spectra(),
                                           target.name())

        throughput = self.instrument.throughput(
            exposure_config, conditions.telescope.mirror_factor, filter_only=filter_only)
        detector = self.instrument.detector(exposure_config)
        fwhm = conditions.telescope.fwhm()

        logger.info(f"Evaluating '{target.name()}' with filter {exposure_config.optical_filter}, "
                    f"airmass {conditions.telescope.airmass:.2f}, FWHM {fwhm:.2f}\"")

        results = ExposureEngine(detector).run(
            rate_spectrum, sky_rate, throughput, exposure_config, fwhm, list(apertures))

        report = ExposureReport(
            results=results,
            target=target_rate,
            sky=sky_rate,
            throughput=throughput,
            detector=detector,
            fwhm=fwhm,
            target_name=target.name(),
        )

        best = report.best_result()
        if best is not None:
            logger.info(f"Best S/N {best.sn:.1f} in a {best.aperture:g} FWHM aperture")
        for result in report.saturated():
            logger.warning(f"Aperture {result.aperture:g} FWHM: peak {result.peak_level:.0f} e- "
                           f"plus sky {result.sky_level:.0f} e- saturates the detector")
        return report
