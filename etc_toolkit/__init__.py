"""
ETC Toolkit: Exposure Time Calculator for Broad-Band Imaging

Predicts detector signal and signal-to-noise ratio for an imaging exposure
from a target spectrum, the night sky background, the telescope and
instrument throughput, and the detector noise characteristics.

Modules:
    grid: Uniformly sampled spectra and transmission curves
    atmosphere: Extinction, airglow, zodiacal light and moonlight
    instrument: Filter/detector catalog, throughput chain, detector noise
    spectra: Target spectrum components and Johnson photometry
    exposure: Signal-to-noise engine and end-to-end calculator
    visualization: Matplotlib plots of spectra and results

Example:
    >>> from etc_toolkit import (ExposureCalculator, ExposureConfig,
    ...                          ObservingConditions, TargetSpectrum,
    ...                          Blackbody, NormalizedSpectrum)
    >>> target = TargetSpectrum([NormalizedSpectrum(Blackbody(5800), magnitude=20)])
    >>> report = ExposureCalculator().evaluate(
    ...     target, ObservingConditions(), ExposureConfig(exposure_time=300))
    >>> print(report.summary())
"""

__version__ = "0.1.0"
__author__ = "ETC Toolkit"

from .errors import (
    ETCError,
    InvalidConfiguration,
    InvalidValue,
    NumericUndefined,
    OutOfDomain,
)

# Grids
from .grid import Sampling, SpectralGrid, ThroughputFilter

# Configuration
from .configuration import (
    ExposureConfig,
    LunarProperties,
    ObservingConditions,
    SolarProperties,
    TelescopeProperties,
)

# Atmosphere
from .atmosphere import AtmosphericExtinction, SkySpectrumModel, SolarSpectrum

# Instrument
from .instrument import DetectorModel, Instrument

# Target spectra
from .spectra import (
    ABReference,
    Blackbody,
    EmissionLine,
    JohnsonFilter,
    NormalizedSpectrum,
    PowerLaw,
    TargetSpectrum,
    UserSuppliedSpectrum,
)

# Exposure
from .exposure import (
    ExposureCalculator,
    ExposureEngine,
    ExposureReport,
    PhotometryExposureResult,
)

__all__ = [
    # Errors
    'ETCError',
    'InvalidConfiguration',
    'InvalidValue',
    'NumericUndefined',
    'OutOfDomain',
    # Grids
    'Sampling',
    'SpectralGrid',
    'ThroughputFilter',
    # Configuration
    'ExposureConfig',
    'LunarProperties',
    'ObservingConditions',
    'SolarProperties',
    'TelescopeProperties',
    # Atmosphere
    'AtmosphericExtinction',
    'SkySpectrumModel',
    'SolarSpectrum',
    # Instrument
    'DetectorModel',
    'Instrument',
    # Spectra
    'ABReference',
    'Blackbody',
    'EmissionLine',
    'JohnsonFilter',
    'NormalizedSpectrum',
    'PowerLaw',
    'TargetSpectrum',
    'UserSuppliedSpectrum',
    # Exposure
    'ExposureCalculator',
    'ExposureEngine',
    'ExposureReport',
    'PhotometryExposureResult',
]


def print_summary():
    """Print a summary of available modules and capabilities."""
    summary = """
+==================================================================+
|              ETC Toolkit: Exposure Time Calculator               |
+==================================================================+
|                                                                  |
|  GRID MODULE                                                     |
|  -----------                                                     |
|  * SpectralGrid       - Uniform spectra, resampling, interp      |
|  * ThroughputFilter   - Transmission curves, composition         |
|                                                                  |
|  ATMOSPHERE MODULE                                               |
|  -----------------                                               |
|  * AtmosphericExtinction - mag/airmass extinction curve          |
|  * SkySpectrumModel   - Airglow, zodiacal light, moonlight       |
|                                                                  |
|  INSTRUMENT MODULE                                               |
|  -----------------                                               |
|  * Instrument         - Filters, QE, mirrors, optics             |
|  * DetectorModel      - Read noise, dark current, saturation     |
|                                                                  |
|  EXPOSURE MODULE                                                 |
|  ---------------                                                 |
|  * ExposureEngine     - Aperture photometry S/N                  |
|  * ExposureCalculator - Conditions -> results end to end         |
|                                                                  |
+==================================================================+

Quick Start:
    from etc_toolkit import *

    target = TargetSpectrum([NormalizedSpectrum(Blackbody(5800), magnitude=20)])
    conditions = ObservingConditions(
        telescope=TelescopeProperties(airmass=1.2, seeing=0.8))
    config = ExposureConfig(exposure_time=300, optical_filter='R')

    report = ExposureCalculator().evaluate(target, conditions, config)
    print(report.summary())
"""
    print(summary)
