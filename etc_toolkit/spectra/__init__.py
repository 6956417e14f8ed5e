"""
Target spectrum components and broad-band photometry.
"""

from .target import (
    ABReference,
    Blackbody,
    EmissionLine,
    JohnsonFilter,
    NormalizedSpectrum,
    PowerLaw,
    SpectrumComponent,
    TargetSpectrum,
    UserSuppliedSpectrum,
)

__all__ = [
    'ABReference',
    'Blackbody',
    'EmissionLine',
    'JohnsonFilter',
    'NormalizedSpectrum',
    'PowerLaw',
    'SpectrumComponent',
    'TargetSpectrum',
    'UserSuppliedSpectrum',
]
