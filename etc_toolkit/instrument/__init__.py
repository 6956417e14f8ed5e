"""
Instrument Module

Catalog of filters and detector properties, the detector noise model and
the instrument throughput chain.
"""

from .catalog import (
    DARK_CURRENT_MODES,
    DETECTOR_MATERIALS,
    JOHNSON_BANDS,
    OPTICAL_FILTERS,
    READ_NOISE_MODES,
)
from .detector import DetectorModel
from .instrument import Instrument

__all__ = [
    'DARK_CURRENT_MODES',
    'DETECTOR_MATERIALS',
    'JOHNSON_BANDS',
    'OPTICAL_FILTERS',
    'READ_NOISE_MODES',
    'DetectorModel',
    'Instrument',
]
