"""
Exposure Module

Signal-to-noise engine, result records and the end-to-end calculator.
"""

from .results import PhotometryExposureResult
from .engine import ExposureEngine, NoiseBudget
from .calculator import ExposureCalculator, ExposureReport, PhotonRateSpectrum

__all__ = [
    'PhotometryExposureResult',
    'ExposureEngine',
    'NoiseBudget',
    'ExposureCalculator',
    'ExposureReport',
    'PhotonRateSpectrum',
]
