"""
Spectral grids and transmission curves.
"""

from .spectral_grid import HC_ERG_ANGSTROM, Sampling, SpectralGrid
from .throughput import ThroughputFilter

__all__ = [
    'HC_ERG_ANGSTROM',
    'Sampling',
    'SpectralGrid',
    'ThroughputFilter',
]
