"""
Visualization Module

Matplotlib plots of spectra and exposure results.
"""

from .plotting import ETCPlotter

__all__ = ['ETCPlotter']
