"""
Throughput Filters

A ThroughputFilter is a SpectralGrid whose values are transmitted fractions
in [0, 1]. The throughput of the whole system is a running product that
starts from unit transmission and is multiplied by every optical and
atmospheric stage in turn:

    T(λ) = 1 × T_atm(λ, X) × R_mirror(λ)^N × T_optics(λ) × QE(λ) × T_filter(λ)

Multiplication is commutative, so the order of the stages does not matter,
but the stages must share a sampling. SpectralGrid.scale rebins a stage
that does not before multiplying.
"""

import logging
from typing import Optional

import numpy as np

from etc_toolkit.errors import InvalidValue
from etc_toolkit.grid.spectral_grid import Sampling, SpectralGrid

logger = logging.getLogger(__name__)


class ThroughputFilter(SpectralGrid):
    """Transmission curve with values in [0, 1]."""

    def __init__(self, x0: float, dx: float, y, name: str = ''):
        super().__init__(x0, dx, y)
        if np.any(self.y < 0) or np.any(self.y > 1):
            raise InvalidValue(f"Transmission of '{name or 'filter'}' must lie in [0, 1], "
                               f"got range [{self.ymin():.3g}, {self.ymax():.3g}]")
        self.name = name

    @classmethod
    def unit(cls, sampling: Optional[Sampling] = None, name: str = 'unit') -> 'ThroughputFilter':
        """Unit transmission everywhere."""
        sampling = sampling or cls._default_sampling()
        return cls(sampling.x0, sampling.dx, np.ones(sampling.n), name=name)

    @classmethod
    def box(cls, cut_on: float, cut_off: float, sampling: Optional[Sampling] = None,
            name: str = 'box') -> 'ThroughputFilter':
        """Unit transmission between cut_on and cut_off, zero elsewhere."""
        if cut_off <= cut_on:
            raise InvalidValue(f"Box filter needs cut_on < cut_off, got {cut_on} and {cut_off}")
        sampling = sampling or cls._default_sampling()
        wl = sampling.wavelengths()
        values = ((wl >= cut_on) & (wl <= cut_off)).astype(np.float64)
        return cls(sampling.x0, sampling.dx, values, name=name)

    @classmethod
    def from_table(cls, x, y, sampling: Optional[Sampling] = None,
                   method: str = 'linear', name: str = '') -> 'ThroughputFilter':
        """
        Transmission curve from a table, zero outside the tabulated range.

        Interpolated values are clipped to [0, 1] so that spline overshoot
        cannot produce gain.
        """
        grid = SpectralGrid.from_table(x, y, sampling=sampling, method=method)
        return cls(grid.x0, grid.dx, np.clip(grid.y, 0.0, 1.0), name=name)

    @classmethod
    def compose(cls, *filters: SpectralGrid, sampling: Optional[Sampling] = None,
                name: str = '') -> 'ThroughputFilter':
        """
        Running product of transmission stages.

        Args:
            *filters: Stages to multiply together
            sampling: Sampling of the result (first stage's sampling if None)
            name: Name of the composed filter

        Returns:
            New filter; the stages are not modified
        """
        if not filters and sampling is None:
            raise InvalidValue("Cannot compose an empty filter chain without a sampling")
        sampling = sampling or filters[0].sampling
        total = cls.unit(sampling, name=name or ' * '.join(getattr(f, 'name', '') or '?' for f in filters))
        for stage in filters:
            total.scale(stage)
        logger.debug(f"Composed {len(filters)} stages: peak transmission {total.ymax():.3f}")
        return total

    def apply(self, spectrum: SpectralGrid) -> SpectralGrid:
        """Multiply `spectrum` (in place) by this transmission and return it."""
        return spectrum.scale(self)

    def __repr__(self):
        return f"ThroughputFilter('{self.name}', x0={self.x0:g}, dx={self.dx:g}, n={self.n})"
