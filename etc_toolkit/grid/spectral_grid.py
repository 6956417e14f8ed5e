"""
Spectral Grid

Uniformly sampled one-dimensional function of wavelength. Every spectrum,
sky background and transmission curve in the calculator is carried on a
SpectralGrid so that products and integrals reduce to array operations.

Sampling:
    x(i) = x0 + i * dx,   i = 0 .. n-1
    domain = [x0, x0 + (n-1) * dx]

    Wavelengths are always in Angstrom. Flux units are defined by whoever
    builds the grid and must agree between grids that are multiplied.

Mutation:
    resample, refine, rebin, scale, add, div and power act in place and
    return the grid itself so that calls can be chained. A consumer that
    does not own a grid must copy() it first.

Resampling for display:
    Plots never need more than ~1000 points. Display decimation averages
    groups of kbin consecutive samples, doubling kbin until the number of
    output points is at most max_points. Trailing samples that do not fill
    a complete bin are dropped.
"""

import logging
from typing import Callable, NamedTuple, Optional, Union

import numpy as np
from scipy.interpolate import CubicSpline

from etc_toolkit.errors import InvalidValue, OutOfDomain

logger = logging.getLogger(__name__)

# h*c in erg * Angstrom
HC_ERG_ANGSTROM = 1.986484121e-8


class Sampling(NamedTuple):
    """Start wavelength, spacing and sample count of a uniform grid."""
    x0: float
    dx: float
    n: int

    @property
    def xmax(self) -> float:
        return self.x0 + (self.n - 1) * self.dx

    def wavelengths(self) -> np.ndarray:
        return self.x0 + self.dx * np.arange(self.n)


class SpectralGrid:
    """
    Uniformly sampled function of wavelength.

    Attributes:
        x0: Wavelength of the first sample (Angstrom)
        dx: Sample spacing (Angstrom), strictly positive
        y: Sample values (float64 array)
    """

    def __init__(self, x0: float, dx: float, y, allow_undefined: bool = False):
        """
        Initialize grid.

        Args:
            x0: Start wavelength in Angstrom
            dx: Sample spacing in Angstrom
            y: Sample values
            allow_undefined: Accept NaN/Inf samples (explicitly undefined grid)
        """
        values = np.array(y, dtype=np.float64)
        if values.ndim != 1 or values.size == 0:
            raise InvalidValue(f"Grid values must be a non-empty 1-D sequence, got shape {values.shape}")
        if not np.isfinite(x0):
            raise InvalidValue(f"Grid start wavelength must be finite, got {x0}")
        if not (np.isfinite(dx) and dx > 0):
            raise InvalidValue(f"Grid spacing must be positive, got {dx}")
        if not allow_undefined and not np.all(np.isfinite(values)):
            raise InvalidValue("Grid values must be finite")

        self.x0 = float(x0)
        self.dx = float(dx)
        self.y = values

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @staticmethod
    def _default_sampling() -> Sampling:
        from etc_toolkit.utils.config import get_config
        return get_config().grid_sampling

    @classmethod
    def constant(cls, value: float, sampling: Optional[Sampling] = None) -> 'SpectralGrid':
        """Grid with the same value everywhere."""
        sampling = sampling or cls._default_sampling()
        return cls(sampling.x0, sampling.dx, np.full(sampling.n, float(value)))

    @classmethod
    def from_function(cls, func: Callable[[np.ndarray], np.ndarray],
                      sampling: Optional[Sampling] = None) -> 'SpectralGrid':
        """Grid sampled from a vectorized function of wavelength."""
        sampling = sampling or cls._default_sampling()
        values = np.broadcast_to(func(sampling.wavelengths()), (sampling.n,))
        return cls(sampling.x0, sampling.dx, values)

    @classmethod
    def from_table(cls, x, y, sampling: Optional[Sampling] = None,
                   method: str = 'spline') -> 'SpectralGrid':
        """
        Resample tabulated data onto a uniform grid.

        Inside the table's wavelength range the data are interpolated with a
        natural cubic spline (or linearly); outside it the grid is zero.

        Args:
            x: Tabulated wavelengths (strictly increasing, Angstrom)
            y: Tabulated values
            sampling: Target sampling (configured default if None)
            method: 'spline' or 'linear'

        Returns:
            New grid
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if x.ndim != 1 or x.shape != y.shape or x.size < 2:
            raise InvalidValue(f"Table needs matching 1-D wavelength and value columns "
                               f"with at least two rows, got {x.shape} and {y.shape}")
        if np.any(np.diff(x) <= 0):
            raise InvalidValue("Table wavelengths must be strictly increasing")

        sampling = sampling or cls._default_sampling()
        wl = sampling.wavelengths()
        values = np.zeros(sampling.n)
        inside = (wl >= x[0]) & (wl <= x[-1])

        if method == 'spline':
            spline = CubicSpline(x, y, bc_type='natural')
            values[inside] = spline(wl[inside])
        elif method == 'linear':
            values[inside] = np.interp(wl[inside], x, y)
        else:
            raise InvalidValue(f"Unknown interpolation method: {method}")

        return cls(sampling.x0, sampling.dx, values)

    @classmethod
    def read(cls, path, sampling: Optional[Sampling] = None) -> 'SpectralGrid':
        """
        Read a two-column (wavelength, value) text file.

        Lines starting with '#' or '!' are comments. Uniformly spaced input
        is taken as-is; irregular input is spline-resampled onto `sampling`.

        Raises:
            InvalidValue: If a line does not hold exactly two numbers
        """
        try:
            data = np.loadtxt(path, comments=('#', '!'), ndmin=2, dtype=np.float64)
        except ValueError as e:
            raise InvalidValue(f"Malformed spectrum file {path}: {e}") from e

        if data.shape[0] < 2 or data.shape[1] != 2:
            raise InvalidValue(f"{path}: expected at least two lines of two numbers, "
                               f"got {data.shape[0]} rows of {data.shape[1]} columns")

        x, y = data[:, 0], data[:, 1]
        steps = np.diff(x)
        if np.all(steps > 0) and np.allclose(steps, steps[0], rtol=1e-6, atol=1e-4):
            dx = (x[-1] - x[0]) / (len(x) - 1)
            logger.debug(f"Read uniform grid from {path}: {len(x)} samples, dx={dx:g}")
            return cls(x[0], dx, y)

        logger.debug(f"Resampling irregular table from {path} ({len(x)} rows)")
        return cls.from_table(x, y, sampling=sampling)

    def copy(self) -> 'SpectralGrid':
        """Independent copy (values are not shared)."""
        new = object.__new__(type(self))
        new.__dict__.update(self.__dict__)
        new.y = self.y.copy()
        return new

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    @property
    def n(self) -> int:
        return len(self.y)

    @property
    def sampling(self) -> Sampling:
        return Sampling(self.x0, self.dx, self.n)

    @property
    def wavelengths(self) -> np.ndarray:
        return self.x0 + self.dx * np.arange(self.n)

    @property
    def xmin(self) -> float:
        return self.x0

    @property
    def xmax(self) -> float:
        return self.x0 + (self.n - 1) * self.dx

    def x(self, i):
        """Wavelength of sample i."""
        return self.x0 + i * self.dx

    def __len__(self):
        return self.n

    def __repr__(self):
        return f"{type(self).__name__}(x0={self.x0:g}, dx={self.dx:g}, n={self.n})"

    def same_sampling(self, other: 'SpectralGrid') -> bool:
        """True if both grids have identical x0, dx and n."""
        return self._is_aligned(other) and self.n == other.n and np.isclose(self.x0, other.x0)

    def _is_aligned(self, other: 'SpectralGrid') -> bool:
        """Same spacing and an offset that is a whole number of samples."""
        if not np.isclose(self.dx, other.dx, rtol=1e-9, atol=0):
            return False
        offset = (other.x0 - self.x0) / self.dx
        return abs(offset - round(offset)) < 1e-6

    def _values_on_sampling(self, other: 'SpectralGrid') -> np.ndarray:
        """
        Values of `other` at this grid's samples.

        Samples outside the other grid's domain are zero. A grid with a
        different spacing or a fractional offset is rebinned (on a copy)
        before the lookup.
        """
        if self._is_aligned(other):
            offset = int(round((other.x0 - self.x0) / self.dx))
            idx = np.arange(self.n) - offset
            valid = (idx >= 0) & (idx < other.n)
            values = np.zeros(self.n)
            values[valid] = other.y[idx[valid]]
            return values

        logger.debug(f"Rebinning {other!r} onto {self!r}")
        return other.copy().rebin(self.sampling).y

    # ------------------------------------------------------------------
    # Resampling
    # ------------------------------------------------------------------

    def resample(self, factor: Optional[int] = None,
                 max_points: Optional[int] = None) -> 'SpectralGrid':
        """
        Average groups of consecutive samples.

        With an explicit `factor`, groups of `factor` samples are averaged.
        Without one (display decimation), the bin size starts at 1 and
        doubles until at most `max_points` samples remain. In both cases
        trailing samples that do not fill a whole bin are dropped, dx is
        multiplied by the bin size and x0 moves to the centre of the first
        bin.

        Args:
            factor: Number of samples per bin (integer >= 1)
            max_points: Display limit (configured default if None)

        Returns:
            self
        """
        if factor is None:
            if max_points is None:
                from etc_toolkit.utils.config import get_config
                max_points = get_config().display_max_points
            if max_points < 1:
                raise InvalidValue(f"max_points must be at least 1, got {max_points}")
            factor = 1
            while self.n // factor > max_points:
                factor *= 2
        elif int(factor) != factor or factor < 1:
            raise InvalidValue(f"Resampling factor must be a positive integer, got {factor}")

        factor = int(factor)
        if factor == 1:
            return self

        npoints = self.n // factor
        if npoints == 0:
            raise InvalidValue(f"Cannot group {self.n} samples into bins of {factor}")

        self.y = self.y[:npoints * factor].reshape(npoints, factor).mean(axis=1)
        self.x0 += 0.5 * (factor - 1) * self.dx
        self.dx *= factor
        return self

    def decimated(self, max_points: Optional[int] = None) -> 'SpectralGrid':
        """Display copy with at most `max_points` samples."""
        return self.copy().resample(max_points=max_points)

    def refine(self, factor: int) -> 'SpectralGrid':
        """Split every sample into `factor` equal sub-samples (inverse of resample)."""
        if int(factor) != factor or factor < 1:
            raise InvalidValue(f"Refinement factor must be a positive integer, got {factor}")
        factor = int(factor)
        if factor == 1:
            return self
        self.y = np.repeat(self.y, factor)
        self.dx /= factor
        self.x0 -= 0.5 * (factor - 1) * self.dx
        return self

    def rebin(self, sampling: Sampling) -> 'SpectralGrid':
        """
        Area-preserving regridding onto a new sampling.

        Each sample is treated as a bin of width dx centred on x(i); the new
        value is the mean of the old step function over the part of the new bin
        that overlaps the old domain. New samples centred outside the old
        domain are zero.
        """
        edges = self.x0 - 0.5 * self.dx + self.dx * np.arange(self.n + 1)
        cumulative = np.concatenate(([0.0], np.cumsum(self.y) * self.dx))

        new_x = sampling.wavelengths()
        lo = new_x - 0.5 * sampling.dx
        hi = new_x + 0.5 * sampling.dx
        area = np.interp(hi, edges, cumulative) - np.interp(lo, edges, cumulative)
        overlap = np.minimum(hi, edges[-1]) - np.maximum(lo, edges[0])
        values = np.zeros(sampling.n)
        covered = overlap > 0
        values[covered] = area[covered] / overlap[covered]

        outside = (new_x < self.xmin) | (new_x > self.xmax)
        values[outside] = 0.0

        self.x0, self.dx = float(sampling.x0), float(sampling.dx)
        self.y = values
        return self

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def interp(self, x):
        """
        Linear interpolation between the two bracketing samples.

        Args:
            x: Wavelength or array of wavelengths (Angstrom)

        Returns:
            Interpolated value(s); exact at sample wavelengths

        Raises:
            OutOfDomain: If any wavelength is outside [xmin, xmax]
        """
        xs = np.asarray(x, dtype=np.float64)
        if np.any(~np.isfinite(xs)) or np.any(xs < self.xmin) or np.any(xs > self.xmax):
            raise OutOfDomain(f"Wavelength {x} outside grid domain "
                              f"[{self.xmin:g}, {self.xmax:g}]")
        values = np.interp(xs, self.wavelengths, self.y)
        return float(values) if values.ndim == 0 else values

    def ymin(self) -> float:
        return float(np.min(self.y))

    def ymax(self) -> float:
        return float(np.max(self.y))

    def integrate(self) -> float:
        """Rectangle-rule integral sum(y) * dx."""
        return float(np.sum(self.y) * self.dx)

    # ------------------------------------------------------------------
    # Arithmetic (in place)
    # ------------------------------------------------------------------

    def scale(self, factor: Union[float, 'SpectralGrid']) -> 'SpectralGrid':
        """
        Multiply by a scalar or, pointwise, by another grid.

        A grid on a different sampling is rebinned onto this one first.
        Samples outside the other grid's domain are multiplied by zero.
        """
        if isinstance(factor, SpectralGrid):
            self.y = self.y * self._values_on_sampling(factor)
        else:
            self.y = self.y * float(factor)
        return self

    def scale_to(self, x: float, value: float) -> 'SpectralGrid':
        """Rescale so that interp(x) == value."""
        current = self.interp(x)
        if current == 0:
            raise InvalidValue(f"Cannot normalize at {x:g} A: the grid vanishes there")
        return self.scale(value / current)

    def add(self, other: Union[float, 'SpectralGrid']) -> 'SpectralGrid':
        """Add a scalar or, pointwise, another grid (zero outside its domain)."""
        if isinstance(other, SpectralGrid):
            self.y = self.y + self._values_on_sampling(other)
        else:
            self.y = self.y + float(other)
        return self

    def div(self, other: 'SpectralGrid') -> 'SpectralGrid':
        """Divide pointwise by another grid; samples with a zero divisor are left unchanged."""
        divisor = self._values_on_sampling(other)
        nonzero = divisor != 0
        self.y[nonzero] = self.y[nonzero] / divisor[nonzero]
        return self

    def power(self, exponent: float) -> 'SpectralGrid':
        self.y = self.y ** exponent
        return self

    def quantize(self) -> 'SpectralGrid':
        """Convert energy flux (erg/...) to photon flux: y *= lambda / (h c)."""
        self.y = self.y * self.wavelengths / HC_ERG_ANGSTROM
        return self

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def write(self, path):
        """Write 'wavelength value' pairs, one sample per line, no header."""
        np.savetxt(path, np.column_stack((self.wavelengths, self.y)), fmt=('%.4f', '%.9e'))
        logger.debug(f"Wrote {self!r} to {path}")
