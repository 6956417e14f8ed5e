"""
Exceptions raised by the exposure time calculator.

Configuration-level errors (InvalidConfiguration, InvalidValue) abort an
evaluation before any numerical work is done. OutOfDomain is local to a
single grid lookup. NumericUndefined is raised per aperture by the exposure
engine and contained there: the affected result is marked undefined and the
remaining apertures are still evaluated.
"""


class ETCError(Exception):
    """Base class for all exposure time calculator errors."""


class InvalidConfiguration(ETCError, ValueError):
    """A physical or instrumental parameter is outside its valid range."""


class InvalidValue(ETCError, ValueError):
    """An input value (spectrum, aperture list, table) cannot be used."""


class OutOfDomain(ETCError, ValueError):
    """A wavelength lies outside the sampled domain of a grid."""


class NumericUndefined(ETCError, ArithmeticError):
    """A computed flux or signal-to-noise ratio is not a finite number."""
