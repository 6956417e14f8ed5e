"""
Atmosphere Module

Atmospheric extinction and the night sky background.
"""

from .extinction import AtmosphericExtinction
from .solar_spectrum import SolarSpectrum
from .sky_spectrum import (
    AirglowSpectrum,
    SkySpectrumModel,
    solar_cycle_factor,
    van_rhijn_airmass,
)

__all__ = [
    'AtmosphericExtinction',
    'SolarSpectrum',
    'AirglowSpectrum',
    'SkySpectrumModel',
    'solar_cycle_factor',
    'van_rhijn_airmass',
]
