"""
Instrument Catalog

Fixed tables for the one-degree imager on a 3.5 m telescope: optical
filters, detector quantum efficiency, mirror reflectivity, corrector and
ADC transmission, and the selectable detector modes.

Tables are (wavelength A, value) pairs. They are resampled onto the
working grid by Instrument when a throughput chain is built.
"""

from typing import Dict, Optional, Tuple

Table = Tuple[Tuple[float, ...], Tuple[float, ...]]

# Johnson UBVRI: (wavelengths, transmissions, reference wavelength, flux for m = 0)
JOHNSON_BANDS: Dict[str, Tuple[Tuple[float, ...], Tuple[float, ...], float, float]] = {
    'U': (
        (3000., 3050., 3100., 3150., 3200., 3250., 3300., 3350., 3400.,
         3450., 3500., 3555., 3600., 3650., 3700., 3750., 3800., 3850.,
         3900., 3950., 4000., 4050., 4100., 4150., 4200.),
        (0.000, 0.016, 0.068, 0.167, 0.287, 0.423, 0.560, 0.673, 0.772,
         0.841, 0.905, 0.943, 0.981, 0.993, 1.000, 0.989, 0.916, 0.804,
         0.625, 0.423, 0.238, 0.114, 0.051, 0.019, 0.000),
        3790.0, 3.96e-9,
    ),
    'B': (
        (3600., 3700., 3800., 3900., 4000., 4100., 4200., 4300., 4400.,
         4500., 4600., 4700., 4800., 4900., 5000., 5100., 5200., 5300.,
         5400., 5500., 5600.),
        (0.000, 0.030, 0.134, 0.567, 0.920, 0.978, 1.000, 0.978, 0.935,
         0.853, 0.740, 0.640, 0.536, 0.424, 0.325, 0.235, 0.150, 0.095,
         0.043, 0.009, 0.000),
        4410.0, 6.31e-9,
    ),
    'V': (
        (4700., 4800., 4900., 5000., 5100., 5200., 5300., 5400., 5500.,
         5600., 5700., 5800., 5900., 6000., 6100., 6200., 6300., 6400.,
         6500., 6600., 6700., 6800., 6900., 7000.),
        (0.000, 0.030, 0.163, 0.458, 0.780, 0.967, 1.000, 0.973, 0.898,
         0.792, 0.684, 0.574, 0.461, 0.359, 0.270, 0.197, 0.135, 0.081,
         0.045, 0.025, 0.017, 0.013, 0.009, 0.000),
        5610.0, 3.70e-9,
    ),
    'R': (
        (5500., 5600., 5700., 5800., 5900., 6000., 6100., 6200., 6300.,
         6400., 6500., 6600., 6700., 6800., 6900., 7000., 7100., 7200.,
         7300., 7400., 7500., 8000., 8500., 9000.),
        (0.000, 0.230, 0.740, 0.910, 0.980, 1.000, 0.980, 0.960, 0.930,
         0.900, 0.860, 0.810, 0.780, 0.720, 0.670, 0.610, 0.560, 0.510,
         0.460, 0.400, 0.350, 0.140, 0.030, 0.000),
        6680.0, 2.26e-9,
    ),
    'I': (
        (7000., 7100., 7200., 7300., 7400., 7500., 7600., 7700., 7800.,
         7900., 8000., 8100., 8200., 8300., 8400., 8500., 8600., 8700.,
         8800., 8900., 9000., 9100., 9200.),
        (0.000, 0.024, 0.232, 0.555, 0.785, 0.910, 0.965, 0.985, 0.990,
         0.995, 1.000, 1.000, 0.990, 0.980, 0.950, 0.910, 0.860, 0.750,
         0.560, 0.330, 0.150, 0.030, 0.000),
        7920.0, 1.14e-9,
    ),
}

# Optical filters selectable for an exposure; None means no filter (unit transmission)
OPTICAL_FILTERS: Dict[str, Optional[Table]] = {
    'Empty': None,
    **{band: (table[0], table[1]) for band, table in JOHNSON_BANDS.items()},
}

# CCD quantum efficiency; None means a perfect detector
DETECTOR_MATERIALS: Dict[str, Optional[Table]] = {
    'Lot 6 as build': (
        (3200., 3500., 3800., 4000., 4500., 5000., 5500., 6000.,
         6500., 7000., 7500., 8000., 8500., 9000., 9500., 10000.),
        (0.30, 0.52, 0.68, 0.76, 0.85, 0.88, 0.90, 0.91,
         0.91, 0.89, 0.85, 0.78, 0.67, 0.52, 0.33, 0.15),
    ),
    'Perfect detector': None,
}

# Read noise (e- RMS per pixel per read)
READ_NOISE_MODES: Dict[str, float] = {
    '10e- (fast)': 10.0,
    '6e- (slow)': 6.0,
}

# Dark current (e-/s per unbinned pixel)
DARK_CURRENT_MODES: Dict[str, float] = {
    '0.04 e-/sec/pix': 0.04,
    '0.008 e-/sec/pix': 0.008,
}

# Aluminium coating reflectivity per mirror
MIRROR_REFLECTIVITY: Table = (
    (3200., 3500., 4000., 5000., 6000., 7000., 8000., 9000., 9500., 10000.),
    (0.76546645, 0.75891980, 0.73027823, 0.77168576, 0.77888707,
     0.75237316, 0.73469722, 0.79312602, 0.80, 0.81),
)

# Corrector, ADC, dewar window and their coatings combined
OPTICS_TRANSMISSION: Table = (
    (3200., 3400., 3600., 4000., 5000., 6000., 7000., 8000., 9000., 10000.),
    (0.40, 0.62, 0.74, 0.82, 0.86, 0.87, 0.87, 0.86, 0.84, 0.80),
)
