"""
Photometry exposure results.

One PhotometryExposureResult is produced per aperture. Results are passive,
immutable records; derived quantities such as the saturation warning are
computed on demand from the stored fields.

Field conventions:
    sky_level, sky_noise, peak_level      per binned pixel, single frame (e-)
    total_flux, aperture_flux             object signal summed over all frames (e-)
    aperture_sky                          sky in the aperture summed over all frames (e-)
    sn                                    signal-to-noise of the combined frames
"""

import math
from dataclasses import dataclass, fields
from typing import Optional

UNDEFINED = float('nan')


@dataclass(frozen=True)
class PhotometryExposureResult:
    """Predicted photometry for one aperture radius."""
    aperture: float                         # Radius in units of the image FWHM
    sky_level: float                        # Sky per binned pixel per frame (e-)
    sky_noise: float                        # Noise per binned pixel per frame (e-)
    peak_level: float                       # Object counts in the central pixel per frame (e-)
    total_flux: float                       # Object counts, all frames (e-)
    aperture_flux: float                    # Object counts inside the aperture, all frames (e-)
    sn: float                               # Signal-to-noise ratio
    n_pixels: float = UNDEFINED             # Binned pixels in the aperture
    aperture_sky: float = UNDEFINED         # Sky inside the aperture, all frames (e-)
    surface_brightness_flux: float = UNDEFINED  # Object counts per binned pixel for a uniform source
    surface_brightness_snr: float = UNDEFINED   # Per-pixel SNR for a uniform source
    undefined_reason: Optional[str] = None

    @classmethod
    def undefined(cls, aperture: float, reason: str) -> 'PhotometryExposureResult':
        """Result whose numeric fields are explicitly undefined (NaN)."""
        return cls(
            aperture=aperture,
            sky_level=UNDEFINED,
            sky_noise=UNDEFINED,
            peak_level=UNDEFINED,
            total_flux=UNDEFINED,
            aperture_flux=UNDEFINED,
            sn=UNDEFINED,
            undefined_reason=reason,
        )

    @property
    def is_defined(self) -> bool:
        return self.undefined_reason is None

    def saturates(self, saturation_level: float) -> bool:
        """Saturation warning: object peak plus sky reaches the saturation level."""
        if not self.is_defined:
            return False
        return self.peak_level + self.sky_level >= saturation_level

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self):
        if not self.is_defined:
            return f"aperture {self.aperture:.2f} FWHM: undefined ({self.undefined_reason})"
        return (f"aperture {self.aperture:.2f} FWHM: S/N {self.sn:.1f}, "
                f"flux {self.aperture_flux:.1f} e-, sky {self.sky_level:.1f} e-/pix, "
                f"peak {self.peak_level:.1f} e-")


def is_finite_result(result: PhotometryExposureResult) -> bool:
    """True if every numeric field of a result is finite."""
    numeric = [result.sky_level, result.sky_noise, result.peak_level,
               result.total_flux, result.aperture_flux, result.sn]
    return all(math.isfinite(value) for value in numeric)
