"""
Command-line interface for the exposure time calculator.

Usage:
    etc-snr --magnitude 20 --filter R --time 300 --airmass 1.2
    etc-snr --temperature 9500 --magnitude 18 --repeat 5 --plot snr.png
    etc-config --show
"""

import sys
import logging
import argparse
from pathlib import Path

from etc_toolkit.errors import ETCError


def build_snr_parser() -> argparse.ArgumentParser:
    """Argument parser for etc-snr."""
    from etc_toolkit.instrument.catalog import (
        DARK_CURRENT_MODES, DETECTOR_MATERIALS, OPTICAL_FILTERS, READ_NOISE_MODES)

    parser = argparse.ArgumentParser(
        prog='etc-snr',
        description='Imaging Exposure Time Calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Targets:
  A blackbody (--temperature) or a flat AB spectrum (--flat), normalized to
  --magnitude (Vega V at 5500 A, or AB at --ab-wavelength with --ab).
  --spectrum FILE reads a two-column (wavelength, flux) table instead.

Examples:
  etc-snr --magnitude 20 --filter R --time 300
  etc-snr --flat --ab --magnitude 24 --filter I --time 600 --repeat 6 --binning 2
  etc-snr --magnitude 16 --moon-zenith 40 --lunar-phase 30 --lunar-elongation 60
        """
    )

    target = parser.add_argument_group('target')
    target.add_argument('--temperature', type=float, default=5800.0,
                        help='Blackbody temperature in K (default: 5800)')
    target.add_argument('--flat', action='store_true',
                        help='Flat AB spectrum instead of a blackbody')
    target.add_argument('--spectrum', type=Path, default=None,
                        help='Two-column spectrum file (erg/s/cm2/A)')
    target.add_argument('--magnitude', type=float, default=20.0,
                        help='Normalization magnitude (default: 20)')
    target.add_argument('--ab', action='store_true',
                        help='Magnitude is AB instead of Vega V')
    target.add_argument('--ab-wavelength', type=float, default=5500.0,
                        help='AB normalization wavelength in A (default: 5500)')

    exposure = parser.add_argument_group('exposure')
    exposure.add_argument('--time', '-t', type=float, default=100.0,
                          help='Exposure time per frame in s (default: 100)')
    exposure.add_argument('--repeat', '-n', type=int, default=1,
                          help='Number of frames (default: 1)')
    exposure.add_argument('--binning', '-b', type=int, default=1,
                          help='On-chip binning (default: 1)')
    exposure.add_argument('--filter', '-f', choices=list(OPTICAL_FILTERS), default='V',
                          help='Optical filter (default: V)')
    exposure.add_argument('--read-noise', choices=list(READ_NOISE_MODES), default=None,
                          help='Read noise mode')
    exposure.add_argument('--dark-current', choices=list(DARK_CURRENT_MODES), default=None,
                          help='Dark current mode')
    exposure.add_argument('--detector', choices=list(DETECTOR_MATERIALS), default=None,
                          help='Detector material')
    exposure.add_argument('--apertures', type=float, nargs='+', default=None,
                          help='Aperture radii in FWHM units')
    exposure.add_argument('--filter-only', action='store_true',
                          help='Use the optical filter alone as instrument throughput')

    sky = parser.add_argument_group('conditions')
    sky.add_argument('--airmass', '-X', type=float, default=1.0,
                     help='Airmass (default: 1.0)')
    sky.add_argument('--seeing', type=float, default=None,
                     help='Zenith seeing FWHM in arcsec')
    sky.add_argument('--mirror-factor', type=float, default=1.0,
                     help='Mirror cleanliness factor (default: 1.0)')
    sky.add_argument('--year', type=float, default=2010.0,
                     help='Observation epoch, decimal year (default: 2010)')
    sky.add_argument('--solar-elongation', type=float, default=180.0,
                     help='Target-sun angle in degrees (default: 180)')
    sky.add_argument('--ecliptic-latitude', type=float, default=90.0,
                     help='Ecliptic latitude in degrees (default: 90)')
    sky.add_argument('--moon-zenith', type=float, default=180.0,
                     help='Moon zenith distance in degrees (default: 180, below horizon)')
    sky.add_argument('--lunar-phase', type=float, default=180.0,
                     help='Lunar phase angle in degrees, 0 = full (default: 180)')
    sky.add_argument('--lunar-elongation', type=float, default=90.0,
                     help='Moon-target angle in degrees (default: 90)')

    output = parser.add_argument_group('output')
    output.add_argument('--write-sky', type=Path, default=None,
                        help='Write the sky spectrum (ph/s/A/arcsec2) to a text file')
    output.add_argument('--write-throughput', type=Path, default=None,
                        help='Write the instrument throughput to a text file')
    output.add_argument('--plot', type=Path, default=None,
                        help='Save an S/N versus aperture plot')
    output.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')
    return parser


def build_target(args):
    """Target spectrum from parsed arguments."""
    from etc_toolkit.spectra import (
        ABReference, Blackbody, NormalizedSpectrum, TargetSpectrum, UserSuppliedSpectrum)

    if args.spectrum is not None:
        component = UserSuppliedSpectrum.from_file(args.spectrum)
    elif args.flat:
        component = ABReference()
    else:
        component = Blackbody(args.temperature)

    system = NormalizedSpectrum.AB if args.ab else NormalizedSpectrum.VEGA
    wavelength = args.ab_wavelength if args.ab else NormalizedSpectrum.V_REFERENCE_WAVELENGTH
    return TargetSpectrum([NormalizedSpectrum(component, args.magnitude, system, wavelength)])


def build_conditions(args):
    """Observing conditions from parsed arguments."""
    from etc_toolkit.configuration import (
        LunarProperties, ObservingConditions, SolarProperties, TelescopeProperties)

    telescope_kwargs = dict(airmass=args.airmass, mirror_factor=args.mirror_factor)
    if args.seeing is not None:
        telescope_kwargs['seeing'] = args.seeing

    return ObservingConditions(
        solar=SolarProperties(
            observation_year=args.year,
            solar_elongation=args.solar_elongation,
            ecliptic_latitude=args.ecliptic_latitude,
        ),
        lunar=LunarProperties(
            moon_zenith_distance=args.moon_zenith,
            lunar_phase=args.lunar_phase,
            lunar_elongation=args.lunar_elongation,
        ),
        telescope=TelescopeProperties(**telescope_kwargs),
    )


def build_exposure_config(args):
    """Exposure configuration from parsed arguments."""
    from etc_toolkit.configuration import ExposureConfig

    kwargs = dict(
        exposure_time=args.time,
        repeat=args.repeat,
        binning=args.binning,
        optical_filter=args.filter,
    )
    if args.read_noise is not None:
        kwargs['read_noise_mode'] = args.read_noise
    if args.dark_current is not None:
        kwargs['dark_current_mode'] = args.dark_current
    if args.detector is not None:
        kwargs['detector_material'] = args.detector
    return ExposureConfig(**kwargs)


def run_snr(argv=None):
    """
    Run one exposure calculation from command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        The ExposureReport that was printed
    """
    parser = build_snr_parser()
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    logger = logging.getLogger(__name__)

    if args.spectrum is not None and not args.spectrum.exists():
        logger.error(f"Spectrum file not found: {args.spectrum}")
        sys.exit(1)

    from etc_toolkit.exposure import ExposureCalculator

    try:
        report = ExposureCalculator().evaluate(
            build_target(args),
            build_conditions(args),
            build_exposure_config(args),
            apertures=args.apertures,
            filter_only=args.filter_only,
        )
    except ETCError as e:
        logger.error(str(e))
        sys.exit(2)

    print(report.summary())

    if args.write_sky:
        report.sky.write(args.write_sky)
        logger.info(f"Sky spectrum written to: {args.write_sky}")
    if args.write_throughput:
        report.throughput.write(args.write_throughput)
        logger.info(f"Throughput written to: {args.write_throughput}")
    if args.plot:
        import matplotlib
        matplotlib.use('Agg')
        from etc_toolkit.visualization import ETCPlotter
        fig = ETCPlotter().plot_snr_curve(report)
        fig.savefig(args.plot, dpi=120)
        logger.info(f"Plot written to: {args.plot}")

    return report


def snr_cli(argv=None):
    """Exposure S/N CLI."""
    run_snr(argv)


def config_cli(argv=None):
    """Configuration management CLI."""
    parser = argparse.ArgumentParser(
        prog='etc-config',
        description='Exposure Time Calculator Configuration',
    )

    parser.add_argument('--show', action='store_true',
                        help='Show current configuration')
    parser.add_argument('--init', action='store_true',
                        help='Create config file template')

    args = parser.parse_args(argv)

    from etc_toolkit.utils.config import get_config

    config = get_config()

    if args.show:
        import yaml
        print(yaml.safe_dump(config.as_dict(), default_flow_style=False))

    elif args.init:
        config_path = Path.home() / '.etc_toolkit' / 'config.yaml'
        if config_path.exists():
            print(f"Config already exists: {config_path}")
        else:
            config.save(config_path)
            print(f"Created config: {config_path}")

    else:
        parser.print_help()


def main():
    """Main entry point - dispatch to appropriate CLI."""
    if len(sys.argv) < 2:
        print("Exposure Time Calculator")
        print()
        print("Commands:")
        print("  etc-snr     - Exposure signal-to-noise")
        print("  etc-config  - Configuration management")
        print()
        print("Use --help with any command for details.")
        sys.exit(0)

    # Simple dispatch based on script name
    script_name = Path(sys.argv[0]).stem
    if 'config' in script_name:
        config_cli()
    else:
        snr_cli()


if __name__ == '__main__':
    main()
