"""Command-line interface for the JMLC horn profile tool.

Usage:
    horn run config.yaml [--output-dir DIR]
    horn example [--fc 340] [--T 1.0] [--d0 36] [--rollback 180] [--plot]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

from horn.config import load_config, build_horn_spec, DEFAULTS
from horn.acoustics import length_for_mouth_diameter
from horn.profile import HornParameters, solve_profile, cached_solve
from horn.analysis import profile_dimensions, mouth_diameter_exceeded
from horn.export import to_coordinate_text, to_log_text, export_filename
from horn.plots import (
    plot_profile, plot_angle_growth, plot_profile_comparison,
)

logger = logging.getLogger(__name__)


def _setup_logging(verbose=False):
    """Attach a console handler to the package logger."""
    level = logging.DEBUG if verbose else logging.WARNING
    package_logger = logging.getLogger('horn')
    package_logger.setLevel(level)
    if package_logger.handlers:
        package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    package_logger.addHandler(handler)
    return package_logger


def main(args=None):
    parser = argparse.ArgumentParser(
        prog='horn',
        description="LeCleac'h (JMLC) horn profile generator",
    )
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log solver diagnostics')
    subparsers = parser.add_subparsers(dest='command')

    # --- run command ---
    run_parser = subparsers.add_parser('run', help='Run from config file')
    run_parser.add_argument('config', type=str, help='YAML config file')
    run_parser.add_argument('--output-dir', '-o', default=None,
                            help='Output directory (default: ./output)')

    # --- example command ---
    example_parser = subparsers.add_parser('example',
                                           help='Single horn from flags')
    example_parser.add_argument('--fc', type=float, default=DEFAULTS['fc'],
                                help='Cutoff frequency [Hz]')
    example_parser.add_argument('--T', type=float, default=DEFAULTS['T'],
                                help='Expansion factor')
    example_parser.add_argument('--d0', type=float, default=DEFAULTS['d0'],
                                help='Throat diameter [mm]')
    example_parser.add_argument('--rollback', type=float,
                                default=DEFAULTS['rollback'],
                                help='Rollback limit [degrees]')
    example_parser.add_argument('--step-size', type=float,
                                default=DEFAULTS['step_size'],
                                help='Arc-length step [mm]')
    example_parser.add_argument('--output-dir', '-o', default=None,
                                help='Write the CSV exports here')
    example_parser.add_argument('--plot', action='store_true',
                                help='Show the profile interactively')

    parsed = parser.parse_args(args)

    _setup_logging(parsed.verbose)

    if parsed.command == 'run':
        return cmd_run(parsed)
    elif parsed.command == 'example':
        return cmd_example(parsed)
    else:
        parser.print_help()
        return 1


def cmd_run(args):
    """Run horn profiles from a YAML config file."""
    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: config file not found: {config_path}")
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else Path('output')
    output_dir.mkdir(parents=True, exist_ok=True)

    spec = load_config(config_path)
    outputs = spec['outputs']

    results = {}
    for name, cfg in spec['configs'].items():
        horn_spec = build_horn_spec(cfg)
        results[name] = _run_single(horn_spec, name, output_dir, outputs)

    if results:
        _print_summary_table(results)

    profiles = [(r['points'], name) for name, r in results.items()
                if r['points']]
    if len(profiles) > 1 and 'plot' in outputs:
        fig, _ = plot_profile_comparison(profiles)
        fig.savefig(output_dir / 'profile_comparison.png', dpi=150,
                    bbox_inches='tight')
        plt.close(fig)
        print(f"Saved profile comparison to {output_dir / 'profile_comparison.png'}")

    if 'summary' in outputs:
        summary = {}
        for name, r in results.items():
            params = r['params']
            entry = {'fc': params.fc, 'T': params.T, 'd0': params.d0,
                     'rollback': params.rollback,
                     'step_size': r['step_size'],
                     'stop_reason': r['stop_reason'],
                     'transition_index': r['transition_index'],
                     'mouth_diameter_exceeded': r['exceeded'],
                     'mouth_limit_arc_length': r['limit_arc_length']}
            entry.update(r['dimensions'])
            summary[name] = entry
        json_path = output_dir / 'summary.json'
        with open(json_path, 'w') as f:
            json.dump(summary, f, indent=2)
        print(f"Saved profile summary to {json_path}")

    return 0


def _print_summary_table(results):
    """Print an aligned profile summary table."""
    w_name = max(max(len(name) for name in results), 4)

    print(f"\n{'Horn':<{w_name}}   {'Mouth Ø':>8}   {'Depth':>8}   "
          f"{'Angle':>7}   {'Points':>6}   Stop")
    print(f"{'-' * w_name}   {'--------':>8}   {'--------':>8}   "
          f"{'-------':>7}   {'------':>6}   ----")
    for name, r in results.items():
        dims = r['dimensions']
        stop = r['stop_reason']
        if r['exceeded']:
            stop += ' (mouth limit exceeded)'
        print(f"{name:<{w_name}}   {dims['mouth_diameter']:>8.1f}   "
              f"{dims['depth']:>8.1f}   {dims['final_angle']:>6.2f}°   "
              f"{dims['n_points']:>6d}   {stop}")
    print()


def _run_single(spec, name, output_dir, outputs):
    """Solve and export a single horn configuration."""
    params = spec['params']
    step_size = spec['step_size']

    run = cached_solve(params, step_size)
    points = run.points
    dims = profile_dimensions(points)
    exceeded = mouth_diameter_exceeded(points, spec['max_mouth_diameter'])
    limit_arc_length = None
    if exceeded:
        try:
            limit_arc_length = float(length_for_mouth_diameter(
                params, spec['max_mouth_diameter']))
        except ValueError as e:
            logger.debug("%s: no arc length for mouth limit: %s", name, e)

    result = {
        'params': params,
        'step_size': step_size,
        'points': points,
        'dimensions': dims,
        'stop_reason': run.stop_reason.value,
        'transition_index': run.transition_index,
        'exceeded': exceeded,
        'limit_arc_length': limit_arc_length,
    }

    if not points:
        print(f"  {name}: degenerate parameters (fc={params.fc:g}, "
              f"d0={params.d0:g}), no profile")
        return result

    print(f"  {name}: {dims['n_points']} points, "
          f"mouth Ø={dims['mouth_diameter']:.1f} mm, "
          f"depth={dims['depth']:.1f} mm, "
          f"angle={dims['final_angle']:.2f}°")
    if exceeded:
        if limit_arc_length is None:
            logger.warning("%s: mouth diameter %.1f mm exceeds limit %.1f mm",
                           name, dims['mouth_diameter'],
                           spec['max_mouth_diameter'])
        else:
            logger.warning("%s: mouth diameter %.1f mm exceeds limit %.1f mm; "
                           "the area law reaches that diameter at l=%.1f mm "
                           "of %.1f mm of arc", name, dims['mouth_diameter'],
                           spec['max_mouth_diameter'], limit_arc_length,
                           dims['arc_length'])

    if 'coordinates' in outputs:
        (output_dir / f'{name}_profile.csv').write_text(
            to_coordinate_text(points))
    if 'log' in outputs:
        (output_dir / f'{name}_log.csv').write_text(to_log_text(points))
    if 'plot' in outputs:
        fig, _ = plot_profile(points, label=name,
                              title=f"{name} Horn Profile")
        fig.savefig(output_dir / f'{name}_profile.png', dpi=150,
                    bbox_inches='tight')
        plt.close(fig)

        fig, _ = plot_angle_growth(points, run.transition_index,
                                   title=f"{name} Wall Angle")
        fig.savefig(output_dir / f'{name}_angle.png', dpi=150,
                    bbox_inches='tight')
        plt.close(fig)

    return result


def cmd_example(args):
    """Compute one horn from command-line parameters."""
    params = HornParameters(fc=args.fc, T=args.T, d0=args.d0,
                            rollback=args.rollback)
    run = solve_profile(params, args.step_size)
    points = run.points

    print("JMLC Horn Profile")
    print(f"  fc       = {params.fc:g} Hz")
    print(f"  T        = {params.T:g}")
    print(f"  d0       = {params.d0:g} mm")
    print(f"  rollback = {params.rollback:g}°")

    if not points:
        print("\nDegenerate parameters: no profile.")
        return 0

    dims = profile_dimensions(points)
    print(f"\nResult:")
    print(f"   Points         = {dims['n_points']}")
    print(f"   Mouth Ø        = {dims['mouth_diameter']:.1f} mm")
    print(f"   Depth          = {dims['depth']:.1f} mm")
    print(f"   Arc length     = {dims['arc_length']:.1f} mm")
    print(f"   Final angle    = {dims['final_angle']:.3f}°")
    print(f"   Stopped on     = {run.stop_reason.value}")
    if run.transition_index is not None:
        l_spiral = points[run.transition_index].length
        print(f"   Spiral from    = point {run.transition_index} "
              f"(l = {l_spiral:.1f} mm)")

    if args.output_dir:
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        coord_path = output_dir / export_filename(params, 'coordinates')
        log_path = output_dir / export_filename(params, 'log')
        coord_path.write_text(to_coordinate_text(points))
        log_path.write_text(to_log_text(points))
        print(f"\nSaved {coord_path}")
        print(f"Saved {log_path}")

    if args.plot:
        matplotlib.use('TkAgg')
        plot_profile(points, title=f"JMLC fc={params.fc:g} Hz, T={params.T:g}")
        plot_angle_growth(points, run.transition_index)
        plt.show()

    return 0
