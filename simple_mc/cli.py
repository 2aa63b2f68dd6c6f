"""
CLI entry point for the criticality mini-app.

Usage:
    simple-mc                                  # defaults (10k particles, 20 batches)
    simple-mc --params parameters              # read a 'key value' parameter file
    simple-mc --particles 2000 --batches 50 --active 30 --workers 4
    simple-mc --list-backends                  # show available backends
"""
import argparse
import json
import logging
import os
import sys


def build_parser():
    parser = argparse.ArgumentParser(
        description='Criticality Monte Carlo mini-app: k-effective of a homogeneous box',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  simple-mc --params parameters             Run from a parameter file
  simple-mc -n 2000 -b 50 --active 30       Override sizes on the command line
  simple-mc --workers 4 --tally             Threaded run with mesh flux tally
        """,
    )

    parser.add_argument('--params', '-p', type=str, default=None,
                        help="Parameter file with 'key value' lines")
    parser.add_argument('--particles', '-n', type=int, default=None, help='Particles per generation')
    parser.add_argument('--batches', '-b', type=int, default=None, help='Total batches')
    parser.add_argument('--active', '-a', type=int, default=None, help='Active batches')
    parser.add_argument('--generations', '-g', type=int, default=None, help='Generations per batch')
    parser.add_argument('--bins', type=int, default=None, help='Entropy/tally mesh bins per axis')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--workers', '-w', type=int, default=None, help='Worker threads')
    parser.add_argument('--bc', choices=['vacuum', 'reflect', 'periodic'], default=None,
                        help='Boundary condition of the box')
    parser.add_argument('--tally', action='store_true', help='Turn on mesh flux tally in active batches')
    parser.add_argument('--output', '-o', type=str, default=None, help='Output JSON file')
    parser.add_argument('--list-backends', action='store_true', help='List available backends')
    parser.add_argument('--quiet', '-q', action='store_true', help='Minimal output')
    parser.add_argument('--debug', action='store_true', help='Debug logging')
    return parser


_OVERRIDES = (
    ('particles', 'n_particles'),
    ('batches', 'n_batches'),
    ('active', 'n_active'),
    ('generations', 'n_generations'),
    ('bins', 'n_bins'),
    ('seed', 'seed'),
    ('workers', 'n_workers'),
    ('bc', 'bc'),
)


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    # List backends
    if args.list_backends:
        from .backends import list_backends
        print("Available backends:")
        print(f"  {'Name':<10} {'Description':<40} {'Available'}")
        print(f"  {'-'*10} {'-'*40} {'-'*9}")
        for name, desc, avail in list_backends():
            status = "YES" if avail else "NO"
            print(f"  {name:<10} {desc:<40} {status}")
        return 0

    from .config import Parameters, parse_params
    from .eigenvalue import PowerIteration
    from .errors import SimulationError

    try:
        params = parse_params(args.params) if args.params else Parameters()
        for opt, name in _OVERRIDES:
            value = getattr(args, opt)
            if value is not None:
                setattr(params, name, value)
        if args.tally:
            params.tally = True
        params.validate()

        if not args.quiet:
            params.summary()

        result = PowerIteration(params).solve(verbose=not args.quiet)
    except SimulationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    # Save output
    if args.output:
        output_dir = os.path.dirname(args.output)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(args.output, 'w') as f:
            json.dump(result.to_dict(), f, indent=2)
        if not args.quiet:
            print(f"\nResults saved to {args.output}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
