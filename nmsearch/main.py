#!/usr/bin/env python3
"""
Command-line demo of the Nelder-Mead simplex search.

Minimizes the coupled-parabola example objective with one or more
tolerances and prints the statistics of each run.
"""

import argparse
import logging
import sys
from typing import List, Optional

from nmsearch.config.search_config import SearchConfig
from nmsearch.optimization.benchmarks import coupled_parabola, rosenbrock, sphere
from nmsearch.optimization.errors import SearchError
from nmsearch.optimization.nelder_mead import NelderMead, SearchResult
from nmsearch.optimization.projection import make_box_projector
from nmsearch.utils.logging_setup import setup_logging
from nmsearch.utils.search_trace import SearchTracer

OBJECTIVES = {
    'coupled': coupled_parabola,
    'sphere': sphere,
    'rosenbrock': rosenbrock,
}


def format_results(result: SearchResult) -> str:
    """按示例程序的格式输出一次搜索的结果"""
    lines = [
        f"    {result.eval_count} Function Evaluations",
        f"    {result.iteration_count} Iterations through program",
        f"    Best result: {result.min:e}",
    ]
    for value in result.min_values:
        lines.append(f"        Best variables: {value:e}")
    if not result.converged:
        lines.append("    (iteration limit reached before convergence)")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    defaults = SearchConfig()
    parser = argparse.ArgumentParser(
        description='Nelder-Mead simplex search demo',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Reproduce the example run with two tolerances
  python -m nmsearch.main --tolerance 1e-6 1e-12

  # Rosenbrock in 3 dimensions, clamped to [-5, 5]
  python -m nmsearch.main --objective rosenbrock --start 0 0 0 --bounds -5 5
        """
    )
    parser.add_argument('--objective', choices=sorted(OBJECTIVES), default='coupled',
                        help='Objective function to minimize (default: coupled)')
    parser.add_argument('--start', type=float, nargs='+', default=[1.0, 1.0],
                        help='Start point (default: 1 1)')
    parser.add_argument('--tolerance', type=float, nargs='+', default=[defaults.tolerance],
                        help=f'One search per tolerance (default: {defaults.tolerance:g})')
    parser.add_argument('--scale', type=float, default=defaults.scale,
                        help=f'Initial simplex scale (default: {defaults.scale})')
    parser.add_argument('--max-iterations', type=int, default=100000,
                        help='Iteration cap (default: 100000)')
    parser.add_argument('--bounds', type=float, nargs=2, metavar=('LOWER', 'UPPER'),
                        help='Clamp every coordinate to [LOWER, UPPER]')
    parser.add_argument('--trace', type=str,
                        help='Write the per-iteration trace of the last run to this CSV file')
    parser.add_argument('--log-dir', type=str, default=defaults.logs_dir,
                        help='Also write logs to a dated file in this directory')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default=defaults.log_level,
                        help=f'Logging level (default: {defaults.log_level})')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.objective == 'coupled' and len(args.start) != 2:
        parser.error('the coupled objective takes exactly 2 variables')
    if args.bounds and args.bounds[0] > args.bounds[1]:
        parser.error('--bounds LOWER must not exceed UPPER')
    setup_logging(args.log_dir, args.log_level)

    projector = make_box_projector(*args.bounds) if args.bounds else None
    tracer = SearchTracer(record_vertices=False) if args.trace else None

    try:
        simp = NelderMead(len(args.start), OBJECTIVES[args.objective], projector, tracer=tracer)
        simp.set_max_iterations(args.max_iterations)

        for tolerance in args.tolerance:
            print(f"Trying Nelder Mead with tolerance {tolerance:.1e}")
            result = simp.search(args.start, tolerance, args.scale)
            print(format_results(result))
    except SearchError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if tracer is not None:
        tracer.to_frame().to_csv(args.trace, index=False)
        logging.getLogger(__name__).info(f"Trace written to {args.trace}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
