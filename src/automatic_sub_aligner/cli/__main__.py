# src/automatic_sub_aligner/cli/__main__.py

"""
Command line entry point: align subwoofers from exported measurement files.
"""

import argparse
import logging
import sys

from .. import config
from ..config import AllPassConfig, FrequencyBand, OptimizerConfig, RangeConfig
from ..errors import SubAlignerError
from ..optimization.optimizer import MultiSubOptimizer
from ..utils import load_response_text, save_response_text, save_results_csv


def build_parser():
    parser = argparse.ArgumentParser(
        prog="auto-sub-aligner",
        description="Find delay, gain and polarity for each subwoofer so their sum is maximized.")
    parser.add_argument("responses", nargs="+",
                        help="Measurement text files (freq mag phase); the first is the reference")
    parser.add_argument("--min-freq", type=float, default=config.FREQ_MIN, help="Band start (Hz)")
    parser.add_argument("--max-freq", type=float, default=config.FREQ_MAX, help="Band end (Hz)")
    parser.add_argument("--delay-min", type=float, default=config.DELAY_MIN * 1000, help="ms")
    parser.add_argument("--delay-max", type=float, default=config.DELAY_MAX * 1000, help="ms")
    parser.add_argument("--delay-step", type=float, default=config.DELAY_STEP * 1000, help="ms")
    parser.add_argument("--gain-min", type=float, default=config.GAIN_MIN, help="dB")
    parser.add_argument("--gain-max", type=float, default=config.GAIN_MAX, help="dB")
    parser.add_argument("--gain-step", type=float, default=config.GAIN_STEP, help="dB")
    parser.add_argument("--allpass", action="store_true", help="Also search an all-pass filter per sub")
    parser.add_argument("--workers", type=int, default=config.WORKERS,
                        help="Threads used to score candidates")
    parser.add_argument("--output", help="Write the aligned sum as a text response")
    parser.add_argument("--csv", help="Write the chosen parameters as CSV")
    parser.add_argument("--plot", help="Save a plot of the alignment (png, pdf, ...)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def config_from_args(args):
    return OptimizerConfig(
        frequency=FrequencyBand(args.min_freq, args.max_freq),
        gain=RangeConfig(args.gain_min, args.gain_max, args.gain_step),
        delay=RangeConfig(args.delay_min / 1000, args.delay_max / 1000, args.delay_step / 1000),
        all_pass=AllPassConfig(enabled=args.allpass),
    )


def main(argv=None):
    """Run one alignment and print the chosen parameters."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        responses = [load_response_text(path) for path in args.responses]
        optimizer = MultiSubOptimizer(responses, config_from_args(args), workers=args.workers)
        result = optimizer.optimize_subwoofers()
        final_sum = optimizer.get_final_sum()
    except (SubAlignerError, OSError) as e:
        print(f"Error: {e}")
        return 2

    print(f"Reference: {optimizer.prepared_subs[0].label}")
    for sub in result.optimized_subs:
        params = sub.params
        print(f"  {sub.name}: delay={params.delay_ms:.2f} ms, gain={params.gain:.2f} dB, "
              f"polarity={'inverted' if params.inverted else 'normal'}, "
              f"{params.all_pass.describe()}, score={sub.score:.2f}")
    print(f"Final score: {result.best_score:.2f} ({result.execution_time:.2f}s)")

    if args.output:
        save_response_text(final_sum, args.output)
    if args.csv:
        save_results_csv(result, args.csv)
    if args.plot:
        from ..ui.plotter import plot_alignment
        plot_alignment(optimizer.prepared_subs, final_sum, result.theoretical_max, filename=args.plot)

    return 0


if __name__ == "__main__":
    sys.exit(main())
