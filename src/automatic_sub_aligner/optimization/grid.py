# src/automatic_sub_aligner/optimization/grid.py

"""
Enumeration of the candidate parameters tried for every subwoofer.
"""

import itertools
import math
from decimal import Decimal

import numpy as np

from ..core.models import AllPassParameters, SubParameters

# Iteration order of the polarity axis; the first candidate seen wins a tie
POLARITIES = (1, -1)


def step_decimals(step):
    """Number of decimals the step is written with, e.g. 0.0005 -> 4, 2.5 -> 1, 1 -> 0."""
    exponent = Decimal(repr(float(step))).normalize().as_tuple().exponent
    return max(0, -exponent)


def generate_range(min_value, max_value, step):
    """
    Evenly spaced values from ``min_value`` to ``max_value`` inclusive.

    Each value is rounded to the step's decimal resolution so that
    ``-0.001 + 2 * 0.0005`` comes out as exactly ``0.0``. When the step does
    not divide the range the count is rounded to the nearest whole step, so
    the last value can overshoot ``max_value`` by up to half a step.
    """
    count = int(math.floor((max_value - min_value) / step + 0.5)) + 1
    values = np.round(min_value + np.arange(count) * step, step_decimals(step))
    return [float(value) + 0.0 for value in values]


def allpass_candidates(all_pass_config):
    """The disabled all-pass first, then every (frequency, q) pair when the search is enabled."""
    candidates = [AllPassParameters()]
    if all_pass_config.enabled:
        frequencies = generate_range(all_pass_config.frequency.min, all_pass_config.frequency.max,
                                     all_pass_config.frequency.step)
        q_values = generate_range(all_pass_config.q.min, all_pass_config.q.max,
                                  all_pass_config.q.step)
        candidates.extend(
            AllPassParameters(frequency=frequency, q=q, enabled=True)
            for frequency in frequencies for q in q_values)
    return candidates


def generate_test_params(config):
    """
    Full cross product of the configured search ranges.

    Order is polarity-major, then delay, then gain, then all-pass. The
    optimizer keeps the first candidate it sees on an exact score tie, so this
    order is the tie-break.
    """
    delays = generate_range(config.delay.min, config.delay.max, config.delay.step)
    gains = generate_range(config.gain.min, config.gain.max, config.gain.step)
    all_passes = allpass_candidates(config.all_pass)

    return tuple(
        SubParameters(delay=delay, gain=gain, polarity=polarity, all_pass=all_pass)
        for polarity, delay, gain, all_pass in itertools.product(
            POLARITIES, delays, gains, all_passes)
    )


def count_combinations(config):
    """Candidates per sub plus one for the reference sub."""
    delay_count = len(generate_range(config.delay.min, config.delay.max, config.delay.step))
    gain_count = len(generate_range(config.gain.min, config.gain.max, config.gain.step))
    return delay_count * gain_count * len(POLARITIES) * len(allpass_candidates(config.all_pass)) + 1
