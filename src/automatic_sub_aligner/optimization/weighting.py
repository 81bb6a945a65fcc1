# src/automatic_sub_aligner/optimization/weighting.py

"""
Per-bin importance weights used when scoring a combined response.
"""

import numpy as np

from .. import config


def calculate_frequency_weights(freqs):
    """
    Weight every frequency bin by how much it matters for subwoofer alignment.

    The weight is the product of four factors:

    1.  A basic low-frequency emphasis, ``1 / (f / f_min) ** 0.6``.
    2.  A modal-region boost (x1.5) below 80 Hz, where room modes dominate.
    3.  A crossover boost (x1.3) within 20 Hz of 80 Hz.
    4.  An edge factor ramping linearly from 0.5 up to 1.0 over the lowest
        and highest 20% of the band, where measurements are least reliable.

    Args:
        freqs: The shared frequency grid of the run.

    Returns:
        A NumPy array of non-negative weights, same length as ``freqs``.
    """
    freqs = np.asarray(freqs, dtype=float)
    if freqs.size == 0:
        return np.array([])

    min_freq = freqs.min()
    max_freq = freqs.max()

    # --- 1. Low-frequency emphasis ---
    basic_weight = 1 / np.power(freqs / min_freq, config.WEIGHT_POWER)

    # --- 2. Modal region ---
    modal_importance = np.where(freqs < config.MODAL_REGION_FREQ, config.MODAL_IMPORTANCE, 1.0)

    # --- 3. Crossover region ---
    crossover_importance = np.where(
        np.abs(freqs - config.CROSSOVER_FREQ) < config.CROSSOVER_HALF_WIDTH,
        config.CROSSOVER_IMPORTANCE, 1.0)

    # --- 4. De-emphasize the extremes of the band ---
    ramp = 1.0 - config.EDGE_MIN_FACTOR
    edge_factor = np.ones_like(freqs)
    low = freqs < min_freq * (1 + config.EDGE_RATIO)
    high = ~low & (freqs > max_freq * (1 - config.EDGE_RATIO))
    edge_factor[low] = config.EDGE_MIN_FACTOR + ramp * (
        (freqs[low] - min_freq) / (min_freq * config.EDGE_RATIO))
    edge_factor[high] = config.EDGE_MIN_FACTOR + ramp * (
        (max_freq - freqs[high]) / (max_freq * config.EDGE_RATIO))

    return basic_weight * modal_importance * crossover_importance * edge_factor
