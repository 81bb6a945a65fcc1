# src/automatic_sub_aligner/optimization/scoring.py

import numpy as np

from ..core.polar import db_to_linear


def efficiency_ratio(actual, theoretical, weights):
    """
    Weighted average of how close the actual combined response gets to the
    theoretical (phase-aligned) maximum, in percent.

    Per bin the ratio ``actual_linear / theoretical_linear * 100`` is
    multiplied by that bin's importance weight, then averaged over all bins.
    Weights above 1 can push the result past 100, so the value is a ranking
    signal rather than a bounded percentage. Empty responses score 0.

    Args:
        actual: Combined response of a candidate.
        theoretical: Response returned by ``combine_responses(..., ignore_phase=True)``.
        weights: Per-bin weights from ``calculate_frequency_weights``.

    Returns:
        The weighted average efficiency as a float.
    """
    if not len(actual) or not len(theoretical):
        return 0.0

    actual_linear = db_to_linear(actual.magnitude_db)
    theoretical_linear = db_to_linear(theoretical.magnitude_db)
    point_efficiency = actual_linear / theoretical_linear * 100
    return float(np.mean(point_efficiency * np.asarray(weights, dtype=float)))
