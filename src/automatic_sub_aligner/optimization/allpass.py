# src/automatic_sub_aligner/optimization/allpass.py

import numpy as np
from scipy import signal


def allpass_coefficients(frequency, q):
    """
    Analog 2nd-order all-pass with centre ``frequency`` Hz and quality ``q``:
    H(s) = (s^2 - (w0/Q)s + w0^2) / (s^2 + (w0/Q)s + w0^2)
    """
    w0 = 2 * np.pi * frequency
    b = [1.0, -w0 / q, w0 ** 2]
    a = [1.0, w0 / q, w0 ** 2]
    return b, a


def allpass_phase_degrees(freqs, frequency, q):
    """Phase shift (degrees) of the all-pass at every frequency in ``freqs``. Magnitude is unity."""
    b, a = allpass_coefficients(frequency, q)
    _, h = signal.freqs(b, a, worN=2 * np.pi * np.asarray(freqs, dtype=float))
    return np.degrees(np.angle(h))
