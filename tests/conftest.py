# tests/conftest.py

import matplotlib
import numpy as np
import pytest

from automatic_sub_aligner.core.models import FrequencyResponse

matplotlib.use("Agg")


def make_response(freqs, magnitude, phase, measurement_id, name=None):
    return FrequencyResponse(
        freqs=freqs,
        magnitude_db=magnitude,
        phase_deg=phase,
        measurement_id=measurement_id,
        name=name or measurement_id,
    )


def wrap_degrees(phase):
    return (np.asarray(phase) + 180) % 360 - 180


@pytest.fixture
def band_freqs():
    """A 1 Hz grid over a typical subwoofer band."""
    return np.arange(30.0, 121.0, 1.0)


@pytest.fixture
def sub_a(band_freqs):
    """A sub with a room-mode bump and a phase that rotates with frequency."""
    magnitude = 80 + 4 * np.exp(-0.5 * ((band_freqs - 55) / 8) ** 2)
    phase = wrap_degrees(7 - 1.5 * band_freqs)
    return make_response(band_freqs, magnitude, phase, "sub-a")
