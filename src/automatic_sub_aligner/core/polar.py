# src/automatic_sub_aligner/core/polar.py

"""
Magnitude/phase (phasor) arithmetic.

Summing the phasors of several sources at one frequency models how their
outputs interfere at the listening position. A ``Polar`` holds either a single
bin (floats) or a whole response (numpy arrays, one entry per bin); all
operations are elementwise, so applying a delay with the response's frequency
array shifts every bin by its own ``2*pi*f*t``.
"""

import numpy as np

from .complex_value import Complex

# Smallest magnitude used when converting to dB, keeps silent bins finite
EPSILON = np.finfo(float).eps

TWO_PI = 2 * np.pi


def normalize_phase(phase):
    """Wrap a phase (radians) into the half-open interval (-pi, pi]."""
    wrapped = np.pi - np.mod(np.pi - phase, TWO_PI)
    if np.ndim(wrapped):
        wrapped[wrapped <= -np.pi] += TWO_PI
        return wrapped
    return wrapped + TWO_PI if wrapped <= -np.pi else wrapped


def db_to_linear(magnitude_db):
    return np.power(10.0, np.divide(magnitude_db, 20))


def degrees_to_radians(degrees):
    return np.deg2rad(degrees)


def radians_to_degrees(radians):
    return np.rad2deg(radians)


class Polar:
    """Immutable phasor: linear magnitude and phase in radians."""

    __slots__ = ("_magnitude", "_phase")

    def __init__(self, magnitude, phase):
        self._magnitude = magnitude
        self._phase = normalize_phase(phase)

    # === Factories ===

    @classmethod
    def from_complex(cls, complex_value):
        magnitude = np.hypot(complex_value.re, complex_value.im)
        phase = np.arctan2(complex_value.im, complex_value.re)
        return cls(magnitude, phase)

    @classmethod
    def from_db(cls, magnitude_db, phase_degrees):
        return cls(db_to_linear(magnitude_db), degrees_to_radians(phase_degrees))

    def to_complex(self):
        return Complex.from_polar(self._magnitude, self._phase)

    # === Views ===

    @property
    def magnitude(self):
        return self._magnitude

    @property
    def phase(self):
        return self._phase

    @property
    def magnitude_db(self):
        return 20 * np.log10(np.maximum(self._magnitude, EPSILON))

    @property
    def phase_degrees(self):
        return radians_to_degrees(self._phase)

    # === Arithmetic ===

    def add(self, other):
        return Polar.from_complex(self.to_complex().add(other.to_complex()))

    def subtract(self, other):
        return Polar.from_complex(self.to_complex().sub(other.to_complex()))

    def multiply(self, other):
        return Polar(self._magnitude * other.magnitude, self._phase + other.phase)

    def divide(self, other):
        return Polar(self._magnitude / other.magnitude, self._phase - other.phase)

    def scale(self, factor):
        return Polar(self._magnitude * factor, self._phase)

    def scale_db(self, gain_db):
        return self.scale(db_to_linear(gain_db))

    def add_gain(self, magnitude):
        return Polar(self._magnitude + magnitude, self._phase)

    def add_gain_db(self, gain_db):
        return self.add_gain(db_to_linear(gain_db))

    def add_phase(self, phase_radians):
        return Polar(self._magnitude, self._phase + phase_radians)

    def add_phase_degrees(self, phase_degrees):
        return self.add_phase(degrees_to_radians(phase_degrees))

    # === Audio operations ===

    def delay(self, delay_seconds, frequency):
        """Shift by ``delay_seconds`` at ``frequency`` Hz (a float or one value per bin)."""
        return self.add_phase(TWO_PI * np.multiply(frequency, delay_seconds))

    def invert_polarity(self):
        return Polar(self._magnitude, self._phase + np.pi)

    def conjugate(self):
        return Polar(self._magnitude, -self._phase)

    def inverse(self):
        return Polar(1 / self._magnitude, -self._phase)

    # === Collections ===

    @staticmethod
    def add_responses(responses):
        """Phasor sum of a list of ``Polar`` values, or None for an empty list."""
        total = None
        for response in responses:
            if not isinstance(response, Polar):
                raise TypeError("All elements must be Polar instances")
            total = response if total is None else total.add(response)
        return total

    @staticmethod
    def average_responses(responses):
        responses = list(responses)
        if not responses:
            return None
        return Polar.add_responses(responses).scale(1 / len(responses))

    def to_dict(self):
        complex_value = self.to_complex()
        return {
            "magnitude": self._magnitude,
            "phase": self._phase,
            "magnitude_db": self.magnitude_db,
            "phase_degrees": self.phase_degrees,
            "real": complex_value.re,
            "imaginary": complex_value.im,
        }

    def __str__(self):
        if np.ndim(self._magnitude):
            return f"Polar({np.size(self._magnitude)} bins)"
        return f"{self.magnitude_db:.2f}dB ∠{self.phase_degrees:.2f}°"

    def __repr__(self):
        return f"Polar(magnitude={self._magnitude!r}, phase={self._phase!r})"
