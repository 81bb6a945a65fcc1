# src/automatic_sub_aligner/core/models.py

"""Shared data models."""

from dataclasses import dataclass, field, replace

import numpy as np

from ..errors import InvalidInputError
from .polar import Polar

# Frequencies are truncated to this grid when filtering to a band (7 decimals)
FREQ_ROUNDING_SCALE = 1e7


def _frozen_array(values):
    array = np.array(values, dtype=float)
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class FrequencyResponse:
    """
    One subwoofer measurement: magnitude (dB) and phase (degrees) sampled on
    a strictly increasing frequency grid (Hz).

    Instances never change; every transformation returns a new response.
    """

    freqs: np.ndarray
    magnitude_db: np.ndarray
    phase_deg: np.ndarray
    measurement_id: str = None
    name: str = None
    position: str = None
    freq_step: float = None

    def __post_init__(self):
        for attr in ("freqs", "magnitude_db", "phase_deg"):
            object.__setattr__(self, attr, _frozen_array(getattr(self, attr)))
        if not len(self.freqs) == len(self.magnitude_db) == len(self.phase_deg):
            raise InvalidInputError(
                f"Frequency, magnitude and phase arrays must have the same length "
                f"({len(self.freqs)}, {len(self.magnitude_db)}, {len(self.phase_deg)})")

    @classmethod
    def from_dict(cls, data):
        """
        Build a response from the mapping layout measurement services return:
        ``{"freqs", "magnitude", "phase", "measurement", "name", "position", "freqStep"}``.
        A missing phase array is taken as zero phase.
        """
        freqs = data.get("freqs", [])
        magnitude = data.get("magnitude", [])
        if len(freqs) != len(magnitude):
            raise InvalidInputError("Frequency and magnitude arrays must have the same length")
        phase = data.get("phase")
        if phase is None:
            phase = np.zeros(len(freqs))
        return cls(
            freqs=freqs,
            magnitude_db=magnitude,
            phase_deg=phase,
            measurement_id=data.get("measurement"),
            name=data.get("name"),
            position=data.get("position"),
            freq_step=data.get("freqStep"),
        )

    def __len__(self):
        return len(self.freqs)

    @property
    def label(self):
        return self.name or self.measurement_id

    @property
    def start_freq(self):
        return float(self.freqs[0]) if len(self.freqs) else None

    @property
    def end_freq(self):
        return float(self.freqs[-1]) if len(self.freqs) else None

    def filter_band(self, min_freq, max_freq):
        """
        Keep only the samples inside ``[min_freq, max_freq]`` Hz.

        Frequencies are truncated to 7 decimals before the comparison, so a
        point stored as 200.00000006 still counts as 200 Hz.
        """
        truncated = np.floor(self.freqs * FREQ_ROUNDING_SCALE) / FREQ_ROUNDING_SCALE
        mask = (truncated >= min_freq) & (truncated <= max_freq)
        return replace(
            self,
            freqs=self.freqs[mask],
            magnitude_db=self.magnitude_db[mask],
            phase_deg=self.phase_deg[mask],
        )

    def to_polar(self):
        return Polar.from_db(self.magnitude_db, self.phase_deg)

    def with_polar(self, polar):
        """Same grid and identity, magnitude and phase taken from ``polar``."""
        return replace(self, magnitude_db=polar.magnitude_db, phase_deg=polar.phase_degrees)


@dataclass(frozen=True)
class AllPassParameters:
    frequency: float = 0.0
    q: float = 0.0
    enabled: bool = False

    def describe(self):
        if not self.enabled:
            return "allpass: disabled"
        return f"allpass: freq: {self.frequency}Hz Q: {self.q}"


@dataclass(frozen=True)
class SubParameters:
    """Delay (seconds), gain (dB), polarity and optional all-pass for one sub."""

    delay: float = 0.0
    gain: float = 0.0
    polarity: int = 1
    all_pass: AllPassParameters = field(default_factory=AllPassParameters)

    def __post_init__(self):
        if self.polarity not in (1, -1):
            raise InvalidInputError(f"Polarity must be 1 or -1, got {self.polarity}")

    @property
    def delay_ms(self):
        return self.delay * 1000

    @property
    def inverted(self):
        return self.polarity == -1


REFERENCE_PARAMETERS = SubParameters()


@dataclass(frozen=True)
class OptimizedSub:
    response: FrequencyResponse
    params: SubParameters
    score: float

    @property
    def measurement_id(self):
        return self.response.measurement_id

    @property
    def name(self):
        return self.response.label


@dataclass(frozen=True)
class OptimizationResult:
    """
    Outcome of one optimization run.

    Attributes:
        optimized_subs: One entry per non-reference sub, in processing order.
        best_sum: Running combined response after the last sub was added.
        theoretical_max: Phase-aligned upper bound used for scoring.
        execution_time: Wall time of the search in seconds.
    """

    optimized_subs: tuple
    best_sum: FrequencyResponse
    theoretical_max: FrequencyResponse
    execution_time: float

    @property
    def best_score(self):
        return self.optimized_subs[-1].score if self.optimized_subs else 0.0
