# src/automatic_sub_aligner/config.py

"""
Central configuration settings for the Automatic Sub Aligner.

The module-level constants are the defaults. The optimizer itself only ever
sees an immutable ``OptimizerConfig`` built from them (or from a mapping
handed over by the caller).
"""

from dataclasses import dataclass, field

from .errors import InvalidInputError

# =============================================================================
# FREQUENCY BAND
# =============================================================================
FREQ_MIN = 20  # Hz
FREQ_MAX = 200  # Hz

# =============================================================================
# SEARCH RANGES
# =============================================================================
GAIN_MIN = 0  # dB
GAIN_MAX = 0  # dB (0/0 means a polarity/delay-only search)
GAIN_STEP = 0.1  # dB

DELAY_MIN = -0.005  # seconds
DELAY_MAX = 0.005  # seconds
DELAY_STEP = 0.00001  # seconds, i.e. 0.01 ms

# === All-pass search (disabled by default) ===
ALLPASS_ENABLED = False
ALLPASS_FREQ_MIN = 10  # Hz
ALLPASS_FREQ_MAX = 100  # Hz
ALLPASS_FREQ_STEP = 1  # Hz
ALLPASS_Q_MIN = 0.1
ALLPASS_Q_MAX = 0.5
ALLPASS_Q_STEP = 0.1
ALLPASS_SIGNIFICANT_IMPROVEMENT = 2  # percent an all-pass must win by to be kept

# =============================================================================
# FREQUENCY WEIGHTING
# =============================================================================
WEIGHT_POWER = 0.6  # low frequency emphasis, 1 / (f / f_min) ** power
MODAL_REGION_FREQ = 80  # Hz
MODAL_IMPORTANCE = 1.5
CROSSOVER_FREQ = 80  # Hz
CROSSOVER_HALF_WIDTH = 20  # Hz
CROSSOVER_IMPORTANCE = 1.3
EDGE_RATIO = 0.2  # fraction of the band ramped down at each end
EDGE_MIN_FACTOR = 0.5

# =============================================================================
# RUNTIME
# =============================================================================
WORKERS = 1  # threads used to score candidates


@dataclass(frozen=True)
class RangeConfig:
    """Inclusive search range with a positive step."""

    min: float
    max: float
    step: float

    def __post_init__(self):
        if self.min > self.max or self.step <= 0:
            raise InvalidInputError(
                f"Invalid range parameters: min={self.min}, max={self.max}, step={self.step}")


@dataclass(frozen=True)
class FrequencyBand:
    min: float = FREQ_MIN
    max: float = FREQ_MAX

    def __post_init__(self):
        if self.min <= 0 or self.min >= self.max:
            raise InvalidInputError(f"Invalid frequency band: {self.min}-{self.max} Hz")


@dataclass(frozen=True)
class AllPassConfig:
    enabled: bool = ALLPASS_ENABLED
    frequency: RangeConfig = field(
        default_factory=lambda: RangeConfig(ALLPASS_FREQ_MIN, ALLPASS_FREQ_MAX, ALLPASS_FREQ_STEP))
    q: RangeConfig = field(
        default_factory=lambda: RangeConfig(ALLPASS_Q_MIN, ALLPASS_Q_MAX, ALLPASS_Q_STEP))


@dataclass(frozen=True)
class OptimizerConfig:
    """
    Everything the optimizer needs to know about one run.

    Attributes:
        frequency: Band (Hz) retained for optimization.
        gain: Gain search range in dB.
        delay: Delay search range in seconds.
        all_pass: Optional all-pass filter search.
        significant_improvement: Percentage by which an all-pass candidate has
            to beat the best plain candidate before it is chosen.
    """

    frequency: FrequencyBand = field(default_factory=FrequencyBand)
    gain: RangeConfig = field(default_factory=lambda: RangeConfig(GAIN_MIN, GAIN_MAX, GAIN_STEP))
    delay: RangeConfig = field(
        default_factory=lambda: RangeConfig(DELAY_MIN, DELAY_MAX, DELAY_STEP))
    all_pass: AllPassConfig = field(default_factory=AllPassConfig)
    significant_improvement: float = ALLPASS_SIGNIFICANT_IMPROVEMENT

    @classmethod
    def from_dict(cls, data):
        """
        Build a config from the nested mapping layout used by callers, e.g.
        ``{"frequency": {"min": 20, "max": 200}, "delay": {"min": -0.005, ...}}``.
        Missing sections or keys fall back to the module defaults.
        """
        data = data or {}

        def _range(section, default):
            values = data.get(section) or {}
            return RangeConfig(
                values.get("min", default.min),
                values.get("max", default.max),
                values.get("step", default.step),
            )

        freq = data.get("frequency") or {}
        band = FrequencyBand(freq.get("min", FREQ_MIN), freq.get("max", FREQ_MAX))

        all_pass_data = data.get("allPass") or data.get("all_pass") or {}
        default_all_pass = AllPassConfig()
        ap_freq = all_pass_data.get("frequency") or {}
        ap_q = all_pass_data.get("q") or {}
        all_pass = AllPassConfig(
            enabled=bool(all_pass_data.get("enabled", ALLPASS_ENABLED)),
            frequency=RangeConfig(
                ap_freq.get("min", default_all_pass.frequency.min),
                ap_freq.get("max", default_all_pass.frequency.max),
                ap_freq.get("step", default_all_pass.frequency.step),
            ),
            q=RangeConfig(
                ap_q.get("min", default_all_pass.q.min),
                ap_q.get("max", default_all_pass.q.max),
                ap_q.get("step", default_all_pass.q.step),
            ),
        )

        default = cls()
        return cls(
            frequency=band,
            gain=_range("gain", default.gain),
            delay=_range("delay", default.delay),
            all_pass=all_pass,
            significant_improvement=data.get(
                "significantImprovement", ALLPASS_SIGNIFICANT_IMPROVEMENT),
        )


DEFAULT_CONFIG = OptimizerConfig()
