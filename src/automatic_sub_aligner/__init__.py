"""
Multi-subwoofer delay, gain and polarity alignment at a single listening position.
"""

from .config import DEFAULT_CONFIG, OptimizerConfig
from .core.models import FrequencyResponse, OptimizedSub, SubParameters
from .errors import InconsistentFrequencyGridError, InvalidInputError, SubAlignerError
from .optimization.optimizer import MultiSubOptimizer

__all__ = [
    "DEFAULT_CONFIG",
    "FrequencyResponse",
    "InconsistentFrequencyGridError",
    "InvalidInputError",
    "MultiSubOptimizer",
    "OptimizedSub",
    "OptimizerConfig",
    "SubAlignerError",
    "SubParameters",
]
