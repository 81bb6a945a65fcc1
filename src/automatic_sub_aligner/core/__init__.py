from .complex_value import Complex
from .polar import Polar

__all__ = ["Complex", "Polar"]
