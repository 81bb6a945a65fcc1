from .optimizer import MultiSubOptimizer

__all__ = ["MultiSubOptimizer"]
