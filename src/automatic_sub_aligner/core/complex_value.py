# src/automatic_sub_aligner/core/complex_value.py

import numpy as np


class Complex:
    """
    Cartesian complex value.

    ``re`` and ``im`` may be plain floats (one frequency bin) or numpy arrays
    holding one value per bin; every operation is elementwise and returns a
    new instance.
    """

    __slots__ = ("_re", "_im")

    def __init__(self, re, im):
        self._re = re
        self._im = im

    @classmethod
    def from_polar(cls, magnitude, phase):
        return cls(magnitude * np.cos(phase), magnitude * np.sin(phase))

    @property
    def re(self):
        return self._re

    @property
    def im(self):
        return self._im

    def add(self, other):
        return Complex(self._re + other.re, self._im + other.im)

    def sub(self, other):
        return Complex(self._re - other.re, self._im - other.im)

    def mul(self, other):
        return Complex(
            self._re * other.re - self._im * other.im,
            self._re * other.im + self._im * other.re,
        )

    def div(self, other):
        """Divide by ``other``, which must not have a zero magnitude."""
        denom = other.re * other.re + other.im * other.im
        return Complex(
            (self._re * other.re + self._im * other.im) / denom,
            (self._im * other.re - self._re * other.im) / denom,
        )

    __add__ = add
    __sub__ = sub
    __mul__ = mul
    __truediv__ = div

    def __repr__(self):
        return f"Complex(re={self._re!r}, im={self._im!r})"
