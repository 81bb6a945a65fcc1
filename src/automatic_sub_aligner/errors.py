# src/automatic_sub_aligner/errors.py

"""
Exceptions raised by the subwoofer alignment core.
"""


class SubAlignerError(Exception):
    """Base error for the automatic sub aligner."""


class InvalidInputError(SubAlignerError, ValueError):
    """Raised for unusable measurements or an invalid search range."""


class InconsistentFrequencyGridError(SubAlignerError, ValueError):
    """Raised when the subwoofers disagree on their filtered frequency points."""
