"""Exceptions raised by the BaZi engine."""


class BaziError(Exception):
    """Base class for every error raised by this package."""


class InvalidInput(BaziError, ValueError):
    """
    The caller supplied something the engine cannot compute from, such as
    an unknown timezone. Retrying with the same input cannot succeed.
    """


class InternalConsistency(BaziError, RuntimeError):
    """A lookup table failed to resolve a case it is supposed to cover."""
