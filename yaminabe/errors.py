"""
Exception taxonomy shared by every yaminabe component.

Each error also derives from the builtin exception callers would
otherwise catch (IOError, ValueError, RuntimeError).
"""


class YaminabeError(Exception):
    """Base class for all yaminabe errors."""


class CorpusUnreadable(YaminabeError, IOError):
    """The corpus source could not be opened or decoded."""


class ModelUntrained(YaminabeError, RuntimeError):
    """A probability was requested from a model with no observations."""


class EmptyWindow(YaminabeError, ValueError):
    """Entropy was requested for a sequence that has no windows."""


class NothingToMix(YaminabeError, ValueError):
    """Synthesis was requested with zero quizzes."""


class InvalidCoverageConfig(YaminabeError, ValueError):
    """A quiz cannot satisfy the configured coverage or length."""


class NoCandidateFound(YaminabeError, RuntimeError):
    """The search budget ran out without a single completed candidate."""
