"""
Exception types raised by simfinder.
"""


class SimFinderError(ValueError):
    """Base class for all errors surfaced to the command line."""


class ConfigurationError(SimFinderError):
    """
    Raised when a run cannot start because its configuration or item list
    is unusable.

    Always raised before any pair is compared, so no partial results exist.
    """


class InputError(SimFinderError):
    """Raised when the run input file is missing or is not valid JSON."""
