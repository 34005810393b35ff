"""
Core utilities for CLI operations - configuration, storage, progress reporting, output formatting.
"""

from .config import Algorithm, Configuration, ContentItem
from .errors import ConfigurationError, InputError, SimFinderError
from .output import OutputFormatter
from .progress import ProgressReporter
from .storage import RunStorage, load_run_input

__all__ = [
    'Algorithm',
    'Configuration',
    'ContentItem',
    'ConfigurationError',
    'InputError',
    'SimFinderError',
    'OutputFormatter',
    'ProgressReporter',
    'RunStorage',
    'load_run_input',
]
