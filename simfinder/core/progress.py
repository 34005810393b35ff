"""
Progress reporting for pair comparison.
"""

import sys


class ProgressReporter:
    """
    Progress bar written to stderr while items are compared.

    Its report() method matches the finder's progress_callback signature.
    """

    def __init__(self,
                 desc: str = "Comparing",
                 show_progress: bool = True,
                 file=None):
        """
        Initialize progress reporter.

        Args:
            desc: Description of the operation
            show_progress: Whether to show progress output
            file: Output file (default: sys.stderr)
        """
        self.desc = desc
        self.show_progress = show_progress
        self.file = file or sys.stderr
        self._last_percent = -1

    def report(self, message: str, current: int, total: int):
        """Draw the bar for current out of total."""
        if not self.show_progress:
            return
        if total <= 0:
            print(f"\r{self.desc}: {message}", end='', file=self.file, flush=True)
            return
        percent = int(100 * current / total)
        if percent != self._last_percent:
            self._last_percent = percent
            bar_len = 30
            filled = int(bar_len * current / total)
            bar = '=' * filled + '-' * (bar_len - filled)
            print(f"\r{self.desc}: [{bar}] {percent}% {message}",
                  end='', file=self.file, flush=True)

    def finish(self, message: str = "Done"):
        """Mark progress as complete."""
        if self.show_progress:
            print(f"\r{self.desc}: {message}" + " " * 40, file=self.file)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.finish()


class NullProgress:
    """No-op progress reporter for silent operation."""

    def __init__(self, *args, **kwargs):
        pass

    def report(self, message: str, current: int, total: int):
        pass

    def finish(self, message: str = "Done"):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass
