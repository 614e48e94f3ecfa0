#!/usr/bin/env python3
"""
Error types shared by the devcleaner modules

Per-item errors (scan, size probe, deletion) are absorbed where they happen
and reported at the end of a run. Only errors outside this hierarchy, or a
ConfigError at startup, end the process.
"""

from typing import Optional


class CleanerError(Exception):
    """Base class for all devcleaner errors"""

    def __init__(self, path: Optional[str] = None, reason: str = ""):
        self.path = path
        self.reason = reason
        super().__init__(self._format())

    def _format(self) -> str:
        if self.path and self.reason:
            return f"{self.path}: {self.reason}"
        return self.path or self.reason


class PathNotFound(CleanerError):
    """Root path does not exist or is not a readable directory"""

    def __init__(self, path: str, reason: str = "path does not exist"):
        super().__init__(path, reason)


class ScanIOError(CleanerError):
    """A subtree could not be read during the scan and was skipped"""


class SizeProbeError(CleanerError):
    """Size computation failed for one match"""


class DeletionError(CleanerError):
    """Recursive delete failed for one match"""


class InvalidInput(CleanerError):
    """User-supplied value failed validation"""

    def __init__(self, value: str, reason: str):
        self.value = value
        super().__init__(None, reason)


class ConfigError(CleanerError):
    """Configuration file could not be read or contains bad values"""
