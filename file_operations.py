#!/usr/bin/env python3
"""
File Operations Module

Size probing and recursive deletion for matched directories. Every operation
works on a single path and reports failure as a value instead of raising, so
a batch always runs to completion.
"""

import os
import shutil
import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from cleaner_errors import DeletionError, SizeProbeError


class SizeMode(str, Enum):
    """How directory sizes are counted"""

    APPARENT = "apparent"  # sum of file lengths
    DISK_USAGE = "disk_usage"  # allocated blocks, like du


# ---------------------------------------------------------------------------
# Size probe
# ---------------------------------------------------------------------------


def _entry_size(st: os.stat_result, mode: SizeMode) -> int:
    if mode is SizeMode.DISK_USAGE:
        blocks = getattr(st, "st_blocks", None)
        if blocks is not None:
            return blocks * 512
        return st.st_size
    # Apparent size counts file contents only
    if stat.S_ISDIR(st.st_mode):
        return 0
    return st.st_size


def _probe(path: str, mode: SizeMode) -> int:
    """Return the total size of the tree at *path*, raising SizeProbeError on any failure"""
    try:
        root_stat = os.stat(path, follow_symlinks=False)
    except OSError as e:
        raise SizeProbeError(path, e.strerror or str(e)) from e
    if not stat.S_ISDIR(root_stat.st_mode):
        raise SizeProbeError(path, "not a directory")

    # Directory and hard-linked file identities already counted
    seen_dirs: set[tuple[int, int]] = {(root_stat.st_dev, root_stat.st_ino)}
    seen_files: set[tuple[int, int]] = set()
    total = _entry_size(root_stat, mode)
    stack = [path]

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    st = entry.stat(follow_symlinks=False)
                    key = (st.st_dev, st.st_ino)
                    if stat.S_ISDIR(st.st_mode):
                        if key in seen_dirs:
                            continue
                        seen_dirs.add(key)
                        stack.append(entry.path)
                    elif st.st_nlink > 1:
                        if key in seen_files:
                            continue
                        seen_files.add(key)
                    total += _entry_size(st, mode)
        except OSError as e:
            raise SizeProbeError(e.filename or current, e.strerror or str(e)) from e

    return total


def directory_size(path: str, mode: SizeMode = SizeMode.DISK_USAGE) -> Optional[int]:
    """Return the total size of a directory tree in bytes, or None if it cannot be read"""
    try:
        return _probe(path, mode)
    except SizeProbeError:
        return None


# ---------------------------------------------------------------------------
# Deletion
# ---------------------------------------------------------------------------


@dataclass
class DeletionOutcome:
    """Result of one deletion attempt"""

    path: str
    succeeded: bool
    error_message: Optional[str] = None
    reclaimed: int = 0


@dataclass
class BatchSummary:
    """Ordered outcomes of a deletion batch"""

    outcomes: list[DeletionOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[DeletionOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> list[DeletionOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def total_reclaimed(self) -> int:
        return sum(o.reclaimed for o in self.succeeded)


class FileOperations:
    """Recursive directory removal with per-item failure reporting"""

    STAGING_PREFIX = ".devcleaner-trash-"

    def __init__(self, remove_tree: Callable[[str], None] = shutil.rmtree):
        """Initialize with the function used to remove a directory tree"""
        self.remove_tree = remove_tree

    def _staging_path(self, path: str) -> str:
        parent, name = os.path.split(path.rstrip(os.sep))
        return os.path.join(parent, f"{self.STAGING_PREFIX}{os.getpid()}-{name}")

    def _delete(self, path: str):
        """Move *path* aside, then remove it. Raises DeletionError with *path* untouched or restored."""
        if not os.path.isdir(path) or os.path.islink(path):
            raise DeletionError(path, "not a directory")

        staged = self._staging_path(path)
        try:
            os.rename(path, staged)
        except OSError as e:
            raise DeletionError(path, e.strerror or str(e)) from e

        try:
            self.remove_tree(staged)
        except OSError as e:
            try:
                os.rename(staged, path)
            except OSError as restore_error:
                raise DeletionError(
                    path, f"{e.strerror or e}; remains at {staged} ({restore_error.strerror or restore_error})"
                ) from e
            raise DeletionError(path, e.strerror or str(e)) from e

    def delete_tree(self, path: str, size: Optional[int] = None) -> DeletionOutcome:
        """Delete one directory tree and report the outcome"""
        try:
            self._delete(path)
        except DeletionError as e:
            return DeletionOutcome(path=path, succeeded=False, error_message=e.reason)
        return DeletionOutcome(path=path, succeeded=True, reclaimed=size or 0)

    def execute_batch_deletions(
        self,
        items: list[tuple[str, Optional[int]]],
        on_start: Optional[Callable[[str], None]] = None,
        on_outcome: Optional[Callable[[DeletionOutcome], None]] = None,
    ) -> BatchSummary:
        """Delete every (path, size) item in order; a failure never stops the batch"""
        summary = BatchSummary()

        for path, size in items:
            if on_start:
                on_start(path)

            outcome = self.delete_tree(path, size)
            summary.outcomes.append(outcome)
            if on_outcome:
                on_outcome(outcome)

        return summary
