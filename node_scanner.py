#!/usr/bin/env python3
"""
Node Modules Scanner

Walks a directory tree looking for dependency install folders (node_modules
by default) and annotates each one with its last modification time.

A matched folder is never descended into, so a node_modules nested inside
another node_modules is not reported. Unreadable subtrees are recorded and
skipped.
"""

import datetime
import os
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from tzlocal import get_localzone

from cleaner_errors import PathNotFound, ScanIOError

NODE_MODULES = "node_modules"
MIN_YEAR = 2000

YearBound = Union[int, str]  # an int year or "all"
ALL_YEARS = "all"

# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DirectoryMatch:
    path: str
    modified_at: datetime.datetime


@dataclass
class ScanResult:
    root_path: str
    matches: list[DirectoryMatch] = field(default_factory=list)
    errors: list[ScanIOError] = field(default_factory=list)
    scan_duration: float = 0.0
    dirs_scanned: int = 0

    @property
    def paths(self) -> list[str]:
        return [m.path for m in self.matches]


# ---------------------------------------------------------------------------
# Year windows
# ---------------------------------------------------------------------------


def year_start(year: int, tz: Optional[datetime.tzinfo] = None) -> datetime.datetime:
    """Return local midnight on January 1st of *year*"""
    return datetime.datetime(year, 1, 1, tzinfo=tz or get_localzone())


def year_window(
    year_bound: YearBound, min_year: int = MIN_YEAR, tz: Optional[datetime.tzinfo] = None
) -> tuple[Optional[datetime.datetime], Optional[datetime.datetime]]:
    """Return the (since, before) window for a year bound.

    "all" is unbounded on both sides. An integer year Y covers
    [min_year-01-01, (Y+1)-01-01), which is exactly the union of
    year_windows(min_year, Y).
    """
    if year_bound == ALL_YEARS:
        return None, None
    year = int(year_bound)
    return year_start(min_year, tz), year_start(year + 1, tz)


def year_windows(
    min_year: int, last_year: int, tz: Optional[datetime.tzinfo] = None
) -> list[tuple[datetime.datetime, datetime.datetime]]:
    """Return one [Jan 1st, next Jan 1st) window per year from min_year to last_year"""
    return [(year_start(y, tz), year_start(y + 1, tz)) for y in range(min_year, last_year + 1)]


def _in_window(
    modified_at: datetime.datetime, since: Optional[datetime.datetime], before: Optional[datetime.datetime]
) -> bool:
    if since is not None and modified_at < since:
        return False
    return not (before is not None and modified_at >= before)


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def _stat_match(path: str, tz: datetime.tzinfo) -> DirectoryMatch:
    st = os.stat(path, follow_symlinks=False)
    return DirectoryMatch(path=path, modified_at=datetime.datetime.fromtimestamp(st.st_mtime, tz=tz))


def scan(
    root_path: str,
    since: Optional[datetime.datetime] = None,
    before: Optional[datetime.datetime] = None,
    target_name: str = NODE_MODULES,
    timezone: Optional[datetime.tzinfo] = None,
    on_error: Optional[Callable[[ScanIOError], None]] = None,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> ScanResult:
    """Find all top-level *target_name* directories below *root_path*.

    Args:
        root_path: Directory to walk (included in the search itself)
        since: Only keep matches modified at or after this time (None = open)
        before: Only keep matches modified strictly before this time (None = open)
        target_name: Exact directory base name to look for
        timezone: Zone used for modification timestamps (defaults to local)
        on_error: Called for every subtree that could not be read
        progress_callback: Called with the number of directories visited so far

    Returns:
        ScanResult with matches sorted by path

    Raises:
        PathNotFound: If root_path does not exist or is not a readable directory
    """
    tz = timezone or get_localzone()
    root = os.path.abspath(os.path.expanduser(root_path))
    if not os.path.isdir(root):
        raise PathNotFound(root)
    if not os.access(root, os.R_OK | os.X_OK):
        raise PathNotFound(root, "permission denied")

    result = ScanResult(root_path=root)
    start = time.monotonic()

    def record_error(error: ScanIOError):
        result.errors.append(error)
        if on_error:
            on_error(error)

    def consider(path: str):
        try:
            match = _stat_match(path, tz)
        except OSError as e:
            record_error(ScanIOError(path, e.strerror or str(e)))
            return
        if _in_window(match.modified_at, since, before):
            result.matches.append(match)

    if os.path.basename(root) == target_name:
        consider(root)
        result.dirs_scanned = 1
    else:

        def walk_error(error: OSError):
            record_error(ScanIOError(error.filename or root, error.strerror or str(error)))

        for dirpath, dirs, _files in os.walk(root, topdown=True, onerror=walk_error, followlinks=False):
            result.dirs_scanned += 1
            if progress_callback and result.dirs_scanned % 200 == 0:
                progress_callback(result.dirs_scanned)

            kept = []
            for d in dirs:
                full = os.path.join(dirpath, d)
                if os.path.islink(full):
                    continue
                if d == target_name:
                    consider(full)
                    continue
                kept.append(d)
            # Prune matches and symlinks so we never descend into them
            dirs[:] = kept

    result.matches.sort(key=lambda m: m.path)
    result.scan_duration = time.monotonic() - start
    return result


def scan_for_year(
    root_path: str,
    year_bound: YearBound,
    min_year: int = MIN_YEAR,
    target_name: str = NODE_MODULES,
    timezone: Optional[datetime.tzinfo] = None,
    on_error: Optional[Callable[[ScanIOError], None]] = None,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> ScanResult:
    """Scan *root_path* keeping matches last modified on or before *year_bound*"""
    since, before = year_window(year_bound, min_year, timezone)
    return scan(
        root_path,
        since=since,
        before=before,
        target_name=target_name,
        timezone=timezone,
        on_error=on_error,
        progress_callback=progress_callback,
    )
