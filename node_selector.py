#!/usr/bin/env python3
"""
Node Modules Selector

Turns user choices into scanner queries and scanner output into a plan:
year menu and validation, root candidates, deduplication, size probing
and the overall action for a run.
"""

import datetime
import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from auxiliary import expand_path
from cleaner_errors import InvalidInput, PathNotFound, ScanIOError
from file_operations import directory_size
from node_scanner import ALL_YEARS, MIN_YEAR, NODE_MODULES, DirectoryMatch, ScanResult, YearBound, scan_for_year

CUSTOM_YEAR = "custom"

# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScanRequest:
    root_path: str
    year_bound: YearBound
    min_year: int = MIN_YEAR

    def __post_init__(self):
        if self.year_bound == ALL_YEARS:
            return
        current_year = datetime.date.today().year
        if (
            not isinstance(self.year_bound, int)
            or isinstance(self.year_bound, bool)
            or not self.min_year <= self.year_bound <= current_year
        ):
            raise InvalidInput(
                str(self.year_bound), f"year must be 'all' or between {self.min_year} and {current_year}"
            )


@dataclass(frozen=True)
class SizedMatch:
    match: DirectoryMatch
    size: Optional[int]

    @property
    def path(self) -> str:
        return self.match.path

    @property
    def modified_at(self) -> datetime.datetime:
        return self.match.modified_at

    @property
    def size_known(self) -> bool:
        return self.size is not None


class Action(Enum):
    NOTHING = "nothing"  # no matches
    LIST = "list"  # show matches only
    CONFIRM = "confirm"  # show matches and ask before deleting


# ---------------------------------------------------------------------------
# Year selection
# ---------------------------------------------------------------------------


def year_choices(current_year: int, recent_years: int = 3) -> list[str]:
    """Menu values: "all", the previous *recent_years* years (newest first), "custom" """
    years = [str(current_year - offset) for offset in range(1, recent_years + 1)]
    return [ALL_YEARS, *years, CUSTOM_YEAR]


def parse_year(text: str, current_year: int, min_year: int = MIN_YEAR) -> int:
    """Parse a year typed by the user, raising InvalidInput if it is not in [min_year, current_year]"""
    value = str(text).strip()
    try:
        year = int(value)
    except ValueError:
        raise InvalidInput(value, "please enter a valid year") from None
    if year < min_year or year > current_year:
        raise InvalidInput(value, f"year must be between {min_year} and {current_year}")
    return year


def resolve_year_bound(choice: str, current_year: int, min_year: int = MIN_YEAR) -> YearBound:
    """Map a menu choice (or a typed year) to "all" or an integer year"""
    value = str(choice).strip().lower()
    if value == ALL_YEARS:
        return ALL_YEARS
    if value == CUSTOM_YEAR:
        raise InvalidInput(value, "custom year must be entered separately")
    return parse_year(value, current_year, min_year)


# ---------------------------------------------------------------------------
# Root selection
# ---------------------------------------------------------------------------


def candidate_roots(paths: list[str]) -> list[str]:
    """Expand and keep the existing directories among *paths*, first occurrence wins"""
    seen: set[str] = set()
    roots = []
    for p in paths:
        full = expand_path(p)
        if full in seen or not os.path.isdir(full):
            continue
        seen.add(full)
        roots.append(full)
    return roots


def validate_root_input(text: str) -> str:
    """Return the expanded root path, raising InvalidInput for blank input"""
    if not text or not text.strip():
        raise InvalidInput(text or "", "please enter a directory")
    return expand_path(text)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def dedupe_matches(matches: list[DirectoryMatch]) -> list[DirectoryMatch]:
    """Drop repeated absolute paths and sort by path"""
    by_path: dict[str, DirectoryMatch] = {}
    for m in matches:
        by_path.setdefault(os.path.abspath(m.path), m)
    return [by_path[p] for p in sorted(by_path)]


def select_matches(
    request: ScanRequest,
    target_name: str = NODE_MODULES,
    timezone: Optional[datetime.tzinfo] = None,
    on_warning: Optional[Callable[[Exception], None]] = None,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> ScanResult:
    """Run the scan for *request*; a missing root yields an empty result and a warning"""

    def on_error(error: ScanIOError):
        if on_warning:
            on_warning(error)

    try:
        result = scan_for_year(
            request.root_path,
            request.year_bound,
            min_year=request.min_year,
            target_name=target_name,
            timezone=timezone,
            on_error=on_error,
            progress_callback=progress_callback,
        )
    except PathNotFound as e:
        if on_warning:
            on_warning(e)
        return ScanResult(root_path=expand_path(request.root_path))

    result.matches = dedupe_matches(result.matches)
    return result


def size_matches(
    matches: list[DirectoryMatch],
    probe: Callable[[str], Optional[int]] = directory_size,
    progress_callback: Optional[Callable[[SizedMatch], None]] = None,
) -> list[SizedMatch]:
    """Probe the size of every match in order; failures become unknown sizes"""
    sized = []
    for m in matches:
        item = SizedMatch(match=m, size=probe(m.path))
        sized.append(item)
        if progress_callback:
            progress_callback(item)
    return sized


def total_known_size(sized: list[SizedMatch]) -> int:
    return sum(s.size for s in sized if s.size is not None)


def plan_action(sized: list[SizedMatch], dry_run: bool = False) -> Action:
    if not sized:
        return Action.NOTHING
    if dry_run:
        return Action.LIST
    return Action.CONFIRM
