#!/usr/bin/env python3
"""
Auxiliary utility functions for devcleaner

Provides small formatting and path helpers shared by the scanner,
selector and console modules.
"""

import datetime
import os
import pathlib
from typing import Optional


def format_bytes(size_bytes: Optional[int]) -> str:
    """Format byte size into human-readable string

    Args:
        size_bytes: Size in bytes to format, or None when unknown

    Returns:
        Formatted string like "1.2 GiB", "345 MiB", "12 KiB", "789 B" or "N/A"
    """
    if size_bytes is None:
        return "N/A"
    if size_bytes >= 1024**3:
        return f"{size_bytes / (1024**3):.1f} GiB"
    if size_bytes >= 1024**2:
        return f"{size_bytes / (1024**2):.1f} MiB"
    if size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f} KiB"
    return f"{size_bytes} B"


def format_path_for_display(path: str, home_path: Optional[str] = None) -> str:
    """Format file path for display by replacing home directory with ~

    Args:
        path: File path to format
        home_path: Home directory path (defaults to platform home)

    Returns:
        Path with a leading home directory replaced by ~
    """
    if home_path is None:
        home_path = str(pathlib.Path.home())
    home_path = home_path.rstrip(os.sep)

    if path == home_path:
        return "~"
    if home_path and path.startswith(home_path + os.sep):
        return "~" + path[len(home_path) :]
    return path


def format_date(moment: datetime.datetime) -> str:
    """Format a modification time as YYYY-MM-DD"""
    return moment.strftime("%Y-%m-%d")


def expand_path(path: str) -> str:
    """Expand ~ and make *path* absolute without resolving symlinks"""
    return os.path.abspath(os.path.expanduser(path.strip()))
