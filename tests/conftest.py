from __future__ import annotations

import datetime
import os
from pathlib import Path

import pytest

UTC = datetime.timezone.utc


def make_dir(path: Path, modified: datetime.datetime | None = None) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    if modified is not None:
        set_mtime(path, modified)
    return path


def set_mtime(path: Path, modified: datetime.datetime) -> None:
    ts = modified.timestamp()
    os.utime(path, (ts, ts))


def write_file(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture
def utc() -> datetime.tzinfo:
    return UTC
