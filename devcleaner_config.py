#!/usr/bin/env python3
"""
Configuration for devcleaner

Read-only TOML configuration layered over built-in defaults: first the
devcleaner.toml shipped next to this module, then an optional file given
on the command line. Nothing is ever written back.
"""

import pathlib
import tomllib
from dataclasses import dataclass, field
from typing import Any, Optional

from cleaner_errors import ConfigError
from file_operations import SizeMode
from node_scanner import MIN_YEAR, NODE_MODULES

DEFAULT_CONFIG_FILE = pathlib.Path(__file__).parent / "devcleaner.toml"

DEFAULT_CANDIDATE_ROOTS = [
    "~/Developer",
    "~/Projects",
    "~/projects",
    "~/Code",
    "~/code",
    "~/dev",
    "~/src",
    "~/workspace",
    "~/repos",
]


@dataclass
class CleanerConfig:
    """Settings for a devcleaner run"""

    target_name: str = NODE_MODULES
    min_year: int = MIN_YEAR
    recent_years: int = 3
    size_mode: SizeMode = SizeMode.DISK_USAGE
    default_root: str = "~/Developer"
    candidate_roots: list[str] = field(default_factory=lambda: list(DEFAULT_CANDIDATE_ROOTS))

    def apply(self, data: dict, source: str = "<config>"):
        """Overlay values from a parsed TOML document"""
        scan = _table(data, "scan", source)
        size = _table(data, "size", source)
        roots = _table(data, "roots", source)

        if "target_name" in scan:
            self.target_name = _typed(scan, "target_name", str, source)
        if "min_year" in scan:
            self.min_year = _typed(scan, "min_year", int, source)
        if "recent_years" in scan:
            self.recent_years = _typed(scan, "recent_years", int, source)
        if "mode" in size:
            mode = _typed(size, "mode", str, source)
            try:
                self.size_mode = SizeMode(mode)
            except ValueError:
                raise ConfigError(source, f"unknown size mode '{mode}'") from None
        if "default" in roots:
            self.default_root = _typed(roots, "default", str, source)
        if "candidates" in roots:
            candidates = _typed(roots, "candidates", list, source)
            if not all(isinstance(c, str) for c in candidates):
                raise ConfigError(source, "roots.candidates must be a list of strings")
            self.candidate_roots = candidates

        if not self.target_name:
            raise ConfigError(source, "scan.target_name must not be empty")
        if self.recent_years < 0:
            raise ConfigError(source, "scan.recent_years must not be negative")

    def to_display(self) -> dict[str, Any]:
        """Flatten settings for ConsoleUI.show_configuration"""
        return {
            "Target": self.target_name,
            "Earliest year": self.min_year,
            "Size mode": self.size_mode.value,
        }


def _table(data: dict, name: str, source: str) -> dict:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(source, f"[{name}] must be a table")
    return value


def _typed(table: dict, key: str, expected: type, source: str) -> Any:
    value = table[key]
    # bool is an int subclass; reject it for numeric settings
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ConfigError(source, f"'{key}' must be of type {expected.__name__}")
    return value


class ConfigManager:
    """Loads layered configuration files"""

    def __init__(self, config_file: Optional[pathlib.Path] = None, defaults_file: pathlib.Path = DEFAULT_CONFIG_FILE):
        """Initialize configuration manager

        Args:
            config_file: Optional user configuration applied last
            defaults_file: Shipped defaults, skipped if missing
        """
        self.config_file = config_file
        self.defaults_file = defaults_file

    def _read(self, path: pathlib.Path) -> dict:
        try:
            with path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigError(str(path), e.strerror or str(e)) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(str(path), str(e)) from e

    def load(self) -> CleanerConfig:
        """Load configuration from defaults and the optional user file"""
        config = CleanerConfig()
        if self.defaults_file and self.defaults_file.is_file():
            config.apply(self._read(self.defaults_file), str(self.defaults_file))
        if self.config_file is not None:
            config.apply(self._read(self.config_file), str(self.config_file))
        return config
