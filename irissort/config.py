"""
Configuration management for irissort.
"""

import logging
import zoneinfo
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import yaml

from .constants import PROGRAM


@dataclass(frozen=True)
class SortConfig:
    """Validated, read-only settings for one sorting run."""
    input_paths: Tuple[Path, ...]
    output_path: Path
    move_files: bool = True
    remove_duplicates: bool = False
    timezone: Optional[str] = None

    def __post_init__(self):
        if not self.input_paths:
            raise ValueError("At least one input directory is required")
        if not self.output_path:
            raise ValueError("An output directory is required")
        if self.timezone:
            try:
                zoneinfo.ZoneInfo(self.timezone)
            except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {self.timezone}") from e

    @classmethod
    def from_sources(cls, config: "Config",
                     input_paths: Optional[Sequence[str]] = None,
                     output_path: Optional[str] = None,
                     move_files: Optional[bool] = None,
                     remove_duplicates: Optional[bool] = None,
                     timezone: Optional[str] = None) -> "SortConfig":
        """Merge explicit values over the config file and last used paths."""
        inputs = (list(input_paths or []) or config.get_input_paths()
                  or config.get_last_inputs())
        output = output_path or config.get_output_path() or config.get_last_output()

        return cls(
            input_paths=tuple(Path(p).expanduser().resolve() for p in inputs),
            output_path=Path(output).expanduser().resolve() if output else None,
            move_files=config.get_move_files() if move_files is None else move_files,
            remove_duplicates=(config.get_remove_duplicates() if remove_duplicates is None
                               else remove_duplicates),
            timezone=timezone or config.get_timezone(),
        )


class Config:
    """Manages configuration file for storing user preferences."""

    def __init__(self, config_path: Optional[Path] = None):
        # Default config location: ~/.<PROGRAM>/config.yml
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / f".{PROGRAM}" / "config.yml"
        self.program_root = self.config_path.parent
        self.data = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger = logging.getLogger(PROGRAM)
            logger.warning(f"Could not load config: {e}")
            return {}

        if not isinstance(data, dict):
            logger = logging.getLogger(PROGRAM)
            logger.warning(f"Ignoring malformed config file: {self.config_path}")
            return {}
        return data

    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            self.program_root.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                yaml.safe_dump(self.data, f, default_flow_style=False)
        except OSError as e:
            logger = logging.getLogger(PROGRAM)
            logger.error(f"Could not save config: {e}")

    def get_input_paths(self) -> List[str]:
        """Get the configured input directories."""
        paths = self.data.get('input_paths') or []
        if isinstance(paths, str):
            return [paths]
        return [str(p) for p in paths]

    def get_output_path(self) -> Optional[str]:
        """Get the configured output directory."""
        return self.data.get('output_path')

    def get_move_files(self) -> bool:
        """Get the move setting (default: True)."""
        return bool(self.data.get('move_files', True))

    def get_remove_duplicates(self) -> bool:
        """Get the remove-duplicates setting (default: False)."""
        return bool(self.data.get('remove_duplicates', False))

    def get_timezone(self) -> Optional[str]:
        """Get the saved timezone setting."""
        return self.data.get('timezone')

    def get_last_inputs(self) -> List[str]:
        """Get the last used input directories."""
        return list(self.data.get('last_inputs') or [])

    def get_last_output(self) -> Optional[str]:
        """Get the last used output directory."""
        return self.data.get('last_output')

    def update_paths(self, inputs: Sequence[Path], output: Path) -> None:
        """Update and save the last used paths."""
        self.data['last_inputs'] = [str(p) for p in inputs]
        self.data['last_output'] = str(output)
        self.save_config()

    def update_timezone(self, timezone: str) -> None:
        """Update and save the timezone setting."""
        self.data['timezone'] = timezone
        self.save_config()
