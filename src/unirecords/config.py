"""Configuration loading for unirecords."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILE_NAME = "unirecords.yaml"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass
class FilesConfig:
    """Record file name per entity, relative to the data directory."""

    students: str = "students.dat"
    faculty: str = "faculty.dat"
    courses: str = "courses.dat"
    enrollments: str = "enrollments.dat"
    users: str = "users.dat"


@dataclass
class LoggingConfig:
    """Logging settings. None means "use the logging module default"."""

    dir: str | None = None
    level: str | None = None
    console: bool = False


@dataclass
class RegistryConfig:
    """unirecords configuration.

    Relative paths are resolved against ``root_path``, the directory holding
    the configuration file (or the working directory when there is none).
    """

    data_dir: str = "data"
    files: FilesConfig = field(default_factory=FilesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    root_path: Path = field(default_factory=Path)

    @classmethod
    def from_dict(cls, data: dict[str, Any], root_path: Path) -> RegistryConfig:
        """Create config from dictionary.

        Args:
            data: Configuration dictionary from YAML.
            root_path: Root directory containing the config file.

        Returns:
            Parsed configuration object.

        Raises:
            ConfigError: If a section has the wrong shape.
        """
        files_data = _section(data, "files")
        unknown = set(files_data) - set(FilesConfig.__dataclass_fields__)
        if unknown:
            raise ConfigError(f"Unknown entries in 'files': {', '.join(sorted(unknown))}")
        files = FilesConfig(**{name: str(value) for name, value in files_data.items()})

        logging_data = _section(data, "logging")
        log_dir = logging_data.get("dir")
        log_level = logging_data.get("level")
        logging_config = LoggingConfig(
            dir=str(log_dir) if log_dir is not None else None,
            level=str(log_level) if log_level is not None else None,
            console=bool(logging_data.get("console", False)),
        )

        data_dir = data.get("data_dir", "data")
        if not isinstance(data_dir, str):
            raise ConfigError(f"'data_dir' must be a string, got {type(data_dir).__name__}")

        return cls(
            data_dir=data_dir,
            files=files,
            logging=logging_config,
            root_path=root_path,
        )

    def get_data_path(self) -> Path:
        """Get absolute path to the data directory."""
        return self.root_path / self.data_dir

    def get_log_path(self) -> Path | None:
        """Get absolute path to the log directory, if one is configured."""
        if self.logging.dir is None:
            return None
        return self.root_path / self.logging.dir


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
    return section


def load_config(config_path: Path | str) -> RegistryConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to unirecords.yaml.

    Returns:
        Parsed configuration object.

    Raises:
        ConfigError: If file doesn't exist or is invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(data).__name__}")

    return RegistryConfig.from_dict(data, config_path.parent)


def find_config(start_path: Path | str | None = None) -> Path | None:
    """Find unirecords.yaml by walking up the directory tree.

    Args:
        start_path: Starting directory. Defaults to current directory.

    Returns:
        Path to the config file, or None if there is none.
    """
    current = (Path.cwd() if start_path is None else Path(start_path)).resolve()

    for directory in (current, *current.parents):
        config_path = directory / CONFIG_FILE_NAME
        if config_path.exists():
            return config_path
    return None
