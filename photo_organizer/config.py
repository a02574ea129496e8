"""Configuration management for photo organization."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .errors import ConfigError
from .models import DuplicateHandling, OperationType
from .utils import DEFAULT_EXTENSIONS, normalize_extensions

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "{Year}/{Month}"


@dataclass(frozen=True)
class PhotoManagerConfig:
    """Settings for a single organization run, fixed once the run starts."""
    source_folder: str
    destination_folder: str
    organization_pattern: str = DEFAULT_PATTERN
    operation_type: OperationType = OperationType.COPY
    handle_duplicates: DuplicateHandling = DuplicateHandling.SKIP
    use_location: bool = False
    file_extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    preserve_original_date: bool = True
    parallel_processing: bool = True
    max_degree_of_parallelism: Optional[int] = None

    @property
    def scan_workers(self) -> int:
        """Number of scanner worker threads these settings allow."""
        if not self.parallel_processing:
            return 1
        return self.max_degree_of_parallelism or os.cpu_count() or 1


class Config:
    """Manages configuration for photo organization from YAML files."""

    SEARCH_PATHS = [
        Path("photo_organizer.local.yml"),
        Path("photo_organizer.yml"),
        Path("~/.config/photo_organizer/config.yml"),
    ]

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. If None, searches the standard
                locations and falls back to built-in defaults.

        Raises:
            FileNotFoundError: If config_path is given but does not exist
        """
        if config_path is not None and not Path(config_path).exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        self.config_path = config_path or self._find_config_file()
        self.config: Dict[str, Any] = {}
        if self.config_path:
            self._load_config()

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in standard locations."""
        for path in self.SEARCH_PATHS:
            config_file = path.expanduser()
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return str(config_file.resolve())

        logger.debug("No configuration file found, using defaults")
        return None

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r') as f:
                self.config = yaml.safe_load(f) or {}
            logger.info(f"Loaded configuration from {self.config_path}")
        except Exception as e:
            logger.error(f"Failed to load config from {self.config_path}: {e}")
            raise

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path like 'photo_organizer.pattern'
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def get_destination_folder(self) -> Optional[str]:
        return self.get('photo_organizer.destination_folder')

    def get_pattern(self) -> str:
        return self.get('photo_organizer.pattern', DEFAULT_PATTERN)

    def get_operation_type(self) -> OperationType:
        return OperationType.parse(self.get('photo_organizer.operation', 'copy'))

    def get_duplicate_handling(self) -> DuplicateHandling:
        return DuplicateHandling.parse(self.get('photo_organizer.duplicates', 'skip'))

    def get_supported_extensions(self) -> Tuple[str, ...]:
        """Get supported file extensions, normalized to '.ext' form."""
        extensions = self.get('photo_organizer.extensions')
        if not extensions:
            return DEFAULT_EXTENSIONS
        return normalize_extensions(extensions)

    def is_parallel(self) -> bool:
        return bool(self.get('photo_organizer.parallel_processing', True))

    def get_parallel_jobs(self) -> Optional[int]:
        """Get number of scanner threads; None means one per CPU."""
        return self.get('photo_organizer.parallel_jobs')

    def get_min_free_space_gb(self) -> float:
        """Get free space to keep on the destination, in GB."""
        return self.get('photo_organizer.min_free_space_gb', 1)

    def get_log_level(self) -> str:
        """Get logging level."""
        return self.get('logging.level', 'INFO')

    def get_log_dir(self) -> Optional[Path]:
        log_dir = self.get('logging.log_dir')
        return Path(log_dir).expanduser() if log_dir else None

    def validate_config(self) -> List[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of validation error messages
        """
        errors = []

        pattern = self.get_pattern()
        if not isinstance(pattern, str) or not pattern.strip():
            errors.append("Organization pattern must be a non-empty string")

        for getter in (self.get_operation_type, self.get_duplicate_handling):
            try:
                getter()
            except ConfigError as e:
                errors.append(str(e))

        extensions = self.get('photo_organizer.extensions')
        if extensions is not None and not isinstance(extensions, list):
            errors.append("Extensions must be a list")

        parallel_jobs = self.get_parallel_jobs()
        if parallel_jobs is not None:
            if not isinstance(parallel_jobs, int) or parallel_jobs < 1 or parallel_jobs > 64:
                errors.append(f"Invalid parallel_jobs value: {parallel_jobs} (must be 1-64)")

        min_free = self.get_min_free_space_gb()
        if not isinstance(min_free, (int, float)) or min_free < 0:
            errors.append(f"Invalid min_free_space_gb value: {min_free}")

        return errors

    def build_run_config(self, source_folder: str, destination_folder: Optional[str] = None,
                         **overrides: Any) -> PhotoManagerConfig:
        """
        Build the settings snapshot for one run.

        Args:
            source_folder: Folder to scan
            destination_folder: Folder to organize into (config value if None)
            **overrides: PhotoManagerConfig fields that win over the file;
                None values are ignored

        Returns:
            Immutable run configuration
        """
        destination_folder = destination_folder or self.get_destination_folder()
        if not destination_folder:
            raise ConfigError("No destination folder given or configured")

        values: Dict[str, Any] = {
            'organization_pattern': self.get_pattern(),
            'operation_type': self.get_operation_type(),
            'handle_duplicates': self.get_duplicate_handling(),
            'use_location': bool(self.get('photo_organizer.use_location', False)),
            'file_extensions': self.get_supported_extensions(),
            'parallel_processing': self.is_parallel(),
            'max_degree_of_parallelism': self.get_parallel_jobs(),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        return PhotoManagerConfig(
            source_folder=str(source_folder),
            destination_folder=str(destination_folder),
            **values,
        )

    def __str__(self) -> str:
        """String representation of configuration."""
        return f"Config(path={self.config_path})"
