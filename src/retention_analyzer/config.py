"""Configuration management for Dependency Retention Analyzer."""

import logging
from pathlib import Path
from typing import Any

import toml

from retention_analyzer.models import DependencyCoordinate
from retention_analyzer.signatures import SignatureCatalog

logger = logging.getLogger(__name__)

DEFAULT_MAIN_SOURCE_ROOTS = ["src/main/java", "src/main/kotlin"]
DEFAULT_TEST_SOURCE_ROOTS = ["src/test/java", "src/test/kotlin"]

# Name of the project-local configuration file
PROJECT_CONFIG_FILE = ".retention.toml"


class Config:
    """Application configuration."""

    def __init__(self, config_file: Path | None = None) -> None:
        """Initialize configuration.

        Args:
            config_file: Optional path to configuration file
        """
        self.config_file = config_file
        self._config: dict[str, Any] = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file or defaults."""
        config: dict[str, Any] = self._get_defaults()

        if self.config_file and self.config_file.exists():
            try:
                file_config = toml.load(self.config_file)
                _deep_update(config, file_config)
                logger.debug(f"Loaded config from {self.config_file}")
            except toml.TomlDecodeError as e:
                logger.warning(f"Invalid TOML in config file {self.config_file}: {e}")
            except OSError as e:
                logger.warning(f"Error loading config file {self.config_file}: {e}")

        return config

    @staticmethod
    def _get_defaults() -> dict[str, Any]:
        """Get default configuration values."""
        return {
            "sources": {
                "main_roots": list(DEFAULT_MAIN_SOURCE_ROOTS),
                "test_roots": list(DEFAULT_TEST_SOURCE_ROOTS),
                "extensions": [".java", ".kt", ".scala"],
            },
            "modules": {
                "marker_files": ["pom.xml"],
            },
            "analysis": {
                "exclude_patterns": [
                    "**/target/**",
                    "**/node_modules/**",
                    "**/.git/**",
                    "**/.idea/**",
                ],
            },
            "dependency": {
                "coordinates": [
                    "jakarta.ejb:jakarta.ejb-api",
                    "javax.ejb:javax.ejb-api",
                ],
            },
            "signatures": {
                "extra_blocking_types": [],
                "extra_blocking_annotations": [],
                "extra_neutral_shims": [],
            },
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "sources.main_roots")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value: Any = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def main_source_roots(self) -> list[str]:
        """Get main source roots relative to a module directory."""
        return _as_list(self.get("sources.main_roots"), DEFAULT_MAIN_SOURCE_ROOTS)

    @property
    def test_source_roots(self) -> list[str]:
        """Get test source roots relative to a module directory."""
        return _as_list(self.get("sources.test_roots"), DEFAULT_TEST_SOURCE_ROOTS)

    @property
    def source_extensions(self) -> tuple[str, ...]:
        """Get file extensions treated as source artifacts."""
        return tuple(self.get("sources.extensions", [".java"]))

    @property
    def marker_files(self) -> frozenset[str]:
        """Get file names that designate a module boundary."""
        return frozenset(self.get("modules.marker_files", ["pom.xml"]))

    @property
    def exclude_patterns(self) -> list[str]:
        """Get file exclusion patterns."""
        return self.get("analysis.exclude_patterns", [])

    @property
    def coordinates(self) -> list[DependencyCoordinate]:
        """Get the dependency coordinates to remove when safe."""
        return [
            DependencyCoordinate.parse(value)
            for value in self.get("dependency.coordinates", [])
        ]

    def signature_catalog(self) -> SignatureCatalog:
        """Build the signature catalog including configured extras."""
        return SignatureCatalog.with_extras(
            types=self.get("signatures.extra_blocking_types", []),
            annotations=self.get("signatures.extra_blocking_annotations", []),
            neutral_shims=self.get("signatures.extra_neutral_shims", []),
        )

    def override_source_roots(
        self,
        main_roots: str | None = None,
        test_roots: str | None = None,
    ) -> None:
        """Override source roots from comma-separated option values."""
        self._config["sources"]["main_roots"] = parse_source_roots(
            main_roots, self.main_source_roots
        )
        self._config["sources"]["test_roots"] = parse_source_roots(
            test_roots, self.test_source_roots
        )


def parse_source_roots(value: str | None, defaults: list[str]) -> list[str]:
    """Parse a comma-separated list of source roots.

    Args:
        value: Option value such as "src/main/java,src/main/kotlin"
        defaults: Roots to use when the value is empty

    Returns:
        List of source roots
    """
    if value is None or not value.strip():
        return list(defaults)

    roots = [root.strip() for root in value.split(",") if root.strip()]
    return roots or list(defaults)


def _as_list(value: Any, defaults: list[str]) -> list[str]:
    if isinstance(value, str):
        return parse_source_roots(value, defaults)
    if not value:
        return list(defaults)
    return [str(v) for v in value]


def _deep_update(base: dict[str, Any], overrides: dict[str, Any]) -> None:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_update(base[key], value)
        else:
            base[key] = value


def find_project_config(project_root: Path) -> Path | None:
    """Locate a project-local configuration file.

    Args:
        project_root: Root directory of the project

    Returns:
        Path to the configuration file or None
    """
    candidate = project_root / PROJECT_CONFIG_FILE
    return candidate if candidate.is_file() else None

