"""File discovery for source artifacts and module descriptors."""

import fnmatch
import logging
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


class FileDiscovery:
    """Discovers files in a project, respecting exclusion patterns."""

    def __init__(
        self,
        project_root: Path,
        exclude_patterns: list[str] | None = None,
        source_extensions: tuple[str, ...] = (".java", ".kt", ".scala"),
        marker_files: frozenset[str] = frozenset({"pom.xml"}),
    ) -> None:
        """Initialize file discovery.

        Args:
            project_root: Root directory of the project
            exclude_patterns: Glob patterns to exclude (e.g., "**/target/**")
            source_extensions: Suffixes of source artifacts
            marker_files: File names designating a module boundary
        """
        self.project_root = project_root
        self.exclude_patterns = exclude_patterns or []
        self.source_extensions = source_extensions
        self.marker_files = marker_files

    def iter_files(self) -> Iterator[Path]:
        """Yield every relevant file (sources and descriptors).

        Returns:
            Iterator of absolute paths, in no particular order
        """
        for path in self.project_root.rglob("*"):
            if not path.is_file():
                continue
            if not (self.is_source(path) or self.is_descriptor(path)):
                continue
            if self._should_exclude(path):
                continue
            yield path

    def is_source(self, path: Path) -> bool:
        return path.suffix in self.source_extensions

    def is_descriptor(self, path: Path) -> bool:
        return path.name in self.marker_files

    def relative(self, path: Path) -> str:
        """Project-relative path with forward slashes."""
        try:
            return path.relative_to(self.project_root).as_posix()
        except ValueError:
            return path.as_posix()

    def _should_exclude(self, file_path: Path) -> bool:
        """Check if file should be excluded based on patterns.

        Args:
            file_path: Path to file

        Returns:
            True if file should be excluded
        """
        try:
            relative = file_path.relative_to(self.project_root)
            relative_str = relative.as_posix()
        except ValueError:
            return False

        for pattern in self.exclude_patterns:
            pattern_normalized = pattern.replace("**", "*")

            if fnmatch.fnmatch("/" + relative_str, pattern_normalized):
                return True

            # Also check each parent directory
            for parent in relative.parents:
                parent_str = parent.as_posix()
                if parent_str == ".":
                    continue
                if fnmatch.fnmatch("/" + parent_str + "/", pattern_normalized):
                    return True

        return False
