"""Module boundary catalogue and artifact-to-module resolution.

A module is identified by the directory of its descriptor (``pom.xml``),
relative to the project root, with ``""`` for the root module. Boundaries
are collected while scanning and must all be known before the first
resolution, otherwise the owning module of an artifact would depend on the
order in which files were visited.
"""

import logging
import threading
from typing import Iterable

logger = logging.getLogger(__name__)

ROOT_MODULE = ""


def normalize_path(path: str) -> str:
    """Forward slashes, no leading ``./`` and no trailing slash."""
    normalized = str(path).replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.rstrip("/")


def descriptor_module_path(descriptor_path: str) -> str:
    """Module path of a descriptor file.

    ``module-a/pom.xml`` gives ``module-a``; a root ``pom.xml`` gives ``""``.
    """
    normalized = normalize_path(descriptor_path)
    if "/" not in normalized:
        return ROOT_MODULE
    return normalized.rsplit("/", 1)[0]


class BoundaryCatalogue:
    """Append-only set of module root directories."""

    def __init__(self, boundaries: Iterable[str] = ()) -> None:
        self._boundaries: set[str] = set()
        self._lock = threading.Lock()
        for boundary in boundaries:
            self.record(boundary)

    def record(self, directory: str) -> None:
        """Record a module root directory. Idempotent."""
        with self._lock:
            self._boundaries.add(normalize_path(directory))

    def record_descriptor(self, descriptor_path: str) -> str:
        """Record the module owning a descriptor file and return its path."""
        module_path = descriptor_module_path(descriptor_path)
        self.record(module_path)
        return module_path

    def __contains__(self, directory: object) -> bool:
        return isinstance(directory, str) and normalize_path(directory) in self._boundaries

    def __len__(self) -> int:
        return len(self._boundaries)

    def snapshot(self) -> frozenset[str]:
        """Current boundaries as an immutable set."""
        with self._lock:
            return frozenset(self._boundaries)


class ModuleResolver:
    """Maps artifact paths to their owning module.

    Resolution order:

    1. the longest recorded non-root boundary that is a segment-aligned
       prefix of the path;
    2. the root module, when it is recorded;
    3. the source-root heuristic (the part of the path before the first
       source-root occurrence), for trees without a root descriptor;
    4. the root module.
    """

    def __init__(
        self,
        boundaries: Iterable[str],
        main_roots: list[str],
        test_roots: list[str],
    ) -> None:
        """Initialize resolver.

        Args:
            boundaries: Final set of module boundaries
            main_roots: Main source roots (e.g., "src/main/java")
            test_roots: Test source roots (e.g., "src/test/java")
        """
        self.boundaries = frozenset(normalize_path(b) for b in boundaries)
        self.source_roots = [
            normalize_path(root)
            for root in [*main_roots, *test_roots]
            if normalize_path(root)
        ]

    def resolve(self, path: str) -> str:
        """Resolve the module path of an artifact.

        Args:
            path: Artifact path relative to the project root

        Returns:
            Module path, ``""`` for the root module
        """
        normalized = normalize_path(path)

        best = self.longest_boundary(normalized)
        if best is not None:
            return best

        # A recorded root owns everything no nested module claims
        if ROOT_MODULE in self.boundaries:
            return ROOT_MODULE

        return self.module_by_source_root(normalized)

    def longest_boundary(self, path: str) -> str | None:
        """Longest recorded non-root boundary containing ``path``."""
        best: str | None = None
        for boundary in self.boundaries:
            if boundary == ROOT_MODULE:
                continue
            if path.startswith(boundary + "/"):
                if best is None or len(boundary) > len(best):
                    best = boundary
        return best

    def module_by_source_root(self, path: str) -> str:
        """Derive a module path from the source-root layout alone.

        ``module-a/src/main/java/com/example/Foo.java`` gives ``module-a``.
        Used when no recorded boundary contains the path.
        """
        for root in self.source_roots:
            index = path.find("/" + root + "/")
            if index > 0:
                return path[:index]
            if path.startswith(root + "/"):
                return ROOT_MODULE

        # Looser pass on the first segment of each root, e.g. "/src/"
        for root in self.source_roots:
            first = "/" + root.split("/")[0] + "/"
            index = path.find(first)
            if index > 0:
                return path[:index]

        return ROOT_MODULE
