"""Deferred per-artifact fact storage and per-module materialization."""

import logging
import threading
from collections import defaultdict

from retention_analyzer.models import Fact
from retention_analyzer.modules import ModuleResolver

logger = logging.getLogger(__name__)


class PhaseError(RuntimeError):
    """Raised when scan-phase and resolve-phase operations are interleaved."""


class FactAggregator:
    """Buffers raw facts until module boundaries are known.

    Facts are keyed by artifact path while scanning. ``materialize`` maps
    every artifact to its module exactly once, against the complete
    boundary catalogue, and builds the per-module index. Later calls are
    no-ops.
    """

    def __init__(self) -> None:
        self._facts: set[Fact] = set()
        self._lock = threading.Lock()
        self._materialized = False
        self._module_signatures: dict[str, set[str]] = {}
        self._module_files: dict[str, set[str]] = {}

    @property
    def materialized(self) -> bool:
        return self._materialized

    def record(self, path: str, signature: str) -> None:
        """Store a raw fact for an artifact path.

        Raises:
            PhaseError: If the index was already materialized
        """
        with self._lock:
            if self._materialized:
                raise PhaseError(f"Cannot record fact for {path} after materialization")
            self._facts.add(Fact(path, signature))

    def record_all(self, path: str, signatures: set[str]) -> None:
        for signature in signatures:
            self.record(path, signature)

    def raw_facts(self) -> frozenset[Fact]:
        """All facts recorded so far."""
        with self._lock:
            return frozenset(self._facts)

    def materialize(self, resolver: ModuleResolver) -> None:
        """Build the per-module index. Runs once; later calls do nothing.

        Args:
            resolver: Resolver built from the complete boundary catalogue
        """
        with self._lock:
            if self._materialized:
                return

            signatures: dict[str, set[str]] = defaultdict(set)
            files: dict[str, set[str]] = defaultdict(set)

            # Resolve each artifact once, facts for the same path share a module
            modules_by_path: dict[str, str] = {}
            for fact in self._facts:
                module_path = modules_by_path.get(fact.artifact_path)
                if module_path is None:
                    module_path = resolver.resolve(fact.artifact_path)
                    modules_by_path[fact.artifact_path] = module_path
                signatures[module_path].add(fact.signature)
                files[module_path].add(fact.artifact_path)

            self._module_signatures = dict(signatures)
            self._module_files = dict(files)
            self._materialized = True

        for module_path in sorted(self._module_signatures):
            if module_path not in resolver.boundaries:
                logger.warning(
                    f"Blocking usages resolved to module '{module_path or '(root)'}' "
                    f"which has no known descriptor: {sorted(self._module_files[module_path])}"
                )

        logger.debug(
            f"Materialized {len(self._facts)} facts into {len(self._module_signatures)} module(s)"
        )

    def signatures_for(self, module_path: str) -> set[str]:
        """Blocking signatures recorded for a module.

        Raises:
            PhaseError: If called before materialization
        """
        self._require_materialized()
        return set(self._module_signatures.get(module_path, ()))

    def files_for(self, module_path: str) -> set[str]:
        """Artifact paths contributing facts to a module.

        Raises:
            PhaseError: If called before materialization
        """
        self._require_materialized()
        return set(self._module_files.get(module_path, ()))

    def modules(self) -> list[str]:
        """Modules with at least one recorded fact."""
        self._require_materialized()
        return sorted(self._module_signatures)

    def _require_materialized(self) -> None:
        if not self._materialized:
            raise PhaseError("Fact index is not materialized yet")
