"""Two-phase retention engine.

``ScanAccumulator`` is the per-run state threaded through a traversal: it
collects module boundaries and raw facts in any order. ``DecisionEngine``
runs after scanning; it materializes the per-module index once and then
decides, per descriptor, whether the legacy dependency stays.
"""

import logging
from pathlib import PurePosixPath

from retention_analyzer.aggregator import FactAggregator, PhaseError
from retention_analyzer.config import Config
from retention_analyzer.descriptor import PomDescriptorMutator
from retention_analyzer.models import DependencyCoordinate, ModuleDecision, SourceArtifact
from retention_analyzer.modules import BoundaryCatalogue, ModuleResolver, descriptor_module_path, normalize_path
from retention_analyzer.scanner.fact_extractor import extract_facts
from retention_analyzer.scanner.source_reader import JavaSourceReader
from retention_analyzer.signatures import SignatureCatalog

logger = logging.getLogger(__name__)


class ScanAccumulator:
    """Scan-phase state for one run. Construct a fresh one per run."""

    def __init__(self, config: Config | None = None) -> None:
        """Initialize accumulator.

        Args:
            config: Configuration (defaults when omitted)
        """
        self.config = config or Config()
        self.catalog: SignatureCatalog = self.config.signature_catalog()
        self.boundaries = BoundaryCatalogue()
        self.facts = FactAggregator()
        self.main_roots = self.config.main_source_roots
        self.test_roots = self.config.test_source_roots
        self.marker_files = self.config.marker_files
        self.source_extensions = self.config.source_extensions
        self.scanned_sources = 0

    def is_descriptor(self, path: str) -> bool:
        return PurePosixPath(normalize_path(path)).name in self.marker_files

    def is_source(self, path: str) -> bool:
        return PurePosixPath(normalize_path(path)).suffix in self.source_extensions

    def scan(
        self,
        path: str,
        content: str,
        resolved_types: dict[str, str] | None = None,
    ) -> None:
        """Visit one file of the tree.

        Args:
            path: File path relative to the project root
            content: File text
            resolved_types: Optional external type attribution for the file
        """
        if self.is_descriptor(path):
            self.boundaries.record_descriptor(path)
            return

        if not self.is_source(path):
            return

        artifact = JavaSourceReader(resolved_types).read(normalize_path(path), content)
        self.scan_artifact(artifact)

    def scan_artifact(self, artifact: SourceArtifact) -> set[str]:
        """Extract and record the facts of a pre-built artifact.

        Returns:
            Blocking signatures found in the artifact
        """
        if self.facts.materialized:
            raise PhaseError(f"Cannot scan {artifact.path} after materialization")

        signatures = extract_facts(artifact, self.catalog)
        self.facts.record_all(normalize_path(artifact.path), signatures)
        self.scanned_sources += 1
        return signatures

    def record_boundary(self, directory: str) -> None:
        """Record a module root directly.

        Raises:
            PhaseError: If the fact index was already materialized
        """
        if self.facts.materialized:
            raise PhaseError(f"Cannot record boundary {directory!r} after materialization")
        self.boundaries.record(directory)

    def resolver(self) -> ModuleResolver:
        """Resolver over the boundaries recorded so far."""
        return ModuleResolver(self.boundaries.snapshot(), self.main_roots, self.test_roots)


class DecisionEngine:
    """Per-module retain/remove decisions and descriptor mutation."""

    def __init__(
        self,
        accumulator: ScanAccumulator,
        coordinates: list[DependencyCoordinate] | None = None,
        mutator: PomDescriptorMutator | None = None,
    ) -> None:
        """Initialize decision engine.

        Args:
            accumulator: Completed scan-phase state
            coordinates: Dependency entries to remove (defaults from config)
            mutator: Descriptor mutator
        """
        self.accumulator = accumulator
        self.coordinates = coordinates if coordinates is not None else accumulator.config.coordinates
        self.mutator = mutator or PomDescriptorMutator()
        self._resolver: ModuleResolver | None = None

    def materialize(self) -> ModuleResolver:
        """Freeze the catalogue and build the per-module index once.

        Returns:
            Resolver over the frozen catalogue
        """
        if self._resolver is None:
            self._resolver = self.accumulator.resolver()
            self.accumulator.facts.materialize(self._resolver)
        return self._resolver

    def resolve(self, path: str) -> str:
        """Owning module of an artifact path against the frozen catalogue."""
        return self.materialize().resolve(path)

    def decide(self, descriptor_path: str) -> ModuleDecision:
        """Decide whether a module keeps the dependency.

        Args:
            descriptor_path: Path of the module descriptor

        Returns:
            Decision for the descriptor's module
        """
        self.materialize()

        module_path = descriptor_module_path(descriptor_path)
        facts = self.accumulator.facts
        signatures = self.accumulator.catalog.strip_neutral(facts.signatures_for(module_path))

        if signatures:
            files = sorted(facts.files_for(module_path))
            logger.warning(
                f"Blocking types/annotations found in module "
                f"'{module_path or '(root)'}', keeping "
                f"{', '.join(str(c) for c in self.coordinates)}. "
                f"Types: {sorted(signatures)}, Files: {files}"
            )
            return ModuleDecision(
                module_path=module_path,
                descriptor_path=normalize_path(descriptor_path),
                retain=True,
                signatures=sorted(signatures),
                files=files,
            )

        return ModuleDecision(
            module_path=module_path,
            descriptor_path=normalize_path(descriptor_path),
            retain=False,
        )

    def apply(self, decision: ModuleDecision, content: str) -> str:
        """Apply a decision to descriptor text.

        Args:
            decision: Decision for the descriptor
            content: Descriptor text

        Returns:
            New descriptor text (unchanged when retaining)
        """
        if decision.retain:
            return content

        updated, removed = self.mutator.remove_dependencies(content, self.coordinates)
        decision.removed = removed
        if removed:
            logger.info(
                f"Removed {', '.join(str(c) for c in removed)} from {decision.descriptor_path}"
            )
        return updated

    def visit(self, path: str, content: str) -> tuple[str, ModuleDecision | None]:
        """Process one artifact of the resolution phase.

        Non-descriptor artifacts pass through unchanged.

        Returns:
            Tuple of (possibly updated content, decision or None)
        """
        if not self.accumulator.is_descriptor(path):
            return content, None

        decision = self.decide(path)
        return self.apply(decision, content), decision
