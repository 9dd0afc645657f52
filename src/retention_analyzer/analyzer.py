"""Core analyzer orchestrator over a project directory."""

import logging
from pathlib import Path

from retention_analyzer.config import Config
from retention_analyzer.engine import DecisionEngine, ScanAccumulator
from retention_analyzer.models import RetentionReport
from retention_analyzer.scanner.file_discovery import FileDiscovery

logger = logging.getLogger(__name__)


class RetentionAnalyzer:
    """Main analyzer orchestrator."""

    def __init__(
        self,
        project_root: Path,
        config: Config | None = None,
        apply: bool = False,
    ) -> None:
        """Initialize analyzer.

        Args:
            project_root: Root directory of project
            config: Configuration (defaults when omitted)
            apply: If True, write changed descriptors back to disk
        """
        self.project_root = Path(project_root)
        self.config = config or Config()
        self.apply = apply

        self.file_discovery = FileDiscovery(
            self.project_root,
            exclude_patterns=self.config.exclude_patterns,
            source_extensions=self.config.source_extensions,
            marker_files=self.config.marker_files,
        )

    def analyze(self) -> RetentionReport:
        """Run the scan phase, then the decision phase.

        Returns:
            Retention report with one decision per descriptor
        """
        logger.info(f"Starting retention analysis of {self.project_root}")

        files = list(self.file_discovery.iter_files())
        accumulator = ScanAccumulator(self.config)

        # 1. Scan every file; order does not matter
        for file_path in files:
            content = self._read(file_path)
            if content is None:
                continue
            accumulator.scan(self.file_discovery.relative(file_path), content)

        logger.info(
            f"Scanned {accumulator.scanned_sources} source file(s), "
            f"found {len(accumulator.boundaries)} module(s)"
        )

        # 2. Decide per descriptor against the complete catalogue
        engine = DecisionEngine(accumulator)
        engine.materialize()

        report = RetentionReport(
            project_root=str(self.project_root),
            scanned_files=accumulator.scanned_sources,
        )

        descriptors = sorted(
            (p for p in files if self.file_discovery.is_descriptor(p)),
            key=self.file_discovery.relative,
        )
        for descriptor in descriptors:
            content = self._read(descriptor)
            if content is None:
                continue

            relative = self.file_discovery.relative(descriptor)
            updated, decision = engine.visit(relative, content)
            if decision is None:
                continue

            report.decisions.append(decision)

            if updated != content:
                report.updated_descriptors[relative] = updated
                if self.apply:
                    descriptor.write_text(updated, encoding="utf-8")
                    logger.info(f"Updated {relative}")

        logger.info(
            f"Completed analysis: {len(report.retained)} module(s) retain, "
            f"{len(report.removable)} module(s) can drop the dependency"
        )
        return report

    @staticmethod
    def _read(file_path: Path) -> str | None:
        try:
            return file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            return file_path.read_text(encoding="latin-1")
        except OSError as e:
            logger.warning(f"Cannot read {file_path}: {e}")
            return None
