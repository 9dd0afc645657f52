"""JSON output formatter."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from retention_analyzer.models import ModuleDecision, RetentionReport

logger = logging.getLogger(__name__)


class JSONReporter:
    """Generates JSON format reports."""

    def generate_report(self, report: RetentionReport, output_file: Path | None = None) -> str:
        """Generate JSON report.

        Args:
            report: Retention report
            output_file: Optional path to save report

        Returns:
            JSON string
        """
        data = {
            "version": "1.0",
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "project_root": report.project_root,
            "summary": self._generate_summary(report),
            "modules": [
                self._serialize_decision(decision)
                for decision in sorted(report.decisions, key=lambda d: d.module_path)
            ],
        }

        json_str = json.dumps(data, indent=2, default=str)

        if output_file:
            output_file.write_text(json_str, encoding="utf-8")
            logger.debug(f"Wrote JSON report to {output_file}")

        return json_str

    def _generate_summary(self, report: RetentionReport) -> dict[str, Any]:
        """Generate summary statistics."""
        return {
            "total_modules": len(report.decisions),
            "scanned_files": report.scanned_files,
            "retain": len(report.retained),
            "remove": len(report.removable),
            "changed_descriptors": sorted(report.updated_descriptors),
        }

    def _serialize_decision(self, decision: ModuleDecision) -> dict[str, Any]:
        """Serialize a single decision to dict."""
        return {
            "module": decision.module_path,
            "descriptor": decision.descriptor_path,
            "decision": "retain" if decision.retain else "remove",
            "blocking_signatures": list(decision.signatures),
            "files": list(decision.files),
            "removed": [str(c) for c in decision.removed],
        }
