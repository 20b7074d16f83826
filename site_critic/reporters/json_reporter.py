"""JSON exporter for assessments and improvement sessions.

The key names written here are the stable reporting interface that
dashboards and CI gates parse.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..models import FinalAssessment
from ..session import ImprovementSession

REPORT_SCHEMA_VERSION = "1.0"


@dataclass
class JSONReportConfig:
    """Configuration for JSON output."""

    indent: int = 2
    include_evaluations: bool = True  # Per-evaluator scores and raw issues


class JSONReporter:
    """Exports a FinalAssessment or ImprovementSession as JSON."""

    def __init__(self, config: JSONReportConfig | None = None):
        self.config = config or JSONReportConfig()

    def _trim(self, assessment: dict[str, Any]) -> dict[str, Any]:
        if not self.config.include_evaluations:
            assessment.pop("evaluations", None)
        return assessment

    def build(self, result: FinalAssessment | ImprovementSession) -> dict[str, Any]:
        """Build the report document.

        Args:
            result: A single assessment or a closed session.

        Returns:
            Report as a JSON-serializable dictionary.
        """
        if isinstance(result, ImprovementSession):
            document = result.to_dict()
            for key in ("initial_assessment", "final_assessment"):
                if document[key] is not None:
                    document[key] = self._trim(document[key])
            document["report_type"] = "improvement_session"
        else:
            document = self._trim(result.to_dict())
            document["report_type"] = "assessment"
        document["schema_version"] = REPORT_SCHEMA_VERSION
        return document

    def export(
        self,
        result: FinalAssessment | ImprovementSession,
        output_path: Path | None = None,
    ) -> dict[str, Any]:
        """Build the report and optionally write it to a file.

        Args:
            result: Assessment or session to export.
            output_path: Optional path to write the JSON file.

        Returns:
            Report document as dictionary.
        """
        document = self.build(result)
        if output_path:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=self.config.indent)
        return document

    def export_json(self, result: FinalAssessment | ImprovementSession) -> str:
        """Export the report as a JSON string."""
        return json.dumps(self.build(result), indent=self.config.indent)
