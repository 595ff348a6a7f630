from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import TypeAdapter

from consolidation.models import ConsolidatedReport
from evaluation.models import METRIC_LABELS
from insights.models import ConceptInsights
from interviews.models import InterviewsResult

SEGMENT_COLUMNS = ("higher_tier", "lower_tier", "brand_users", "non_users")

_REPORT_ADAPTER: TypeAdapter = TypeAdapter(ConsolidatedReport)


class ReportExporter:
    """JSON and text projections of pipeline results. Neither format feeds back into a run."""

    def __init__(self):
        templates_dir = Path(__file__).resolve().parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    # ------------------------------------------------------------------
    # Consolidated report
    # ------------------------------------------------------------------

    def to_json(self, report: ConsolidatedReport) -> str:
        return _REPORT_ADAPTER.dump_json(report, by_alias=True, indent=2).decode("utf-8")

    def from_json(self, payload: str | bytes) -> ConsolidatedReport:
        return _REPORT_ADAPTER.validate_json(payload)

    def to_text(self, report: ConsolidatedReport) -> str:
        optimization = report.target_optimization
        research = report.research_recommendations
        template = self.env.get_template("report.md.j2")
        return template.render(
            report=report,
            optimization_rows=[
                ("Messaging", optimization.messaging),
                ("Positioning", optimization.positioning),
                ("Features", optimization.features),
                ("Pricing", optimization.pricing),
            ],
            research_rows=[
                ("Must validate", research.must_validate),
                ("Priority segments", research.segments),
                ("Methodology", research.methodology),
            ],
        )

    def save_json(self, report: ConsolidatedReport, output_path: str) -> str:
        return self._write(output_path, self.to_json(report))

    def save_text(self, report: ConsolidatedReport, output_path: str) -> str:
        return self._write(output_path, self.to_text(report))

    # ------------------------------------------------------------------
    # Phase 1 and KPI insights
    # ------------------------------------------------------------------

    def interviews_to_json(self, interviews: InterviewsResult) -> str:
        return interviews.model_dump_json(indent=2)

    def save_interviews(self, interviews: InterviewsResult, output_path: str) -> str:
        return self._write(output_path, self.interviews_to_json(interviews))

    def insights_to_text(self, insights: ConceptInsights) -> str:
        template = self.env.get_template("insights.md.j2")
        return template.render(insights=insights, labels=METRIC_LABELS, segment_names=SEGMENT_COLUMNS)

    @staticmethod
    def _write(output_path: str, content: str) -> str:
        target = Path(output_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return str(target)
