from __future__ import annotations

import json
from datetime import datetime, timezone

from consolidation.fallback import build_fallback_report
from consolidation.models import (
    SECTION_TITLES,
    Decision,
    FallbackReport,
    GeneratedReport,
    KeyFindings,
    OptimizationInsight,
    Recommendation,
    ReportSection,
    Timeline,
)
from evaluation.evaluator import ConceptEvaluator
from insights.aggregator import SegmentInsightsAggregator
from interviews.models import ConversationExchange, InterviewsResult, InterviewTranscript
from panel.models import BrandRelationship, Concept, Persona
from report.exporter import ReportExporter


def _report() -> GeneratedReport:
    return GeneratedReport(
        concept_id="c1",
        concept_name="Humidity Shield",
        decision=Decision(
            recommendation=Recommendation.REFINE,
            confidence=64,
            reasoning="Appealing, but value must be clearer.",
            next_steps=["Test price points", "Clarify the benefit"],
        ),
        insights=[
            OptimizationInsight(
                category="CRITICAL",
                title="Price barrier",
                description="Participants hesitated on price",
                evidence=["It looks expensive"],
                action_items=["Offer a trial size"],
                impact="HIGH",
            )
        ],
        key_findings=KeyFindings(strength_points=["Scent"], weakness_points=["Price"]),
        sections=[ReportSection(title=title, content=f"{title} body") for title in SECTION_TITLES],
        timeline=Timeline(
            analysis_date=datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc),
            processing_seconds=2.25,
            based_on_interviews=4,
        ),
    )


def _interviews() -> InterviewsResult:
    concept = Concept(id="c1", name="Humidity Shield", description="Anti-frizz shampoo")
    transcript = InterviewTranscript(
        persona_id="p1",
        persona_name="Person 1",
        concept_id="c1",
        exchanges=[ConversationExchange(question="Price?", response="Too expensive for me")],
    )
    return InterviewsResult(
        concept=concept,
        personas=[Persona(id="p1", name="Person 1", age=30)],
        transcripts=[transcript],
        completed_at=datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc),
        evaluation_seconds=3.0,
    )


def test_json_round_trip_reconstructs_generated_report() -> None:
    exporter = ReportExporter()
    report = _report()

    restored = exporter.from_json(exporter.to_json(report))

    assert isinstance(restored, GeneratedReport)
    assert restored.model_dump() == report.model_dump()


def test_json_round_trip_reconstructs_fallback_report() -> None:
    exporter = ReportExporter()
    report = build_fallback_report(_interviews(), reason="service unavailable")

    restored = exporter.from_json(exporter.to_json(report))

    assert isinstance(restored, FallbackReport)
    assert restored.model_dump() == report.model_dump()


def test_json_uses_camel_case_keys_and_source_tag() -> None:
    payload = json.loads(ReportExporter().to_json(_report()))

    assert payload["source"] == "generated"
    assert payload["decision"]["nextSteps"] == ["Test price points", "Clarify the benefit"]
    assert payload["keyFindings"]["strengthPoints"] == ["Scent"]
    assert payload["timeline"]["basedOnInterviews"] == 4


def test_text_report_lists_parts_in_reading_order() -> None:
    text = ReportExporter().to_text(_report())

    markers = [
        "## Recommendation: REFINE",
        "**Confidence:** 64%",
        "1. Test price points",
        "## Key Findings",
        "### [CRITICAL] Price barrier (impact: HIGH)",
        "## Recommended Optimizations",
        "## Research Recommendations",
        *(f"## {title}" for title in SECTION_TITLES),
        "Based on 4 interviews",
    ]
    positions = [text.index(marker) for marker in markers]
    assert positions == sorted(positions)
    assert "fallback" not in text.lower()


def test_text_report_flags_fallback() -> None:
    report = build_fallback_report(_interviews(), reason="service unavailable")

    assert "Automatic fallback report: service unavailable" in ReportExporter().to_text(report)


def test_save_writes_files(tmp_path) -> None:
    exporter = ReportExporter()
    report = _report()

    json_path = exporter.save_json(report, str(tmp_path / "out" / "report.json"))
    text_path = exporter.save_text(report, str(tmp_path / "out" / "report.md"))
    interviews_path = exporter.save_interviews(_interviews(), str(tmp_path / "out" / "interviews.json"))

    restored = exporter.from_json((tmp_path / "out" / "report.json").read_text(encoding="utf-8"))
    assert restored.model_dump() == report.model_dump()
    assert text_path.endswith("report.md")
    assert json.loads((tmp_path / "out" / "interviews.json").read_text(encoding="utf-8"))["transcripts"][0][
        "persona_id"
    ] == "p1"
    assert json_path.endswith("report.json")
    assert interviews_path.endswith("interviews.json")


def test_insights_text_includes_kpi_table() -> None:
    personas = [
        Persona(id="p1", name="A", age=25, socioeconomic_tier="A", brand_relationship=BrandRelationship(is_current_user=True)),
        Persona(id="p2", name="B", age=45, socioeconomic_tier="D"),
    ]
    concept = Concept(id="c1", name="Humidity Shield", description="Anti-frizz shampoo", price_tier="medium")
    evaluations = ConceptEvaluator().evaluate_panel(concept, personas)
    insights = SegmentInsightsAggregator(personas).aggregate(concept, evaluations)

    text = ReportExporter().insights_to_text(insights)

    assert "Humidity Shield" in text
    assert "Differentiation" in text
    assert "Purchase Intention" in text
