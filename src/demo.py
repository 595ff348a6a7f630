from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

DATA_DIR = ROOT.parent / "data"

from interviews.llm_client import PROVIDERS, LLMClient, MockLLMClient
from interviews.progress import ProgressState
from panel.catalog import find_concept, load_concepts, load_personas
from pipeline.config import PipelineSettings
from pipeline.errors import ConceptLabError
from pipeline.logging_setup import configure_logging
from pipeline.runner import TwoPhaseEvaluation, score_concepts
from report.exporter import ReportExporter


def print_progress(state: ProgressState) -> None:
    remaining = f", ~{state.remaining_seconds:.0f}s left" if state.remaining_seconds is not None else ""
    print(f"  [{state.phase.value} {state.step}/{state.total}] {state.action} ({state.elapsed_seconds:.1f}s{remaining})")


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Score a concept against a persona panel, run synthetic interviews and write a decision report."
    )
    parser.add_argument("--concept-id", required=True, help="Identifier of the concept to evaluate")
    parser.add_argument("--panel", default=str(DATA_DIR / "panel.json"), help="Persona panel JSON file")
    parser.add_argument("--concepts", default=str(DATA_DIR / "concepts.json"), help="Concept library JSON file")
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock LLM (no API calls, deterministic output)",
    )
    parser.add_argument(
        "--provider",
        default=None,
        choices=list(PROVIDERS),
        help="LLM provider (default: CONCEPT_LAB_PROVIDER or groq)",
    )
    parser.add_argument("--model", default=None, help="Override model ID for the provider")
    parser.add_argument("--output-dir", default="output", help="Directory for the JSON and text exports")
    parser.add_argument(
        "--pause",
        type=float,
        default=None,
        help="Seconds to wait between interviews (default: CONCEPT_LAB_INTERVIEW_PAUSE_SECONDS or 1.0)",
    )
    args = parser.parse_args()

    settings = PipelineSettings.from_env()
    overrides = {
        key: value
        for key, value in {"provider": args.provider, "model": args.model, "interview_pause_seconds": args.pause}.items()
        if value is not None
    }
    if args.mock:
        overrides.update(interview_pause_seconds=0.0, phase_pause_seconds=0.0)
    settings = settings.model_copy(update=overrides)
    configure_logging(settings.log_level)

    try:
        personas = load_personas(args.panel)
        concepts = load_concepts(args.concepts)
        concept = find_concept(concepts, args.concept_id)

        if args.mock:
            llm = MockLLMClient()
            print("Using mock LLM (no API calls)")
        else:
            llm = LLMClient(provider=settings.provider, model=settings.model)
            print(f"Using {settings.provider} / {llm.model}")

        print(f"\n{'='*60}")
        print(f"  Concept Evaluation: {concept.name}")
        print(f"  Panel: {len(personas)} personas | Library: {len(concepts)} concepts")
        print(f"{'='*60}\n")

        exporter = ReportExporter()

        print("Scoring path: evaluating every concept against the panel...")
        ranked = score_concepts(concepts, personas)
        insights = next(item for item in ranked if item.concept_id == concept.id)
        print(exporter.insights_to_text(insights))

        print("Two-phase path: interviews, then consolidation...")
        pipeline = TwoPhaseEvaluation(llm, settings=settings, on_progress=print_progress)
        async with llm:
            result = await pipeline.run_complete(concept, personas)
    except (ConceptLabError, ValueError) as exc:
        print(f"\nERROR: {exc}", file=sys.stderr)
        return 1

    output_dir = Path(args.output_dir)
    json_path = exporter.save_json(result.report, str(output_dir / f"{concept.id}_report.json"))
    text_path = exporter.save_text(result.report, str(output_dir / f"{concept.id}_report.md"))
    interviews_path = exporter.save_interviews(result.interviews, str(output_dir / f"{concept.id}_interviews.json"))

    report = result.report
    print(f"\n{'='*60}")
    print("  COMPLETE")
    print(f"  Recommendation: {report.decision.recommendation.value} ({report.decision.confidence}% confidence)")
    if report.is_fallback:
        print(f"  Fallback report: {report.fallback_reason}")
    print(f"  KPI overall score: {insights.overall_performance.score:.1f} (rank #{insights.overall_performance.ranking})")
    print(f"  Report JSON: {Path(json_path).resolve()}")
    print(f"  Report text: {Path(text_path).resolve()}")
    print(f"  Interviews: {Path(interviews_path).resolve()}")
    print(f"{'='*60}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
