from typing import Iterable

from agri_assist.domain.labels import parse_label
from agri_assist.domain.models import ClassificationResult, DiagnosisResult, Severity
from agri_assist.domain.rules import classify_severity, is_healthy_condition


def build_diagnosis(results: Iterable[ClassificationResult]) -> DiagnosisResult:
    """Turn raw classifier output into a DiagnosisResult.

    Results are re-sorted by descending score regardless of the order the
    remote model used. Raises ValueError when there is nothing to diagnose.
    """
    ranked = sorted(results, key=lambda r: r.score, reverse=True)
    if not ranked:
        raise ValueError("cannot build a diagnosis from empty classification results")

    top = ranked[0]
    parsed = parse_label(top.label)
    healthy = is_healthy_condition(parsed.condition)
    percent = f"{top.score * 100:.1f}%"

    if healthy:
        fragment = f"The {parsed.subject} plant appears healthy ({percent} confidence)."
    else:
        fragment = f"Detected {parsed.condition} on {parsed.subject} with {percent} confidence."

    return DiagnosisResult(
        raw_results=ranked,
        top_prediction=top.label,
        confidence=top.score,
        is_healthy=healthy,
        condition_name=None if healthy else parsed.condition,
        subject_name=parsed.subject,
        severity=classify_severity(parsed.condition, top.score),
        narrative_fragment=fragment,
    )


def failed_diagnosis(asset_name: str, reason: str = "Could not analyse image") -> DiagnosisResult:
    """Sentinel standing in for an image whose pipeline failed."""
    return DiagnosisResult(
        raw_results=[],
        top_prediction="Error",
        confidence=0.0,
        is_healthy=False,
        condition_name=None,
        subject_name=None,
        severity=Severity.MILD,
        narrative_fragment=f"{reason}: {asset_name}",
    )
