from typing import List, Sequence, Tuple

from agri_assist.domain.labels import display_name, parse_label
from agri_assist.domain.models import DiagnosisResult, Severity
from agri_assist.domain.rules import recommend_treatment


NO_DIAGNOSES_MESSAGE = "I wasn't able to analyse any images. Please try uploading clearer crop photos."

ANALYSIS_HEADER = "## 🌿 Crop Health Analysis\n"
ADVISORY_HEADER = "---\n## 💊 Recommended Actions\n"
ADVISORY_DISCLAIMER = (
    "> ⚠️ *These recommendations are AI-generated. "
    "Please consult a local agronomist before applying treatments.*"
)

SEVERITY_ICONS = {
    Severity.HEALTHY: "🟢",
    Severity.MILD: "🟡",
    Severity.MODERATE: "🟠",
    Severity.SEVERE: "🔴",
}

MAX_ALTERNATES = 3


def _percent(score: float) -> str:
    return f"{score * 100:.1f}%"


def _diagnosis_section(diagnosis: DiagnosisResult, label: str) -> List[str]:
    lines: List[str] = []

    if diagnosis.is_sentinel:
        lines.append(f"{label}⚠️ {diagnosis.narrative_fragment}")
    elif diagnosis.is_healthy:
        lines.append(f"{label}✅ **Healthy Plant Detected**")
        lines.append(
            f"Your **{diagnosis.subject_name}** looks healthy with "
            f"**{_percent(diagnosis.confidence)}** confidence. No disease signs found."
        )
    else:
        icon = SEVERITY_ICONS[diagnosis.severity]
        lines.append(f"{label}{icon} **{diagnosis.condition_name}**")
        lines.append(f"- **Plant:** {diagnosis.subject_name}")
        lines.append(f"- **Condition:** {diagnosis.condition_name}")
        lines.append(f"- **Confidence:** {_percent(diagnosis.confidence)}")
        lines.append(f"- **Severity:** {diagnosis.severity.display}")

    alternates = diagnosis.raw_results[1:1 + MAX_ALTERNATES]
    if alternates:
        names = ", ".join(
            f"{display_name(parse_label(alt.label))} ({_percent(alt.score)})" for alt in alternates
        )
        lines.append(f"\n*Other possibilities:* {names}")

    lines.append("")
    return lines


def _advisory_section(diagnoses: Sequence[DiagnosisResult]) -> List[str]:
    seen: List[Tuple[str, str]] = []
    for d in diagnoses:
        key = (d.condition_name or "", d.subject_name or "")
        if d.is_diseased and key not in seen:
            seen.append(key)

    if not seen:
        return []

    lines = [ADVISORY_HEADER]
    for condition, subject in seen:
        lines.append(f"**For {condition} on {subject}:**")
        lines.extend(f"• {action}" for action in recommend_treatment(condition))
        lines.append("")
    lines.append(ADVISORY_DISCLAIMER)
    return lines


def build_diagnosis_narrative(diagnoses: Sequence[DiagnosisResult], user_context: str = "") -> str:
    """Compose the farmer-facing report for one or more image diagnoses.

    Sections follow the input order and are numbered only when there is more than
    one image. A single advisory section covers every distinct diseased result.
    """
    if not diagnoses:
        return NO_DIAGNOSES_MESSAGE

    lines: List[str] = [ANALYSIS_HEADER]
    numbered = len(diagnoses) > 1

    for index, diagnosis in enumerate(diagnoses, 1):
        label = f"**Image {index}:** " if numbered else ""
        lines.extend(_diagnosis_section(diagnosis, label))

    lines.extend(_advisory_section(diagnoses))

    if user_context and user_context.strip():
        lines.append(
            f'\n---\n*Regarding your query: "{user_context}" — '
            "the analysis above addresses the visual symptoms in your uploaded images.*"
        )

    return "\n".join(lines)
