from typing import List, Optional

from pydantic import BaseModel

from agri_assist.domain.models import ClassificationResult, DiagnosisResult, Severity


class DiagnosisSummary(BaseModel):
    name: str
    top_prediction: str
    confidence: float
    is_healthy: bool
    condition_name: Optional[str] = None
    subject_name: Optional[str] = None
    severity: Severity
    narrative_fragment: str
    raw_results: List[ClassificationResult] = []

    @classmethod
    def from_diagnosis(cls, name: str, diagnosis: DiagnosisResult) -> "DiagnosisSummary":
        return cls(
            name=name,
            top_prediction=diagnosis.top_prediction,
            confidence=diagnosis.confidence,
            is_healthy=diagnosis.is_healthy,
            condition_name=diagnosis.condition_name,
            subject_name=diagnosis.subject_name,
            severity=diagnosis.severity,
            narrative_fragment=diagnosis.narrative_fragment,
            raw_results=list(diagnosis.raw_results),
        )


class DiagnosisReport(BaseModel):
    narrative: str
    diagnoses: List[DiagnosisSummary]


class ChatReply(BaseModel):
    narrative: str
    diagnoses: List[DiagnosisSummary] = []
    used_fallback: bool = False


class TranscriptionResult(BaseModel):
    text: str
