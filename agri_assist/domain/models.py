from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    HEALTHY = "healthy"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

    @property
    def display(self) -> str:
        return self.value.capitalize()


class ClassificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    score: float = Field(..., ge=0.0, le=1.0)


class ParsedLabel(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: str
    condition: str


class DiagnosisResult(BaseModel):
    """Outcome of classifying one uploaded image.

    raw_results is score-descending; top_prediction and confidence mirror its
    first entry. Sentinel results for failed images have no raw_results.
    """

    model_config = ConfigDict(frozen=True)

    raw_results: List[ClassificationResult] = []
    top_prediction: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    is_healthy: bool
    condition_name: Optional[str] = None
    subject_name: Optional[str] = None
    severity: Severity
    narrative_fragment: str

    @model_validator(mode="after")
    def check_ranking(self) -> "DiagnosisResult":
        scores = [r.score for r in self.raw_results]
        if scores != sorted(scores, reverse=True):
            raise ValueError("raw_results must be sorted by descending score")
        if self.raw_results:
            top = self.raw_results[0]
            if self.top_prediction != top.label or self.confidence != top.score:
                raise ValueError("top_prediction and confidence must match the highest-scoring result")
        return self

    @property
    def is_sentinel(self) -> bool:
        return not self.raw_results

    @property
    def is_diseased(self) -> bool:
        return not self.is_healthy and self.condition_name is not None


class UploadedAsset(BaseModel):
    """A file already received by the caller and stored at a local path."""

    model_config = ConfigDict(frozen=True)

    path: str
    name: str
    mime_type: Optional[str] = None
    size_bytes: Optional[int] = Field(None, ge=0)
