"""
Risk schemas.

Two families live here:

  - the AI predictor contract (camelCase on the wire, snake_case in Python):
      POST /risk/predict                  {studentData} → RiskPredictionResponse
      POST /students/{id}/risk/predict                  → RiskPredictionResponse
  - snake_case responses for the deterministic scoring endpoints
      (risk level, subject risk, balance meter, correlations, dashboard).
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.schemas.student import Goals, RiskLevel, Streak, StudentProfile


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Predictor input
# ---------------------------------------------------------------------------

class SubjectFeature(CamelModel):
    name: str
    attendance: float = Field(ge=0, le=100)
    marks: float = Field(ge=0, le=100)
    pending_assignments: int = Field(default=0, ge=0, le=50)


class WellbeingFeature(CamelModel):
    mood: int = Field(ge=1, le=5)
    stress: int = Field(ge=1, le=5)
    sleep: int = Field(ge=1, le=5)


class StudentFeatureSummary(CamelModel):
    """Everything the predictor sees about a student. Validated before any external call."""
    name: str = Field(min_length=1, max_length=120)
    course: str = Field(max_length=120)
    semester: int = Field(ge=1, le=10)
    subjects: list[SubjectFeature] = Field(default_factory=list, max_length=30)
    overall_attendance: Optional[float] = Field(default=None, ge=0, le=100)
    average_marks: Optional[float] = Field(default=None, ge=0, le=100)
    total_pending_assignments: int = Field(default=0, ge=0, le=50)
    wellbeing: Optional[WellbeingFeature] = None


class PredictRiskRequest(CamelModel):
    student_data: StudentFeatureSummary
    student_id: Optional[str] = Field(
        default=None,
        max_length=64,
        description="When given, the prediction is recorded in the risk_predictions history.",
    )



# ---------------------------------------------------------------------------
# Predictor output
# ---------------------------------------------------------------------------

class SubjectRisk(CamelModel):
    subject: str
    risk: RiskLevel
    reason: str

    @field_validator("risk", mode="before")
    @classmethod
    def lowercase_risk(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class RiskAssessment(CamelModel):
    risk_level: RiskLevel
    explanation: str
    recommendations: list[str] = Field(default_factory=list)
    subject_risks: list[SubjectRisk] = Field(default_factory=list)

    @field_validator("risk_level", mode="before")
    @classmethod
    def lowercase_level(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class RiskPredictionResponse(RiskAssessment):
    source: str = Field(description='"ai" or "fallback".')
    fallback_reason: Optional[str] = Field(
        default=None,
        description="Machine-readable reason the rule-based assessment was used.",
    )
    model: Optional[str] = None


# ---------------------------------------------------------------------------
# Deterministic scoring responses
# ---------------------------------------------------------------------------

class RiskLevelResponse(BaseModel):
    risk_level: RiskLevel
    score: int
    message: str


class SubjectRiskItem(BaseModel):
    id: str
    name: str
    code: str
    attendance: float
    internal_marks: float
    assignments_done: int
    total_assignments: int
    risk: RiskLevel


class SubjectRiskResponse(BaseModel):
    subjects: list[SubjectRiskItem]


class BalanceBreakdownOut(BaseModel):
    attendance: float
    stress: float
    sleep: float
    engagement: float


class BalanceMeterResponse(BaseModel):
    score: int
    status: str
    breakdown: BalanceBreakdownOut


class InsightOut(BaseModel):
    text: str
    positive: bool


class CorrelationResponse(BaseModel):
    mood_attendance: float
    sleep_attendance: float
    stress_marks: float
    sample_size: int
    dates: list[date]
    insights: list[InsightOut]


class DashboardResponse(BaseModel):
    profile: StudentProfile
    latest_attendance: Optional[float]
    latest_marks: Optional[float]
    risk: RiskLevelResponse
    subjects: list[SubjectRiskItem]
    balance: BalanceMeterResponse
    correlations: CorrelationResponse
    streaks: list[Streak]
    goals: Goals
    pending_assignments: int
