"""
AI risk predictor with a deterministic fallback.

predict(summary)
  1. no gateway key configured              → fallback (not_configured)
  2. POST chat completion to the AI gateway
       timeout                              → fallback (timeout)
       connection / transport error         → fallback (network_error)
       429 / 402 / 401|403 / other non-2xx  → fallback (rate_limited,
                                               quota_exhausted,
                                               gateway_unauthorized,
                                               upstream_error)
  3. take the first "{" .. last "}" span of the reply and validate it
       unparsable or schema mismatch        → fallback (parse_error)

The predictor never raises for gateway problems; the caller always gets an
assessment and can tell AI output from the rule-based one by `source`.

The fallback thresholds (attendance 60/75, marks 40/60, pending 2/5) are a
separate policy from the dashboard risk engine and are kept that way.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import httpx

from app.core.config import settings
from app.core.numeric import round_half_up
from app.schemas.analytics import RiskPredictionRow
from app.schemas.risk import (
    RiskAssessment,
    RiskPredictionResponse,
    StudentFeatureSummary,
    SubjectFeature,
    SubjectRisk,
    WellbeingFeature,
)
from app.schemas.student import RiskLevel, StudentData

logger = logging.getLogger(__name__)

FALLBACK_MODEL_VERSION = "rule-based-v1"
MAX_PENDING = 50

SYSTEM_PROMPT = """You are an AI student risk assessment system for GGCT (Government Girls College of Technology).
Analyze the student's academic data and predict their risk level.

Risk Level Criteria:
- LOW RISK: Attendance >= 75%, Average marks >= 60%, Pending assignments <= 2
- MEDIUM RISK: Attendance 60-74%, Average marks 40-59%, OR Pending assignments 3-5
- HIGH RISK: Attendance < 60%, Average marks < 40%, OR Pending assignments > 5

You must respond with ONLY a valid JSON object in this exact format:
{
  "riskLevel": "low" | "medium" | "high",
  "explanation": "Brief explanation of the risk assessment",
  "recommendations": ["recommendation1", "recommendation2"],
  "subjectRisks": [{"subject": "subject name", "risk": "low|medium|high", "reason": "why"}]
}"""

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class FallbackReason:
    NOT_CONFIGURED       = "not_configured"
    TIMEOUT              = "timeout"
    NETWORK_ERROR        = "network_error"
    RATE_LIMITED         = "rate_limited"
    QUOTA_EXHAUSTED      = "quota_exhausted"
    GATEWAY_UNAUTHORIZED = "gateway_unauthorized"
    UPSTREAM_ERROR       = "upstream_error"
    PARSE_ERROR          = "parse_error"


_STATUS_REASONS = {
    429: FallbackReason.RATE_LIMITED,
    402: FallbackReason.QUOTA_EXHAUSTED,
    401: FallbackReason.GATEWAY_UNAUTHORIZED,
    403: FallbackReason.GATEWAY_UNAUTHORIZED,
}


class GatewayError(Exception):
    def __init__(self, reason: str, message: str):
        self.reason = reason
        super().__init__(message)


@dataclass
class PredictionResult:
    assessment: RiskAssessment
    source: str
    fallback_reason: Optional[str]
    model_version: str

    def to_response(self) -> RiskPredictionResponse:
        return RiskPredictionResponse(
            **self.assessment.model_dump(),
            source=self.source,
            fallback_reason=self.fallback_reason,
            model=self.model_version,
        )


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------

def _fmt(value) -> str:
    if value is None:
        return "Not available"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_user_prompt(summary: StudentFeatureSummary) -> str:
    subject_lines = "\n".join(
        f"- {s.name}: Attendance {_fmt(s.attendance)}%, Marks {_fmt(s.marks)}%, "
        f"Pending Assignments: {s.pending_assignments}"
        for s in summary.subjects
    )
    wb = summary.wellbeing
    return (
        "Analyze this student's data and predict their risk level:\n\n"
        f"Student Name: {summary.name}\n"
        f"Course: {summary.course}\n"
        f"Semester: {summary.semester}\n\n"
        "Subject Performance:\n"
        f"{subject_lines}\n\n"
        f"Overall Attendance: {_fmt(summary.overall_attendance)}%\n"
        f"Average Marks: {_fmt(summary.average_marks)}%\n"
        f"Total Pending Assignments: {summary.total_pending_assignments}\n\n"
        "Well-being Data:\n"
        f"- Recent Mood: {_fmt(wb.mood if wb else None)}\n"
        f"- Stress Level: {_fmt(wb.stress if wb else None)}\n"
        f"- Sleep Quality: {_fmt(wb.sleep if wb else None)}\n\n"
        "Provide a risk assessment with specific recommendations for this student."
    )


def parse_assessment(content: str) -> RiskAssessment:
    """Raises ValueError (pydantic.ValidationError included) when no valid object is found."""
    match = _JSON_OBJECT.search(content or "")
    if match is None:
        raise ValueError("No JSON found in response")
    return RiskAssessment.model_validate(json.loads(match.group(0)))


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------

def _subject_fallback(subject: SubjectFeature) -> SubjectRisk:
    if subject.attendance < 60 or subject.marks < 40:
        risk = RiskLevel.high
    elif subject.attendance < 75 or subject.marks < 60:
        risk = RiskLevel.medium
    else:
        risk = RiskLevel.low

    if subject.attendance < 75:
        reason = "Low attendance"
    elif subject.marks < 60:
        reason = "Low marks"
    else:
        reason = "Good performance"
    return SubjectRisk(subject=subject.name, risk=risk, reason=reason)


def calculate_fallback_risk(summary: StudentFeatureSummary) -> RiskAssessment:
    attendance = summary.overall_attendance if summary.overall_attendance is not None else 75
    marks = summary.average_marks if summary.average_marks is not None else 60
    pending = summary.total_pending_assignments

    recommendations: list[str] = []
    if attendance < 60 or marks < 40 or pending > 5:
        level = RiskLevel.high
        explanation = "Critical attention needed - multiple academic indicators are concerning."
        if attendance < 60:
            recommendations.append("Improve attendance immediately - attend all classes this week")
        if marks < 40:
            recommendations.append("Schedule extra tutoring sessions for weak subjects")
        if pending > 5:
            recommendations.append("Create a priority list and complete assignments one by one")
    elif attendance < 75 or marks < 60 or pending > 2:
        level = RiskLevel.medium
        explanation = "Some areas need attention to prevent falling behind."
        if attendance < 75:
            recommendations.append("Aim to attend 2-3 more classes this month")
        if marks < 60:
            recommendations.append("Review study methods and seek help in challenging subjects")
        if pending > 2:
            recommendations.append("Set deadlines to complete pending assignments this week")
    else:
        level = RiskLevel.low
        explanation = "Student is performing well academically."
        recommendations.append("Keep up the good work!")
        recommendations.append("Consider helping peers who may need support")

    return RiskAssessment(
        risk_level=level,
        explanation=explanation,
        recommendations=recommendations,
        subject_risks=[_subject_fallback(s) for s in summary.subjects],
    )


# ---------------------------------------------------------------------------
# Predictor
# ---------------------------------------------------------------------------

class RiskPredictor:
    def __init__(
        self,
        api_key: str,
        url: str,
        model: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.url = url
        self.model = model
        self.timeout = timeout
        self._client = client

    def predict(self, summary: StudentFeatureSummary) -> PredictionResult:
        if not self.api_key:
            return self._fallback(summary, FallbackReason.NOT_CONFIGURED)

        try:
            content = self._complete(summary)
        except GatewayError as exc:
            logger.warning(f"AI gateway unavailable ({exc.reason}): {exc}")
            return self._fallback(summary, exc.reason)

        try:
            assessment = parse_assessment(content)
        except ValueError as exc:
            logger.warning(f"Failed to parse AI response: {exc}")
            return self._fallback(summary, FallbackReason.PARSE_ERROR)

        logger.info(f"AI risk assessment for {summary.name}: {assessment.risk_level.value}")
        return PredictionResult(
            assessment=assessment,
            source="ai",
            fallback_reason=None,
            model_version=self.model,
        )

    def _fallback(self, summary: StudentFeatureSummary, reason: str) -> PredictionResult:
        return PredictionResult(
            assessment=calculate_fallback_risk(summary),
            source="fallback",
            fallback_reason=reason,
            model_version=FALLBACK_MODEL_VERSION,
        )

    def _complete(self, summary: StudentFeatureSummary) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(summary)},
            ],
            "temperature": 0.3,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            response = self._post(payload, headers)
        except httpx.TimeoutException as exc:
            raise GatewayError(FallbackReason.TIMEOUT, f"timed out after {self.timeout}s") from exc
        except httpx.RequestError as exc:
            raise GatewayError(FallbackReason.NETWORK_ERROR, str(exc)) from exc

        if not response.is_success:
            reason = _STATUS_REASONS.get(response.status_code, FallbackReason.UPSTREAM_ERROR)
            logger.error(f"AI gateway error: {response.status_code} {response.text[:200]}")
            raise GatewayError(reason, f"status {response.status_code}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise GatewayError(FallbackReason.PARSE_ERROR, "malformed completion body") from exc
        if not isinstance(content, str):
            raise GatewayError(FallbackReason.PARSE_ERROR, "completion content is not text")
        return content

    def _post(self, payload: dict, headers: dict) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.url, json=payload, headers=headers)


def get_risk_predictor() -> RiskPredictor:
    return RiskPredictor(
        api_key=settings.AI_GATEWAY_API_KEY,
        url=settings.AI_GATEWAY_URL,
        model=settings.AI_MODEL,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )


# ---------------------------------------------------------------------------
# Feature summary / persistence helpers
# ---------------------------------------------------------------------------

def build_feature_summary(data: StudentData) -> StudentFeatureSummary:
    """Predictor input from a stored StudentData aggregate."""
    subjects = data.subjects
    if subjects:
        overall_attendance = round_half_up(sum(s.attendance for s in subjects) / len(subjects))
        average_marks = round_half_up(sum(s.internal_marks for s in subjects) / len(subjects))
    else:
        latest_attendance = data.latest_attendance()
        latest_marks = data.latest_marks()
        overall_attendance = round_half_up(latest_attendance.percentage) if latest_attendance else None
        average_marks = round_half_up(latest_marks.average) if latest_marks else None

    latest_wb = data.latest_wellbeing()
    return StudentFeatureSummary(
        name=data.profile.name,
        course=data.profile.course,
        semester=data.profile.semester,
        subjects=[
            SubjectFeature(
                name=s.name,
                attendance=s.attendance,
                marks=s.internal_marks,
                pending_assignments=min(max(s.total_assignments - s.assignments_done, 0), MAX_PENDING),
            )
            for s in subjects
        ],
        overall_attendance=overall_attendance,
        average_marks=average_marks,
        total_pending_assignments=min(len(data.pending_assignments()), MAX_PENDING),
        wellbeing=WellbeingFeature(
            mood=latest_wb.mood, stress=latest_wb.stress, sleep=latest_wb.sleep
        ) if latest_wb else None,
    )


def prediction_row(student_id: str, result: PredictionResult) -> RiskPredictionRow:
    assessment = result.assessment
    return RiskPredictionRow(
        student_id=student_id,
        prediction_date=datetime.now(tz=timezone.utc),
        risk_level=assessment.risk_level.value,
        source=result.source,
        factors="\n".join([assessment.explanation, *assessment.recommendations]),
        model_version=result.model_version,
    )
