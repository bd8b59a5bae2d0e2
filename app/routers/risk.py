"""
Risk prediction router.

POST /risk/predict                       — predict from a caller-supplied feature summary
POST /students/{student_id}/risk/predict — predict from the stored aggregate

Both require `Authorization: Bearer <API_TOKEN>` when API_TOKEN is set.
Gateway problems never surface as errors: the response is the rule-based
assessment with source="fallback" and a machine-readable fallback_reason.
"""
from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path
from sqlalchemy.exc import SQLAlchemyError

from app.core.auth import require_api_token
from app.schemas.common import ErrorResponse
from app.schemas.risk import PredictRiskRequest, RiskPredictionResponse, StudentFeatureSummary
from app.services.analytics_store import StudentAnalytics, get_student_analytics
from app.services.risk_predictor import (
    RiskPredictor,
    build_feature_summary,
    get_risk_predictor,
    prediction_row,
)
from app.services.student_store import StudentStore, get_student_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["risk"], dependencies=[Depends(require_api_token)])

_responses = {
    401: {"model": ErrorResponse, "description": "Missing or invalid API token."},
    422: {"model": ErrorResponse, "description": "Feature summary out of range."},
}


def _predict_and_record(
    predictor: RiskPredictor,
    analytics: StudentAnalytics,
    summary: StudentFeatureSummary,
    student_id: Optional[str],
) -> RiskPredictionResponse:
    result = predictor.predict(summary)
    if student_id:
        try:
            analytics.store_risk_prediction(prediction_row(student_id, result))
        except SQLAlchemyError:
            logger.exception(f"Could not record risk prediction for {student_id}")
    return result.to_response()


@router.post(
    "/risk/predict",
    response_model=RiskPredictionResponse,
    response_model_by_alias=True,
    summary="AI risk prediction from a feature summary",
    responses=_responses,
)
def predict(
    body: PredictRiskRequest,
    predictor: RiskPredictor = Depends(get_risk_predictor),
    analytics: StudentAnalytics = Depends(get_student_analytics),
):
    """
    Body: `{"studentData": {...}, "studentId": "STU001"?}`.

    Ranges are validated before the gateway is called: attendance and marks
    0–100, semester 1–10, pending assignments 0–50, well-being scales 1–5.
    """
    return _predict_and_record(predictor, analytics, body.student_data, body.student_id)


@router.post(
    "/students/{student_id}/risk/predict",
    response_model=RiskPredictionResponse,
    response_model_by_alias=True,
    summary="AI risk prediction for a stored student",
    responses=_responses,
)
def predict_for_student(
    student_id: Annotated[str, Path(min_length=1, max_length=64)],
    store: StudentStore = Depends(get_student_store),
    predictor: RiskPredictor = Depends(get_risk_predictor),
    analytics: StudentAnalytics = Depends(get_student_analytics),
):
    summary = build_feature_summary(store.load(student_id))
    return _predict_and_record(predictor, analytics, summary, student_id)
