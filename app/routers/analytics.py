"""
Analytics router over the student_analytics dataset.

POST /analytics/{table}                        — validate and append rows
GET  /analytics/{table}?student_id=&limit=     — rows newest first, optionally for one student
GET  /analytics/students/{student_id}/features — aggregate features for one student
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError

from app.core.errors import RowValidationError
from app.schemas.analytics import InsertRowsRequest, InsertRowsResponse, StudentFeaturesResponse
from app.schemas.common import ErrorResponse, error_details
from app.services.analytics_store import StudentAnalytics, get_student_analytics

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get(
    "/students/{student_id}/features",
    response_model=StudentFeaturesResponse,
    summary="Aggregate features for one student",
)
def student_features(
    student_id: str,
    analytics: StudentAnalytics = Depends(get_student_analytics),
):
    """
    Averages over the whole history: attendance (% of rows present), marks
    (score / max_score as %), mood, stress, sleep hours, plus the number of
    recorded interventions. Empty histories average to 0.
    """
    return analytics.calculate_student_features(student_id)


@router.post(
    "/{table}",
    response_model=InsertRowsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Insert rows into an analytics table",
    responses={
        404: {"model": ErrorResponse, "description": "Unknown table."},
        422: {"model": ErrorResponse, "description": "A row does not match the table schema."},
    },
)
def insert_rows(
    table: str,
    body: InsertRowsRequest,
    analytics: StudentAnalytics = Depends(get_student_analytics),
):
    """All rows are validated first; nothing is written if any row is invalid."""
    target = analytics.table(table)
    try:
        count = target.insert(body.rows)
    except ValidationError as exc:
        raise RowValidationError(table, error_details(exc.errors(), skip=())) from exc
    return InsertRowsResponse(table=table, inserted_count=count)


@router.get(
    "/{table}",
    response_model=list[dict[str, Any]],
    summary="Query an analytics table",
    responses={404: {"model": ErrorResponse, "description": "Unknown table."}},
)
def query_rows(
    table: str,
    student_id: Optional[str] = Query(default=None, max_length=64),
    limit: int = Query(default=100, ge=1, le=1000),
    analytics: StudentAnalytics = Depends(get_student_analytics),
):
    rows = analytics.history(table, student_id, limit=limit)
    return [r.model_dump(mode="json") for r in rows]
