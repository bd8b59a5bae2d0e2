"""
ERP router: read-through views over the academic-records API.

GET /erp/students              — all students (optional ?branch=), with risk level
GET /erp/students/at-risk      — status other than Regular
GET /erp/students/{roll_no}    — single student by roll number
GET /erp/progress              — per-subject progress rows
GET /erp/notices               — notices

An unreachable ERP yields empty lists, not errors.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.errors import ErpStudentNotFoundError
from app.schemas.common import ErrorResponse
from app.schemas.erp import ErpNotice, ErpProgress, ErpResponse, ErpStudentOut
from app.services.erp_client import ErpClient, get_erp_client, with_risk

router = APIRouter(prefix="/erp", tags=["erp"])


@router.get("/students", response_model=list[ErpStudentOut], summary="ERP students")
def list_students(
    branch: Optional[str] = Query(default=None, max_length=64),
    erp: ErpClient = Depends(get_erp_client),
):
    students = erp.students_by_branch(branch) if branch else erp.fetch_students().data
    return [with_risk(s) for s in students]


@router.get("/students/at-risk", response_model=list[ErpStudentOut], summary="At-risk ERP students")
def at_risk_students(erp: ErpClient = Depends(get_erp_client)):
    return [with_risk(s) for s in erp.at_risk_students()]


@router.get(
    "/students/{roll_no}",
    response_model=ErpStudentOut,
    summary="ERP student by roll number",
    responses={404: {"model": ErrorResponse}},
)
def get_student(roll_no: str, erp: ErpClient = Depends(get_erp_client)):
    student = erp.find_student_by_roll_no(roll_no)
    if student is None:
        raise ErpStudentNotFoundError(roll_no)
    return with_risk(student)


@router.get("/progress", response_model=ErpResponse[ErpProgress], summary="ERP progress")
def progress(erp: ErpClient = Depends(get_erp_client)):
    return erp.fetch_progress()


@router.get("/notices", response_model=ErpResponse[ErpNotice], summary="ERP notices")
def notices(erp: ErpClient = Depends(get_erp_client)):
    return erp.fetch_notices()
