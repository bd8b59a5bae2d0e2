"""
Custom exception hierarchy for the Student Pulse API.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from app.schemas.common import ErrorDetail, error_details

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class PulseException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class UnauthenticatedError(PulseException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Authentication required."):
        super().__init__(message=message)


class AssignmentNotFoundError(PulseException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ASSIGNMENT_NOT_FOUND"

    def __init__(self, student_id: str, assignment_id: str):
        super().__init__(
            message=f"Assignment {assignment_id} not found for student {student_id}.",
            details={"student_id": student_id, "assignment_id": assignment_id},
        )


class UserNotFoundError(PulseException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "USER_NOT_FOUND"

    def __init__(self, user_id: int):
        super().__init__(
            message=f"User {user_id} not found.",
            details={"user_id": user_id},
        )


class DuplicateEmailError(PulseException):
    http_status = status.HTTP_409_CONFLICT
    code = "DUPLICATE_EMAIL"

    def __init__(self, email: str):
        super().__init__(
            message=f"A user with email {email} already exists.",
            details={"email": email},
        )


class SkillNotFoundError(PulseException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "SKILL_NOT_FOUND"

    def __init__(self, skill_id: int):
        super().__init__(
            message=f"Skill {skill_id} not found.",
            details={"skill_id": skill_id},
        )


class MentorAssignmentNotFoundError(PulseException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "MENTOR_ASSIGNMENT_NOT_FOUND"

    def __init__(self, assignment_id: int):
        super().__init__(
            message=f"Mentor assignment {assignment_id} not found.",
            details={"mentor_assignment_id": assignment_id},
        )


class DuplicateMentorAssignmentError(PulseException):
    http_status = status.HTTP_409_CONFLICT
    code = "DUPLICATE_ASSIGNMENT"

    def __init__(self, mentor_id: str, student_id: str):
        super().__init__(
            message=f"Student {student_id} is already assigned to mentor {mentor_id}.",
            details={"mentor_id": mentor_id, "student_id": student_id},
        )


class AnalyticsTableNotFoundError(PulseException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "TABLE_NOT_FOUND"

    def __init__(self, table: str):
        super().__init__(
            message=f"Table {table} not found in dataset student_analytics.",
            details={"table": table},
        )


class RowValidationError(PulseException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"

    def __init__(self, table: str, errors: list[ErrorDetail]):
        super().__init__(
            message=f"One or more rows do not match the {table} schema.",
            details={"table": table, "errors": [e.model_dump() for e in errors]},
        )


class ErpStudentNotFoundError(PulseException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ERP_STUDENT_NOT_FOUND"

    def __init__(self, roll_no: str):
        super().__init__(
            message=f"No ERP student with roll number {roll_no}.",
            details={"roll_no": roll_no},
        )


class StorageWriteError(PulseException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_WRITE_FAILED"

    def __init__(self, student_id: str):
        super().__init__(
            message=f"Could not persist data for student {student_id}.",
            details={"student_id": student_id},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def pulse_exception_handler(request: Request, exc: PulseException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = [e.model_dump() for e in error_details(exc.errors())]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
