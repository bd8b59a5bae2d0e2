"""
Academic-records (ERP) client.

GET {ERP_BASE_URL}/api-students | /api-progress | /api-notices
  → {data: T[], count}

Failures (transport error, timeout, non-2xx, malformed body) are logged and
degrade to an empty response; callers never see an exception from here.
"""
from __future__ import annotations

import logging
import math
from typing import Optional, TypeVar

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.core.numeric import round_half_up
from app.schemas.erp import ErpNotice, ErpProgress, ErpResponse, ErpStudent, ErpStudentOut
from app.schemas.student import RiskLevel

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErpClient:
    def __init__(self, base_url: str, timeout: float = 10.0, client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    def fetch_students(self) -> ErpResponse[ErpStudent]:
        return self._fetch("api-students", ErpResponse[ErpStudent])

    def fetch_progress(self) -> ErpResponse[ErpProgress]:
        return self._fetch("api-progress", ErpResponse[ErpProgress])

    def fetch_notices(self) -> ErpResponse[ErpNotice]:
        return self._fetch("api-notices", ErpResponse[ErpNotice])

    def find_student_by_roll_no(self, roll_no: str) -> Optional[ErpStudent]:
        return next((s for s in self.fetch_students().data if s.roll_no == roll_no), None)

    def students_by_branch(self, branch: str) -> list[ErpStudent]:
        return [s for s in self.fetch_students().data if s.branch == branch]

    def at_risk_students(self) -> list[ErpStudent]:
        """Students whose ERP status is anything other than Regular."""
        return [s for s in self.fetch_students().data if s.status != "Regular"]

    def _fetch(self, endpoint: str, response_type: type[ErpResponse[T]]) -> ErpResponse[T]:
        url = f"{self.base_url}/{endpoint}"
        try:
            response = self._get(url)
            response.raise_for_status()
            return response_type.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            logger.error(f"Failed to fetch from ERP {endpoint}: {exc}")
            return response_type()

    def _get(self, url: str) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        if self._client is not None:
            return self._client.get(url, headers=headers, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.get(url, headers=headers)


def parse_cie_marks(cie_marks: str) -> int:
    """'18/20' → 90. A zero or malformed total yields 0."""
    parts = cie_marks.split("/")
    if len(parts) != 2:
        return 0
    try:
        obtained, total = float(parts[0]), float(parts[1])
    except ValueError:
        return 0
    if total == 0 or not math.isfinite(obtained / total):
        return 0
    return round_half_up(obtained / total * 100)


def calculate_erp_risk_level(student: ErpStudent) -> RiskLevel:
    marks = parse_cie_marks(student.cie_marks)
    if student.status == "Detained" or student.attendance < 65 or marks < 50:
        return RiskLevel.high
    if student.status == "Low Attendance" or student.attendance < 75 or marks < 60:
        return RiskLevel.medium
    return RiskLevel.low


def with_risk(student: ErpStudent) -> ErpStudentOut:
    return ErpStudentOut(
        **student.model_dump(),
        marks_percentage=parse_cie_marks(student.cie_marks),
        risk_level=calculate_erp_risk_level(student),
    )


def get_erp_client() -> ErpClient:
    return ErpClient(settings.ERP_BASE_URL, timeout=settings.ERP_TIMEOUT_SECONDS)
