"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
from fastapi.testclient import TestClient

from app.core.errors import (
    AnalyticsTableNotFoundError,
    AssignmentNotFoundError,
    DuplicateEmailError,
    DuplicateMentorAssignmentError,
    ErpStudentNotFoundError,
    MentorAssignmentNotFoundError,
    RowValidationError,
    SkillNotFoundError,
    StorageWriteError,
    UnauthenticatedError,
    UserNotFoundError,
)
from app.main import app
from app.schemas.common import ErrorDetail, error_details
from app.services.student_store import StudentStore, default_student_data, get_student_store


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_assignment_not_found(self):
        err = AssignmentNotFoundError(student_id="STU001", assignment_id="9")
        assert err.http_status == 404
        assert err.code == "ASSIGNMENT_NOT_FOUND"
        assert "9" in err.message
        assert err.to_dict()["details"] == {"student_id": "STU001", "assignment_id": "9"}

    def test_user_not_found(self):
        err = UserNotFoundError(42)
        assert err.http_status == 404
        assert err.to_dict()["details"]["user_id"] == 42

    def test_duplicate_email(self):
        err = DuplicateEmailError("a@b.co")
        assert err.http_status == 409
        assert err.code == "DUPLICATE_EMAIL"

    def test_skill_not_found(self):
        err = SkillNotFoundError(7)
        assert err.http_status == 404
        assert err.details == {"skill_id": 7}

    def test_mentor_assignment_codes_differ_from_coursework(self):
        assert MentorAssignmentNotFoundError(3).code != AssignmentNotFoundError("S", "3").code
        assert DuplicateMentorAssignmentError("M1", "S1").http_status == 409

    def test_table_not_found(self):
        err = AnalyticsTableNotFoundError("grades")
        assert err.http_status == 404
        assert "student_analytics" in err.message

    def test_row_validation(self):
        err = RowValidationError("marks_history", [ErrorDetail(field="0.score", message="bad", type="x")])
        assert err.http_status == 422
        assert err.code == "VALIDATION_ERROR"
        assert err.details["table"] == "marks_history"
        assert err.details["errors"] == [{"field": "0.score", "message": "bad", "type": "x"}]

    def test_error_details_drop_body_prefix(self):
        details = error_details([
            {"loc": ("body", "rows", 0, "score"), "msg": "too big", "type": "less_than_equal"},
        ])
        assert details == [ErrorDetail(field="rows.0.score", message="too big", type="less_than_equal")]

    def test_erp_student_not_found(self):
        assert ErpStudentNotFoundError("R1").http_status == 404

    def test_storage_write(self):
        err = StorageWriteError("STU001")
        assert err.http_status == 500
        assert err.code == "STORAGE_WRITE_FAILED"

    def test_unauthenticated_without_details(self):
        d = UnauthenticatedError().to_dict()
        assert d["code"] == "UNAUTHENTICATED"
        assert "message" in d
        # details should not be in dict when empty
        assert "details" not in d


# ---------------------------------------------------------------------------
# Integration tests on HTTP error responses
# ---------------------------------------------------------------------------

class TestValidationErrors:
    def test_missing_field_lists_it(self, client, student_id):
        r = client.post(f"/students/{student_id}/check-ins", json={"mood": 3, "stress": 3, "sleep": 3})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        fields = [e["field"] for e in body["details"]["errors"]]
        assert "motivation" in fields

    def test_invalid_day_format(self, client, student_id):
        r = client.post(
            f"/students/{student_id}/check-ins",
            json={"mood": 3, "stress": 3, "sleep": 3, "motivation": 3, "day": "not-a-date"},
        )
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_non_json_body(self, client, student_id):
        r = client.post(
            f"/students/{student_id}/attendance",
            content="percentage=80",
            headers={"Content-Type": "application/json"},
        )
        assert r.status_code == 422


class TestServerErrors:
    def test_storage_failure_is_500_envelope(self):
        class BrokenStore(StudentStore):
            def load(self, student_id):
                return default_student_data(student_id)

            def save(self, student_id, data):
                raise StorageWriteError(student_id)

        def override_store():
            return BrokenStore(None)

        app.dependency_overrides[get_student_store] = override_store
        try:
            with TestClient(app) as c:
                r = c.post("/students/STU-broken/assignments/1/toggle")
        finally:
            app.dependency_overrides.clear()

        assert r.status_code == 500
        assert r.json()["code"] == "STORAGE_WRITE_FAILED"

    def test_unhandled_error_is_generic_500(self):
        def explode():
            raise RuntimeError("boom")

        app.dependency_overrides[get_student_store] = explode
        try:
            with TestClient(app, raise_server_exceptions=False) as c:
                r = c.get("/students/STU001")
        finally:
            app.dependency_overrides.clear()

        assert r.status_code == 500
        assert r.json() == {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred."}
