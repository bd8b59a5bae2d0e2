"""
Integration tests for API endpoints using a SQLite test database.

Every test works on its own student id (see the `student_id` fixture) so
stored documents never bleed between tests.
"""
import pytest

from app.core.config import settings


def _predict_body(**overrides) -> dict:
    data = {
        "name": "Aryan Sharma",
        "course": "B.Tech CSE",
        "semester": 5,
        "subjects": [
            {"name": "Data Structures", "attendance": 82, "marks": 74, "pendingAssignments": 1},
            {"name": "Computer Networks", "attendance": 58, "marks": 62, "pendingAssignments": 1},
        ],
        "overallAttendance": 70,
        "averageMarks": 68,
        "totalPendingAssignments": 2,
        "wellbeing": {"mood": 3, "stress": 4, "sleep": 2},
    }
    data.update(overrides)
    return {"studentData": data}


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestStudents:
    def test_get_student_seeds_defaults(self, client, student_id):
        r = client.get(f"/students/{student_id}")
        assert r.status_code == 200
        body = r.json()
        assert body["profile"]["id"] == student_id
        assert len(body["subjects"]) == 5
        assert body["goals"] == {"weekly_target": 10, "completed": 7}

    def test_update_profile(self, client, student_id):
        r = client.patch(f"/students/{student_id}/profile", json={"section": "B"})
        assert r.status_code == 200
        assert r.json()["profile"]["section"] == "B"

    def test_invalid_semester_rejected(self, client, student_id):
        r = client.patch(f"/students/{student_id}/profile", json={"semester": 11})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"


class TestCheckIns:
    _DAY = "2025-02-03"

    def test_check_in_returns_tips_and_streak(self, client, student_id):
        r = client.post(
            f"/students/{student_id}/check-ins",
            json={"mood": 2, "stress": 5, "sleep": 2, "motivation": 4, "day": self._DAY},
        )
        assert r.status_code == 200
        body = r.json()
        assert body["replaced_existing"] is False
        assert body["record"]["date"] == self._DAY
        assert [t["category"] for t in body["tips"]] == ["stress", "sleep", "mood"]
        assert body["streak"]["type"] == "checkin"
        assert body["streak"]["current"] == 8

    def test_second_check_in_same_day_replaces(self, client, student_id):
        payload = {"mood": 4, "stress": 2, "sleep": 4, "motivation": 4, "day": self._DAY}
        first = client.post(f"/students/{student_id}/check-ins", json=payload).json()
        second = client.post(f"/students/{student_id}/check-ins", json=payload).json()

        assert second["replaced_existing"] is True
        assert second["streak"]["current"] == first["streak"]["current"]
        well_being = client.get(f"/students/{student_id}").json()["well_being"]
        assert [w["date"] for w in well_being].count(self._DAY) == 1

    @pytest.mark.parametrize("field,value", [("mood", 0), ("stress", 6), ("sleep", 2.5)])
    def test_out_of_range_scale_rejected(self, client, student_id, field, value):
        payload = {"mood": 3, "stress": 3, "sleep": 3, "motivation": 3}
        payload[field] = value
        r = client.post(f"/students/{student_id}/check-ins", json=payload)
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert any(field in e["field"] for e in body["details"]["errors"])


class TestRecords:
    def test_attendance_and_marks(self, client, student_id):
        r = client.post(f"/students/{student_id}/attendance", json={"percentage": 91, "day": "2025-02-10"})
        assert r.status_code == 200
        assert r.json()["attendance"][-1] == {"date": "2025-02-10", "percentage": 91.0}

        r = client.post(f"/students/{student_id}/marks", json={"average": 83, "day": "2025-02-10"})
        assert r.json()["marks"][-1]["average"] == 83.0

    def test_toggle_assignment_twice_restores(self, client, student_id):
        before = client.get(f"/students/{student_id}").json()
        client.post(f"/students/{student_id}/assignments/1/toggle")
        after = client.post(f"/students/{student_id}/assignments/1/toggle").json()
        assert after["assignments"] == before["assignments"]
        assert after["goals"] == before["goals"]

    def test_toggle_unknown_assignment_is_404(self, client, student_id):
        r = client.post(f"/students/{student_id}/assignments/404/toggle")
        assert r.status_code == 404
        body = r.json()
        assert body["code"] == "ASSIGNMENT_NOT_FOUND"
        assert body["details"]["assignment_id"] == "404"

    def test_focus_session(self, client, student_id):
        r = client.post(f"/students/{student_id}/focus-sessions", json={"subject": "DBMS", "duration_minutes": 40})
        assert r.status_code == 201
        assert r.json()["duration_minutes"] == 40

    def test_focus_session_too_long_rejected(self, client, student_id):
        r = client.post(f"/students/{student_id}/focus-sessions", json={"subject": "DBMS", "duration_minutes": 600})
        assert r.status_code == 422

    def test_reflection(self, client, student_id):
        r = client.post(
            f"/students/{student_id}/reflections",
            json={"went_well": "  Finished the DBMS project ", "to_improve": "Sleep earlier", "day": "2025-02-12"},
        )
        assert r.status_code == 200
        assert r.json()["week_start"] == "2025-02-10"
        assert r.json()["went_well"] == "Finished the DBMS project"

    def test_blank_reflection_rejected(self, client, student_id):
        r = client.post(f"/students/{student_id}/reflections", json={"went_well": "   ", "to_improve": "x"})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"


class TestDashboard:
    def test_dashboard_for_demo_student(self, client, student_id):
        r = client.get(f"/students/{student_id}/dashboard")
        assert r.status_code == 200
        body = r.json()
        assert body["risk"]["risk_level"] == "low"
        assert body["risk"]["message"].startswith("Great progress!")
        assert body["balance"] == {
            "score": 45,
            "status": "balanced",
            "breakdown": {"attendance": 79.0, "stress": 40.0, "sleep": 60.0, "engagement": 0.0},
        }
        assert body["correlations"]["sample_size"] == 6
        assert body["pending_assignments"] == 3
        assert {s["code"]: s["risk"] for s in body["subjects"]}["CN"] == "medium"

    def test_risk_turns_high_after_poor_week(self, client, student_id):
        client.post(f"/students/{student_id}/attendance", json={"percentage": 60, "day": "2025-03-03"})
        client.post(f"/students/{student_id}/marks", json={"average": 45, "day": "2025-03-03"})
        body = client.get(f"/students/{student_id}/risk").json()
        assert body["risk_level"] == "high"
        assert body["message"].endswith("Reach out to your mentor.")

    def test_subject_risk(self, client, student_id):
        body = client.get(f"/students/{student_id}/subjects/risk").json()
        assert [s["risk"] for s in body["subjects"]] == ["low", "high", "low", "medium", "low"]

    def test_balance(self, client, student_id):
        assert client.get(f"/students/{student_id}/balance").json()["score"] == 45

    def test_correlations_window(self, client, student_id):
        body = client.get(f"/students/{student_id}/correlations", params={"window": 3}).json()
        assert body["sample_size"] == 3
        assert body["dates"] == ["2024-12-09", "2024-12-16", "2024-12-23"]

    def test_correlations_window_too_small(self, client, student_id):
        r = client.get(f"/students/{student_id}/correlations", params={"window": 1})
        assert r.status_code == 422


class TestRiskPrediction:
    def test_predict_for_student_falls_back_and_is_recorded(self, client, student_id):
        r = client.post(f"/students/{student_id}/risk/predict")
        assert r.status_code == 200
        body = r.json()
        # overall 78 / marks 69 / 3 pending
        assert body["riskLevel"] == "medium"
        assert body["source"] == "fallback"
        assert body["fallbackReason"] == "not_configured"
        assert body["recommendations"] == ["Set deadlines to complete pending assignments this week"]
        assert len(body["subjectRisks"]) == 5

        history = client.get("/analytics/risk_predictions", params={"student_id": student_id}).json()
        assert len(history) == 1
        assert history[0]["risk_level"] == "medium"
        assert history[0]["source"] == "fallback"

    def test_predict_from_summary(self, client):
        r = client.post("/risk/predict", json=_predict_body())
        assert r.status_code == 200
        body = r.json()
        assert body["riskLevel"] == "medium"
        assert body["subjectRisks"][1] == {
            "subject": "Computer Networks", "risk": "high", "reason": "Low attendance",
        }

    def test_predict_records_when_student_id_given(self, client, student_id):
        body = _predict_body(overallAttendance=50)
        body["studentId"] = student_id
        assert client.post("/risk/predict", json=body).json()["riskLevel"] == "high"
        history = client.get("/analytics/risk_predictions", params={"student_id": student_id}).json()
        assert [h["risk_level"] for h in history] == ["high"]

    @pytest.mark.parametrize("overrides", [
        {"semester": 0},
        {"overallAttendance": 101},
        {"totalPendingAssignments": 51},
        {"wellbeing": {"mood": 6, "stress": 3, "sleep": 3}},
    ])
    def test_out_of_range_summary_rejected(self, client, overrides):
        r = client.post("/risk/predict", json=_predict_body(**overrides))
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_token_required_when_configured(self, client, monkeypatch, student_id):
        monkeypatch.setattr(settings, "API_TOKEN", "s3cret")

        r = client.post("/risk/predict", json=_predict_body())
        assert r.status_code == 401
        assert r.json()["code"] == "UNAUTHENTICATED"

        r = client.post("/risk/predict", json=_predict_body(), headers={"Authorization": "Bearer wrong"})
        assert r.status_code == 401

        r = client.post("/risk/predict", json=_predict_body(), headers={"Authorization": "Token s3cret"})
        assert r.status_code == 401

        r = client.post("/risk/predict", json=_predict_body(), headers={"Authorization": "Bearer s3cret"})
        assert r.status_code == 200

    def test_scoring_endpoints_do_not_need_token(self, client, monkeypatch, student_id):
        monkeypatch.setattr(settings, "API_TOKEN", "s3cret")
        assert client.get(f"/students/{student_id}/risk").status_code == 200


class TestAnalytics:
    def test_insert_and_query(self, client, student_id):
        rows = [
            {"student_id": student_id, "date": "2025-01-06", "status": "present"},
            {"student_id": student_id, "date": "2025-01-07", "status": "absent"},
        ]
        r = client.post("/analytics/attendance_history", json={"rows": rows})
        assert r.status_code == 201
        assert r.json() == {"table": "attendance_history", "inserted_count": 2}

        r = client.get("/analytics/attendance_history", params={"student_id": student_id, "limit": 1})
        assert r.status_code == 200
        assert r.json() == [{"student_id": student_id, "date": "2025-01-07", "status": "absent", "subject": None}]

    def test_query_without_student_is_newest_first(self, client, student_id):
        rows = [
            {"student_id": student_id, "date": "2025-03-01", "mood_score": 3, "stress_level": 3, "sleep_hours": 7},
            {"student_id": student_id + "-b", "date": "2025-03-05", "mood_score": 4, "stress_level": 2, "sleep_hours": 8},
            {"student_id": student_id, "date": "2025-02-20", "mood_score": 2, "stress_level": 4, "sleep_hours": 6},
        ]
        client.post("/analytics/wellbeing_history", json={"rows": rows})

        body = client.get("/analytics/wellbeing_history", params={"limit": 1000}).json()
        dates = [r["date"] for r in body]
        assert dates == sorted(dates, reverse=True)
        assert {student_id, student_id + "-b"} <= {r["student_id"] for r in body}

    def test_invalid_row_is_422(self, client, student_id):
        rows = [{"student_id": student_id, "date": "2025-01-06", "status": "sleeping"}]
        r = client.post("/analytics/attendance_history", json={"rows": rows})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["table"] == "attendance_history"
        assert body["details"]["errors"][0]["field"] == "0.status"

    def test_unknown_table_is_404(self, client):
        r = client.get("/analytics/grades")
        assert r.status_code == 404
        assert r.json()["code"] == "TABLE_NOT_FOUND"

    def test_empty_insert_rejected(self, client):
        r = client.post("/analytics/marks_history", json={"rows": []})
        assert r.status_code == 422

    def test_features(self, client, student_id):
        client.post("/analytics/marks_history", json={"rows": [
            {"student_id": student_id, "subject": "DSA", "score": 45, "max_score": 50,
             "exam_type": "quiz", "date": "2025-01-10"},
        ]})
        body = client.get(f"/analytics/students/{student_id}/features").json()
        assert body["avg_marks"] == pytest.approx(90.0)
        assert body["avg_attendance"] == 0.0


class TestErp:
    def test_students_carry_risk(self, client):
        body = client.get("/erp/students").json()
        assert {s["roll_no"]: s["risk_level"] for s in body} == {
            "0201CS211001": "low",
            "0201CS211002": "medium",
            "0201EC211003": "high",
        }

    def test_students_by_branch(self, client):
        body = client.get("/erp/students", params={"branch": "ECE"}).json()
        assert [s["name"] for s in body] == ["Rahul Gupta"]

    def test_at_risk(self, client):
        assert len(client.get("/erp/students/at-risk").json()) == 2

    def test_by_roll_no(self, client):
        r = client.get("/erp/students/0201CS211001")
        assert r.status_code == 200
        assert r.json()["marks_percentage"] == 90

    def test_unknown_roll_no_is_404(self, client):
        r = client.get("/erp/students/nope")
        assert r.status_code == 404
        assert r.json()["code"] == "ERP_STUDENT_NOT_FOUND"

    def test_progress_and_notices(self, client):
        assert client.get("/erp/progress").json()["count"] == 1
        assert client.get("/erp/notices").json()["data"][0]["title"] == "Mid-sem exams"
