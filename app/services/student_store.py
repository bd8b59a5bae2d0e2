"""
Student store: the persisted StudentData aggregate.

One JSON document per student in `student_documents`. Reads and writes
are whole-object replace; every mutating operation is load → mutate → save
and runs at most once per call (failed writes raise StorageWriteError, they
are never retried).

Degradation
-----------
  - no document yet           → the default dataset is seeded and returned
  - corrupt / invalid JSON    → in-memory default dataset (logged, not raised)
  - storage unreachable       → in-memory default dataset (logged, not raised)
  - fields added after the document was written are backfilled from the
    defaults (shallow merge on top-level keys)

Streaks
-------
A qualifying event increments `current` and sets `best = max(best, current)`:
  checkin    — a check-in on a date that had none
  assignment — an assignment toggled to completed
  attendance — an attendance record of at least 75%
Streaks never reset on a missed day, and a back-dated event never moves
`last_date` backwards.
"""
from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import AssignmentNotFoundError, StorageWriteError
from app.db.base import get_db
from app.models.student_document import StudentDocument
from app.schemas.student import (
    Assignment,
    AttendanceRecord,
    FocusSession,
    Goals,
    MarksRecord,
    ProfileUpdate,
    ScheduleItem,
    Streak,
    StreakType,
    StudentData,
    StudentProfile,
    SubjectData,
    WeeklyReflection,
    WellBeingRecord,
    WellBeingScores,
)

logger = logging.getLogger(__name__)

ATTENDANCE_STREAK_THRESHOLD = 75


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def _week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


# ---------------------------------------------------------------------------
# Default dataset
# ---------------------------------------------------------------------------

def default_student_data(student_id: str = "STU001") -> StudentData:
    """Demo dataset used for new students and whenever stored data is unusable."""
    weeks = ["2024-11-18", "2024-11-25", "2024-12-02", "2024-12-09", "2024-12-16", "2024-12-23"]
    attendance = [78, 82, 75, 80, 85, 79]
    marks = [72, 75, 70, 78, 82, 76]
    wellbeing = [(4, 3, 3, 4), (3, 4, 2, 3), (3, 3, 3, 3), (4, 2, 4, 4), (5, 2, 4, 5), (4, 3, 3, 4)]

    return StudentData(
        profile=StudentProfile(
            id=student_id,
            name="Aryan Sharma",
            course="B.Tech CSE",
            semester=5,
            section="A",
            roll_number="0201CS211001",
        ),
        attendance=[AttendanceRecord(date=d, percentage=p) for d, p in zip(weeks, attendance)],
        marks=[MarksRecord(date=d, average=m) for d, m in zip(weeks, marks)],
        well_being=[
            WellBeingRecord(date=d, mood=mood, stress=stress, sleep=sleep, motivation=motivation)
            for d, (mood, stress, sleep, motivation) in zip(weeks, wellbeing)
        ],
        assignments=[
            Assignment(id="1", title="Data Structures Lab Report", subject="DSA", due_date="2024-12-28"),
            Assignment(id="2", title="DBMS Project Submission", subject="DBMS", due_date="2024-12-30"),
            Assignment(id="3", title="Software Engineering Case Study", subject="SE", due_date="2025-01-02"),
        ],
        subjects=[
            SubjectData(id="1", name="Data Structures", code="DSA", attendance=82,
                        internal_marks=74, assignments_done=4, total_assignments=5),
            SubjectData(id="2", name="Database Systems", code="DBMS", attendance=72,
                        internal_marks=58, assignments_done=3, total_assignments=4),
            SubjectData(id="3", name="Software Engineering", code="SE", attendance=88,
                        internal_marks=81, assignments_done=3, total_assignments=3),
            SubjectData(id="4", name="Computer Networks", code="CN", attendance=68,
                        internal_marks=62, assignments_done=2, total_assignments=3),
            SubjectData(id="5", name="Operating Systems", code="OS", attendance=79,
                        internal_marks=70, assignments_done=3, total_assignments=3),
        ],
        schedule=[
            ScheduleItem(id="1", day="Monday", start_time="09:00", end_time="10:00", subject="DSA", room="A-201"),
            ScheduleItem(id="2", day="Monday", start_time="10:15", end_time="11:15", subject="DBMS", room="A-204"),
            ScheduleItem(id="3", day="Tuesday", start_time="09:00", end_time="10:00", subject="SE", room="B-102"),
            ScheduleItem(id="4", day="Wednesday", start_time="11:30", end_time="12:30", subject="CN", room="Lab-3"),
            ScheduleItem(id="5", day="Thursday", start_time="14:00", end_time="15:00", subject="OS", room="A-201"),
        ],
        streaks=[
            Streak(type=StreakType.attendance, current=5, best=12),
            Streak(type=StreakType.assignment, current=3, best=8),
            Streak(type=StreakType.checkin, current=7, best=14),
        ],
        goals=Goals(weekly_target=10, completed=7),
    )


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------

@dataclass
class CheckInResult:
    data: StudentData
    record: WellBeingRecord
    replaced_existing: bool
    streak: Streak


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class StudentStore:
    """Repository for StudentData documents. Construct once per session."""

    def __init__(self, db: Session):
        self.db = db

    # --- lifecycle ---

    def load(self, student_id: str) -> StudentData:
        try:
            doc = self._get_document(student_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning(f"Student storage unavailable for {student_id}, using defaults: {exc}")
            return default_student_data(student_id)

        if doc is None:
            data = default_student_data(student_id)
            try:
                self.save(student_id, data)
            except StorageWriteError:
                logger.warning(f"Could not seed default data for {student_id}")
            return data

        try:
            stored = json.loads(doc.payload)
            if not isinstance(stored, dict):
                raise ValueError("document is not a JSON object")
            defaults = default_student_data(student_id).model_dump(mode="json")
            return StudentData.model_validate({**defaults, **stored})
        except (ValueError, ValidationError) as exc:
            logger.warning(f"Corrupt student document for {student_id}, using defaults: {exc}")
            return default_student_data(student_id)

    def save(self, student_id: str, data: StudentData) -> None:
        payload = data.model_dump_json()
        try:
            doc = self._get_document(student_id)
            if doc is None:
                self.db.add(StudentDocument(student_id=student_id, payload=payload))
            else:
                doc.payload = payload
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Failed to save student document {student_id}: {exc}")
            raise StorageWriteError(student_id) from exc

    def _get_document(self, student_id: str) -> Optional[StudentDocument]:
        return (
            self.db.query(StudentDocument)
            .filter(StudentDocument.student_id == student_id)
            .first()
        )

    # --- operations ---

    def update_profile(self, student_id: str, changes: ProfileUpdate) -> StudentData:
        data = self.load(student_id)
        merged = {**data.profile.model_dump(), **changes.model_dump(exclude_none=True)}
        data.profile = StudentProfile.model_validate(merged)
        self.save(student_id, data)
        return data

    def upsert_wellbeing(
        self,
        student_id: str,
        scores: WellBeingScores,
        day: Optional[date] = None,
    ) -> CheckInResult:
        """Insert or overwrite the check-in for `day` (default today, UTC)."""
        target = day or _today()
        data = self.load(student_id)
        record = WellBeingRecord(date=target, **scores.model_dump())

        index = next((i for i, r in enumerate(data.well_being) if r.date == target), None)
        if index is not None:
            data.well_being[index] = record
            streak = self._get_streak(data, StreakType.checkin)
        else:
            data.well_being.append(record)
            data.well_being.sort(key=lambda r: r.date)
            streak = _bump_streak(data, StreakType.checkin, target)

        self.save(student_id, data)
        return CheckInResult(
            data=data,
            record=record,
            replaced_existing=index is not None,
            streak=streak,
        )

    def toggle_assignment(self, student_id: str, assignment_id: str) -> StudentData:
        data = self.load(student_id)
        assignment = next((a for a in data.assignments if a.id == assignment_id), None)
        if assignment is None:
            raise AssignmentNotFoundError(student_id=student_id, assignment_id=assignment_id)

        assignment.completed = not assignment.completed
        goals = data.goals
        if assignment.completed:
            goals.completed = min(goals.completed + 1, goals.weekly_target)
            _bump_streak(data, StreakType.assignment, _today())
        else:
            goals.completed = max(goals.completed - 1, 0)

        self.save(student_id, data)
        return data

    def record_attendance(
        self, student_id: str, percentage: float, day: Optional[date] = None
    ) -> StudentData:
        target = day or _today()
        data = self.load(student_id)
        record = AttendanceRecord(date=target, percentage=percentage)
        data.attendance.append(record)
        data.attendance.sort(key=lambda r: r.date)
        if record.percentage >= ATTENDANCE_STREAK_THRESHOLD:
            _bump_streak(data, StreakType.attendance, target)
        self.save(student_id, data)
        return data

    def record_marks(
        self, student_id: str, average: float, day: Optional[date] = None
    ) -> StudentData:
        data = self.load(student_id)
        data.marks.append(MarksRecord(date=day or _today(), average=average))
        data.marks.sort(key=lambda r: r.date)
        self.save(student_id, data)
        return data

    def add_focus_session(
        self, student_id: str, subject: str, duration_minutes: int
    ) -> FocusSession:
        data = self.load(student_id)
        session = FocusSession(
            id=uuid.uuid4().hex,
            subject=subject,
            duration_minutes=duration_minutes,
            completed_at=datetime.now(tz=timezone.utc),
        )
        data.focus_sessions.append(session)
        self.save(student_id, data)
        return session

    def add_weekly_reflection(
        self,
        student_id: str,
        went_well: str,
        to_improve: str,
        day: Optional[date] = None,
    ) -> WeeklyReflection:
        """One reflection per week; resubmitting in the same week overwrites it."""
        week_start = _week_start(day or _today())
        data = self.load(student_id)
        reflection = WeeklyReflection(
            week_start=week_start,
            went_well=went_well,
            to_improve=to_improve,
            created_at=datetime.now(tz=timezone.utc),
        )
        index = next(
            (i for i, r in enumerate(data.reflections) if r.week_start == week_start), None
        )
        if index is not None:
            data.reflections[index] = reflection
        else:
            data.reflections.append(reflection)
        self.save(student_id, data)
        return reflection

    @staticmethod
    def _get_streak(data: StudentData, streak_type: StreakType) -> Streak:
        streak = next((s for s in data.streaks if s.type == streak_type), None)
        if streak is None:
            streak = Streak(type=streak_type)
            data.streaks.append(streak)
        return streak


def _bump_streak(data: StudentData, streak_type: StreakType, day: date) -> Streak:
    streak = StudentStore._get_streak(data, streak_type)
    streak.current += 1
    streak.best = max(streak.best, streak.current)
    if streak.last_date is None or day > streak.last_date:
        streak.last_date = day
    return streak


def get_student_store(db: Session = Depends(get_db)) -> StudentStore:
    return StudentStore(db)
