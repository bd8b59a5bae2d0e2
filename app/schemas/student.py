"""
StudentData aggregate and its record types.

One StudentData document per student is persisted by
app/services/student_store.py. The scoring engine only reads these models.

Invariants enforced here:
  - percentage fields are clamped to [0, 100]
  - 1–5 scale fields must be integers in [1, 5] (rejected otherwise)
  - goals.completed never exceeds goals.weekly_target
"""

import enum
from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.core.numeric import clamp

Scale = Annotated[int, Field(ge=1, le=5)]


def _clamp_percentage(v: float) -> float:
    return clamp(float(v), 0.0, 100.0)


class RiskLevel(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class StreakType(str, enum.Enum):
    attendance = "attendance"
    assignment = "assignment"
    checkin = "checkin"


# ---------------------------------------------------------------------------
# Time series records
# ---------------------------------------------------------------------------

class AttendanceRecord(BaseModel):
    date: date
    percentage: float

    @field_validator("percentage")
    @classmethod
    def clamp_percentage(cls, v: float) -> float:
        return _clamp_percentage(v)


class MarksRecord(BaseModel):
    date: date
    average: float

    @field_validator("average")
    @classmethod
    def clamp_average(cls, v: float) -> float:
        return _clamp_percentage(v)


class WellBeingScores(BaseModel):
    """The four self-reported check-in scales, without a date."""
    mood: Scale
    stress: Scale
    sleep: Scale
    motivation: Scale


class WellBeingRecord(WellBeingScores):
    date: date


# ---------------------------------------------------------------------------
# Snapshots and gamification
# ---------------------------------------------------------------------------

class Assignment(BaseModel):
    id: str
    title: str
    subject: str
    due_date: date
    completed: bool = False


class SubjectData(BaseModel):
    id: str
    name: str
    code: str
    attendance: float
    internal_marks: float
    assignments_done: int = Field(ge=0)
    total_assignments: int = Field(ge=0)

    @field_validator("attendance", "internal_marks")
    @classmethod
    def clamp_scores(cls, v: float) -> float:
        return _clamp_percentage(v)


class Streak(BaseModel):
    type: StreakType
    current: int = Field(default=0, ge=0)
    best: int = Field(default=0, ge=0)
    last_date: Optional[date] = None


class Goals(BaseModel):
    weekly_target: int = Field(ge=0)
    completed: int = Field(ge=0)

    @model_validator(mode="after")
    def _cap_completed(self) -> "Goals":
        self.completed = min(self.completed, self.weekly_target)
        return self


class WeeklyReflection(BaseModel):
    week_start: date = Field(description="Monday of the reflected week.")
    went_well: str
    to_improve: str
    created_at: datetime


class FocusSession(BaseModel):
    id: str
    subject: str
    duration_minutes: int = Field(ge=1, le=180)
    completed_at: datetime


class ScheduleItem(BaseModel):
    id: str
    day: str
    start_time: str
    end_time: str
    subject: str
    room: Optional[str] = None


class StudentProfile(BaseModel):
    id: str
    name: str
    photo: str = ""
    course: str
    semester: int = Field(ge=1, le=10)
    section: str
    roll_number: str


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------

class StudentData(BaseModel):
    profile: StudentProfile
    attendance: list[AttendanceRecord] = Field(default_factory=list)
    marks: list[MarksRecord] = Field(default_factory=list)
    well_being: list[WellBeingRecord] = Field(default_factory=list)
    assignments: list[Assignment] = Field(default_factory=list)
    subjects: list[SubjectData] = Field(default_factory=list)
    schedule: list[ScheduleItem] = Field(default_factory=list)
    streaks: list[Streak] = Field(default_factory=list)
    reflections: list[WeeklyReflection] = Field(default_factory=list)
    focus_sessions: list[FocusSession] = Field(default_factory=list)
    goals: Goals

    def latest_attendance(self) -> Optional[AttendanceRecord]:
        return self.attendance[-1] if self.attendance else None

    def latest_marks(self) -> Optional[MarksRecord]:
        return self.marks[-1] if self.marks else None

    def latest_wellbeing(self) -> Optional[WellBeingRecord]:
        return self.well_being[-1] if self.well_being else None

    def pending_assignments(self) -> list[Assignment]:
        return [a for a in self.assignments if not a.completed]


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    photo: Optional[str] = None
    course: Optional[str] = None
    semester: Optional[int] = Field(default=None, ge=1, le=10)
    section: Optional[str] = None
    roll_number: Optional[str] = None


class CheckInRequest(WellBeingScores):
    day: Optional[date] = Field(
        default=None,
        description="ISO date of the check-in. Defaults to today (UTC).",
        examples=["2026-02-20"],
    )


class AttendanceRequest(BaseModel):
    day: Optional[date] = None
    percentage: float


class MarksRequest(BaseModel):
    day: Optional[date] = None
    average: float


class FocusSessionRequest(BaseModel):
    subject: Annotated[str, Field(min_length=1, max_length=64)]
    duration_minutes: int = Field(ge=1, le=180, examples=[25, 40, 60])


class ReflectionRequest(BaseModel):
    went_well: Annotated[str, Field(min_length=1, max_length=2_000)]
    to_improve: Annotated[str, Field(min_length=1, max_length=2_000)]
    day: Optional[date] = None

    @field_validator("went_well", "to_improve", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("reflection text must not be empty after stripping whitespace")
        return stripped


class CheckInTip(BaseModel):
    title: str
    description: str
    category: str


class CheckInResponse(BaseModel):
    record: WellBeingRecord
    replaced_existing: bool
    tips: list[CheckInTip]
    streak: Streak
