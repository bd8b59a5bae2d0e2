"""
Student analytics warehouse.

Historical attendance, marks, well-being, interventions and risk
predictions, kept for trend analysis and model features.

Layers
------
AnalyticsBackend      put/scan of JSON rows per logical table. Two
                      implementations: SqlAnalyticsBackend (analytics_rows
                      table) and MemoryAnalyticsBackend (tests, local demos).
                      A warehouse client can replace either behind the same
                      two methods.
AnalyticsTable[RowT]  typed view over one table: insert() validates rows
                      against the table's schema, query() filters with a
                      predicate, sorts and limits.
StudentAnalytics      the dataset: table registry, per-student history
                      helpers and calculate_student_features().

Filtering is a linear scan over the student's rows; this is not a query
engine.
"""
from __future__ import annotations

import json
import logging
from collections import defaultdict
from typing import Any, Callable, Generic, Iterable, Optional, Protocol, TypeVar, Union

from fastapi import Depends
from pydantic import TypeAdapter
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import AnalyticsTableNotFoundError
from app.db.base import get_db
from app.models.analytics_row import AnalyticsRow
from app.schemas.analytics import (
    AnalyticsRowBase,
    AttendanceHistoryRow,
    InterventionRow,
    MarksHistoryRow,
    RiskPredictionRow,
    WellbeingHistoryRow,
)

logger = logging.getLogger(__name__)

DATASET_ID = "student_analytics"

RowT = TypeVar("RowT", bound=AnalyticsRowBase)


class TableName:
    ATTENDANCE       = "attendance_history"
    MARKS            = "marks_history"
    WELLBEING        = "wellbeing_history"
    INTERVENTIONS    = "interventions"
    RISK_PREDICTIONS = "risk_predictions"


TABLE_SCHEMAS: dict[str, type[AnalyticsRowBase]] = {
    TableName.ATTENDANCE: AttendanceHistoryRow,
    TableName.MARKS: MarksHistoryRow,
    TableName.WELLBEING: WellbeingHistoryRow,
    TableName.INTERVENTIONS: InterventionRow,
    TableName.RISK_PREDICTIONS: RiskPredictionRow,
}

# Column each table's history is ordered by (newest first)
_HISTORY_ORDER = {
    TableName.RISK_PREDICTIONS: "prediction_date",
}


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------

class AnalyticsBackend(Protocol):
    def put(self, table: str, rows: list[tuple[str, dict[str, Any]]]) -> int: ...

    def scan(self, table: str, student_id: Optional[str] = None) -> list[dict[str, Any]]: ...


class MemoryAnalyticsBackend:
    def __init__(self):
        self._tables: dict[str, list[tuple[str, dict[str, Any]]]] = defaultdict(list)

    def put(self, table: str, rows: list[tuple[str, dict[str, Any]]]) -> int:
        self._tables[table].extend(rows)
        return len(rows)

    def scan(self, table: str, student_id: Optional[str] = None) -> list[dict[str, Any]]:
        return [
            dict(payload)
            for sid, payload in self._tables.get(table, [])
            if student_id is None or sid == student_id
        ]


class SqlAnalyticsBackend:
    def __init__(self, db: Session):
        self.db = db

    def put(self, table: str, rows: list[tuple[str, dict[str, Any]]]) -> int:
        for student_id, payload in rows:
            self.db.add(AnalyticsRow(
                table_name=table,
                student_id=student_id,
                payload=json.dumps(payload, default=str),
            ))
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return len(rows)

    def scan(self, table: str, student_id: Optional[str] = None) -> list[dict[str, Any]]:
        q = self.db.query(AnalyticsRow).filter(AnalyticsRow.table_name == table)
        if student_id is not None:
            q = q.filter(AnalyticsRow.student_id == student_id)
        return [json.loads(row.payload) for row in q.order_by(AnalyticsRow.id).all()]


# ---------------------------------------------------------------------------
# Typed table
# ---------------------------------------------------------------------------

class AnalyticsTable(Generic[RowT]):
    def __init__(self, name: str, row_type: type[RowT], backend: AnalyticsBackend):
        self.name = name
        self.row_type = row_type
        self.backend = backend

    def insert(self, rows: Iterable[Union[RowT, dict[str, Any]]]) -> int:
        """Validate and append rows. Raises pydantic.ValidationError before writing anything."""
        validated = TypeAdapter(list[self.row_type]).validate_python(
            [r.model_dump() if isinstance(r, self.row_type) else r for r in rows]
        )
        count = self.backend.put(
            self.name,
            [(r.student_id, r.model_dump(mode="json")) for r in validated],
        )
        logger.info(f"Inserted {count} rows into {DATASET_ID}.{self.name}")
        return count

    def query(
        self,
        student_id: Optional[str] = None,
        where: Optional[Callable[[RowT], bool]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[RowT]:
        rows = [self.row_type.model_validate(p) for p in self.backend.scan(self.name, student_id)]
        if where is not None:
            rows = [r for r in rows if where(r)]
        if order_by is not None:
            # rows without a value sort last in either direction
            present = [r for r in rows if getattr(r, order_by) is not None]
            missing = [r for r in rows if getattr(r, order_by) is None]
            present.sort(key=lambda r: getattr(r, order_by), reverse=descending)
            rows = present + missing
        if limit:
            rows = rows[:limit]
        return rows


# ---------------------------------------------------------------------------
# Dataset
# ---------------------------------------------------------------------------

class StudentAnalytics:
    def __init__(self, backend: AnalyticsBackend):
        self.backend = backend
        self._tables = {
            name: AnalyticsTable(name, schema, backend)
            for name, schema in TABLE_SCHEMAS.items()
        }

    def list_tables(self) -> list[str]:
        return list(self._tables)

    def table(self, name: str) -> AnalyticsTable:
        try:
            return self._tables[name]
        except KeyError:
            raise AnalyticsTableNotFoundError(name) from None

    def history(
        self, table: str, student_id: Optional[str] = None, limit: Optional[int] = None
    ) -> list:
        """Rows newest first, for one student or across the whole table."""
        return self.table(table).query(
            student_id=student_id,
            order_by=_HISTORY_ORDER.get(table, "date"),
            descending=True,
            limit=limit,
        )

    def store_risk_prediction(self, prediction: RiskPredictionRow) -> None:
        self.table(TableName.RISK_PREDICTIONS).insert([prediction])

    def calculate_student_features(self, student_id: str) -> dict[str, Any]:
        attendance = self.table(TableName.ATTENDANCE).query(student_id=student_id)
        marks = self.table(TableName.MARKS).query(student_id=student_id)
        wellbeing = self.table(TableName.WELLBEING).query(student_id=student_id)
        interventions = self.table(TableName.INTERVENTIONS).query(student_id=student_id)

        present = sum(1 for r in attendance if r.status == "present")
        avg_attendance = present / len(attendance) * 100 if attendance else 0.0
        avg_marks = (
            sum(r.score / r.max_score * 100 for r in marks) / len(marks) if marks else 0.0
        )

        def _mean(values: list[float]) -> float:
            return sum(values) / len(values) if values else 0.0

        return {
            "student_id": student_id,
            "avg_attendance": avg_attendance,
            "avg_marks": avg_marks,
            "avg_mood": _mean([r.mood_score for r in wellbeing]),
            "avg_stress": _mean([r.stress_level for r in wellbeing]),
            "avg_sleep": _mean([r.sleep_hours for r in wellbeing]),
            "intervention_count": len(interventions),
        }


def get_student_analytics(db: Session = Depends(get_db)) -> StudentAnalytics:
    return StudentAnalytics(SqlAnalyticsBackend(db))
