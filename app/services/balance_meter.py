"""
College Life Balance Meter.

A heuristic, not a statistically derived model. Four 0–100 sub-scores:

  attendance  = min(latest attendance %, 100)
  stress      = (5 - stress) * 20        (calmness; 50 when no check-in)
  sleep       = sleep * 20               (50 when no check-in)
  engagement  = % of assignments done    (50 when there are none)

  score = round_half_up(mean of the four)

Status, first match wins (the rules are not commutative):
  1. stress < 40 and score < 60          → overloaded
  2. attendance < 70 and engagement < 50 → under-engaged
  3. otherwise                           → balanced
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Sequence

from app.core.numeric import clamp, round_half_up
from app.schemas.student import Assignment, StudentData, WellBeingScores

DEFAULT_SUBSCORE = 50


class BalanceStatus(str, enum.Enum):
    balanced = "balanced"
    overloaded = "overloaded"
    under_engaged = "under-engaged"


@dataclass
class BalanceBreakdown:
    attendance: float
    stress: float
    sleep: float
    engagement: float


@dataclass
class BalanceMeter:
    score: int
    status: BalanceStatus
    breakdown: BalanceBreakdown


def calculate_balance_meter(
    latest_attendance: Optional[float],
    wellbeing: Optional[WellBeingScores],
    assignments: Sequence[Assignment],
) -> BalanceMeter:
    attendance_score = clamp(latest_attendance or 0, 0, 100)

    if wellbeing is not None:
        stress_score = (5 - wellbeing.stress) * 20
        sleep_score = wellbeing.sleep * 20
    else:
        stress_score = DEFAULT_SUBSCORE
        sleep_score = DEFAULT_SUBSCORE

    if assignments:
        done = sum(1 for a in assignments if a.completed)
        engagement_score = done / len(assignments) * 100
    else:
        engagement_score = DEFAULT_SUBSCORE

    overall = round_half_up(
        (attendance_score + stress_score + sleep_score + engagement_score) / 4
    )

    if stress_score < 40 and overall < 60:
        status = BalanceStatus.overloaded
    elif attendance_score < 70 and engagement_score < 50:
        status = BalanceStatus.under_engaged
    else:
        status = BalanceStatus.balanced

    return BalanceMeter(
        score=overall,
        status=status,
        breakdown=BalanceBreakdown(
            attendance=attendance_score,
            stress=stress_score,
            sleep=sleep_score,
            engagement=round(engagement_score, 2),
        ),
    )


def balance_meter_for(data: StudentData) -> BalanceMeter:
    latest = data.latest_attendance()
    return calculate_balance_meter(
        latest.percentage if latest else None,
        data.latest_wellbeing(),
        data.assignments,
    )
