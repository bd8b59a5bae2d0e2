"""
Personalised tips shown after a well-being check-in.
"""
from __future__ import annotations

from app.schemas.student import CheckInTip, WellBeingScores

MAX_TIPS = 3


def tips_for_checkin(record: WellBeingScores) -> list[CheckInTip]:
    tips: list[CheckInTip] = []

    if record.stress > 3:
        tips.append(CheckInTip(
            title="Quick Breathing",
            description="Try 4-7-8 breathing: inhale 4s, hold 7s, exhale 8s. Repeat 3 times.",
            category="stress",
        ))
    if record.sleep < 3:
        tips.append(CheckInTip(
            title="Sleep Hygiene",
            description="Aim for 7-8 hours. Avoid screens 30 mins before bed.",
            category="sleep",
        ))
    if record.motivation < 3:
        tips.append(CheckInTip(
            title="Pomodoro Technique",
            description="Study 25 mins, break 5 mins. Makes tasks feel manageable!",
            category="motivation",
        ))
    if record.mood < 3:
        tips.append(CheckInTip(
            title="Self-Care Moment",
            description="Take a short walk or listen to your favorite song. Small joys matter!",
            category="mood",
        ))

    if not tips:
        tips.append(CheckInTip(
            title="You're Doing Great!",
            description="Keep up the positive momentum. Consider sharing your strategies with peers!",
            category="general",
        ))

    return tips[:MAX_TIPS]
