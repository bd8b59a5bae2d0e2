from .student_document import StudentDocument
from .analytics_row import AnalyticsRow
from .user import User
from .skill import Skill
from .mentor_assignment import MentorAssignment

__all__ = [
    "StudentDocument",
    "AnalyticsRow",
    "User",
    "Skill",
    "MentorAssignment",
]
