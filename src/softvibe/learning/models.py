from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Set


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class UserProgress:
    """Learner's completion record, hours on task, and streak."""

    completed_lesson_ids: Set[str] = field(default_factory=set)
    completed_project_ids: Set[str] = field(default_factory=set)
    hours_learned: float = 0.0
    streak_days: int = 0
    last_login_date: str = field(default_factory=_now_iso)

    def copy(self) -> "UserProgress":
        return replace(
            self,
            completed_lesson_ids=set(self.completed_lesson_ids),
            completed_project_ids=set(self.completed_project_ids),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the storage field names; id lists are sorted for stable output."""
        return {
            "completedLessonIds": sorted(self.completed_lesson_ids),
            "completedProjectIds": sorted(self.completed_project_ids),
            "hoursLearned": self.hours_learned,
            "streakDays": self.streak_days,
            "lastLoginDate": self.last_login_date,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "UserProgress":
        """
        Rebuild a record from its stored form.

        Raises ValueError when the payload does not have the expected shape; callers that
        must never fail are expected to catch it and fall back to a default record.
        """
        if not isinstance(data, dict):
            raise ValueError("progress payload must be an object")
        lessons = data.get("completedLessonIds", [])
        projects = data.get("completedProjectIds", [])
        hours = data.get("hoursLearned", 0.0)
        streak = data.get("streakDays", 0)
        last_login = data.get("lastLoginDate") or _now_iso()

        if not isinstance(lessons, list) or not all(isinstance(item, str) for item in lessons):
            raise ValueError("completedLessonIds must be a list of strings")
        if not isinstance(projects, list) or not all(isinstance(item, str) for item in projects):
            raise ValueError("completedProjectIds must be a list of strings")
        if isinstance(hours, bool) or not isinstance(hours, (int, float)) or hours < 0:
            raise ValueError("hoursLearned must be a non-negative number")
        if isinstance(streak, bool) or not isinstance(streak, int) or streak < 0:
            raise ValueError("streakDays must be a non-negative integer")
        if not isinstance(last_login, str):
            raise ValueError("lastLoginDate must be a string")

        return cls(
            completed_lesson_ids=set(lessons),
            completed_project_ids=set(projects),
            hours_learned=float(hours),
            streak_days=streak,
            last_login_date=last_login,
        )
