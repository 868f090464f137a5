from __future__ import annotations

from typing import Dict, List

from softvibe.catalog import Catalog, course_completion_percent
from softvibe.learning.models import UserProgress

# (day, hours-learned threshold, hours shown once the threshold is passed)
_ACTIVITY_STEPS = [
    ("Mon", 0, 1.5),
    ("Tue", 2, 2.0),
    ("Wed", 5, 3.5),
    ("Thu", 10, 2.0),
    ("Fri", None, 0.0),
    ("Sat", None, 0.0),
    ("Sun", None, 0.0),
]


def dashboard_stats(progress: UserProgress) -> Dict[str, str]:
    """Headline figures shown on the dashboard cards."""
    return {
        "Hours Learned": f"{progress.hours_learned:.1f}",
        "Lessons Completed": str(len(progress.completed_lesson_ids)),
        "Current Streak": f"{progress.streak_days} days",
        "Projects Built": str(len(progress.completed_project_ids)),
    }


def weekly_activity(progress: UserProgress) -> List[Dict[str, float | str]]:
    """Approximate weekly activity bars derived from cumulative hours learned."""
    series: List[Dict[str, float | str]] = []
    for day, threshold, hours in _ACTIVITY_STEPS:
        active = threshold is not None and progress.hours_learned > threshold
        series.append({"name": day, "hours": hours if active else 0.0})
    return series


def course_progress(catalog: Catalog, progress: UserProgress) -> Dict[str, int]:
    """Completion percentage per course id; unknown completed ids are ignored."""
    return {
        course.id: course_completion_percent(course, progress.completed_lesson_ids)
        for course in catalog.courses
    }
