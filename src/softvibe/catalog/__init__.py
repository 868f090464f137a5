from .models import Course, Difficulty, Language, Lesson, Project
from .registry import ALL, Catalog, course_completion_percent, load_catalog

__all__ = [
    "ALL",
    "Catalog",
    "Course",
    "Difficulty",
    "Language",
    "Lesson",
    "Project",
    "course_completion_percent",
    "load_catalog",
]
