from __future__ import annotations

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Language(str, Enum):
    """Source languages offered by the courses and the sandbox."""

    PYTHON = "Python"
    JAVA = "Java"
    C = "C"


class Difficulty(str, Enum):
    """Practice project difficulty levels."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class Lesson(BaseModel):
    """Single lesson with instructional HTML, starter code, and a reference solution."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str = Field(..., description="HTML markup shown beside the editor.")
    initial_code: str
    solution_code: str
    language: Language


class Course(BaseModel):
    """Ordered sequence of lessons for one language."""

    model_config = ConfigDict(frozen=True)

    id: str
    language: Language
    title: str
    description: str
    level: str
    color: str = "bg-blue-500"
    icon: str = ""
    lessons: Tuple[Lesson, ...]

    @model_validator(mode="after")
    def check_lessons(self) -> "Course":
        """Require at least one lesson and unique lesson ids within the course."""
        if not self.lessons:
            raise ValueError(f"course {self.id} has no lessons")
        ids = [lesson.id for lesson in self.lessons]
        if len(set(ids)) != len(ids):
            raise ValueError(f"course {self.id} has duplicate lesson ids")
        return self


class Project(BaseModel):
    """Stand-alone practice lab project."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    difficulty: Difficulty
    description: str
    language: Language
    starter_code: str
