from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from .models import Course, Project

ALL = "All"
PACKAGED_CATALOG = "catalog.yaml"


class _CatalogFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    courses: Tuple[Course, ...]
    projects: Tuple[Project, ...] = ()


class Catalog:
    """
    Read-only registry of courses and practice projects.

    Course order and lesson order are preserved exactly as loaded; the lesson order
    defines curriculum progression. Project ids must be unique across the catalog.
    """

    def __init__(self, courses: Sequence[Course], projects: Sequence[Project]):
        self._courses: Tuple[Course, ...] = tuple(courses)
        self._projects: Tuple[Project, ...] = tuple(projects)
        self._courses_by_id: Dict[str, Course] = {course.id: course for course in self._courses}
        self._projects_by_id: Dict[str, Project] = {project.id: project for project in self._projects}
        if len(self._courses_by_id) != len(self._courses):
            raise ValueError("duplicate course ids in catalog")
        if len(self._projects_by_id) != len(self._projects):
            raise ValueError("duplicate project ids in catalog")

    @property
    def courses(self) -> Tuple[Course, ...]:
        return self._courses

    @property
    def projects(self) -> Tuple[Project, ...]:
        return self._projects

    def get_course(self, course_id: str) -> Course:
        """Return the course with `course_id`; raise KeyError when it is unknown."""
        try:
            return self._courses_by_id[course_id]
        except KeyError:
            raise KeyError(f"Unknown course: {course_id}") from None

    def get_project(self, project_id: str) -> Project:
        """Return the project with `project_id`; raise KeyError when it is unknown."""
        try:
            return self._projects_by_id[project_id]
        except KeyError:
            raise KeyError(f"Unknown project: {project_id}") from None

    def filter_projects(self, language: str = ALL, difficulty: str = ALL) -> List[Project]:
        """
        Return projects matching both filters, in catalog order.

        A filter value of "All" matches every project; any other value must equal the
        project's language (or difficulty) tag exactly.
        """
        return [
            project
            for project in self._projects
            if (language == ALL or project.language.value == language)
            and (difficulty == ALL or project.difficulty.value == difficulty)
        ]


def course_completion_percent(course: Course, completed_lesson_ids: Iterable[str]) -> int:
    """Share of the course's lessons already completed, rounded to a whole percent."""
    completed = set(completed_lesson_ids)
    done = sum(1 for lesson in course.lessons if lesson.id in completed)
    return round(done / len(course.lessons) * 100)


def load_catalog(path: Optional[Path] = None) -> Catalog:
    """
    Load and validate the catalog YAML.

    Without a path the catalog shipped inside the package is used. Validation errors are
    re-raised as ValueError naming the offending source.
    """
    if path is None:
        source = resources.files("softvibe.catalog").joinpath("data").joinpath(PACKAGED_CATALOG)
        label = f"packaged {PACKAGED_CATALOG}"
        raw = source.read_text(encoding="utf-8")
    else:
        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")
        label = str(path)
        raw = path.read_text(encoding="utf-8")

    data = yaml.safe_load(raw) or {}
    try:
        parsed = _CatalogFile.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid catalog in {label}: {exc}") from exc
    return Catalog(parsed.courses, parsed.projects)
