"""Immutable application state, user actions, and the side effects they request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from softvibe.catalog import ALL


@dataclass(frozen=True)
class DashboardView:
    kind: str = field(default="dashboard", init=False)


@dataclass(frozen=True)
class CourseView:
    course_id: str
    lesson_index: int = 0
    kind: str = field(default="course", init=False)


@dataclass(frozen=True)
class ProjectListView:
    lang_filter: str = ALL
    difficulty_filter: str = ALL
    kind: str = field(default="project_list", init=False)


@dataclass(frozen=True)
class ProjectDetailView:
    project_id: str
    # list view (with its filters) to return to
    back_to: ProjectListView = ProjectListView()
    kind: str = field(default="project_detail", init=False)


ViewState = Union[DashboardView, CourseView, ProjectListView, ProjectDetailView]


def context_key(view: ViewState) -> str:
    """Identify the view/entity an async request was issued from."""
    if isinstance(view, CourseView):
        return f"course:{view.course_id}:{view.lesson_index}"
    if isinstance(view, ProjectDetailView):
        return f"project:{view.project_id}"
    return view.kind


@dataclass(frozen=True)
class RequestToken:
    """Correlates an in-flight tutor/execution call with the view that issued it."""

    context_key: str
    sequence: int


@dataclass(frozen=True)
class AppState:
    view: ViewState = DashboardView()
    code: str = ""
    stdin: str = ""
    tutor_feedback: Optional[str] = None
    execution_output: Optional[str] = None
    tutor_request: Optional[RequestToken] = None
    execution_request: Optional[RequestToken] = None
    online: bool = True
    notice: Optional[str] = None

    @property
    def tutor_loading(self) -> bool:
        return self.tutor_request is not None

    @property
    def execution_loading(self) -> bool:
        return self.execution_request is not None


# --- Actions ---


@dataclass(frozen=True)
class StartCourse:
    course_id: str


@dataclass(frozen=True)
class CompleteLesson:
    pass


@dataclass(frozen=True)
class RevealSolution:
    pass


@dataclass(frozen=True)
class OpenPracticeLab:
    pass


@dataclass(frozen=True)
class SetLanguageFilter:
    value: str


@dataclass(frozen=True)
class SetDifficultyFilter:
    value: str


@dataclass(frozen=True)
class StartProject:
    project_id: str
    draft: Optional[str] = None


@dataclass(frozen=True)
class SaveDraft:
    pass


@dataclass(frozen=True)
class SubmitProject:
    pass


@dataclass(frozen=True)
class FinishSubmission:
    project_id: str


@dataclass(frozen=True)
class NavigateBack:
    pass


@dataclass(frozen=True)
class GoToDashboard:
    pass


@dataclass(frozen=True)
class EditCode:
    code: str


@dataclass(frozen=True)
class SetStdin:
    text: str


@dataclass(frozen=True)
class TutorRequested:
    token: RequestToken


@dataclass(frozen=True)
class TutorResolved:
    token: RequestToken
    text: str


@dataclass(frozen=True)
class ExecutionRequested:
    token: RequestToken


@dataclass(frozen=True)
class ExecutionResolved:
    token: RequestToken
    text: str


@dataclass(frozen=True)
class ConnectivityChanged:
    online: bool


@dataclass(frozen=True)
class DismissNotice:
    pass


Action = Union[
    StartCourse,
    CompleteLesson,
    RevealSolution,
    OpenPracticeLab,
    SetLanguageFilter,
    SetDifficultyFilter,
    StartProject,
    SaveDraft,
    SubmitProject,
    FinishSubmission,
    NavigateBack,
    GoToDashboard,
    EditCode,
    SetStdin,
    TutorRequested,
    TutorResolved,
    ExecutionRequested,
    ExecutionResolved,
    ConnectivityChanged,
    DismissNotice,
]


# --- Effects ---


@dataclass(frozen=True)
class RecordLessonCompletion:
    lesson_id: str


@dataclass(frozen=True)
class RecordProjectCompletion:
    project_id: str


@dataclass(frozen=True)
class PersistDraft:
    project_id: str
    code: str


@dataclass(frozen=True)
class ClearDraft:
    project_id: str


@dataclass(frozen=True)
class ScheduleAction:
    """Dispatch `action` after `delay_seconds`."""

    action: Action
    delay_seconds: float


Effect = Union[RecordLessonCompletion, RecordProjectCompletion, PersistDraft, ClearDraft, ScheduleAction]


@dataclass(frozen=True)
class Transition:
    state: AppState
    effects: Tuple[Effect, ...] = ()
