"""
Pure view-controller transitions.

`reduce` maps the current `AppState` and one action to the next state plus the side
effects the caller must perform (persisting completions and drafts, scheduling delayed
navigation). It never touches storage or the network itself. Actions that do not apply
to the current view leave the state unchanged and request no effects.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Type

from softvibe.app.state import (
    Action,
    AppState,
    ClearDraft,
    CompleteLesson,
    ConnectivityChanged,
    CourseView,
    DashboardView,
    DismissNotice,
    EditCode,
    ExecutionRequested,
    ExecutionResolved,
    FinishSubmission,
    GoToDashboard,
    NavigateBack,
    OpenPracticeLab,
    PersistDraft,
    ProjectDetailView,
    ProjectListView,
    RecordLessonCompletion,
    RecordProjectCompletion,
    RevealSolution,
    SaveDraft,
    ScheduleAction,
    SetDifficultyFilter,
    SetLanguageFilter,
    SetStdin,
    StartCourse,
    StartProject,
    SubmitProject,
    Transition,
    TutorRequested,
    TutorResolved,
    ViewState,
    context_key,
)
from softvibe.catalog import ALL, Catalog, Course, Difficulty, Language
from softvibe.learning.models import UserProgress

DRAFT_SAVED_NOTICE = "Progress saved locally!"
PROJECT_SUBMITTED_NOTICE = "Project submitted!"

LANGUAGE_FILTERS = (ALL, *(language.value for language in Language))
DIFFICULTY_FILTERS = (ALL, *(difficulty.value for difficulty in Difficulty))


class _Context:
    def __init__(self, catalog: Catalog, progress: UserProgress, submit_delay: float):
        self.catalog = catalog
        self.progress = progress
        self.submit_delay = submit_delay


def first_unfinished_lesson(course: Course, completed_lesson_ids: set[str]) -> int:
    """Index of the first lesson not yet completed, or 0 when none remain."""
    for index, lesson in enumerate(course.lessons):
        if lesson.id not in completed_lesson_ids:
            return index
    return 0


def _enter(state: AppState, view: ViewState, code: str | None = None) -> AppState:
    """Switch view, dropping panel output and in-flight request tokens from the old context."""
    return replace(
        state,
        view=view,
        code=state.code if code is None else code,
        tutor_feedback=None,
        execution_output=None,
        tutor_request=None,
        execution_request=None,
        notice=None,
    )


def _unchanged(state: AppState) -> Transition:
    return Transition(state)


def _start_course(state: AppState, action: StartCourse, ctx: _Context) -> Transition:
    course = ctx.catalog.get_course(action.course_id)
    index = first_unfinished_lesson(course, ctx.progress.completed_lesson_ids)
    view = CourseView(course_id=course.id, lesson_index=index)
    return Transition(_enter(state, view, code=course.lessons[index].initial_code))


def _complete_lesson(state: AppState, action: CompleteLesson, ctx: _Context) -> Transition:
    view = state.view
    if not isinstance(view, CourseView):
        return _unchanged(state)
    course = ctx.catalog.get_course(view.course_id)
    effects = (RecordLessonCompletion(course.lessons[view.lesson_index].id),)
    next_index = view.lesson_index + 1
    if next_index < len(course.lessons):
        next_view = replace(view, lesson_index=next_index)
        return Transition(_enter(state, next_view, code=course.lessons[next_index].initial_code), effects)
    return Transition(_enter(state, DashboardView()), effects)


def _reveal_solution(state: AppState, action: RevealSolution, ctx: _Context) -> Transition:
    view = state.view
    if not isinstance(view, CourseView):
        return _unchanged(state)
    lesson = ctx.catalog.get_course(view.course_id).lessons[view.lesson_index]
    return Transition(replace(state, code=lesson.solution_code))


def _open_practice_lab(state: AppState, action: OpenPracticeLab, ctx: _Context) -> Transition:
    return Transition(_enter(state, ProjectListView()))


def _set_language_filter(state: AppState, action: SetLanguageFilter, ctx: _Context) -> Transition:
    if action.value not in LANGUAGE_FILTERS:
        raise ValueError(f"Unknown language filter: {action.value}")
    if not isinstance(state.view, ProjectListView):
        return _unchanged(state)
    return Transition(replace(state, view=replace(state.view, lang_filter=action.value)))


def _set_difficulty_filter(state: AppState, action: SetDifficultyFilter, ctx: _Context) -> Transition:
    if action.value not in DIFFICULTY_FILTERS:
        raise ValueError(f"Unknown difficulty filter: {action.value}")
    if not isinstance(state.view, ProjectListView):
        return _unchanged(state)
    return Transition(replace(state, view=replace(state.view, difficulty_filter=action.value)))


def _start_project(state: AppState, action: StartProject, ctx: _Context) -> Transition:
    project = ctx.catalog.get_project(action.project_id)
    back_to = state.view if isinstance(state.view, ProjectListView) else ProjectListView()
    code = action.draft if action.draft else project.starter_code
    return Transition(_enter(state, ProjectDetailView(project_id=project.id, back_to=back_to), code=code))


def _save_draft(state: AppState, action: SaveDraft, ctx: _Context) -> Transition:
    view = state.view
    if not isinstance(view, ProjectDetailView):
        return _unchanged(state)
    return Transition(
        replace(state, notice=DRAFT_SAVED_NOTICE),
        (PersistDraft(view.project_id, state.code),),
    )


def _submit_project(state: AppState, action: SubmitProject, ctx: _Context) -> Transition:
    view = state.view
    if not isinstance(view, ProjectDetailView):
        return _unchanged(state)
    effects = (
        RecordProjectCompletion(view.project_id),
        ClearDraft(view.project_id),
        ScheduleAction(FinishSubmission(view.project_id), ctx.submit_delay),
    )
    return Transition(replace(state, notice=PROJECT_SUBMITTED_NOTICE), effects)


def _finish_submission(state: AppState, action: FinishSubmission, ctx: _Context) -> Transition:
    view = state.view
    # the learner may have navigated away during the feedback delay
    if not isinstance(view, ProjectDetailView) or view.project_id != action.project_id:
        return _unchanged(state)
    # the submit notice outlives the view change so the list can still show it
    return Transition(replace(_enter(state, view.back_to), notice=state.notice))


def _navigate_back(state: AppState, action: NavigateBack, ctx: _Context) -> Transition:
    view = state.view
    if isinstance(view, ProjectDetailView):
        return Transition(_enter(state, view.back_to))
    if isinstance(view, (CourseView, ProjectListView)):
        return Transition(_enter(state, DashboardView()))
    return _unchanged(state)


def _go_to_dashboard(state: AppState, action: GoToDashboard, ctx: _Context) -> Transition:
    if isinstance(state.view, DashboardView):
        return _unchanged(state)
    return Transition(_enter(state, DashboardView()))


def _edit_code(state: AppState, action: EditCode, ctx: _Context) -> Transition:
    return Transition(replace(state, code=action.code))


def _set_stdin(state: AppState, action: SetStdin, ctx: _Context) -> Transition:
    return Transition(replace(state, stdin=action.text))


def _tutor_requested(state: AppState, action: TutorRequested, ctx: _Context) -> Transition:
    if state.tutor_request is not None or action.token.context_key != context_key(state.view):
        return _unchanged(state)
    return Transition(replace(state, tutor_request=action.token, tutor_feedback=None))


def _tutor_resolved(state: AppState, action: TutorResolved, ctx: _Context) -> Transition:
    if state.tutor_request != action.token:
        return _unchanged(state)
    return Transition(replace(state, tutor_request=None, tutor_feedback=action.text))


def _execution_requested(state: AppState, action: ExecutionRequested, ctx: _Context) -> Transition:
    if state.execution_request is not None or action.token.context_key != context_key(state.view):
        return _unchanged(state)
    return Transition(replace(state, execution_request=action.token, execution_output=None))


def _execution_resolved(state: AppState, action: ExecutionResolved, ctx: _Context) -> Transition:
    if state.execution_request != action.token:
        return _unchanged(state)
    return Transition(replace(state, execution_request=None, execution_output=action.text))


def _connectivity_changed(state: AppState, action: ConnectivityChanged, ctx: _Context) -> Transition:
    return Transition(replace(state, online=action.online))


def _dismiss_notice(state: AppState, action: DismissNotice, ctx: _Context) -> Transition:
    return Transition(replace(state, notice=None))


_HANDLERS: Dict[Type, Callable[[AppState, Action, _Context], Transition]] = {
    StartCourse: _start_course,
    CompleteLesson: _complete_lesson,
    RevealSolution: _reveal_solution,
    OpenPracticeLab: _open_practice_lab,
    SetLanguageFilter: _set_language_filter,
    SetDifficultyFilter: _set_difficulty_filter,
    StartProject: _start_project,
    SaveDraft: _save_draft,
    SubmitProject: _submit_project,
    FinishSubmission: _finish_submission,
    NavigateBack: _navigate_back,
    GoToDashboard: _go_to_dashboard,
    EditCode: _edit_code,
    SetStdin: _set_stdin,
    TutorRequested: _tutor_requested,
    TutorResolved: _tutor_resolved,
    ExecutionRequested: _execution_requested,
    ExecutionResolved: _execution_resolved,
    ConnectivityChanged: _connectivity_changed,
    DismissNotice: _dismiss_notice,
}


def reduce(
    state: AppState,
    action: Action,
    catalog: Catalog,
    progress: UserProgress,
    submit_delay: float = 0.5,
) -> Transition:
    """Return the state following `action` together with the effects it requests."""
    try:
        handler = _HANDLERS[type(action)]
    except KeyError:
        raise TypeError(f"Unsupported action: {action!r}") from None
    return handler(state, action, _Context(catalog, progress, submit_delay))
