"""Tests for the pure view-controller transitions."""

from __future__ import annotations

import pytest

from softvibe.app import (
    AppState,
    CourseView,
    DashboardView,
    ProjectDetailView,
    ProjectListView,
    RequestToken,
    context_key,
    reduce,
)
from softvibe.app.reducer import PROJECT_SUBMITTED_NOTICE
from softvibe.app.state import (
    ClearDraft,
    CompleteLesson,
    EditCode,
    FinishSubmission,
    NavigateBack,
    OpenPracticeLab,
    PersistDraft,
    RecordLessonCompletion,
    RecordProjectCompletion,
    RevealSolution,
    SaveDraft,
    ScheduleAction,
    SetDifficultyFilter,
    SetLanguageFilter,
    StartCourse,
    StartProject,
    SubmitProject,
    TutorRequested,
    TutorResolved,
)
from softvibe.learning import UserProgress


def step(state, action, catalog, progress=None):
    return reduce(state, action, catalog, progress or UserProgress(), submit_delay=0.5)


def test_start_course_resumes_at_first_unfinished(catalog):
    state = AppState(tutor_feedback="old hint", execution_output="old output")
    progress = UserProgress(completed_lesson_ids={"py_1"})

    result = step(state, StartCourse("course_py"), catalog, progress)

    assert result.state.view == CourseView("course_py", 1)
    assert result.state.code == "# start py_2\n"
    assert result.state.tutor_feedback is None
    assert result.state.execution_output is None
    assert result.effects == ()


@pytest.mark.parametrize("completed", [set(), {"py_1", "py_2"}])
def test_start_course_defaults_to_first_lesson(catalog, completed):
    progress = UserProgress(completed_lesson_ids=completed)
    result = step(AppState(), StartCourse("course_py"), catalog, progress)
    assert result.state.view == CourseView("course_py", 0)


def test_complete_lesson_advances_and_reseeds(catalog):
    state = AppState(view=CourseView("course_py", 0), code="edited", tutor_feedback="hint")

    result = step(state, CompleteLesson(), catalog)

    assert result.effects == (RecordLessonCompletion("py_1"),)
    assert result.state.view == CourseView("course_py", 1)
    assert result.state.code == "# start py_2\n"
    assert result.state.tutor_feedback is None


def test_complete_last_lesson_returns_to_dashboard(catalog):
    state = AppState(view=CourseView("course_py", 1))
    result = step(state, CompleteLesson(), catalog)
    assert result.effects == (RecordLessonCompletion("py_2"),)
    assert result.state.view == DashboardView()


def test_complete_lesson_outside_course_is_ignored(catalog):
    state = AppState()
    result = step(state, CompleteLesson(), catalog)
    assert result.state is state
    assert result.effects == ()


def test_reveal_solution_replaces_code(catalog):
    state = AppState(view=CourseView("course_py", 0), code="mine")
    assert step(state, RevealSolution(), catalog).state.code == "print('py_1')"


def test_practice_lab_resets_filters(catalog):
    state = AppState()
    result = step(state, OpenPracticeLab(), catalog)
    assert result.state.view == ProjectListView("All", "All")

    filtered = step(result.state, SetLanguageFilter("Python"), catalog).state
    filtered = step(filtered, SetDifficultyFilter("Advanced"), catalog).state
    assert filtered.view == ProjectListView("Python", "Advanced")

    back = step(filtered, NavigateBack(), catalog).state
    assert step(back, OpenPracticeLab(), catalog).state.view == ProjectListView()


def test_unknown_filter_value_rejected(catalog):
    state = AppState(view=ProjectListView())
    with pytest.raises(ValueError):
        step(state, SetLanguageFilter("Rust"), catalog)


def test_start_project_prefers_draft(catalog):
    listing = AppState(view=ProjectListView("Python", "All"))

    fresh = step(listing, StartProject("proj_py_easy"), catalog).state
    assert fresh.code == "import csv\n"

    resumed = step(listing, StartProject("proj_py_easy", draft="import csv  # wip"), catalog).state
    assert resumed.code == "import csv  # wip"
    assert resumed.view == ProjectDetailView("proj_py_easy", back_to=ProjectListView("Python", "All"))


def test_save_draft_requests_persistence(catalog):
    state = AppState(view=ProjectDetailView("proj_c"), code="int main;")
    result = step(state, SaveDraft(), catalog)
    assert result.effects == (PersistDraft("proj_c", "int main;"),)
    assert result.state.notice


def test_submit_records_clears_and_schedules_return(catalog):
    back_to = ProjectListView("C", "All")
    state = AppState(view=ProjectDetailView("proj_c", back_to=back_to))

    result = step(state, SubmitProject(), catalog)

    assert result.effects == (
        RecordProjectCompletion("proj_c"),
        ClearDraft("proj_c"),
        ScheduleAction(FinishSubmission("proj_c"), 0.5),
    )
    assert result.state.view == state.view

    finished = step(result.state, FinishSubmission("proj_c"), catalog).state
    assert finished.view == back_to
    assert finished.notice == PROJECT_SUBMITTED_NOTICE


def test_finish_submission_ignored_after_navigation(catalog):
    state = AppState(view=DashboardView())
    assert step(state, FinishSubmission("proj_c"), catalog).state is state


def test_back_navigation_has_no_effects(catalog):
    course = AppState(view=CourseView("course_py", 1))
    result = step(course, NavigateBack(), catalog)
    assert result.state.view == DashboardView()
    assert result.effects == ()

    detail = AppState(view=ProjectDetailView("proj_c"))
    assert step(detail, NavigateBack(), catalog).state.view == ProjectListView()


def test_stale_tutor_response_is_discarded(catalog):
    state = step(AppState(), StartCourse("course_py"), catalog).state
    token = RequestToken(context_key(state.view), 1)
    state = step(state, TutorRequested(token), catalog).state
    assert state.tutor_loading

    # learner moves on before the response arrives
    state = step(state, CompleteLesson(), catalog).state
    assert not state.tutor_loading

    late = step(state, TutorResolved(token, "late hint"), catalog).state
    assert late.tutor_feedback is None


def test_second_tutor_request_refused_while_in_flight(catalog):
    state = AppState(view=CourseView("course_py", 0))
    first = RequestToken(context_key(state.view), 1)
    second = RequestToken(context_key(state.view), 2)

    state = step(state, TutorRequested(first), catalog).state
    assert step(state, TutorRequested(second), catalog).state.tutor_request == first

    state = step(state, TutorResolved(first, "hint"), catalog).state
    assert state.tutor_feedback == "hint"
    assert not state.tutor_loading


def test_edit_code_only_touches_buffer(catalog):
    state = AppState(view=CourseView("course_py", 0), tutor_feedback="keep")
    edited = step(state, EditCode("x = 1"), catalog).state
    assert edited.code == "x = 1"
    assert edited.tutor_feedback == "keep"


def test_unknown_action_type(catalog):
    with pytest.raises(TypeError):
        step(AppState(), object(), catalog)
