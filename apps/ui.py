"""Streamlit front end for softvibe."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import streamlit as st
from dotenv import load_dotenv

from softvibe.app.reducer import DIFFICULTY_FILTERS, LANGUAGE_FILTERS
from softvibe.app.state import CourseView, DashboardView, ProjectDetailView, ProjectListView
from softvibe.catalog import Course
from softvibe.learning import Theme
from softvibe.learning.stats import course_progress, dashboard_stats, weekly_activity
from softvibe.services.learning_service import OFFLINE_BANNER, LearningService
from softvibe.system import SoftvibeSystem

logger = logging.getLogger(__name__)

LANGUAGE_ICONS = {"Python": "🐍", "Java": "☕", "C": "⚡"}
DARK_CSS = """
<style>
.stApp { background-color: #0f172a; color: #e2e8f0; }
</style>
"""


def load_system() -> SoftvibeSystem:
    """One system per browser session, so each learner keeps their own view state."""
    if "softvibe_system" not in st.session_state:
        load_dotenv(override=False)
        st.session_state.softvibe_system = SoftvibeSystem.from_config()
    return st.session_state.softvibe_system


def _rerun_after(callback, *args) -> None:
    callback(*args)
    st.rerun()


def render_sidebar(system: SoftvibeSystem) -> None:
    service = system.service
    with st.sidebar:
        st.header("Session")
        online = service.state.online
        st.caption("🟢 Online" if online else "⚪ Offline Mode")
        simulate_offline = st.toggle("Work offline", value=not online)
        if simulate_offline == online:
            system.connectivity.set_online(not simulate_offline)
            st.rerun()

        theme = service.theme()
        if st.button(f"Switch to {'light' if theme is Theme.DARK else 'dark'} theme"):
            _rerun_after(service.toggle_theme)


def render_dashboard(service: LearningService) -> None:
    st.title("Master Programming")
    st.subheader("One Language at a Time")
    st.write("Learn Python, Java, and C with interactive lessons, hands-on practice, and real-world projects.")

    progress = service.progress
    columns = st.columns(4)
    for column, (label, value) in zip(columns, dashboard_stats(progress).items()):
        column.metric(label, value)

    st.bar_chart({row["name"]: row["hours"] for row in weekly_activity(progress)})

    st.header("📖 Choose Your Path")
    percents = course_progress(service.catalog, progress)
    for column, course in zip(st.columns(len(service.catalog.courses)), service.catalog.courses):
        with column:
            render_course_card(service, course, percents[course.id])

    st.divider()
    st.header("Ready to Start Coding?")
    st.write("Jump into our interactive practice lab and start experimenting with code right away.")
    if st.button("Open Practice Lab", type="primary"):
        _rerun_after(service.open_practice_lab)


def render_course_card(service: LearningService, course: Course, percent: int) -> None:
    st.markdown(f"### {course.icon} {course.title}")
    st.caption(course.level)
    st.write(course.description)
    st.progress(percent / 100, text=f"Progress {percent}%")
    label = "Continue" if percent > 0 else "Start Learning"
    if st.button(label, key=f"start_{course.id}"):
        _rerun_after(service.start_course, course.id)


def render_feedback_panel(service: LearningService, title: str) -> None:
    state = service.state
    if state.tutor_feedback:
        with st.container(border=True):
            st.markdown(f"**💬 {title}**")
            # markdown only; embedded HTML from the model is not rendered
            st.markdown(state.tutor_feedback)


def render_tutor_button(service: LearningService, idle_label: str, busy_label: str) -> None:
    state = service.state
    if not state.online:
        label = "AI Unavailable (Offline)"
    elif state.tutor_loading:
        label = busy_label
    else:
        label = idle_label
    disabled = state.tutor_loading or not state.online
    if st.button(label, disabled=disabled, use_container_width=True):
        with st.spinner(busy_label):
            asyncio.run(service.ask_tutor())
        st.rerun()


def render_editor(service: LearningService, language: str) -> None:
    state = service.state
    # unkeyed widgets pick up code replaced by the service (lesson advance, reveal solution)
    code = st.text_area(f"{language} editor", value=state.code, height=360)
    if code != state.code:
        service.edit_code(code)
    stdin = st.text_input("Standard input", value=state.stdin)
    if stdin != state.stdin:
        service.set_stdin(stdin)

    run_disabled = state.execution_loading
    if st.button("▶ Run Code", disabled=run_disabled):
        with st.spinner("Running..."):
            asyncio.run(service.run_code())
        st.rerun()
    st.caption("OUTPUT TERMINAL")
    st.code(service.state.execution_output or "$ Console ready...", language="text")


def render_course_view(service: LearningService) -> None:
    view = service.state.view
    course = service.current_course()
    lesson = service.current_lesson()
    if course is None or lesson is None or not isinstance(view, CourseView):
        return

    if st.button("← Back"):
        _rerun_after(service.go_back)
    st.markdown(f"## {course.icon} {course.title}")
    st.caption(f"Lesson {view.lesson_index + 1} · {lesson.title}")

    left, right = st.columns([1, 2])
    with left:
        st.markdown(f"# {lesson.title}")
        # lesson markup comes from the packaged catalog
        st.markdown(lesson.content, unsafe_allow_html=True)
        render_feedback_panel(service, "AI Tutor Feedback")
        render_tutor_button(service, "Get AI Help", "Thinking...")
        if st.button("👁 Reveal Solution Code"):
            _rerun_after(service.reveal_solution)

    with right:
        render_editor(service, course.language.value)
        is_last = view.lesson_index == len(course.lessons) - 1
        if st.button("Finish Course" if is_last else "Next Lesson", type="primary"):
            _rerun_after(service.complete_lesson)


def render_project_list(service: LearningService) -> None:
    view = service.state.view
    if not isinstance(view, ProjectListView):
        return
    if st.button("← Back"):
        _rerun_after(service.go_back)
    st.title("Practice Lab")
    st.caption("Real-world challenges to test your skills")

    lang_col, diff_col = st.columns(2)
    lang = lang_col.selectbox("Language", LANGUAGE_FILTERS, index=LANGUAGE_FILTERS.index(view.lang_filter))
    diff = diff_col.selectbox(
        "Difficulty", DIFFICULTY_FILTERS, index=DIFFICULTY_FILTERS.index(view.difficulty_filter)
    )
    if lang != view.lang_filter:
        _rerun_after(service.set_language_filter, lang)
    if diff != view.difficulty_filter:
        _rerun_after(service.set_difficulty_filter, diff)

    projects = service.visible_projects()
    if not projects:
        st.info("No projects found matching your filters.")
        return

    completed = service.progress.completed_project_ids
    for project in projects:
        done = project.id in completed
        with st.container(border=True):
            icon = LANGUAGE_ICONS.get(project.language.value, "")
            st.markdown(f"### {icon} {project.title}" + (" ✅" if done else ""))
            st.write(project.description)
            st.caption(f"{project.language.value} · {project.difficulty.value}")
            if st.button("Review Code" if done else "Start Project", key=f"open_{project.id}"):
                _rerun_after(service.start_project, project.id)


def render_project_detail(service: LearningService) -> None:
    project = service.current_project()
    if project is None:
        return
    state = service.state
    done = project.id in service.progress.completed_project_ids

    top = st.columns([1, 4, 1, 1])
    if top[0].button("← Back"):
        _rerun_after(service.go_back)
    top[1].markdown(f"## {project.title}")
    top[1].caption(f"{project.language.value} · {project.difficulty.value}")
    if top[2].button("💾 Save Draft"):
        _rerun_after(service.save_draft)
    if top[3].button("✔ Completed" if done else "Submit Project", type="primary"):
        _rerun_after(service.submit_project)
    left, right = st.columns([1, 2])
    with left:
        st.subheader("Requirements")
        st.write(project.description)
        st.info(
            "- Break down the problem into small functions.\n"
            "- Use comments to plan your logic.\n"
            "- Check console output for errors."
        )
        render_feedback_panel(service, "AI Assistant")
        render_tutor_button(service, "Ask for a Hint", "Analyzing...")
    with right:
        render_editor(service, project.language.value)


def _render_view(system: SoftvibeSystem) -> None:
    service = system.service
    if service.theme() is Theme.DARK:
        st.markdown(DARK_CSS, unsafe_allow_html=True)
    if not service.state.online:
        st.warning(OFFLINE_BANNER)
    notice = service.take_notice()
    if notice:
        st.toast(notice)

    view = service.state.view
    if isinstance(view, DashboardView):
        render_dashboard(service)
    elif isinstance(view, CourseView):
        render_course_view(service)
    elif isinstance(view, ProjectListView):
        render_project_list(service)
    elif isinstance(view, ProjectDetailView):
        render_project_detail(service)


def render() -> None:
    st.set_page_config(page_title="softvibe", page_icon="💻", layout="wide")
    system: Optional[SoftvibeSystem] = None
    try:
        system = load_system()
        render_sidebar(system)
        _render_view(system)
    except Exception as exc:  # pragma: no cover - last-resort presentation boundary
        logger.exception("Unhandled error while rendering")
        st.title("Something went wrong.")
        st.write("The application encountered an unexpected error.")
        st.code(str(exc), language="text")
        if st.button("Reload Application"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":  # pragma: no cover - streamlit entry
    render()
