"""Service layer between the UI and the learner state, stores, and network clients.

The UI calls methods here instead of touching the reducer, stores, or clients directly.
All state changes go through `dispatch`, which runs the pure reducer and then performs
the persistence effects it requested.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Callable, List, Optional, Tuple

from softvibe.agents.tutor import TutorClient
from softvibe.app.reducer import reduce
from softvibe.app.state import (
    Action,
    AppState,
    ClearDraft,
    CompleteLesson,
    ConnectivityChanged,
    CourseView,
    DismissNotice,
    EditCode,
    Effect,
    ExecutionRequested,
    ExecutionResolved,
    GoToDashboard,
    NavigateBack,
    OpenPracticeLab,
    PersistDraft,
    ProjectDetailView,
    ProjectListView,
    RecordLessonCompletion,
    RecordProjectCompletion,
    RequestToken,
    RevealSolution,
    SaveDraft,
    ScheduleAction,
    SetDifficultyFilter,
    SetLanguageFilter,
    SetStdin,
    StartCourse,
    StartProject,
    SubmitProject,
    TutorRequested,
    TutorResolved,
    context_key,
)
from softvibe.catalog import Catalog, Course, Lesson, Project
from softvibe.config.schema import SessionConfig
from softvibe.connectivity import ConnectivityMonitor
from softvibe.errors import CredentialMissingError, SoftvibeError, TutorUnavailableError
from softvibe.learning import DraftStore, ProgressStore, Theme, ThemeStore, UserProgress
from softvibe.sandbox import ExecutionClient

logger = logging.getLogger(__name__)

OFFLINE_BANNER = "You are currently offline. Progress will be saved locally. AI features are disabled."
OFFLINE_TUTOR_MESSAGE = "AI assistance is unavailable while you are offline. Reconnect to ask the tutor."
OFFLINE_EXECUTION_MESSAGE = "Code execution requires an internet connection. Reconnect to run your code."
CREDENTIAL_MISSING_MESSAGE = (
    "AI assistance is currently unavailable because the API key is missing. "
    "Please check your configuration."
)
TUTOR_UNAVAILABLE_MESSAGE = (
    "Sorry, I'm having trouble connecting to the AI tutor right now. Please check your connection."
)
UNEXPECTED_ERROR_MESSAGE = "Something went wrong while handling this request."


class LearningService:
    """Owns the current AppState and coordinates stores, clients, and connectivity."""

    def __init__(
        self,
        catalog: Catalog,
        progress_store: ProgressStore,
        draft_store: DraftStore,
        tutor: TutorClient,
        executor: ExecutionClient,
        connectivity: Optional[ConnectivityMonitor] = None,
        theme_store: Optional[ThemeStore] = None,
        session_config: Optional[SessionConfig] = None,
    ):
        self.catalog = catalog
        self.progress_store = progress_store
        self.draft_store = draft_store
        self.tutor = tutor
        self.executor = executor
        self.connectivity = connectivity or ConnectivityMonitor()
        self.theme_store = theme_store
        self.session_config = session_config or SessionConfig()
        self._sequence = itertools.count(1)
        self._state = AppState(online=self.connectivity.is_online)
        self._unsubscribe = self.connectivity.subscribe(self._on_connectivity_change)

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def progress(self) -> UserProgress:
        return self.progress_store.snapshot()

    def close(self) -> None:
        """Detach from the connectivity monitor."""
        self._unsubscribe()

    # --- dispatch ---

    def dispatch(self, action: Action) -> AppState:
        transition = reduce(
            self._state,
            action,
            self.catalog,
            self.progress_store.snapshot(),
            submit_delay=self.session_config.submit_delay_seconds,
        )
        self._state = transition.state
        self._apply(transition.effects)
        return self._state

    def _apply(self, effects: Tuple[Effect, ...]) -> None:
        for effect in effects:
            if isinstance(effect, RecordLessonCompletion):
                self.progress_store.record_lesson_completion(effect.lesson_id)
            elif isinstance(effect, RecordProjectCompletion):
                self.progress_store.record_project_completion(effect.project_id)
            elif isinstance(effect, PersistDraft):
                self.draft_store.save_draft(effect.project_id, effect.code)
            elif isinstance(effect, ClearDraft):
                self.draft_store.clear_draft(effect.project_id)
            elif isinstance(effect, ScheduleAction):
                self._schedule(effect)
            else:
                raise TypeError(f"Unsupported effect: {effect!r}")

    def _schedule(self, effect: ScheduleAction) -> None:
        """Dispatch later on the running loop; without one (or without a delay) dispatch now."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is None or effect.delay_seconds <= 0:
            self.dispatch(effect.action)
            return
        loop.call_later(effect.delay_seconds, self.dispatch, effect.action)

    def _on_connectivity_change(self, online: bool) -> None:
        self.dispatch(ConnectivityChanged(online))

    # --- lookups for the current view ---

    def current_course(self) -> Optional[Course]:
        view = self._state.view
        if isinstance(view, CourseView):
            return self.catalog.get_course(view.course_id)
        return None

    def current_lesson(self) -> Optional[Lesson]:
        view = self._state.view
        course = self.current_course()
        if course is None or not isinstance(view, CourseView):
            return None
        return course.lessons[view.lesson_index]

    def current_project(self) -> Optional[Project]:
        view = self._state.view
        if isinstance(view, ProjectDetailView):
            return self.catalog.get_project(view.project_id)
        return None

    def visible_projects(self) -> List[Project]:
        """Projects passing the current list filters (all projects outside the list view)."""
        view = self._state.view
        if isinstance(view, ProjectListView):
            return self.catalog.filter_projects(view.lang_filter, view.difficulty_filter)
        return list(self.catalog.projects)

    # --- user gestures ---

    def start_course(self, course_id: str) -> AppState:
        return self.dispatch(StartCourse(course_id))

    def complete_lesson(self) -> AppState:
        return self.dispatch(CompleteLesson())

    def reveal_solution(self) -> AppState:
        return self.dispatch(RevealSolution())

    def open_practice_lab(self) -> AppState:
        return self.dispatch(OpenPracticeLab())

    def set_language_filter(self, value: str) -> AppState:
        return self.dispatch(SetLanguageFilter(value))

    def set_difficulty_filter(self, value: str) -> AppState:
        return self.dispatch(SetDifficultyFilter(value))

    def start_project(self, project_id: str) -> AppState:
        return self.dispatch(StartProject(project_id, draft=self.draft_store.load_draft(project_id)))

    def save_draft(self) -> AppState:
        return self.dispatch(SaveDraft())

    def submit_project(self) -> AppState:
        return self.dispatch(SubmitProject())

    def go_back(self) -> AppState:
        return self.dispatch(NavigateBack())

    def go_to_dashboard(self) -> AppState:
        return self.dispatch(GoToDashboard())

    def edit_code(self, code: str) -> AppState:
        return self.dispatch(EditCode(code))

    def set_stdin(self, text: str) -> AppState:
        return self.dispatch(SetStdin(text))

    def dismiss_notice(self) -> AppState:
        return self.dispatch(DismissNotice())

    def take_notice(self) -> Optional[str]:
        """Return the pending one-line notice, if any, and clear it so it is shown once."""
        notice = self._state.notice
        if notice is not None:
            self.dismiss_notice()
        return notice

    def theme(self) -> Theme:
        return self.theme_store.get_theme() if self.theme_store else Theme.LIGHT

    def toggle_theme(self) -> Theme:
        if self.theme_store is None:
            raise RuntimeError("No theme store configured for this service")
        return self.theme_store.toggle()

    # --- network-backed gestures ---

    def _active_context(self) -> Optional[Tuple[str, str]]:
        """(context text, language tag) for the lesson or project on screen."""
        lesson = self.current_lesson()
        if lesson is not None:
            return lesson.content, lesson.language.value
        project = self.current_project()
        if project is not None:
            return project.description, project.language.value
        return None

    def _new_token(self) -> RequestToken:
        return RequestToken(context_key(self._state.view), next(self._sequence))

    async def _correlated(
        self,
        requested: Callable[[RequestToken], Action],
        resolved: Callable[[RequestToken, str], Action],
        in_flight: Optional[RequestToken],
        offline_message: str,
        call: Callable[[], str],
    ) -> Optional[str]:
        if in_flight is not None:
            logger.debug("Ignoring request while one is already in flight")
            return None
        token = self._new_token()
        self.dispatch(requested(token))
        if not self.connectivity.is_online:
            self.dispatch(resolved(token, offline_message))
            return offline_message

        text = UNEXPECTED_ERROR_MESSAGE
        try:
            text = await asyncio.to_thread(call)
        except CredentialMissingError as exc:
            logger.warning("Tutor credential missing: %s", exc)
            text = CREDENTIAL_MISSING_MESSAGE
        except TutorUnavailableError as exc:
            logger.warning("Tutor unavailable: %s", exc)
            text = TUTOR_UNAVAILABLE_MESSAGE
        except SoftvibeError as exc:
            logger.warning("Request failed: %s", exc)
            text = str(exc)
        finally:
            # stale tokens are dropped by the reducer
            self.dispatch(resolved(token, text))
        return text

    async def ask_tutor(self) -> Optional[str]:
        """
        Ask the tutor about the code on screen.

        Returns the text placed in the feedback panel, the fixed offline message when
        offline (no request is made), or None when there is nothing to ask about or a
        tutor request is already in flight.
        """
        active = self._active_context()
        if active is None:
            return None
        context, language = active
        code = self._state.code
        return await self._correlated(
            TutorRequested,
            TutorResolved,
            self._state.tutor_request,
            OFFLINE_TUTOR_MESSAGE,
            lambda: self.tutor.ask_tutor(code, context, language),
        )

    async def run_code(self) -> Optional[str]:
        """Execute the code on screen in the sandbox; offline handling mirrors `ask_tutor`."""
        active = self._active_context()
        if active is None:
            return None
        _, language = active
        code = self._state.code
        stdin = self._state.stdin
        return await self._correlated(
            ExecutionRequested,
            ExecutionResolved,
            self._state.execution_request,
            OFFLINE_EXECUTION_MESSAGE,
            lambda: self.executor.execute(code, language, stdin),
        )
