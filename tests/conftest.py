"""Shared fixtures: a small in-memory catalog, stores, and fake network backends."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from softvibe.agents import LLMClient, TutorClient
from softvibe.catalog import Catalog, Course, Difficulty, Language, Lesson, Project
from softvibe.config.schema import SandboxConfig, SessionConfig, TutorConfig
from softvibe.connectivity import ConnectivityMonitor
from softvibe.learning import DraftStore, ProgressStore, ThemeStore
from softvibe.sandbox import ExecutionClient
from softvibe.services import LearningService
from softvibe.storage import MemoryStorage


def _lesson(lesson_id: str, language: Language = Language.PYTHON) -> Lesson:
    return Lesson(
        id=lesson_id,
        title=f"Lesson {lesson_id}",
        content=f"<h3>{lesson_id}</h3><p>Practice <code>print()</code>.</p>",
        initial_code=f"# start {lesson_id}\n",
        solution_code=f"print('{lesson_id}')",
        language=language,
    )


@pytest.fixture
def catalog() -> Catalog:
    courses = [
        Course(
            id="course_py",
            language=Language.PYTHON,
            title="Python",
            description="Python basics",
            level="Beginner Level",
            lessons=(_lesson("py_1"), _lesson("py_2")),
        ),
        Course(
            id="course_java",
            language=Language.JAVA,
            title="Java",
            description="Java basics",
            level="Intermediate Level",
            lessons=(_lesson("java_1", Language.JAVA),),
        ),
    ]
    projects = [
        Project(
            id="proj_py_easy",
            title="CSV Average",
            difficulty=Difficulty.BEGINNER,
            description="Average a <b>column</b>.",
            language=Language.PYTHON,
            starter_code="import csv\n",
        ),
        Project(
            id="proj_py_hard",
            title="Interpreter",
            difficulty=Difficulty.ADVANCED,
            description="Write a tiny interpreter.",
            language=Language.PYTHON,
            starter_code="def evaluate(src):\n    pass\n",
        ),
        Project(
            id="proj_java",
            title="Library",
            difficulty=Difficulty.INTERMEDIATE,
            description="Model books and loans.",
            language=Language.JAVA,
            starter_code="public class Library {}",
        ),
        Project(
            id="proj_c",
            title="Allocator",
            difficulty=Difficulty.ADVANCED,
            description="Implement malloc.",
            language=Language.C,
            starter_code="int main() { return 0; }",
        ),
    ]
    return Catalog(courses, projects)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def progress_store(storage) -> ProgressStore:
    return ProgressStore(storage)


@pytest.fixture
def draft_store(storage) -> DraftStore:
    return DraftStore(storage)


class FakeCompletions:
    """Stands in for `OpenAI().chat.completions`."""

    def __init__(self, reply: str = "Try using `print`.", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def create(self, messages, **params):
        self.calls.append({"messages": messages, **params})
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, completions: FakeCompletions):
        self.chat = SimpleNamespace(completions=completions)


@pytest.fixture
def completions() -> FakeCompletions:
    return FakeCompletions()


@pytest.fixture
def tutor(completions) -> TutorClient:
    return TutorClient(LLMClient(TutorConfig(), client=FakeOpenAI(completions)))


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 201):
        self.payload = payload
        self.status_code = status_code

    def json(self) -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Records sandbox submissions and replays a canned response."""

    def __init__(self, payload: Any = None, error: Optional[Exception] = None, status_code: int = 201):
        self.payload = payload if payload is not None else {"stdout": "aGVsbG8K"}
        self.error = error
        self.status_code = status_code
        self.calls: List[Dict[str, Any]] = []

    def post(self, url, params=None, json=None, timeout=None):
        self.calls.append({"url": url, "params": params, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.payload, self.status_code)


@pytest.fixture
def http_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def executor(http_session) -> ExecutionClient:
    return ExecutionClient(SandboxConfig(base_url="https://sandbox.test"), session=http_session)


@pytest.fixture
def connectivity() -> ConnectivityMonitor:
    return ConnectivityMonitor(online=True)


@pytest.fixture
def service(catalog, progress_store, draft_store, storage, tutor, executor, connectivity) -> LearningService:
    return LearningService(
        catalog=catalog,
        progress_store=progress_store,
        draft_store=draft_store,
        tutor=tutor,
        executor=executor,
        connectivity=connectivity,
        theme_store=ThemeStore(storage),
        session_config=SessionConfig(submit_delay_seconds=0),
    )
