"""Wiring test for the system facade."""

from __future__ import annotations

import asyncio

from softvibe.config import Settings
from softvibe.connectivity import ConnectivityMonitor
from softvibe.learning import Theme
from softvibe.storage import JsonFileStorage, MemoryStorage
from softvibe.system import SoftvibeSystem

from conftest import FakeCompletions, FakeOpenAI, FakeSession


def test_system_wires_packaged_catalog(tmp_path):
    settings = Settings.model_validate(
        {"paths": {"storage_file": str(tmp_path / "state.json")}, "session": {"submit_delay_seconds": 0}}
    )
    completions = FakeCompletions(reply="Check the loop bounds.")

    system = SoftvibeSystem(
        settings,
        connectivity=ConnectivityMonitor(online=True),
        openai_client=FakeOpenAI(completions),
        http_session=FakeSession(),
    )
    service = system.service

    assert isinstance(system.storage, JsonFileStorage)
    service.start_course("course_python")
    assert asyncio.run(service.ask_tutor()) == "Check the loop bounds."
    service.complete_lesson()

    reloaded = SoftvibeSystem(settings, connectivity=ConnectivityMonitor(online=False))
    assert reloaded.progress_store.snapshot().completed_lesson_ids == {"py_1"}
    assert reloaded.service.state.online is False


def test_theme_preference_shared_storage():
    storage = MemoryStorage()
    system = SoftvibeSystem(Settings(), storage=storage, connectivity=ConnectivityMonitor())

    system.theme_store.toggle()
    assert system.theme_store.get_theme() is Theme.DARK
    assert storage.get_item("softvibe_theme") == "dark"
