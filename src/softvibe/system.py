from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import requests
from openai import OpenAI

from softvibe.agents.llm_client import LLMClient
from softvibe.agents.tutor import TutorClient
from softvibe.catalog import Catalog, load_catalog
from softvibe.config import Settings, load_settings
from softvibe.connectivity import ConnectivityMonitor
from softvibe.learning import DraftStore, ProgressStore, ThemeStore
from softvibe.sandbox import ExecutionClient
from softvibe.services.learning_service import LearningService
from softvibe.storage import JsonFileStorage, KeyValueStorage
from softvibe.utils.logging import configure_logging

logger = logging.getLogger(__name__)


class SoftvibeSystem:
    """
    Facade wiring storage, catalog, clients, and the learning service together.

    Attributes
    ----------
    settings : Settings
        Validated configuration.
    storage : KeyValueStorage
        Durable key/value store shared by progress, drafts, and theme.
    catalog : Catalog
        Read-only courses and projects.
    service : LearningService
        Entry point for the UI.
    """

    def __init__(
        self,
        settings: Settings,
        storage: Optional[KeyValueStorage] = None,
        catalog: Optional[Catalog] = None,
        connectivity: Optional[ConnectivityMonitor] = None,
        api_key: Optional[str] = None,
        openai_client: Optional[OpenAI] = None,
        http_session: Optional[requests.Session] = None,
    ):
        self.settings = settings
        configure_logging(settings.logging.level, settings.logging.use_json)

        self.storage = storage or JsonFileStorage(settings.paths.storage_file)
        self.catalog = catalog or load_catalog(settings.paths.catalog_file)
        self.progress_store = ProgressStore(
            self.storage,
            hours_per_lesson=settings.session.hours_per_lesson,
            hours_per_project=settings.session.hours_per_project,
        )
        self.draft_store = DraftStore(self.storage)
        self.theme_store = ThemeStore(self.storage)

        self.llm_client = LLMClient(settings.tutor, api_key=api_key, client=openai_client)
        self.tutor = TutorClient(self.llm_client)
        self.executor = ExecutionClient(settings.sandbox, session=http_session)
        self.connectivity = connectivity or ConnectivityMonitor.from_probe(
            settings.connectivity.probe_url,
            timeout=settings.connectivity.probe_timeout_seconds,
        )

        self.service = LearningService(
            catalog=self.catalog,
            progress_store=self.progress_store,
            draft_store=self.draft_store,
            tutor=self.tutor,
            executor=self.executor,
            connectivity=self.connectivity,
            theme_store=self.theme_store,
            session_config=settings.session,
        )
        logger.info(
            "softvibe ready: %d courses, %d projects, online=%s",
            len(self.catalog.courses),
            len(self.catalog.projects),
            self.connectivity.is_online,
        )

    @classmethod
    def from_config(
        cls,
        config_path: str | Path | None = None,
        api_key: Optional[str] = None,
    ) -> "SoftvibeSystem":
        """Load settings (see `load_settings`) and build a fully wired system."""
        settings = load_settings(config_path)
        return cls(settings, api_key=api_key)
