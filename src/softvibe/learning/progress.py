from __future__ import annotations

import json
import logging

from softvibe.learning.models import UserProgress
from softvibe.storage import KeyValueStorage

logger = logging.getLogger(__name__)

PROGRESS_KEY = "softvibe_progress"


class ProgressStore:
    """
    Own the learner's UserProgress and keep durable storage in sync with it.

    The record is read once at construction (or on `load()`), mutated only through the
    idempotent completion methods, and re-serialized in full after every mutation. There
    is no batching: each recorded completion is one storage write.

    Progress Storage Format
    -----------------------
    Stored under the `softvibe_progress` key as JSON:
    ```json
    {
      "completedLessonIds": ["py_1", "py_2"],
      "completedProjectIds": ["proj_py_1"],
      "hoursLearned": 3.0,
      "streakDays": 0,
      "lastLoginDate": "2026-10-19T08:00:00+00:00"
    }
    ```

    Ids are kept even when they no longer exist in the catalog; catalog-scoped views
    only count ids they know about.

    Examples
    --------
    >>> store = ProgressStore(MemoryStorage())
    >>> store.record_lesson_completion("py_1")
    True
    >>> store.record_lesson_completion("py_1")
    False
    >>> store.snapshot().hours_learned
    0.5
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        hours_per_lesson: float = 0.5,
        hours_per_project: float = 2.0,
    ):
        self.storage = storage
        self.hours_per_lesson = hours_per_lesson
        self.hours_per_project = hours_per_project
        self._progress = self.load()

    def load(self) -> UserProgress:
        """
        Read persisted progress, falling back to a zero-value record.

        Absence of the key, malformed JSON, and payloads of the wrong shape all yield a
        fresh default; this method never raises to the caller.
        """
        raw = self.storage.get_item(PROGRESS_KEY)
        if raw is None:
            progress = UserProgress()
        else:
            try:
                progress = UserProgress.from_dict(json.loads(raw))
            except (json.JSONDecodeError, ValueError) as exc:
                logger.warning("Discarding unreadable progress record: %s", exc)
                progress = UserProgress()
        self._progress = progress
        return progress.copy()

    def snapshot(self) -> UserProgress:
        """Return a copy of the current record."""
        return self._progress.copy()

    def save(self) -> None:
        """Serialize the full record back to storage."""
        self.storage.set_item(PROGRESS_KEY, json.dumps(self._progress.to_dict()))

    def record_lesson_completion(self, lesson_id: str) -> bool:
        """Add `lesson_id` and credit lesson hours once; return False when already recorded."""
        if lesson_id in self._progress.completed_lesson_ids:
            return False
        self._progress.completed_lesson_ids.add(lesson_id)
        self._progress.hours_learned += self.hours_per_lesson
        self.save()
        logger.info("Recorded lesson completion %s", lesson_id)
        return True

    def record_project_completion(self, project_id: str) -> bool:
        """Add `project_id` and credit project hours once; return False when already recorded."""
        if project_id in self._progress.completed_project_ids:
            return False
        self._progress.completed_project_ids.add(project_id)
        self._progress.hours_learned += self.hours_per_project
        self.save()
        logger.info("Recorded project completion %s", project_id)
        return True
