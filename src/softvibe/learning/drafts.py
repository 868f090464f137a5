from __future__ import annotations

import logging
from typing import Optional

from softvibe.storage import KeyValueStorage

logger = logging.getLogger(__name__)

DRAFT_KEY_PREFIX = "softvibe_draft_"


def draft_key(project_id: str) -> str:
    return f"{DRAFT_KEY_PREFIX}{project_id}"


class DraftStore:
    """Per-project scratch code, independent of the progress record."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def save_draft(self, project_id: str, code: str) -> None:
        """Overwrite the stored draft for `project_id`."""
        self.storage.set_item(draft_key(project_id), code)
        logger.debug("Saved draft for %s (%d chars)", project_id, len(code))

    def load_draft(self, project_id: str) -> Optional[str]:
        return self.storage.get_item(draft_key(project_id))

    def clear_draft(self, project_id: str) -> None:
        self.storage.remove_item(draft_key(project_id))
