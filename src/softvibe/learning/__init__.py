from .drafts import DraftStore
from .models import UserProgress
from .preferences import Theme, ThemeStore
from .progress import ProgressStore

__all__ = [
    "DraftStore",
    "ProgressStore",
    "Theme",
    "ThemeStore",
    "UserProgress",
]
