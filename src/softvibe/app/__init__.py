from .reducer import first_unfinished_lesson, reduce
from .state import (
    AppState,
    CourseView,
    DashboardView,
    ProjectDetailView,
    ProjectListView,
    RequestToken,
    Transition,
    ViewState,
    context_key,
)

__all__ = [
    "AppState",
    "CourseView",
    "DashboardView",
    "ProjectDetailView",
    "ProjectListView",
    "RequestToken",
    "Transition",
    "ViewState",
    "context_key",
    "first_unfinished_lesson",
    "reduce",
]
