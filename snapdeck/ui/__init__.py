"""UI components for SnapDeck."""

from .workbench import WorkbenchView
from .quiz_view import QuizView
from .settings import SettingsView

__all__ = [
    'WorkbenchView',
    'QuizView',
    'SettingsView',
]
