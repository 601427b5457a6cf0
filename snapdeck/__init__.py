"""SnapDeck - Japanese vocabulary from photos to Mochi flashcards"""

__version__ = "1.0.0"

from .config import Config, Credentials, SettingsManager
from .controller import AppController, AppState
from .models import DeckResult, ImageData, JapaneseWord, RemoteCard

__all__ = [
    'Config',
    'Credentials',
    'SettingsManager',
    'AppController',
    'AppState',
    'DeckResult',
    'ImageData',
    'JapaneseWord',
    'RemoteCard',
]
