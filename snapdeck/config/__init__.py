"""Configuration module for SnapDeck."""

from .settings import Config
from .config_manager import SettingsManager, Credentials

__all__ = [
    'Config',
    'SettingsManager',
    'Credentials',
]
