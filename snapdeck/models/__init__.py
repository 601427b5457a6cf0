"""Data models."""

from .card import (
    AgentAvailability,
    DeckProgress,
    DeckResult,
    ImageData,
    JapaneseWord,
    RemoteCard,
)

__all__ = [
    "AgentAvailability",
    "DeckProgress",
    "DeckResult",
    "ImageData",
    "JapaneseWord",
    "RemoteCard",
]
