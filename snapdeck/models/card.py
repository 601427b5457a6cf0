"""Data models for SnapDeck."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class ImageData:
    """An image picked by the user, held in memory until cleared."""
    
    name: str
    path: str
    base64: str
    media_type: str


@dataclass
class JapaneseWord:
    """One word extracted from an image."""
    
    word: str
    reading: str = ""
    meaning: str = ""
    # Per-character annotation, e.g. {漢}(かん){字}(じ)
    furigana: str = ""
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JapaneseWord":
        """Build from one object of the model's JSON array."""
        return cls(
            word=str(data.get("word") or ""),
            reading=str(data.get("reading") or ""),
            meaning=str(data.get("meaning") or ""),
            furigana=str(data.get("furigana") or ""),
        )
    
    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
    
    @property
    def display_text(self) -> str:
        return self.furigana or self.word


@dataclass
class DeckResult:
    """Summary returned by the publish workflow."""
    
    deck_id: str
    deck_name: str
    cards_created: int
    total_words: int
    
    @property
    def failed(self) -> int:
        return self.total_words - self.cards_created


@dataclass
class DeckProgress:
    """Cards completed so far out of the words being published."""
    
    current: int
    total: int
    
    @property
    def fraction(self) -> float:
        return self.current / self.total if self.total else 0.0
    
    def __str__(self) -> str:
        return f"{self.current}/{self.total}"


@dataclass
class RemoteCard:
    """A card read back from a deck and reverse-parsed."""
    
    front: str
    reading: str
    kanji: str
    meaning: str


@dataclass
class AgentAvailability:
    available: bool
    path: Optional[str] = None
    error: Optional[str] = None
