"""
Application controller - the operations the UI invokes.

Holds AppState (current image, word list, loaded cards, busy flags) and
wires settings, the extraction pipeline and the Mochi workflows together.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Sequence

from .config import Config, Credentials, SettingsManager
from .models import AgentAvailability, DeckResult, ImageData, JapaneseWord, RemoteCard
from .quiz import AdaptiveQuiz, QuizDimension
from .services import (
    AgentSession,
    DeckPublisher,
    OcrClient,
    WordExtractor,
    fetch_deck_cards,
    find_agent_executable,
    load_image,
)
from .services.extraction_service import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Transient UI state. Nothing here is persisted."""
    
    image: Optional[ImageData] = None
    words: List[JapaneseWord] = field(default_factory=list)
    cards: List[RemoteCard] = field(default_factory=list)
    quiz: Optional[AdaptiveQuiz] = None
    parsing: bool = False
    publishing: bool = False
    fetching: bool = False
    
    def set_image(self, image: ImageData) -> None:
        """A fresh image always starts with an empty word list."""
        self.image = image
        self.words = []
    
    def clear_image(self) -> None:
        self.image = None
        self.words = []
    
    def remove_word(self, index: int) -> None:
        if 0 <= index < len(self.words):
            del self.words[index]
    
    def set_cards(self, cards: Sequence[RemoteCard]) -> None:
        """New cards invalidate any quiz built from the old ones."""
        self.cards = list(cards)
        self.quiz = None


def default_deck_name(today: Optional[date] = None) -> str:
    return f"JP {(today or date.today()).isoformat()}"


class AppController:
    """
    UI-facing operations.
    
    Each long-running action is guarded by its busy flag: a call made while
    the same action is running returns None without doing anything.
    """
    
    def __init__(
        self,
        settings: Optional[SettingsManager] = None,
        extractor: Optional[WordExtractor] = None,
        publisher: Optional[DeckPublisher] = None,
        card_fetcher: Callable = fetch_deck_cards,
        agent_locator: Callable[[], AgentAvailability] = find_agent_executable,
    ) -> None:
        self.settings = settings or SettingsManager()
        self.state = AppState()
        self._agent_locator = agent_locator
        self._availability: Optional[AgentAvailability] = None
        self.extractor = extractor or WordExtractor(
            ocr_factory=self._make_ocr_client,
            agent_factory=self._make_agent_session,
            meaning_language=self.settings.get("MEANING_LANGUAGE", Config.MEANING_LANGUAGE),
        )
        self.publisher = publisher or DeckPublisher()
        self._card_fetcher = card_fetcher
    
    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------
    
    def _make_ocr_client(self, token: str) -> OcrClient:
        return OcrClient(
            token,
            api_url=self.settings.get("OCR_API_URL") or Config.OCR_API_URL,
            timeout=self.settings.get("TIMEOUT", Config.TIMEOUT),
        )
    
    def _make_agent_session(self) -> AgentSession:
        return AgentSession(system_prompt=SYSTEM_PROMPT, availability=self.check_agent())
    
    # -------------------------------------------------------------------------
    # Agent / credentials
    # -------------------------------------------------------------------------
    
    def check_agent(self, refresh: bool = False) -> AgentAvailability:
        if self._availability is None or refresh:
            self._availability = self._agent_locator()
            logger.info(
                "Agent executable: %s (available: %s)",
                self._availability.path, self._availability.available,
            )
        return self._availability
    
    @property
    def credentials(self) -> Credentials:
        return Credentials.load(self.settings)
    
    def get_mochi_key(self) -> str:
        return self.credentials.mochi_api_key
    
    def set_mochi_key(self, api_key: str) -> None:
        credentials = self.credentials
        credentials.mochi_api_key = api_key or ""
        credentials.save(self.settings)
    
    def get_ocr_token(self) -> str:
        return self.credentials.ocr_token
    
    def set_ocr_token(self, token: str) -> None:
        credentials = self.credentials
        credentials.ocr_token = token or ""
        credentials.save(self.settings)
    
    def set_meaning_language(self, language: str) -> str:
        """Persist the language card meanings are written in; blank restores the default."""
        language = (language or "").strip() or Config.MEANING_LANGUAGE
        self.settings.set("MEANING_LANGUAGE", language)
        self.extractor.meaning_language = language
        return language
    
    def reset_settings(self) -> None:
        self.settings.reset()
        self.extractor.meaning_language = self.settings.get("MEANING_LANGUAGE", Config.MEANING_LANGUAGE)
    
    # -------------------------------------------------------------------------
    # Workbench
    # -------------------------------------------------------------------------
    
    async def select_image(self, path: Optional[str]) -> Optional[ImageData]:
        """Load the picked file into state; None when the picker was cancelled."""
        if not path:
            return None
        image = await load_image(path)
        self.state.set_image(image)
        return image
    
    def clear_image(self) -> None:
        self.state.clear_image()
    
    def remove_word(self, index: int) -> None:
        self.state.remove_word(index)
    
    async def parse_image(
        self,
        on_progress: Optional[Callable[[str], None]] = None,
    ) -> Optional[List[JapaneseWord]]:
        """Run extraction on the current image and store the words."""
        if self.state.parsing or self.state.image is None:
            return None
        
        token = self.credentials.require_ocr_token()
        self.state.parsing = True
        try:
            words = await self.extractor.extract(self.state.image.path, token, on_progress)
            self.state.words = words
            return words
        finally:
            self.state.parsing = False
    
    async def create_deck(
        self,
        deck_name: str = "",
        on_progress: Optional[Callable[[int, int], None]] = None,
    ) -> Optional[DeckResult]:
        """Publish the current words; on success the image and words are cleared."""
        if self.state.publishing or not self.state.words:
            return None
        
        api_key = self.credentials.require_mochi_key()
        name = deck_name.strip() or default_deck_name()
        self.state.publishing = True
        try:
            result = await self.publisher.publish(api_key, name, list(self.state.words), on_progress)
            self.state.clear_image()
            return result
        finally:
            self.state.publishing = False
    
    # -------------------------------------------------------------------------
    # Quiz
    # -------------------------------------------------------------------------
    
    async def fetch_deck_cards(self, deck_id: str) -> Optional[List[RemoteCard]]:
        if self.state.fetching:
            return None
        
        api_key = self.credentials.require_mochi_key()
        self.state.fetching = True
        try:
            cards = await self._card_fetcher(api_key, deck_id)
            self.state.set_cards(cards)
            return cards
        finally:
            self.state.fetching = False
    
    def start_adaptive_quiz(self, dimensions: Sequence[QuizDimension]) -> AdaptiveQuiz:
        self.state.quiz = AdaptiveQuiz(self.state.cards, dimensions)
        return self.state.quiz
