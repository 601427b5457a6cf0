"""
Mochi Service - remote decks and cards.

Three REST calls (create deck, create card, list cards) plus the two
workflows built on them: publishing extracted words as a new deck and
reading a deck back for quizzes.
"""

import asyncio
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import aiohttp

from ..config import Config
from ..errors import CredentialMissingError, FlashcardServiceError, SnapDeckError
from ..models import DeckResult, JapaneseWord, RemoteCard
from ..utils.furigana import build_card_content, parse_card_content
from ..utils.parsing import TextParser
from .base import BaseClient

logger = logging.getLogger(__name__)

DeckProgressCallback = Callable[[int, int], None]


def _decode_object(body: str) -> Dict[str, Any]:
    try:
        data = json.loads(body) if body.strip() else {}
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _require_key(api_key: str) -> str:
    if not api_key or not api_key.strip():
        raise CredentialMissingError("Mochi API key is not set.")
    return api_key.strip()


class MochiClient(BaseClient):
    """Thin async client for the Mochi Cards REST API."""
    
    def __init__(self, api_key: str, base_url: Optional[str] = None, timeout: Optional[int] = None) -> None:
        super().__init__(timeout)
        self.api_key = _require_key(api_key)
        self.base_url = (base_url or Config.MOCHI_API_URL).rstrip("/")
    
    def _session_kwargs(self) -> Dict[str, Any]:
        return {
            "auth": aiohttp.BasicAuth(self.api_key, ""),
            "headers": {"Content-Type": "application/json"},
        }
    
    async def _send(self, method: str, path: str, action: str, **kwargs) -> Tuple[int, str]:
        """Perform one call; any 2xx status is success. Returns (status, body text)."""
        session = await self._get_session()
        async with session.request(method, f"{self.base_url}{path}", **kwargs) as response:
            body = await response.text()
            if not 200 <= response.status < 300:
                raise FlashcardServiceError(response.status, body, action=action)
            return response.status, body
    
    async def _request(self, method: str, path: str, action: str, **kwargs) -> Dict[str, Any]:
        """Like _send, with the body decoded as a JSON object ({} when it is not one)."""
        _, body = await self._send(method, path, action, **kwargs)
        return _decode_object(body)
    
    async def create_deck(self, name: str) -> str:
        """Create a deck and return its id."""
        status, body = await self._send("POST", "/decks", "create deck", json={"name": name})
        deck_id = _decode_object(body).get("id")
        if not deck_id:
            raise FlashcardServiceError(status, f"No deck id in response: {body}", action="create deck")
        return str(deck_id)
    
    async def create_card(self, deck_id: str, content: str) -> Dict[str, Any]:
        """Add one card. Any 2xx counts as created, whatever the body holds."""
        return await self._request(
            "POST", "/cards", "create card",
            json={"content": content, "deck-id": deck_id},
        )
    
    async def list_cards(self, deck_id: str, limit: int = Config.CARD_PAGE_SIZE) -> List[Dict[str, Any]]:
        """One page of cards from a deck."""
        data = await self._request(
            "GET", "/cards", "list cards",
            params={"deck-id": deck_id, "limit": str(limit)},
        )
        return list(data.get("docs") or [])


class DeckPublisher:
    """
    Creates one deck and then one card per word, in order.
    
    A failed deck call aborts everything. A failed card is logged and
    counted; the result reports cards_created < total_words.
    """
    
    def __init__(self, client_factory: Callable[[str], Any] = MochiClient) -> None:
        self._client_factory = client_factory
    
    async def publish(
        self,
        api_key: str,
        deck_name: str,
        words: Sequence[JapaneseWord],
        on_progress: Optional[DeckProgressCallback] = None,
    ) -> DeckResult:
        """
        Publish words as a new deck.
        
        Args:
            api_key: Mochi API key
            deck_name: Display name of the new deck
            words: Words in card order
            on_progress: Called with (completed, total): once before the deck
                        call and once after every card
            
        Returns:
            DeckResult summary
        """
        api_key = _require_key(api_key)
        total = len(words)
        
        def emit(current: int) -> None:
            if on_progress:
                on_progress(current, total)
        
        emit(0)
        
        async with self._client_factory(api_key) as client:
            deck_id = await client.create_deck(deck_name)
            logger.info("Created deck %s (%s)", deck_name, deck_id)
            
            created = 0
            for index, word in enumerate(words, start=1):
                try:
                    await client.create_card(deck_id, build_card_content(word))
                    created += 1
                except (SnapDeckError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                    logger.warning("Card for %s was not created: %s", word.word, e)
                emit(index)
        
        return DeckResult(
            deck_id=deck_id,
            deck_name=deck_name,
            cards_created=created,
            total_words=total,
        )


async def fetch_deck_cards(
    api_key: str,
    deck_id: str,
    client_factory: Callable[[str], Any] = MochiClient,
) -> List[RemoteCard]:
    """
    Fetch one page of a deck's cards and reverse-parse their content.
    
    Args:
        api_key: Mochi API key
        deck_id: Deck id, optionally wrapped in [[...]] as copied from Mochi
    """
    api_key = _require_key(api_key)
    clean_id = TextParser.clean_deck_id(deck_id)
    async with client_factory(api_key) as client:
        docs = await client.list_cards(clean_id, Config.CARD_PAGE_SIZE)
    cards = [parse_card_content(doc.get("content", "")) for doc in docs]
    logger.info("Fetched %d cards from deck %s", len(cards), clean_id)
    return cards
