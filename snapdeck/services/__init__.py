"""Services layer for business logic separation."""

from .base import BaseClient
from .image_service import load_image, media_type_for
from .ocr_service import OcrClient, file_type_for
from .agent_service import (
    AgentEvent,
    AgentSession,
    AssistantText,
    OtherEvent,
    ResultEvent,
    TextDelta,
    find_agent_executable,
    to_agent_event,
)
from .extraction_service import WordExtractor, build_prompt, collect_text, extract_words
from .mochi_service import DeckPublisher, MochiClient, fetch_deck_cards

__all__ = [
    "BaseClient",
    "load_image",
    "media_type_for",
    "OcrClient",
    "file_type_for",
    "AgentEvent",
    "AgentSession",
    "AssistantText",
    "OtherEvent",
    "ResultEvent",
    "TextDelta",
    "find_agent_executable",
    "to_agent_event",
    "WordExtractor",
    "build_prompt",
    "collect_text",
    "extract_words",
    "DeckPublisher",
    "MochiClient",
    "fetch_deck_cards",
]
