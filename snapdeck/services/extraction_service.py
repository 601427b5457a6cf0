"""
Extraction Service - Japanese vocabulary from a photo.

Pipeline:
1. Confirm the agent executable is available
2. OCR the image
3. Early exit with no words when OCR found no text
4. Send OCR text + image to the agent
5. Collect plain text from the event stream
6. Parse the first JSON array out of that text
"""

import json
import logging
from typing import Any, AsyncIterable, Callable, List, Optional

from ..config import Config
from ..errors import CredentialMissingError, ExtractionParseError
from ..models import JapaneseWord
from ..utils.parsing import TextParser
from .agent_service import (
    AgentEvent,
    AssistantText,
    OtherEvent,
    ResultEvent,
    TextDelta,
)
from .image_service import load_image

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

_EVENT_TYPES = (TextDelta, AssistantText, ResultEvent, OtherEvent)


SYSTEM_PROMPT = (
    "You are a Japanese vocabulary extraction expert. "
    "Find the Japanese text in the image and answer only in JSON."
)

PROMPT_TEMPLATE = """Extract the Japanese vocabulary words from the attached image.

OCR text of the image, for reference:
---
{ocr_text}
---

Rules:
- Only report words that actually appear in the image. Use the OCR text to read them accurately, but do not add words that are not visible.
- Return a JSON array in exactly this shape:
[
  {{
    "word": "漢字 or ひらがな",
    "reading": "reading in hiragana",
    "meaning": "meaning in {meaning_language}",
    "furigana": "{{漢}}(かん){{字}}(じ)"
  }}
]
- In "furigana", annotate every kanji separately as {{kanji}}(reading). Examples:
  - 日本語 -> {{日}}(に){{本}}(ほん){{語}}(ご)
  - 食べる -> {{食}}(た)べる
  - a word written only in kana stays as it is
- If the image contains no Japanese, return an empty array [].
- Return only the JSON, with no explanation."""


def build_prompt(ocr_text: str, meaning_language: Optional[str] = None) -> str:
    return PROMPT_TEMPLATE.format(
        ocr_text=ocr_text.strip(),
        meaning_language=meaning_language or Config.MEANING_LANGUAGE,
    )


def _notify(on_progress: Optional[ProgressCallback], message: str) -> None:
    if on_progress:
        on_progress(message)


async def collect_text(
    events: AsyncIterable[AgentEvent],
    on_progress: Optional[ProgressCallback] = None,
) -> str:
    """
    Accumulate the plain text of an agent event stream.
    
    Streaming deltas are the primary source. Complete assistant messages
    repeat the same text, so their blocks are only used when no delta
    arrived. Every event produces a progress notification.
    """
    deltas: List[str] = []
    messages: List[str] = []
    
    async for event in events:
        if not isinstance(event, _EVENT_TYPES):
            raise TypeError(f"Unknown agent event: {event!r}")
        _notify(on_progress, f"[{event.kind}]")
        if isinstance(event, TextDelta):
            deltas.append(event.text)
            _notify(on_progress, TextParser.one_line(event.text))
        elif isinstance(event, AssistantText):
            for text in event.texts:
                messages.append(text)
                _notify(on_progress, TextParser.one_line(text))
        elif isinstance(event, ResultEvent):
            if event.is_error:
                logger.warning("Agent finished with an error result: %s", event.result)
            _notify(on_progress, "done")
    
    return "".join(deltas) if deltas else "".join(messages)


def extract_words(text: str) -> List[JapaneseWord]:
    """
    Parse the word array out of free-form model output.
    
    No array in the text gives an empty list. A malformed array raises
    ExtractionParseError.
    """
    try:
        items = TextParser.parse_json_array(text)
    except (json.JSONDecodeError, ValueError) as e:
        raise ExtractionParseError(f"Could not parse word list: {e}") from e
    
    words = []
    for item in items:
        if not isinstance(item, dict):
            raise ExtractionParseError(f"Unexpected item in word list: {item!r}")
        words.append(JapaneseWord.from_dict(item))
    return words


class WordExtractor:
    """
    Runs the OCR -> agent -> parse pipeline for one image.
    
    The OCR client and agent session are created per call through factories
    so tests can substitute fakes.
    """
    
    def __init__(
        self,
        ocr_factory: Callable[[str], Any],
        agent_factory: Callable[[], Any],
        meaning_language: Optional[str] = None,
    ) -> None:
        self._ocr_factory = ocr_factory
        self._agent_factory = agent_factory
        self.meaning_language = meaning_language
    
    async def run_ocr(self, image_path: str, ocr_token: str) -> str:
        ocr = self._ocr_factory(ocr_token)
        try:
            return await ocr.recognize(image_path)
        finally:
            await ocr.close()
    
    async def extract(
        self,
        image_path: str,
        ocr_token: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[JapaneseWord]:
        """
        Extract words from an already-selected image.
        
        Args:
            image_path: Path of the selected image
            ocr_token: OCR service credential
            on_progress: Receives human-readable progress lines
            
        Returns:
            Extracted words in model order (possibly empty)
            
        Raises:
            CredentialMissingError: Blank OCR token
            OcrServiceError: OCR request failed; the agent is not invoked
            AgentUnavailableError: No agent executable; raised before the OCR call
            ExtractionParseError: Malformed word array
        """
        if not ocr_token or not ocr_token.strip():
            raise CredentialMissingError("OCR token is not set.")
        
        agent = self._agent_factory()
        agent.ensure_available()
        
        _notify(on_progress, "Running OCR...")
        ocr_text = await self.run_ocr(image_path, ocr_token)
        
        if not ocr_text.strip():
            logger.info("OCR found no text; skipping the model call")
            _notify(on_progress, "OCR found no text")
            return []
        
        _notify(on_progress, f"OCR: {len(ocr_text)} chars")
        
        image = await load_image(image_path)
        prompt = build_prompt(ocr_text, self.meaning_language)
        
        text = await collect_text(agent.stream(prompt, image), on_progress)
        
        _notify(on_progress, "Parsing JSON...")
        words = extract_words(text)
        logger.info("Extracted %d words from %s", len(words), image.name)
        return words
