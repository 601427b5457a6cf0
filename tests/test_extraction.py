import asyncio

import pytest

from snapdeck.errors import (
    AgentUnavailableError,
    CredentialMissingError,
    ExtractionParseError,
    OcrServiceError,
)
from snapdeck.models import AgentAvailability
from snapdeck.services.agent_service import (
    AgentSession,
    AssistantText,
    OtherEvent,
    ResultEvent,
    TextDelta,
)
from snapdeck.services.extraction_service import (
    WordExtractor,
    build_prompt,
    collect_text,
    extract_words,
)

WORDS_JSON = (
    '[{"word": "日本語", "reading": "にほんご", "meaning": "일본어", '
    '"furigana": "{日}(に){本}(ほん){語}(ご)"}, '
    '{"word": "ありがとう", "reading": "ありがとう", "meaning": "고마워요", "furigana": "ありがとう"}]'
)


class FakeOcr:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.closed = False
        self.paths = []

    async def recognize(self, path):
        self.paths.append(path)
        if self.error:
            raise self.error
        return self.text

    async def close(self):
        self.closed = True


class FakeAgent:
    def __init__(self, events):
        self.events = events
        self.calls = []

    def ensure_available(self):
        pass

    async def stream(self, prompt, image):
        self.calls.append((prompt, image))
        for event in self.events:
            yield event


def make_extractor(ocr, agent):
    return WordExtractor(ocr_factory=lambda token: ocr, agent_factory=lambda: agent, meaning_language="Korean")


async def _aiter(items):
    for item in items:
        yield item


def test_extract_parses_words_in_order(png_file):
    ocr = FakeOcr("日本語 ありがとう")
    agent = FakeAgent([TextDelta(WORDS_JSON[:40]), TextDelta(WORDS_JSON[40:]), ResultEvent()])
    progress = []

    words = asyncio.run(make_extractor(ocr, agent).extract(str(png_file), "tok", progress.append))

    assert [w.word for w in words] == ["日本語", "ありがとう"]
    assert words[0].furigana == "{日}(に){本}(ほん){語}(ご)"
    assert ocr.closed
    prompt, image = agent.calls[0]
    assert "日本語 ありがとう" in prompt
    assert image.media_type == "image/png"
    assert "Parsing JSON..." in progress
    assert "done" in progress


def test_blank_ocr_text_skips_agent(png_file):
    ocr = FakeOcr("   \n ")
    agent = FakeAgent([TextDelta(WORDS_JSON)])

    words = asyncio.run(make_extractor(ocr, agent).extract(str(png_file), "tok"))

    assert words == []
    assert agent.calls == []


def test_ocr_failure_stops_before_agent(png_file):
    ocr = FakeOcr(error=OcrServiceError(500, "boom"))
    agent = FakeAgent([TextDelta(WORDS_JSON)])

    with pytest.raises(OcrServiceError):
        asyncio.run(make_extractor(ocr, agent).extract(str(png_file), "tok"))
    assert agent.calls == []
    assert ocr.closed


def test_blank_token_is_rejected(png_file):
    ocr = FakeOcr("text")
    with pytest.raises(CredentialMissingError):
        asyncio.run(make_extractor(ocr, FakeAgent([])).extract(str(png_file), " "))
    assert ocr.paths == []


def test_response_without_array_gives_no_words(png_file):
    agent = FakeAgent([AssistantText(["I could not find any Japanese."])])
    words = asyncio.run(make_extractor(FakeOcr("abc"), agent).extract(str(png_file), "tok"))
    assert words == []


def test_malformed_array_raises(png_file):
    agent = FakeAgent([TextDelta('[{"word": "水",}]')])
    with pytest.raises(ExtractionParseError):
        asyncio.run(make_extractor(FakeOcr("水"), agent).extract(str(png_file), "tok"))


def test_collect_text_prefers_deltas():
    events = [TextDelta("[1,"), TextDelta(" 2]"), AssistantText(["[1, 2]"]), ResultEvent()]
    assert asyncio.run(collect_text(_aiter(events))) == "[1, 2]"


def test_collect_text_falls_back_to_messages():
    events = [OtherEvent("SystemMessage"), AssistantText(["[", "]"]), ResultEvent()]
    assert asyncio.run(collect_text(_aiter(events))) == "[]"


def test_collect_text_reports_every_event():
    progress = []
    events = [OtherEvent("SystemMessage"), TextDelta("hi"), ResultEvent()]
    asyncio.run(collect_text(_aiter(events), progress.append))
    assert progress == ["[SystemMessage]", "[stream_event]", "hi", "[result]", "done"]


def test_collect_text_rejects_unknown_events():
    with pytest.raises(TypeError):
        asyncio.run(collect_text(_aiter(["not an event"])))


def test_extract_words_rejects_non_objects():
    with pytest.raises(ExtractionParseError):
        extract_words('["水"]')


def test_build_prompt_mentions_language_and_text():
    prompt = build_prompt("  水  ", "Korean")
    assert "水" in prompt
    assert "meaning in Korean" in prompt
    assert "{日}(に){本}(ほん){語}(ご)" in prompt


def test_missing_agent_stops_before_ocr(png_file):
    ocr = FakeOcr("日本語")
    agent = AgentSession(
        system_prompt="x",
        availability=AgentAvailability(available=False, error="Claude CLI not found."),
    )

    with pytest.raises(AgentUnavailableError):
        asyncio.run(make_extractor(ocr, agent).extract(str(png_file), "tok"))
    assert ocr.paths == []
