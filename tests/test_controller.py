import asyncio
from datetime import date

import pytest

from snapdeck.controller import AppController, AppState, default_deck_name
from snapdeck.errors import CredentialMissingError, QuizError
from snapdeck.models import AgentAvailability, DeckProgress, DeckResult, ImageData, JapaneseWord
from snapdeck.quiz import QuizDimension

IMAGE = ImageData(name="a.png", path="/tmp/a.png", base64="", media_type="image/png")


class FakeExtractor:
    def __init__(self, words):
        self.words = words
        self.calls = []
        self.meaning_language = None

    async def extract(self, image_path, ocr_token, on_progress=None):
        self.calls.append((image_path, ocr_token))
        return list(self.words)


class FakePublisher:
    def __init__(self):
        self.calls = []

    async def publish(self, api_key, deck_name, words, on_progress=None):
        self.calls.append((api_key, deck_name, [w.word for w in words]))
        return DeckResult(deck_id="d1", deck_name=deck_name, cards_created=len(words), total_words=len(words))


def make_controller(settings, words=(), cards=()):
    async def card_fetcher(api_key, deck_id):
        return list(cards)

    return AppController(
        settings=settings,
        extractor=FakeExtractor(words),
        publisher=FakePublisher(),
        card_fetcher=card_fetcher,
        agent_locator=lambda: AgentAvailability(available=True, path="/usr/bin/claude"),
    )


def test_default_deck_name():
    assert default_deck_name(date(2024, 5, 1)) == "JP 2024-05-01"


def test_new_image_clears_words():
    state = AppState(words=[JapaneseWord(word="水")])
    state.set_image(IMAGE)
    assert state.image is IMAGE
    assert state.words == []


def test_remove_word_ignores_out_of_range():
    state = AppState(words=[JapaneseWord(word="水"), JapaneseWord(word="火")])
    state.remove_word(5)
    state.remove_word(0)
    assert [w.word for w in state.words] == ["火"]


def test_select_image(settings, png_file):
    controller = make_controller(settings)

    assert asyncio.run(controller.select_image(None)) is None
    image = asyncio.run(controller.select_image(str(png_file)))

    assert controller.state.image is image
    assert image.media_type == "image/png"


def test_parse_image_stores_words(settings):
    controller = make_controller(settings, words=[JapaneseWord(word="水")])
    controller.set_ocr_token(" tok ")
    controller.state.set_image(IMAGE)

    words = asyncio.run(controller.parse_image())

    assert [w.word for w in words] == ["水"]
    assert controller.state.words == words
    assert controller.extractor.calls == [("/tmp/a.png", "tok")]
    assert controller.state.parsing is False


def test_parse_image_requires_token(settings):
    controller = make_controller(settings)
    controller.state.set_image(IMAGE)

    with pytest.raises(CredentialMissingError):
        asyncio.run(controller.parse_image())


def test_parse_image_busy_guard(settings):
    controller = make_controller(settings, words=[JapaneseWord(word="水")])
    controller.set_ocr_token("tok")
    controller.state.set_image(IMAGE)
    controller.state.parsing = True

    assert asyncio.run(controller.parse_image()) is None
    assert controller.extractor.calls == []


def test_create_deck_uses_default_name_and_clears(settings):
    controller = make_controller(settings)
    controller.set_mochi_key("key")
    controller.state.set_image(IMAGE)
    controller.state.words = [JapaneseWord(word="水"), JapaneseWord(word="火")]

    result = asyncio.run(controller.create_deck("  "))

    api_key, deck_name, words = controller.publisher.calls[0]
    assert api_key == "key"
    assert deck_name == default_deck_name()
    assert words == ["水", "火"]
    assert result.cards_created == 2
    assert controller.state.image is None
    assert controller.state.words == []


def test_create_deck_without_words_does_nothing(settings):
    controller = make_controller(settings)
    controller.set_mochi_key("key")

    assert asyncio.run(controller.create_deck("deck")) is None
    assert controller.publisher.calls == []


def test_fetch_cards_and_start_quiz(settings, deck_cards):
    controller = make_controller(settings, cards=deck_cards)
    controller.set_mochi_key("key")

    cards = asyncio.run(controller.fetch_deck_cards("[[abc]]"))
    quiz = controller.start_adaptive_quiz([QuizDimension.MEANING])

    assert len(cards) == len(deck_cards)
    assert controller.state.quiz is quiz
    assert len(quiz.next_round().choices) == 6


def test_quiz_needs_enough_cards(settings, deck_cards):
    controller = make_controller(settings, cards=deck_cards[:3])
    controller.set_mochi_key("key")
    asyncio.run(controller.fetch_deck_cards("abc"))

    with pytest.raises(QuizError):
        controller.start_adaptive_quiz([QuizDimension.READING])


def test_credentials_persist(settings):
    controller = make_controller(settings)
    controller.set_mochi_key("m-key")
    controller.set_ocr_token("o-tok")

    settings.reload()
    assert controller.get_mochi_key() == "m-key"
    assert controller.get_ocr_token() == "o-tok"


def test_check_agent_is_cached(settings):
    calls = []

    def locator():
        calls.append(1)
        return AgentAvailability(available=False, error="Claude CLI not found.")

    controller = AppController(settings=settings, agent_locator=locator)
    controller.check_agent()
    controller.check_agent()
    controller.check_agent(refresh=True)
    assert len(calls) == 2


def test_deck_progress():
    assert DeckProgress(1, 4).fraction == 0.25
    assert DeckProgress(0, 0).fraction == 0.0
    assert str(DeckProgress(2, 3)) == "2/3"


def test_meaning_language_follows_save_and_reset(settings):
    controller = make_controller(settings)

    assert controller.set_meaning_language(" English ") == "English"
    assert controller.extractor.meaning_language == "English"
    assert settings.get("MEANING_LANGUAGE") == "English"

    controller.reset_settings()
    assert controller.extractor.meaning_language == "Korean"
    assert controller.set_meaning_language("") == "Korean"
