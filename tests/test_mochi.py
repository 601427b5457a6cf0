import asyncio

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils

from snapdeck.errors import CredentialMissingError, FlashcardServiceError
from snapdeck.models import JapaneseWord
from snapdeck.services.mochi_service import DeckPublisher, MochiClient, fetch_deck_cards


class FakeMochi:
    """In-memory stand-in for MochiClient."""

    def __init__(self, fail_words=(), deck_error=None, docs=None):
        self.fail_words = set(fail_words)
        self.deck_error = deck_error
        self.docs = docs or []
        self.decks = []
        self.cards = []
        self.listed = []
        self.closed = False

    def __call__(self, api_key):
        self.api_key = api_key
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.closed = True

    async def create_deck(self, name):
        if self.deck_error:
            raise self.deck_error
        self.decks.append(name)
        return "deck-1"

    async def create_card(self, deck_id, content):
        if any(word in content for word in self.fail_words):
            raise FlashcardServiceError(500, "card rejected", action="create card")
        self.cards.append((deck_id, content))
        return {"id": f"card-{len(self.cards)}"}

    async def list_cards(self, deck_id, limit):
        self.listed.append((deck_id, limit))
        return self.docs


WORDS = [
    JapaneseWord(word="水", meaning="water", furigana="{水}(みず)"),
    JapaneseWord(word="火", meaning="fire", furigana="{火}(ひ)"),
    JapaneseWord(word="木", meaning="tree", furigana="{木}(き)"),
]


def test_publish_creates_one_card_per_word():
    fake = FakeMochi()
    progress = []

    result = asyncio.run(
        DeckPublisher(fake).publish(" key ", "JP 2024-05-01", WORDS, lambda c, t: progress.append((c, t)))
    )

    assert fake.api_key == "key"
    assert fake.decks == ["JP 2024-05-01"]
    assert [content for _, content in fake.cards] == [
        "# {水}(みず)\n\n---\n\nwater",
        "# {火}(ひ)\n\n---\n\nfire",
        "# {木}(き)\n\n---\n\ntree",
    ]
    assert result.deck_id == "deck-1"
    assert result.cards_created == 3
    assert result.total_words == 3
    assert progress == [(0, 3), (1, 3), (2, 3), (3, 3)]
    assert fake.closed


def test_publish_counts_failed_cards():
    fake = FakeMochi(fail_words={"火"})
    progress = []

    result = asyncio.run(DeckPublisher(fake).publish("key", "deck", WORDS, lambda c, t: progress.append(c)))

    assert result.cards_created == 2
    assert result.failed == 1
    assert progress == [0, 1, 2, 3]


def test_publish_aborts_when_deck_fails():
    fake = FakeMochi(deck_error=FlashcardServiceError(401, "unauthorized", action="create deck"))

    with pytest.raises(FlashcardServiceError) as excinfo:
        asyncio.run(DeckPublisher(fake).publish("key", "deck", WORDS))

    assert excinfo.value.status == 401
    assert fake.cards == []


def test_publish_requires_key():
    with pytest.raises(CredentialMissingError):
        asyncio.run(DeckPublisher(FakeMochi()).publish("", "deck", WORDS))


def test_fetch_deck_cards_cleans_id_and_parses():
    fake = FakeMochi(docs=[
        {"id": "a", "content": "# {学}(がっ){校}(こう)\n\n---\n\nschool"},
        {"id": "b", "content": "# ありがとう\n\n---\n\nthanks"},
    ])

    cards = asyncio.run(fetch_deck_cards("key", "[[abc123]]", client_factory=fake))

    assert fake.listed == [("abc123", 100)]
    assert cards[0].front == "学校"
    assert cards[0].reading == "がっこう"
    assert cards[0].kanji == "学校"
    assert cards[1].kanji == ""
    assert cards[1].meaning == "thanks"


# -----------------------------------------------------------------------------
# MochiClient against a local HTTP server
# -----------------------------------------------------------------------------

def _mochi_app(seen):
    async def create_deck(request):
        seen.append(("deck", request.headers.get("Authorization"), await request.json()))
        return web.json_response({"id": "d1", "name": "x"})

    async def create_card(request):
        body = await request.json()
        seen.append(("card", request.headers.get("Authorization"), body))
        if body["content"].startswith("# bad"):
            return web.Response(status=422, text="invalid content")
        return web.json_response({"id": "c1"})

    async def list_cards(request):
        seen.append(("list", request.headers.get("Authorization"), dict(request.query)))
        return web.json_response({"docs": [{"content": "# {水}(みず)\n\n---\n\nwater"}], "bookmark": "b"})

    app = web.Application()
    app.router.add_post("/api/decks", create_deck)
    app.router.add_post("/api/cards", create_card)
    app.router.add_get("/api/cards", list_cards)
    return app


def test_mochi_client_round_trip():
    seen = []

    async def run():
        async with test_utils.TestServer(_mochi_app(seen)) as server:
            base_url = str(server.make_url("/api"))
            async with MochiClient("secret", base_url=base_url) as client:
                deck_id = await client.create_deck("JP test")
                await client.create_card(deck_id, "# {水}(みず)\n\n---\n\nwater")
                docs = await client.list_cards(deck_id, 100)
                with pytest.raises(FlashcardServiceError) as excinfo:
                    await client.create_card(deck_id, "# bad")
        return deck_id, docs, excinfo.value

    deck_id, docs, error = asyncio.run(run())

    expected_auth = aiohttp.BasicAuth("secret", "").encode()
    assert deck_id == "d1"
    assert seen[0] == ("deck", expected_auth, {"name": "JP test"})
    assert seen[1][2] == {"content": "# {水}(みず)\n\n---\n\nwater", "deck-id": "d1"}
    assert seen[2][2] == {"deck-id": "d1", "limit": "100"}
    assert docs[0]["content"].endswith("water")
    assert error.status == 422
    assert "invalid content" in str(error)


def test_mochi_client_requires_key():
    with pytest.raises(CredentialMissingError):
        MochiClient("  ")


def _publish_against(card_status, card_body):
    async def create_deck(request):
        return web.json_response({"id": "d1"})

    async def create_card(request):
        return web.Response(status=card_status, text=card_body)

    app = web.Application()
    app.router.add_post("/api/decks", create_deck)
    app.router.add_post("/api/cards", create_card)

    async def run():
        async with test_utils.TestServer(app) as server:
            base_url = str(server.make_url("/api"))
            publisher = DeckPublisher(lambda key: MochiClient(key, base_url=base_url))
            return await publisher.publish("key", "deck", WORDS[:2])

    return asyncio.run(run())


def test_card_created_with_plain_text_body():
    result = _publish_against(200, "ok")
    assert result.cards_created == 2


def test_card_created_with_any_2xx_status():
    result = _publish_against(202, "")
    assert result.cards_created == 2
    assert result.failed == 0


def test_card_rejected_is_counted():
    result = _publish_against(500, "server error")
    assert result.cards_created == 0
    assert result.total_words == 2


def test_deck_response_without_id():
    async def create_deck(request):
        return web.Response(status=200, text="created")

    app = web.Application()
    app.router.add_post("/api/decks", create_deck)

    async def run():
        async with test_utils.TestServer(app) as server:
            async with MochiClient("key", base_url=str(server.make_url("/api"))) as client:
                return await client.create_deck("deck")

    with pytest.raises(FlashcardServiceError):
        asyncio.run(run())
