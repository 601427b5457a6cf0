"""Shared fixtures."""

import base64

import pytest

from snapdeck.config import SettingsManager
from snapdeck.models import RemoteCard

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

SETTING_ENV_VARS = ("MOCHI_API_KEY", "OCR_TOKEN", "OCR_API_URL", "MEANING_LANGUAGE", "TIMEOUT")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in SETTING_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("CLAUDE_CLI_PATH", raising=False)


@pytest.fixture
def settings_file(tmp_path):
    return tmp_path / "settings.json"


@pytest.fixture
def settings(settings_file):
    SettingsManager.reset_instance()
    manager = SettingsManager(str(settings_file))
    yield manager
    SettingsManager.reset_instance()


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "page.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def deck_cards():
    return [
        RemoteCard(front="日本", reading="にほん", kanji="日本", meaning="Japan"),
        RemoteCard(front="食べる", reading="たべる", kanji="食", meaning="to eat"),
        RemoteCard(front="水", reading="みず", kanji="水", meaning="water"),
        RemoteCard(front="学校", reading="がっこう", kanji="学校", meaning="school"),
        RemoteCard(front="ありがとう", reading="ありがとう", kanji="", meaning="thank you"),
        RemoteCard(front="電車", reading="でんしゃ", kanji="電車", meaning="train"),
        RemoteCard(front="先生", reading="せんせい", kanji="先生", meaning="teacher"),
    ]
