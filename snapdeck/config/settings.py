"""Global settings and configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)


@dataclass
class Config:
    """Application-wide configuration."""

    # Mochi Cards API
    # Authentication is HTTP Basic with the API key as username
    MOCHI_API_URL: str = "https://app.mochi.cards/api"
    CARD_PAGE_SIZE: int = 100

    # PaddleOCR layout-parsing endpoint (per-account URL)
    OCR_API_URL: str = os.environ.get("OCR_API_URL", "")

    # Agent session
    AGENT_MAX_TURNS: int = 10
    AGENT_PERMISSION_MODE: str = "bypassPermissions"
    MEANING_LANGUAGE: str = os.environ.get("MEANING_LANGUAGE", "Korean")

    # Network
    TIMEOUT: int = 120

    IMAGE_EXTENSIONS: tuple = ("jpg", "jpeg", "png", "gif", "webp")

    # Cross-platform paths using pathlib
    BASE_DIR: Path = Path(__file__).parent.parent.parent.resolve()
    SETTINGS_FILE: str = os.environ.get(
        "SNAPDECK_SETTINGS_FILE",
        str(Path.home() / ".snapdeck" / "settings.json"),
    )
