"""Exception hierarchy shared by services, controller and UI."""

from typing import Optional


class SnapDeckError(Exception):
    """Base class for every error surfaced to the presentation layer."""


class CredentialMissingError(SnapDeckError):
    """A required credential is blank. Raised before any network call."""


class ImageSelectionError(SnapDeckError):
    """The selected file is missing or not a supported image."""


class ExternalServiceError(SnapDeckError):
    """A remote service answered with a non-success HTTP status."""

    service = "External service"

    def __init__(self, status: int, body: str = "", action: Optional[str] = None) -> None:
        self.status = status
        self.body = body or ""
        self.action = action
        prefix = f"{self.service} {action} failed" if action else f"{self.service} error"
        super().__init__(f"{prefix} ({status}): {self.body[:200]}")


class OcrServiceError(ExternalServiceError):
    service = "OCR"


class FlashcardServiceError(ExternalServiceError):
    service = "Mochi"


class AgentUnavailableError(SnapDeckError):
    """No usable agent executable was located."""


class ExtractionParseError(SnapDeckError):
    """Model output contained a malformed word array."""


class QuizError(SnapDeckError):
    """A quiz cannot be built from the loaded cards."""
