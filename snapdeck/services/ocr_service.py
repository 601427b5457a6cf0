"""OCR client - PaddleOCR layout-parsing endpoint."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import Config
from ..errors import CredentialMissingError, OcrServiceError
from .base import BaseClient
from .image_service import read_base64

logger = logging.getLogger(__name__)

FILE_TYPE_DOCUMENT = 0
FILE_TYPE_IMAGE = 1


def file_type_for(path: Union[str, Path]) -> int:
    """fileType discriminator: 0 for PDF documents, 1 for images."""
    return FILE_TYPE_DOCUMENT if Path(path).suffix.lower() == ".pdf" else FILE_TYPE_IMAGE


def join_page_texts(data: Dict[str, Any]) -> str:
    """Concatenate the markdown text of every recognized page."""
    results = (data.get("result") or {}).get("layoutParsingResults") or []
    texts: List[str] = []
    for page in results:
        markdown = page.get("markdown") or {}
        texts.append(str(markdown.get("text") or ""))
    return "\n\n".join(texts)


class OcrClient(BaseClient):
    """Send one file to the OCR service and return its recognized text."""
    
    def __init__(self, token: str, api_url: Optional[str] = None, timeout: Optional[int] = None) -> None:
        super().__init__(timeout)
        if not token or not token.strip():
            raise CredentialMissingError("OCR token is not set.")
        self.token = token.strip()
        self.api_url = api_url or Config.OCR_API_URL
    
    def _session_kwargs(self) -> Dict[str, Any]:
        return {
            "headers": {
                "Authorization": f"token {self.token}",
                "Content-Type": "application/json",
            }
        }
    
    async def recognize(self, path: Union[str, Path]) -> str:
        """
        Run OCR over a file.
        
        Args:
            path: Image (or PDF) on disk
            
        Returns:
            Page texts joined by blank lines (may be empty)
            
        Raises:
            OcrServiceError: Non-success HTTP status
        """
        if not self.api_url:
            raise OcrServiceError(0, "OCR endpoint URL is not configured", action="request")
        
        payload = {
            "file": await read_base64(path),
            "fileType": file_type_for(path),
            "useDocOrientationClassify": False,
            "useDocUnwarping": False,
            "useChartRecognition": False,
        }
        
        session = await self._get_session()
        async with session.post(self.api_url, json=payload) as response:
            if response.status != 200:
                error = await response.text()
                raise OcrServiceError(response.status, error, action="request")
            data = await response.json(content_type=None)
        
        text = join_page_texts(data)
        logger.info("OCR returned %d characters", len(text))
        return text
