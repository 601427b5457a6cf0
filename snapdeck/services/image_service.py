"""Image acquisition - read a picked file into memory."""

import base64
import logging
from pathlib import Path
from typing import Union

import aiofiles

from ..config import Config
from ..errors import ImageSelectionError
from ..models import ImageData

logger = logging.getLogger(__name__)


def extension_of(path: Union[str, Path]) -> str:
    return Path(path).suffix.lstrip(".").lower()


def media_type_for(path: Union[str, Path]) -> str:
    """Declared media type from the file extension (jpg is image/jpeg)."""
    ext = extension_of(path)
    return "image/jpeg" if ext == "jpg" else f"image/{ext}"


async def read_base64(path: Union[str, Path]) -> str:
    """Read a file and return its base64 body."""
    async with aiofiles.open(path, "rb") as f:
        content = await f.read()
    return base64.b64encode(content).decode("ascii")


async def load_image(path: Union[str, Path]) -> ImageData:
    """
    Load a user-selected image.
    
    Args:
        path: Path returned by the file picker
        
    Returns:
        ImageData with absolute path, base64 body and media type
        
    Raises:
        ImageSelectionError: Unsupported extension or unreadable file
    """
    file_path = Path(path).expanduser().resolve()
    ext = extension_of(file_path)
    if ext not in Config.IMAGE_EXTENSIONS:
        raise ImageSelectionError(f"Unsupported image type: .{ext or '?'}")
    if not file_path.is_file():
        raise ImageSelectionError(f"Image not found: {file_path}")
    
    try:
        body = await read_base64(file_path)
    except OSError as e:
        raise ImageSelectionError(f"Cannot read {file_path.name}: {e}") from e
    
    logger.info("Loaded image %s (%d base64 chars)", file_path.name, len(body))
    return ImageData(
        name=file_path.name,
        path=str(file_path),
        base64=body,
        media_type=media_type_for(file_path),
    )
