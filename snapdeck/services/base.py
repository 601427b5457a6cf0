"""Base HTTP client class."""

from typing import Any, Dict, Optional

import aiohttp

from ..config import Config


class BaseClient:
    """
    Base class for the remote services SnapDeck talks to.
    
    Owns one lazily-created aiohttp session and provides async context
    manager support. Subclasses supply default headers/auth.
    """
    
    def __init__(self, timeout: Optional[int] = None) -> None:
        self.timeout = timeout or Config.TIMEOUT
        self._session: Optional[aiohttp.ClientSession] = None
    
    def _session_kwargs(self) -> Dict[str, Any]:
        """Extra ClientSession arguments (headers, auth)."""
        return {}
    
    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout, **self._session_kwargs())
        return self._session
    
    async def close(self) -> None:
        """Close the session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
    
    async def __aenter__(self):
        """Async context manager entry."""
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - ensure the session is closed."""
        await self.close()
