"""
Agent Service - hosted language-model agent session.

Wraps claude-agent-sdk: locates the agent executable, opens a session with
an image + text user turn, and converts the SDK's message stream into a
small closed set of events the extraction pipeline handles exhaustively.
"""

import logging
import os
import platform
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional, Union

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    TextBlock,
    query,
)
from claude_agent_sdk.types import StreamEvent

from ..config import Config
from ..errors import AgentUnavailableError
from ..models import AgentAvailability, ImageData

logger = logging.getLogger(__name__)

AGENT_EXECUTABLE = "claude"


# =============================================================================
# EVENTS
# =============================================================================

@dataclass
class TextDelta:
    """Incremental text from a streaming partial message."""
    text: str
    kind: str = "stream_event"


@dataclass
class AssistantText:
    """Text blocks of one complete assistant message."""
    texts: List[str] = field(default_factory=list)
    kind: str = "assistant"


@dataclass
class ResultEvent:
    """Terminal event of the session."""
    is_error: bool = False
    result: Optional[str] = None
    kind: str = "result"


@dataclass
class OtherEvent:
    """Tool use, system and metadata messages. Not parsed."""
    kind: str


AgentEvent = Union[TextDelta, AssistantText, ResultEvent, OtherEvent]


def _delta_text(event: Dict[str, Any]) -> str:
    delta = event.get("delta") or {}
    if event.get("type") == "content_block_delta" and delta.get("type") == "text_delta":
        return delta.get("text") or ""
    return ""


def to_agent_event(message: Any) -> AgentEvent:
    """Map one SDK message onto an AgentEvent variant."""
    if isinstance(message, StreamEvent):
        text = _delta_text(message.event or {})
        if text:
            return TextDelta(text=text)
        return OtherEvent(kind="stream_event")
    if isinstance(message, AssistantMessage):
        texts = [block.text for block in message.content if isinstance(block, TextBlock) and block.text]
        return AssistantText(texts=texts)
    if isinstance(message, ResultMessage):
        return ResultEvent(is_error=bool(message.is_error), result=message.result)
    return OtherEvent(kind=type(message).__name__)


# =============================================================================
# EXECUTABLE DISCOVERY
# =============================================================================

def _scan_versions(base_dir: Path, sub_path: str, prefix: str = "") -> List[Path]:
    """Candidate paths inside per-version node install directories."""
    if not base_dir.is_dir():
        return []
    try:
        return [
            base_dir / entry / sub_path
            for entry in sorted(os.listdir(base_dir))
            if entry.startswith(prefix)
        ]
    except OSError:
        return []


def candidate_paths(home: Optional[Path] = None) -> List[Path]:
    """Well-known install locations of the agent executable."""
    home = home or Path.home()
    if platform.system() == "Windows":
        return [
            Path("C:/Program Files/Claude/claude.exe"),
            home / "AppData" / "Roaming" / "npm" / "claude.cmd",
        ]
    
    paths = [
        Path("/usr/local/bin/claude"),
        Path("/opt/homebrew/bin/claude"),
        Path("/usr/bin/claude"),
        home / ".npm-global" / "bin" / "claude",
        home / ".local" / "bin" / "claude",
        home / ".claude" / "local" / "claude",
    ]
    paths += _scan_versions(home / ".nvm" / "versions" / "node", "bin/claude", prefix="v")
    paths += _scan_versions(
        home / "Library" / "Application Support" / "fnm" / "node-versions",
        "installation/bin/claude",
        prefix="v",
    )
    paths += _scan_versions(home / ".volta" / "tools" / "image" / "node", "bin/claude")
    paths += _scan_versions(home / ".asdf" / "installs" / "nodejs", "bin/claude")
    return paths


def find_agent_executable(home: Optional[Path] = None) -> AgentAvailability:
    """
    Locate the agent executable.
    
    Order: CLAUDE_CLI_PATH, well-known install locations, then PATH lookup.
    """
    override = os.environ.get("CLAUDE_CLI_PATH")
    if override and Path(override).is_file():
        return AgentAvailability(available=True, path=override)
    
    for candidate in candidate_paths(home):
        if candidate.is_file():
            return AgentAvailability(available=True, path=str(candidate))
    
    found = shutil.which(AGENT_EXECUTABLE)
    if found:
        return AgentAvailability(available=True, path=found)
    
    return AgentAvailability(available=False, error="Claude CLI not found.")


def add_to_path(executable: str) -> None:
    """Prepend the executable's directory to PATH so node shims resolve."""
    directory = str(Path(executable).parent)
    current = os.environ.get("PATH", "")
    if directory not in current.split(os.pathsep):
        os.environ["PATH"] = directory + os.pathsep + current


# =============================================================================
# SESSION
# =============================================================================

class AgentSession:
    """
    One-shot agent session over claude-agent-sdk.
    
    Usage:
        session = AgentSession(system_prompt="...")
        async for event in session.stream(prompt, image):
            ...
    """
    
    def __init__(
        self,
        system_prompt: str,
        availability: Optional[AgentAvailability] = None,
        max_turns: Optional[int] = None,
        permission_mode: Optional[str] = None,
        cwd: Optional[str] = None,
    ) -> None:
        self.availability = availability or find_agent_executable()
        self.system_prompt = system_prompt
        self.max_turns = max_turns or Config.AGENT_MAX_TURNS
        self.permission_mode = permission_mode or Config.AGENT_PERMISSION_MODE
        self.cwd = cwd or str(Path.home())
        
        if self.availability.available and self.availability.path:
            add_to_path(self.availability.path)
    
    def _options(self) -> ClaudeAgentOptions:
        return ClaudeAgentOptions(
            system_prompt=self.system_prompt,
            max_turns=self.max_turns,
            permission_mode=self.permission_mode,
            cwd=self.cwd,
            cli_path=self.availability.path,
            include_partial_messages=True,
        )
    
    def ensure_available(self) -> None:
        """Raise AgentUnavailableError when no agent executable was found."""
        if not self.availability.available:
            raise AgentUnavailableError(self.availability.error or "Claude CLI not found.")
    
    @staticmethod
    def user_message(prompt_text: str, image: ImageData) -> Dict[str, Any]:
        """Streaming-input user turn: the image block followed by the text block."""
        return {
            "type": "user",
            "message": {
                "role": "user",
                "content": [
                    {
                        "type": "image",
                        "source": {
                            "type": "base64",
                            "media_type": image.media_type,
                            "data": image.base64,
                        },
                    },
                    {"type": "text", "text": prompt_text},
                ],
            },
            "parent_tool_use_id": None,
            "session_id": "default",
        }
    
    async def stream(self, prompt_text: str, image: ImageData) -> AsyncIterator[AgentEvent]:
        """
        Run the session and yield its events in arrival order.
        
        Raises:
            AgentUnavailableError: No agent executable was found
        """
        self.ensure_available()
        
        message = self.user_message(prompt_text, image)
        
        async def prompt_stream():
            yield message
        
        async for sdk_message in query(prompt=prompt_stream(), options=self._options()):
            event = to_agent_event(sdk_message)
            logger.debug("Agent event: %s", event.kind)
            yield event
