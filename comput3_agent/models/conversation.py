"""Conversation models exchanged between the agent runtime and actions."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Message role in conversation."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ModelType(str, Enum):
    """Model sizes an action can ask the runtime for."""

    TEXT_SMALL = "text_small"
    TEXT_LARGE = "text_large"


class ErrorKind(str, Enum):
    """Failure categories surfaced in action responses."""

    MISSING_CREDENTIAL = "missing_credential"
    EXTRACTION_FAILURE = "extraction_failure"
    REMOTE_ERROR = "remote_error"
    UNEXPECTED_ERROR = "unexpected_error"


class ConversationMessage(BaseModel):
    """A previous turn used as context for model-assisted extraction.

    ``content`` is either plain text or a content mapping carrying ``text``.
    """

    role: MessageRole = MessageRole.USER
    content: str | dict[str, Any] = ""

    @property
    def text(self) -> str | None:
        """Return the turn text, if any."""
        if isinstance(self.content, str):
            return self.content
        text = self.content.get("text")
        return text if isinstance(text, str) else None


class State(BaseModel):
    """Per-turn state handed to action handlers."""

    messages: list[ConversationMessage] = Field(default_factory=list)


class Memory(BaseModel):
    """Incoming user message.

    ``content`` may carry free ``text`` and/or fields that are already in a
    command's typed shape (``type``/``expires`` for launch, ``workload`` for
    stop).
    """

    content: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str | None:
        """Return the free text of the message, if any."""
        text = self.content.get("text")
        return text if isinstance(text, str) else None


class ActionResponse(BaseModel):
    """Payload delivered to the response callback."""

    text: str
    content: dict[str, Any] = Field(default_factory=dict)

    @property
    def success(self) -> bool:
        """Whether the response reports a successful action."""
        return bool(self.content.get("success"))
