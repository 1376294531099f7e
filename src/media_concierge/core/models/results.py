"""Conversation and strategy result models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Chat message author."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """Single chat message."""

    role: MessageRole = Field(..., description="Author")
    content: str = Field(..., description="Message text")

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.ASSISTANT, content=content)


class MediaImage(BaseModel):
    """Poster or fanart attached to a reply."""

    url: str = Field(..., description="Image URL")
    title: Optional[str] = Field(None, description="Title the image belongs to")
    cover_type: str = Field(default="poster", description="Cover type")


class StrategyResult(BaseModel):
    """Outcome of handling one message: images plus the updated conversation."""

    images: List[MediaImage] = Field(default_factory=list, description="Images to display")
    messages: List[ChatMessage] = Field(
        default_factory=list, description="History with the new messages appended"
    )

    @property
    def reply(self) -> Optional[str]:
        """Text of the last assistant message, if any."""
        for message in reversed(self.messages):
            if message.role == MessageRole.ASSISTANT:
                return message.content
        return None
