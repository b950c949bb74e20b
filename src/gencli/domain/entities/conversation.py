"""Conversation summary entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ConversationStats:
    """Statistics for the current session.

    Attributes:
        session_id: Current session identifier.
        total_messages: Number of messages.
        per_role_counts: Message count per role ("user", "assistant", "system").
        duration_seconds: Last minus first message timestamp (0 for <= 1 message).
        average_message_length: Mean content length in characters (0 if empty).
    """

    session_id: str
    total_messages: int
    per_role_counts: dict[str, int] = field(default_factory=dict)
    duration_seconds: float = 0.0
    average_message_length: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "total_messages": self.total_messages,
            "user_messages": self.per_role_counts.get("user", 0),
            "assistant_messages": self.per_role_counts.get("assistant", 0),
            "system_messages": self.per_role_counts.get("system", 0),
            "session_duration": self.duration_seconds,
            "average_message_length": self.average_message_length,
        }


@dataclass(frozen=True)
class SavedConversation:
    """A conversation file found on disk."""

    filename: str
    session_id: str
    created_at: datetime
    message_count: int
    last_message: str | None = None
