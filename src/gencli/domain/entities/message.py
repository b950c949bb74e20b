"""Message entity."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Message author role."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class Message:
    """A single conversation message.

    Attributes:
        role: Who wrote the message.
        content: Message text.
        timestamp: Seconds since the epoch.
        session_id: Session the message belongs to.
        metadata: Free-form metadata.
    """

    role: Role
    content: str
    timestamp: float
    session_id: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Role("tool") raises ValueError
        object.__setattr__(self, "role", Role(self.role))

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp,
            "session_id": self.session_id,
            "metadata": dict(self.metadata),
        }

    def to_api(self) -> dict[str, str]:
        """Return the OpenAI-format dict sent to the LLM."""
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any], session_id: str | None = None) -> "Message":
        """Build a message from its serialized form.

        Args:
            data: Serialized message.
            session_id: Session id used when the data carries none.

        Raises:
            ValueError: The role is unknown or a field has the wrong type.
            KeyError: A required field is missing.
        """
        content = data["content"]
        if not isinstance(content, str):
            raise ValueError(
                f"Message content must be a string, got {type(content).__name__}"
            )
        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise ValueError("Message metadata must be a mapping")
        return cls(
            role=Role(data["role"]),
            content=content,
            timestamp=float(data["timestamp"]),
            session_id=str(data.get("session_id") or session_id or ""),
            metadata=metadata,
        )
