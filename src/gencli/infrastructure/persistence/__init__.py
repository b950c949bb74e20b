"""Persistence layer."""

from gencli.infrastructure.persistence.conversation_store import (
    AUTO_SAVE_INTERVAL,
    ConversationStore,
    SessionIdGenerator,
)

__all__ = [
    "AUTO_SAVE_INTERVAL",
    "ConversationStore",
    "SessionIdGenerator",
]
