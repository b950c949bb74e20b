"""Domain entities."""

from gencli.domain.entities.context import ContextPayload, FileTree
from gencli.domain.entities.conversation import ConversationStats, SavedConversation
from gencli.domain.entities.message import Message, Role
from gencli.domain.entities.project import (
    Commit,
    FileInventory,
    FileMatch,
    ProjectInfo,
    ProjectKind,
    RepositoryInfo,
    SizeStats,
)
from gencli.domain.entities.requests import (
    ChatRequest,
    FileAnalysisRequest,
    GenerateRequest,
)

__all__ = [
    "ChatRequest",
    "Commit",
    "ContextPayload",
    "ConversationStats",
    "FileAnalysisRequest",
    "FileInventory",
    "FileMatch",
    "FileTree",
    "GenerateRequest",
    "Message",
    "ProjectInfo",
    "ProjectKind",
    "RepositoryInfo",
    "Role",
    "SavedConversation",
    "SizeStats",
]
