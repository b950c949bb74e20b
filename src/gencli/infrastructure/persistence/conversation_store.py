"""JSON file backed conversation history."""

import json
import logging
import re
import time
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from gencli import __version__
from gencli.config import ConfigManager
from gencli.domain.entities import ConversationStats, Message, Role, SavedConversation
from gencli.domain.exceptions import ConversationLoadError

logger = logging.getLogger(__name__)

AUTO_SAVE_INTERVAL = 10
FILENAME_PREFIX = "conversation_"
EXPORT_FORMATS = ("json", "markdown", "text")


class SessionIdGenerator:
    """Mints session ids of the form YYYYMMDD_HHMMSS_mmm.

    Ids from one generator are strictly increasing: when two are requested
    within the same millisecond the second one is moved to the next
    millisecond.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last_ms = 0

    def __call__(self) -> str:
        ms = max(int(self._clock() * 1000), self._last_ms + 1)
        self._last_ms = ms
        moment = datetime.fromtimestamp(ms / 1000)
        return f"{moment:%Y%m%d_%H%M%S}_{ms % 1000:03d}"


_session_ids = SessionIdGenerator()


def _write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    """Serialize first, then replace path through a temporary file."""
    payload = json.dumps(data, indent=2, ensure_ascii=False)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(path)
    finally:
        tmp.unlink(missing_ok=True)


class ConversationStore:
    """Ordered message log for one session at a time.

    Messages are kept in insertion order, which is also chronological
    order. Sessions are saved as conversation_<session_id>.json under the
    conversations directory.
    """

    def __init__(
        self,
        config: ConfigManager,
        conversations_dir: str | Path | None = None,
        *,
        clock: Callable[[], float] = time.time,
        session_ids: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the store and start a new session.

        Args:
            config: Configuration (history limit, auto-save flag).
            conversations_dir: Where sessions are saved. Defaults to
                <config_dir>/conversations.
            clock: Source of message timestamps.
            session_ids: Session id factory.
        """
        self._config = config
        self._clock = clock
        self._new_session_id = session_ids or _session_ids
        if conversations_dir is None:
            conversations_dir = config.config_dir / "conversations"
        self._conversations_dir = Path(conversations_dir)
        self._conversations_dir.mkdir(parents=True, exist_ok=True)

        self._messages: list[Message] = []
        self._session_id = self._new_session_id()
        self._created_at = self._clock()

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def created_at(self) -> float:
        return self._created_at

    @property
    def conversations_dir(self) -> Path:
        return self._conversations_dir

    @property
    def messages(self) -> list[Message]:
        """A copy of the message list, oldest first."""
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def add_message(
        self,
        role: Role | str,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> Message:
        """Append a message to the current session.

        Every AUTO_SAVE_INTERVAL-th message triggers an auto-save when
        auto_save_conversations is enabled.

        Raises:
            ValueError: role is not user, assistant or system.
        """
        message = Message(
            role=Role(role),
            content=content,
            timestamp=self._clock(),
            session_id=self._session_id,
            metadata=dict(metadata or {}),
        )
        self._messages.append(message)
        self._auto_save_if_enabled()
        return message

    def add_user_message(self, content: str, metadata: dict[str, Any] | None = None) -> Message:
        return self.add_message(Role.USER, content, metadata)

    def add_assistant_message(
        self, content: str, metadata: dict[str, Any] | None = None
    ) -> Message:
        return self.add_message(Role.ASSISTANT, content, metadata)

    def add_system_message(self, content: str, metadata: dict[str, Any] | None = None) -> Message:
        return self.add_message(Role.SYSTEM, content, metadata)

    def get_recent_messages(self, limit: int | None = None) -> list[Message]:
        """Return the last `limit` messages, oldest first.

        Args:
            limit: Maximum number of messages. Defaults to the
                conversation_history_limit setting.
        """
        if limit is None:
            limit = self._config.history_limit
        if limit <= 0:
            return []
        return self._messages[-limit:]

    def get_api_messages(self, limit: int | None = None) -> list[dict[str, str]]:
        """Recent messages in OpenAI format."""
        return [message.to_api() for message in self.get_recent_messages(limit)]

    def clear(self) -> None:
        """Drop all messages and start a new session. Saved files are kept."""
        self._messages = []
        self._session_id = self._new_session_id()
        self._created_at = self._clock()

    def default_filename(self) -> str:
        return f"{FILENAME_PREFIX}{self._session_id}.json"

    def _resolve(self, filename: str | Path) -> Path:
        path = Path(filename)
        if path.is_absolute():
            return path
        return self._conversations_dir / path

    def save(self, filename: str | Path | None = None) -> Path:
        """Save the session.

        Args:
            filename: File name under the conversations directory (or an
                absolute path). Defaults to conversation_<session_id>.json.

        Returns:
            Path of the written file.
        """
        path = self._resolve(filename or self.default_filename())
        data = {
            "session_id": self._session_id,
            "created_at": self._created_at,
            "messages": [message.to_dict() for message in self._messages],
            "metadata": {
                "version": __version__,
                "total_messages": len(self._messages),
            },
        }
        _write_json_atomic(path, data)
        logger.debug("Saved conversation %s to %s", self._session_id, path)
        return path

    def load(self, filename: str | Path) -> bool:
        """Replace the current session with a saved one.

        Returns:
            True on success, False if the file does not exist. In both
            False and error cases the current session is unchanged.

        Raises:
            ConversationLoadError: The file exists but cannot be parsed.
        """
        path = self._resolve(filename)
        if not path.exists():
            logger.info("Conversation file not found: %s", path)
            return False

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            session_id, created_at, messages = self._parse(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise ConversationLoadError(
                str(path), f"Failed to load conversation: {e}"
            ) from e

        self._messages = messages
        self._session_id = session_id
        self._created_at = created_at
        logger.debug("Loaded conversation %s (%d messages)", session_id, len(messages))
        return True

    def _parse(self, data: Any) -> tuple[str, float, list[Message]]:
        if not isinstance(data, dict):
            raise TypeError("conversation file must contain a JSON object")
        session_id = str(data.get("session_id") or self._new_session_id())
        created_at = float(data.get("created_at") or self._clock())
        raw_messages = data.get("messages") or []
        if not isinstance(raw_messages, list):
            raise TypeError("'messages' must be a list")
        messages = [Message.from_dict(raw, session_id) for raw in raw_messages]
        return session_id, created_at, messages

    def list_conversations(self) -> list[SavedConversation]:
        """List saved conversations, newest first. Unreadable files are skipped."""
        conversations = []
        for path in sorted(self._conversations_dir.glob(f"{FILENAME_PREFIX}*.json")):
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
                messages = data.get("messages") or []
                last = messages[-1].get("content") if messages else None
                conversations.append(
                    SavedConversation(
                        filename=path.name,
                        session_id=str(data.get("session_id", "")),
                        created_at=datetime.fromtimestamp(float(data["created_at"])),
                        message_count=len(messages),
                        last_message=last[:100] if isinstance(last, str) else None,
                    )
                )
            except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
                logger.debug("Skipping unreadable conversation %s: %s", path, e)
        return sorted(conversations, key=lambda c: c.created_at, reverse=True)

    def stats(self) -> ConversationStats:
        per_role = {role.value: 0 for role in Role}
        for message in self._messages:
            per_role[message.role.value] += 1

        duration = 0.0
        average = 0.0
        if self._messages:
            duration = self._messages[-1].timestamp - self._messages[0].timestamp
            average = sum(len(m.content) for m in self._messages) / len(self._messages)

        return ConversationStats(
            session_id=self._session_id,
            total_messages=len(self._messages),
            per_role_counts=per_role,
            duration_seconds=duration,
            average_message_length=average,
        )

    def search(self, query: str, case_sensitive: bool = False) -> list[Message]:
        """Messages whose content matches the regular expression query."""
        flags = 0 if case_sensitive else re.IGNORECASE
        pattern = re.compile(query, flags)
        return [message for message in self._messages if pattern.search(message.content)]

    def summary(self, max_length: int = 500) -> str:
        """Role-prefixed transcript, keeping the newest lines within max_length."""
        if not self._messages:
            return "Empty conversation"

        lines = [f"{m.role.value}: {m.content}" for m in self._messages]
        if sum(len(m.content) for m in self._messages) <= max_length:
            return "\n".join(lines)

        kept: list[str] = []
        current_length = 0
        for line in reversed(lines):
            if current_length + len(line) > max_length:
                kept.insert(0, "... (conversation truncated)")
                break
            kept.insert(0, line)
            current_length += len(line)
        return "\n".join(kept)

    def export(self, format: str = "json") -> str:
        """Render the session as json, markdown or text.

        Raises:
            ValueError: Unsupported format.
        """
        if format == "json":
            return json.dumps(
                {
                    "session_id": self._session_id,
                    "messages": [m.to_dict() for m in self._messages],
                    "stats": self.stats().to_dict(),
                    "exported_at": self._clock(),
                },
                ensure_ascii=False,
            )

        exported = datetime.fromtimestamp(self._clock()).strftime("%Y-%m-%d %H:%M:%S")
        if format == "markdown":
            parts = [
                "# Conversation Export\n\n",
                f"**Session ID:** {self._session_id}\n",
                f"**Exported:** {exported}\n\n",
            ]
            for index, message in enumerate(self._messages, start=1):
                parts.append(f"## Message {index} ({message.role.value.capitalize()})\n\n")
                parts.append(f"{message.content}\n\n---\n\n")
            return "".join(parts)

        if format == "text":
            parts = [
                "Conversation Export\n",
                f"Session ID: {self._session_id}\n",
                f"Exported: {exported}\n",
                "=" * 50 + "\n\n",
            ]
            for index, message in enumerate(self._messages, start=1):
                parts.append(f"[{index}] {message.role.value.upper()}: {message.content}\n\n")
            return "".join(parts)

        raise ValueError(
            f"Unsupported export format: {format} (expected one of {', '.join(EXPORT_FORMATS)})"
        )

    def _auto_save_if_enabled(self) -> None:
        if not self._config.get("auto_save_conversations", True):
            return
        if len(self._messages) % AUTO_SAVE_INTERVAL != 0:
            return
        try:
            path = self.save()
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to auto-save conversation: %s", e)
        else:
            logger.debug("Auto-saved conversation to %s", path)
