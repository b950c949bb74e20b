"""Tests for domain entities."""

import pytest

from gencli.domain.entities import (
    ChatRequest,
    ContextPayload,
    ConversationStats,
    FileAnalysisRequest,
    GenerateRequest,
    Message,
    ProjectKind,
    RepositoryInfo,
    Role,
)
from gencli.domain.exceptions import AgentExecutionError, ConversationLoadError


class TestMessage:
    """Message entity tests."""

    def test_role_coerced_from_string(self) -> None:
        """Test that a role string is converted to Role."""
        message = Message(
            role="user", content="hi", timestamp=1.0, session_id="s"  # type: ignore[arg-type]
        )

        assert message.role is Role.USER

    def test_unknown_role_rejected(self) -> None:
        """Test that roles outside user/assistant/system are rejected."""
        with pytest.raises(ValueError):
            Message(
                role="tool", content="hi", timestamp=1.0, session_id="s"  # type: ignore[arg-type]
            )

    def test_message_is_frozen(self) -> None:
        """Test that message is immutable."""
        message = Message(role=Role.USER, content="hi", timestamp=1.0, session_id="s")

        with pytest.raises(AttributeError):
            message.content = "changed"  # type: ignore[misc]

    def test_to_api(self) -> None:
        """Test OpenAI-format conversion drops timestamp and metadata."""
        message = Message(
            role=Role.ASSISTANT,
            content="answer",
            timestamp=1.0,
            session_id="s",
            metadata={"provider": "openai"},
        )

        assert message.to_api() == {"role": "assistant", "content": "answer"}

    def test_from_dict_uses_fallback_session(self) -> None:
        """Test that the fallback session id is used when absent."""
        message = Message.from_dict(
            {"role": "system", "content": "x", "timestamp": 2}, session_id="fallback"
        )

        assert message.session_id == "fallback"
        assert message.timestamp == 2.0
        assert message.metadata == {}

    def test_from_dict_rejects_non_string_content(self) -> None:
        """Test that non-string content is rejected."""
        with pytest.raises(ValueError):
            Message.from_dict({"role": "user", "content": 42, "timestamp": 1})

    def test_from_dict_missing_field(self) -> None:
        """Test that a missing field raises KeyError."""
        with pytest.raises(KeyError):
            Message.from_dict({"role": "user", "timestamp": 1})


class TestRequests:
    """Request object tests."""

    def test_chat_request_defaults(self) -> None:
        """Test chat request defaults."""
        request = ChatRequest(message="hello")

        assert request.include_context is True
        assert request.stream is True
        assert request.with_history is True
        assert request.provider is None

    @pytest.mark.parametrize("message", ["", "   "])
    def test_chat_request_rejects_blank_message(self, message: str) -> None:
        """Test that blank messages are rejected."""
        with pytest.raises(ValueError):
            ChatRequest(message=message)

    def test_chat_request_rejects_temperature_out_of_range(self) -> None:
        """Test temperature bounds."""
        with pytest.raises(ValueError):
            ChatRequest(message="hi", temperature=2.5)

    def test_chat_request_rejects_negative_history_limit(self) -> None:
        """Test history limit bounds."""
        with pytest.raises(ValueError):
            ChatRequest(message="hi", history_limit=-1)

    def test_generate_request_requires_description(self) -> None:
        """Test that generation needs a description."""
        with pytest.raises(ValueError):
            GenerateRequest(kind="class", description="")

    def test_generate_request_default_language(self) -> None:
        """Test default generation language."""
        assert GenerateRequest(kind="class", description="a user model").language == "python"

    def test_file_analysis_allows_empty_content(self) -> None:
        """Test that an empty file can be analyzed."""
        request = FileAnalysisRequest(path="empty.py", content="", extension=".py")

        assert request.content == ""


class TestContextPayload:
    """ContextPayload tests."""

    def test_to_dict_shape(self) -> None:
        """Test the serialized payload layout."""
        payload = ContextPayload(
            name="app",
            kind=ProjectKind.PYTHON,
            repository=RepositoryInfo(is_repo=True, branch="main", status="clean"),
            working_directory="/work/app",
            timestamp="2024-01-01T00:00:00",
            important_files={"README.md": "# app"},
        )

        data = payload.to_dict()

        assert data["project"]["name"] == "app"
        assert data["project"]["type"] == "Python"
        assert data["project"]["git_info"]["branch"] == "main"
        assert data["working_directory"] == "/work/app"
        assert data["important_files"] == {"README.md": "# app"}
        assert "file_tree" not in data

    def test_to_prompt_text_is_yaml(self) -> None:
        """Test that the prompt text contains the project name."""
        payload = ContextPayload(
            name="app",
            kind=ProjectKind.GENERAL,
            repository=RepositoryInfo.not_a_repository(),
            working_directory="/work/app",
            timestamp="2024-01-01T00:00:00",
        )

        text = payload.to_prompt_text()

        assert "name: app" in text
        assert "type: General" in text


class TestConversationStats:
    """ConversationStats tests."""

    def test_to_dict(self) -> None:
        """Test per-role counts are flattened."""
        stats = ConversationStats(
            session_id="s",
            total_messages=3,
            per_role_counts={"user": 2, "assistant": 1, "system": 0},
            duration_seconds=5.0,
            average_message_length=4.0,
        )

        data = stats.to_dict()

        assert data["user_messages"] == 2
        assert data["assistant_messages"] == 1
        assert data["system_messages"] == 0
        assert data["session_duration"] == 5.0


class TestExceptions:
    """Domain exception tests."""

    def test_agent_execution_error_message(self) -> None:
        """Test that the original message is kept."""
        error = AgentExecutionError("timeout")

        assert error.original_message == "timeout"
        assert "timeout" in str(error)

    def test_conversation_load_error_keeps_path(self) -> None:
        """Test that the failing path is recorded."""
        error = ConversationLoadError("/tmp/c.json", "bad json")

        assert error.path == "/tmp/c.json"
        assert str(error) == "bad json"
