"""Rendering of status, project and conversation views."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gencli import __version__
from gencli.domain.entities import ConversationStats, ProjectInfo
from gencli.domain.services.file_rules import format_file_size

if TYPE_CHECKING:
    from gencli.application import Engine, HealthReport
    from gencli.presentation.console import Console

CHAT_HELP = {
    "Chat Commands": [
        ("help", "Show this help"),
        ("status", "Show system status"),
        ("clear", "Clear the screen"),
        ("exit, quit, bye", "Leave interactive mode"),
    ],
    "Conversation Commands": [
        ("/save [file]", "Save the conversation"),
        ("/load <file>", "Load a saved conversation"),
        ("/list", "List saved conversations"),
        ("/clear", "Start a new conversation"),
        ("/stats", "Show conversation statistics"),
        ("/export [json|markdown|text]", "Print the conversation in a format"),
    ],
}

COMMAND_HELP = {
    "Core Commands": [
        ("gen-cli", "Start interactive mode"),
        ("gen-cli chat [MESSAGE]", "Chat with the assistant"),
        ("gen-cli ask MESSAGE", "Ask a single question"),
        ("gen-cli generate TYPE [DESCRIPTION]", "Generate code or content"),
        ("gen-cli analyze [PATH]", "Analyze a project or a file"),
    ],
    "System Commands": [
        ("gen-cli init [--force]", "Create the configuration directory"),
        ("gen-cli status [--check-connection]", "Show system status"),
        ("gen-cli dashboard", "Show the system dashboard"),
        ("gen-cli version", "Show version information"),
        ("gen-cli help [COMMAND]", "Show help"),
    ],
}


def format_duration(seconds: float) -> str:
    """Format a duration as e.g. "1h 2m 3s"."""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def git_label(info: ProjectInfo) -> str:
    repository = info.repository
    if repository.error:
        return repository.error
    if not repository.is_repo:
        return "Not a git repository"
    return f"{repository.branch} ({repository.status})"


def project_data(info: ProjectInfo) -> dict[str, Any]:
    """Label/value pairs describing a project snapshot."""
    return {
        "Name": info.name,
        "Type": info.kind.value,
        "Path": info.path,
        "Git": git_label(info),
        "Files": info.size_stats.total_files,
        "Size": format_file_size(info.size_stats.total_size),
        "Key files": info.files.important,
        "Config files": info.files.config,
        "Source files": info.files.source,
    }


def project_rows(info: ProjectInfo) -> list[list[Any]]:
    return [[key, value] for key, value in project_data(info).items()]


def status_data(engine: Engine, report: HealthReport) -> dict[str, Any]:
    config = engine.config
    return {
        "Version": report.version,
        "Status": "Healthy" if report.healthy else "Unhealthy",
        "Config": report.config_path,
        "Default LLM": config.default_provider or "-",
        "Available LLMs": config.available_providers(),
        "Working directory": str(engine.scanner.working_directory),
        "Session": engine.conversation.session_id,
        "Messages": len(engine.conversation),
    }


def stats_data(stats: ConversationStats) -> dict[str, Any]:
    return {
        "Session": stats.session_id,
        "Total messages": stats.total_messages,
        "User": stats.per_role_counts.get("user", 0),
        "Assistant": stats.per_role_counts.get("assistant", 0),
        "System": stats.per_role_counts.get("system", 0),
        "Duration": format_duration(stats.duration_seconds),
        "Average length": f"{stats.average_message_length:.1f} chars",
    }


def show_welcome(console: Console, engine: Engine) -> None:
    console.panel(
        f"Gen CLI v{__version__}\n"
        f"Working directory: {engine.scanner.working_directory}\n"
        f"Default LLM: {engine.config.default_provider or 'none'}\n\n"
        "Type 'help' for commands, 'exit' to quit.",
        title="Welcome",
    )


def show_health(console: Console, report: HealthReport) -> None:
    for issue in report.issues:
        console.error(issue)
    for warning in report.warnings:
        console.warning(warning)


def show_status(console: Console, engine: Engine, check_connection: bool = True) -> HealthReport:
    """Render the system status and return the underlying health report."""
    report = engine.health_check(check_connection=check_connection)
    console.key_values("System Status", status_data(engine, report))
    show_health(console, report)
    if report.healthy:
        console.success("System is healthy")
    return report


def show_stats(console: Console, engine: Engine) -> None:
    console.key_values("Conversation Statistics", stats_data(engine.conversation.stats()))


def show_conversations(console: Console, engine: Engine) -> None:
    saved = engine.conversation.list_conversations()
    if not saved:
        console.info("No saved conversations")
        return
    rows = [
        [
            conversation.filename,
            f"{conversation.created_at:%Y-%m-%d %H:%M}",
            conversation.message_count,
            conversation.last_message or "",
        ]
        for conversation in saved
    ]
    console.table("Saved Conversations", rows, ["File", "Created", "Messages", "Last message"])


def show_dashboard(console: Console, engine: Engine) -> HealthReport:
    """Render the status, project and conversation sections together."""
    report = engine.health_check()
    console.header("Gen CLI Dashboard")
    console.key_values("System Status", status_data(engine, report))
    console.key_values("Project", project_data(engine.scanner.project_info))
    console.key_values("Conversation", stats_data(engine.conversation.stats()))
    show_health(console, report)
    return report
