"""gen-cli command line interface."""

import logging
import platform
from dataclasses import dataclass
from pathlib import Path

import click

from gencli import __version__
from gencli.application import Engine
from gencli.bootstrap import create_engine
from gencli.config import ConfigManager, ConfigurationError, configure_logging
from gencli.domain.entities import ChatRequest, FileAnalysisRequest, GenerateRequest
from gencli.domain.exceptions import AgentExecutionError
from gencli.domain.services.file_rules import DEFAULT_IGNORE_PATTERNS
from gencli.presentation import panels
from gencli.presentation.console import Console, create_console
from gencli.presentation.interactive import InteractiveSession

logger = logging.getLogger(__name__)

ANALYZE_FORMATS = ("panel", "json", "table")


@dataclass
class AppContext:
    """Objects shared by every command."""

    engine: Engine
    console: Console


def build_app(
    config_dir: Path | None = None,
    *,
    verbose: bool = False,
    debug: bool = False,
    plain: bool = False,
) -> AppContext:
    """Load configuration, set up logging and wire the engine.

    An unreadable configuration file is reported and replaced by the
    built-in defaults.
    """
    config = ConfigManager(config_dir)
    load_error = None
    try:
        config.load()
    except ConfigurationError as e:
        load_error = e
        config.use_defaults()

    if debug:
        config.apply_overrides({"log_level": "debug"})
    elif verbose:
        config.apply_overrides({"log_level": "info"})
    configure_logging(config.resolve().logging)

    console = create_console(config, plain=plain, show_debug=debug)
    if load_error is not None:
        logger.debug("Configuration load failed in %s", config.config_dir, exc_info=load_error)
        console.error(str(load_error))
        console.warning("Continuing with the default configuration")

    return AppContext(engine=create_engine(config), console=console)


def _send(app: AppContext, message: str, stream: bool | None, include_context: bool) -> None:
    if stream is None:
        stream = app.engine.config.resolve().generation.streaming
    try:
        request = ChatRequest(message=message, include_context=include_context, stream=stream)
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    try:
        if stream:
            app.engine.process_message(request, on_chunk=app.console.write)
            app.console.print("")
        else:
            app.console.print(app.engine.process_message(request))
    except AgentExecutionError as e:
        raise click.ClickException(str(e)) from e


def _interactive(
    app: AppContext,
    stream: bool | None = None,
    include_context: bool = True,
) -> None:
    if stream is None:
        stream = app.engine.config.resolve().generation.streaming
    panels.show_welcome(app.console, app.engine)
    InteractiveSession(
        app.engine,
        app.console,
        stream=stream,
        include_context=include_context,
    ).run()


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--config",
    "-c",
    "config_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Configuration directory (default: $GEN_CLI_HOME or ~/.gen_cli).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log informational messages.")
@click.option("--debug", "-d", is_flag=True, help="Log debug messages.")
@click.option("--plain", is_flag=True, help="Plain text output without colors.")
@click.version_option(version=__version__, prog_name="gen-cli")
@click.pass_context
def cli(
    ctx: click.Context,
    config_dir: Path | None,
    verbose: bool,
    debug: bool,
    plain: bool,
) -> None:
    """Gen CLI - AI assisted development from the terminal.

    Run without a command to start interactive mode.
    """
    if ctx.obj is None:
        ctx.obj = build_app(config_dir, verbose=verbose, debug=debug, plain=plain)
    if ctx.invoked_subcommand is None:
        _interactive(ctx.obj)


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite an existing configuration.")
@click.pass_obj
def init(app: AppContext, force: bool) -> None:
    """Create the configuration directory with default files."""
    engine = app.engine
    config = engine.config
    if config.config_exists() and not force:
        app.console.warning(
            f"Configuration already exists at {config.config_dir}. "
            "Use --force to overwrite it."
        )
        return

    results = {}
    actions = {
        "Writing default configuration": lambda: engine.setup_configuration(force=True),
        "Loading configuration": engine.reload_config,
        "Checking system health": lambda: results.setdefault("health", engine.health_check()),
    }
    app.console.run_steps(list(actions), lambda _number, step: actions[step]())

    panels.show_health(app.console, results["health"])
    app.console.success(f"Configuration initialized in {config.config_dir}")
    app.console.info(f"Edit {config.llm_config_file_path} to configure your LLM providers.")


@cli.command()
@click.argument("message", required=False)
@click.option("--stream/--no-stream", default=None, help="Stream the response.")
@click.option("--context/--no-context", default=True, help="Include project context.")
@click.pass_obj
def chat(app: AppContext, message: str | None, stream: bool | None, context: bool) -> None:
    """Chat with the assistant. Without MESSAGE, start interactive mode."""
    if message is None:
        _interactive(app, stream=stream, include_context=context)
        return
    _send(app, message, stream, context)


@cli.command()
@click.argument("message")
@click.option("--stream/--no-stream", default=None, help="Stream the response.")
@click.option("--context/--no-context", default=True, help="Include project context.")
@click.pass_obj
def ask(app: AppContext, message: str, stream: bool | None, context: bool) -> None:
    """Ask a single question."""
    _send(app, message, stream, context)


@cli.command()
@click.argument("kind", metavar="TYPE")
@click.argument("description", required=False)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the result to a file.",
)
@click.option("--language", "-l", default="python", show_default=True, help="Target language.")
@click.pass_obj
def generate(
    app: AppContext,
    kind: str,
    description: str | None,
    output: Path | None,
    language: str,
) -> None:
    """Generate code or content of TYPE (class, function, test...)."""
    if description is None:
        description = click.prompt("What would you like to generate?")
    try:
        request = GenerateRequest(kind=kind, description=description, language=language)
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    app.console.info(f"Generating {kind} in {language}...")
    try:
        result = app.engine.generate(request)
    except AgentExecutionError as e:
        raise click.ClickException(str(e)) from e

    if output is not None:
        try:
            output.write_text(result, encoding="utf-8")
        except OSError as e:
            raise click.ClickException(f"Unable to write {output}: {e}") from e
        app.console.success(f"Saved to {output}")
    else:
        app.console.code(result, language, title=f"Generated {kind}")


@cli.command()
@click.argument(
    "path",
    required=False,
    default=".",
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--depth",
    default=3,
    show_default=True,
    type=click.IntRange(min=1),
    help="File tree depth.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(ANALYZE_FORMATS),
    default="panel",
    show_default=True,
)
@click.pass_obj
def analyze(app: AppContext, path: Path, depth: int, output_format: str) -> None:
    """Analyze a project directory, or a single file with the LLM."""
    if path.is_file():
        _analyze_file(app, path, output_format)
        return

    info = app.engine.scanner.analyze(path)
    if output_format == "json":
        app.console.json(
            {
                "project": info.to_dict(),
                "file_tree": app.engine.scanner.build_file_tree(
                    path, depth, DEFAULT_IGNORE_PATTERNS
                ),
            }
        )
    elif output_format == "table":
        app.console.table("Project Analysis", panels.project_rows(info), ["Property", "Value"])
    else:
        app.console.key_values("Project Analysis", panels.project_data(info))


def _analyze_file(app: AppContext, path: Path, output_format: str) -> None:
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise click.ClickException(f"Unable to read {path}: {e}") from e

    request = FileAnalysisRequest(path=str(path), content=content, extension=path.suffix)
    app.console.info(f"Analyzing {path}...")
    try:
        result = app.engine.analyze_file(request)
    except AgentExecutionError as e:
        raise click.ClickException(str(e)) from e

    if output_format == "json":
        app.console.json({"path": str(path), "analysis": result})
    else:
        app.console.panel(result, title=f"Analysis: {path.name}")


@cli.command()
@click.option(
    "--check-connection/--no-check-connection",
    default=True,
    help="Send a test request to the default LLM.",
)
@click.pass_context
def status(ctx: click.Context, check_connection: bool) -> None:
    """Show system status. Exits with 1 when unhealthy."""
    app: AppContext = ctx.obj
    report = panels.show_status(app.console, app.engine, check_connection=check_connection)
    if not report.healthy:
        ctx.exit(1)


@cli.command()
@click.pass_obj
def dashboard(app: AppContext) -> None:
    """Show status, project and conversation information."""
    panels.show_dashboard(app.console, app.engine)


@cli.command()
@click.pass_obj
def version(app: AppContext) -> None:
    """Show version information."""
    app.console.print(f"gen-cli {__version__}")
    app.console.print(f"Python {platform.python_version()} ({platform.system()})")


@cli.command("help")
@click.argument("command", required=False)
@click.pass_context
def help_command(ctx: click.Context, command: str | None) -> None:
    """Show help for all commands or for COMMAND."""
    app: AppContext = ctx.obj
    if command is None:
        app.console.help(panels.COMMAND_HELP, title="Gen CLI Help")
        return

    parent = ctx.parent
    target = cli.get_command(parent, command)
    if target is None:
        raise click.UsageError(f"Unknown command: {command}")
    with click.Context(target, info_name=command, parent=parent) as command_ctx:
        click.echo(target.get_help(command_ctx))


def main() -> None:
    cli(prog_name="gen-cli")
