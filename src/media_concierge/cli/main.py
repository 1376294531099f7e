"""Main CLI entry point."""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import click
from dotenv import load_dotenv

from .. import __version__
from ..config import Config, ConfigManager
from ..core.interfaces import IMediaRequestHandler, IRadarrService, ISonarrService
from ..core.models import ChatMessage
from ..infrastructure import Container, setup_logging
from ..utils import ConfigurationError, MediaConciergeError

EXIT_WORDS = {"exit", "quit", "bye"}


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(version=__version__, prog_name="media-concierge")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """Media Concierge - chat with your Radarr and Sonarr libraries."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config

    if ctx.invoked_subcommand == "init":
        return

    # API keys are usually referenced as ${VAR} in the YAML
    load_dotenv()

    try:
        config_manager = ConfigManager(config)
        app_config = config_manager.load_config()

        if verbose:
            app_config.logging.level = "DEBUG"
        setup_logging(app_config.logging)

        container = Container(config_manager)
        container.configure_default_services()

        ctx.obj["config"] = app_config
        ctx.obj["container"] = container

    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Initialization error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--user", "-u", help="User id the conversation belongs to")
@click.pass_context
def chat(ctx: click.Context, user: Optional[str]) -> None:
    """Start an interactive conversation."""
    config: Config = ctx.obj["config"]
    container: Container = ctx.obj["container"]
    user_id = user or config.app.default_user_id

    click.echo("Media Concierge - type 'exit' to quit.")
    try:
        asyncio.run(_run_chat(container, user_id, config.app.history_limit))
    except (KeyboardInterrupt, EOFError):
        click.echo("\nBye!")


@cli.command()
@click.argument("message")
@click.option("--user", "-u", help="User id the message belongs to")
@click.pass_context
def ask(ctx: click.Context, message: str, user: Optional[str]) -> None:
    """Send a single message and print the reply."""
    config: Config = ctx.obj["config"]
    container: Container = ctx.obj["container"]

    try:
        reply = asyncio.run(_run_once(container, message, user or config.app.default_user_id))
    except MediaConciergeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(reply)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path.cwd() / "config" / "config.yaml",
    help="Output path for configuration file",
)
def init(output: Path) -> None:
    """Initialize configuration file."""
    try:
        if output.exists():
            if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
                return

        output.parent.mkdir(parents=True, exist_ok=True)

        ConfigManager.create_default_config(output)
        click.echo(f"Configuration file created at: {output}")
        click.echo("Please edit the configuration file with your API keys and server URLs.")

    except Exception as e:
        click.echo(f"Failed to create configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show system status and configuration."""
    config: Config = ctx.obj["config"]
    container: Container = ctx.obj["container"]

    click.echo("Media Concierge Status")
    click.echo("=" * 40)

    click.echo(f"LLM Provider: {config.llm.provider}")
    click.echo(f"LLM Model: {config.llm.model}")
    click.echo(f"Classification Model: {config.llm.classification_model}")
    click.echo(f"Radarr Enabled: {'✓' if config.radarr.enabled else '✗'}")
    click.echo(f"Sonarr Enabled: {'✓' if config.sonarr.enabled else '✗'}")
    click.echo(f"Session TTL: {config.session.ttl_minutes} minutes")
    click.echo(f"Max Search Results: {config.session.max_search_results}")

    try:
        asyncio.run(_check_services_status(container))
    except Exception as e:
        click.echo(f"Service check failed: {e}")


async def _run_chat(container: Container, user_id: str, history_limit: int) -> None:
    handler = container.get(IMediaRequestHandler)  # type: ignore
    history: List[ChatMessage] = []

    try:
        while True:
            message = click.prompt("you", prompt_suffix="> ").strip()
            if not message:
                continue
            if message.lower() in EXIT_WORDS:
                click.echo("Bye!")
                return

            result = await handler.handle_message(message, user_id, history)
            click.echo(f"concierge> {result.reply or ''}")
            for image in result.images:
                click.echo(f"  [{image.cover_type}] {image.url}")
            history = result.messages[-history_limit:]
    finally:
        await container.close()


async def _run_once(container: Container, message: str, user_id: str) -> str:
    handler = container.get(IMediaRequestHandler)  # type: ignore
    try:
        result = await handler.handle_message(message, user_id)
    finally:
        await container.close()
    return result.reply or ""


async def _check_services_status(container: Container) -> None:
    """Check status of external services."""
    checks = (("Radarr", IRadarrService), ("Sonarr", ISonarrService))
    try:
        for label, interface in checks:
            service = container.get(interface)  # type: ignore
            if not service.is_available():
                click.echo(f"{label} Status: ✗ Unavailable")
                continue
            try:
                system_status = await service.get_system_status()
                click.echo(f"{label} Status: ✓ {system_status.get('version', 'Unknown')}")
            except MediaConciergeError as e:
                click.echo(f"{label} Status: ✗ Error ({e})")
    finally:
        await container.close()


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
