"""CLI entry point for Dircast."""

import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dircast.auth import ConsoleCodePrompt, CredentialBroker
from dircast.config.logging import setup_logging
from dircast.config.manager import ConfigManager
from dircast.config.schema import GlobalConfig
from dircast.feeds.models import ChannelMetadata
from dircast.pipeline import EpisodeFailure, PipelineOptions, build_pipeline
from dircast.utils.errors import ConfigError, DircastError, InvalidConfigError

app = typer.Typer(
    name="dircast",
    help="Publish a Dropbox folder of audio files as a podcast feed",
    no_args_is_help=True,
)
# stdout carries only the feed; everything else goes to stderr
err_console = Console(stderr=True)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
) -> None:
    """Dircast - turn a Dropbox folder into a podcast feed."""
    # Initialize logging before any command runs
    setup_logging(verbose=verbose, log_file=log_file)
    ctx.obj = {"verbose": verbose}


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from dircast import __version__

    err_console.print(f"[bold cyan]Dircast[/bold cyan] v{__version__}")


def _load_config(ctx: typer.Context, config_dir: Path | None) -> GlobalConfig:
    config = ConfigManager(config_dir=config_dir).load_config()
    if not (ctx.obj or {}).get("verbose"):
        logging.getLogger("dircast").setLevel(config.log_level)
    return config


def _make_broker(config: GlobalConfig) -> CredentialBroker:
    return CredentialBroker(
        config.dropbox.app_key,
        config.dropbox.app_secret,
        prompt=ConsoleCodePrompt(err_console),
        timeout=config.http_timeout_seconds,
    )


def _report_refresh_token(refresh_token: str) -> None:
    err_console.print(
        "\n[green]✓[/green] Obtained refresh token. Store it securely and set "
        "[cyan]DROPBOX_REFRESH_TOKEN[/cyan] to skip this prompt next time:"
    )
    err_console.print(refresh_token, markup=False, highlight=False, soft_wrap=True)


def _report_failures(failures: list[EpisodeFailure]) -> None:
    table = Table(title="[bold]Skipped files[/bold]")
    table.add_column("File", style="cyan")
    table.add_column("Reason", style="yellow")
    table.add_column("Details", style="dim")

    for failure in failures:
        table.add_row(failure.display_name, failure.error_kind, failure.message)

    err_console.print(table)


@app.command("generate")
def generate_feed(
    ctx: typer.Context,
    directory_path: str = typer.Argument(..., help="Dropbox folder, e.g. /Podcasts"),
    base_url: str = typer.Argument(..., help="Public URL of the feed (channel link)"),
    image_url: str = typer.Argument(..., help="Cover image URL"),
    title: str | None = typer.Option(None, "--title", help="Channel title"),
    description: str | None = typer.Option(
        None, "--description", help="Channel description"
    ),
    author: str | None = typer.Option(None, "--author", help="Channel author"),
    workers: int | None = typer.Option(
        None, "--workers", "-w", min=1, help="Share links to resolve in parallel"
    ),
    config_dir: Path | None = typer.Option(
        None, "--config-dir", help="Directory containing config.yaml"
    ),
) -> None:
    """Write a podcast RSS feed for a Dropbox folder to stdout.

    Without a configured refresh token, an authorization URL is shown and
    the pasted code is exchanged for one.

    Examples:
        dircast generate /Podcasts https://example.com/feed.xml https://example.com/cover.jpg

        dircast generate /Podcasts https://example.com/feed.xml https://example.com/cover.jpg -w 4
    """
    try:
        config = _load_config(ctx, config_dir)

        broker = _make_broker(config)
        try:
            credentials = broker.authenticate(config.dropbox.refresh_token)
        finally:
            broker.close()
        if credentials.newly_granted:
            _report_refresh_token(credentials.refresh_token)

        channel = ChannelMetadata(
            title=title or config.channel.title,
            link=base_url,
            description=description or config.channel.description,
            author=author or config.channel.author,
            image_url=image_url,
        )
        options = PipelineOptions(
            directory_path=directory_path,
            channel=channel,
            workers=workers or config.workers,
        )

        pipeline = build_pipeline(config, credentials.access_token)
        try:
            result = pipeline.run(options)
        finally:
            pipeline.close()

    except ConfigError as e:
        err_console.print(f"[red]✗[/red] {escape(str(e))}")
        sys.exit(1)
    except DircastError as e:
        err_console.print(f"[red]✗[/red] Error: {escape(str(e))}")
        sys.exit(1)

    if result.failures:
        _report_failures(result.failures)

    typer.echo(result.document.decode("utf-8"))


@app.command("authorize")
def authorize(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", help="Directory containing config.yaml"
    ),
) -> None:
    """Obtain a refresh token through the interactive authorization flow."""
    try:
        config = _load_config(ctx, config_dir)
        broker = _make_broker(config)
        try:
            refresh_token = broker.authorize()
        finally:
            broker.close()
    except DircastError as e:
        err_console.print(f"[red]✗[/red] Error: {escape(str(e))}")
        sys.exit(1)

    _report_refresh_token(refresh_token)


SETTABLE_KEYS = (
    "log_level",
    "workers",
    "http_timeout_seconds",
    "extensions_case_sensitive",
    "channel.title",
    "channel.description",
    "channel.author",
)


def _show_config(manager: ConfigManager) -> None:
    config = manager.load_config()

    err_console.print("\n[bold]Dircast Configuration[/bold]\n")

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Config file", escape(str(manager.config_file)))
    table.add_row("", "")
    table.add_row("Log level", config.log_level)
    table.add_row("Workers", str(config.workers))
    table.add_row("HTTP timeout", f"{config.http_timeout_seconds:g}s")
    table.add_row("Case-sensitive suffixes", "✓" if config.extensions_case_sensitive else "✗")
    table.add_row("Channel title", escape(config.channel.title))
    table.add_row("Channel description", escape(config.channel.description))
    table.add_row("Channel author", escape(config.channel.author))
    table.add_row("", "")
    table.add_row("App key", "✓ set" if config.dropbox.app_key else "✗ missing")
    table.add_row("App secret", "✓ set" if config.dropbox.app_secret else "✗ missing")
    table.add_row("Refresh token", "✓ set" if config.dropbox.has_refresh_token else "✗ missing")

    err_console.print(table)


def _set_config_value(manager: ConfigManager, key: str, value: str) -> None:
    if key not in SETTABLE_KEYS:
        raise InvalidConfigError(
            f"Unknown config key '{key}'. Settable keys: {', '.join(SETTABLE_KEYS)}"
        )

    data = manager.load_config().model_dump(mode="python", exclude={"dropbox"})
    section, _, field = key.rpartition(".")
    target = data[section] if section else data
    target[field] = value

    try:
        config = GlobalConfig(**data)
    except ValidationError as e:
        raise InvalidConfigError(f"Invalid value for {key}: {value!r}") from e

    manager.save_config(config)


@app.command("config")
def config_command(
    action: str = typer.Argument(..., help="Action: show, init, or set <key> <value>"),
    key: str | None = typer.Argument(None, help="Config key (for 'set' action)"),
    value: str | None = typer.Argument(None, help="Config value (for 'set' action)"),
    config_dir: Path | None = typer.Option(
        None, "--config-dir", help="Directory containing config.yaml"
    ),
    force: bool = typer.Option(
        False, "--force", help="Overwrite an existing file (for 'init' action)"
    ),
) -> None:
    """Manage Dircast configuration.

    Dropbox credentials are never written; set them with DROPBOX_APP_KEY,
    DROPBOX_APP_SECRET and DROPBOX_REFRESH_TOKEN.

    Actions:
        show: Display current configuration
        init: Write a config file with default settings
        set:  Set a configuration value

    Examples:
        dircast config init

        dircast config set channel.title "My Show"

        dircast config set workers 4
    """
    try:
        manager = ConfigManager(config_dir=config_dir)

        if action == "show":
            _show_config(manager)

        elif action == "init":
            if manager.config_file.exists() and not force:
                err_console.print(
                    f"[red]✗[/red] {escape(str(manager.config_file))} already exists "
                    "(use --force to overwrite)"
                )
                sys.exit(1)
            manager.save_config(GlobalConfig())
            err_console.print(
                f"[green]✓[/green] Wrote default configuration to "
                f"{escape(str(manager.config_file))}"
            )

        elif action == "set":
            if not key or value is None:
                err_console.print("[red]✗[/red] Usage: dircast config set <key> <value>")
                sys.exit(1)
            _set_config_value(manager, key, value)
            err_console.print(
                f"[green]✓[/green] Set [cyan]{escape(key)}[/cyan] = "
                f"[yellow]{escape(value)}[/yellow]"
            )

        else:
            err_console.print(f"[red]✗[/red] Unknown action: {escape(action)}")
            err_console.print("Valid actions: show, init, set")
            sys.exit(1)

    except ConfigError as e:
        err_console.print(f"[red]✗[/red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    app()
