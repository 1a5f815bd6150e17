"""Main CLI entry point using Typer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from tabshell.cli.commands.registry import CommandRegistry
from tabshell.cli.completers import ShellCompleter
from tabshell.cli.prompt_editor import PromptToolkitEditor
from tabshell.cli.repl import AsyncEditLoop, run_sync
from tabshell.config.settings import ShellConfig, find_config_path
from tabshell.core.session import ShellSession

app = typer.Typer(
    name="tabshell",
    help="Interactive command shell with tab completion",
    add_completion=False,
)
console = Console(highlight=False)

logger = logging.getLogger(__name__)


@app.command()
def main(
    async_mode: bool = typer.Option(
        False,
        "--async",
        "-a",
        help="Use the non-blocking edit loop (reacts to SIGUSR1/SIGUSR2 while editing)",
    ),
    config_file: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (default: find tabshell.yaml in parent directories)",
    ),
) -> None:
    """Start the interactive shell."""
    if config_file is not None and not config_file.exists():
        console.print(f"[red]Config file not found: {config_file}[/red]")
        raise typer.Exit(1)

    try:
        config = ShellConfig.load(config_file or find_config_path())
    except ValidationError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)

    _configure_logging(config.logging.level)

    registry = CommandRegistry.default()
    editor = PromptToolkitEditor(
        ShellCompleter(registry),
        history_max_length=config.history.max_length,
    )
    session = ShellSession(config=config, editor=editor, registry=registry)

    run_shell(session, async_mode)


def run_shell(session: ShellSession, async_mode: bool = False) -> None:
    """Load history, run the selected edit loop, save history."""
    session.editor.load_history(session.history_path)

    if async_mode:
        logger.debug("Starting asynchronous edit loop")
        asyncio.run(AsyncEditLoop(session, console).run())
    else:
        logger.debug("Starting synchronous edit loop")
        run_sync(session, console)

    session.save_history()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
