"""Command-line entry point: `conclaude Hooks <HookName> [--agent NAME]`."""

from __future__ import annotations

import logging
import os
import sys
from typing import Annotated

import typer

from .agent import AGENT_ENV_VAR
from .dispatcher import dispatch
from .errors import ConfigError, GlobError, PayloadError, SearchError
from .hooks import HOOKS

logger = logging.getLogger("conclaude")

LOG_LEVEL_ENV_VAR = "CONCLAUDE_LOG_LEVEL"

app = typer.Typer(
    help="Policy engine and hook runner for Claude Code hook events.",
    no_args_is_help=True,
    add_completion=False,
)
hooks_app = typer.Typer(help="Handle one hook event; the payload is read from stdin.")
app.add_typer(hooks_app, name="Hooks")


@app.callback()
def _configure() -> None:
    configure_logging()


def configure_logging() -> None:
    """Send log records to stderr; stdout is reserved for the hook result."""
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)


def run_hook(hook_name: str, agent: str | None) -> None:
    if agent:
        os.environ[AGENT_ENV_VAR] = agent
    try:
        result = dispatch(hook_name, sys.stdin.read())
    except (ConfigError, PayloadError, GlobError, SearchError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    except Exception as e:
        logger.exception("Unexpected error while handling %s", hook_name)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(result.to_json())
    if result.blocked and result.message:
        typer.echo(result.message, err=True)
    raise typer.Exit(result.exit_code)


def _register(hook_name: str) -> None:
    @hooks_app.command(hook_name, help=f"Handle the {hook_name} hook event.")
    def _command(
        agent: Annotated[
            str | None,
            typer.Option("--agent", help="Agent label to apply for this invocation."),
        ] = None,
    ) -> None:
        run_hook(hook_name, agent)


for _name in HOOKS:
    _register(_name)


def main() -> None:
    app()
