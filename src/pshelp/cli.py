"""pshelp command line interface."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from pshelp.config import Settings, load_settings
from pshelp.errors import ConfigurationError, PshelpError
from pshelp.framework import HelpFramework
from pshelp.logging_utils import configure_logging
from pshelp.types import HelpRequest

NO_HELP_MESSAGE = "no help available"

app = typer.Typer(name="pshelp", help="Contextual help for PowerShell command lines", add_completion=False)


def _load_settings(**overrides: bool | None) -> Settings:
    try:
        return load_settings(**overrides)
    except ConfigurationError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(2) from exc


def _load_framework(*, use_pager: bool | None = None, keep_output: bool | None = None) -> HelpFramework:
    framework = HelpFramework(_load_settings(use_pager=use_pager, keep_output=keep_output))
    framework.load_plugins()
    return framework


def _cursor(line: str, pos: int | None) -> int:
    return len(line) if pos is None else pos


def _print_request(request: HelpRequest) -> None:
    typer.echo(f"template: {request.template}")
    for index, value in enumerate(request.arguments):
        typer.echo(f"args[{index}]: {'$null' if value is None else value}")


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Log level, defaults to the log_level setting"),
) -> None:
    settings = _load_settings()
    configure_logging(profile=settings.log_format, level=log_level or settings.log_level)


@app.command("tokens")
def tokens(line: str = typer.Argument(..., help="PowerShell line")) -> None:
    """Show how a line is tokenized."""

    framework = _load_framework()
    result = framework.create_tokenizer().tokenize(line)
    table = Table("kind", "content", "start", "end")
    for token in result.tokens:
        table.add_row(token.kind.value, repr(token.content), str(token.start), str(token.end))
    console = Console()
    console.print(table)
    for error in result.errors:
        console.print(f"parse error at {error.offset}: {error.message}", style="yellow", markup=False)


@app.command("resolve")
def resolve(
    line: str = typer.Argument(..., help="PowerShell line"),
    pos: int | None = typer.Option(None, "--pos", "-p", help="0-based cursor offset, defaults to end of line"),
) -> None:
    """Print the help request for the token under the cursor."""

    framework = _load_framework()
    request = framework.create_resolver().resolve(line, _cursor(line, pos))
    if request is None:
        typer.echo(NO_HELP_MESSAGE, err=True)
        raise typer.Exit(1)
    _print_request(request)


@app.command("show")
def show(
    line: str = typer.Argument(..., help="PowerShell line"),
    pos: int | None = typer.Option(None, "--pos", "-p", help="0-based cursor offset, defaults to end of line"),
    no_pager: bool = typer.Option(False, "--no-pager", help="Print help without the console pager"),
    keep: bool = typer.Option(False, "--keep", help="Keep the temporary help file"),
) -> None:
    """Fetch and display help for the token under the cursor."""

    framework = _load_framework(use_pager=False if no_pager else None, keep_output=True if keep else None)
    try:
        request = framework.show_help(line, _cursor(line, pos))
    except PshelpError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1) from exc
    if request is None:
        typer.echo(NO_HELP_MESSAGE, err=True)
        raise typer.Exit(1)
    if framework.settings.keep_output:
        typer.echo(f"help saved to {request.output}")


@app.command("hooks")
def hooks() -> None:
    """Show hook implementation mapping."""

    framework = _load_framework()
    for hook_name, plugin_names in framework.hook_report().items():
        typer.echo(f"{hook_name}: {', '.join(plugin_names)}")
    for plugin_name, error in framework.failed_plugins.items():
        typer.echo(f"failed {plugin_name}: {error}")
