"""IntentZero CLI application."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated

import typer
from rich import print as rprint

import intentzero as intentzero_pkg


class OutputFormat(StrEnum):
    """Output format for CLI commands."""

    human = "human"
    json = "json"


app = typer.Typer(
    name="intentzero",
    help="Turn a one-line product idea into a set of spec documents.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        rprint(f"intentzero {intentzero_pkg.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """IntentZero — idea to specification interview."""
    from dotenv import load_dotenv
    from pydantic import ValidationError
    from rich.markup import escape

    from intentzero.config import AppConfig
    from intentzero.log import configure_logging

    load_dotenv()
    try:
        config = AppConfig.from_environment()
    except ValidationError as e:
        rprint(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e
    configure_logging(config.log_level)


@app.command("chat")
def chat(
    idea: Annotated[
        str | None,
        typer.Argument(help="Idea to start with (prompted if omitted)"),
    ] = None,
    language: Annotated[
        str | None,
        typer.Option("--lang", "-l", help="Catalog and output language"),
    ] = None,
) -> None:
    """Run the interactive interview."""
    from intentzero.config import AppConfig
    from intentzero.interview.cli import chat_command

    config = AppConfig.from_environment()
    if language:
        config = config.model_copy(update={"language": language})

    exit_code = chat_command(config=config, idea=idea)
    raise typer.Exit(exit_code)


@app.command("detect")
def detect(
    idea: Annotated[
        str,
        typer.Argument(help="Idea to classify"),
    ],
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.human,
) -> None:
    """Detect which domain catalog an idea maps to."""
    from intentzero.config import AppConfig
    from intentzero.pipeline.cli import detect_command

    exit_code = detect_command(
        config=AppConfig.from_environment(),
        idea=idea,
        format=format.value,
    )
    raise typer.Exit(exit_code)


@app.command("questions")
def questions(
    domain: Annotated[
        str,
        typer.Option("--domain", "-d", help="Domain catalog to list"),
    ] = "generic",
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.human,
) -> None:
    """List the interview questions for a domain."""
    from intentzero.config import AppConfig
    from intentzero.interview.cli import questions_command

    exit_code = questions_command(
        config=AppConfig.from_environment(),
        domain=domain,
        format=format.value,
    )
    raise typer.Exit(exit_code)


@app.command("generate")
def generate(
    answers_file: Annotated[
        str,
        typer.Argument(help="Path to an answers JSON file (key → answer)"),
    ],
    domain: Annotated[
        str,
        typer.Option("--domain", "-d", help="Domain the answers belong to"),
    ] = "generic",
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.human,
) -> None:
    """Generate spec documents from saved answers."""
    from pathlib import Path

    from intentzero.config import AppConfig
    from intentzero.pipeline.cli import generate_command

    exit_code = generate_command(
        config=AppConfig.from_environment(),
        answers_file=Path(answers_file),
        domain=domain,
        format=format.value,
    )
    raise typer.Exit(exit_code)
