"""CLI commands for domain detection and spec generation."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.table import Table

from intentzero.config import AppConfig
from intentzero.interview.prompts import generation_report
from intentzero.pipeline.errors import PipelineError
from intentzero.pipeline.pipeline import IntentPipeline

console = Console()

_ANSWERS = TypeAdapter(dict[str, str])


def _print_error(message: str, format: str) -> None:
    if format == "human":
        console.print(f"[red]Error:[/red] {message}")
    else:
        print(json.dumps({"error": message}, ensure_ascii=False))


def detect_command(config: AppConfig, idea: str, format: str = "human") -> int:
    """Detect the domain of an idea.

    Returns:
        Exit code (0 = detected, 1 = domain catalog error).
    """
    try:
        pipeline = IntentPipeline(config)
        result = pipeline.detect_domain(idea)
    except PipelineError as e:
        _print_error(str(e), format)
        return 1

    if format == "json":
        print(result.model_dump_json(indent=2))
        return 0

    console.print(
        f"Domain: [bold cyan]{result.domain}[/bold cyan] "
        f"(confidence {result.confidence:.2f})"
    )
    if result.scores:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Domain", style="cyan")
        table.add_column("Score", justify="right")
        for domain, score in sorted(result.scores.items(), key=lambda item: -item[1]):
            table.add_row(domain, str(score))
        console.print(table)
    return 0


def generate_command(
    config: AppConfig,
    answers_file: Path,
    domain: str = "generic",
    format: str = "human",
) -> int:
    """Run the spec generator over a saved answers file.

    Returns:
        Exit code (0 = generated, 1 = bad input or generator failure).
    """
    try:
        answers = _ANSWERS.validate_json(answers_file.read_bytes())
    except FileNotFoundError:
        _print_error(f"File not found: {answers_file}", format)
        return 1
    except ValidationError as e:
        _print_error(f"Invalid answers file: {e.error_count()} error(s)", format)
        return 1

    try:
        pipeline = IntentPipeline(config)
        summary = pipeline.generate_specs(answers, domain)
    except PipelineError as e:
        _print_error(str(e), format)
        return 1

    if format == "json":
        print(
            json.dumps(
                {
                    "output_directory": str(summary.output_directory),
                    "files": summary.file_names,
                    "todo_count": summary.todo_count,
                },
                ensure_ascii=False,
                indent=2,
            )
        )
        return 0

    console.print(
        generation_report(summary.file_names, summary.todo_count, str(summary.output_directory)),
        markup=False,
    )
    return 0
