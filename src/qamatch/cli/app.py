# src/qamatch/cli/app.py
"""Command-line interface for qamatch.

This module provides a thin Typer wrapper around the commands layer.
Each command:
1. Parses args (via Typer)
2. Calls commands module functions
3. Renders results with Rich
"""

from __future__ import annotations

import os

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from qamatch import __version__
from qamatch.commands import ask, browse, config_cmd, normalize, stats, validate
from qamatch.commands.base import AskResult, MatchInfo, QAPairInfo
from qamatch.config import load_env_file
from qamatch.logging import setup_logging

app = typer.Typer(
    name="qamatch",
    help="qamatch - answer questions from a curated QA corpus by semantic similarity.",
    no_args_is_help=True,
)
console = Console()

DATA_PATH_OPTION = typer.Option(
    None,
    "--data",
    "-d",
    help="Corpus JSON file (default: from settings)",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to config file",
)
PLAIN_OPTION = typer.Option(
    False,
    "--plain",
    help="Plain output (no colors/formatting)",
)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"qamatch {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Log level for diagnostics on stderr (default: QAMATCH_LOG_LEVEL or WARNING)",
    ),
) -> None:
    """qamatch - semantic QA matching."""
    load_env_file()
    try:
        setup_logging(log_level or os.environ.get("QAMATCH_LOG_LEVEL") or "WARNING")
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(2) from e


def _plain(text: str) -> None:
    console.print(text, markup=False, highlight=False)


def _fail(message: str | None, plain: bool) -> None:
    if plain:
        _plain(f"Error: {message}")
    else:
        console.print(f"[red]Error: {escape(str(message))}[/red]")
    raise typer.Exit(1)


def _confidence(score: float) -> str:
    return f"{score:.2f}"


def _render_match(match: MatchInfo, plain: bool, rank: int | None = None) -> None:
    prefix = f"[{rank}] " if rank is not None else ""
    if plain:
        _plain(f"{prefix}{match.question} (confidence: {_confidence(match.score)})")
        for answer in match.answers:
            _plain(f"  - {answer.text}")
        _plain(f"  category: {match.category}  answers: {match.total_answers}")
        return

    body = "\n\n".join(
        f"{'[bold]*[/bold] ' if a.is_primary and len(match.answers) > 1 else ''}{escape(a.text)}"
        for a in match.answers
    )
    subtitle = f"{escape(match.category)} | confidence {_confidence(match.score)}"
    if match.tags:
        subtitle += f" | {escape(', '.join(match.tags))}"
    console.print(
        Panel(
            body,
            title=escape(f"{prefix}{match.question}"),
            subtitle=subtitle,
            border_style="green",
        )
    )


def _render_ask(result: AskResult, plain: bool) -> None:
    if not result.matches:
        if plain:
            console.print("No match found.")
        else:
            console.print("[yellow]No match found. The corpus is empty.[/yellow]")
        return

    if len(result.matches) == 1:
        _render_match(result.matches[0], plain)
        return

    for i, match in enumerate(result.matches, 1):
        _render_match(match, plain, rank=i)


@app.command(name="ask")
def ask_cmd(
    question: str = typer.Argument(..., help="Question to ask"),
    data_path: str = DATA_PATH_OPTION,
    config_file: str = CONFIG_OPTION,
    k: int = typer.Option(
        None,
        "--k",
        "-k",
        min=1,
        help="Show the k best matches instead of only the best one",
    ),
    all_answers: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Show every answer of the best match",
    ),
    plain: bool = PLAIN_OPTION,
) -> None:
    """Find the best answer for a question."""
    result = ask.ask(
        question=question,
        data_path=data_path,
        config_path=config_file,
        k=k,
        all_answers=all_answers,
    )

    if not result.success:
        _fail(result.error, plain)

    _render_ask(result, plain)


@app.command(name="stats")
def stats_cmd(
    data_path: str = DATA_PATH_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Show corpus statistics."""
    result = stats.stats(data_path=data_path, config_path=config_file)

    if not result.success or result.stats is None:
        _fail(result.error, plain)
        return

    s = result.stats
    rows = [
        ("Corpus file", result.data_path),
        ("Questions", str(s.total_questions)),
        ("Answers", str(s.total_answers)),
        ("Answers per question", f"{s.average_answers_per_question:.2f}"),
        ("Categories", ", ".join(s.categories) or "-"),
        ("Unique tags", str(s.unique_tags)),
    ]

    if plain:
        console.print("Corpus Stats:")
        for name, value in rows:
            _plain(f"  {name}: {value}")
    else:
        table = Table(title="Corpus Stats")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")
        for name, value in rows:
            table.add_row(name, escape(value))
        console.print(table)


def _render_values(title: str, values: list[str], plain: bool) -> None:
    if not values:
        console.print(f"No {title.lower()}." if plain else f"[dim]No {title.lower()}.[/dim]")
        return
    if plain:
        console.print(f"{title} ({len(values)}):")
        for value in values:
            _plain(f"  {value}")
    else:
        table = Table(title=f"{title} ({len(values)})")
        table.add_column(title.rstrip("s").capitalize(), style="cyan")
        for value in values:
            table.add_row(escape(value))
        console.print(table)


@app.command(name="categories")
def categories_cmd(
    data_path: str = DATA_PATH_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """List corpus categories."""
    result = browse.categories(data_path=data_path, config_path=config_file)
    if not result.success:
        _fail(result.error, plain)
    _render_values("Categories", result.values, plain)


@app.command(name="tags")
def tags_cmd(
    data_path: str = DATA_PATH_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """List corpus tags."""
    result = browse.tags(data_path=data_path, config_path=config_file)
    if not result.success:
        _fail(result.error, plain)
    _render_values("Tags", result.values, plain)


def _render_pairs(pairs: list[QAPairInfo], plain: bool, detailed: bool) -> None:
    if not pairs:
        console.print("No QA pairs found." if plain else "[dim]No QA pairs found.[/dim]")
        return

    if detailed:
        for pair in pairs:
            if plain:
                _plain(f"{pair.id}: {pair.question}")
                _plain(f"  category: {pair.category}  difficulty: {pair.difficulty}")
                _plain(f"  tags: {', '.join(pair.tags) or '-'}")
                for a in pair.answers:
                    marker = " (primary)" if a.is_primary else ""
                    _plain(f"  [{a.id}]{marker} {a.text}")
            else:
                answers = "\n\n".join(
                    f"[cyan]{escape(a.id)}[/cyan]"
                    f"{' [bold](primary)[/bold]' if a.is_primary else ''}\n{escape(a.text)}"
                    for a in pair.answers
                )
                console.print(
                    Panel(
                        answers,
                        title=escape(f"{pair.id}: {pair.question}"),
                        subtitle=escape(
                            f"{pair.category} | {pair.difficulty} | "
                            f"{', '.join(pair.tags) or 'no tags'}"
                        ),
                        border_style="cyan",
                    )
                )
        return

    if plain:
        for pair in pairs:
            _plain(f"  {pair.id} [{pair.category}] {pair.question}")
    else:
        table = Table(title=f"QA Pairs ({len(pairs)})")
        table.add_column("ID", style="cyan")
        table.add_column("Category")
        table.add_column("Question")
        table.add_column("Answers", justify="right")
        table.add_column("Tags", style="dim")
        for pair in pairs:
            table.add_row(
                escape(pair.id),
                escape(pair.category),
                escape(pair.question),
                str(len(pair.answers)),
                escape(", ".join(pair.tags)),
            )
        console.print(table)


@app.command(name="search")
def search_cmd(
    category: str = typer.Option(None, "--category", help="Exact category to match"),
    tag: list[str] = typer.Option(None, "--tag", "-t", help="Tag to match (repeatable, any)"),
    data_path: str = DATA_PATH_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """List QA pairs by category and/or tags."""
    result = browse.search(
        category=category,
        tag_filter=tag or None,
        data_path=data_path,
        config_path=config_file,
    )
    if not result.success:
        _fail(result.error, plain)
    _render_pairs(result.pairs, plain, detailed=False)


@app.command(name="show")
def show_cmd(
    qa_id: str = typer.Argument(..., help="QA pair id"),
    data_path: str = DATA_PATH_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Show one QA pair with all of its answers."""
    result = browse.show(qa_id, data_path=data_path, config_path=config_file)
    if not result.success:
        _fail(result.error, plain)
    _render_pairs(result.pairs, plain, detailed=True)


@app.command(name="validate")
def validate_cmd(
    data_path: str = DATA_PATH_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Check the corpus file and configuration without embedding anything."""
    result = validate.validate(data_path=data_path, config_path=config_file)

    for warning in result.warnings:
        if plain:
            _plain(f"Warning: {warning}")
        else:
            console.print(f"[yellow]Warning: {escape(warning)}[/yellow]")

    if not result.success:
        for problem in result.problems:
            if plain:
                _plain(f"  {problem}")
            else:
                console.print(f"  [red]-[/red] {escape(problem)}")
        _fail(result.error, plain)

    assert result.stats is not None
    message = (
        f"{result.data_path}: {result.stats.total_questions} questions, "
        f"{result.stats.total_answers} answers. OK"
    )
    console.print(message if plain else f"[green]{escape(message)}[/green]", markup=not plain)


@app.command(name="normalize")
def normalize_cmd(
    data_path: str = DATA_PATH_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Rewrite the corpus file in canonical form (defaults filled, metadata recomputed)."""
    result = normalize.normalize(data_path=data_path, config_path=config_file)
    if not result.success or result.stats is None:
        _fail(result.error, plain)
        return

    message = f"Rewrote {result.data_path} ({result.stats.total_questions} questions)"
    if result.backup_count:
        message += f", {result.backup_count} backups kept"
    console.print(message if plain else f"[green]{escape(message)}[/green]", markup=not plain)


@app.command(name="config")
def config_cmd_handler(
    config_file: str = CONFIG_OPTION,
) -> None:
    """Show current configuration settings."""
    result = config_cmd.config(config_path=config_file)

    if not result.success:
        _fail(result.error, plain=False)

    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    table = Table(title="qamatch Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Source", style="dim")

    table.add_row("provider", result.provider, "")
    table.add_row("embedding_model", result.embedding_model or "(not set)", "")
    table.add_row("data_path", result.data_path, "")
    table.add_row("", "", "")
    for setting in result.settings:
        table.add_row(setting.name, setting.value, setting.source)

    console.print(table)

    if result.config_path:
        console.print(f"\n[dim]Config file: {result.config_path}[/dim]")
    else:
        console.print("\n[dim]No config file found. Using env vars / defaults.[/dim]")

    console.print("\n[dim]Precedence: env var > yaml settings > default[/dim]")
