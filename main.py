"""
Decision Table Recognizer - Main Entry Point

Command line interface over the recognizer. It reads decision tables drawn
with box-drawing characters and prints what was recognized.

Architecture Overview:
┌──────────────┐
│  .dtb text   │
└──────┬───────┘
       │  scan()
       ▼
┌──────────────┐      pdt: canvas layers + plane
│    Canvas    │─────────────────────────────────┐
└──────┬───────┘                                 │
       │  plane()                                │
       ▼                                         ▼
┌──────────────┐                         ┌──────────────┐
│    Plane     │────────────────────────▶│   Console    │
└──────┬───────┘                         └──────────────┘
       │  Recognizer.recognize()                 ▲
       ▼                                         │
┌──────────────┐      rdt: components / JSON     │
│  Recognizer  │─────────────────────────────────┘
└──────────────┘
"""

import sys
import json
from pathlib import Path
from typing import NoReturn, Optional

import click
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from examples import example_names, load_example
from recognizer import (
    Plane,
    Recognizer,
    RecognizerError,
    RecognizerSettings,
    load_settings,
    scan,
)

DEFAULT_CONFIG = Path(__file__).parent / "config" / "recognizer.yaml"


# Configure logging
def setup_logging(verbose: bool = False, log_file: Optional[Path] = None, level: str = "INFO"):
    """Configure loguru logging."""
    # Remove default handler
    logger.remove()

    # Console logging
    log_level = "DEBUG" if verbose else level
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=log_level,
        colorize=True
    )

    # File logging
    if log_file:
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
            level="DEBUG",
            rotation="10 MB"
        )


def read_table(path: Path, console: Console) -> str:
    """Read a decision table file, exiting on I/O errors."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[bold red]Cannot read {escape(str(path))}: {escape(str(e))}[/]")
        raise SystemExit(1)


def fail(console: Console, error: RecognizerError) -> NoReturn:
    """Print a recognition error and exit with status 1."""
    console.print(f"[bold red]{escape(str(error))}[/]")
    logger.debug(f"Recognition failed: {error.kind.name}")
    raise SystemExit(1)


def plane_table(plane: Plane) -> Table:
    """Render the logical matrix of a plane."""
    table = Table(
        title=f"Plane {plane.row_count} x {plane.column_count} ({len(plane.regions)} regions)",
        show_lines=True,
    )
    table.add_column("", style="dim", justify="right")
    for column in range(plane.column_count):
        marker = " ║" if plane.double_columns[column] else ""
        table.add_column(f"{column}{marker}", style="cyan")

    for row, texts in enumerate(plane.to_matrix()):
        marker = " ═" if plane.double_rows[row] else ""
        table.add_row(f"{row}{marker}", *[escape(text) for text in texts])
    return table


def summary_table(recognizer: Recognizer) -> Table:
    table = Table(title="Decision Table", show_header=False)
    table.add_column("Property", style="bold")
    table.add_column("Value")

    rows = [
        ("Information item name", recognizer.information_item_name or "-"),
        ("Orientation", recognizer.orientation.display_name),
        ("Hit policy", str(recognizer.hit_policy)),
        ("Rules", str(recognizer.rule_count)),
        ("Input clauses", str(recognizer.input_clause_count)),
        ("Output clauses", str(recognizer.output_clause_count)),
        ("Output label", recognizer.output_label or "-"),
        ("Annotation clauses", str(recognizer.annotation_clause_count)),
    ]
    for name, value in rows:
        table.add_row(name, escape(value))
    return table


def rules_table(recognizer: Recognizer) -> Table:
    """Render the rules with inputs, outputs and annotations side by side."""
    table = Table(title="Rules", show_lines=True)
    table.add_column("#", justify="right", style="dim")

    for name in recognizer.input_expressions:
        table.add_column(escape(name.replace("\n", " ")), style="cyan")
    if recognizer.output_components:
        output_names = recognizer.output_components
    else:
        output_names = [recognizer.output_label or "output"] * recognizer.output_clause_count
    for name in output_names:
        table.add_column(escape(name.replace("\n", " ")), style="green")
    for name in recognizer.annotations:
        table.add_column(escape(name.replace("\n", " ")), style="yellow")

    if recognizer.input_values or recognizer.output_values:
        inputs = recognizer.input_values or [""] * recognizer.input_clause_count
        outputs = recognizer.output_values or [""] * recognizer.output_clause_count
        annotations = [""] * recognizer.annotation_clause_count
        table.add_row("", *[escape(v) for v in inputs + outputs + annotations], style="italic")

    for index in range(recognizer.rule_count):
        cells = (
            recognizer.input_entries[index]
            + recognizer.output_entries[index]
            + recognizer.annotation_entries[index]
        )
        table.add_row(str(index + 1), *[escape(text) for text in cells])
    return table


# CLI Interface
@click.group()
@click.option(
    '--config', '-c',
    'config_path',
    type=click.Path(path_type=Path),
    default=None,
    help='Path to recognizer.yaml configuration file'
)
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Enable verbose logging'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Write logs to file'
)
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], verbose: bool, log_file: Optional[Path]):
    """
    Decision Table Recognizer - read decision tables drawn as text.

    Examples:

        # Show canvas layers and the plane of a table
        python main.py pdt table.dtb

        # Recognize a table
        python main.py rdt table.dtb

        # Recognize a table, print JSON
        python main.py rdt table.dtb --json

        # Recognize all bundled examples
        python main.py examples
    """
    settings = load_settings(config_path or DEFAULT_CONFIG)
    setup_logging(verbose=verbose, log_file=log_file, level=settings.log_level)
    ctx.obj = {'settings': settings}


@main.command()
@click.argument('table_file', type=click.Path(path_type=Path))
def pdt(table_file: Path):
    """Print the canvas layers and the plane of a decision table."""
    console = Console()
    text = read_table(table_file, console)

    try:
        canvas = scan(text)
        canvas.display_text_layer()
        canvas.display_thin_layer()
        canvas.display_body_layer()
        canvas.display_grid_layer()
        plane = canvas.plane()
    except RecognizerError as e:
        fail(console, e)

    console.print()
    console.print(plane_table(plane))


@main.command()
@click.argument('table_file', type=click.Path(path_type=Path))
@click.option(
    '--json', 'as_json',
    is_flag=True,
    help='Print recognized components as JSON'
)
@click.pass_context
def rdt(ctx: click.Context, table_file: Path, as_json: bool):
    """Recognize a decision table and print its components."""
    settings: RecognizerSettings = ctx.obj['settings']
    console = Console()
    text = read_table(table_file, console)

    try:
        recognizer = Recognizer.recognize(text, settings)
    except RecognizerError as e:
        fail(console, e)

    if as_json:
        click.echo(json.dumps(recognizer.to_dict(), indent=2, ensure_ascii=False))
        return

    console.print(summary_table(recognizer))
    console.print()
    console.print(rules_table(recognizer))


@main.command()
@click.pass_context
def examples(ctx: click.Context):
    """Recognize every bundled example and summarize the results."""
    settings: RecognizerSettings = ctx.obj['settings']
    console = Console()

    table = Table(title="Bundled Examples")
    table.add_column("Example", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Orientation")
    table.add_column("Hit policy", justify="center")
    table.add_column("Inputs", justify="right")
    table.add_column("Outputs", justify="right")
    table.add_column("Rules", justify="right")

    failed = 0
    for name in example_names():
        try:
            recognizer = Recognizer.recognize(load_example(name), settings)
        except RecognizerError as e:
            failed += 1
            table.add_row(name, "[red]✗", escape(e.message), "", "", "", "")
            continue
        table.add_row(
            name,
            "[green]✓",
            recognizer.orientation.display_name,
            recognizer.hit_policy.code,
            str(recognizer.input_clause_count),
            str(recognizer.output_clause_count),
            str(recognizer.rule_count),
        )

    console.print(table)
    if failed:
        console.print(f"[bold red]Failed:[/] {failed}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
