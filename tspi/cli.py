"""tspi CLI — extract TypeScript interface types into a JSON IR."""

import logging
import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from tspi import __version__
from tspi.config import ExtractConfig
from tspi.errors import ExtractionError

console = Console()
err_console = Console(stderr=True)


def _config(max_depth: int | None, indent: int | None) -> ExtractConfig:
    try:
        base = ExtractConfig.from_env()
        return ExtractConfig(
            max_depth=max_depth if max_depth is not None else base.max_depth,
            indent=indent if indent is not None else base.indent,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _fail(input_path: str, error: ExtractionError) -> NoReturn:
    err_console.print(
        f"[red]error:[/] {escape(input_path)}: {escape(str(error))}",
        highlight=False,
        soft_wrap=True,
    )
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
def main(verbose: bool):
    """tspi — TypeScript interface extractor.

    Reads the interface declarations of a TypeScript file and writes their
    structure as a language-agnostic JSON intermediate representation.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


# ── Extract ──────────────────────────────────────────────────────────


@main.command()
@click.argument("input_path", type=click.Path(dir_okay=False))
@click.argument("output_path", type=click.Path(dir_okay=False, allow_dash=True))
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Deepest type nesting accepted (env: TSPI_MAX_DEPTH, default 256)",
)
@click.option(
    "--indent",
    type=click.IntRange(min=0),
    default=None,
    help="JSON indentation (env: TSPI_INDENT, default 2)",
)
def extract(input_path: str, output_path: str, max_depth: int | None, indent: int | None):
    """Extract the interfaces of INPUT_PATH into OUTPUT_PATH as JSON.

    Use '-' as OUTPUT_PATH to write to stdout. Nothing is written when any
    interface cannot be extracted.
    """
    from tspi.extractor import STDOUT_PATH, extract as run_extract

    config = _config(max_depth, indent)
    try:
        type_defs = run_extract(input_path, output_path, config=config)
    except ExtractionError as e:
        _fail(input_path, e)

    if output_path != STDOUT_PATH:
        err_console.print(
            f"[green]Wrote {len(type_defs)} type definition(s) to[/] {output_path}",
            highlight=False,
            soft_wrap=True,
        )


# ── Show ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("input_path", type=click.Path(dir_okay=False))
@click.option(
    "--max-depth", type=click.IntRange(min=1), default=None, help="Deepest type nesting accepted"
)
def show(input_path: str, max_depth: int | None):
    """Print the interfaces of INPUT_PATH as a table."""
    from tspi.extractor import extract_type_defs
    from tspi.ir.render import render_signature, render_type

    config = _config(max_depth, None)
    try:
        type_defs = extract_type_defs(input_path, config=config)
    except ExtractionError as e:
        _fail(input_path, e)

    if not type_defs:
        console.print("[yellow]No interfaces found.[/]")
        return

    table = Table(title=f"Interfaces in {input_path} ({len(type_defs)} found)")
    table.add_column("Interface", style="cyan")
    table.add_column("Field")
    table.add_column("Type", style="green")
    table.add_column("Optional", justify="center")

    for type_def in type_defs:
        signature = escape(render_signature(type_def))
        if not type_def.fields:
            table.add_row(signature, "[dim]-[/]", "", "")
        for i, f in enumerate(type_def.fields):
            table.add_row(
                signature if i == 0 else "",
                escape(f.name),
                escape(render_type(f.type)),
                "?" if f.nullable else "",
            )

    console.print(table)


if __name__ == "__main__":
    main()
