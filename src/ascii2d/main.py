"""Main entry point for the ascii2d CLI.

This module provides the command-line interface using Click, with Rich for
output.
"""

import asyncio
import json
import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.table import Table
from rich import box

from ascii2d import __version__
from ascii2d.client import Ascii2dClient
from ascii2d.config import get_settings
from ascii2d.exceptions import Ascii2dError
from ascii2d.flaresolverr import FlareSolverrClient
from ascii2d.logging import setup_logging
from ascii2d.models import Ascii2dResult


def _configure_logging(verbose: bool, debug: bool) -> None:
    settings = get_settings()
    if debug:
        setup_logging(level="DEBUG", log_file=settings.ascii2d_log_file)
    elif verbose:
        setup_logging(level="INFO", log_file=settings.ascii2d_log_file)
    else:
        setup_logging(level=settings.ascii2d_log_level, log_file=settings.ascii2d_log_file)


def _results_table(results: list[Ascii2dResult]) -> Table:
    table = Table(box=box.ROUNDED, show_lines=True)
    table.add_column("Type", style="cyan bold")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Links", style="dim")

    for result in results:
        links = "\n".join(
            link for link in (result.url, result.author_url, result.thumbnail, result.result_url) if link
        )
        table.add_row(
            result.result_type.value if result.result_type else "-",
            result.title,
            result.author,
            links,
        )
    return table


@click.group()
def cli():
    """ascii2d - reverse image search through FlareSolverr."""


@cli.command()
@click.argument("image")
@click.option("--host", default=None, help="ascii2d host override")
@click.option("--flaresolverr-url", default=None, help="FlareSolverr server URL")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
def search(
    image: str,
    host: str | None,
    flaresolverr_url: str | None,
    output_json: bool,
    verbose: bool,
    debug: bool,
):
    """Search ascii2d for IMAGE (a URL or a local file path)."""
    _configure_logging(verbose, debug)
    asyncio.run(run_search(image, host=host, flaresolverr_url=flaresolverr_url, output_json=output_json))


async def run_search(
    image: str,
    host: str | None = None,
    flaresolverr_url: str | None = None,
    output_json: bool = False,
) -> None:
    """Run one search and print both matches.

    Args:
        image: Image URL or local path
        host: ascii2d host override
        flaresolverr_url: FlareSolverr server URL override
        output_json: Print JSON instead of a table
    """
    console = Console()

    try:
        async with FlareSolverrClient(base_url=flaresolverr_url) as flaresolverr:
            async with Ascii2dClient(host=host, flaresolverr=flaresolverr) as client:
                if output_json:
                    color, bovw = await client.search(image)
                else:
                    with console.status(f"Searching ascii2d for {image}..."):
                        color, bovw = await client.search(image)
    except Ascii2dError as e:
        console.print(f"[red bold]Search failed:[/red bold] {e}")
        sys.exit(1)

    if output_json:
        click.echo(json.dumps(
            {"color": color.model_dump(mode="json"), "bovw": bovw.model_dump(mode="json")},
            ensure_ascii=False,
            indent=2,
        ))
    else:
        console.print(_results_table([color, bovw]))


@cli.command()
def config():
    """Show current configuration."""
    console = Console()
    table = Table(title="Configuration", box=box.SIMPLE)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in get_settings().model_dump_safe().items():
        table.add_row(key, value)
    console.print(table)


@cli.command()
def version():
    """Show version information."""
    click.echo(f"ascii2d {__version__}")


def main() -> NoReturn:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
