"""CLI main entry point for URA travel queries."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .. import __version__
from ..core import (
    FeedFormatError,
    FetchError,
    UnknownStopError,
    UraConfig,
    ValidationError,
    build_query,
    find_common_trips,
)
from .formatters import (
    format_predictions_json,
    format_predictions_table,
    format_predictions_text,
)

console = Console()
error_console = Console(stderr=True)

DEFAULTS = UraConfig()


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


def source_options(f):
    """Add the options that configure the prediction source."""
    f = click.option(
        "--max-workers",
        envvar="TRAVEL_URA_MAX_WORKERS",
        default=DEFAULTS.max_workers,
        type=click.IntRange(min=1),
        help="Maximum number of stops fetched at once",
    )(f)
    f = click.option(
        "--timeout",
        "-t",
        envvar="TRAVEL_URA_TIMEOUT",
        default=DEFAULTS.timeout,
        type=click.FloatRange(min=0, min_open=True),
        help="Request timeout in seconds",
    )(f)
    f = click.option(
        "--base-url",
        envvar="TRAVEL_URA_BASE_URL",
        default=DEFAULTS.base_url,
        show_default=True,
        help="URA instant endpoint",
    )(f)
    return f


def _stop_prefix(error: Exception) -> str:
    stop = getattr(error, "stop_point_name", None)
    return f"{stop}: " if stop else ""


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """URA Travel - Find the buses that visit all of the given stops."""
    pass


@cli.command()
@click.argument("stops", nargs=-1, required=True)
@click.option("--compact", "-c", is_flag=True, help="Compact output without padding")
@click.option(
    "--unordered",
    "-u",
    is_flag=True,
    help="Do not require the bus to visit the stops in the given order",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["text", "table", "json"]),
    default="text",
    help="Output format",
)
@source_options
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def query(
    stops: tuple[str, ...],
    compact: bool,
    unordered: bool,
    output_format: str,
    base_url: str,
    timeout: float,
    max_workers: int,
    verbose: bool,
) -> None:
    """List the buses that will visit all STOPS, soonest first.

    Examples:
        travel-ura query "Bushof" "Misereorstraße"
        travel-ura query "Bushof" "Ponttor" --unordered --compact
        travel-ura query "Elisenbrunnen" --format json
    """
    configure_logging(verbose)
    try:
        prediction_query = build_query(stops, ordered=not unordered)
        ura_config = UraConfig(
            base_url=base_url, timeout=timeout, max_workers=max_workers
        )

        with console.status(
            f"[bold green]Fetching predictions for {len(stops)} stop(s)..."
        ):
            combined = find_common_trips(prediction_query, ura_config)

        if not combined.predictions:
            error_console.print("[yellow]No common trips found[/yellow]")
            return

        if output_format == "json":
            click.echo(format_predictions_json(combined))
        elif output_format == "table":
            format_predictions_table(combined, console=console)
        else:
            click.echo(format_predictions_text(combined, compact=compact))

    except ValidationError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)
    except UnknownStopError as e:
        error_console.print(
            f"[yellow]Unknown stop:[/yellow] {escape(e.stop_point_name or '')}"
        )
        sys.exit(1)
    except FetchError as e:
        error_console.print(
            f"[red]Fetch error:[/red] {escape(_stop_prefix(e) + str(e))}"
        )
        sys.exit(1)
    except FeedFormatError as e:
        error_console.print(
            f"[red]Feed error:[/red] {escape(_stop_prefix(e) + str(e))}"
        )
        sys.exit(1)
    except Exception as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if verbose:
            error_console.print_exception()
        sys.exit(1)


@cli.group()
def config() -> None:
    """Configuration management."""
    pass


@config.command("show")
@source_options
def show_config(base_url: str, timeout: float, max_workers: int) -> None:
    """Show the effective configuration.

    Values come from the options, then the TRAVEL_URA_* environment
    variables, then the defaults.
    """
    console.print("[bold]Current Configuration:[/bold]")
    console.print(f"• Base URL: {base_url}")
    console.print(f"• Timeout: {timeout:g} seconds")
    console.print(f"• Max workers: {max_workers}")


if __name__ == "__main__":
    cli()
