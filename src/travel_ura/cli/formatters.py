"""Output formatters for CLI display."""

import json

from rich.console import Console
from rich.table import Table

from ..core.models import PredictionSet


def format_predictions_text(prediction_set: PredictionSet, compact: bool = False) -> str:
    """Format predictions as one line per bus, relative to the capture time."""
    lines = []
    for p in prediction_set.predictions:
        minutes = prediction_set.minutes_until(p)
        if compact:
            lines.append(f"{minutes}min {p.line_name} {p.destination_text}")
        else:
            lines.append(f"{minutes:>3}min {p.line_name:>4} {p.destination_text}")
    return "\n".join(lines)


def format_predictions_table(
    prediction_set: PredictionSet, console: Console | None = None
) -> None:
    """Display predictions as a rich table."""
    console = console or Console()

    table = Table(
        title=f"Predictions at {prediction_set.time:%H:%M:%S}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Due", style="green", justify="right", no_wrap=True)
    table.add_column("Line", style="yellow", no_wrap=True)
    table.add_column("Destination", style="cyan")
    table.add_column("Stop", style="blue")
    table.add_column("Trip", style="dim", justify="right")

    for p in prediction_set.predictions:
        table.add_row(
            f"{prediction_set.minutes_until(p)} min",
            p.line_name,
            p.destination_text,
            p.stop_point_name,
            str(p.trip_id),
        )

    console.print(table)


def format_predictions_json(prediction_set: PredictionSet) -> str:
    """Format predictions as JSON."""
    data = {
        "time": prediction_set.time.isoformat(),
        "predictions": [
            {
                **p.model_dump(mode="json"),
                "minutes": prediction_set.minutes_until(p),
            }
            for p in prediction_set.predictions
        ],
    }
    return json.dumps(data, ensure_ascii=False, indent=2)
