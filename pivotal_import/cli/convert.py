"""CLI command for converting a Pivotal Tracker CSV export."""

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.table import Table

from ..importer import PivotalCsvError, PivotalCsvImporter
from ..mappings import MappingsError, load_mappings
from ..models import ImportResult
from ..utils.log import configure_logging
from .options import FORMAT_OPTION, MAPPINGS_OPTION, OUTPUT_OPTION, VERBOSE_OPTION

# Status messages go to stderr so stdout only carries the payload
console = Console(stderr=True)

SUPPORTED_FORMATS = ("pretty-json", "yaml")


def convert(
    csv_file: Path = typer.Argument(..., help="Pivotal Tracker CSV export"),
    format: str = FORMAT_OPTION,
    output: str | None = OUTPUT_OPTION,
    mappings_file: str | None = MAPPINGS_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Convert a Pivotal Tracker CSV export into an import payload.

    The payload holds the mapped issues plus the labels and users they
    reference.

    Examples:
        # Print the payload as JSON
        pivotal-import convert stories.csv

        # Write YAML to a file using custom lookups
        pivotal-import convert stories.csv --format yaml \\
            --mappings team.yaml --output payload.yaml
    """
    configure_logging(verbose)

    if format not in SUPPORTED_FORMATS:
        console.print(
            f"❌ Error: Unsupported format '{format}'. Use 'pretty-json' or 'yaml'."
        )
        raise typer.Exit(1)

    try:
        mappings = load_mappings(mappings_file)
    except MappingsError as e:
        console.print(f"❌ Mappings error: {e}")
        raise typer.Exit(1)

    importer = PivotalCsvImporter(csv_file, mappings=mappings)
    console.print(f"🔍 Importing {csv_file} with {importer.name}")

    try:
        result = asyncio.run(importer.import_issues())
    except PivotalCsvError as e:
        console.print(f"❌ Import failed: {e}")
        raise typer.Exit(1)

    console.print(
        build_summary_table(
            result, importer.default_team_name, importer.rows_read or 0
        )
    )

    data = result.model_dump(mode="json")
    if format == "yaml":
        exported_content = export_yaml(data)
    else:
        exported_content = export_pretty_json(data)

    if output:
        output_path = Path(output)
        with output_path.open("w", encoding="utf-8") as f:
            f.write(exported_content)
        console.print(f"✅ Exported to {output_path}")
    else:
        typer.echo(exported_content)


def build_summary_table(
    result: ImportResult, team_name: str, rows_read: int
) -> Table:
    """Summarize an import result for display.

    Args:
        result: Mapped import result
        team_name: Default team shown to the user
        rows_read: Data rows read from the export

    Returns:
        Rich table with counts, including rows that produced no issue
    """
    table = Table(title="Import Summary")
    table.add_column("Item", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Team", team_name)
    table.add_row("Rows read", str(rows_read))
    table.add_row("Issues", str(len(result.issues)))
    table.add_row("Skipped rows", str(rows_read - len(result.issues)))
    table.add_row("Labels", str(len(result.labels)))
    table.add_row("Users", str(len(result.users)))
    table.add_row("Comments", str(sum(len(issue.comments) for issue in result.issues)))
    return table


def export_pretty_json(data: dict[str, Any]) -> str:
    """Export data as pretty-printed JSON."""
    return json.dumps(data, indent=2, ensure_ascii=False)


def export_yaml(data: dict[str, Any]) -> str:
    """Export data as YAML."""
    return yaml.dump(
        data, default_flow_style=False, allow_unicode=True, sort_keys=False
    )
