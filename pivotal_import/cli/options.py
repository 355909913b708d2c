"""Shared CLI option definitions."""

import typer

FORMAT_OPTION = typer.Option(
    "pretty-json",
    "--format",
    "-f",
    help="Output format: pretty-json or yaml",
)

OUTPUT_OPTION = typer.Option(
    None, "--output", "-o", help="Output file path (default: print to stdout)"
)

MAPPINGS_OPTION = typer.Option(
    None,
    "--mappings",
    "-m",
    help="YAML file with value lookups (default: $PIVOTAL_IMPORT_MAPPINGS or built-in)",
)

VERBOSE_OPTION = typer.Option(
    False, "--verbose", "-v", help="Log mapping details to stderr"
)
