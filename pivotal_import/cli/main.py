"""Main CLI entry point."""

import typer
from rich.console import Console

from .convert import convert

app = typer.Typer(
    name="pivotal-import",
    help="Convert Pivotal Tracker CSV exports into issue import payloads",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


app.command(name="convert", context_settings={"help_option_names": ["-h", "--help"]})(
    convert
)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from pivotal_import import __version__

    console.print(f"Pivotal CSV Importer v{__version__}")


if __name__ == "__main__":
    app()
