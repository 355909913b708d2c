"""Import of Pivotal Tracker CSV exports."""

import asyncio
import csv
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from .headers import AliasRegistry, reconcile_headers
from .mapper import RawRow, map_row
from .mappings import ImportMappings, load_mappings
from .models import ImportResult

logger = logging.getLogger(__name__)

# Pivotal Tracker CSV columns:
# - Id, Title, Labels (comma separated), Iteration, Iteration Start,
#   Iteration End, Type (feature, bug, chore, epic, release), Estimate,
#   Priority (e.g. "p3 - Low"), Current State, Created at, Accepted at,
#   Deadline, Requested By, Description, URL
# - Repeated columns: Owned By, Blocker, Blocker Status, Comment, Task,
#   Task Status, Review Type, Reviewer, Review Status, Pull Request,
#   Git Branch


class PivotalCsvError(RuntimeError):
    """Raised when a CSV export cannot be read or parsed."""


def read_csv(path: Path, registry: AliasRegistry) -> list[dict[str, str]]:
    """Read every row of a Pivotal Tracker CSV export.

    Repeated headers are renamed through ``registry`` before any row is keyed,
    and the registry is frozen once the header row has been processed.

    Args:
        path: CSV file (UTF-8, optionally with a BOM)
        registry: Fresh registry that receives the generated aliases

    Returns:
        Rows keyed by reconciled header; short rows are padded with ""

    Raises:
        PivotalCsvError: If the file is missing, unreadable or malformed
    """
    if not path.is_file():
        raise PivotalCsvError(f"CSV file not found: {path}")

    try:
        with open(path, encoding="utf-8-sig", newline="") as f:
            reader = csv.reader(f)
            header_row = next(reader, None)
            if not header_row:
                raise PivotalCsvError(f"CSV file has no header row: {path}")

            headers = reconcile_headers(header_row, registry)
            registry.freeze()

            rows = []
            for values in reader:
                if not any(values):
                    continue
                values = values[: len(headers)]
                values += [""] * (len(headers) - len(values))
                rows.append(dict(zip(headers, values)))
    except UnicodeDecodeError as e:
        raise PivotalCsvError(f"CSV file must be UTF-8 encoded: {path}") from e
    except csv.Error as e:
        raise PivotalCsvError(f"CSV file is malformed: {path}: {e}") from e
    except OSError as e:
        raise PivotalCsvError(f"Cannot read CSV file {path}: {e}") from e

    logger.info("Read %d rows from %s", len(rows), path)
    return rows


def run_import(
    rows: Iterable[RawRow],
    registry: AliasRegistry,
    mappings: ImportMappings | None = None,
    now: datetime | None = None,
) -> ImportResult:
    """Map parsed story rows into an ImportResult.

    Every distinct first owner is registered as a user before any row is
    mapped, whether or not one of its stories is kept.

    Args:
        rows: Story rows keyed by reconciled header
        registry: Aliases produced while reading the header row
        mappings: Value lookups (defaults to the configured mappings)
        now: Reference time for comments without a usable date

    Returns:
        Issues in row order plus the labels and users they reference
    """
    if mappings is None:
        mappings = load_mappings()

    story_rows = list(rows)
    result = ImportResult()

    for owner in dict.fromkeys(row.get("Owned By 1") or "" for row in story_rows):
        result.add_user(owner)

    for row in story_rows:
        issue = map_row(row, registry, result, mappings, now)
        if issue is not None:
            result.issues.append(issue)

    logger.info(
        "Mapped %d of %d rows (%d labels, %d users)",
        len(result.issues),
        len(story_rows),
        len(result.labels),
        len(result.users),
    )
    return result


class PivotalCsvImporter:
    """Import issues from a Pivotal Tracker CSV export."""

    def __init__(
        self, file_path: str | Path, mappings: ImportMappings | None = None
    ) -> None:
        """Initialize the importer.

        Args:
            file_path: Path to the CSV export
            mappings: Value lookups (defaults to the configured mappings)
        """
        self.file_path = Path(file_path)
        self.mappings = mappings
        # Data rows read by the last import, None before the first one
        self.rows_read: int | None = None

    @property
    def name(self) -> str:
        return "Pivotal (CSV)"

    @property
    def default_team_name(self) -> str:
        return "Pivotal"

    async def import_issues(self) -> ImportResult:
        """Read the export and map it into an ImportResult.

        Raises:
            PivotalCsvError: If the file cannot be read or parsed
            MappingsError: If the configured mappings file is invalid
        """
        mappings = self.mappings or load_mappings()
        registry = AliasRegistry()
        rows = await asyncio.to_thread(read_csv, self.file_path, registry)
        self.rows_read = len(rows)
        return run_import(rows, registry, mappings)
