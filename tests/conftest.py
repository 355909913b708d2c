"""Test configuration and fixtures."""

import csv
from collections.abc import Callable
from pathlib import Path

import pytest

from pivotal_import.headers import AliasRegistry, reconcile_headers
from pivotal_import.mappings import ImportMappings, load_mappings

# Header row of a Pivotal Tracker export with two owners, two comments,
# two tasks, one blocker and one pull request.
PIVOTAL_HEADERS = [
    "Id",
    "Title",
    "Labels",
    "Iteration",
    "Iteration Start",
    "Iteration End",
    "Type",
    "Estimate",
    "Priority",
    "Current State",
    "Created at",
    "Accepted at",
    "Deadline",
    "Requested By",
    "Description",
    "URL",
    "Owned By",
    "Owned By",
    "Blocker",
    "Blocker Status",
    "Comment",
    "Comment",
    "Task",
    "Task Status",
    "Task",
    "Task Status",
    "Pull Request",
    "Git Branch",
]


@pytest.fixture
def mappings() -> ImportMappings:
    """Packaged default lookups."""
    return load_mappings()


@pytest.fixture
def registry() -> AliasRegistry:
    """Registry populated from the standard header row."""
    registry = AliasRegistry()
    reconcile_headers(PIVOTAL_HEADERS, registry)
    registry.freeze()
    return registry


@pytest.fixture
def make_row() -> Callable[..., dict[str, str]]:
    """Build a story row keyed by reconciled header.

    Every column defaults to "" apart from a minimal feature story.
    """

    def _make_row(values: dict[str, str] | None = None) -> dict[str, str]:
        registry = AliasRegistry()
        row = {header: "" for header in reconcile_headers(PIVOTAL_HEADERS, registry)}
        row.update({"Id": "100", "Title": "Story", "Type": "feature"})
        row.update(values or {})
        return row

    return _make_row


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write raw CSV lines (header first) to a temporary file."""

    def _write_csv(lines: list[list[str]], name: str = "stories.csv") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8", newline="") as f:
            csv.writer(f).writerows(lines)
        return path

    return _write_csv


@pytest.fixture
def sample_csv(write_csv: Callable[..., Path]) -> Path:
    """Small export covering kept, skipped and commented stories."""
    row_feature = [
        "1",
        "Add login",
        "auth, frontend",
        "3",
        "Jan 1, 2024",
        "Jan 14, 2024",
        "feature",
        "3",
        "p1 - High",
        "started",
        "Jan 2, 2024",
        "",
        "",
        "Alice Smith",
        "Users need to log in.",
        "https://www.pivotaltracker.com/story/show/1",
        "Emily",
        "stefan",
        "Waiting on design",
        "",
        "Looks good (Alice Smith - Apr 1, 2024)",
        "Ship it",
        "Write form",
        "completed",
        "Add tests",
        "not completed",
        "https://github.com/acme/app/pull/7",
        "login-branch",
    ]
    row_epic = ["2", "Big epic", "", "", "", "", "epic"] + [""] * 21
    row_untitled = ["3", "", "", "", "", "", "bug"] + [""] * 21
    row_bug = [
        "4",
        "Crash on save",
        "abandoned",
        "",
        "",
        "",
        "bug",
        "",
        "none",
        "accepted",
        "Feb 1, 2024",
        "Feb 3, 2024",
        "",
        "",
        "",
        "",
        "Nina",
    ] + [""] * 11
    return write_csv([PIVOTAL_HEADERS, row_feature, row_epic, row_untitled, row_bug])
