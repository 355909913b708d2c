"""Mapping of a single Pivotal Tracker story row to an import issue."""

import logging
import re
from collections.abc import Mapping
from datetime import datetime

from .comments import parse_comment
from .headers import AliasRegistry
from .mappings import ImportMappings
from .models import ImportResult, Issue
from .utils.date_parser import parse_timestamp

logger = logging.getLogger(__name__)

RawRow = Mapping[str, str | None]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Sections appended to the description, in order: (column, heading)
DESCRIPTION_SECTIONS: tuple[tuple[str, str], ...] = (
    ("Task", "Tasks"),
    ("Blocker", "Blockers"),
    ("Pull Request", "Pull Requests"),
)


def parse_estimate(value: str | None) -> int | None:
    """Parse the leading integer of an estimate cell ("3", "3.0", " 8pts")."""
    if not value:
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))


def split_labels(value: str | None) -> list[str]:
    """Split the comma-separated Labels cell, dropping blanks and repeats."""
    if not value:
        return []
    labels: list[str] = []
    for label in (part.strip() for part in value.split(",")):
        if label and label not in labels:
            labels.append(label)
    return labels


def build_description(
    row: RawRow,
    registry: AliasRegistry,
    story_id: str,
    estimate: int | None,
    creator_id: str | None,
    prefix: str = "PT",
) -> str:
    """Synthesize the markdown description of an issue.

    Lines linking back to the story (URL, raw estimate, requester) are put in
    front of the original description, then Tasks, Blockers and Pull Requests
    are appended as bulleted sections. Empty parts are left out.

    Args:
        row: Story row keyed by reconciled header
        registry: Aliases of the repeatable columns
        story_id: Pivotal story id
        estimate: Parsed estimate, before range checks
        creator_id: Requester name
        prefix: Tracker prefix

    Returns:
        Markdown description
    """
    description = row.get("Description") or ""
    url = row.get("URL")

    items = []
    if url:
        items.append(f"{prefix} [#{story_id}]({url})")
    if estimate:
        items.append(f"{prefix} estimate: {estimate}")
    if creator_id:
        items.append(f"{prefix} creator: {creator_id}")
    if items:
        description = "\n".join(items) + "\n\n" + description

    for field, heading in DESCRIPTION_SECTIONS:
        entries = "".join(f"\n- {value}" for value in registry.values(field, row))
        if entries:
            description += f"\n\n**{heading}**:{entries}"

    return description


def map_row(
    row: RawRow,
    registry: AliasRegistry,
    result: ImportResult,
    mappings: ImportMappings,
    now: datetime | None = None,
) -> Issue | None:
    """Map one story row to an Issue.

    Epics, releases and rows without a title are skipped and leave ``result``
    untouched. For every emitted issue its labels are added to
    ``result.labels``; the issue itself is not appended.

    Args:
        row: Story row keyed by reconciled header
        registry: Aliases of the repeatable columns
        result: Import result that collects labels
        mappings: Value lookups
        now: Reference time for comments without a usable date

    Returns:
        The mapped Issue, or None if the row is skipped
    """
    story_type = row.get("Type") or ""
    story_id = row.get("Id") or ""
    if story_type in mappings.skipped_types:
        logger.debug("Skipping story %s of type %s", story_id, story_type)
        return None

    title = row.get("Title")
    if not title:
        logger.debug("Skipping story %s without a title", story_id)
        return None

    prefix = mappings.tracker_prefix
    original_estimate = parse_estimate(row.get("Estimate"))
    creator_id = row.get("Requested By") or None

    # Only the first owner becomes the assignee
    assignee_id = mappings.map_assignee_id(row.get("Owned By 1")) or None

    labels = split_labels(row.get("Labels"))
    # Status only looks at labels set by users, so it runs before the type
    # label is added.
    status = mappings.map_status(row.get("Current State"), labels)
    # An empty Type adds no label (see DESIGN.md, "Labels as an ordered set")
    if story_type and story_type not in labels:
        labels.append(story_type)

    comments = [
        parse_comment(comment, now) for comment in registry.values("Comment", row)
    ]

    issue = Issue(
        title=f"{title} [{prefix} #{story_id}]",
        description=build_description(
            row, registry, story_id, original_estimate, creator_id, prefix
        ),
        estimate=mappings.map_estimate(original_estimate),
        priority=mappings.map_priority(row.get("Priority")),
        status=status,
        url=row.get("URL") or None,
        assignee_id=assignee_id,
        creator_id=creator_id,
        labels=labels,
        created_at=parse_timestamp(row.get("Created at")),
        completed_at=parse_timestamp(row.get("Accepted at")),
        comments=comments,
    )

    for label in labels:
        result.add_label(label)

    return issue
