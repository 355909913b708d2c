"""Lookup tables used to translate Pivotal Tracker values.

The tables are data, not code: they are read from ``mappings.yaml`` (shipped
with the package), optionally overlaid by a file passed explicitly or named by
``PIVOTAL_IMPORT_MAPPINGS``.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MAPPINGS_PATH = Path(__file__).parent / "mappings.yaml"
MAPPINGS_ENV_VAR = "PIVOTAL_IMPORT_MAPPINGS"


class MappingsError(ValueError):
    """Raised when a mappings file cannot be read or validated."""


class ImportMappings(BaseModel):
    """Value lookups applied to every story row."""

    tracker_prefix: str = Field(
        "PT", description="Short source name used in titles and descriptions"
    )
    max_estimate: int = Field(64, description="Largest estimate kept on an issue")
    skipped_types: list[str] = Field(
        default_factory=lambda: ["epic", "release"],
        description="Story types that never become issues",
    )
    default_priority: int = Field(0, description="Priority for unknown values")
    priorities: dict[str, int] = Field(
        default_factory=dict, description="Pivotal priority -> priority code"
    )
    default_status: str = Field("Backlog", description="Status for unknown states")
    statuses: dict[str, str] = Field(
        default_factory=dict, description="Pivotal current state -> status"
    )
    accepted_label_statuses: dict[str, str] = Field(
        default_factory=dict,
        description="Label -> status override for accepted stories, in priority order",
    )
    users: dict[str, str] = Field(
        default_factory=dict, description="Pivotal username -> user identifier"
    )

    def map_estimate(self, value: int | None) -> int | None:
        """Keep an estimate only when it is non-zero and within range."""
        return value if value and value <= self.max_estimate else None

    def map_priority(self, value: str | None) -> int:
        if value is None:
            return self.default_priority
        return self.priorities.get(value, self.default_priority)

    def map_status(self, current_state: str | None, labels: list[str]) -> str:
        """Translate a Pivotal current state into a target status.

        Args:
            current_state: Raw "Current State" value
            labels: User-authored labels of the story (without the type label)

        Returns:
            Target status name
        """
        if current_state == "accepted":
            for label, status in self.accepted_label_statuses.items():
                if label in labels:
                    return status

        if current_state is None:
            return self.default_status
        return self.statuses.get(current_state, self.default_status)

    def map_assignee_id(self, value: str | None) -> str | None:
        """Translate a Pivotal username, falling back to the raw value."""
        if value is None:
            return None
        return self.users.get(value) or value


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except OSError as e:
        raise MappingsError(f"Cannot read mappings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise MappingsError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MappingsError(
            f"Mappings file {path} must contain a mapping at the top level"
        )
    return data


def merge_mappings(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``override`` onto ``base``.

    Tables (mappings) are merged key by key so an override only has to list
    the entries it adds or changes; every other value replaces the base one.
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def load_mappings(path: str | Path | None = None) -> ImportMappings:
    """Load lookup tables from YAML.

    The packaged ``mappings.yaml`` is always read first; an override file is
    merged onto it, so a partial override keeps every built-in entry it does
    not mention.

    Args:
        path: Override file (optional). Falls back to the
            PIVOTAL_IMPORT_MAPPINGS environment variable; without either only
            the packaged defaults are used.

    Returns:
        Validated ImportMappings

    Raises:
        MappingsError: If a file is missing, is not YAML or has invalid values
    """
    if path is None:
        path = os.getenv(MAPPINGS_ENV_VAR) or None

    data = _read_yaml(DEFAULT_MAPPINGS_PATH)
    source = DEFAULT_MAPPINGS_PATH
    if path is not None and Path(path) != DEFAULT_MAPPINGS_PATH:
        source = Path(path)
        data = merge_mappings(data, _read_yaml(source))

    try:
        mappings = ImportMappings.model_validate(data)
    except ValidationError as e:
        raise MappingsError(f"Invalid mappings in {source}: {e}") from e

    logger.debug(
        "Loaded mappings from %s (%d users, %d statuses, %d priorities)",
        source,
        len(mappings.users),
        len(mappings.statuses),
        len(mappings.priorities),
    )
    return mappings
