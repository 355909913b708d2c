"""Pydantic models for the import payload.

These models describe what the downstream issue tracker consumes: a flat list
of issues plus the labels and users they reference, keyed by name/identifier.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Comment(BaseModel):
    """Comment attached to an imported issue.

    The body has the exported "(Author - Mon D, YYYY)" suffix removed.
    """

    body: str = Field(..., description="Comment text without the metadata suffix")
    created_at: datetime = Field(
        ..., description="Creation timestamp (defaults to import time when unknown)"
    )
    user_id: str | None = Field(
        None, description="Author name captured from the metadata suffix"
    )


class Label(BaseModel):
    """Label model, deduplicated by name across one import."""

    name: str = Field(..., description="Label name (string)")


class User(BaseModel):
    """User model, deduplicated by identifier across one import."""

    id: str = Field(..., description="User identifier (email or raw name)")
    name: str = Field(..., description="Display name")


class Issue(BaseModel):
    """Issue produced from one Pivotal Tracker story row."""

    title: str = Field(
        ..., description="Story title with the '[PT #<id>]' suffix appended"
    )
    description: str = Field("", description="Synthesized markdown description")
    estimate: int | None = Field(
        None, description="Story points, only when non-zero and within range"
    )
    priority: int = Field(0, description="Priority code (0 = no priority)")
    status: str = Field(..., description="Workflow status in the target vocabulary")
    url: str | None = Field(None, description="Link back to the source story")
    assignee_id: str | None = Field(
        None, description="Assignee identifier resolved from the first owner"
    )
    creator_id: str | None = Field(
        None, description="Requester name taken verbatim from the export"
    )
    labels: list[str] = Field(
        default_factory=list, description="Ordered, de-duplicated label names"
    )
    created_at: datetime | None = Field(None, description="Story creation timestamp")
    completed_at: datetime | None = Field(
        None, description="Story acceptance timestamp"
    )
    comments: list[Comment] = Field(
        default_factory=list, description="Comments in original column order"
    )


class ImportResult(BaseModel):
    """Complete import payload returned to the caller."""

    issues: list[Issue] = Field(
        default_factory=list, description="Issues in source row order"
    )
    labels: dict[str, Label] = Field(
        default_factory=dict, description="Labels keyed by name"
    )
    users: dict[str, User] = Field(
        default_factory=dict, description="Users keyed by identifier"
    )

    def add_label(self, name: str) -> Label:
        """Return the label called ``name``, creating it on first use."""
        if name not in self.labels:
            self.labels[name] = Label(name=name)
        return self.labels[name]

    def add_user(self, user_id: str) -> User:
        """Return the user ``user_id``, creating it on first use.

        The display name is the identifier itself.
        """
        if user_id not in self.users:
            self.users[user_id] = User(id=user_id, name=user_id)
        return self.users[user_id]
