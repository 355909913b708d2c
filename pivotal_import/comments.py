"""Extraction of author and date metadata from exported comments."""

import re
from datetime import datetime

from .models import Comment
from .utils.date_parser import parse_past_date

# Exported comments end with the author and date, e.g.
# "Looks good (Alice Smith - Apr 1, 2024)"
COMMENT_META_PATTERN = re.compile(
    r"\s*\(([\w\s]+) - (\w{3} \d+, \d\d\d\d)\)\Z", re.ASCII
)


def parse_comment(text: str, now: datetime | None = None) -> Comment:
    """Build a Comment from one exported comment cell.

    Args:
        text: Raw cell value
        now: Reference time used when the date is missing, invalid or in the
            future (defaults to the current time)

    Returns:
        Comment with the metadata suffix removed from its body
    """
    match = COMMENT_META_PATTERN.search(text)
    if match is None:
        return Comment(body=text, created_at=parse_past_date(None, now))

    return Comment(
        body=text[: match.start()],
        created_at=parse_past_date(match.group(2), now),
        user_id=match.group(1),
    )
