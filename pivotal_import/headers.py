"""Renaming of repeated CSV columns.

Pivotal Tracker exports one column per value of a multi-valued field, all with
the same header (e.g. several "Comment" columns). Before rows can be keyed by
header, each occurrence is renamed to a positional alias ("Comment 1",
"Comment 2", ...) and the aliases are recorded in an ``AliasRegistry``.
"""

import logging
from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

# Column names that may appear several times in the header row.
REPEATABLE_FIELDS: tuple[str, ...] = (
    "Blocker",
    "Comment",
    "Owned By",
    "Pull Request",
    "Task",
)


class AliasRegistry:
    """Aliases generated for the repeatable columns of one CSV file.

    A registry belongs to a single import run. Create a new one for every file
    so alias counts never carry over between files.
    """

    def __init__(self, fields: Iterable[str] = REPEATABLE_FIELDS) -> None:
        """Initialize an empty registry.

        Args:
            fields: Column names that are tracked as repeatable
        """
        self._aliases: dict[str, list[str]] = {field: [] for field in fields}
        self._frozen = False

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._aliases)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def is_repeatable(self, header: str) -> bool:
        return header in self._aliases

    def register(self, field: str) -> str:
        """Allocate the next positional alias for ``field``.

        Args:
            field: A repeatable column name

        Returns:
            The new alias, e.g. "Comment 3"

        Raises:
            KeyError: If the field is not repeatable
            RuntimeError: If the registry has been frozen
        """
        if self._frozen:
            raise RuntimeError("Alias registry is frozen; headers were already read")
        aliases = self._aliases[field]
        alias = f"{field} {len(aliases) + 1}"
        aliases.append(alias)
        return alias

    def freeze(self) -> None:
        """Reject any further registration."""
        self._frozen = True

    def aliases_for(self, field: str) -> list[str]:
        """Return the aliases recorded for ``field`` in column order."""
        return list(self._aliases.get(field, ()))

    def values(self, field: str, row: Mapping[str, str | None]) -> list[str]:
        """Collect the non-empty values of every ``field`` column in ``row``."""
        return [
            value
            for value in (row.get(alias) for alias in self._aliases.get(field, ()))
            if value
        ]

    def as_dict(self) -> dict[str, list[str]]:
        return {field: list(aliases) for field, aliases in self._aliases.items()}

    def __repr__(self) -> str:
        return f"AliasRegistry({self.as_dict()!r})"


def reconcile_headers(headers: Iterable[str], registry: AliasRegistry) -> list[str]:
    """Rename repeatable headers to positional aliases.

    Headers are processed left to right; anything that is not repeatable
    passes through unchanged.

    Args:
        headers: Header names exactly as read from the file
        registry: Registry that receives the generated aliases

    Returns:
        New list of headers, same length and order as the input
    """
    reconciled = []
    for header in headers:
        if registry.is_repeatable(header):
            reconciled.append(registry.register(header))
        else:
            reconciled.append(header)

    logger.debug("Reconciled headers: %s", registry.as_dict())
    return reconciled
