"""Pivotal Tracker CSV importer."""

from .headers import REPEATABLE_FIELDS, AliasRegistry, reconcile_headers
from .importer import PivotalCsvError, PivotalCsvImporter, read_csv, run_import
from .mapper import map_row
from .mappings import ImportMappings, MappingsError, load_mappings
from .models import Comment, ImportResult, Issue, Label, User

__version__ = "0.1.0"

__all__ = [
    "REPEATABLE_FIELDS",
    "AliasRegistry",
    "Comment",
    "ImportMappings",
    "ImportResult",
    "Issue",
    "Label",
    "MappingsError",
    "PivotalCsvError",
    "PivotalCsvImporter",
    "User",
    "load_mappings",
    "map_row",
    "read_csv",
    "reconcile_headers",
    "run_import",
]
