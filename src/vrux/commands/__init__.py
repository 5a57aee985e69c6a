"""CLI command implementations for vrux.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .edit import create, delete, restore, star
from .history import diff, download, list_versions, show, tags
from .init import init
from .transfer import export, import_

__all__ = [
    "create",
    "delete",
    "diff",
    "download",
    "export",
    "import_",
    "init",
    "list_versions",
    "restore",
    "show",
    "star",
    "tags",
]
