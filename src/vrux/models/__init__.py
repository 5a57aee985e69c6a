"""Pydantic data models for vrux version histories.

This package defines:
- ComponentVersion and its parts (Author, GenerationMetadata, VersionStats)
- Tag, the closed set of classification labels
- LineChange and VersionDiff, the diff engine output

Example:
    >>> from vrux.models import Author, ComponentVersion
    >>> v = ComponentVersion(version="1.0.0", code="<div/>", prompt="a div",
    ...                      author=Author(id="u1", name="Alice"))
    >>> v.to_json_dict()["isCurrent"]
    False
"""

from .diff import LineChange, VersionDiff
from .tag import Tag
from .version import Author, ComponentVersion, GenerationMetadata, StatField, VersionStats

__all__ = [
    "Author",
    "ComponentVersion",
    "GenerationMetadata",
    "LineChange",
    "StatField",
    "Tag",
    "VersionDiff",
    "VersionStats",
]
