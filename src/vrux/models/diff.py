"""Line-level diff models."""

from typing import Literal

from pydantic import BaseModel, Field


class LineChange(BaseModel):
    """A single line present on one side of a comparison only.

    Attributes:
        kind: Whether the line was added or removed
        index: Zero-based line index in the snapshot it belongs to
        line: The line text, without trailing newline
    """

    kind: Literal["added", "removed"]
    index: int = Field(ge=0)
    line: str

    def __str__(self) -> str:
        sign = "+" if self.kind == "added" else "-"
        return f"{sign}{self.index}: {self.line}"


class VersionDiff(BaseModel):
    """Result of comparing two code snapshots.

    `modified` is always empty; only whole-line presence is tracked.
    """

    added: list[LineChange] = Field(default_factory=list)
    removed: list[LineChange] = Field(default_factory=list)
    modified: list[LineChange] = Field(default_factory=list)
    similarity: float = Field(ge=0.0, le=1.0, description="Share of lines in common")

    @property
    def is_identical(self) -> bool:
        """True if no line was added or removed."""
        return not self.added and not self.removed

    def summary(self) -> str:
        """Short human-readable summary, e.g. '+3 -1 (92% similar)'."""
        return f"+{len(self.added)} -{len(self.removed)} ({self.similarity:.0%} similar)"
