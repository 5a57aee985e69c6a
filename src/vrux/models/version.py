"""Component version models.

A ComponentVersion is one full-code snapshot in an artifact's history.
JSON field names use the camelCase wire format (parentVersion, isCurrent,
tokenCount, ...); Python attributes are snake_case. Either form is
accepted on input.
"""

from datetime import UTC, datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .tag import Tag

StatField = Literal["views", "copies"]


class Author(BaseModel):
    """Identity of whoever created a version."""

    id: str
    name: str
    avatar: str | None = None


class GenerationMetadata(BaseModel):
    """Generation provenance for a version.

    Unknown keys are kept as-is so imported histories round-trip.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    model: str | None = None
    provider: str | None = None
    temperature: float | None = None
    token_count: int | None = Field(default=None, alias="tokenCount", ge=0)
    generation_time: float | None = Field(
        default=None, alias="generationTime", description="Generation duration in ms"
    )


class VersionStats(BaseModel):
    """Usage counters for a version."""

    model_config = ConfigDict(populate_by_name=True)

    view_count: int = Field(default=0, alias="views", ge=0)
    copy_count: int = Field(default=0, alias="copies", ge=0)
    star_count: int = Field(default=0, alias="stars", ge=0)


class ComponentVersion(BaseModel):
    """One snapshot in an artifact's history.

    Attributes:
        id: Opaque unique identifier
        version: major.minor.patch string, increasing in creation order
        code: Full artifact text at this point
        prompt: Instruction that produced this snapshot
        parent_version: id of the version this one was created from
        author: Who created it
        timestamp: Creation time (UTC)
        message: Commit-style summary
        tags: Derived classification labels, duplicate-free
        metadata: Generation provenance
        stats: View/copy/star counters
        is_starred: Whether the version is starred
        is_current: True only for the head of the history
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    version: str
    code: str
    prompt: str
    parent_version: str | None = Field(default=None, alias="parentVersion")
    author: Author
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    message: str = ""
    tags: list[Tag] = Field(default_factory=list)
    metadata: GenerationMetadata = Field(default_factory=GenerationMetadata)
    stats: VersionStats = Field(default_factory=VersionStats)
    is_starred: bool = Field(default=False, alias="isStarred")
    is_current: bool = Field(default=False, alias="isCurrent")

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Treat naive timestamps as UTC so histories compare consistently."""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, value: list[Tag]) -> list[Tag]:
        return list(dict.fromkeys(value))

    def add_tag(self, tag: Tag) -> None:
        """Append a tag unless already present."""
        if tag not in self.tags:
            self.tags.append(tag)

    def to_json_dict(self) -> dict:
        """Dump using the camelCase wire format."""
        return self.model_dump(mode="json", by_alias=True)
