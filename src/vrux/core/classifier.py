"""Tag and commit message derivation for new versions.

Tags come from two sources: the similarity bucket of a line diff between
the old and new code, and textual pattern transitions (a pattern present
in the new code but absent from the old). Detection is plain substring
matching; no parsing is involved.
"""

from collections.abc import Callable
from dataclasses import dataclass

from ..models import Tag
from .diff_engine import compare

INITIAL_MESSAGE = "Initial component version"
DEFAULT_MESSAGE = "Updated component"

MINOR_THRESHOLD = 0.9
MODERATE_THRESHOLD = 0.7
REFACTOR_RATIO = 0.8

# Highest priority first; the first tag present picks the message.
MESSAGE_PRIORITY: list[tuple[Tag, str]] = [
    (Tag.MINOR_CHANGE, "Minor updates and improvements"),
    (Tag.MAJOR_CHANGE, "Major component restructuring"),
    (Tag.ADDED_STATE, "Added state management"),
    (Tag.ADDED_STYLING, "Updated component styling"),
    (Tag.REFACTORED, "Refactored component code"),
]


def _introduced(pattern: str, old_code: str, new_code: str) -> bool:
    return pattern in new_code and pattern not in old_code


def added_state(old_code: str, new_code: str) -> bool:
    """State hook appears for the first time."""
    return _introduced("useState", old_code, new_code)


def added_effects(old_code: str, new_code: str) -> bool:
    """Effect hook appears for the first time."""
    return _introduced("useEffect", old_code, new_code)


def added_styling(old_code: str, new_code: str) -> bool:
    """className attributes appear for the first time."""
    return _introduced("className=", old_code, new_code)


def added_async(old_code: str, new_code: str) -> bool:
    """Asynchronous code appears for the first time."""
    return _introduced("async", old_code, new_code)


def shrank(old_code: str, new_code: str) -> bool:
    """New code is under 80% of the old code's length."""
    return len(new_code) < len(old_code) * REFACTOR_RATIO


@dataclass(frozen=True)
class PatternRule:
    """A tag emitted when its predicate holds for (old_code, new_code)."""

    tag: Tag
    predicate: Callable[[str, str], bool]

    def matches(self, old_code: str, new_code: str) -> bool:
        return self.predicate(old_code, new_code)


PATTERN_RULES: list[PatternRule] = [
    PatternRule(Tag.ADDED_STATE, added_state),
    PatternRule(Tag.ADDED_EFFECTS, added_effects),
    PatternRule(Tag.ADDED_STYLING, added_styling),
    PatternRule(Tag.REFACTORED, shrank),
    PatternRule(Tag.ADDED_ASYNC, added_async),
]


def similarity_tag(similarity: float) -> Tag:
    """Bucket a similarity score into a change-size tag."""
    if similarity > MINOR_THRESHOLD:
        return Tag.MINOR_CHANGE
    if similarity > MODERATE_THRESHOLD:
        return Tag.MODERATE_CHANGE
    return Tag.MAJOR_CHANGE


def derive_tags(new_code: str, old_code: str | None = None) -> list[Tag]:
    """Derive tags for new_code relative to old_code.

    Args:
        new_code: Code of the version being created
        old_code: Code of the previous head, or None for a first version

    Returns:
        Duplicate-free list of tags
    """
    if old_code is None:
        return [Tag.INITIAL]

    diff = compare(old_code, new_code)
    tags = [similarity_tag(diff.similarity)]
    tags.extend(rule.tag for rule in PATTERN_RULES if rule.matches(old_code, new_code))
    return tags


def derive_message(tags: list[Tag], has_previous: bool = True) -> str:
    """Pick exactly one commit message from a tag list."""
    if not has_previous:
        return INITIAL_MESSAGE
    for tag, message in MESSAGE_PRIORITY:
        if tag in tags:
            return message
    return DEFAULT_MESSAGE


def classify(new_code: str, old_code: str | None = None) -> tuple[list[Tag], str]:
    """Derive (tags, message) for a new version."""
    tags = derive_tags(new_code, old_code)
    return tags, derive_message(tags, has_previous=old_code is not None)
