"""Classification labels attached to component versions."""

from enum import Enum


class Tag(str, Enum):
    """Closed set of tags derived from content analysis."""

    INITIAL = "initial"
    MINOR_CHANGE = "minor-change"
    MODERATE_CHANGE = "moderate-change"
    MAJOR_CHANGE = "major-change"
    ADDED_STATE = "added-state"
    ADDED_EFFECTS = "added-effects"
    ADDED_STYLING = "added-styling"
    ADDED_ASYNC = "added-async"
    REFACTORED = "refactored"
    RESTORED = "restored"
