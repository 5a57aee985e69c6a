"""Line-level diff engine for code snapshots.

Lines are compared by set membership, not by alignment: a line counts as
added if it never occurs in the old snapshot, and as removed if it never
occurs in the new one. Moving a line therefore does not register as a
change.
"""

import difflib

from ..models import LineChange, VersionDiff


def split_lines(code: str) -> list[str]:
    """Split a snapshot into lines. The empty string has no lines."""
    if not code:
        return []
    return code.split("\n")


def compute_similarity(added: int, removed: int, total_lines: int) -> float:
    """Similarity score clamped to [0, 1].

    Args:
        added: Number of added lines
        removed: Number of removed lines
        total_lines: Line count of the longer snapshot

    Returns:
        1.0 when there are no lines at all, otherwise
        1 - (added + removed) / total_lines, clamped
    """
    if total_lines == 0:
        return 1.0
    similarity = 1 - (added + removed) / total_lines
    return max(0.0, min(1.0, similarity))


def compare(code_a: str, code_b: str) -> VersionDiff:
    """Compare two snapshots, treating code_a as old and code_b as new.

    Args:
        code_a: Old snapshot
        code_b: New snapshot

    Returns:
        VersionDiff with added lines indexed into code_b and removed lines
        indexed into code_a
    """
    lines_a = split_lines(code_a)
    lines_b = split_lines(code_b)
    set_a = set(lines_a)
    set_b = set(lines_b)

    added = [
        LineChange(kind="added", index=i, line=line)
        for i, line in enumerate(lines_b)
        if line not in set_a
    ]
    removed = [
        LineChange(kind="removed", index=i, line=line)
        for i, line in enumerate(lines_a)
        if line not in set_b
    ]

    return VersionDiff(
        added=added,
        removed=removed,
        similarity=compute_similarity(
            len(added), len(removed), max(len(lines_a), len(lines_b))
        ),
    )


def render_unified(
    code_a: str,
    code_b: str,
    label_a: str = "a",
    label_b: str = "b",
    context: int = 3,
) -> str:
    """Render a unified diff for display.

    This is presentation only; tags and similarity come from compare().
    """
    return "\n".join(
        difflib.unified_diff(
            split_lines(code_a),
            split_lines(code_b),
            fromfile=label_a,
            tofile=label_b,
            n=context,
            lineterm="",
        )
    )
