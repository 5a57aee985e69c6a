"""Core logic for vrux.

- diff_engine: line-level comparison and similarity
- classifier: tag and commit message derivation
- version_store: history invariants and operations
- service: facade used by the CLI and other callers
"""

from .classifier import PATTERN_RULES, PatternRule, classify, derive_message, derive_tags
from .diff_engine import compare, render_unified
from .service import VersionControlService, build_backend, get_vrux_dir, open_service
from .version_store import VersionStore, estimate_token_count, next_version_number

__all__ = [
    "PATTERN_RULES",
    "PatternRule",
    "VersionControlService",
    "VersionStore",
    "build_backend",
    "classify",
    "compare",
    "derive_message",
    "derive_tags",
    "estimate_token_count",
    "get_vrux_dir",
    "next_version_number",
    "open_service",
    "render_unified",
]
