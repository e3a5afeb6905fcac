"""Domain model for the scanned markdown directory index.

This package contains the non-UI scan primitives:
- the ``TreeIndex`` scan result
- filesystem walking with deny-list, hidden-file and git-ignore filtering
- ancestor-closure derivation for markdown and ``CLAUDE.md`` files
"""

from __future__ import annotations

from .scanner import (
    SKIPPED_DIR_NAMES,
    DirectoryScan,
    is_markdown_name,
    is_skipped_name,
    mark_ancestors,
    normalize_roots,
    scan_directories,
    scan_directory,
)
from .types import CLAUDE_FILENAME, MARKDOWN_SUFFIX, TreeIndex

__all__ = [
    "CLAUDE_FILENAME",
    "MARKDOWN_SUFFIX",
    "SKIPPED_DIR_NAMES",
    "DirectoryScan",
    "TreeIndex",
    "is_markdown_name",
    "is_skipped_name",
    "mark_ancestors",
    "normalize_roots",
    "scan_directories",
    "scan_directory",
]
