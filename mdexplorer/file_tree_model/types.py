"""Scan-result datatypes for the markdown directory index."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

MARKDOWN_SUFFIX = ".md"
CLAUDE_FILENAME = "CLAUDE.md"


@dataclass(frozen=True)
class TreeIndex:
    """Directory index observed by one full scan.

    ``entries`` maps every scanned directory to its unordered markdown-file
    and subdirectory children. ``dirs_with_md`` and ``dirs_with_claude_md``
    are closed under taking ancestors up to the scan root.
    """

    roots: tuple[Path, ...] = ()
    entries: dict[Path, list[Path]] = field(default_factory=dict)
    dirs_with_md: frozenset[Path] = frozenset()
    dirs_with_claude_md: frozenset[Path] = frozenset()
    markdown_files: tuple[Path, ...] = ()
    claude_files: tuple[Path, ...] = ()

    def is_dir(self, path: Path) -> bool:
        """Return whether ``path`` is a directory recorded by the scan."""
        return path in self.entries

    def children(self, directory: Path) -> list[Path]:
        """Return recorded children of ``directory`` (empty when unknown)."""
        return self.entries.get(directory, [])


__all__ = [
    "CLAUDE_FILENAME",
    "MARKDOWN_SUFFIX",
    "TreeIndex",
]
