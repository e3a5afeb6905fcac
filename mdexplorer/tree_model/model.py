"""Mutable tree view over a scanned index with an explicitly rebuilt flat cache."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from ..file_tree_model.types import TreeIndex
from .flatten import directory_has_visible_children, flatten_tree
from .types import FlatEntry


class FileTreeModel:
    """Owns the index, collapse set, view flags and the flattened rows.

    Mutating methods never touch the flat cache. Callers batch their changes
    and then call ``rebuild_flat_cache`` before reading ``flat_list``.
    """

    def __init__(
        self,
        index: TreeIndex | None = None,
        collapsed: Iterable[Path] | None = None,
        show_empty_dirs: bool = False,
        claude_only: bool = False,
    ) -> None:
        self.index = index if index is not None else TreeIndex()
        self.collapsed: set[Path] = set(collapsed or ())
        self.show_empty_dirs = show_empty_dirs
        self.claude_only = claude_only
        self._flat_cache: list[FlatEntry] = []

    @property
    def roots(self) -> tuple[Path, ...]:
        return self.index.roots

    def flat_list(self) -> list[FlatEntry]:
        """Return rows from the last rebuild."""
        return self._flat_cache

    def flatten(self) -> list[FlatEntry]:
        """Compute rows for the current state without touching the cache."""
        return flatten_tree(self.index, self.collapsed, self.show_empty_dirs, self.claude_only)

    def rebuild_flat_cache(self) -> None:
        self._flat_cache = self.flatten()

    def is_dir(self, path: Path) -> bool:
        return self.index.is_dir(path)

    def is_collapsed(self, path: Path) -> bool:
        return path in self.collapsed

    def has_children(self, path: Path) -> bool:
        """Return whether expanding ``path`` would show any row under the current flags."""
        return directory_has_visible_children(
            self.index,
            path,
            self.show_empty_dirs,
            self.claude_only,
        )

    def toggle_collapsed(self, path: Path) -> bool:
        """Flip collapse state of ``path`` and return whether it is now collapsed."""
        if path in self.collapsed:
            self.collapsed.discard(path)
            return False
        self.collapsed.add(path)
        return True

    def toggle_show_empty_dirs(self) -> bool:
        self.show_empty_dirs = not self.show_empty_dirs
        return self.show_empty_dirs

    def toggle_claude_only(self) -> bool:
        self.claude_only = not self.claude_only
        return self.claude_only

    def replace_index(self, index: TreeIndex) -> None:
        """Install a fresh scan result; collapse state and flags are kept."""
        self.index = index
