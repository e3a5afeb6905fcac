"""Depth-first flattening of the directory index under view policy."""

from __future__ import annotations

from collections.abc import Set
from pathlib import Path

from ..file_tree_model.types import CLAUDE_FILENAME, TreeIndex
from .types import FlatEntry


def file_is_visible(path: Path, claude_only: bool) -> bool:
    """Return whether a recorded markdown file is shown under the flags."""
    if claude_only:
        return path.name == CLAUDE_FILENAME
    return True


def directory_is_visible(
    index: TreeIndex,
    path: Path,
    show_empty_dirs: bool,
    claude_only: bool,
) -> bool:
    """Return whether a non-root directory is emitted under the flags.

    ``claude_only`` takes precedence over ``show_empty_dirs``.
    """
    if claude_only:
        return path in index.dirs_with_claude_md
    if not show_empty_dirs:
        return path in index.dirs_with_md
    return True


def split_children(index: TreeIndex, directory: Path) -> tuple[list[Path], list[Path]]:
    """Return ``(files, subdirectories)`` of ``directory``, each sorted by path."""
    files: list[Path] = []
    subdirs: list[Path] = []
    for child in index.children(directory):
        if index.is_dir(child):
            subdirs.append(child)
        else:
            files.append(child)
    files.sort()
    subdirs.sort()
    return files, subdirs


def directory_has_visible_children(
    index: TreeIndex,
    directory: Path,
    show_empty_dirs: bool,
    claude_only: bool,
) -> bool:
    """Return whether flattening ``directory`` expanded would emit any child row."""
    for child in index.children(directory):
        if index.is_dir(child):
            if directory_is_visible(index, child, show_empty_dirs, claude_only):
                return True
        elif file_is_visible(child, claude_only):
            return True
    return False


def flatten_tree(
    index: TreeIndex,
    collapsed: Set[Path],
    show_empty_dirs: bool,
    claude_only: bool,
) -> list[FlatEntry]:
    """Build display rows for every root in order.

    Each expanded directory emits its visible files before its visible
    subdirectories, both sorted by path. Collapsed directories are emitted
    without descendants; directories failing the visibility test are not
    emitted at all. Roots are always emitted.
    """
    rows: list[FlatEntry] = []
    stack: list[tuple[Path, int]] = [(root, 0) for root in reversed(index.roots)]
    while stack:
        directory, depth = stack.pop()
        rows.append(FlatEntry(directory, depth))
        if directory in collapsed:
            continue

        files, subdirs = split_children(index, directory)
        for file_path in files:
            if file_is_visible(file_path, claude_only):
                rows.append(FlatEntry(file_path, depth + 1))
        for subdir in reversed(subdirs):
            if directory_is_visible(index, subdir, show_empty_dirs, claude_only):
                stack.append((subdir, depth + 1))
    return rows


__all__ = [
    "directory_has_visible_children",
    "directory_is_visible",
    "file_is_visible",
    "flatten_tree",
    "split_children",
]
