"""Filesystem scanning into the markdown directory index.

Walks each root with an explicit stack, keeping directories and markdown
files only, then derives the ancestor-closure sets used by the tree view to
decide which directories are worth showing.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..ignore_rules import IgnoreRules
from .types import CLAUDE_FILENAME, MARKDOWN_SUFFIX, TreeIndex

logger = logging.getLogger("mdexplorer.scanner")

SKIPPED_DIR_NAMES = frozenset(
    {
        "node_modules",
        "vendor",
        ".git",
        "target",
        "__pycache__",
        "venv",
        ".venv",
        ".cache",
        "dist",
        "build",
    }
)


@dataclass
class DirectoryScan:
    """Raw observations from walking one root."""

    root: Path
    entries: dict[Path, list[Path]] = field(default_factory=dict)
    markdown_files: list[Path] = field(default_factory=list)
    claude_files: list[Path] = field(default_factory=list)


def is_markdown_name(name: str) -> bool:
    """Return whether ``name`` carries a markdown suffix (case-insensitive)."""
    return os.path.splitext(name)[1].lower() == MARKDOWN_SUFFIX


def is_skipped_name(name: str) -> bool:
    """Return whether an entry is hidden or on the directory deny-list."""
    return name.startswith(".") or name in SKIPPED_DIR_NAMES


def scan_directory(root: Path, skip_ignored: bool = True) -> DirectoryScan:
    """Walk ``root`` and record directories plus markdown files.

    With ``skip_ignored``, every directory is checked for a ``.git`` entry
    and a ``.ignore`` file; rules found there apply to its whole subtree,
    on top of the rules inherited from its parents (see ``IgnoreRules``).

    Symlinked directories are not followed. Directories that cannot be read
    and entries that vanish mid-walk are skipped; the scan never raises.
    """
    scan = DirectoryScan(root=root)
    scan.entries[root] = []
    root_rules = IgnoreRules.for_root(root) if skip_ignored else None

    stack: list[tuple[Path, IgnoreRules | None]] = [(root, root_rules)]
    while stack:
        directory, inherited_rules = stack.pop()
        try:
            with os.scandir(directory) as it:
                children = list(it)
        except OSError as exc:
            logger.debug("skipping unreadable directory %s: %s", directory, exc)
            continue

        rules = inherited_rules
        if rules is not None:
            rules = rules.descend(directory, {child.name for child in children})

        siblings = scan.entries[directory]
        for child in children:
            name = child.name
            if is_skipped_name(name):
                continue
            child_path = directory / name

            try:
                is_dir = child.is_dir(follow_symlinks=False)
            except OSError:
                continue
            if rules is not None and rules.is_ignored(child_path, is_dir):
                continue
            if is_dir:
                siblings.append(child_path)
                scan.entries.setdefault(child_path, [])
                stack.append((child_path, rules))
                continue

            if not is_markdown_name(name):
                continue
            try:
                if not child.is_file():
                    continue
            except OSError:
                continue
            siblings.append(child_path)
            scan.markdown_files.append(child_path)
            if name == CLAUDE_FILENAME:
                scan.claude_files.append(child_path)

    return scan


def mark_ancestors(files: Iterable[Path], root: Path) -> set[Path]:
    """Return every directory between each file and ``root`` (inclusive).

    The walk up from a file stops at the first directory already marked,
    since its ancestors were marked by the walk that marked it.
    """
    marked: set[Path] = set()
    for path in files:
        current = path.parent
        while current not in marked:
            marked.add(current)
            if current == root or current.parent == current:
                break
            current = current.parent
    return marked


def normalize_roots(roots: Iterable[Path | str]) -> list[Path]:
    """Resolve roots, dropping missing ones and duplicates while keeping order."""
    normalized: list[Path] = []
    for raw_root in roots:
        root = Path(raw_root).expanduser()
        try:
            root = root.resolve()
        except OSError:
            continue
        if not root.is_dir():
            logger.debug("ignoring missing root %s", root)
            continue
        if root in normalized:
            continue
        normalized.append(root)
    return normalized


def scan_directories(roots: Iterable[Path | str], skip_ignored: bool = True) -> TreeIndex:
    """Scan every root and build the combined index with closure sets."""
    scan_roots = normalize_roots(roots)
    entries: dict[Path, list[Path]] = {}
    dirs_with_md: set[Path] = set()
    dirs_with_claude_md: set[Path] = set()
    markdown_files: list[Path] = []
    claude_files: list[Path] = []

    for root in scan_roots:
        scan = scan_directory(root, skip_ignored=skip_ignored)
        for directory, children in scan.entries.items():
            recorded = entries.setdefault(directory, [])
            if not recorded:
                recorded.extend(children)
                continue
            known = set(recorded)
            recorded.extend(child for child in children if child not in known)
        markdown_files.extend(scan.markdown_files)
        claude_files.extend(scan.claude_files)
        # Marks from a nested root stop at that root, so each root gets its own walk.
        dirs_with_md |= mark_ancestors(scan.markdown_files, root)
        dirs_with_claude_md |= mark_ancestors(scan.claude_files, root)

    for root in scan_roots:
        if entries.get(root):
            dirs_with_md.add(root)

    logger.debug(
        "scanned %d root(s): %d directories, %d markdown files",
        len(scan_roots),
        len(entries),
        len(markdown_files),
    )
    return TreeIndex(
        roots=tuple(scan_roots),
        entries=entries,
        dirs_with_md=frozenset(dirs_with_md),
        dirs_with_claude_md=frozenset(dirs_with_claude_md),
        markdown_files=tuple(dict.fromkeys(markdown_files)),
        claude_files=tuple(dict.fromkeys(claude_files)),
    )


__all__ = [
    "SKIPPED_DIR_NAMES",
    "DirectoryScan",
    "is_markdown_name",
    "is_skipped_name",
    "mark_ancestors",
    "normalize_roots",
    "scan_directory",
    "scan_directories",
]
