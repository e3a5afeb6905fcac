"""Ignore rules discovered while walking a scan root.

Two kinds of rule source are collected per directory during the walk:

- git repositories: any directory holding a ``.git`` entry (and the
  repository enclosing a scan root, when there is one) contributes the
  paths ``git ls-files --exclude-standard`` reports as ignored below it.
  That covers ``.gitignore`` files, ``.git/info/exclude`` and the global
  excludes file.
- ``.ignore`` files: read with ``pathspec`` in every directory, whether or
  not git is installed or the directory is inside a repository.

Each walked directory carries an ``IgnoreRules`` stack holding every
source whose directory contains it. Rules found in a directory apply only
to that directory's subtree.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

import pathspec

logger = logging.getLogger("mdexplorer.ignore")

IGNORE_FILENAME = ".ignore"
GIT_DIRNAME = ".git"


@dataclass(frozen=True)
class RepositoryIgnores:
    """Paths git reports as ignored below ``directory``.

    Ignored directories are reported once, without their contents, so a
    caller must stop descending into a directory this matcher rejects.
    """

    directory: Path
    ignored: frozenset[Path]

    def is_ignored(self, path: Path) -> bool:
        return path in self.ignored


@dataclass(frozen=True)
class IgnoreFile:
    """Patterns from one ``.ignore`` file, anchored at its directory."""

    directory: Path
    spec: pathspec.PathSpec

    def decide(self, path: Path, is_dir: bool) -> bool | None:
        """Return True (ignored), False (whitelisted by ``!``) or None (no match).

        The last matching pattern wins, as in gitignore files.
        """
        try:
            rel = path.relative_to(self.directory).as_posix()
        except ValueError:
            return None
        if is_dir:
            rel += "/"
        decision: bool | None = None
        for pattern in self.spec.patterns:
            if pattern.include is None:
                continue
            if pattern.match_file(rel) is not None:
                decision = pattern.include
        return decision


def git_available() -> bool:
    return shutil.which("git") is not None


def find_enclosing_repository(directory: Path) -> Path | None:
    """Return the top level of the git work tree containing ``directory``."""
    if not git_available():
        return None
    try:
        proc = subprocess.run(
            ["git", "-C", str(directory), "rev-parse", "--show-toplevel"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            check=False,
        )
    except (OSError, ValueError):
        return None
    if proc.returncode != 0:
        return None
    top_level = proc.stdout.strip()
    if not top_level:
        return None
    try:
        return Path(top_level).resolve()
    except OSError:
        return None


def load_repository_ignores(directory: Path) -> RepositoryIgnores | None:
    """Ask git which untracked paths below ``directory`` are ignored.

    ``git ls-files`` run inside a subdirectory only lists that subdirectory
    and prints paths relative to it, so the matcher is scoped to
    ``directory`` even when it is not the repository top level. Returns
    None when git is missing or ``directory`` is not in a work tree.
    """
    if not git_available():
        return None
    try:
        proc = subprocess.run(
            [
                "git",
                "-C",
                str(directory),
                "ls-files",
                "-z",
                "--others",
                "-i",
                "--exclude-standard",
                "--directory",
            ],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except (OSError, ValueError):
        return None
    if proc.returncode != 0:
        logger.debug("git ls-files failed in %s", directory)
        return None

    ignored: set[Path] = set()
    for raw_entry in proc.stdout.split(b"\0"):
        if not raw_entry:
            continue
        rel = raw_entry.decode("utf-8", errors="surrogateescape").rstrip("/")
        if not rel:
            continue
        ignored.add(directory / rel)
    return RepositoryIgnores(directory=directory, ignored=frozenset(ignored))


def load_ignore_file(directory: Path) -> IgnoreFile | None:
    """Read ``directory/.ignore``; None when absent or unreadable."""
    path = directory / IGNORE_FILENAME
    try:
        lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return None
    return IgnoreFile(directory=directory, spec=pathspec.PathSpec.from_lines("gitwildmatch", lines))


@dataclass(frozen=True)
class IgnoreRules:
    """Rule sources active for one directory's subtree, outermost first."""

    repositories: tuple[RepositoryIgnores, ...] = ()
    ignore_files: tuple[IgnoreFile, ...] = ()

    @classmethod
    def for_root(cls, root: Path) -> IgnoreRules:
        """Rules inherited from above ``root``: the enclosing repository, if any.

        A root that is itself a repository top level picks its rules up in
        ``descend`` like any other directory holding ``.git``.
        """
        top_level = find_enclosing_repository(root)
        if top_level is None or top_level == root:
            return cls()
        repository = load_repository_ignores(root)
        if repository is None:
            return cls()
        return cls(repositories=(repository,))

    def descend(self, directory: Path, child_names: set[str]) -> IgnoreRules:
        """Return the rules for ``directory``'s children given its entry names."""
        repositories = self.repositories
        ignore_files = self.ignore_files
        if GIT_DIRNAME in child_names:
            repository = load_repository_ignores(directory)
            if repository is not None:
                repositories = repositories + (repository,)
                logger.debug("git ignore rules for %s: %d path(s)", directory, len(repository.ignored))
        if IGNORE_FILENAME in child_names:
            ignore_file = load_ignore_file(directory)
            if ignore_file is not None:
                ignore_files = ignore_files + (ignore_file,)
        if repositories is self.repositories and ignore_files is self.ignore_files:
            return self
        return IgnoreRules(repositories=repositories, ignore_files=ignore_files)

    def is_ignored(self, path: Path, is_dir: bool) -> bool:
        """Return whether ``path`` is excluded by any active source.

        ``.ignore`` files are consulted deepest first and take precedence
        over git, so a ``!pattern`` there re-includes a git-ignored path.
        """
        for ignore_file in reversed(self.ignore_files):
            decision = ignore_file.decide(path, is_dir)
            if decision is not None:
                return decision
        return any(repository.is_ignored(path) for repository in self.repositories)


__all__ = [
    "GIT_DIRNAME",
    "IGNORE_FILENAME",
    "IgnoreFile",
    "IgnoreRules",
    "RepositoryIgnores",
    "find_enclosing_repository",
    "load_ignore_file",
    "load_repository_ignores",
]
