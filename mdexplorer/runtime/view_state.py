"""Load/save of the collapse set and view flags between sessions.

The state file is line oriented::

    collapsed:/abs/path
    show_empty_dirs:true
    claude_only:true

Flag lines are written only when the flag is set. Loading ignores unknown
lines and drops collapsed paths that no longer exist. Both directions are
best-effort and never raise for I/O problems.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..tree_model import FileTreeModel

logger = logging.getLogger("mdexplorer.view_state")

COLLAPSED_PREFIX = "collapsed:"
SHOW_EMPTY_DIRS_LINE = "show_empty_dirs:true"
CLAUDE_ONLY_LINE = "claude_only:true"


@dataclass
class ViewState:
    """Collapse set and view flags carried across sessions."""

    collapsed: set[Path] = field(default_factory=set)
    show_empty_dirs: bool = False
    claude_only: bool = False

    @classmethod
    def from_model(cls, model: FileTreeModel) -> ViewState:
        return cls(
            collapsed=set(model.collapsed),
            show_empty_dirs=model.show_empty_dirs,
            claude_only=model.claude_only,
        )

    def apply_to(self, model: FileTreeModel) -> None:
        """Copy state into ``model``; the caller rebuilds its flat cache."""
        model.collapsed = set(self.collapsed)
        model.show_empty_dirs = self.show_empty_dirs
        model.claude_only = self.claude_only

    def to_lines(self) -> list[str]:
        lines = [f"{COLLAPSED_PREFIX}{path}" for path in sorted(self.collapsed)]
        if self.show_empty_dirs:
            lines.append(SHOW_EMPTY_DIRS_LINE)
        if self.claude_only:
            lines.append(CLAUDE_ONLY_LINE)
        return lines


def parse_view_state(lines: list[str]) -> ViewState:
    """Build state from file lines, honoring only collapsed paths that exist."""
    state = ViewState()
    for line in lines:
        if line.startswith(COLLAPSED_PREFIX):
            raw_path = line[len(COLLAPSED_PREFIX):]
            if not raw_path:
                continue
            path = Path(raw_path)
            try:
                exists = path.exists()
            except (OSError, ValueError):
                exists = False
            if exists:
                state.collapsed.add(path)
        elif line == SHOW_EMPTY_DIRS_LINE:
            state.show_empty_dirs = True
        elif line == CLAUDE_ONLY_LINE:
            state.claude_only = True
    return state


def load_view_state(path: Path) -> ViewState:
    """Read the state file, returning defaults when it is missing or unreadable."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("view state not loaded from %s: %s", path, exc)
        return ViewState()
    return parse_view_state(text.splitlines())


def save_view_state(state: ViewState, path: Path) -> None:
    """Overwrite the state file with ``state``; failures are logged and dropped."""
    lines = state.to_lines()
    payload = "".join(f"{line}\n" for line in lines)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload, encoding="utf-8")
    except OSError as exc:
        logger.debug("view state not saved to %s: %s", path, exc)
