"""Explorer session: the state a renderer and key dispatcher work against.

Owns the tree model plus selection, scroll and search state. Every
operation that changes what is visible rebuilds the flat cache and the
filtered index list before returning, so readers never see stale rows.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from ..file_tree_model import TreeIndex, scan_directories
from ..search import fuzzy_filter
from ..tree_model import FileTreeModel, FlatEntry
from .config import ExplorerConfig
from .view_state import ViewState, load_view_state, save_view_state

logger = logging.getLogger("mdexplorer.session")

DEFAULT_TREE_HEIGHT = 20
COLLAPSED_MARKER = "▶"
EXPANDED_MARKER = "▼"
LEAF_MARKER = " "

Scanner = Callable[[Iterable[Path]], TreeIndex]


class ExplorerSession:
    """Selection, search and view toggles over one ``FileTreeModel``."""

    def __init__(
        self,
        model: FileTreeModel,
        roots: Iterable[Path] | None = None,
        scan: Scanner = scan_directories,
        tree_height: int = DEFAULT_TREE_HEIGHT,
    ) -> None:
        self.model = model
        self.roots: list[Path] = list(roots) if roots is not None else list(model.roots)
        self._scan = scan
        self.tree_height = max(1, tree_height)
        self.selected_index = 0
        self.tree_scroll = 0
        self.search_query = ""
        self.search_active = False
        self.status_message: str | None = None
        self.filtered_indices: list[int] = list(range(len(model.flat_list())))

    # Reading

    def flat_list(self) -> list[FlatEntry]:
        return self.model.flat_list()

    def visible_rows(self) -> list[FlatEntry]:
        """Return rows in display order after filtering."""
        flat = self.model.flat_list()
        return [flat[idx] for idx in self.filtered_indices]

    def selected_entry(self) -> FlatEntry | None:
        if not self.filtered_indices or self.selected_index >= len(self.filtered_indices):
            return None
        flat = self.model.flat_list()
        actual_index = self.filtered_indices[self.selected_index]
        if actual_index >= len(flat):
            return None
        return flat[actual_index]

    def selected_path(self) -> Path | None:
        entry = self.selected_entry()
        return entry.path if entry is not None else None

    def is_selected(self, display_index: int) -> bool:
        return display_index == self.selected_index

    def match_count(self) -> int:
        """Return how many file rows the current filter shows."""
        flat = self.model.flat_list()
        return sum(1 for idx in self.filtered_indices if not self.model.is_dir(flat[idx].path))

    def display_name(self, path: Path) -> str:
        """Return the row label: roots relative to home as ``~/...``, others by name."""
        if path in self.model.roots:
            home = Path.home()
            try:
                relative = path.relative_to(home)
            except ValueError:
                return str(path)
            return "~" if relative == Path(".") else f"~/{relative.as_posix()}"
        return path.name or str(path)

    def row_marker(self, path: Path) -> str:
        """Return the expand/collapse affordance for a directory row."""
        if not self.model.is_dir(path) or not self.model.has_children(path):
            return LEAF_MARKER
        return COLLAPSED_MARKER if self.model.is_collapsed(path) else EXPANDED_MARKER

    # Selection and scrolling

    def move_up(self) -> None:
        if self.selected_index <= 0:
            return
        self.selected_index -= 1
        if self.selected_index < self.tree_scroll:
            self.tree_scroll = self.selected_index

    def move_down(self) -> None:
        if self.selected_index >= len(self.filtered_indices) - 1:
            return
        self.selected_index += 1
        visible_end = self.tree_scroll + self.tree_height - 1
        if self.selected_index > visible_end:
            self.tree_scroll = self.selected_index - (self.tree_height - 1)

    def scroll_tree_up(self) -> None:
        """Scroll one row up, dragging the selection along."""
        if self.tree_scroll <= 0:
            return
        self.tree_scroll -= 1
        if self.selected_index > 0:
            self.selected_index -= 1

    def scroll_tree_down(self) -> None:
        """Scroll one row down, dragging the selection along."""
        max_scroll = max(0, len(self.filtered_indices) - self.tree_height)
        if self.tree_scroll >= max_scroll:
            return
        self.tree_scroll += 1
        if self.selected_index < len(self.filtered_indices) - 1:
            self.selected_index += 1

    def select_path(self, path: Path) -> bool:
        """Move the selection onto ``path`` when it is visible."""
        flat = self.model.flat_list()
        for display_index, actual_index in enumerate(self.filtered_indices):
            if flat[actual_index].path == path:
                self.selected_index = display_index
                self._keep_selection_in_view()
                return True
        return False

    def _keep_selection_in_view(self) -> None:
        if self.selected_index < self.tree_scroll:
            self.tree_scroll = self.selected_index
        elif self.selected_index >= self.tree_scroll + self.tree_height:
            self.tree_scroll = self.selected_index - self.tree_height + 1
        max_scroll = max(0, len(self.filtered_indices) - self.tree_height)
        self.tree_scroll = max(0, min(self.tree_scroll, max_scroll))

    # Search

    def update_filter(self) -> None:
        """Recompute ``filtered_indices`` from the query and the current rows."""
        self.filtered_indices = fuzzy_filter(
            self.model.flat_list(),
            self.search_query,
            is_dir=self.model.is_dir,
        )
        if self.selected_index >= len(self.filtered_indices):
            self.selected_index = 0
        self._keep_selection_in_view()

    def enter_search_mode(self) -> None:
        self.search_active = True
        self.search_query = ""

    def exit_search_mode(self) -> None:
        self.search_active = False

    def accept_search(self) -> None:
        """Leave search mode keeping the filter, selecting the first row."""
        self.exit_search_mode()
        if self.filtered_indices:
            self.selected_index = 0
            self.tree_scroll = 0

    def clear_search(self) -> None:
        self.search_query = ""
        self.update_filter()
        self.exit_search_mode()

    def push_search_char(self, char: str) -> None:
        self.search_query += char
        self.update_filter()

    def pop_search_char(self) -> None:
        self.search_query = self.search_query[:-1]
        self.update_filter()

    # View mutations

    def _rebuild(self) -> None:
        self.model.rebuild_flat_cache()
        self.update_filter()

    def toggle_collapse(self) -> bool | None:
        """Toggle the selected directory; return its new state or ``None`` for files."""
        path = self.selected_path()
        if path is None or not self.model.is_dir(path):
            return None
        collapsed = self.model.toggle_collapsed(path)
        self._rebuild()
        self.select_path(path)
        return collapsed

    def toggle_show_empty_dirs(self) -> bool:
        showing = self.model.toggle_show_empty_dirs()
        self._rebuild()
        count = len(self.model.flat_list())
        if showing:
            self.status_message = f"Showing all directories ({count} items)"
        else:
            self.status_message = f"Hiding empty directories ({count} items)"
        return showing

    def toggle_claude_only(self) -> bool:
        claude_only = self.model.toggle_claude_only()
        self._rebuild()
        count = len(self.model.flat_list())
        if claude_only:
            self.status_message = f"Showing CLAUDE.md only ({count} items)"
        else:
            self.status_message = f"Showing all markdown files ({count} items)"
        return claude_only

    def refresh(self) -> None:
        """Rescan every configured root; collapse state and flags survive."""
        self.model.replace_index(self._scan(self.roots))
        self._rebuild()
        self.status_message = "Refreshed file list"
        logger.debug("refreshed %d root(s), %d rows", len(self.roots), len(self.model.flat_list()))


class PersistentExplorerSession(ExplorerSession):
    """Session that restores view state on open and saves it on close."""

    def __init__(
        self,
        model: FileTreeModel,
        config: ExplorerConfig,
        scan: Scanner = scan_directories,
        tree_height: int = DEFAULT_TREE_HEIGHT,
    ) -> None:
        super().__init__(model, roots=config.roots, scan=scan, tree_height=tree_height)
        self.config = config

    def close(self) -> None:
        if not self.config.persist_state:
            return
        save_view_state(ViewState.from_model(self.model), self.config.state_path)


def open_session(
    config: ExplorerConfig,
    scan: Scanner = scan_directories,
    tree_height: int = DEFAULT_TREE_HEIGHT,
) -> PersistentExplorerSession:
    """Scan configured roots, restore view state and build the first rows."""
    model = FileTreeModel(scan(config.roots))
    if config.persist_state:
        load_view_state(config.state_path).apply_to(model)
    model.rebuild_flat_cache()
    session = PersistentExplorerSession(model, config, scan=scan, tree_height=tree_height)
    session.update_filter()
    return session
