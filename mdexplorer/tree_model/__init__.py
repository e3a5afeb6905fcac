"""Tree view model: flattening, visibility policy and collapse state.

Defines ``FlatEntry`` rows and the ``FileTreeModel`` that derives them from
a scanned ``TreeIndex``.
"""

from __future__ import annotations

from .flatten import (
    directory_has_visible_children,
    directory_is_visible,
    file_is_visible,
    flatten_tree,
    split_children,
)
from .model import FileTreeModel
from .types import FlatEntry

__all__ = [
    "FileTreeModel",
    "FlatEntry",
    "directory_has_visible_children",
    "directory_is_visible",
    "file_is_visible",
    "flatten_tree",
    "split_children",
]
