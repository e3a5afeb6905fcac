"""Row datatype produced by tree flattening."""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple


class FlatEntry(NamedTuple):
    """One display row: a path and its depth below the root row."""

    path: Path
    depth: int
