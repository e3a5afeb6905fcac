"""Search package exports for fuzzy tree filtering."""

from __future__ import annotations

from .fuzzy import fuzzy_filter, fuzzy_score, score_file_rows

__all__ = [
    "fuzzy_filter",
    "fuzzy_score",
    "score_file_rows",
]
