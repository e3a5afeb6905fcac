"""Subsequence fuzzy scoring and structure-preserving tree filtering."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from ..tree_model.types import FlatEntry

WORD_BOUNDARY_CHARS = "/_- ."


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``candidate`` against ``query`` or return ``None`` when it does not match.

    Every query character must appear in order (case-insensitively).
    Consecutive hits and hits at word boundaries raise the score; gaps and
    long candidates lower it.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    score = 0
    prev_idx = -1
    run = 0
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            run = 0
            score -= min(40, (idx - prev_idx - 1) * 2)
        if idx == 0 or candidate_folded[idx - 1] in WORD_BOUNDARY_CHARS:
            score += 35
        prev_idx = idx

    score -= len(candidate_folded) // 5
    return score


def score_file_rows(
    items: Sequence[FlatEntry],
    query: str,
    is_dir: Callable[[Path], bool],
) -> dict[int, int]:
    """Return ``{row index: score}`` for file rows whose name matches ``query``.

    Directory rows are never scored.
    """
    scores: dict[int, int] = {}
    for idx, (path, _depth) in enumerate(items):
        if is_dir(path):
            continue
        score = fuzzy_score(query, path.name)
        if score is not None:
            scores[idx] = score
    return scores


def fuzzy_filter(
    items: Sequence[FlatEntry],
    query: str,
    is_dir: Callable[[Path], bool] | None = None,
) -> list[int]:
    """Return indices of ``items`` to show for ``query`` in structural order.

    Matching files are kept together with every ancestor directory row
    present in ``items``; directories without a matching descendant drop
    out. An empty query keeps every row. ``is_dir`` defaults to asking the
    filesystem.
    """
    if not query:
        return list(range(len(items)))
    if is_dir is None:
        is_dir = Path.is_dir

    row_by_path: dict[Path, int] = {}
    for idx, (path, _depth) in enumerate(items):
        row_by_path.setdefault(path, idx)

    selected: set[int] = set()
    seen_parents: set[Path] = set()
    for idx in score_file_rows(items, query, is_dir):
        selected.add(idx)
        parent = items[idx][0].parent
        while parent not in seen_parents:
            seen_parents.add(parent)
            parent_idx = row_by_path.get(parent)
            if parent_idx is not None:
                selected.add(parent_idx)
            if parent.parent == parent:
                break
            parent = parent.parent

    return sorted(selected)


__all__ = [
    "fuzzy_filter",
    "fuzzy_score",
    "score_file_rows",
]
